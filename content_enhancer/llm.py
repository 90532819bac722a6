"""OpenAI client helpers for page summarisation, context and claim validation."""
from __future__ import annotations

import json
import logging
import os
import threading
import time
from typing import List, Optional

from openai import APIError, OpenAI, OpenAIError, RateLimitError
from pydantic import BaseModel, Field, ValidationError, field_validator
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from .schemas import EnhancementOptions, PageContent

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_MAX_CONTENT_CHARS = 12000
DEFAULT_MAX_OUTPUT_TOKENS = 2000
ENHANCEMENT_TEMPERATURE = 0.3

DEFAULT_ENHANCE_SYSTEM_PROMPT = (
    "You are an AI content enhancement assistant. You analyze the text of a web page "
    "and provide the enhancements the user asks for."
)

_REQUIREMENTS = (
    "Requirements:\n"
    "- Be factual and objective\n"
    "- Provide high-quality, accurate information\n"
    "- If validating claims, focus on the most significant or questionable assertions\n"
    "- Keep summaries concise but comprehensive\n"
    "- Make context additions genuinely valuable and educational\n"
    "Output only JSON matching the requested structure."
)

VALID_STATUSES = {"verified", "questionable", "false"}


class EnhancementError(RuntimeError):
    """Raised when the enhancement service cannot produce a result."""


class ClaimValidation(BaseModel):
    claim: str
    status: str = Field(pattern=r"^(verified|questionable|false)$")
    reasoning: str = ""

    @field_validator("status", mode="before")
    @classmethod
    def normalise_status(cls, value: object) -> str:
        """Coerce statuses such as ``"Verified"`` or ``"unclear"`` into a supported value."""

        normalised = str(value or "").strip().lower()
        if normalised in VALID_STATUSES:
            return normalised
        logger.debug("Unexpected claim status '%s' from LLM; coercing to questionable", value)
        return "questionable"


class EnhancementResult(BaseModel):
    summary: Optional[str] = None
    context: Optional[str] = None
    validation: Optional[List[ClaimValidation]] = None


def _enhance_prompt() -> str:
    return os.getenv("OPENAI_ENHANCE_SYSTEM_PROMPT", DEFAULT_ENHANCE_SYSTEM_PROMPT)


def _model_name(override: str | None = None) -> str:
    value = override or os.getenv("OPENAI_MODEL", DEFAULT_MODEL)
    return value.strip()


def _int_setting(name: str, default: int, minimum: int, maximum: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Invalid %s value %s; falling back to %s", name, raw, default)
        return default
    return max(minimum, min(value, maximum))


def _max_content_chars() -> int:
    return _int_setting("OPENAI_MAX_CONTENT_CHARS", DEFAULT_MAX_CONTENT_CHARS, 1000, 100000)


def _max_output_tokens() -> int:
    return _int_setting("OPENAI_MAX_OUTPUT_TOKENS", DEFAULT_MAX_OUTPUT_TOKENS, 256, 16000)


def _get_openai_client() -> OpenAI:
    api_key = os.getenv("OPENAI_API_KEY")
    if not api_key:
        raise EnhancementError("OPENAI_API_KEY is not configured.")
    return OpenAI(api_key=api_key)


def _openai_retry():
    return retry(
        reraise=True,
        stop=stop_after_attempt(4),
        wait=wait_exponential(multiplier=2, min=1, max=16),
        retry=retry_if_exception_type((RateLimitError, APIError)),
    )


# Models in the GPT-5 and o-series families reject custom temperature values.
_temperature_warnings_issued: set[str] = set()
_temperature_warning_lock = threading.Lock()


def _temperature_kwargs(model: str, desired: float | None) -> dict[str, float]:
    if desired is None:
        return {}

    compact = model.strip().lower().replace("_", "-").replace(" ", "")
    if compact.startswith(("gpt-5", "gpt5", "o1", "o3", "o4")):
        if desired != 1:
            with _temperature_warning_lock:
                if compact not in _temperature_warnings_issued:
                    logger.info(
                        "Model %s ignores custom temperature; skipping override %.2f",
                        model,
                        desired,
                    )
                    _temperature_warnings_issued.add(compact)
        return {}

    return {"temperature": desired}


def build_system_prompt(options: EnhancementOptions) -> str:
    """Describe the JSON structure to return, one key per selected option."""

    fields: list[str] = []
    if options.summarize:
        fields.append('  "summary": "A concise, well-structured summary of the main points"')
    if options.expand_context:
        fields.append(
            '  "context": "Additional context, background information, and related insights '
            'that would help readers better understand the topic"'
        )
    if options.validate_claims:
        fields.append(
            '  "validation": [\n'
            "    {\n"
            '      "claim": "A specific claim from the content",\n'
            '      "status": "verified/questionable/false",\n'
            '      "reasoning": "Explanation of the validation"\n'
            "    }\n"
            "  ]"
        )
    structure = "{\n" + ",\n".join(fields) + "\n}"
    return (
        f"{_enhance_prompt()}\n\n"
        f"Respond in JSON format with the following structure:\n{structure}\n\n"
        f"{_REQUIREMENTS}"
    )


def build_user_prompt(page: PageContent) -> str:
    limit = _max_content_chars()
    text = page.text
    if len(text) > limit:
        logger.debug("Truncating %s content from %d to %d chars", page.url, len(text), limit)
        text = text[:limit]
    payload = {
        "title": page.title,
        "url": page.url,
        "domain": page.domain,
        "word_count": page.word_count,
        "text": text,
    }
    return json.dumps(payload, ensure_ascii=False)


@_openai_retry()
def _call_enhancement_model(system_prompt: str, user_prompt: str, model: str) -> str:
    client = _get_openai_client()
    response = client.chat.completions.create(
        model=model,
        messages=[
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ],
        response_format={"type": "json_object"},
        max_completion_tokens=_max_output_tokens(),
        **_temperature_kwargs(model, ENHANCEMENT_TEMPERATURE),
    )
    if not response.choices or response.choices[0].message is None:
        raise ValueError("Invalid response format from OpenAI")
    content = response.choices[0].message.content or ""
    logger.debug("LLM enhancement response: %s", content)
    return content


def parse_enhancement_response(content: str, options: EnhancementOptions) -> EnhancementResult:
    """Validate the model's JSON and keep only the fields that were requested."""

    try:
        data = json.loads(content)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON from LLM: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError("LLM response is not a JSON object")
    try:
        result = EnhancementResult.model_validate(data)
    except ValidationError as exc:
        raise ValueError(f"LLM response did not match schema: {exc}") from exc

    return EnhancementResult(
        summary=result.summary if options.summarize and result.summary else None,
        context=result.context if options.expand_context and result.context else None,
        validation=result.validation if options.validate_claims and result.validation else None,
    )


def enhance_content(
    page: PageContent,
    options: EnhancementOptions,
    model: str | None = None,
) -> EnhancementResult:
    """Ask the LLM for the selected enhancements of ``page``.

    Any failure is raised as :class:`EnhancementError` carrying a message fit
    to show to the user.
    """

    if not options.any_selected:
        logger.info("No enhancement options selected for %s; skipping LLM call", page.url)
        return EnhancementResult()

    model_name = _model_name(model)
    start = time.perf_counter()
    try:
        content = _call_enhancement_model(
            build_system_prompt(options), build_user_prompt(page), model_name
        )
        result = parse_enhancement_response(content, options)
    except (EnhancementError, OpenAIError, ValueError) as exc:
        logger.warning("Enhancement failed for %s: %s", page.url, exc)
        raise EnhancementError(f"AI processing failed: {exc}") from exc

    logger.info(
        "Generated LLM enhancement for %s with %s in %.2fs",
        page.url,
        model_name,
        time.perf_counter() - start,
    )
    return result
