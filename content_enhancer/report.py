"""HTML report rendering for extracted and enhanced page content."""
from __future__ import annotations

import datetime as dt
from pathlib import Path
from typing import Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape
from markupsafe import Markup, escape

from .llm import EnhancementResult
from .schemas import PageContent

TEMPLATE_DIR = Path(__file__).resolve().parent / "templates"
MAX_REPORT_CONTENT_CHARS = 5000
TRUNCATION_NOTICE = "... [Content truncated for report]"


def _paragraphs(value: str) -> Markup:
    """Render blank-line separated text as ``<p>`` blocks with ``<br>`` line breaks."""

    blocks = [block.strip() for block in value.split("\n\n")]
    rendered = [
        "<p>" + "<br>".join(str(escape(line)) for line in block.split("\n")) + "</p>"
        for block in blocks
        if block
    ]
    return Markup("\n".join(rendered))


def _lines(value: str) -> Markup:
    rendered = [f"<p>{escape(line.strip())}</p>" for line in value.split("\n") if line.strip()]
    return Markup("\n".join(rendered))


def _status_class(value: str) -> str:
    return "".join(value.lower().split())


_environment = Environment(
    loader=FileSystemLoader(str(TEMPLATE_DIR)),
    autoescape=select_autoescape(["html"]),
    trim_blocks=True,
    lstrip_blocks=True,
)
_environment.filters["paragraphs"] = _paragraphs
_environment.filters["lines"] = _lines
_environment.filters["status_class"] = _status_class


def render_report(
    page: PageContent,
    enhancement: EnhancementResult,
    generated_at: Optional[dt.datetime] = None,
) -> str:
    generated_at = generated_at or dt.datetime.now()
    content_text = page.text
    if len(content_text) > MAX_REPORT_CONTENT_CHARS:
        content_text = content_text[:MAX_REPORT_CONTENT_CHARS] + TRUNCATION_NOTICE

    template = _environment.get_template("report.html")
    return template.render(
        page=page,
        enhancement=enhancement,
        content_text=content_text,
        author=page.metadata.get("author"),
        published=(page.metadata.get("publishDate") or "")[:10] or None,
        generated_date=generated_at.strftime("%Y-%m-%d"),
        generated_at=generated_at.strftime("%Y-%m-%d %H:%M"),
    )
