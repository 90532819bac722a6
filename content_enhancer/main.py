"""FastAPI application entrypoint."""
from __future__ import annotations

import logging
import os
import time
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException
from fastapi.responses import HTMLResponse
from pydantic import BaseModel

from .llm import EnhancementError, EnhancementResult, enhance_content
from .logging_setup import configure_logging
from .report import render_report
from .schemas import EnhancementOptions, PageContent
from .scrape import extract_page_content, fetch_page

LOG_FILE_PATH = configure_logging(os.getenv("LOG_LEVEL"))
logger = logging.getLogger(__name__)

app = FastAPI(title="Page Content Enhancer")


class ExtractRequest(BaseModel):
    url: str


class EnhanceRequest(BaseModel):
    url: str
    summarize: bool = True
    expand_context: bool = False
    validate_claims: bool = False
    model: Optional[str] = None

    def options(self) -> EnhancementOptions:
        return EnhancementOptions(
            summarize=self.summarize,
            expand_context=self.expand_context,
            validate_claims=self.validate_claims,
        )


def _load_page(url: str) -> PageContent:
    fetched = fetch_page(url)
    if fetched is None:
        raise HTTPException(status_code=502, detail=f"Unable to fetch {url}")
    final_url, html = fetched
    return extract_page_content(final_url, html)


def _enhance(request: EnhanceRequest) -> tuple[PageContent, EnhancementResult]:
    page = _load_page(request.url)
    if not page.text:
        raise HTTPException(status_code=422, detail="No content found on this page.")
    try:
        enhancement = enhance_content(page, request.options(), model=request.model)
    except EnhancementError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    return page, enhancement


@app.get("/health")
def health() -> Dict[str, str]:
    return {"status": "ok"}


@app.post("/extract")
def extract(request: ExtractRequest) -> Dict[str, Any]:
    start = time.perf_counter()
    page = _load_page(request.url)
    logger.info("Extraction for %s completed in %.2fs", request.url, time.perf_counter() - start)
    return page.to_dict()


@app.post("/enhance")
def enhance(request: EnhanceRequest) -> Dict[str, Any]:
    start = time.perf_counter()
    page, enhancement = _enhance(request)
    logger.info("Enhancement for %s completed in %.2fs", request.url, time.perf_counter() - start)
    return {
        "page": page.to_dict(),
        "enhancement": enhancement.model_dump(exclude_none=True),
    }


@app.post("/report", response_class=HTMLResponse)
def report(request: EnhanceRequest) -> HTMLResponse:
    page, enhancement = _enhance(request)
    return HTMLResponse(render_report(page, enhancement))


if __name__ == "__main__":  # pragma: no cover - manual launch
    import uvicorn

    uvicorn.run(
        app,
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "8000")),
        log_config=None,
    )
