"""Page fetching and content extraction."""
from __future__ import annotations

import logging
import os
import time
from typing import Optional
from urllib.parse import urlparse

import requests
from bs4 import BeautifulSoup

from .content import extract_main_text
from .dom import document_base_url, text_content
from .harvest import extract_headings, extract_images, extract_links
from .metadata import extract_metadata
from .schemas import PageContent

logger = logging.getLogger(__name__)

USER_AGENT = "PageContentEnhancerBot/1.0"
DEFAULT_FETCH_TIMEOUT = 10.0


def _fetch_timeout() -> float:
    raw = os.getenv("FETCH_TIMEOUT")
    if not raw:
        return DEFAULT_FETCH_TIMEOUT
    try:
        value = float(raw)
    except ValueError:
        logger.warning(
            "Invalid FETCH_TIMEOUT value %s; falling back to %s", raw, DEFAULT_FETCH_TIMEOUT
        )
        return DEFAULT_FETCH_TIMEOUT
    return value if value > 0 else DEFAULT_FETCH_TIMEOUT


def fetch_page(url: str) -> Optional[tuple[str, str]]:
    """Fetch a page, returning ``(final_url, html)`` or ``None`` on failure."""

    try:
        response = requests.get(
            url,
            headers={"User-Agent": USER_AGENT},
            timeout=_fetch_timeout(),
            allow_redirects=True,
        )
    except requests.RequestException as exc:
        logger.warning("Failed to fetch %s: %s", url, exc)
        return None

    if response.status_code != 200:
        logger.info("Skipping %s due to status %s", url, response.status_code)
        return None

    final_url = str(response.url)
    return final_url, response.text


def _page_title(document: BeautifulSoup) -> str:
    title_tag = document.find("title")
    if title_tag is None:
        return ""
    return " ".join(text_content(title_tag).split())


def extract_page_content(url: str, html: str | BeautifulSoup) -> PageContent:
    """Build a :class:`PageContent` from one page snapshot.

    ``html`` is either raw markup or an already parsed document; parsed
    documents are only read, never modified.
    """

    start = time.perf_counter()
    document = html if isinstance(html, BeautifulSoup) else BeautifulSoup(html, "html.parser")
    base_url = document_base_url(document, url)

    page = PageContent(
        title=_page_title(document),
        url=url,
        domain=urlparse(url).hostname or "",
        text=extract_main_text(document),
        headings=tuple(extract_headings(document)),
        links=tuple(extract_links(document, url, base_url)),
        images=tuple(extract_images(document, base_url)),
        metadata=extract_metadata(document, base_url),
    )
    logger.info(
        "Extracted %d words, %d headings, %d links and %d images from %s in %.2fs",
        page.word_count,
        len(page.headings),
        len(page.links),
        len(page.images),
        url,
        time.perf_counter() - start,
    )
    return page
