"""Heading, link and image harvesting over the whole document."""
from __future__ import annotations

import logging
import re
from typing import Optional
from urllib.parse import urlparse

from bs4 import Tag

from .dom import resolve_url, text_content
from .schemas import Heading, ImageRef, LinkRef

logger = logging.getLogger(__name__)

MAX_LINKS = 50
MAX_IMAGES = 20
MIN_IMAGE_DIMENSION = 50

HEADING_TAGS = ["h1", "h2", "h3", "h4", "h5", "h6"]
EXCLUDED_LINK_SCHEMES = ("javascript:", "mailto:")

_LEADING_INT = re.compile(r"^\s*(\d+)")


def extract_headings(document: Tag) -> list[Heading]:
    headings: list[Heading] = []
    for tag in document.find_all(HEADING_TAGS):
        text = text_content(tag).strip()
        if not text:
            continue
        headings.append(Heading(level=int(tag.name[1]), text=text, id=tag.get("id") or None))
    return headings


def _hostname(url: str) -> str:
    try:
        return (urlparse(url).hostname or "").lower()
    except ValueError:
        return ""


def extract_links(document: Tag, page_url: str, base_url: Optional[str] = None) -> list[LinkRef]:
    """Collect unique outbound links in document order, capped at ``MAX_LINKS``.

    Relative references resolve against ``base_url`` (defaults to
    ``page_url``); ``internal`` compares hosts with ``page_url``.
    """

    base = base_url or page_url
    page_host = _hostname(page_url)
    unique: dict[str, LinkRef] = {}
    for anchor in document.find_all("a", href=True):
        text = text_content(anchor).strip()
        if not text:
            continue
        url = resolve_url(base, anchor["href"])
        if not url or url.lower().startswith(EXCLUDED_LINK_SCHEMES):
            continue
        if not urlparse(url).scheme:
            continue
        if url in unique:
            continue
        host = _hostname(url)
        unique[url] = LinkRef(text=text, url=url, internal=bool(host) and host == page_host)
        if len(unique) >= MAX_LINKS:
            break
    return list(unique.values())


def _parse_dimension(value: Optional[str]) -> int:
    if not value:
        return 0
    match = _LEADING_INT.match(str(value))
    return int(match.group(1)) if match else 0


def _style_dimension(style: str, prop: str) -> int:
    match = re.search(rf"(?:^|;)\s*{prop}\s*:\s*(\d+)(?:\.\d+)?px", style, re.IGNORECASE)
    return int(match.group(1)) if match else 0


def _image_size(img: Tag) -> tuple[int, int]:
    width = _parse_dimension(img.get("width"))
    height = _parse_dimension(img.get("height"))
    style = img.get("style") or ""
    if style:
        width = width or _style_dimension(style, "width")
        height = height or _style_dimension(style, "height")
    return width, height


def extract_images(document: Tag, base_url: str) -> list[ImageRef]:
    """Collect images larger than 50x50 pixels, capped at ``MAX_IMAGES``."""

    images: list[ImageRef] = []
    for img in document.find_all("img", src=True):
        raw_src = img["src"].strip()
        if not raw_src or raw_src.lower().startswith("data:"):
            continue
        width, height = _image_size(img)
        if width <= MIN_IMAGE_DIMENSION or height <= MIN_IMAGE_DIMENSION:
            continue
        src = resolve_url(base_url, raw_src)
        if not src:
            continue
        images.append(
            ImageRef(
                src=src,
                alt=img.get("alt") or "",
                width=width,
                height=height,
            )
        )
        if len(images) >= MAX_IMAGES:
            break
    logger.debug("Collected %d images", len(images))
    return images
