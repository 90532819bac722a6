"""Page-level metadata: meta tags, canonical URL, publish date and author."""
from __future__ import annotations

import datetime as dt
import logging
from typing import Dict, Optional

from bs4 import Tag
from dateutil import parser as date_parser

from .dom import Probe, first_match, resolve_url, selector_probe

logger = logging.getLogger(__name__)

PUBLISH_DATE_PROBES: tuple[Probe, ...] = (
    selector_probe("time[datetime]", ("datetime", "content")),
    selector_probe(".publish-date", ("datetime", "content")),
    selector_probe(".date", ("datetime", "content")),
    selector_probe(".post-date", ("datetime", "content")),
    selector_probe('[itemprop="datePublished"]', ("datetime", "content")),
    selector_probe('meta[property="article:published_time"]', ("datetime", "content")),
)

AUTHOR_PROBES: tuple[Probe, ...] = (
    selector_probe('[itemprop="author"]', ("content",)),
    selector_probe(".author", ("content",)),
    selector_probe(".byline", ("content",)),
    selector_probe(".post-author", ("content",)),
    selector_probe('meta[name="author"]', ("content",)),
)


# Two unrelated fallbacks: a value missing its year, month or day parses
# differently against each and is rejected.
_FALLBACK_DEFAULTS = (dt.datetime(2000, 1, 1), dt.datetime(2001, 2, 2))


def to_iso8601(value: str) -> Optional[str]:
    """Parse a free-form date string into ``YYYY-MM-DDTHH:MM:SS.mmmZ``.

    Returns ``None`` for blank, unparseable, incomplete (``"10:30 AM"``,
    ``"Monday"``, ``"2024"``) or out-of-range input. Values without an offset
    are taken to be UTC.
    """

    value = value.strip()
    if not value:
        return None
    try:
        first, second = (date_parser.parse(value, default=default) for default in _FALLBACK_DEFAULTS)
        if first != second:
            logger.debug("Skipping incomplete date %r", value)
            return None
        if first.tzinfo is None:
            parsed = first.replace(tzinfo=dt.timezone.utc)
        else:
            parsed = first.astimezone(dt.timezone.utc)
        return parsed.isoformat(timespec="milliseconds").replace("+00:00", "Z")
    except (ValueError, OverflowError) as exc:
        logger.debug("Skipping unparseable date %r: %s", value, exc)
        return None


def _clean_author(value: str) -> Optional[str]:
    cleaned = " ".join(value.split())
    return cleaned or None


def extract_publish_date(document: Tag) -> Optional[str]:
    return first_match(PUBLISH_DATE_PROBES, document, to_iso8601)


def extract_author(document: Tag) -> Optional[str]:
    return first_match(AUTHOR_PROBES, document, _clean_author)


def extract_meta_tags(document: Tag) -> Dict[str, str]:
    """Map every meta ``name``/``property`` to its content; repeated names keep the last."""

    tags: Dict[str, str] = {}
    for meta in document.find_all("meta"):
        name = meta.get("name") or meta.get("property")
        content = meta.get("content")
        if name and content and content.strip():
            tags[name] = content
    return tags


def extract_canonical(document: Tag, base_url: str) -> Optional[str]:
    link = document.select_one('link[rel~="canonical"]')
    if link is None:
        return None
    href = (link.get("href") or "").strip()
    if not href:
        return None
    return resolve_url(base_url, href) or None


def extract_metadata(document: Tag, base_url: str) -> Dict[str, str]:
    metadata = extract_meta_tags(document)

    canonical = extract_canonical(document, base_url)
    if canonical:
        metadata["canonical"] = canonical

    publish_date = extract_publish_date(document)
    if publish_date:
        metadata["publishDate"] = publish_date

    author = extract_author(document)
    if author:
        metadata["author"] = author

    return metadata
