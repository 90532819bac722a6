"""Main content location and structure-preserving text extraction."""
from __future__ import annotations

import logging
import re
from typing import Optional

from bs4 import Tag

from .dom import LINE_BREAK_TAGS, PARAGRAPH_TAGS, NodeKind, node_kind, text_content, walk

logger = logging.getLogger(__name__)

# Semantic tags, then the ARIA role, then class and id conventions.
MAIN_CONTENT_SELECTORS = (
    "main",
    "article",
    '[role="main"]',
    ".main-content",
    ".content",
    ".post-content",
    ".entry-content",
    ".article-content",
    "#main",
    "#content",
)
MIN_MAIN_CONTENT_CHARS = 100

_BLANK_LINE_RUN = re.compile(r"\n\s*\n")


def find_main_content_area(document: Tag) -> Optional[Tag]:
    """Return the first candidate container holding more than 100 characters."""

    for selector in MAIN_CONTENT_SELECTORS:
        element = document.select_one(selector)
        if element is None:
            continue
        length = len(text_content(element).strip())
        if length > MIN_MAIN_CONTENT_CHARS:
            logger.debug("Main content area matched %s (%d chars)", selector, length)
            return element
        logger.debug("Ignoring %s: only %d chars of text", selector, length)
    return None


def collapse_blank_lines(text: str) -> str:
    return _BLANK_LINE_RUN.sub("\n\n", text).strip()


def extract_text_with_structure(root: Tag) -> str:
    """Linearise ``root`` into blank-line separated paragraphs."""

    parts: list[str] = []
    for node in walk(root):
        if node_kind(node) is NodeKind.TEXT:
            value = str(node).strip()
            if value:
                parts.append(value + " ")
            continue
        name = node.name.lower()
        if name in PARAGRAPH_TAGS:
            parts.append("\n\n")
        elif name in LINE_BREAK_TAGS:
            parts.append("\n")
    return collapse_blank_lines("".join(parts))


def extract_main_text(document: Tag) -> str:
    """Extract text from the main content area, or the whole body without one."""

    root = find_main_content_area(document)
    if root is None:
        logger.debug("No main content area found; falling back to document body")
        root = document.body or document
    return extract_text_with_structure(root)
