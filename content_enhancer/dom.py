"""Typed helpers over BeautifulSoup document snapshots.

The extraction stages never touch parser internals directly. They classify
nodes with :func:`node_kind`, walk subtrees through :func:`walk` using the pure
:func:`accept_node` filter and query the document through ordered probes.
"""
from __future__ import annotations

import enum
import logging
from typing import Callable, Iterable, Iterator, Optional, Sequence, TypeVar
from urllib.parse import urljoin

from bs4 import NavigableString, Tag
from bs4.element import PageElement, PreformattedString, Script, Stylesheet, TemplateString

logger = logging.getLogger(__name__)

T = TypeVar("T")

Probe = Callable[[Tag], Optional[str]]

NON_CONTENT_TAGS = frozenset(
    {"script", "style", "noscript", "template", "svg", "iframe", "nav", "footer", "aside"}
)
NON_CONTENT_CLASSES = frozenset({"ad", "advertisement", "sidebar"})
PARAGRAPH_TAGS = frozenset({"p", "div", "h1", "h2", "h3", "h4", "h5", "h6", "li"})
LINE_BREAK_TAGS = frozenset({"br"})
BLOCK_TAGS = PARAGRAPH_TAGS | LINE_BREAK_TAGS


class NodeKind(enum.Enum):
    TEXT = "text"
    ELEMENT = "element"


class TraversalDecision(enum.Enum):
    ACCEPT = "accept"
    REJECT = "reject"
    SKIP = "skip"


def node_kind(node: PageElement) -> Optional[NodeKind]:
    """Return the kind of ``node`` or ``None`` for comments, doctypes and raw text."""

    if isinstance(node, Tag):
        return NodeKind.ELEMENT
    if isinstance(node, NavigableString):
        # Comments, CDATA, doctypes and script/style bodies are never rendered.
        if isinstance(node, (PreformattedString, Script, Stylesheet, TemplateString)):
            return None
        return NodeKind.TEXT
    return None


def _has_chrome_class(tag: Tag) -> bool:
    classes = tag.get("class") or []
    if isinstance(classes, str):
        classes = classes.split()
    return any(name.lower() in NON_CONTENT_CLASSES for name in classes)


def accept_node(node: PageElement) -> TraversalDecision:
    """Decide how the structural walk treats ``node``."""

    kind = node_kind(node)
    if kind is None:
        return TraversalDecision.REJECT
    if kind is NodeKind.TEXT:
        return TraversalDecision.ACCEPT

    name = (node.name or "").lower()
    if name in NON_CONTENT_TAGS or _has_chrome_class(node):
        return TraversalDecision.REJECT
    if name in BLOCK_TAGS:
        return TraversalDecision.ACCEPT
    return TraversalDecision.SKIP


def walk(root: Tag) -> Iterator[PageElement]:
    """Yield accepted descendants of ``root`` in document (pre-)order.

    Rejected nodes are pruned with their whole subtree, skipped nodes are not
    yielded but their children still are.
    """

    stack: list[PageElement] = list(reversed(root.contents))
    while stack:
        node = stack.pop()
        decision = accept_node(node)
        if decision is TraversalDecision.REJECT:
            continue
        if decision is TraversalDecision.ACCEPT:
            yield node
        if isinstance(node, Tag):
            stack.extend(reversed(node.contents))


def text_content(node: PageElement) -> str:
    """Return the rendered text of ``node`` (no script/style bodies or comments)."""

    if isinstance(node, NavigableString):
        return str(node) if node_kind(node) is NodeKind.TEXT else ""
    if not isinstance(node, Tag):
        return ""
    return "".join(
        str(child) for child in node.descendants if node_kind(child) is NodeKind.TEXT
    )


def selector_probe(selector: str, attributes: Sequence[str] = ()) -> Probe:
    """Build a probe reading the first element matching ``selector``.

    The probe returns the first non-empty attribute listed in ``attributes``
    and falls back to the element's text. ``None`` means nothing matched.
    """

    def probe(document: Tag) -> Optional[str]:
        element = document.select_one(selector)
        if element is None:
            return None
        for attribute in attributes:
            value = element.get(attribute)
            if isinstance(value, list):
                value = " ".join(value)
            if value:
                return value
        return text_content(element)

    probe.__name__ = f"probe[{selector}]"
    return probe


def first_match(
    probes: Iterable[Probe],
    document: Tag,
    accept: Callable[[str], Optional[T]],
) -> Optional[T]:
    """Run ``probes`` in order and return the first candidate ``accept`` keeps."""

    for probe in probes:
        candidate = probe(document)
        if candidate is None:
            continue
        value = accept(candidate)
        if value is not None:
            logger.debug("%s matched %r", probe.__name__, value)
            return value
    return None


def resolve_url(base: str, href: str) -> str:
    """Join ``href`` against ``base``; malformed references resolve to an empty string."""

    try:
        return urljoin(base, href.strip())
    except ValueError:
        logger.debug("Could not resolve %r against %s", href, base)
        return ""


def document_base_url(document: Tag, page_url: str) -> str:
    """Return the URL relative references resolve against (``<base href>`` aware)."""

    base_tag = document.find("base", href=True)
    if base_tag is None:
        return page_url
    href = base_tag.get("href", "").strip()
    if not href:
        return page_url
    return resolve_url(page_url, href) or page_url
