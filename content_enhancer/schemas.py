"""Shared data structures used across modules."""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Tuple


@dataclass(frozen=True, slots=True)
class Heading:
    level: int
    text: str
    id: str | None = None


@dataclass(frozen=True, slots=True)
class LinkRef:
    text: str
    url: str
    internal: bool


@dataclass(frozen=True, slots=True)
class ImageRef:
    src: str
    alt: str
    width: int
    height: int


@dataclass(frozen=True, slots=True)
class PageContent:
    """Everything extracted from one page snapshot."""

    title: str
    url: str
    domain: str
    text: str
    headings: Tuple[Heading, ...] = ()
    links: Tuple[LinkRef, ...] = ()
    images: Tuple[ImageRef, ...] = ()
    metadata: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))

    @property
    def word_count(self) -> int:
        return len(self.text.split())

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "url": self.url,
            "domain": self.domain,
            "text": self.text,
            "headings": [asdict(heading) for heading in self.headings],
            "links": [asdict(link) for link in self.links],
            "images": [asdict(image) for image in self.images],
            "metadata": dict(self.metadata),
        }


@dataclass(frozen=True, slots=True)
class EnhancementOptions:
    summarize: bool = True
    expand_context: bool = False
    validate_claims: bool = False

    @property
    def any_selected(self) -> bool:
        return self.summarize or self.expand_context or self.validate_claims
