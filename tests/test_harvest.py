from bs4 import BeautifulSoup

from content_enhancer.harvest import (
    MAX_IMAGES,
    MAX_LINKS,
    extract_headings,
    extract_images,
    extract_links,
)
from content_enhancer.schemas import Heading

PAGE_URL = "https://example.com/articles/post"


def _soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


def test_headings_are_collected_document_wide_in_order():
    doc = _soup(
        """
        <header><h1 id="top">Site</h1></header>
        <main><h2>  Intro  </h2><h3 id="">Details</h3><h4>   </h4></main>
        <aside><h6>Sidebar</h6></aside>
        """
    )
    assert extract_headings(doc) == [
        Heading(level=1, text="Site", id="top"),
        Heading(level=2, text="Intro", id=None),
        Heading(level=3, text="Details", id=None),
        Heading(level=6, text="Sidebar", id=None),
    ]


def test_links_resolve_filter_and_classify():
    doc = _soup(
        """
        <a href="/about">About</a>
        <a href="https://other.org/page">Elsewhere</a>
        <a href="javascript:void(0)">Script</a>
        <a href="MAILTO:someone@example.com">Mail</a>
        <a href="https://example.com/empty">   </a>
        <a>No href</a>
        """
    )
    links = extract_links(doc, PAGE_URL)
    assert [(link.text, link.url, link.internal) for link in links] == [
        ("About", "https://example.com/about", True),
        ("Elsewhere", "https://other.org/page", False),
    ]


def test_internal_requires_exact_host_match():
    doc = _soup('<a href="https://example.com.evil.net/x">Lookalike</a>')
    links = extract_links(doc, PAGE_URL)
    assert links[0].internal is False


def test_duplicate_links_keep_first_occurrence():
    doc = _soup(
        """
        <a href="https://example.com/a">First A</a>
        <a href="https://example.com/b">B</a>
        <a href="/a">Second A</a>
        """
    )
    links = extract_links(doc, PAGE_URL)
    assert [link.text for link in links] == ["First A", "B"]


def test_links_are_capped_in_document_order():
    anchors = "".join(f'<a href="/page/{i}">Page {i}</a>' for i in range(75))
    links = extract_links(_soup(anchors), PAGE_URL)
    assert len(links) == MAX_LINKS == 50
    assert links[0].url == "https://example.com/page/0"
    assert links[-1].url == "https://example.com/page/49"


def test_links_honour_explicit_base_url():
    doc = _soup('<a href="guide">Guide</a>')
    links = extract_links(doc, PAGE_URL, base_url="https://cdn.example.com/docs/")
    assert links[0].url == "https://cdn.example.com/docs/guide"
    assert links[0].internal is False


def test_image_size_filter_is_strict():
    doc = _soup(
        """
        <img src="/narrow.png" width="40" height="200">
        <img src="/edge.png" width="50" height="300">
        <img src="/ok.png" width="51" height="51" alt="Small but fine">
        <img src="/styled.png" style="width: 120px; height: 80px">
        <img src="/unsized.png">
        <img src="data:image/png;base64,AAAA" width="300" height="300">
        """
    )
    images = extract_images(doc, PAGE_URL)
    assert [(img.src, img.alt, img.width, img.height) for img in images] == [
        ("https://example.com/ok.png", "Small but fine", 51, 51),
        ("https://example.com/styled.png", "", 120, 80),
    ]


def test_images_are_capped_without_deduplication():
    tags = "".join('<img src="/same.png" width="100" height="100">' for _ in range(25))
    images = extract_images(_soup(tags), PAGE_URL)
    assert len(images) == MAX_IMAGES == 20
    assert {img.src for img in images} == {"https://example.com/same.png"}
