import datetime as dt

from content_enhancer.llm import ClaimValidation, EnhancementResult
from content_enhancer.report import MAX_REPORT_CONTENT_CHARS, TRUNCATION_NOTICE, render_report
from content_enhancer.schemas import PageContent

GENERATED = dt.datetime(2024, 5, 1, 12, 30)


def _page(text: str, metadata=None) -> PageContent:
    return PageContent(
        title="Widgets <Weekly>",
        url="https://example.com/widgets",
        domain="example.com",
        text=text,
        metadata=metadata or {},
    )


def test_report_renders_sections_and_escapes_html():
    enhancement = EnhancementResult(
        summary="Point one\nPoint two",
        context="Some <b>context</b>",
        validation=[ClaimValidation(claim="Widgets exist", status="false", reasoning="Nope")],
    )
    page = _page(
        "First para\n\nSecond line one\nline two",
        {"author": "Jane Doe", "publishDate": "2024-03-05T00:00:00.000Z"},
    )

    html = render_report(page, enhancement, generated_at=GENERATED)

    assert "Widgets &lt;Weekly&gt;" in html
    assert "Some &lt;b&gt;context&lt;/b&gt;" in html
    assert "<p>Point one</p>" in html and "<p>Point two</p>" in html
    assert '<div class="status false">' in html
    assert "<p>First para</p>" in html
    assert "<p>Second line one<br>line two</p>" in html
    assert "<strong>Author:</strong> Jane Doe" in html
    assert "<strong>Published:</strong> 2024-03-05" in html
    assert "Generated on 2024-05-01" in html


def test_report_omits_missing_sections():
    html = render_report(_page("Body"), EnhancementResult(), generated_at=GENERATED)
    assert "AI-Generated Summary" not in html
    assert "Fact Validation" not in html
    assert "Author:" not in html
    assert "Original Content" in html


def test_report_truncates_long_content():
    text = "x" * (MAX_REPORT_CONTENT_CHARS + 10)
    html = render_report(_page(text), EnhancementResult(), generated_at=GENERATED)
    assert "x" * MAX_REPORT_CONTENT_CHARS + TRUNCATION_NOTICE in html
    assert "x" * (MAX_REPORT_CONTENT_CHARS + 1) not in html
