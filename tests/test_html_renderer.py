"""Tests for the preview and print HTML renderers."""
from papergen.models.document import (
    CanonicalDocument,
    DocumentType,
    ImageDescriptor,
    Section,
    SlideKind,
)
from papergen.services.html_renderer import markup_to_html, render_preview, render_print


def _document(**kwargs) -> CanonicalDocument:
    kwargs.setdefault("title", "Doc")
    return CanonicalDocument(**kwargs)


def test_preview_escapes_ai_markup():
    doc = _document(
        title="<script>alert(1)</script>",
        body=[Section(heading="<b>x</b>", body_markup='<img src=x onerror="boom">')],
    )
    html = render_preview(doc)
    assert "<script>" not in html
    assert "&lt;script&gt;" in html
    assert "<img src=x" not in html
    assert "&lt;img" in html


def test_preview_applies_minimal_markdown():
    html = markup_to_html("**Bold** and *italic*\n\n- one\n- two")
    assert "<strong>Bold</strong>" in html
    assert "<em>italic</em>" in html
    assert "<ul><li>one</li><li>two</li></ul>" in html
    assert html.startswith("<p>")


def test_references_are_numbered_in_input_order():
    html = render_preview(_document(references=["A", "B", "C"]))
    assert html.index("[1] A") < html.index("[2] B") < html.index("[3] C")


def test_section_numbers_and_labels():
    doc = _document(body=[
        Section(heading="Intro", subsections=[Section(heading="Scope")]),
        Section(heading="Related Work", label="II."),
    ])
    html = render_preview(doc)
    assert '<h2><span class="section-number">1</span> Intro</h2>' in html
    assert '<h3><span class="section-number">1.1</span> Scope</h3>' in html
    assert '<span class="section-number">II.</span> Related Work' in html


def test_speaker_notes_in_preview_but_not_print():
    doc = _document(
        document_type=DocumentType.SLIDE_DECK,
        body=[Section(heading="Hello", body_markup="- a", speaker_notes="Say hi", slide_kind=SlideKind.CONTENT)],
    )
    assert "Say hi" in render_preview(doc)
    assert "Say hi" not in render_print(doc)


def test_print_is_a_full_page_with_pagination_css():
    page = render_print(_document(title="Print Me", abstract="Summary"))
    assert page.startswith("<!DOCTYPE html>")
    assert "<title>Print Me</title>" in page
    assert "@page" in page
    assert "break-inside: avoid" in page
    assert '<article class="papergen-preview' in page


def test_images_render_only_for_http_urls():
    doc = _document(body=[
        Section(heading="Pic", image=ImageDescriptor(url="https://cdn.example.com/p.jpg")),
        Section(heading="Bad", image=ImageDescriptor(url="javascript:alert(1)")),
    ])
    html = render_preview(doc)
    assert 'src="https://cdn.example.com/p.jpg"' in html
    assert "javascript:" not in html


def test_missing_optional_fields_render_cleanly():
    html = render_preview(_document())
    assert "Abstract" not in html
    assert "References" not in html
    assert "Keywords" not in html
