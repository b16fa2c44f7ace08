"""Tests for the slide descriptor and .pptx exporter."""
import io

from pptx import Presentation

from papergen.models.document import (
    CanonicalDocument,
    DocumentType,
    ImageDescriptor,
    Section,
    SlideKind,
)
from papergen.services.slide_exporter import build_slide_descriptor, export_pptx


def _deck(body, **kwargs) -> CanonicalDocument:
    return CanonicalDocument(document_type=DocumentType.SLIDE_DECK, title="Deck", body=body, **kwargs)


def test_cover_slide_is_prepended_when_missing():
    descriptor = build_slide_descriptor(_deck(
        [Section(heading="Agenda", body_markup="- One\n- Two", slide_kind=SlideKind.CONTENT)],
        author_line="Ada Lovelace",
    ))
    slides = descriptor["slides"]
    assert descriptor["title"] == "Deck"
    assert [s["kind"] for s in slides] == ["title", "content"]
    assert slides[0]["title"] == "Deck"
    assert slides[0]["body"] == "Ada Lovelace"
    assert slides[1] == {
        "index": 2,
        "kind": "content",
        "title": "Agenda",
        "bullets": ["One", "Two"],
        "body": "",
        "speakerNotes": None,
        "imageUrl": None,
    }


def test_existing_title_slide_is_kept_as_cover():
    descriptor = build_slide_descriptor(_deck([
        Section(heading="Welcome", body_markup="Subtitle", slide_kind=SlideKind.TITLE),
        Section(heading="Body", body_markup="Text", slide_kind=SlideKind.QUOTE),
    ]))
    assert [s["title"] for s in descriptor["slides"]] == ["Welcome", "Body"]
    assert [s["index"] for s in descriptor["slides"]] == [1, 2]


def test_image_urls_and_notes_in_descriptor():
    descriptor = build_slide_descriptor(_deck([
        Section(
            heading="Pic",
            slide_kind=SlideKind.IMAGE,
            speaker_notes="Point at it",
            image=ImageDescriptor(url="https://cdn.example.com/p.jpg"),
        ),
    ]))
    slide = descriptor["slides"][1]
    assert slide["imageUrl"] == "https://cdn.example.com/p.jpg"
    assert slide["speakerNotes"] == "Point at it"


def test_pptx_notes_go_to_notes_page_only():
    data = export_pptx(_deck([
        Section(heading="Agenda", body_markup="- One\n- Two", speaker_notes="Keep it short"),
    ]))
    prs = Presentation(io.BytesIO(data))
    slides = list(prs.slides)
    assert len(slides) == 2
    assert slides[0].shapes.title.text == "Deck"

    agenda = slides[1]
    assert agenda.shapes.title.text == "Agenda"
    on_slide = " ".join(shape.text_frame.text for shape in agenda.shapes if shape.has_text_frame)
    assert "One" in on_slide and "Two" in on_slide
    assert "Keep it short" not in on_slide
    assert agenda.notes_slide.notes_text_frame.text == "Keep it short"


def test_pptx_from_a_report_document():
    data = export_pptx(CanonicalDocument(
        title="Report",
        body=[Section(heading="Intro", body_markup="Para one\n\nPara two")],
    ))
    prs = Presentation(io.BytesIO(data))
    assert len(prs.slides) == 2
