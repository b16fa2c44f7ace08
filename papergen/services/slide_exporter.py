"""
Slide exporters: a JSON slide descriptor for client-side slide builders and
a real .pptx file built with python-pptx.

One slide per section in document order. A cover slide is prepended unless
the deck already opens with a title slide. Speaker notes go to the notes
page only, never onto the slide itself.
"""
from __future__ import annotations

import io
import logging
from typing import Any, Dict, List, Tuple

from pptx import Presentation
from pptx.util import Pt

from papergen.models.document import CanonicalDocument, SlideKind
from papergen.utils.helpers import bullet_text, split_paragraphs, walk_sections

logger = logging.getLogger(__name__)

# Default template layouts
_TITLE_LAYOUT = 0
_CONTENT_LAYOUT = 1


def build_slide_descriptor(document: CanonicalDocument) -> Dict[str, Any]:
    """
    Describe the deck as plain data.

    Returns:
        ``{"title", "slides": [{"index", "kind", "title", "bullets", "body",
        "speakerNotes", "imageUrl"}]}``
    """
    slides: List[Dict[str, Any]] = []

    sections = list(walk_sections(document.body))
    starts_with_title = bool(sections) and sections[0][0].slide_kind == SlideKind.TITLE
    if not starts_with_title:
        slides.append({
            "index": 1,
            "kind": SlideKind.TITLE.value,
            "title": document.title,
            "bullets": [],
            "body": document.author_line or "",
            "speakerNotes": None,
            "imageUrl": document.cover_image.url if document.cover_image else None,
        })

    for section, _depth, _number in sections:
        bullets, body = _split_body(section.body_markup)
        slides.append({
            "index": len(slides) + 1,
            "kind": (section.slide_kind or SlideKind.CONTENT).value,
            "title": section.heading,
            "bullets": bullets,
            "body": body,
            "speakerNotes": section.speaker_notes,
            "imageUrl": section.image.url if section.image else None,
        })

    return {"title": document.title, "slides": slides}


def export_pptx(document: CanonicalDocument) -> bytes:
    """Render *document* as .pptx bytes."""
    descriptor = build_slide_descriptor(document)
    prs = Presentation()

    for spec in descriptor["slides"]:
        if spec["kind"] == SlideKind.TITLE.value:
            slide = prs.slides.add_slide(prs.slide_layouts[_TITLE_LAYOUT])
            slide.shapes.title.text = spec["title"]
            subtitle = spec["body"] or "\n".join(spec["bullets"])
            if subtitle:
                slide.placeholders[1].text = subtitle
        else:
            slide = prs.slides.add_slide(prs.slide_layouts[_CONTENT_LAYOUT])
            slide.shapes.title.text = spec["title"]
            _fill_body(slide.placeholders[1].text_frame, spec)

        if spec["speakerNotes"]:
            slide.notes_slide.notes_text_frame.text = spec["speakerNotes"]

    buffer = io.BytesIO()
    prs.save(buffer)
    data = buffer.getvalue()
    logger.info(
        "export_pptx: %r -> %d slide(s), %d bytes",
        document.title,
        len(descriptor["slides"]),
        len(data),
    )
    return data


def _fill_body(text_frame, spec: Dict[str, Any]) -> None:
    lines = list(spec["bullets"])
    if spec["body"]:
        lines.extend(split_paragraphs(spec["body"]))
    if not lines:
        return

    text_frame.word_wrap = True
    text_frame.text = lines[0]
    for line in lines[1:]:
        paragraph = text_frame.add_paragraph()
        paragraph.text = line
    if spec["kind"] == SlideKind.QUOTE.value:
        for paragraph in text_frame.paragraphs:
            paragraph.font.italic = True
            paragraph.font.size = Pt(24)


def _split_body(markup: str) -> Tuple[List[str], str]:
    """Separate ``- `` bullet lines from the remaining prose."""
    bullets: List[str] = []
    prose: List[str] = []
    for block in split_paragraphs(markup):
        kept: List[str] = []
        for line in block.splitlines():
            item = bullet_text(line)
            if item is not None:
                bullets.append(item)
            elif line.strip():
                kept.append(line.strip())
        if kept:
            prose.append("\n".join(kept))
    return bullets, "\n\n".join(prose)
