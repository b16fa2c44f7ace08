"""
Word (.docx) exporter built on python-docx.

Layout: centered title, italic author line, keywords, abstract, numbered
section headings (level = depth + 1, capped at 9), body paragraphs split on
blank lines, ``- `` lines as bullets, and a ``[n]`` reference list.
"""
from __future__ import annotations

import io
import logging
from typing import List

from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.shared import Pt

from papergen.models.document import CanonicalDocument, DocumentType
from papergen.utils.helpers import (
    bullet_text,
    numbered_references,
    split_bold_runs,
    split_paragraphs,
    strip_control_chars,
    walk_sections,
)

logger = logging.getLogger(__name__)

MAX_HEADING_LEVEL = 9


def export_docx(document: CanonicalDocument) -> bytes:
    """Render *document* as .docx bytes."""
    doc = Document()

    style = doc.styles["Normal"]
    style.font.name = "Times New Roman"
    style.font.size = Pt(12)

    title = doc.add_heading(strip_control_chars(document.title), level=0)
    title.alignment = WD_ALIGN_PARAGRAPH.CENTER

    if document.author_line:
        p = doc.add_paragraph()
        p.alignment = WD_ALIGN_PARAGRAPH.CENTER
        run = p.add_run(strip_control_chars(document.author_line))
        run.italic = True

    if document.keywords:
        p = doc.add_paragraph()
        label = p.add_run("Keywords: ")
        label.bold = True
        p.add_run(strip_control_chars(", ".join(document.keywords)))

    if document.abstract:
        doc.add_heading("Abstract", level=1)
        _add_markup(doc, document.abstract)

    is_deck = document.document_type == DocumentType.SLIDE_DECK
    for section, depth, number in walk_sections(document.body):
        label = section.label or (f"Slide {number}" if is_deck else number)
        text = f"{label} {section.heading}".strip() if section.heading else label
        doc.add_heading(strip_control_chars(text), level=min(depth + 1, MAX_HEADING_LEVEL))
        _add_markup(doc, section.body_markup)

    if document.references:
        doc.add_heading("References", level=1)
        for entry in numbered_references(document.references):
            doc.add_paragraph(strip_control_chars(entry))

    buffer = io.BytesIO()
    doc.save(buffer)
    data = buffer.getvalue()
    logger.info("export_docx: %r -> %d bytes", document.title, len(data))
    return data


def _add_markup(doc, markup: str) -> None:
    """Add one paragraph per blank-line block; blank blocks are skipped."""
    for block in split_paragraphs(strip_control_chars(markup)):
        lines: List[str] = []
        for line in block.splitlines():
            item = bullet_text(line)
            if item is None:
                if line.strip():
                    lines.append(line.strip())
                continue
            if lines:
                _add_runs(doc.add_paragraph(), "\n".join(lines))
                lines = []
            _add_runs(doc.add_paragraph(style="List Bullet"), item)
        if lines:
            _add_runs(doc.add_paragraph(), "\n".join(lines))


def _add_runs(paragraph, text: str) -> None:
    for chunk, bold in split_bold_runs(text):
        run = paragraph.add_run(chunk)
        if bold:
            run.bold = True
