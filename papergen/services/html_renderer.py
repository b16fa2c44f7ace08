"""
HTML renderers for the live preview and the print/PDF view.

Every AI-provided string is escaped before the small Markdown pass
(``**bold**``, ``*italic*``, ``- `` bullets, blank-line paragraphs), so raw
markup from the model never reaches the output.
"""
from __future__ import annotations

import html
import re
from typing import List, Optional

from papergen.models.document import (
    CanonicalDocument,
    DocumentType,
    ImageDescriptor,
    Section,
)
from papergen.utils.helpers import (
    bullet_text,
    numbered_references,
    split_paragraphs,
    walk_sections,
)

_BOLD = re.compile(r"\*\*(.+?)\*\*")
_ITALIC = re.compile(r"(?<!\*)\*(?!\s)(.+?)(?<!\s)\*(?!\*)")

PRINT_CSS = """
@page { size: A4; margin: 2.5cm 2cm; }
body { font-family: "Times New Roman", Times, serif; font-size: 12pt; line-height: 1.5; color: #000; }
.papergen-preview header { text-align: center; margin-bottom: 2em; }
.doc-title { font-size: 20pt; margin: 0 0 0.5em; }
.author-line { font-style: italic; }
.abstract { margin: 0 2em 1.5em; }
h1, h2, h3, h4, h5, h6 { break-after: avoid; page-break-after: avoid; }
p, li, figure, blockquote { break-inside: avoid; page-break-inside: avoid; orphans: 3; widows: 3; }
.doc-section.depth-0 { margin-top: 1.5em; }
.slide { break-before: page; page-break-before: always; }
.slide:first-of-type { break-before: auto; page-break-before: auto; }
figure img { max-width: 100%; max-height: 12cm; }
.references ol { list-style: none; padding-left: 0; }
.references li { margin-bottom: 0.4em; }
""".strip()


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def render_preview(document: CanonicalDocument) -> str:
    """Render the preview fragment, speaker notes included."""
    return _render_article(document, include_notes=True)


def render_print(document: CanonicalDocument) -> str:
    """Render a standalone, pagination-friendly HTML page without speaker notes."""
    article = _render_article(document, include_notes=False)
    return (
        "<!DOCTYPE html>\n"
        '<html lang="en">\n'
        "<head>\n"
        '<meta charset="utf-8">\n'
        f"<title>{_esc(document.title)}</title>\n"
        f"<style>\n{PRINT_CSS}\n</style>\n"
        "</head>\n"
        "<body>\n"
        f"{article}\n"
        "</body>\n"
        "</html>\n"
    )


def markup_to_html(markup: str) -> str:
    """
    Convert section body markup into escaped HTML blocks.

    Consecutive bullet lines become one ``<ul>``; other lines of a block
    form a paragraph with ``<br>`` line breaks.
    """
    out: List[str] = []
    for block in split_paragraphs(markup):
        items: List[str] = []
        lines: List[str] = []
        for line in block.splitlines():
            item = bullet_text(line)
            if item is not None:
                if lines:
                    out.append(_paragraph(lines))
                    lines = []
                items.append(item)
            elif line.strip():
                if items:
                    out.append(_bullet_list(items))
                    items = []
                lines.append(line.strip())
        if items:
            out.append(_bullet_list(items))
        if lines:
            out.append(_paragraph(lines))
    return "\n".join(out)


# ---------------------------------------------------------------------------
# Internals
# ---------------------------------------------------------------------------

def _render_article(document: CanonicalDocument, include_notes: bool) -> str:
    is_deck = document.document_type == DocumentType.SLIDE_DECK
    parts: List[str] = [
        f'<article class="papergen-preview papergen-{_esc(document.document_type.value)}">',
        "<header>",
        f'<h1 class="doc-title">{_inline(document.title)}</h1>',
    ]
    if document.author_line:
        parts.append(f'<p class="author-line">{_inline(document.author_line)}</p>')
    parts.append("</header>")

    if document.cover_image:
        parts.append(_figure(document.cover_image, document.title, "cover-image"))

    if document.abstract:
        parts.append('<section class="abstract">')
        parts.append("<h2>Abstract</h2>")
        parts.append(markup_to_html(document.abstract))
        parts.append("</section>")

    if document.keywords:
        keywords = ", ".join(_esc(k) for k in document.keywords)
        parts.append(f'<p class="keywords"><strong>Keywords:</strong> {keywords}</p>')

    for section, depth, number in walk_sections(document.body):
        parts.append(_render_section(section, depth, number, is_deck, include_notes))

    if document.references:
        parts.append('<section class="references">')
        parts.append("<h2>References</h2>")
        parts.append("<ol>")
        for entry in numbered_references(document.references):
            parts.append(f"<li>{_inline(entry)}</li>")
        parts.append("</ol>")
        parts.append("</section>")

    parts.append("</article>")
    return "\n".join(parts)


def _render_section(
    section: Section,
    depth: int,
    number: str,
    is_deck: bool,
    include_notes: bool,
) -> str:
    classes = f"doc-section depth-{depth}"
    if is_deck:
        kind = section.slide_kind.value if section.slide_kind else "content"
        classes += f" slide slide-{kind}"

    level = min(depth + 2, 6)
    label = section.label or (f"Slide {number}" if is_deck else number)
    heading = _inline(section.heading)
    title = f'<span class="section-number">{_esc(label)}</span> {heading}' if heading else _esc(label)

    parts = [
        f'<section class="{classes}">',
        f"<h{level}>{title}</h{level}>",
    ]
    if section.image:
        parts.append(_figure(section.image, section.heading, "section-image"))
    body = markup_to_html(section.body_markup)
    if body:
        if is_deck and section.slide_kind and section.slide_kind.value == "quote":
            body = f"<blockquote>{body}</blockquote>"
        parts.append(body)
    if include_notes and section.speaker_notes:
        parts.append(
            '<aside class="speaker-notes"><strong>Speaker notes:</strong> '
            f"{_inline(section.speaker_notes)}</aside>"
        )
    parts.append("</section>")
    return "\n".join(parts)


def _figure(image: ImageDescriptor, alt: Optional[str], css_class: str) -> str:
    if not image.url.lower().startswith(("http://", "https://")):
        return ""
    return (
        f'<figure class="{css_class}">'
        f'<img src="{_esc(image.url)}" alt="{_esc(alt or "")}" loading="lazy">'
        "</figure>"
    )


def _paragraph(lines: List[str]) -> str:
    return "<p>" + "<br>".join(_inline(line) for line in lines) + "</p>"


def _bullet_list(items: List[str]) -> str:
    return "<ul>" + "".join(f"<li>{_inline(item)}</li>" for item in items) + "</ul>"


def _inline(text: str) -> str:
    escaped = _esc(text)
    escaped = _BOLD.sub(r"<strong>\1</strong>", escaped)
    return _ITALIC.sub(r"<em>\1</em>", escaped)


def _esc(text: str) -> str:
    return html.escape(text or "", quote=True)
