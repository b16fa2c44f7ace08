"""
Export dispatch: CanonicalDocument + format -> ExportArtifact.

Exporters are pure; nothing here touches the network or the filesystem.
"""
from __future__ import annotations

import logging
import re
from typing import Any, Callable, Dict, Tuple, Union

from papergen.errors import UnsupportedFormat
from papergen.models.document import CanonicalDocument, ExportArtifact, ExportFormat
from papergen.services.docx_exporter import export_docx
from papergen.services.html_renderer import render_preview, render_print
from papergen.services.slide_exporter import build_slide_descriptor, export_pptx

logger = logging.getLogger(__name__)

DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
PPTX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.presentationml.presentation"

# format -> (renderer, media type, file extension)
_EXPORTERS: Dict[ExportFormat, Tuple[Callable[[CanonicalDocument], Any], str, str]] = {
    ExportFormat.PREVIEW_HTML: (render_preview, "text/html; charset=utf-8", "html"),
    ExportFormat.PRINT_HTML: (render_print, "text/html; charset=utf-8", "html"),
    ExportFormat.DOCX_BYTES: (export_docx, DOCX_MEDIA_TYPE, "docx"),
    ExportFormat.PPTX_BYTES: (export_pptx, PPTX_MEDIA_TYPE, "pptx"),
    ExportFormat.PPTX_DESCRIPTOR: (build_slide_descriptor, "application/json", "json"),
}

# Short names accepted from HTTP callers
_FORMAT_ALIASES: Dict[str, ExportFormat] = {
    "html": ExportFormat.PREVIEW_HTML,
    "preview": ExportFormat.PREVIEW_HTML,
    "print": ExportFormat.PRINT_HTML,
    "pdf": ExportFormat.PRINT_HTML,
    "docx": ExportFormat.DOCX_BYTES,
    "pptx": ExportFormat.PPTX_BYTES,
    "slides": ExportFormat.PPTX_DESCRIPTOR,
}


def parse_format(value: Union[str, ExportFormat]) -> ExportFormat:
    """Resolve a format name or alias. Raises UnsupportedFormat."""
    if isinstance(value, ExportFormat):
        return value
    key = str(value or "").strip().lower()
    if key in _FORMAT_ALIASES:
        return _FORMAT_ALIASES[key]
    try:
        return ExportFormat(key)
    except ValueError:
        allowed = ", ".join(f.value for f in ExportFormat)
        raise UnsupportedFormat(f"Unsupported export format {value!r}. Allowed: {allowed}")


def export(document: CanonicalDocument, fmt: Union[str, ExportFormat]) -> ExportArtifact:
    """
    Render *document* in the requested format.

    Raises:
        UnsupportedFormat: no exporter for *fmt*
    """
    export_format = parse_format(fmt)
    renderer, media_type, extension = _EXPORTERS[export_format]
    payload = renderer(document)
    logger.info("export: %s for %r", export_format.value, document.title)
    return ExportArtifact(
        format=export_format,
        media_type=media_type,
        filename=f"{slugify(document.title)}.{extension}",
        payload=payload,
    )


def slugify(title: str, max_length: int = 80) -> str:
    """File-name-safe slug of a document title."""
    slug = re.sub(r"[^A-Za-z0-9]+", "-", title).strip("-").lower()
    return slug[:max_length].rstrip("-") or "document"
