"""
File-to-text extraction for uploaded reference material.

PDFs are read with PyMuPDF straight from the in-memory buffer, DOCX files
with python-docx, plain text is decoded as UTF-8, and images are verified
with Pillow and handed to the vision collaborator for transcription. The
extracted text feeds a generation request's ``extraContext``.

Public API
----------
FileExtractor.extract(data, mime_type)   -> str
FileExtractor.extract_batch(files)       -> List[ExtractionResult]
combine_texts(results)                   -> str
resolve_mime_type(filename, declared)    -> str
"""
from __future__ import annotations

import io
import logging
import mimetypes
from dataclasses import dataclass
from typing import List, Optional, Protocol, Sequence

import fitz  # PyMuPDF
from docx import Document as DocxDocument
from PIL import Image

from papergen.errors import ExtractionFailed, PaperGenError, UnsupportedType

logger = logging.getLogger(__name__)

PDF_MIME = "application/pdf"
DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
GENERIC_MIME = "application/octet-stream"

mimetypes.add_type(DOCX_MIME, ".docx")


class VisionTranscriber(Protocol):
    async def transcribe(self, image_bytes: bytes, mime_type: str) -> str: ...


# ---------------------------------------------------------------------------
# Data structures
# ---------------------------------------------------------------------------

@dataclass
class InputFile:
    """One uploaded file as received by the HTTP layer."""

    filename: str
    data: bytes
    mime_type: str


@dataclass
class ExtractionResult:
    """Per-file outcome of a batch extraction."""

    filename: str
    mime_type: str
    kind: str           # "document" | "image"
    ok: bool
    text: str = ""
    error: Optional[str] = None
    error_kind: Optional[str] = None


# ---------------------------------------------------------------------------
# Extractor
# ---------------------------------------------------------------------------

class FileExtractor:
    """Extracts plain text from PDFs, DOCX, text files and images."""

    def __init__(
        self,
        vision: Optional[VisionTranscriber] = None,
        max_file_size: Optional[int] = None,
    ) -> None:
        self.vision = vision
        self.max_file_size = max_file_size

    async def extract(self, data: bytes, mime_type: str) -> str:
        """
        Extract text from one file.

        Args:
            data: Raw file contents (never modified)
            mime_type: Declared MIME type

        Returns:
            Extracted text

        Raises:
            UnsupportedType:  No extractor for *mime_type*
            ExtractionFailed: Empty, corrupt or password-protected file
        """
        mime = (mime_type or "").split(";")[0].strip().lower()

        if self.max_file_size is not None and len(data) > self.max_file_size:
            raise ExtractionFailed(
                f"File exceeds {self.max_file_size // (1024 * 1024)} MB limit"
            )

        if mime == PDF_MIME:
            extract_fn = _extract_pdf
        elif mime == DOCX_MIME:
            extract_fn = _extract_docx
        elif mime.startswith("text/"):
            extract_fn = _decode_text
        elif mime.startswith("image/"):
            return await self._transcribe_image(data, mime)
        else:
            raise UnsupportedType(f"Unsupported file type: {mime_type or 'unknown'}")

        if not data:
            raise ExtractionFailed("File is empty")
        return extract_fn(bytes(data))

    async def extract_batch(self, files: Sequence[InputFile]) -> List[ExtractionResult]:
        """
        Extract every file independently, in upload order.

        A failing file is reported in its own result and never discards the
        text extracted from the others.
        """
        results: List[ExtractionResult] = []
        for upload in files:
            kind = file_kind(upload.mime_type)
            try:
                text = await self.extract(upload.data, upload.mime_type)
            except PaperGenError as exc:
                logger.warning(
                    "extract_batch: %s (%s) failed: %s",
                    upload.filename,
                    upload.mime_type,
                    exc.message,
                )
                results.append(ExtractionResult(
                    filename=upload.filename,
                    mime_type=upload.mime_type,
                    kind=kind,
                    ok=False,
                    error=exc.message,
                    error_kind=exc.kind.value,
                ))
                continue

            results.append(ExtractionResult(
                filename=upload.filename,
                mime_type=upload.mime_type,
                kind=kind,
                ok=True,
                text=text,
            ))

        logger.info(
            "extract_batch: %d/%d file(s) extracted",
            sum(1 for r in results if r.ok),
            len(results),
        )
        return results

    async def _transcribe_image(self, data: bytes, mime: str) -> str:
        if not data:
            raise ExtractionFailed("Image is empty")
        try:
            with Image.open(io.BytesIO(data)) as img:
                img.verify()
        except (OSError, SyntaxError, ValueError, Image.DecompressionBombError) as exc:
            raise ExtractionFailed(f"Cannot read image: {exc}") from exc

        if self.vision is None:
            raise ExtractionFailed("Image transcription is not configured")
        return await self.vision.transcribe(bytes(data), mime)


# ---------------------------------------------------------------------------
# Format readers
# ---------------------------------------------------------------------------

def _extract_pdf(data: bytes) -> str:
    """Page texts joined by blank lines; blank pages are skipped."""
    try:
        doc = fitz.open(stream=data, filetype="pdf")
    except Exception as exc:
        raise ExtractionFailed(f"Cannot open PDF file: {exc}") from exc

    try:
        if doc.needs_pass:
            raise ExtractionFailed(
                "PDF is password-protected. Please provide an unlocked copy."
            )
        try:
            pages = [page.get_text("text").strip() for page in doc]
        except Exception as exc:
            raise ExtractionFailed(f"Cannot read PDF text: {exc}") from exc
    finally:
        doc.close()

    return "\n\n".join(text for text in pages if text)


def _extract_docx(data: bytes) -> str:
    """Non-empty paragraphs, then table rows as ``a | b`` lines."""
    try:
        doc = DocxDocument(io.BytesIO(data))
    except Exception as exc:
        raise ExtractionFailed(f"Cannot open DOCX file: {exc}") from exc

    lines = [p.text.strip() for p in doc.paragraphs if p.text.strip()]
    for table in doc.tables:
        for row in table.rows:
            cells = [cell.text.strip() for cell in row.cells]
            if any(cells):
                lines.append(" | ".join(cells))
    return "\n".join(lines)


def _decode_text(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def file_kind(mime_type: str) -> str:
    return "image" if (mime_type or "").lower().startswith("image/") else "document"


def resolve_mime_type(filename: Optional[str], declared: Optional[str]) -> str:
    """Use the declared type unless it is missing or generic; then guess from the name."""
    declared = (declared or "").strip()
    if declared and declared != GENERIC_MIME:
        return declared
    guessed, _ = mimetypes.guess_type(filename or "")
    return guessed or declared or GENERIC_MIME


def combine_texts(results: Sequence[ExtractionResult]) -> str:
    """Join the text of successful results with blank lines."""
    return "\n\n".join(r.text.strip() for r in results if r.ok and r.text.strip())
