"""
Domain models shared by the request builder, normalizer and exporters.

Python attributes are snake_case; the JSON wire format is camelCase
(``bodyMarkup``, ``speakerNotes``, ...). Both spellings are accepted on input.
"""
from __future__ import annotations

import enum
from typing import Any, Dict, List, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from papergen.errors import InvalidRequest


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class DocumentType(str, enum.Enum):
    REPORT = "report"
    SLIDE_DECK = "slideDeck"
    PAPER = "paper"
    THESIS = "thesis"

    @classmethod
    def parse(cls, value: Any) -> "DocumentType":
        """Resolve a document type or one of its aliases. Raises InvalidRequest."""
        if isinstance(value, cls):
            return value
        key = str(value or "").strip()
        resolved = _DOCUMENT_TYPE_ALIASES.get(key.lower())
        if resolved is None:
            allowed = ", ".join(t.value for t in cls)
            raise InvalidRequest(f"Unknown document type {key!r}. Allowed: {allowed}")
        return resolved


_DOCUMENT_TYPE_ALIASES: Dict[str, DocumentType] = {
    "report": DocumentType.REPORT,
    "slidedeck": DocumentType.SLIDE_DECK,
    "slide_deck": DocumentType.SLIDE_DECK,
    "slides": DocumentType.SLIDE_DECK,
    "powerpoint": DocumentType.SLIDE_DECK,
    "presentation": DocumentType.SLIDE_DECK,
    "paper": DocumentType.PAPER,
    "conference": DocumentType.PAPER,
    "thesis": DocumentType.THESIS,
    "dissertation": DocumentType.THESIS,
}


class Tone(str, enum.Enum):
    ACADEMIC = "academic"
    PROFESSIONAL = "professional"
    ESSAY = "essay"
    CREATIVE = "creative"


class CitationStyle(str, enum.Enum):
    IEEE = "ieee"
    HARVARD = "harvard"
    AUTO = "auto"


class SlideKind(str, enum.Enum):
    TITLE = "title"
    CONTENT = "content"
    IMAGE = "image"
    QUOTE = "quote"


class ExportFormat(str, enum.Enum):
    PREVIEW_HTML = "preview_html"
    DOCX_BYTES = "docx_bytes"
    PPTX_DESCRIPTOR = "pptx_descriptor"
    PPTX_BYTES = "pptx_bytes"
    PRINT_HTML = "print_html"


# ---------------------------------------------------------------------------
# Request side
# ---------------------------------------------------------------------------

class Author(CamelModel):
    name: str = ""
    affiliation: str = ""
    email: str = ""


class GenerationRequest(CamelModel):
    """User options for one generation call."""

    document_type: Optional[DocumentType] = None
    topic: str = ""
    tone: Optional[Tone] = None
    citation_style: Optional[CitationStyle] = None
    length_hint: str = Field(
        default="auto",
        validation_alias=AliasChoices(
            "length_hint", "lengthHint", "targetLength", "slideCount", "targetPages"
        ),
    )
    include_images: bool = Field(
        default=False,
        validation_alias=AliasChoices("include_images", "includeImages", "generateImages"),
    )
    authors: List[Author] = Field(default_factory=list)
    extra_context: Optional[str] = None

    @field_validator("document_type", mode="before")
    @classmethod
    def _resolve_document_type(cls, value: Any) -> Any:
        if value is None or isinstance(value, DocumentType):
            return value
        resolved = _DOCUMENT_TYPE_ALIASES.get(str(value).strip().lower())
        return resolved if resolved is not None else value

    @field_validator("length_hint", mode="before")
    @classmethod
    def _default_length(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return "auto"
        return str(value)

    @field_validator("authors", mode="before")
    @classmethod
    def _drop_null_authors(cls, value: Any) -> Any:
        return [] if value is None else value


# ---------------------------------------------------------------------------
# Canonical document
# ---------------------------------------------------------------------------

class ImageDescriptor(CamelModel):
    url: str
    width: int = 0
    height: int = 0
    preview_url: Optional[str] = None
    page_url: Optional[str] = None
    tags: Optional[str] = None


class Section(CamelModel):
    """A titled, recursively nestable content node (also slides and chapters)."""

    heading: str = ""
    body_markup: str = ""
    subsections: List["Section"] = Field(default_factory=list)
    speaker_notes: Optional[str] = None
    slide_kind: Optional[SlideKind] = None
    # AI-provided numbering ("I.", "Chapter 2"); renderers fall back to
    # the computed outline number when absent
    label: Optional[str] = None
    image_query: Optional[str] = None
    image: Optional[ImageDescriptor] = None


class CanonicalDocument(CamelModel):
    """Format-independent representation every exporter consumes."""

    document_type: DocumentType = DocumentType.REPORT
    title: str
    author_line: Optional[str] = None
    abstract: Optional[str] = None
    keywords: Optional[List[str]] = None
    body: List[Section] = Field(default_factory=list)
    references: List[str] = Field(default_factory=list)
    cover_image: Optional[ImageDescriptor] = None

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("title must not be empty")
        return value


Section.model_rebuild()


# ---------------------------------------------------------------------------
# Export artifact
# ---------------------------------------------------------------------------

class ExportArtifact(CamelModel):
    format: ExportFormat
    media_type: str
    filename: str
    payload: Union[bytes, str, Dict[str, Any]]
