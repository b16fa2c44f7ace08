"""Tests for export dispatch."""
import pytest

from papergen.errors import UnsupportedFormat
from papergen.models.document import CanonicalDocument, ExportFormat, Section
from papergen.services.exporter import export, slugify


@pytest.fixture
def document() -> CanonicalDocument:
    return CanonicalDocument(
        title="Edge Computing: A Survey",
        body=[Section(heading="Intro", body_markup="Text")],
        references=["A", "B", "C"],
    )


@pytest.mark.parametrize(
    "fmt,payload_type,extension",
    [
        (ExportFormat.PREVIEW_HTML, str, "html"),
        (ExportFormat.PRINT_HTML, str, "html"),
        (ExportFormat.DOCX_BYTES, bytes, "docx"),
        (ExportFormat.PPTX_BYTES, bytes, "pptx"),
        (ExportFormat.PPTX_DESCRIPTOR, dict, "json"),
    ],
)
def test_every_format_produces_an_artifact(document, fmt, payload_type, extension):
    artifact = export(document, fmt)
    assert artifact.format == fmt
    assert isinstance(artifact.payload, payload_type)
    assert artifact.filename == f"edge-computing-a-survey.{extension}"


def test_aliases_resolve(document):
    assert export(document, "docx").format == ExportFormat.DOCX_BYTES
    assert export(document, "pdf").format == ExportFormat.PRINT_HTML


def test_unknown_format_is_rejected(document):
    with pytest.raises(UnsupportedFormat):
        export(document, "epub")


def test_slugify_never_returns_empty():
    assert slugify("???") == "document"
