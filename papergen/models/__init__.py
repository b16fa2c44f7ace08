"""Domain and schema models for PaperGen."""
from papergen.models.document import (
    Author,
    CanonicalDocument,
    CitationStyle,
    DocumentType,
    ExportArtifact,
    ExportFormat,
    GenerationRequest,
    ImageDescriptor,
    Section,
    SlideKind,
    Tone,
)
from papergen.models.schemas import (
    BatchProcessResponse,
    ChatRequest,
    ChatResponse,
    ErrorResponse,
    FileProcessResponse,
    FileResult,
    GenerateResponse,
    HealthCheckResponse,
    ProjectCreate,
    ProjectResponse,
)

__all__ = [
    # Domain models
    "Author",
    "CanonicalDocument",
    "CitationStyle",
    "DocumentType",
    "ExportArtifact",
    "ExportFormat",
    "GenerationRequest",
    "ImageDescriptor",
    "Section",
    "SlideKind",
    "Tone",
    # Pydantic schemas
    "BatchProcessResponse",
    "ChatRequest",
    "ChatResponse",
    "ErrorResponse",
    "FileProcessResponse",
    "FileResult",
    "GenerateResponse",
    "HealthCheckResponse",
    "ProjectCreate",
    "ProjectResponse",
]
