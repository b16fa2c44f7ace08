"""
Error taxonomy for the generation, extraction and export pipeline.

Every failure the core raises is a ``PaperGenError`` subclass carrying an
``ErrorKind``; the HTTP layer maps kinds to status codes and renders
``to_dict()`` as the response body.
"""
from __future__ import annotations

import enum
from typing import Any, Dict, Optional


class ErrorKind(str, enum.Enum):
    INVALID_REQUEST = "invalid_request"
    MALFORMED_RESPONSE = "malformed_response"
    GENERATION_FAILED = "generation_failed"
    EXTRACTION_FAILED = "extraction_failed"
    UNSUPPORTED_TYPE = "unsupported_type"
    UNSUPPORTED_FORMAT = "unsupported_format"


class PaperGenError(Exception):
    """Base class for all pipeline errors."""

    kind: ErrorKind = ErrorKind.INVALID_REQUEST
    status_code: int = 400

    def __init__(self, message: str, *, retryable: bool = False) -> None:
        super().__init__(message)
        self.message = message
        self.retryable = retryable

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": self.message,
            "kind": self.kind.value,
            "retryable": self.retryable,
        }


class InvalidRequest(PaperGenError):
    """Bad or missing caller input."""

    kind = ErrorKind.INVALID_REQUEST
    status_code = 400


class MalformedResponse(PaperGenError):
    """The AI reply could not be turned into a document."""

    kind = ErrorKind.MALFORMED_RESPONSE
    status_code = 502

    def __init__(self, message: str, *, reason: str = "unparseable") -> None:
        super().__init__(message)
        self.reason = reason

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["reason"] = self.reason
        return data


class GenerationFailed(PaperGenError):
    """Upstream AI service error (auth, quota, timeout, non-2xx)."""

    kind = ErrorKind.GENERATION_FAILED
    status_code = 502

    def __init__(
        self,
        message: str,
        *,
        retryable: bool = False,
        upstream_status: Optional[int] = None,
    ) -> None:
        super().__init__(message, retryable=retryable)
        self.upstream_status = upstream_status
        if retryable:
            self.status_code = 503


class ExtractionFailed(PaperGenError):
    """A supported file could not be read."""

    kind = ErrorKind.EXTRACTION_FAILED
    status_code = 422


class UnsupportedType(PaperGenError):
    """The declared MIME type has no extractor."""

    kind = ErrorKind.UNSUPPORTED_TYPE
    status_code = 415


class UnsupportedFormat(PaperGenError):
    """Export requested for a format no exporter implements."""

    kind = ErrorKind.UNSUPPORTED_FORMAT
    status_code = 400
