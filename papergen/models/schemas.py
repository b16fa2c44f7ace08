"""
Pydantic schemas for request/response validation.
"""
from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any
from datetime import datetime

from papergen.models.document import (
    CamelModel,
    CanonicalDocument,
    DocumentType,
    ImageDescriptor,
)


# Generation Schemas
class GenerateResponse(BaseModel):
    """Schema for a successful generation."""

    success: bool = True
    content: CanonicalDocument


class ErrorResponse(BaseModel):
    """Schema for every structured error body."""

    error: str
    kind: str
    retryable: bool = False
    reason: Optional[str] = None


# File Schemas
class FileProcessResponse(BaseModel):
    """Schema for single-file text extraction."""

    success: bool = True
    text: str
    type: str  # "document" | "image"


class FileResult(CamelModel):
    """Per-file outcome inside a batch."""

    filename: str
    mime_type: str
    kind: str
    ok: bool
    text: str = ""
    error: Optional[str] = None
    error_kind: Optional[str] = None


class BatchProcessResponse(BaseModel):
    """Schema for multi-file extraction; failures are reported per file."""

    success: bool
    results: List[FileResult]
    text: str
    failed: int = 0


# Image Schemas
class ImageQueryRequest(BaseModel):
    """Schema for image search requests."""

    query: str = Field(..., min_length=1)


class ImageSearchResponse(BaseModel):
    success: bool = True
    images: List[ImageDescriptor]


class RandomImageResponse(BaseModel):
    success: bool = True
    image: Optional[ImageDescriptor] = None


# Topic Schemas
class RandomTopicResponse(BaseModel):
    success: bool = True
    topic: str
    category: str


# Chat Schemas
class ChatRequest(BaseModel):
    """Schema for chatbot questions."""

    message: str = Field(..., min_length=1, max_length=4000)


class ChatResponse(BaseModel):
    success: bool = True
    response: str


# Project Schemas
class ProjectCreate(CamelModel):
    """Schema for saving a generated document."""

    title: str = Field(..., min_length=1, max_length=500)
    document_type: DocumentType
    content: CanonicalDocument
    topic: Optional[str] = None
    settings: Optional[Dict[str, Any]] = None


class ProjectResponse(CamelModel):
    """Schema for project responses."""

    id: str
    user_id: str
    title: str
    document_type: DocumentType
    content: CanonicalDocument
    topic: Optional[str] = None
    settings: Optional[Dict[str, Any]] = None
    created_at: datetime
    updated_at: datetime


class ProjectEnvelope(BaseModel):
    success: bool = True
    project: ProjectResponse


class ProjectListResponse(BaseModel):
    success: bool = True
    projects: List[ProjectResponse]


# Health Schemas
class HealthCheckResponse(BaseModel):
    """Schema for health check endpoint."""

    status: str
    gemini: str
    pixabay: str
    timestamp: datetime
    version: str = "0.1.0"
