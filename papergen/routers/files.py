"""
Reference-file text extraction endpoints.

POST /api/files/process         — one multipart ``file``
POST /api/files/process-batch   — several multipart ``files``; failures are
                                  reported per file
"""
import dataclasses
import logging
from typing import List

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from papergen.config import settings
from papergen.dependencies.services import get_extractor
from papergen.models.schemas import (
    BatchProcessResponse,
    ErrorResponse,
    FileProcessResponse,
    FileResult,
)
from papergen.services.file_extractor import (
    FileExtractor,
    InputFile,
    combine_texts,
    file_kind,
    resolve_mime_type,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/process",
    response_model=FileProcessResponse,
    responses={
        413: {"description": "File too large"},
        415: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
)
async def process_file(
    file: UploadFile = File(...),
    extractor: FileExtractor = Depends(get_extractor),
) -> FileProcessResponse:
    """Extract the text of one PDF, DOCX, text file or image."""
    data = await file.read()
    if len(data) > settings.MAX_FILE_SIZE:
        raise HTTPException(
            status_code=413,
            detail=f"File exceeds {settings.MAX_FILE_SIZE // (1024 * 1024)} MB limit.",
        )

    mime_type = resolve_mime_type(file.filename, file.content_type)
    text = await extractor.extract(data, mime_type)
    logger.info("Extracted %d chars from %s (%s)", len(text), file.filename, mime_type)
    return FileProcessResponse(text=text, type=file_kind(mime_type))


@router.post("/process-batch", response_model=BatchProcessResponse)
async def process_batch(
    files: List[UploadFile] = File(...),
    extractor: FileExtractor = Depends(get_extractor),
) -> BatchProcessResponse:
    """Extract several files independently and return per-file results."""
    uploads: List[InputFile] = []
    for upload in files:
        uploads.append(InputFile(
            filename=upload.filename or "upload",
            data=await upload.read(),
            mime_type=resolve_mime_type(upload.filename, upload.content_type),
        ))

    results = await extractor.extract_batch(uploads)
    failed = sum(1 for r in results if not r.ok)
    return BatchProcessResponse(
        success=failed < len(results),
        results=[FileResult(**dataclasses.asdict(r)) for r in results],
        text=combine_texts(results),
        failed=failed,
    )
