"""
Document generation endpoint.

POST /api/generate/{documentType}   report | slideDeck | paper | thesis
                                    (aliases: powerpoint, conference, ...)
"""
import logging

from fastapi import APIRouter, Depends

from papergen.dependencies.services import get_pipeline
from papergen.models.document import DocumentType, GenerationRequest
from papergen.models.schemas import ErrorResponse, GenerateResponse
from papergen.services.generation import DocumentPipeline

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/{document_type}",
    response_model=GenerateResponse,
    responses={
        400: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
)
async def generate_document(
    document_type: str,
    body: GenerationRequest,
    pipeline: DocumentPipeline = Depends(get_pipeline),
) -> GenerateResponse:
    """
    Generate a structured document for the given topic.

    The path decides the document type; a ``documentType`` in the body is
    ignored.
    """
    request = body.model_copy(update={"document_type": DocumentType.parse(document_type)})
    document = await pipeline.generate(request)
    return GenerateResponse(content=document)
