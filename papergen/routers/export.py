"""
Export endpoint.

POST /api/export/{format}   body: CanonicalDocument
    preview_html | print_html   → text/html
    docx_bytes | pptx_bytes     → attachment
    pptx_descriptor             → JSON slide descriptor
Short aliases (html, pdf, docx, pptx, slides) are accepted too.
"""
import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse, Response

from papergen.models.document import CanonicalDocument, ExportFormat
from papergen.models.schemas import ErrorResponse
from papergen.services.exporter import export

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/{export_format}", responses={400: {"model": ErrorResponse}})
async def export_document(export_format: str, document: CanonicalDocument) -> Response:
    """Render a generated document in the requested format."""
    artifact = export(document, export_format)

    disposition = "inline" if artifact.format == ExportFormat.PREVIEW_HTML else "attachment"
    headers = {"Content-Disposition": f'{disposition}; filename="{artifact.filename}"'}

    if isinstance(artifact.payload, dict):
        return JSONResponse(content=artifact.payload, headers=headers)
    return Response(content=artifact.payload, media_type=artifact.media_type, headers=headers)
