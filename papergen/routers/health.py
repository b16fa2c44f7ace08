"""
Health check endpoint.
"""
from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from papergen.dependencies.services import get_gemini, get_image_service
from papergen.models.schemas import HealthCheckResponse
from papergen.services.gemini_client import GeminiService
from papergen.services.image_search import PixabayImageService

router = APIRouter()


@router.get("", response_model=HealthCheckResponse)
async def health_check(
    gemini: GeminiService = Depends(get_gemini),
    images: PixabayImageService = Depends(get_image_service),
):
    """
    Report which external collaborators are configured.

    Generation needs Gemini; Pixabay is optional decoration, so only a
    missing Gemini key marks the service degraded.
    """
    gemini_status = "configured" if gemini.is_configured else "not_configured"
    pixabay_status = "configured" if images.is_configured else "not_configured"

    return HealthCheckResponse(
        status="healthy" if gemini.is_configured else "degraded",
        gemini=gemini_status,
        pixabay=pixabay_status,
        timestamp=datetime.now(timezone.utc),
    )
