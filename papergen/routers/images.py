"""
Stock image search endpoints (Pixabay). Never fail on upstream errors;
an unavailable service yields empty results.
"""
from fastapi import APIRouter, Depends

from papergen.dependencies.services import get_image_service
from papergen.models.schemas import (
    ImageQueryRequest,
    ImageSearchResponse,
    RandomImageResponse,
)
from papergen.services.image_search import PixabayImageService

router = APIRouter()


@router.post("/search", response_model=ImageSearchResponse)
async def search_images(
    body: ImageQueryRequest,
    images: PixabayImageService = Depends(get_image_service),
) -> ImageSearchResponse:
    return ImageSearchResponse(images=await images.search(body.query))


@router.post("/random", response_model=RandomImageResponse)
async def random_image(
    body: ImageQueryRequest,
    images: PixabayImageService = Depends(get_image_service),
) -> RandomImageResponse:
    return RandomImageResponse(image=await images.random_image(body.query))
