"""
Pixabay stock image search.

Image search is decoration only: a missing API key, HTTP errors and
timeouts all degrade to an empty result instead of failing the request.
"""
from __future__ import annotations

import logging
import random
from typing import Any, Dict, List, Optional

import httpx

from papergen.config import settings
from papergen.models.document import ImageDescriptor
from papergen.utils.helpers import extract_keywords

logger = logging.getLogger(__name__)

FALLBACK_QUERY = "technology business"
MAX_QUERY_LENGTH = 100


class PixabayImageService:
    """Async Pixabay client sharing the application's httpx client."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: Optional[str] = None,
        api_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self.client = client
        self.api_key = settings.PIXABAY_API_KEY if api_key is None else api_key
        self.api_url = api_url or settings.PIXABAY_API_URL
        self.timeout = timeout or settings.PIXABAY_TIMEOUT

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    async def search(self, query: str, per_page: Optional[int] = None) -> List[ImageDescriptor]:
        """
        Search photos for a topic or heading.

        Args:
            query: Free text; generic academic words are stripped first
            per_page: Number of results (default IMAGE_RESULTS_PER_QUERY)

        Returns:
            Matching images, or [] on any failure
        """
        return await self._search(extract_keywords(query), per_page)

    async def random_image(self, query: str) -> Optional[ImageDescriptor]:
        """Pick one image for *query*, falling back to a generic query."""
        images = await self.search(query)
        if not images:
            # Sent as-is; keyword extraction drops "business"
            images = await self._search(FALLBACK_QUERY)
        if not images:
            return None
        return random.choice(images)

    async def _search(self, keywords: str, per_page: Optional[int] = None) -> List[ImageDescriptor]:
        if not self.is_configured:
            logger.warning("Pixabay API key not configured, returning empty results")
            return []

        params = {
            "key": self.api_key,
            "q": keywords[:MAX_QUERY_LENGTH],
            "image_type": "photo",
            "per_page": per_page or settings.IMAGE_RESULTS_PER_QUERY,
            "safesearch": "true",
        }

        try:
            resp = await self.client.get(self.api_url, params=params, timeout=self.timeout)
            resp.raise_for_status()
            body = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("Pixabay API error: %s", exc)
            return []

        if not isinstance(body, dict):
            logger.error("Pixabay API error: expected a JSON object, got %s", type(body).__name__)
            return []
        hits = body.get("hits")
        if not isinstance(hits, list):
            return []

        return [image for image in (_to_descriptor(hit) for hit in hits) if image]


def _to_descriptor(hit: Any) -> Optional[ImageDescriptor]:
    if not isinstance(hit, dict):
        return None
    url = hit.get("largeImageURL") or hit.get("webformatURL")
    if not isinstance(url, str) or not url:
        return None
    preview_url = hit.get("previewURL") or hit.get("webformatURL")
    page_url = hit.get("pageURL")
    tags = hit.get("tags")
    return ImageDescriptor(
        url=url,
        width=_dimension(hit.get("imageWidth")),
        height=_dimension(hit.get("imageHeight")),
        preview_url=preview_url if isinstance(preview_url, str) else None,
        page_url=page_url if isinstance(page_url, str) else None,
        tags=tags if isinstance(tags, str) else None,
    )


def _dimension(value: Any) -> int:
    try:
        return max(int(value or 0), 0)
    except (TypeError, ValueError, OverflowError):
        return 0
