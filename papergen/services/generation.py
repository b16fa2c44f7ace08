"""
Document generation pipeline.

Public API
----------
DocumentPipeline.generate(request)
    -> CanonicalDocument
    build request -> AI call -> normalize -> optional image decoration.
    Raises PaperGenError subclasses.

DocumentPipeline.run(request)
    -> GenerationResult
    Same pipeline, with failures returned as a value instead of raised.
"""
from __future__ import annotations

import asyncio
import dataclasses
import logging
import time
from typing import List, Optional, Protocol

from papergen.errors import ErrorKind, PaperGenError
from papergen.models.document import (
    CanonicalDocument,
    GenerationRequest,
    ImageDescriptor,
    Section,
)
from papergen.services.normalizer import normalize
from papergen.services.request_builder import build

logger = logging.getLogger(__name__)

# Results fetched per section when decorating with images
SECTION_IMAGE_CANDIDATES = 3


class TextGenerator(Protocol):
    async def generate(
        self,
        prompt: str,
        system_instruction: Optional[str] = None,
        response_format: str = "text",
        max_tokens: int = 8192,
        temperature: Optional[float] = None,
    ) -> str: ...


class ImageSearcher(Protocol):
    async def search(self, query: str, per_page: Optional[int] = None) -> List[ImageDescriptor]: ...


# ---------------------------------------------------------------------------
# Result dataclass
# ---------------------------------------------------------------------------

@dataclasses.dataclass
class GenerationResult:
    """Outcome of DocumentPipeline.run: a document or the error that stopped it."""

    ok: bool
    document: Optional[CanonicalDocument] = None
    error: Optional[PaperGenError] = None
    elapsed_seconds: float = 0.0

    @property
    def error_kind(self) -> Optional[ErrorKind]:
        return self.error.kind if self.error else None


# ---------------------------------------------------------------------------
# DocumentPipeline
# ---------------------------------------------------------------------------

class DocumentPipeline:
    """
    Orchestrates one generation call.

    Holds no per-request state; the AI and image collaborators are injected
    so one instance can serve every request.
    """

    def __init__(self, ai: TextGenerator, images: Optional[ImageSearcher] = None) -> None:
        self._ai = ai
        self._images = images

    async def generate(self, request: GenerationRequest) -> CanonicalDocument:
        t0 = time.time()
        built = build(request)
        logger.info(
            "generate: %s on %r (maxTokens=%d, images=%s)",
            built.document_type.value,
            request.topic.strip(),
            built.max_tokens,
            request.include_images,
        )

        raw = await self._ai.generate(
            prompt=built.prompt,
            system_instruction=built.system_instruction,
            response_format=built.response_format,
            max_tokens=built.max_tokens,
        )
        document = normalize(raw, built.document_type, request.topic)

        if request.include_images and self._images is not None:
            await self._decorate(document, request.topic.strip())

        logger.info(
            "generate: %s %r done in %.1fs",
            built.document_type.value,
            document.title,
            time.time() - t0,
        )
        return document

    async def run(self, request: GenerationRequest) -> GenerationResult:
        t0 = time.time()
        try:
            document = await self.generate(request)
        except PaperGenError as exc:
            logger.warning("run: generation failed (%s): %s", exc.kind.value, exc.message)
            return GenerationResult(ok=False, error=exc, elapsed_seconds=time.time() - t0)
        return GenerationResult(ok=True, document=document, elapsed_seconds=time.time() - t0)

    # ------------------------------------------------------------------
    # Image decoration
    # ------------------------------------------------------------------

    async def _decorate(self, document: CanonicalDocument, topic: str) -> None:
        """Attach a cover image and one image per top-level section."""
        targets: List[Section] = [s for s in document.body if s.image_query or s.heading]
        queries = [topic or document.title] + [s.image_query or s.heading for s in targets]

        found = await asyncio.gather(
            *(self._images.search(q, per_page=SECTION_IMAGE_CANDIDATES) for q in queries)
        )

        cover, per_section = found[0], found[1:]
        if cover:
            document.cover_image = cover[0]

        attached = 0
        for section, images in zip(targets, per_section):
            if images:
                section.image = images[0]
                attached += 1
        logger.info("_decorate: attached %d/%d section image(s)", attached, len(targets))
