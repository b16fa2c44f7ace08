"""
Shared fixtures for PaperGen backend tests.

The AI, vision and image-search collaborators are replaced with in-process
fakes through ``app.dependency_overrides``, so no test touches the network.
Sample PDFs and DOCX files are built in memory with PyMuPDF and python-docx.
"""
from __future__ import annotations

import io
import json
from typing import Any, AsyncGenerator, Dict, List, Optional

import fitz  # PyMuPDF
import pytest
import pytest_asyncio
from docx import Document as DocxDocument
from httpx import ASGITransport, AsyncClient
from PIL import Image

from papergen.dependencies.services import (
    get_chat_service,
    get_extractor,
    get_gemini,
    get_image_service,
    get_pipeline,
    get_project_store,
)
from papergen.main import app
from papergen.models.document import ImageDescriptor
from papergen.services.chat_service import ChatService
from papergen.services.file_extractor import FileExtractor
from papergen.services.generation import DocumentPipeline
from papergen.services.project_store import InMemoryProjectStore


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------

class FakeAI:
    """Stands in for GeminiService: returns a canned reply and records calls."""

    def __init__(self, reply: str = "", error: Optional[Exception] = None) -> None:
        self.reply = reply
        self.error = error
        self.calls: List[Dict[str, Any]] = []
        self.transcriptions: List[str] = []
        self.api_key = "fake-key"

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    async def generate(
        self,
        prompt: str,
        system_instruction: Optional[str] = None,
        response_format: str = "text",
        max_tokens: int = 8192,
        temperature: Optional[float] = None,
    ) -> str:
        self.calls.append({
            "prompt": prompt,
            "system_instruction": system_instruction,
            "response_format": response_format,
            "max_tokens": max_tokens,
            "temperature": temperature,
        })
        if self.error is not None:
            raise self.error
        return self.reply

    async def transcribe(self, image_bytes: bytes, mime_type: str) -> str:
        self.transcriptions.append(mime_type)
        if self.error is not None:
            raise self.error
        return "TEXT FROM IMAGE"


class FakeImages:
    """Stands in for PixabayImageService."""

    def __init__(self, images: Optional[List[ImageDescriptor]] = None, configured: bool = True) -> None:
        self.images = images if images is not None else [
            ImageDescriptor(url="https://cdn.example.com/a.jpg", width=640, height=480),
        ]
        self.queries: List[str] = []
        self.configured = configured

    @property
    def is_configured(self) -> bool:
        return self.configured

    async def search(self, query: str, per_page: Optional[int] = None) -> List[ImageDescriptor]:
        self.queries.append(query)
        return list(self.images)

    async def random_image(self, query: str) -> Optional[ImageDescriptor]:
        self.queries.append(query)
        return self.images[0] if self.images else None


# ---------------------------------------------------------------------------
# Sample content
# ---------------------------------------------------------------------------

REPORT_REPLY: Dict[str, Any] = {
    "title": "Edge Computing for Smart Grids",
    "abstract": "A short summary.",
    "sections": [
        {
            "title": "Introduction",
            "content": "Para one\n\nPara two",
            "subsections": [
                {"title": "Background", "content": "Some **history**."},
            ],
        },
        {"title": "Methodology", "content": "- Survey\n- Prototype"},
    ],
    "references": ["A", "B", "C"],
}


def make_pdf(pages: List[str]) -> bytes:
    """Build a PDF with one line of text per page."""
    doc = fitz.open()
    for text in pages:
        page = doc.new_page()
        if text:
            page.insert_text((72, 72), text)
    data = doc.tobytes()
    doc.close()
    return data


def make_docx(paragraphs: List[str], table: Optional[List[List[str]]] = None) -> bytes:
    doc = DocxDocument()
    for text in paragraphs:
        doc.add_paragraph(text)
    if table:
        t = doc.add_table(rows=len(table), cols=len(table[0]))
        for r, row in enumerate(table):
            for c, value in enumerate(row):
                t.cell(r, c).text = value
    buffer = io.BytesIO()
    doc.save(buffer)
    return buffer.getvalue()


def make_png() -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (8, 8), color=(200, 30, 30)).save(buffer, format="PNG")
    return buffer.getvalue()


# ---------------------------------------------------------------------------
# Per-test fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def fake_ai() -> FakeAI:
    return FakeAI(reply=json.dumps(REPORT_REPLY))


@pytest.fixture
def fake_images() -> FakeImages:
    return FakeImages()


@pytest_asyncio.fixture
async def client(fake_ai: FakeAI, fake_images: FakeImages) -> AsyncGenerator[AsyncClient, None]:
    """
    httpx AsyncClient wired to the FastAPI app with every collaborator
    overridden by a fake.
    """
    store = InMemoryProjectStore()
    pipeline = DocumentPipeline(fake_ai, fake_images)
    extractor = FileExtractor(fake_ai, max_file_size=1024 * 1024)
    chat_service = ChatService(fake_ai)

    app.dependency_overrides[get_gemini] = lambda: fake_ai
    app.dependency_overrides[get_image_service] = lambda: fake_images
    app.dependency_overrides[get_pipeline] = lambda: pipeline
    app.dependency_overrides[get_extractor] = lambda: extractor
    app.dependency_overrides[get_chat_service] = lambda: chat_service
    app.dependency_overrides[get_project_store] = lambda: store

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

AUTH_HEADERS = {"X-User-Id": "test-user-1"}

AUTH_HEADERS_USER2 = {"X-User-Id": "test-user-2"}
