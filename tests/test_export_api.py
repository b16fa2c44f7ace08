"""Tests for POST /api/export/{format}."""
import io

import pytest
from docx import Document
from httpx import AsyncClient

DOCUMENT = {
    "documentType": "report",
    "title": "Smart Grids",
    "abstract": "Summary",
    "body": [{"heading": "Intro", "bodyMarkup": "Para one\n\nPara two", "subsections": []}],
    "references": ["A", "B", "C"],
}


@pytest.mark.asyncio
async def test_export_preview_html(client: AsyncClient):
    resp = await client.post("/api/export/preview_html", json=DOCUMENT)
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/html")
    assert '<article class="papergen-preview' in resp.text
    assert "[1] A" in resp.text


@pytest.mark.asyncio
async def test_export_docx_attachment(client: AsyncClient):
    resp = await client.post("/api/export/docx_bytes", json=DOCUMENT)
    assert resp.status_code == 200
    assert resp.headers["content-disposition"] == 'attachment; filename="smart-grids.docx"'
    texts = [p.text for p in Document(io.BytesIO(resp.content)).paragraphs]
    assert texts[0] == "Smart Grids"
    assert "[3] C" in texts


@pytest.mark.asyncio
async def test_export_slide_descriptor(client: AsyncClient):
    resp = await client.post("/api/export/pptx_descriptor", json=DOCUMENT)
    assert resp.status_code == 200
    slides = resp.json()["slides"]
    assert [s["title"] for s in slides] == ["Smart Grids", "Intro"]


@pytest.mark.asyncio
async def test_export_pptx_bytes(client: AsyncClient):
    resp = await client.post("/api/export/pptx", json=DOCUMENT)
    assert resp.status_code == 200
    assert resp.content[:2] == b"PK"


@pytest.mark.asyncio
async def test_export_unknown_format(client: AsyncClient):
    resp = await client.post("/api/export/epub", json=DOCUMENT)
    assert resp.status_code == 400
    assert resp.json()["kind"] == "unsupported_format"


@pytest.mark.asyncio
async def test_export_rejects_blank_title(client: AsyncClient):
    resp = await client.post("/api/export/preview_html", json={**DOCUMENT, "title": "  "})
    assert resp.status_code == 422
