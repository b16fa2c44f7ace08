"""Tests for the generation pipeline."""
import json

import pytest

from papergen.errors import ErrorKind, GenerationFailed, InvalidRequest, MalformedResponse
from papergen.models.document import DocumentType, GenerationRequest
from papergen.services.generation import DocumentPipeline

from tests.conftest import REPORT_REPLY, FakeAI, FakeImages


def _request(**kwargs) -> GenerationRequest:
    kwargs.setdefault("document_type", DocumentType.REPORT)
    kwargs.setdefault("topic", "Edge Computing")
    return GenerationRequest(**kwargs)


@pytest.mark.asyncio
async def test_generate_builds_calls_and_normalizes():
    ai = FakeAI(reply=json.dumps(REPORT_REPLY))
    document = await DocumentPipeline(ai).generate(_request(document_type=DocumentType.PAPER))

    assert document.title == "Edge Computing for Smart Grids"
    assert document.document_type == DocumentType.PAPER
    call = ai.calls[0]
    assert "Edge Computing" in call["prompt"]
    assert call["response_format"] == "json"
    assert call["max_tokens"] == 32768


@pytest.mark.asyncio
async def test_images_are_attached_when_requested():
    ai = FakeAI(reply=json.dumps(REPORT_REPLY))
    images = FakeImages()
    document = await DocumentPipeline(ai, images).generate(_request(include_images=True))

    assert document.cover_image is not None
    assert all(section.image is not None for section in document.body)
    assert images.queries == ["Edge Computing", "Introduction", "Methodology"]


@pytest.mark.asyncio
async def test_no_image_search_without_include_images():
    images = FakeImages()
    document = await DocumentPipeline(FakeAI(reply=json.dumps(REPORT_REPLY)), images).generate(_request())
    assert images.queries == []
    assert document.cover_image is None


@pytest.mark.asyncio
async def test_image_queries_from_the_model_are_preferred():
    reply = {"title": "Deck", "slides": [{"title": "Grid", "content": ["a"], "imageQuery": "power lines"}]}
    images = FakeImages(images=[])
    document = await DocumentPipeline(FakeAI(reply=json.dumps(reply)), images).generate(
        _request(document_type=DocumentType.SLIDE_DECK, include_images=True)
    )
    assert images.queries[1] == "power lines"
    assert document.body[0].image is None


@pytest.mark.asyncio
async def test_generate_raises_on_blank_topic():
    ai = FakeAI(reply="{}")
    with pytest.raises(InvalidRequest):
        await DocumentPipeline(ai).generate(_request(topic="  "))
    assert ai.calls == []


@pytest.mark.asyncio
async def test_run_returns_error_value_for_malformed_reply():
    result = await DocumentPipeline(FakeAI(reply="I cannot help with that")).run(_request())
    assert not result.ok
    assert result.document is None
    assert isinstance(result.error, MalformedResponse)
    assert result.error_kind == ErrorKind.MALFORMED_RESPONSE


@pytest.mark.asyncio
async def test_run_returns_error_value_for_upstream_failure():
    ai = FakeAI(error=GenerationFailed("quota", retryable=True))
    result = await DocumentPipeline(ai).run(_request())
    assert result.error_kind == ErrorKind.GENERATION_FAILED
    assert result.error.retryable


@pytest.mark.asyncio
async def test_run_success():
    result = await DocumentPipeline(FakeAI(reply=json.dumps(REPORT_REPLY))).run(_request())
    assert result.ok
    assert result.document.references == ["A", "B", "C"]
    assert result.error is None
