"""Tests for the Gemini REST client, using httpx.MockTransport."""
import base64
import json

import httpx
import pytest

from papergen.errors import GenerationFailed
from papergen.services.gemini_client import TRANSCRIBE_PROMPT, GeminiService


def _ok(text: str, finish_reason: str = "STOP") -> dict:
    return {"candidates": [{"content": {"parts": [{"text": text}]}, "finishReason": finish_reason}]}


def _service(handler, api_key: str = "test-key") -> GeminiService:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return GeminiService(
        client,
        api_key=api_key,
        model="gemini-test",
        vision_model="gemini-vision-test",
        base_url="https://gemini.test/v1beta",
    )


@pytest.mark.asyncio
async def test_generate_sends_json_mode_request():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["key"] = request.headers["x-goog-api-key"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=_ok('{"title": "T"}'))

    text = await _service(handler).generate(
        "Write about grids", system_instruction="Be JSON", response_format="json", max_tokens=16384
    )

    assert text == '{"title": "T"}'
    assert seen["url"] == "https://gemini.test/v1beta/models/gemini-test:generateContent"
    assert seen["key"] == "test-key"
    body = seen["body"]
    assert body["contents"][0]["parts"][0]["text"] == "Write about grids"
    assert body["systemInstruction"]["parts"][0]["text"] == "Be JSON"
    assert body["generationConfig"]["responseMimeType"] == "application/json"
    assert body["generationConfig"]["maxOutputTokens"] == 16384


@pytest.mark.asyncio
async def test_text_mode_has_no_mime_type():
    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        assert "responseMimeType" not in body["generationConfig"]
        assert "systemInstruction" not in body
        return httpx.Response(200, json=_ok("hello"))

    assert await _service(handler).generate("hi") == "hello"


@pytest.mark.asyncio
async def test_missing_key_fails_without_a_request():
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    service = _service(handler, api_key="")
    assert not service.is_configured
    with pytest.raises(GenerationFailed):
        await service.generate("hi")


@pytest.mark.asyncio
@pytest.mark.parametrize("status,retryable", [(429, True), (503, True), (400, False), (403, False)])
async def test_http_errors_map_to_generation_failed(status, retryable):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status, json={"error": {"message": "nope"}})

    with pytest.raises(GenerationFailed) as exc_info:
        await _service(handler).generate("hi")
    assert exc_info.value.retryable is retryable
    assert exc_info.value.upstream_status == status
    assert "nope" in exc_info.value.message


@pytest.mark.asyncio
async def test_timeout_is_retryable():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow", request=request)

    with pytest.raises(GenerationFailed) as exc_info:
        await _service(handler).generate("hi")
    assert exc_info.value.retryable
    assert exc_info.value.status_code == 503


@pytest.mark.asyncio
async def test_blocked_prompt_fails():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"promptFeedback": {"blockReason": "SAFETY"}})

    with pytest.raises(GenerationFailed) as exc_info:
        await _service(handler).generate("hi")
    assert "SAFETY" in exc_info.value.message


@pytest.mark.asyncio
async def test_empty_candidate_fails():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"candidates": [{"content": {"parts": []}, "finishReason": "OTHER"}]})

    with pytest.raises(GenerationFailed):
        await _service(handler).generate("hi")


@pytest.mark.asyncio
async def test_transcribe_sends_inline_image():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["parts"] = json.loads(request.content)["contents"][0]["parts"]
        return httpx.Response(200, json=_ok("  Scanned words \n"))

    text = await _service(handler).transcribe(b"\x89PNGdata", "image/png")

    assert text == "Scanned words"
    assert seen["url"].endswith("/models/gemini-vision-test:generateContent")
    inline = seen["parts"][0]["inlineData"]
    assert inline["mimeType"] == "image/png"
    assert base64.b64decode(inline["data"]) == b"\x89PNGdata"
    assert seen["parts"][1]["text"] == TRANSCRIBE_PROMPT
