"""
Gemini text and vision collaborator over the REST ``generateContent`` API.

The service never creates its own HTTP client: one ``httpx.AsyncClient`` is
built in the application lifespan and passed in, so tests can hand it a
client backed by ``httpx.MockTransport``.

Failures (missing key, timeouts, non-2xx, blocked or empty candidates)
raise GenerationFailed; 429, 5xx, timeouts and connection errors are
flagged retryable. Nothing is retried here.
"""
from __future__ import annotations

import base64
import logging
from typing import Any, Dict, List, Optional

import httpx

from papergen.config import settings
from papergen.errors import GenerationFailed

logger = logging.getLogger(__name__)

TRANSCRIBE_PROMPT = (
    "Extract and transcribe all text from this image. Provide only the "
    "extracted text without any additional commentary."
)


class GeminiService:
    """Async wrapper around Gemini ``models/{model}:generateContent``."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        vision_model: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        temperature: Optional[float] = None,
    ) -> None:
        self.client = client
        self.api_key = settings.GEMINI_API_KEY if api_key is None else api_key
        self.model = model or settings.GEMINI_MODEL
        self.vision_model = vision_model or settings.GEMINI_VISION_MODEL
        self.base_url = (base_url or settings.GEMINI_BASE_URL).rstrip("/")
        self.timeout = httpx.Timeout(timeout or settings.GEMINI_TIMEOUT, connect=10.0)
        self.temperature = settings.GEMINI_TEMPERATURE if temperature is None else temperature

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def generate(
        self,
        prompt: str,
        system_instruction: Optional[str] = None,
        response_format: str = "text",
        max_tokens: int = 8192,
        temperature: Optional[float] = None,
    ) -> str:
        """
        Generate text for *prompt*.

        Args:
            prompt: User prompt
            system_instruction: Optional system instruction
            response_format: ``"json"`` to request JSON output, else ``"text"``
            max_tokens: Output token budget
            temperature: Sampling temperature (default from settings)

        Returns:
            The model's text (may still be malformed JSON)

        Raises:
            GenerationFailed
        """
        generation_config: Dict[str, Any] = {
            "temperature": self.temperature if temperature is None else temperature,
            "maxOutputTokens": max_tokens,
        }
        if response_format == "json":
            generation_config["responseMimeType"] = "application/json"

        payload: Dict[str, Any] = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": generation_config,
        }
        if system_instruction:
            payload["systemInstruction"] = {"parts": [{"text": system_instruction}]}

        return await self._generate_content(self.model, payload)

    async def transcribe(self, image_bytes: bytes, mime_type: str) -> str:
        """Transcribe the text visible in an image."""
        payload = {
            "contents": [{
                "role": "user",
                "parts": [
                    {
                        "inlineData": {
                            "mimeType": mime_type,
                            "data": base64.b64encode(image_bytes).decode("ascii"),
                        }
                    },
                    {"text": TRANSCRIBE_PROMPT},
                ],
            }],
        }
        text = await self._generate_content(self.vision_model, payload)
        return text.strip()

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    async def _generate_content(self, model: str, payload: Dict[str, Any]) -> str:
        if not self.is_configured:
            logger.warning("Gemini API key not configured")
            raise GenerationFailed(
                "AI API key not configured. Please add GEMINI_API_KEY to your environment variables."
            )

        url = f"{self.base_url}/models/{model}:generateContent"
        try:
            resp = await self.client.post(
                url,
                json=payload,
                headers={"x-goog-api-key": self.api_key},
                timeout=self.timeout,
            )
        except httpx.TimeoutException as exc:
            logger.error("Gemini request timed out after %.0f s", self.timeout.read or 0)
            raise GenerationFailed("AI service timed out", retryable=True) from exc
        except httpx.HTTPError as exc:
            logger.error("Gemini connection error: %s", exc)
            raise GenerationFailed(f"AI service unreachable: {exc}", retryable=True) from exc

        if resp.status_code != 200:
            message = _error_message(resp)
            retryable = resp.status_code == 429 or resp.status_code >= 500
            logger.error("Gemini returned HTTP %d: %s", resp.status_code, message)
            raise GenerationFailed(
                f"AI service error ({resp.status_code}): {message}",
                retryable=retryable,
                upstream_status=resp.status_code,
            )

        try:
            data = resp.json()
        except ValueError as exc:
            raise GenerationFailed("AI service returned a non-JSON envelope") from exc

        return _candidate_text(data)


def _candidate_text(data: Dict[str, Any]) -> str:
    block_reason = (data.get("promptFeedback") or {}).get("blockReason")
    if block_reason:
        raise GenerationFailed(f"Prompt blocked by the AI service ({block_reason})")

    candidates: List[Dict[str, Any]] = data.get("candidates") or []
    if not candidates:
        raise GenerationFailed("AI service returned no candidates")

    candidate = candidates[0]
    finish_reason = candidate.get("finishReason")
    parts = (candidate.get("content") or {}).get("parts") or []
    text = "".join(part.get("text", "") for part in parts if isinstance(part, dict))

    if not text:
        raise GenerationFailed(f"AI service returned an empty candidate ({finish_reason or 'unknown'})")
    if finish_reason == "MAX_TOKENS":
        logger.warning("Gemini output hit the token limit; reply may be truncated")
    return text


def _error_message(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return resp.text[:300]
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
    return resp.text[:300]
