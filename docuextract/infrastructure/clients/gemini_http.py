from __future__ import annotations

from typing import Any

import httpx

from docuextract.core.logging import get_logger
from docuextract.observability.retries import async_retry

_logger = get_logger(__name__)


class GeminiHttpClient:
    """Thin async client for the Gemini ``generateContent`` REST endpoint."""

    def __init__(
        self,
        base_url: str,
        api_key: str | None,
        timeout_seconds: int,
        verify_ssl: bool = True,
        retries: int = 2,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._timeout_seconds = timeout_seconds
        self._verify_ssl = verify_ssl
        self._retries = retries
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        if not self._api_key:
            raise RuntimeError("Gemini API key is not configured")
        return httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._timeout_seconds,
            verify=self._verify_ssl,
            transport=self._transport,
            headers={"x-goog-api-key": self._api_key},
        )

    async def generate_content(
        self,
        model: str,
        parts: list[dict[str, Any]],
        *,
        generation_config: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {"contents": [{"parts": parts}]}
        if generation_config:
            payload["generationConfig"] = generation_config

        async def _post() -> dict[str, Any]:
            async with self._client() as client:
                resp = await client.post(f"/models/{model}:generateContent", json=payload)
                resp.raise_for_status()
                return resp.json()

        data = await async_retry(_post, retries=self._retries, exceptions=(httpx.TransportError,))
        if not isinstance(data, dict):
            raise RuntimeError("Gemini response is not a JSON object")
        _raise_if_blocked(data)
        return data

    @staticmethod
    def response_parts(data: dict[str, Any]) -> list[dict[str, Any]]:
        candidate = _first_candidate(data)
        content = candidate.get("content")
        if not isinstance(content, dict):
            return []
        parts = content.get("parts")
        if not isinstance(parts, list):
            return []
        return [p for p in parts if isinstance(p, dict)]

    @classmethod
    def response_text(cls, data: dict[str, Any]) -> str:
        return "".join(p["text"] for p in cls.response_parts(data) if isinstance(p.get("text"), str))


def _first_candidate(data: dict[str, Any]) -> dict[str, Any]:
    """First response candidate; {} when the body has none or it is malformed."""
    candidates = data.get("candidates")
    if not isinstance(candidates, list) or not candidates or not isinstance(candidates[0], dict):
        return {}
    return candidates[0]


def _raise_if_blocked(data: dict[str, Any]) -> None:
    feedback = data.get("promptFeedback")
    reason = feedback.get("blockReason") if isinstance(feedback, dict) else None
    if reason:
        _logger.warning("gemini_prompt_blocked", extra={"reason": reason})
        raise RuntimeError(f"Request blocked by safety filters ({reason})")
    reason = _first_candidate(data).get("finishReason")
    if isinstance(reason, str) and reason in {"SAFETY", "PROHIBITED_CONTENT", "BLOCKLIST"}:
        _logger.warning("gemini_response_blocked", extra={"reason": reason})
        raise RuntimeError(f"Response blocked by safety filters ({reason})")
