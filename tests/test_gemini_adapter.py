from __future__ import annotations

import json

import httpx
import pytest

from docuextract.application.llm.adapters.gemini_adapter import GeminiExtractionAdapter, GeminiImageAdapter
from docuextract.domain.errors.classifier import ErrorKind, classify_error
from docuextract.infrastructure.clients.gemini_http import GeminiHttpClient


BASE_URL = "https://example.com/v1beta"
EXTRACT_PATH = "/v1beta/models/gemini-3-flash-preview:generateContent"
IMAGE_PATH = "/v1beta/models/gemini-2.5-flash-image:generateContent"


def _fields_json() -> str:
    return json.dumps({
        "documentType": {"value": "Quotation", "confidence": 0.9},
        "dealerName": {"value": "Beta Motors", "confidence": 0.8},
        "modelName": {"value": "B-45", "confidence": 0.85},
        "horsePower": {"value": 45, "confidence": 0.9},
        "assetCost": {"value": 540000, "confidence": 0.95},
        "dealerSignature": {"value": False, "confidence": 0.7},
        "dealerStamp": {"value": True, "confidence": 0.75},
    })


def _text_response(text: str) -> dict:
    return {"candidates": [{"content": {"parts": [{"text": text}]}, "finishReason": "STOP"}]}


def _client(handler, *, api_key: str | None = "test-key") -> GeminiHttpClient:
    return GeminiHttpClient(
        base_url=BASE_URL,
        api_key=api_key,
        timeout_seconds=5,
        verify_ssl=True,
        retries=0,
        transport=httpx.MockTransport(handler),
    )


async def test_extraction_success() -> None:
    seen: dict = {}

    def handler(request: httpx.Request) -> httpx.Response:  # type: ignore[override]
        if request.method == "POST" and request.url.path == EXTRACT_PATH:
            seen["key"] = request.headers.get("x-goog-api-key")
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json=_text_response(_fields_json()))
        return httpx.Response(404, json={"detail": "not found"})

    adapter = GeminiExtractionAdapter(_client(handler))
    data = await adapter.extract("data:image/png;base64,QUJD")

    assert data.document_type.value == "Quotation"
    assert data.asset_cost.value == 540000.0
    assert data.dealer_stamp.value is True

    assert seen["key"] == "test-key"
    parts = seen["body"]["contents"][0]["parts"]
    assert parts[1] == {"inlineData": {"mimeType": "image/png", "data": "QUJD"}}
    assert seen["body"]["generationConfig"]["responseMimeType"] == "application/json"


async def test_extraction_empty_response() -> None:
    def handler(request: httpx.Request) -> httpx.Response:  # type: ignore[override]
        return httpx.Response(200, json=_text_response("   "))

    with pytest.raises(RuntimeError) as info:
        await GeminiExtractionAdapter(_client(handler)).extract("QUJD")
    assert classify_error(info.value).kind is ErrorKind.QUALITY


async def test_extraction_not_json() -> None:
    def handler(request: httpx.Request) -> httpx.Response:  # type: ignore[override]
        return httpx.Response(200, json=_text_response("Sorry, I cannot read this."))

    with pytest.raises(ValueError) as info:
        await GeminiExtractionAdapter(_client(handler)).extract("QUJD")
    assert classify_error(info.value).kind is ErrorKind.QUALITY


@pytest.mark.parametrize(
    "body",
    [
        {"promptFeedback": {"blockReason": "SAFETY"}},
        {"candidates": [{"finishReason": "SAFETY", "content": {"parts": []}}]},
    ],
)
async def test_blocked_content(body: dict) -> None:
    def handler(request: httpx.Request) -> httpx.Response:  # type: ignore[override]
        return httpx.Response(200, json=body)

    with pytest.raises(RuntimeError) as info:
        await GeminiExtractionAdapter(_client(handler)).extract("QUJD")
    assert classify_error(info.value).kind is ErrorKind.FORMAT


async def test_connection_failure_is_network() -> None:
    def handler(request: httpx.Request) -> httpx.Response:  # type: ignore[override]
        raise httpx.ConnectError("Connection refused", request=request)

    with pytest.raises(httpx.TransportError) as info:
        await GeminiExtractionAdapter(_client(handler)).extract("QUJD")
    assert classify_error(info.value).kind is ErrorKind.NETWORK


async def test_http_error_status_raises() -> None:
    def handler(request: httpx.Request) -> httpx.Response:  # type: ignore[override]
        return httpx.Response(500, json={"error": {"message": "internal"}})

    with pytest.raises(httpx.HTTPStatusError):
        await GeminiExtractionAdapter(_client(handler)).extract("QUJD")


async def test_missing_api_key() -> None:
    def handler(request: httpx.Request) -> httpx.Response:  # type: ignore[override]
        return httpx.Response(200, json=_text_response(_fields_json()))

    with pytest.raises(RuntimeError, match="API key"):
        await GeminiExtractionAdapter(_client(handler, api_key=None)).extract("QUJD")


async def test_image_generation() -> None:
    def handler(request: httpx.Request) -> httpx.Response:  # type: ignore[override]
        if request.url.path == IMAGE_PATH:
            body = json.loads(request.content)
            assert body["generationConfig"]["responseModalities"] == ["IMAGE"]
            return httpx.Response(200, json={
                "candidates": [{"content": {"parts": [
                    {"text": "Here is your invoice"},
                    {"inlineData": {"mimeType": "image/png", "data": "UE5H"}},
                ]}}]
            })
        return httpx.Response(404, json={"detail": "not found"})

    image = await GeminiImageAdapter(_client(handler)).generate("a tractor invoice")
    assert image == "data:image/png;base64,UE5H"


async def test_image_generation_without_image() -> None:
    def handler(request: httpx.Request) -> httpx.Response:  # type: ignore[override]
        return httpx.Response(200, json=_text_response("no image today"))

    with pytest.raises(RuntimeError, match="No image"):
        await GeminiImageAdapter(_client(handler)).generate("a tractor invoice")


@pytest.mark.parametrize(
    "body",
    [
        {"candidates": ["not a candidate"]},
        {"candidates": [{"content": "text", "finishReason": ["SAFETY"]}]},
        {"candidates": {"content": {}}, "promptFeedback": "none"},
    ],
)
async def test_malformed_candidates_are_a_quality_failure(body: dict) -> None:
    def handler(request: httpx.Request) -> httpx.Response:  # type: ignore[override]
        return httpx.Response(200, json=body)

    with pytest.raises(RuntimeError, match="Empty response") as info:
        await GeminiExtractionAdapter(_client(handler)).extract("QUJD")
    assert classify_error(info.value).kind is ErrorKind.QUALITY
