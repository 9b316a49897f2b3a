from __future__ import annotations

from docuextract.application.llm.parsers import parse_document_data, split_data_url
from docuextract.application.llm.prompts import EXTRACTION_RESPONSE_SCHEMA, build_extraction_prompt
from docuextract.domain.ports.extraction_port import ExtractionPort, GenerationPort
from docuextract.domain.records.models import DocumentData
from docuextract.infrastructure.clients.gemini_http import GeminiHttpClient


class GeminiExtractionAdapter(ExtractionPort):
    def __init__(self, client: GeminiHttpClient, *, model: str = "gemini-3-flash-preview") -> None:
        self._client = client
        self._model = model

    async def extract(self, image: str) -> DocumentData:
        mime_type, payload = split_data_url(image)
        data = await self._client.generate_content(
            self._model,
            [
                {"text": build_extraction_prompt()},
                {"inlineData": {"mimeType": mime_type, "data": payload}},
            ],
            generation_config={
                "responseMimeType": "application/json",
                "responseSchema": EXTRACTION_RESPONSE_SCHEMA,
            },
        )
        text = self._client.response_text(data)
        if not text.strip():
            raise RuntimeError("Empty response from AI")
        return parse_document_data(text)


class GeminiImageAdapter(GenerationPort):
    def __init__(self, client: GeminiHttpClient, *, model: str = "gemini-2.5-flash-image") -> None:
        self._client = client
        self._model = model

    async def generate(self, prompt: str) -> str:
        data = await self._client.generate_content(
            self._model,
            [{"text": prompt}],
            generation_config={
                "responseModalities": ["IMAGE"],
                "imageConfig": {"aspectRatio": "1:1"},
            },
        )
        for part in self._client.response_parts(data):
            inline = part.get("inlineData")
            if isinstance(inline, dict) and inline.get("data"):
                mime_type = inline.get("mimeType") or "image/png"
                return f"data:{mime_type};base64,{inline['data']}"
        raise RuntimeError("No image was returned by the generator.")
