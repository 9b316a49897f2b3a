from __future__ import annotations

from docuextract.core.config import Settings, get_settings
from docuextract.application.llm.adapters.gemini_adapter import GeminiExtractionAdapter, GeminiImageAdapter
from docuextract.infrastructure.clients.gemini_http import GeminiHttpClient
from docuextract.infrastructure.storage.local_disk_adapter import LocalDiskStateAdapter


def build_state_adapter(settings: Settings | None = None) -> LocalDiskStateAdapter:
    s = settings or get_settings()
    return LocalDiskStateAdapter(base_dir=s.DATA_DIR)


def build_gemini_client(settings: Settings | None = None) -> GeminiHttpClient:
    s = settings or get_settings()
    return GeminiHttpClient(
        base_url=s.GEMINI_BASE_URL,
        api_key=s.GEMINI_API_KEY.get_secret_value() if s.GEMINI_API_KEY else None,
        timeout_seconds=s.REQUEST_TIMEOUT_SECONDS,
        verify_ssl=s.VERIFY_SSL,
        retries=s.RETRIES,
    )


def build_extraction_adapter(settings: Settings | None = None) -> GeminiExtractionAdapter:
    s = settings or get_settings()
    return GeminiExtractionAdapter(build_gemini_client(s), model=s.EXTRACTION_MODEL)


def build_generation_adapter(settings: Settings | None = None) -> GeminiImageAdapter:
    s = settings or get_settings()
    return GeminiImageAdapter(build_gemini_client(s), model=s.GENERATION_MODEL)
