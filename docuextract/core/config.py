from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


def _default_data_dir() -> Path:
    # <repo>/data
    return (Path(__file__).resolve().parents[2] / "data").resolve()


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="DOCUEXTRACT_", env_file=".env", extra="ignore")

    APP_NAME: str = Field(default="docuextract")
    ENV: str = Field(default="dev")
    LOG_LEVEL: str = Field(default="INFO")
    DATA_DIR: Path = Field(default_factory=_default_data_dir)

    # Gemini REST API
    GEMINI_API_KEY: SecretStr | None = Field(default=None)
    GEMINI_BASE_URL: str = Field(default="https://generativelanguage.googleapis.com/v1beta")
    EXTRACTION_MODEL: str = Field(default="gemini-3-flash-preview")
    GENERATION_MODEL: str = Field(default="gemini-2.5-flash-image")
    REQUEST_TIMEOUT_SECONDS: int = Field(default=60)
    VERIFY_SSL: bool = Field(default=True)
    RETRIES: int = Field(default=2)

    # Review
    COST_PER_EXTRACTION_USD: float = Field(default=0.002)
    OPERATOR_NAME: str = Field(default="Operator")
    DEFAULT_THEME: Literal["light", "dark"] = Field(default="light")
    MAX_UPLOAD_MB: int = Field(default=10)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()  # type: ignore[call-arg]
