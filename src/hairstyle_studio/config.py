"""Application configuration."""

import os
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from hairstyle_studio.domain.analysis import AnalysisDefaults

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    openai_api_key: str
    openai_model: str = "gpt-5.2"
    openai_image_model: str = "gpt-image-1"
    openai_reasoning_effort: str | None = "low"
    openai_store: bool = False
    public_base_url: str = "http://localhost:3000"
    uploads_dir: Path = Path("uploads")
    max_upload_bytes: int = 20 * 1024 * 1024
    external_call_timeout_seconds: float = 120.0
    remote_fetch_timeout_seconds: float = 15.0
    analysis_defaults_file: Path | None = None
    cors_allow_origins: str = "*"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_allowed_origins(raw: str) -> list[str]:
    """Parse a comma-separated CORS origin list."""
    origins = [chunk.strip() for chunk in raw.split(",")]
    return [origin for origin in origins if origin] or ["*"]


def load_analysis_defaults(path: Path | None) -> AnalysisDefaults:
    """Load fallback analysis records, overriding the built-in ones."""
    if path is None:
        return AnalysisDefaults()
    return AnalysisDefaults.model_validate_json(path.read_text(encoding="utf-8"))
