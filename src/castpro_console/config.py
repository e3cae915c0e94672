"""Application configuration."""

import os
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Console settings loaded from environment variables."""

    api_base_url: str = "http://localhost:8000/api"
    credential_store_path: Path = Path.home() / ".castpro" / "credentials.json"
    request_timeout_seconds: float = 15
    verify_media: bool = True
    cache_ttl_seconds: int = 30
    confirmation_ttl_seconds: int = 300
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_prefix="CASTPRO_",
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def storage_base_url(api_base_url: str) -> str:
    """Derive the static storage host from the API base URL."""
    cleaned = api_base_url.strip().rstrip("/")
    if cleaned.endswith("/api"):
        cleaned = cleaned[: -len("/api")]
    return cleaned
