"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    openai_api_key: str
    openai_model: str = "gpt-4.1"
    openai_reasoning_effort: str | None = None
    openai_store: bool = False
    storage_bucket: str = "inventory-images"
    max_photo_mb: int = 10
    default_safety_factor: float = 0.2
    draft_ttl_seconds: int = 86400
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def max_photo_bytes(self) -> int:
        """Upload size limit in bytes."""
        return self.max_photo_mb * 1024 * 1024
