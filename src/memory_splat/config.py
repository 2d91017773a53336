"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    admin_token: str
    sharp_api_base_url: str = "http://localhost:3000/api/sharp"
    sharp_submit_timeout_seconds: float = 300
    sharp_request_timeout_seconds: float = 15
    splat_timeout_ms: int = 180_000
    poll_base_ms: int = 1000
    poll_step_ms: int = 200
    poll_max_ms: int = 5000
    stale_job_ms: int = 300_000
    default_album_name: str = "All Memories"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
