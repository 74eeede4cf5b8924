"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    room_images_bucket: str = "room-images"
    bfl_api_key: str
    bfl_base_url: str = "https://api.bfl.ai/v1"
    bfl_model: str = "flux-2-pro"
    bfl_seed: int = 42
    bfl_output_format: str = "jpeg"
    poll_interval_seconds: float = 2.0
    poll_max_attempts: int = 60
    apify_token: str
    apify_actor_id: str = "nMiNd0glV6oqKv78Y"
    apify_base_url: str = "https://api.apify.com/v2"
    apify_wait_for_finish_seconds: int = 300
    scrape_allowed_domains: str | None = "immobilienscout24.de"
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_allowed_domains(raw: str | None) -> frozenset[str] | None:
    """Parse the comma-separated listing source allowlist from env."""
    if raw is None:
        return None
    cleaned = raw.strip()
    if cleaned in {"", "*"}:
        return None
    domains = {
        chunk.strip().lower().lstrip(".") for chunk in cleaned.split(",") if chunk.strip()
    }
    return frozenset(domains) or None
