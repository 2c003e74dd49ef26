"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

ADMIN_ROLE = "admin"
USER_ROLE = "user"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    admin_token: str
    api_base_url: str = "http://localhost:8000"
    state_dir: str = ".nutrition_admin"
    search_debounce_ms: int = 400
    default_page_size: int = 12
    query_cache_ttl_seconds: int = 300
    query_cache_max_entries: int = 200
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_user_role(raw: str | None) -> str:
    """Normalize a role header value, defaulting to a regular user."""
    if raw is None:
        return USER_ROLE
    cleaned = raw.strip().lower()
    if cleaned == ADMIN_ROLE:
        return ADMIN_ROLE
    return USER_ROLE
