"""
Application settings and configuration.
"""

from typing import Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    app_name: str = "Agent Actions"
    app_version: str = "1.0.0"
    debug: bool = Field(default=False)
    environment: str = Field(default="production")

    # Source of truth (Supabase / PostgREST)
    supabase_url: str = Field(default="http://localhost:54321")
    supabase_service_key: Optional[str] = Field(default=None)
    store_timeout: float = Field(default=10.0)

    # Name -> ID cache
    cache_ttl_seconds: float = Field(default=60 * 60)
    cache_max_entries: int = Field(default=5000)

    # Scheduling
    slot_interval_minutes: int = Field(default=30)
    default_service_duration_minutes: int = Field(default=30)
    default_timezone: str = Field(default="America/Sao_Paulo")
    display_date_format: str = Field(default="%d/%m/%Y")

    # Error tracking
    sentry_dsn: Optional[str] = Field(default=None)

    # Admin API
    admin_token: Optional[str] = Field(default=None)

    # Logging
    log_level: str = Field(default="INFO")

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


def get_settings() -> Settings:
    """Get application settings instance."""
    return Settings()
