"""Application configuration."""

import os
from datetime import date, datetime
from zoneinfo import ZoneInfo

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    admin_token: str
    openai_api_key: str
    openai_model: str = "gpt-4.1-mini"
    openai_timeout_seconds: float = 30.0
    push_service_url: str
    push_service_token: str | None = None
    expiry_threshold_days: int = 3
    waste_value_per_item: float = 3.5
    co2_kg_per_item: float = 0.8
    timezone: str = "UTC"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def today_in(timezone_name: str) -> date:
    """Return the current calendar day in a timezone."""
    return datetime.now(tz=ZoneInfo(timezone_name)).date()
