"""Application configuration."""

import os
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    plant_id_api_key: str | None = None
    plant_id_base_url: str = "https://api.plant.id/v2"
    ai_gateway_api_key: str | None = None
    ai_gateway_base_url: str = "https://ai.gateway.lovable.dev/v1"
    verifier_model: str = "google/gemini-2.5-flash"
    identification_model: str = "google/gemini-2.5-flash"
    identification_provider: Literal["plant_id", "llm"] = "plant_id"
    confidence_threshold: float = 0.5
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
