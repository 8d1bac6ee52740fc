"""Application configuration."""

import os
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    openai_api_key: str | None = None
    openai_model: str = "gpt-4.1-nano"
    openai_store: bool = False
    openai_timeout_seconds: float = 30.0
    food_database_base_url: str = "https://world.openfoodfacts.org"
    food_database_user_agent: str = "MacroTracker/1.0 (macro-tracker backend)"
    food_database_timeout_seconds: float = 10.0
    nutrition_search_limit: int = 5
    nutrition_prompt_path: Path | None = None
    nutrition_schema_path: Path | None = None
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def ai_enabled(self) -> bool:
        """Return true when an OpenAI key is configured."""
        return bool(self.openai_api_key and self.openai_api_key.strip())
