"""Application configuration using pydantic-settings."""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

FIXTURES_DIR = Path(__file__).resolve().parent / "fixtures"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # App
    debug: bool = False
    log_level: str = "INFO"

    # --- Template manifest ---
    manifest_path: str = str(FIXTURES_DIR / "templates_manifest.json")
    manifest_url: str = ""  # When set, the manifest is fetched over HTTP at startup
    manifest_fetch_timeout_seconds: float = 5.0

    # --- Playground ---
    demo_articles_path: str = str(FIXTURES_DIR / "demo_articles.json")
    playground_recommendation_limit: int = 3

    # --- Recommendations ---
    recommendation_default_limit: int = 5  # HTTP layer only; the library has no default limit
    time_sensitive_window_hours: int = 6


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
