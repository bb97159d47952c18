"""
Centralized configuration for the marketplace backend.

All environment variables and settings should be defined here
to avoid duplication across modules.
"""
import os
from functools import lru_cache


class Settings:
    """Application settings loaded from environment variables."""

    # CORS - comma-separated list of allowed origins
    ALLOWED_ORIGINS: list = os.environ.get(
        "ALLOWED_ORIGINS",
        "http://localhost:3000,http://127.0.0.1:3000"
    ).split(",")

    # Database
    DB_PATH: str = os.environ.get("MARKETPLACE_DB_PATH", "data/marketplace.db")

    # API key for protecting vendor pool administration (optional)
    API_KEY: str = os.environ.get("MARKETPLACE_API_KEY", "")

    # Category alignment for quote comparison: "exact" or "alias"
    CATEGORY_MATCHING: str = os.environ.get("CATEGORY_MATCHING", "exact").lower()
    CATEGORY_CONFIG_PATH: str = os.environ.get("CATEGORY_CONFIG_PATH", "")

    # Background SLA sweep
    ENABLE_WORKER: bool = os.environ.get("ENABLE_WORKER", "true").lower() in ("1", "true", "yes")
    SLA_SWEEP_MINUTES: int = int(os.environ.get("SLA_SWEEP_MINUTES", "10"))


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Singleton instance for easy import
settings = get_settings()
