"""
Application configuration using Pydantic Settings.
Loads from environment variables and .env file.
"""

from __future__ import annotations

import os
import tempfile
from functools import lru_cache
from urllib.parse import urlparse

from pydantic_settings import BaseSettings, SettingsConfigDict


def _default_data_dir() -> str:
    return os.path.join(tempfile.gettempdir(), "trippy-tracker")


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Trippy Tracker"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: str = "development"
    log_level: str = "INFO"

    # API
    api_v1_prefix: str = "/api/v1"
    port: int = 3000

    # Redirect target for click events; empty means unconfigured
    landing_base: str = ""

    # Storage
    storage_backend: str = "jsonl"  # jsonl, sql
    data_dir: str = _default_data_dir()
    database_url: str = ""

    # Tracking
    ip_hash_length: int = 16

    # Rate limiting (stats routes only)
    rate_limit_enabled: bool = True
    stats_rate_limit: str = "60/minute"

    @property
    def landing_base_url(self) -> str:
        """Landing base with surrounding whitespace removed."""
        return (self.landing_base or "").strip()

    @property
    def sql_url(self) -> str:
        """Build the async SQLAlchemy URL for the sql backend."""
        if self.database_url:
            return self.database_url
        return f"sqlite+aiosqlite:///{os.path.join(self.data_dir, 'events.db')}"

    def validate_production_settings(self) -> None:
        """
        Validate critical settings for production deployment.
        Raises ValueError if any critical settings are missing or malformed.
        """
        if self.environment == "production":
            errors = []

            landing = self.landing_base_url
            if not landing:
                errors.append("LANDING_BASE must be set in production")
            else:
                parsed = urlparse(landing)
                if parsed.scheme not in ("http", "https") or not parsed.netloc:
                    errors.append("LANDING_BASE must be an absolute http(s) URL")

            if self.storage_backend not in ("jsonl", "sql"):
                errors.append(f"STORAGE_BACKEND must be 'jsonl' or 'sql', got {self.storage_backend!r}")

            if errors:
                raise ValueError(
                    "Production configuration validation failed:\n" +
                    "\n".join(f"  - {error}" for error in errors)
                )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
