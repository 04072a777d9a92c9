"""
Settings - Application configuration using Pydantic Settings.

Loads from FILESIFT_* environment variables and .env files.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    # Paths
    data_dir: Path = Path("data")
    db_path: Path = Path("data/filesift.db")
    history_path: Path = Path("data/search_history.json")
    history_max_count: int = 20

    # Everything (external filename index, HTTP server mode)
    everything_url: str = "http://127.0.0.1:8080"
    everything_executable: Path | None = None
    everything_timeout: float = 10.0
    engine_init_timeout: float = 5.0
    engine_poll_interval: float = 0.1

    # Search
    search_page_size: int = 1000
    search_max_results: int = 5000
    search_max_display_files: int = 100
    search_page_delay: float = 0.0
    cache_ttl_seconds: float = 30.0

    # API
    api_host: str = "127.0.0.1"
    api_port: int = 8000
    api_debug: bool = False

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="FILESIFT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
