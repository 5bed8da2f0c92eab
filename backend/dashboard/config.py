"""Application configuration using Pydantic Settings."""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Dashboard"
    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = False
    log_level: str = "INFO"

    # Storage
    data_dir: Path = Path("data")
    static_dir: Path = Path("static")
    main_page: str = "index.html"

    # Single-user setup
    default_user: str = "junior"
    user_display_name: str = "Junior"

    # CORS
    cors_origins: list[str] = ["*"]

    # Document limits
    chat_history_limit: int = 50
    chat_recent_limit: int = 20
    sync_journal_limit: int = 100

    # Offline worker (proxy in front of the REST API)
    worker_upstream_url: str = "http://localhost:8080"
    worker_cache_name: str = "dashboard-v4"
    worker_precache_urls: list[str] = [
        "./",
        "./index.html",
        "./stats.html",
        "./settings.html",
        "./manifest.json",
        "./icon.svg",
        "./apple-touch-icon.png",
        "./apple-touch-icon-120x120.png",
        "./apple-touch-icon-precomposed.png",
    ]
    worker_main_page: str = "./index.html"
    worker_background_sync: bool = True
    worker_periodic_sync_seconds: int = 0  # 0 disables the daily reminder loop
    worker_request_timeout: float = 10.0
    worker_notification_icon: str = "./apple-touch-icon.png"
    worker_notification_badge: str = "./apple-touch-icon-120x120.png"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def configure_logging(settings: Settings) -> None:
    """Apply the configured log level to the root logger."""
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def sanitize_error(error: Exception, *, generic_message: str = "An internal error occurred.") -> str:
    """
    Return a user-safe error message.

    In development, returns the full exception string for debugging.
    In staging/production, returns a generic message to avoid leaking internals.
    """
    settings = get_settings()
    if settings.environment == "development":
        return str(error)
    return generic_message
