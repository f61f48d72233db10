"""Configuration settings for the metadata extraction service."""

import logging
from typing import Optional

import structlog
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # YouTube Data API v3 (optional, scraping is used without it)
    YOUTUBE_API_KEY: Optional[str] = None

    # HTTP fetching
    USER_AGENT: str = "Mozilla/5.0 (compatible; URLMetadataBot/1.0)"
    REQUEST_TIMEOUT: Optional[float] = None  # seconds, None = transport default

    # Screenshot service
    SCREENSHOT_SERVICE_URL: Optional[str] = None
    SCREENSHOT_TIMEOUT: float = 45.0  # renderer navigation timeout is 30s

    # Field limits
    DESCRIPTION_MAX_LENGTH: int = 200

    # Service
    SERVICE_PORT: int = 8000
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


settings = Settings()


def get_settings() -> Settings:
    """Get the global settings instance."""
    return settings


def setup_logging(log_level: Optional[str] = None) -> None:
    """Configure structured logging."""
    level_name = (log_level or settings.LOG_LEVEL).upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.INFO

    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer()
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
    )
