"""
Application configuration using Pydantic Settings.

Loads configuration from environment variables and .env files.
"""

from decimal import Decimal
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
    APP_NAME: str = "Portfolio Relay"
    APP_VERSION: str = "0.1.0"
    ENVIRONMENT: Literal["local", "development", "staging", "production"] = "local"
    LOG_LEVEL: str = "INFO"
    DEBUG: bool = False

    # Redis
    REDIS_URL: str = "redis://localhost:6379/0"
    REDIS_MAX_CONNECTIONS: int = 50

    # Cache
    CACHE_BACKEND: Literal["redis", "memory"] = "redis"
    CACHE_TTL_SECONDS: int = 60  # 86400 for the daily deployment
    CACHE_WRITE_STRATEGY: Literal["diff", "overwrite"] = "diff"

    # Upstream document
    UPSTREAM_DATA_URL: str = (
        "https://raw.githubusercontent.com/VedalAI/neuro-stocks-data/refs/heads/main/portfolio.json"
    )
    UPSTREAM_TIMEOUT_SEC: float = 5.0

    # HTTP responses
    CLIENT_CACHE_MAX_AGE: int = 60
    DISPLAY_EQUITY_OFFSET: Decimal = Decimal("0")

    # Celery
    CELERY_BROKER_URL: str = "redis://localhost:6379/1"
    CELERY_RESULT_BACKEND: str = "redis://localhost:6379/2"
    CELERY_TIMEZONE: str = "UTC"
    REFRESH_INTERVAL_SECONDS: int = 60

    # CORS
    CORS_ORIGINS: list[str] = ["*"]


# Global settings instance
settings = Settings()
