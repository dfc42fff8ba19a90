"""
Application Configuration

All settings loaded from environment variables.
"""

from functools import lru_cache
from typing import Optional
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings from environment variables."""

    # Application
    app_name: str = "Signal Engine"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: str = "development"
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # API key expected in the X-API-Key header (disabled when unset)
    api_key: Optional[str] = None

    # Yahoo Finance chart API
    yahoo_base_url: str = "https://query1.finance.yahoo.com"
    yahoo_timeout_seconds: float = 10.0

    # Rate limiting / retries
    rate_limit_delay_ms: int = 2000  # Minimum spacing between provider requests
    max_retries: int = 3
    backoff_unit_seconds: float = 1.0

    # Signal defaults
    default_interval: str = "1wk"
    ohlc_jitter: float = 0.01
    ohlc_seed: Optional[int] = None  # Fixed seed makes synthetic OHLC reproducible

    # Telegram notifications
    telegram_token: Optional[str] = None
    telegram_chat_id: Optional[str] = None
    telegram_base_url: str = "https://api.telegram.org"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
