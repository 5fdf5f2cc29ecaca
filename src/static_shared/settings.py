"""Environment settings using Pydantic Settings."""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from .config import StaticSharedConfig
from .headers import TEN_YEARS_SECONDS


class StaticSharedSettings(BaseSettings):
    """Middleware settings loaded from STATIC_SHARED_* environment variables."""

    model_config = SettingsConfigDict(env_prefix="STATIC_SHARED_", env_file=None)

    MAX_AGE_SECONDS: int = TEN_YEARS_SECONDS
    EXPIRES_YEARS: int = 10
    RETRY_AFTER_SECONDS: int = 10
    CONCURRENT_FETCH: bool = False
    SINGLE_FLIGHT: bool = False

    # Memory store limits
    CACHE_MAX_ENTRIES: int = 1000
    CACHE_MAX_SIZE: int = 100 * 1024 * 1024


@lru_cache()
def get_settings() -> StaticSharedSettings:
    """Get cached settings instance."""
    return StaticSharedSettings()


def load_config_from_settings(
    settings: Optional[StaticSharedSettings] = None,
) -> StaticSharedConfig:
    """Build middleware configuration from environment settings."""
    settings = settings or get_settings()
    return StaticSharedConfig(
        max_age_seconds=settings.MAX_AGE_SECONDS,
        expires_years=settings.EXPIRES_YEARS,
        retry_after_seconds=settings.RETRY_AFTER_SECONDS,
        concurrent_fetch=settings.CONCURRENT_FETCH,
        single_flight=settings.SINGLE_FLIGHT,
    )
