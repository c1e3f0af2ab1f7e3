"""Environment-based configuration using pydantic-settings.

Provides type-safe, validated defaults for the concurrent operations and
for logging. Supports .env files and nested configuration.

Example:
    >>> from collectionkit.foundation.config import get_settings
    >>> settings = get_settings()
    >>> settings.concurrency.substrate
    'asyncio'

    # Or with environment variables:
    # COLLECTIONKIT_CONCURRENCY_DEFAULT_PRIORITY=high
    # COLLECTIONKIT_CONCURRENCY_SUBSTRATE=thread
    # COLLECTIONKIT_LOG_LEVEL=DEBUG
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, PositiveInt, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..priority import Priority


class ConcurrencySettings(BaseSettings):
    """Defaults for the concurrent fan-out operations."""

    model_config = SettingsConfigDict(
        env_prefix="COLLECTIONKIT_CONCURRENCY_",
        extra="ignore",
    )

    default_priority: Priority | None = Field(
        default=None,
        description="Priority hint used when a call passes none",
    )
    substrate: Literal["asyncio", "thread"] = "asyncio"
    thread_workers: PositiveInt | None = Field(
        default=None,
        description="Worker count for the default thread substrate (None = executor default)",
    )

    @field_validator("default_priority", mode="before")
    @classmethod
    def _parse_priority(cls, v: object) -> Priority | None:
        if isinstance(v, str) and not v.strip():
            return None
        return Priority.parse(v)

    @field_validator("substrate", mode="before")
    @classmethod
    def _normalize_substrate(cls, v: object) -> object:
        return v.strip().lower() if isinstance(v, str) else v


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="COLLECTIONKIT_LOG_",
        extra="ignore",
    )

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    format: Literal["console", "json"] = "console"

    @field_validator("level", mode="before")
    @classmethod
    def _upper_level(cls, v: object) -> object:
        return v.upper() if isinstance(v, str) else v


class CollectionkitSettings(BaseSettings):
    """Root settings for collectionkit.

    Example environment variables:
        COLLECTIONKIT_CONCURRENCY_SUBSTRATE=thread
        COLLECTIONKIT_CONCURRENCY_THREAD_WORKERS=8
        COLLECTIONKIT_LOG_FORMAT=json
    """

    model_config = SettingsConfigDict(
        env_prefix="COLLECTIONKIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )

    concurrency: ConcurrencySettings = Field(default_factory=ConcurrencySettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


@lru_cache(maxsize=1)
def get_settings() -> CollectionkitSettings:
    """Get the global settings instance (cached)."""
    return CollectionkitSettings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing).

    After calling this, the next get_settings() call will
    reload configuration from environment.
    """
    get_settings.cache_clear()
