"""Configuration loaded from COLLECTIONKIT_* environment variables."""

from .settings import (
    CollectionkitSettings,
    ConcurrencySettings,
    LoggingSettings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    "CollectionkitSettings",
    "ConcurrencySettings",
    "LoggingSettings",
    "get_settings",
    "clear_settings_cache",
]
