"""Logging configuration for collectionkit."""

from .logging import (
    LOGGER_NAME,
    ConsoleFormatter,
    JsonFormatter,
    configure_logging,
    configure_logging_from_settings,
)

__all__ = [
    "LOGGER_NAME",
    "ConsoleFormatter",
    "JsonFormatter",
    "configure_logging",
    "configure_logging_from_settings",
]
