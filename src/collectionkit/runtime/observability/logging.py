"""Log output configuration for the ``collectionkit`` logger namespace.

Library modules log through stdlib loggers (``collectionkit.barrier``,
``collectionkit.fanout``). Nothing is emitted until an application calls
configure_logging(); the library itself never installs handlers at import.

Formats:
    - console: ``10:30:45.123 [debug] collectionkit.fanout fan-out spawned 3 unit(s)``
    - json: one JSON object per line (serialized with orjson)

Example:
    >>> from collectionkit import configure_logging
    >>> configure_logging(format="json", level="DEBUG")
"""

from __future__ import annotations

import logging
import sys
from datetime import UTC, datetime
from typing import TextIO

import orjson

from ...foundation.config import get_settings

LOGGER_NAME = "collectionkit"

_HANDLER_ATTR = "_collectionkit_handler"


class ConsoleFormatter(logging.Formatter):
    """Human-readable output. Format: timestamp [level] logger message."""

    def format(self, record: logging.LogRecord) -> str:
        ts = datetime.fromtimestamp(record.created, tz=UTC).strftime("%H:%M:%S.%f")[:-3]
        line = f"{ts} [{record.levelname.lower()}] {record.name} {record.getMessage()}"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


class JsonFormatter(logging.Formatter):
    """JSON Lines output for log aggregation."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, object] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "event": record.getMessage(),
        }
        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)
        return orjson.dumps(entry, default=str).decode()


def configure_logging(
    format: str = "console",  # noqa: A002 - matches settings field name
    level: str = "INFO",
    *,
    output: TextIO | None = None,
) -> logging.Handler:
    """Install one handler on the ``collectionkit`` logger.

    Calling again replaces the previously installed handler.
    """
    match format:
        case "console": formatter: logging.Formatter = ConsoleFormatter()
        case "json": formatter = JsonFormatter()
        case _: raise ValueError(f"Unknown format: {format}. Use 'console' or 'json'")

    logger = logging.getLogger(LOGGER_NAME)
    for existing in list(logger.handlers):
        if getattr(existing, _HANDLER_ATTR, False):
            logger.removeHandler(existing)

    handler = logging.StreamHandler(output or sys.stderr)
    handler.setFormatter(formatter)
    setattr(handler, _HANDLER_ATTR, True)
    logger.addHandler(handler)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    return handler


def configure_logging_from_settings(*, output: TextIO | None = None) -> logging.Handler:
    """Apply ``settings.logging`` (COLLECTIONKIT_LOG_*)."""
    settings = get_settings().logging
    return configure_logging(format=settings.format, level=settings.level, output=output)
