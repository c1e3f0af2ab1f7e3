"""Shared fixtures for collectionkit tests."""

from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import Iterator

import pytest

from collectionkit import clear_settings_cache, shutdown_default_substrates


class Collector:
    """Records every element an operation was invoked with.

    Appends are serialized with a lock so the collector is usable from
    executor threads as well as asyncio tasks.
    """

    def __init__(self) -> None:
        self.values: list[int] = []
        self._lock = threading.Lock()

    def collect(self, value: int) -> None:
        with self._lock:
            self.values.append(value)

    async def collect_and_transform(self, value: int) -> str:
        await asyncio.sleep(0)
        self.collect(value)
        return str(value)

    async def try_collect_and_transform(self, value: int, error: Exception | None = None) -> str:
        await asyncio.sleep(0)
        if error is not None:
            raise error
        self.collect(value)
        return str(value)


@pytest.fixture
def collector() -> Collector:
    return Collector()


@pytest.fixture
def array() -> list[int]:
    return [0, 1, 2, 3, 4]


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Isolate tests from COLLECTIONKIT_* variables and cached settings."""
    import os
    for key in list(os.environ):
        if key.startswith("COLLECTIONKIT_"):
            monkeypatch.delenv(key)
    clear_settings_cache()
    yield
    clear_settings_cache()
    shutdown_default_substrates()


@pytest.fixture
def clean_logger() -> Iterator[logging.Logger]:
    """Restore the collectionkit logger after a test installs handlers."""
    logger = logging.getLogger("collectionkit")
    handlers, level = list(logger.handlers), logger.level
    yield logger
    for handler in list(logger.handlers):
        if handler not in handlers:
            logger.removeHandler(handler)
    logger.setLevel(level)
