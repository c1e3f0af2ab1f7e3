"""Optional-value lift for (possibly async) transforms."""

from __future__ import annotations

from collections.abc import Awaitable
from typing import Callable, TypeVar

from ..runtime.concurrency.interop import invoke

T = TypeVar("T")
R = TypeVar("R")


async def map_optional(
    value: T | None,
    transform: Callable[[T], Awaitable[R] | R],
) -> R | None:
    """Apply ``transform`` to ``value`` unless it is None.

    ``transform`` is never called for None, and called exactly once
    otherwise; its errors propagate unchanged.
    """
    if value is None:
        return None
    return await invoke(transform, value)
