"""Concurrent fan-out runner.

Spawns one work unit per input element and joins them through a
JoinBarrier, returning a buffer whose slot ``i`` holds the outcome of
``elements[i]``. There is no throttling: all units are spawned as the input
is read. Callers needing bounded concurrency must chunk the input.
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Awaitable, Iterable
from typing import Callable, TypeVar

from ...foundation.config import get_settings
from ...foundation.priority import Priority
from .barrier import JoinBarrier
from .substrate import Substrate, get_substrate

T = TypeVar("T")
R = TypeVar("R")

logger = logging.getLogger("collectionkit.fanout")


def resolve_priority(priority: Priority | None) -> Priority | None:
    """Explicit hint, else the configured default."""
    return priority if priority is not None else get_settings().concurrency.default_priority


async def fan_out(
    elements: Iterable[T],
    operation: Callable[[T], Awaitable[R] | R],
    *,
    priority: Priority | None = None,
    substrate: Substrate | None = None,
) -> list[R]:
    """Run ``operation`` on every element concurrently; results in input order.

    The input is read exactly once. If reading it fails part-way, units
    already spawned are cancelled and drained before the error propagates.

    Args:
        elements: Ordered input
        operation: Sync or async callable applied to each element
        priority: Hint attached to every unit (None = settings default)
        substrate: Where units run (None = settings default)

    Returns:
        Positional result buffer

    Raises:
        Exception: One unit error, once every unit is terminal
    """
    hint = resolve_priority(priority)
    async with JoinBarrier(substrate or get_substrate(), priority=hint) as barrier:
        spawned = 0
        for index, element in enumerate(elements):
            barrier.spawn(index, element, functools.partial(operation, element))
            spawned += 1
        logger.debug(f"fan-out spawned {spawned} unit(s) (priority={hint!r})")
        return await barrier.join()
