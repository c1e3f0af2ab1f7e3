"""Concurrent operations built on the fan-out runner.

Every element gets its own work unit; the call returns only after all of
them are terminal. Result values are positionally ordered to match the
input, while execution and side effects across units are unordered.
Compaction and flattening run after the join as pure post-processing.

If any unit fails, exactly one error propagates (which one is a race when
several fail), siblings still in flight are asked to cancel, and no
partial output is returned.

Example:
    >>> users = await concurrent_map(user_ids, api.get_user)
    >>> await concurrent_for_each(paths, upload, priority=Priority.LOW)
    >>> sizes = await concurrent_map(paths, os.path.getsize,
    ...                              substrate=get_substrate("thread"))
"""

from __future__ import annotations

import itertools
from collections.abc import Awaitable, Iterable
from typing import Callable, TypeVar

from ..foundation.priority import Priority
from ..runtime.concurrency.fanout import fan_out
from ..runtime.concurrency.substrate import Substrate

T = TypeVar("T")
R = TypeVar("R")


async def concurrent_for_each(
    elements: Iterable[T],
    operation: Callable[[T], Awaitable[object] | object],
    *,
    priority: Priority | None = None,
    substrate: Substrate | None = None,
) -> None:
    """Run ``operation`` for every element concurrently and wait for all of them."""
    await fan_out(elements, operation, priority=priority, substrate=substrate)


async def concurrent_map(
    elements: Iterable[T],
    transform: Callable[[T], Awaitable[R] | R],
    *,
    priority: Priority | None = None,
    substrate: Substrate | None = None,
) -> list[R]:
    """Transform every element concurrently; result order matches the input.

    Args:
        elements: Ordered input, read once
        transform: Sync or async callable
        priority: Scheduling hint for every unit (None = settings default)
        substrate: Where units run (None = settings default)
    """
    return await fan_out(elements, transform, priority=priority, substrate=substrate)


async def concurrent_compact_map(
    elements: Iterable[T],
    transform: Callable[[T], Awaitable[R | None] | R | None],
    *,
    priority: Priority | None = None,
    substrate: Substrate | None = None,
) -> list[R]:
    """Transform concurrently, dropping ``None`` results; order preserved."""
    values = await fan_out(elements, transform, priority=priority, substrate=substrate)
    return [value for value in values if value is not None]


async def concurrent_flat_map(
    elements: Iterable[T],
    transform: Callable[[T], Awaitable[Iterable[R]] | Iterable[R]],
    *,
    priority: Priority | None = None,
    substrate: Substrate | None = None,
) -> list[R]:
    """Transform each element into an iterable concurrently, concatenated in input order."""
    chunks = await fan_out(elements, transform, priority=priority, substrate=substrate)
    return list(itertools.chain.from_iterable(chunks))
