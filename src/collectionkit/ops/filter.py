"""Filter, derived from compact-map in either execution mode."""

from __future__ import annotations

from collections.abc import Awaitable, Iterable
from typing import Callable, TypeVar

from ..foundation.priority import Priority
from ..runtime.concurrency.interop import invoke
from ..runtime.concurrency.substrate import Substrate
from .concurrent import concurrent_compact_map
from .sequential import async_compact_map

T = TypeVar("T")

Predicate = Callable[[T], Awaitable[bool] | bool]


def _keep_if(predicate: Predicate[T]) -> Callable[[T], Awaitable[tuple[T] | None]]:
    # One-slot tuple so that kept ``None`` elements are not compacted away.
    async def keep(element: T) -> tuple[T] | None:
        return (element,) if await invoke(predicate, element) else None
    return keep


async def async_filter(elements: Iterable[T], predicate: Predicate[T]) -> list[T]:
    """Keep elements matching ``predicate``, evaluated one at a time in order."""
    kept = await async_compact_map(elements, _keep_if(predicate))
    return [slot[0] for slot in kept]


async def concurrent_filter(
    elements: Iterable[T],
    predicate: Predicate[T],
    *,
    priority: Priority | None = None,
    substrate: Substrate | None = None,
) -> list[T]:
    """Keep elements matching ``predicate``, evaluated concurrently; order preserved."""
    kept = await concurrent_compact_map(
        elements, _keep_if(predicate), priority=priority, substrate=substrate
    )
    return [slot[0] for slot in kept]
