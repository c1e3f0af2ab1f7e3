"""Sequential runner: one awaited invocation at a time, in input order.

No work units are spawned; every suspension happens on the caller's own
task. The first error aborts iteration immediately, later elements are
never invoked, and any partial output is discarded.

Example:
    >>> async def fetch(url: str) -> bytes: ...
    >>> pages = await async_map(urls, fetch)           # one request at a time
    >>> await async_for_each(rows, db.insert)          # ordered side effects
"""

from __future__ import annotations

from collections.abc import Awaitable, Iterable
from typing import Callable, TypeVar

from ..runtime.concurrency.interop import invoke

T = TypeVar("T")
R = TypeVar("R")


async def async_for_each(
    elements: Iterable[T],
    operation: Callable[[T], Awaitable[object] | object],
) -> None:
    """Run ``operation`` for each element, waiting for each call to finish."""
    for element in elements:
        await invoke(operation, element)


async def async_map(
    elements: Iterable[T],
    transform: Callable[[T], Awaitable[R] | R],
) -> list[R]:
    """Transform each element in order; result order matches the input."""
    values: list[R] = []
    for element in elements:
        values.append(await invoke(transform, element))
    return values


async def async_compact_map(
    elements: Iterable[T],
    transform: Callable[[T], Awaitable[R | None] | R | None],
) -> list[R]:
    """Transform each element in order, dropping ``None`` results."""
    values: list[R] = []
    for element in elements:
        value = await invoke(transform, element)
        if value is None:
            continue
        values.append(value)
    return values


async def async_flat_map(
    elements: Iterable[T],
    transform: Callable[[T], Awaitable[Iterable[R]] | Iterable[R]],
) -> list[R]:
    """Transform each element into an iterable and concatenate them in order."""
    values: list[R] = []
    for element in elements:
        values.extend(await invoke(transform, element))
    return values
