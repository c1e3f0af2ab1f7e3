"""Sync/async call bridging.

Operations handed to collectionkit may be plain functions or coroutine
functions (or any callable returning an awaitable). These helpers call them
uniformly.
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Awaitable, Coroutine
from typing import Callable, TypeVar

T = TypeVar("T")


async def invoke(func: Callable[..., Awaitable[T] | T], *args: object) -> T:
    """Call ``func`` and await the result only when it is awaitable."""
    result = func(*args)
    if inspect.isawaitable(result):
        return await result
    return result


async def as_coroutine(awaitable: Awaitable[T]) -> T:
    """Wrap any awaitable in a coroutine (asyncio.run only accepts coroutines)."""
    return await awaitable


def run_to_value(func: Callable[[], Awaitable[T] | T]) -> T:
    """Call ``func`` from a thread without a running loop.

    Awaitable results are driven to completion on a fresh event loop.
    """
    result = func()
    if inspect.isawaitable(result):
        coro: Coroutine[object, object, T] = (
            result if inspect.iscoroutine(result) else as_coroutine(result)
        )
        return asyncio.run(coro)
    return result
