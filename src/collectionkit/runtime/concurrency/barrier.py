"""Join barrier: structured fan-in over a known set of work units.

The barrier owns every unit spawned through it and never releases the
caller until each one is terminal (value, error, or cancelled), so no unit
outlives the call that spawned it.

Key Features:
    - Positional buffer: results are placed by input index, never by
      completion order
    - Fail-fast: the first observed error triggers a cancellation request
      to every unit still in flight
    - Drain before raise: cancelled units are awaited before the error
      propagates
    - Single error: exactly one error surfaces, unchanged; no aggregation

Error selection:
    Completions are observed in batches. The first batch containing a
    failure decides; within that batch the lowest index wins. Which unit
    fails "first" across concurrent units is a race and not otherwise
    defined.

Example:
    >>> async with JoinBarrier(priority=Priority.HIGH) as barrier:
    ...     for i, url in enumerate(urls):
    ...         barrier.spawn(i, url, functools.partial(fetch, url))
    ...     pages = await barrier.join()
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any, Callable, Generic, TypeVar

from ...foundation.errors import BarrierError, ErrorCode
from ...foundation.priority import Priority
from .substrate import Substrate, get_substrate
from .task import WorkUnit

if TYPE_CHECKING:
    from collections.abc import Awaitable, Iterable
    from types import TracebackType

T = TypeVar("T")

logger = logging.getLogger("collectionkit.barrier")


class JoinBarrier(Generic[T]):
    """Owns the work units of one fan-out call and joins them.

    Must be used as an async context manager. Exiting the context with an
    exception cancels and drains every unit; exiting normally without
    calling join() still waits for all units.
    """

    __slots__ = ("_substrate", "_priority", "_units", "_started", "_closed")

    def __init__(
        self,
        substrate: Substrate | None = None,
        *,
        priority: Priority | None = None,
    ) -> None:
        self._substrate = substrate or get_substrate()
        self._priority = priority
        self._units: dict[int, WorkUnit[T]] = {}
        self._started = False
        self._closed = False

    @property
    def priority(self) -> Priority | None:
        return self._priority

    @property
    def units(self) -> list[WorkUnit[T]]:
        """All units in input order."""
        return sorted(self._units.values(), key=lambda u: u.index)

    def spawn(
        self,
        index: int,
        element: object,
        fn: Callable[[], Awaitable[T] | T],
    ) -> WorkUnit[T]:
        """Spawn one unit for the element at ``index``.

        Raises:
            BarrierError: If used outside the context, after join() started,
                or with an index already spawned
        """
        if not self._started:
            raise BarrierError("JoinBarrier must be used as context manager",
                               code=ErrorCode.BARRIER_NOT_ENTERED)
        if self._closed:
            raise BarrierError("Cannot spawn units after join() started")
        if index in self._units:
            raise BarrierError(f"Unit {index} already spawned", code=ErrorCode.DUPLICATE_INDEX)

        unit: WorkUnit[T] = WorkUnit(index=index, element=element, priority=self._priority)
        unit._future = self._substrate.spawn(
            fn,
            token=unit.token,
            priority=self._priority,
            name=f"collectionkit-unit-{index}",
        )
        self._units[index] = unit
        return unit

    async def join(self) -> list[T]:
        """Wait for every unit; return values ordered by input index.

        Raises:
            BarrierError: If join() was already called
            Exception: The selected unit error, after all units are terminal
            asyncio.CancelledError: If the caller is cancelled (after draining)
        """
        if not self._started:
            raise BarrierError("JoinBarrier must be used as context manager",
                               code=ErrorCode.BARRIER_NOT_ENTERED)
        if self._closed:
            raise BarrierError("join() already called")
        self._closed = True

        ordered = self.units
        position: dict[asyncio.Future[Any], int] = {
            unit._future: pos for pos, unit in enumerate(ordered)  # type: ignore[misc]
        }
        buffer: list[Any] = [None] * len(ordered)
        pending = set(position)
        error: BaseException | None = None

        try:
            while pending:
                done, pending = await asyncio.wait(pending, return_when=asyncio.FIRST_COMPLETED)
                for future in sorted(done, key=position.__getitem__):
                    pos = position[future]
                    failure = _failure_of(future)
                    if error is not None:
                        continue
                    if failure is None:
                        buffer[pos] = future.result()
                        continue
                    error = failure
                    logger.debug(
                        f"unit {ordered[pos].index} failed with {type(failure).__name__}; "
                        f"cancelling {len(pending)} in-flight unit(s)"
                    )
                    self._cancel(ordered[position[f]] for f in pending)
        except asyncio.CancelledError:
            logger.debug(f"join cancelled; draining {len(pending)} unit(s)")
            self._cancel(ordered[position[f]] for f in pending)
            await _drain(pending)
            raise

        if error is not None:
            raise error
        return buffer

    def _cancel(self, units: Iterable[WorkUnit[T]]) -> None:
        for unit in units:
            if not unit.done:
                self._substrate.request_cancel(unit._future, unit.token)  # type: ignore[arg-type]

    async def __aenter__(self) -> JoinBarrier[T]:
        if self._started:
            raise BarrierError("JoinBarrier cannot be re-entered")
        self._started = True
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> bool:
        if exc_val is not None:
            in_flight = [u for u in self._units.values() if not u.done]
            if in_flight:
                logger.debug(f"barrier exited with {exc_type.__name__}; draining {len(in_flight)} unit(s)")
                self._cancel(in_flight)
                await _drain({u._future for u in in_flight})  # type: ignore[misc]
            self._closed = True
            return False

        if not self._closed:
            await self.join()
        return False


def _failure_of(future: asyncio.Future[Any]) -> BaseException | None:
    """Error of a finished future; also marks it retrieved."""
    if future.cancelled():
        return asyncio.CancelledError("work unit was cancelled")
    return future.exception()


async def _drain(futures: set[asyncio.Future[Any]]) -> None:
    """Wait until every future is terminal, discarding outcomes."""
    if not futures:
        return
    await asyncio.wait(futures)
    for future in futures:
        _failure_of(future)
