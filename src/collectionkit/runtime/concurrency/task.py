"""Work units: one element plus the caller's operation, spawned on a substrate.

A WorkUnit is identified by the input position of its element, never by
completion time. It exposes state and outcome without exposing the
underlying future directly.

Example:
    >>> async with JoinBarrier() as barrier:
    ...     unit = barrier.spawn(0, "a", functools.partial(fetch, "a"))
    ...     await barrier.join()
    >>> unit.state
    <UnitState.COMPLETED: 'completed'>
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Generic, TypeVar

from ...foundation.priority import Priority
from .cancel import CancelToken

T = TypeVar("T")


class UnitState(StrEnum):
    """Work unit lifecycle states."""
    PENDING = "pending"      # Not yet spawned
    RUNNING = "running"      # Spawned, not terminal
    COMPLETED = "completed"  # Produced a value
    FAILED = "failed"        # Raised an error
    CANCELLED = "cancelled"  # Stopped by cancellation


@dataclass(slots=True)
class WorkUnit(Generic[T]):
    """Handle to one spawned execution of the operation over one element.

    Attributes:
        index: Position of the element in the ordered input
        element: The element the operation runs on
        priority: Scheduling hint forwarded at spawn time
        token: Cooperative cancellation flag visible inside the unit
    """

    index: int
    element: Any = field(repr=False)
    priority: Priority | None = None
    token: CancelToken = field(default_factory=CancelToken, repr=False)
    _future: asyncio.Future[T] | None = field(default=None, repr=False)

    @property
    def state(self) -> UnitState:
        """Current unit state."""
        if self._future is None:
            return UnitState.PENDING
        if self._future.cancelled():
            return UnitState.CANCELLED
        if self._future.done():
            return UnitState.FAILED if self._future.exception() else UnitState.COMPLETED
        return UnitState.RUNNING

    @property
    def done(self) -> bool:
        """Whether the unit reached a terminal state."""
        return self._future is not None and self._future.done()

    @property
    def cancel_requested(self) -> bool:
        return self.token.cancelled

    def result(self) -> T:
        """Get the unit's value.

        Raises:
            RuntimeError: If the unit was never spawned
            asyncio.InvalidStateError: If the unit is still running
            Exception: The operation's own error if it failed
            asyncio.CancelledError: If the unit was cancelled
        """
        if self._future is None:
            raise RuntimeError("Work unit not spawned")
        return self._future.result()

    def exception(self) -> BaseException | None:
        """Get the unit's error, or None if it succeeded or is not terminal."""
        if self._future is None or not self._future.done():
            return None
        if self._future.cancelled():
            return asyncio.CancelledError()
        return self._future.exception()

    async def wait(self) -> T:
        """Wait for the unit and return its value (or raise its error)."""
        if self._future is None:
            raise RuntimeError("Work unit not spawned")
        return await self._future
