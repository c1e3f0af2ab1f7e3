"""Cooperative cancellation signals for work units.

Each spawned work unit carries a CancelToken bound in its own context. The
barrier sets the token when it requests cancellation; the operation decides
whether and when to honour it. Asyncio units additionally receive
``CancelledError`` at their next suspension point, but executor units only
stop early if they poll the token.

Example:
    >>> def crunch(chunk):
    ...     for row in chunk:
    ...         raise_if_cancelled()  # stop early once a sibling failed
    ...         process(row)
"""

from __future__ import annotations

import asyncio
import contextvars
import threading
from dataclasses import dataclass, field

from ...foundation.errors import UnitCancelled

_current_token: contextvars.ContextVar[CancelToken | None] = contextvars.ContextVar(
    "collectionkit_cancel_token", default=None
)


@dataclass(slots=True)
class CancelToken:
    """Thread-safe one-shot cancellation flag."""

    _event: threading.Event = field(default_factory=threading.Event, repr=False)

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise UnitCancelled()


def bind_token(token: CancelToken) -> None:
    """Bind ``token`` as the current unit's token in the active context."""
    _current_token.set(token)


def current_token() -> CancelToken | None:
    """Token of the work unit running in this context, if any."""
    return _current_token.get()


def cancel_requested() -> bool:
    """Whether the current work unit has been asked to stop.

    Always False outside a work unit.
    """
    token = _current_token.get()
    return token is not None and token.cancelled


def raise_if_cancelled() -> None:
    """Raise UnitCancelled if the current work unit has been asked to stop."""
    token = _current_token.get()
    if token is not None:
        token.raise_if_cancelled()


async def checkpoint() -> None:
    """Cooperative cancellation checkpoint.

    Yields control to the event loop so pending task cancellations are
    delivered, then checks the unit's token.
    """
    await asyncio.sleep(0)
    raise_if_cancelled()
