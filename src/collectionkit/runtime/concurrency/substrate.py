"""Execution substrates that actually run work units.

collectionkit does not schedule anything itself. A Substrate spawns one
independent unit of work and hands back an ``asyncio.Future`` handle; the
join barrier awaits those handles and asks the substrate to cancel them.

Bundled substrates:
    - AsyncioSubstrate: one asyncio.Task per unit (default)
    - ExecutorSubstrate: adapts any concurrent.futures.Executor; sync
      operations run in workers, awaitable results are driven to completion
      inside the worker

Cancellation timing:
    - AsyncioSubstrate: request_cancel() sets the unit's token and calls
      Task.cancel(); CancelledError is delivered at the unit's next await.
      A unit that never awaits runs to completion.
    - ExecutorSubstrate: request_cancel() sets the unit's token and calls
      Future.cancel(), which only succeeds for units that have not started.
      Running workers finish naturally unless they poll the token; the
      asyncio handle stays pending until they do.

Example:
    >>> from concurrent.futures import ThreadPoolExecutor
    >>> with ThreadPoolExecutor(4) as pool:
    ...     sizes = await concurrent_map(paths, os.path.getsize,
    ...                                  substrate=ExecutorSubstrate(pool))
"""

from __future__ import annotations

import asyncio
import contextvars
import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Literal, Protocol, runtime_checkable

from ...foundation.config import get_settings
from ...foundation.priority import Priority
from .cancel import CancelToken, bind_token
from .interop import invoke, run_to_value

if TYPE_CHECKING:
    from collections.abc import Awaitable
    from types import TracebackType

__all__ = [
    "Substrate",
    "AsyncioSubstrate",
    "ExecutorSubstrate",
    "get_substrate",
    "shutdown_default_substrates",
]

UnitFn = Callable[[], "Awaitable[Any] | Any"]


@runtime_checkable
class Substrate(Protocol):
    """Spawn / await / request-cancel primitive consumed by the join barrier.

    Awaiting is done on the returned handle itself, so every handle must be
    an ``asyncio.Future`` bound to the running loop.
    """

    def spawn(
        self,
        fn: UnitFn,
        *,
        token: CancelToken,
        priority: Priority | None = None,
        name: str | None = None,
    ) -> asyncio.Future[Any]: ...

    def request_cancel(self, handle: asyncio.Future[Any], token: CancelToken) -> bool: ...


class AsyncioSubstrate:
    """Runs each unit as an asyncio.Task on the running loop.

    Asyncio has no task priorities, so the hint is accepted and ignored.
    """

    __slots__ = ()

    def spawn(
        self,
        fn: UnitFn,
        *,
        token: CancelToken,
        priority: Priority | None = None,
        name: str | None = None,
    ) -> asyncio.Task[Any]:
        ctx = contextvars.copy_context()
        ctx.run(bind_token, token)
        return asyncio.create_task(invoke(fn), name=name, context=ctx)

    def request_cancel(self, handle: asyncio.Future[Any], token: CancelToken) -> bool:
        token.cancel()
        return handle.cancel()

    def __repr__(self) -> str:
        return "AsyncioSubstrate()"


@dataclass(slots=True)
class ExecutorSubstrate:
    """Runs each unit on a concurrent.futures executor.

    When no executor is supplied a ThreadPoolExecutor is created on first
    use and owned by this substrate (shut down by close()/context exit).
    Executor workers have no priority concept; the hint is ignored.

    Attributes:
        executor: Executor to submit units to (None = create lazily)
        max_workers: Worker count for an owned executor (None = stdlib default)
    """

    executor: Executor | None = None
    max_workers: int | None = None
    thread_name_prefix: str = "collectionkit-"
    _owned: bool = field(default=False, init=False, repr=False)
    _sources: dict[asyncio.Future[Any], Future[Any]] = field(default_factory=dict, init=False, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.max_workers is not None and self.max_workers < 1:
            raise ValueError("max_workers must be >= 1")

    def _get_executor(self) -> Executor:
        with self._lock:
            if self.executor is None:
                self.executor = ThreadPoolExecutor(
                    max_workers=self.max_workers,
                    thread_name_prefix=self.thread_name_prefix,
                )
                self._owned = True
            return self.executor

    def spawn(
        self,
        fn: UnitFn,
        *,
        token: CancelToken,
        priority: Priority | None = None,
        name: str | None = None,
    ) -> asyncio.Future[Any]:
        loop = asyncio.get_running_loop()
        ctx = contextvars.copy_context()
        ctx.run(bind_token, token)
        source = self._get_executor().submit(ctx.run, run_to_value, fn)
        handle = asyncio.wrap_future(source, loop=loop)
        self._sources[handle] = source
        handle.add_done_callback(self._forget)
        return handle

    def request_cancel(self, handle: asyncio.Future[Any], token: CancelToken) -> bool:
        token.cancel()
        # Never cancel the asyncio handle directly: it would turn terminal
        # while the worker is still running.
        source = self._sources.get(handle)
        return source.cancel() if source is not None else False

    def _forget(self, handle: asyncio.Future[Any]) -> None:
        self._sources.pop(handle, None)

    def close(self, wait: bool = True) -> None:
        """Shut down the executor if this substrate created it."""
        with self._lock:
            if self._owned and self.executor is not None:
                self.executor.shutdown(wait=wait)
                self.executor = None
                self._owned = False

    def __enter__(self) -> ExecutorSubstrate:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()


_asyncio_substrate = AsyncioSubstrate()
_thread_substrate: ExecutorSubstrate | None = None
_thread_lock = threading.Lock()


def get_substrate(name: Literal["asyncio", "thread"] | None = None) -> Substrate:
    """Resolve a bundled substrate by name (None = settings default)."""
    settings = get_settings().concurrency
    match name or settings.substrate:
        case "asyncio":
            return _asyncio_substrate
        case "thread":
            global _thread_substrate
            with _thread_lock:
                if _thread_substrate is None:
                    _thread_substrate = ExecutorSubstrate(max_workers=settings.thread_workers)
                return _thread_substrate
        case other:
            raise ValueError(f"Unknown substrate: {other}. Use 'asyncio' or 'thread'")


def shutdown_default_substrates() -> None:
    """Shut down the lazily created default thread substrate."""
    global _thread_substrate
    with _thread_lock:
        if _thread_substrate is not None:
            _thread_substrate.close()
            _thread_substrate = None
