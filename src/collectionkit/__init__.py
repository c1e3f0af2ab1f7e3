"""collectionkit - sequential and concurrent async operations over collections.

Each operation family comes in two execution modes with the same ordering
and error semantics:

    - async_*: one awaited call at a time, strictly in input order
    - concurrent_*: one work unit per element, all joined before returning,
      results in input order regardless of completion order

Quick Start:
    >>> from collectionkit import async_map, concurrent_map, concurrent_filter
    >>>
    >>> pages = await concurrent_map(urls, fetch)          # fan-out/fan-in
    >>> rows = await async_map(pages, parse)               # one at a time
    >>> fresh = await concurrent_filter(rows, is_fresh)
    >>> total = await async_reduce(rows, 0, lambda acc, r: acc + r.size)

Errors:
    Sequential operations stop at the first error. Concurrent operations
    raise exactly one unit error after every unit is terminal; siblings
    still in flight are asked to cancel cooperatively. Neither mode returns
    partial output.

Substrates:
    >>> from collectionkit import ExecutorSubstrate, Priority
    >>> with ExecutorSubstrate(max_workers=8) as threads:
    ...     digests = await concurrent_map(paths, sha256_file,
    ...                                    substrate=threads,
    ...                                    priority=Priority.LOW)
"""

from __future__ import annotations

__version__ = "0.1.0"

# Configuration & errors
from .foundation import (
    BarrierError,
    CollectionkitError,
    CollectionkitSettings,
    ErrorCode,
    Priority,
    UnitCancelled,
    clear_settings_cache,
    get_settings,
)

# Operations
from .ops import (
    async_compact_map,
    async_filter,
    async_flat_map,
    async_for_each,
    async_map,
    async_reduce,
    async_reduce_into,
    concurrent_compact_map,
    concurrent_filter,
    concurrent_flat_map,
    concurrent_for_each,
    concurrent_map,
    map_optional,
)

# Engine
from .runtime.concurrency import (
    AsyncioSubstrate,
    CancelToken,
    ExecutorSubstrate,
    JoinBarrier,
    Substrate,
    UnitState,
    WorkUnit,
    cancel_requested,
    checkpoint,
    fan_out,
    get_substrate,
    raise_if_cancelled,
    shutdown_default_substrates,
)

# Logging
from .runtime.observability import configure_logging, configure_logging_from_settings

__all__ = [
    "__version__",
    # Sequential
    "async_for_each",
    "async_map",
    "async_compact_map",
    "async_flat_map",
    "async_filter",
    "async_reduce",
    "async_reduce_into",
    # Concurrent
    "concurrent_for_each",
    "concurrent_map",
    "concurrent_compact_map",
    "concurrent_flat_map",
    "concurrent_filter",
    # Optional
    "map_optional",
    # Engine
    "Priority",
    "Substrate",
    "AsyncioSubstrate",
    "ExecutorSubstrate",
    "get_substrate",
    "shutdown_default_substrates",
    "WorkUnit",
    "UnitState",
    "JoinBarrier",
    "fan_out",
    "CancelToken",
    "cancel_requested",
    "raise_if_cancelled",
    "checkpoint",
    # Config
    "CollectionkitSettings",
    "get_settings",
    "clear_settings_cache",
    # Errors
    "ErrorCode",
    "CollectionkitError",
    "BarrierError",
    "UnitCancelled",
    # Logging
    "configure_logging",
    "configure_logging_from_settings",
]
