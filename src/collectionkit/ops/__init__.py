"""Higher-order operations over ordered collections.

Sequential (``async_*``): one invocation at a time, in input order.
Concurrent (``concurrent_*``): one work unit per element, results in input order.
"""

from .concurrent import (
    concurrent_compact_map,
    concurrent_flat_map,
    concurrent_for_each,
    concurrent_map,
)
from .filter import async_filter, concurrent_filter
from .optional import map_optional
from .reduce import async_reduce, async_reduce_into
from .sequential import async_compact_map, async_flat_map, async_for_each, async_map

__all__ = [
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
]
