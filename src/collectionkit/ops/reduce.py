"""Sequential folds.

Accumulation is order-dependent, so there is deliberately no concurrent
variant: the accumulator is threaded through the elements strictly left to
right and returned only on full success.
"""

from __future__ import annotations

import copy
from collections.abc import Awaitable, Iterable
from typing import Callable, TypeVar

from ..runtime.concurrency.interop import invoke

T = TypeVar("T")
A = TypeVar("A")


async def async_reduce(
    elements: Iterable[T],
    initial: A,
    combine: Callable[[A, T], Awaitable[A] | A],
) -> A:
    """Fold left: ``acc = combine(acc, element)`` for each element in order.

    Example:
        >>> await async_reduce([1, 2, 3], 0, lambda acc, x: acc - x)
        -6
    """
    accumulator = initial
    for element in elements:
        accumulator = await invoke(combine, accumulator, element)
    return accumulator


async def async_reduce_into(
    elements: Iterable[T],
    initial: A,
    update: Callable[[A, T], Awaitable[object] | object],
) -> A:
    """Fold by in-place mutation: ``update(acc, element)`` mutates ``acc``.

    Works on a deep copy of ``initial`` so the caller's object, nested
    containers included, is left untouched if any update fails. The return
    value of ``update`` is ignored.

    Example:
        >>> async def tally(counts: dict, word: str) -> None:
        ...     counts[word] = counts.get(word, 0) + 1
        >>> await async_reduce_into(["a", "b", "a"], {}, tally)
        {'a': 2, 'b': 1}
    """
    accumulator = copy.deepcopy(initial)
    for element in elements:
        await invoke(update, accumulator, element)
    return accumulator
