"""Tests for concurrent fan-out operations."""

from __future__ import annotations

import asyncio

import pytest

from collectionkit import (
    async_map,
    concurrent_compact_map,
    concurrent_flat_map,
    concurrent_for_each,
    concurrent_map,
)


async def reversed_completion(x: int, n: int = 5) -> str:
    """Later elements finish first."""
    await asyncio.sleep((n - x) * 0.01)
    return str(x)


class TestForEach:
    @pytest.mark.asyncio
    async def test_visits_every_element(self, array, collector) -> None:
        await concurrent_for_each(array, collector.collect_and_transform)
        assert sorted(collector.values) == [0, 1, 2, 3, 4]

    @pytest.mark.asyncio
    async def test_units_run_concurrently(self) -> None:
        started = asyncio.Event()
        waiting = 0

        async def op(_: int) -> None:
            nonlocal waiting
            waiting += 1
            if waiting == 3:
                started.set()
            # Would deadlock if units ran one at a time.
            await asyncio.wait_for(started.wait(), timeout=1.0)

        await concurrent_for_each(range(3), op)
        assert waiting == 3

    @pytest.mark.asyncio
    async def test_returns_only_after_all_finish(self) -> None:
        finished: list[int] = []

        async def op(x: int) -> None:
            await asyncio.sleep(0.005 * x)
            finished.append(x)

        assert await concurrent_for_each(range(4), op) is None
        assert sorted(finished) == [0, 1, 2, 3]

    @pytest.mark.asyncio
    async def test_error_propagates(self, array, collector) -> None:
        with pytest.raises(ValueError):
            await concurrent_for_each(
                array,
                lambda x: collector.try_collect_and_transform(x, ValueError() if x == 3 else None),
            )


class TestMap:
    @pytest.mark.asyncio
    async def test_map(self, array, collector) -> None:
        values = await concurrent_map(array, collector.collect_and_transform)
        assert values == [str(x) for x in array]

    @pytest.mark.asyncio
    async def test_order_preserved_under_reversed_completion(self, array) -> None:
        completed: list[int] = []

        async def transform(x: int) -> str:
            value = await reversed_completion(x)
            completed.append(x)
            return value

        values = await concurrent_map(array, transform)

        assert completed == [4, 3, 2, 1, 0]
        assert values == await async_map(array, str)

    @pytest.mark.asyncio
    async def test_sync_transform(self, array) -> None:
        assert await concurrent_map(array, lambda x: x * x) == [0, 1, 4, 9, 16]

    @pytest.mark.asyncio
    async def test_lazy_source(self) -> None:
        assert await concurrent_map((i for i in range(4)), reversed_completion) == ["0", "1", "2", "3"]

    @pytest.mark.asyncio
    async def test_empty_input(self) -> None:
        assert await concurrent_map([], str) == []

    @pytest.mark.asyncio
    async def test_failure_yields_single_error_and_no_partial_output(self, array, collector) -> None:
        error = ValueError("three")
        result: list[str] | None = None

        with pytest.raises(ValueError) as exc_info:
            result = await concurrent_map(
                array,
                lambda x: collector.try_collect_and_transform(x, error if x == 3 else None),
            )

        assert exc_info.value is error
        assert result is None

    @pytest.mark.asyncio
    async def test_multiple_failures_raise_exactly_one(self) -> None:
        errors = {1: KeyError("one"), 3: IndexError("three")}

        async def transform(x: int) -> int:
            await asyncio.sleep(0)
            if x in errors:
                raise errors[x]
            return x

        with pytest.raises(Exception) as exc_info:
            await concurrent_map(range(5), transform)

        assert not isinstance(exc_info.value, BaseExceptionGroup)
        assert exc_info.value in errors.values()

    @pytest.mark.asyncio
    async def test_failure_cancels_in_flight_siblings(self) -> None:
        cancelled: list[int] = []

        async def transform(x: int) -> int:
            if x == 0:
                await asyncio.sleep(0.01)
                raise RuntimeError("fail fast")
            try:
                await asyncio.sleep(10)
            except asyncio.CancelledError:
                cancelled.append(x)
                raise
            return x

        loop = asyncio.get_running_loop()
        start = loop.time()
        with pytest.raises(RuntimeError, match="fail fast"):
            await concurrent_map(range(4), transform)

        assert loop.time() - start < 5
        assert sorted(cancelled) == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_waits_for_units_that_ignore_cancellation(self) -> None:
        finished: list[int] = []

        async def stubborn(x: int) -> int:
            if x == 0:
                await asyncio.sleep(0.005)
                raise RuntimeError("fail")
            try:
                await asyncio.sleep(0.05)
            except asyncio.CancelledError:
                await asyncio.sleep(0.02)  # keep running after the request
            finished.append(x)
            return x

        with pytest.raises(RuntimeError):
            await concurrent_map(range(3), stubborn)

        # No unit is left running after the call returns.
        assert sorted(finished) == [1, 2]

    @pytest.mark.asyncio
    async def test_caller_cancellation_drains_units(self) -> None:
        started = asyncio.Event()
        torn_down: list[int] = []

        async def slow(x: int) -> int:
            started.set()
            try:
                await asyncio.sleep(10)
            finally:
                torn_down.append(x)
            return x

        task = asyncio.create_task(concurrent_map(range(3), slow))
        await started.wait()
        await asyncio.sleep(0)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        assert sorted(torn_down) == [0, 1, 2]

    @pytest.mark.asyncio
    async def test_source_error_cancels_spawned_units(self) -> None:
        completed: list[int] = []

        async def slow(x: int) -> int:
            await asyncio.sleep(10)
            completed.append(x)
            return x

        def source():
            yield 0
            yield 1
            raise LookupError("source exhausted badly")

        with pytest.raises(LookupError):
            await concurrent_map(source(), slow)

        running = [
            t for t in asyncio.all_tasks()
            if t.get_name().startswith("collectionkit-unit-") and not t.done()
        ]
        assert running == []
        assert completed == []


class TestCompactMap:
    @pytest.mark.asyncio
    async def test_drops_none(self, array, collector) -> None:
        async def transform(x: int) -> str | None:
            await asyncio.sleep((5 - x) * 0.005)
            return None if x == 3 else await collector.collect_and_transform(x)

        assert await concurrent_compact_map(array, transform) == ["0", "1", "2", "4"]

    @pytest.mark.asyncio
    async def test_error(self, array, collector) -> None:
        with pytest.raises(ValueError):
            await concurrent_compact_map(
                array,
                lambda x: collector.try_collect_and_transform(x, ValueError() if x == 3 else None),
            )


class TestFlatMap:
    @pytest.mark.asyncio
    async def test_concatenates_in_input_order(self) -> None:
        async def twice(x: int) -> list[int]:
            await asyncio.sleep((3 - x) * 0.01)
            return [x, x]

        assert await concurrent_flat_map([0, 1, 2], twice) == [0, 0, 1, 1, 2, 2]

    @pytest.mark.asyncio
    async def test_error(self, array) -> None:
        async def transform(x: int) -> list[int]:
            if x == 3:
                raise ValueError()
            return [x]

        with pytest.raises(ValueError):
            await concurrent_flat_map(array, transform)
