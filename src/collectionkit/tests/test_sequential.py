"""Tests for the sequential runner (async_* operations)."""

from __future__ import annotations

import asyncio

import pytest

from collectionkit import async_compact_map, async_flat_map, async_for_each, async_map


class TestForEach:
    @pytest.mark.asyncio
    async def test_effects_in_input_order(self, array, collector) -> None:
        await async_for_each(array, collector.collect_and_transform)
        assert collector.values == [0, 1, 2, 3, 4]

    @pytest.mark.asyncio
    async def test_each_call_completes_before_next(self) -> None:
        active, peak = 0, 0

        async def op(_: int) -> None:
            nonlocal active, peak
            active += 1
            peak = max(peak, active)
            await asyncio.sleep(0.001)
            active -= 1

        await async_for_each(range(5), op)
        assert peak == 1

    @pytest.mark.asyncio
    async def test_sync_operation(self, array) -> None:
        seen: list[int] = []
        await async_for_each(array, seen.append)
        assert seen == array

    @pytest.mark.asyncio
    async def test_error_stops_iteration(self, array, collector) -> None:
        with pytest.raises(ValueError, match="boom"):
            await async_for_each(
                array,
                lambda x: collector.try_collect_and_transform(x, ValueError("boom") if x == 3 else None),
            )
        assert collector.values == [0, 1, 2]


class TestMap:
    @pytest.mark.asyncio
    async def test_map(self, array, collector) -> None:
        values = await async_map(array, collector.collect_and_transform)
        assert values == [str(x) for x in array]

    @pytest.mark.asyncio
    async def test_map_that_throws_short_circuits(self, array) -> None:
        invoked: list[int] = []
        error = RuntimeError("three")

        async def transform(x: int) -> str:
            invoked.append(x)
            if x == 3:
                raise error
            return str(x)

        with pytest.raises(RuntimeError) as exc_info:
            await async_map(array, transform)

        assert exc_info.value is error
        assert invoked == [0, 1, 2, 3]
        assert 4 not in invoked

    @pytest.mark.asyncio
    async def test_lazy_source_read_once(self) -> None:
        reads: list[int] = []

        def source():
            for i in range(3):
                reads.append(i)
                yield i

        assert await async_map(source(), lambda x: x * 10) == [0, 10, 20]
        assert reads == [0, 1, 2]

    @pytest.mark.asyncio
    async def test_empty_input(self) -> None:
        assert await async_map([], str) == []


class TestCompactMap:
    @pytest.mark.asyncio
    async def test_drops_none(self, array, collector) -> None:
        async def transform(x: int) -> str | None:
            return None if x == 3 else await collector.collect_and_transform(x)

        assert await async_compact_map(array, transform) == ["0", "1", "2", "4"]

    @pytest.mark.asyncio
    async def test_keeps_falsy_values(self) -> None:
        assert await async_compact_map([0, 1, 2], lambda x: x if x != 1 else None) == [0, 2]

    @pytest.mark.asyncio
    async def test_error_discards_partial_output(self, array, collector) -> None:
        with pytest.raises(KeyError):
            await async_compact_map(
                array,
                lambda x: collector.try_collect_and_transform(x, KeyError(x) if x == 3 else None),
            )
        assert collector.values == [0, 1, 2]


class TestFlatMap:
    @pytest.mark.asyncio
    async def test_concatenates_in_order(self) -> None:
        async def twice(x: int) -> list[int]:
            await asyncio.sleep(0)
            return [x, x]

        assert await async_flat_map([0, 1, 2], twice) == [0, 0, 1, 1, 2, 2]

    @pytest.mark.asyncio
    async def test_accepts_any_iterable(self) -> None:
        assert await async_flat_map(["ab", "c"], lambda s: iter(s)) == ["a", "b", "c"]

    @pytest.mark.asyncio
    async def test_error_stops_iteration(self, array, collector) -> None:
        async def transform(x: int) -> list[str]:
            return [await collector.try_collect_and_transform(x, OSError() if x == 3 else None)]

        with pytest.raises(OSError):
            await async_flat_map(array, transform)
        assert collector.values == [0, 1, 2]
