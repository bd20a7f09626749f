"""Tests for pagewright.services.limiter.run_bounded."""

import asyncio

import pytest

from pagewright.services.limiter import run_bounded


class TestRunBounded:
    def test_never_exceeds_limit(self):
        in_flight = 0
        peak = 0

        async def task():
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            await asyncio.sleep(0.001)
            in_flight -= 1

        asyncio.run(run_bounded([task for _ in range(12)], limit=3))
        assert peak == 3

    def test_starts_in_fifo_order(self):
        started = []

        def make(index, delay):
            async def task():
                started.append(index)
                await asyncio.sleep(delay)
            return task

        delays = [0.005, 0.001, 0.004, 0.0, 0.002, 0.003]
        asyncio.run(run_bounded([make(i, d) for i, d in enumerate(delays)], limit=2))
        assert started == list(range(len(delays)))

    def test_results_keep_input_order(self):
        def make(value, delay):
            async def task():
                await asyncio.sleep(delay)
                return value
            return task

        results = asyncio.run(run_bounded([make("a", 0.003), make("b", 0.0), make("c", 0.001)], limit=3))
        assert results == ["a", "b", "c"]

    def test_failure_raised_after_all_tasks_run(self):
        finished = []

        def make(index):
            async def task():
                await asyncio.sleep(0.001 * index)
                if index == 1:
                    raise RuntimeError("boom")
                finished.append(index)
            return task

        with pytest.raises(RuntimeError, match="boom"):
            asyncio.run(run_bounded([make(i) for i in range(5)], limit=2))
        assert sorted(finished) == [0, 2, 3, 4]

    def test_empty_task_list(self):
        assert asyncio.run(run_bounded([], limit=3)) == []

    def test_rejects_zero_limit(self):
        with pytest.raises(ValueError):
            asyncio.run(run_bounded([], limit=0))
