"""Unit tests for the Bounded Executor."""

import asyncio

import pytest

from doc_translator.execution import BoundedExecutor

pytestmark = pytest.mark.anyio


def delayed(value, delay, log=None):
    async def factory():
        if log is not None:
            log.append(value)
        await asyncio.sleep(delay)
        return value
    return factory


def failing(message="boom"):
    async def factory():
        raise RuntimeError(message)
    return factory


class TestResults:

    async def test_results_follow_input_order(self):
        executor = BoundedExecutor(concurrency=3)
        factories = [delayed("a", 0.03), delayed("b", 0.01), delayed("c", 0.02)]

        assert await executor.run(factories) == ["a", "b", "c"]

    async def test_empty_input(self):
        assert await BoundedExecutor().run([]) == []

    async def test_more_tasks_than_slots(self):
        executor = BoundedExecutor(concurrency=2)
        factories = [delayed(i, 0.001) for i in range(7)]

        assert await executor.run(factories) == list(range(7))


class TestConcurrencyBound:

    async def test_never_exceeds_limit(self):
        running = 0
        peak = 0

        def tracked(value):
            async def factory():
                nonlocal running, peak
                running += 1
                peak = max(peak, running)
                await asyncio.sleep(0.01)
                running -= 1
                return value
            return factory

        executor = BoundedExecutor(concurrency=2)
        await executor.run([tracked(i) for i in range(6)])

        assert peak == 2

    def test_invalid_concurrency(self):
        with pytest.raises(ValueError):
            BoundedExecutor(concurrency=0)


class TestFailure:

    async def test_first_failure_rejects_and_stops_scheduling(self):
        started = []
        executor = BoundedExecutor(concurrency=1)
        factories = [failing(), delayed("never", 0, log=started)]

        with pytest.raises(RuntimeError, match="boom"):
            await executor.run(factories)

        await asyncio.sleep(0.01)
        assert started == []

    async def test_in_flight_tasks_finish_in_background(self):
        finished = []

        async def slow():
            await asyncio.sleep(0.02)
            finished.append("slow")
            return "slow"

        executor = BoundedExecutor(concurrency=2)
        with pytest.raises(RuntimeError):
            await executor.run([failing(), slow])

        assert executor.pending == 1
        await asyncio.sleep(0.05)
        assert finished == ["slow"]
        assert executor.pending == 0

    async def test_late_failures_are_discarded(self):
        async def late_failure():
            await asyncio.sleep(0.01)
            raise ValueError("late")

        executor = BoundedExecutor(concurrency=2)
        with pytest.raises(RuntimeError, match="first"):
            await executor.run([failing("first"), late_failure])

        await asyncio.sleep(0.03)
        assert executor.pending == 0
