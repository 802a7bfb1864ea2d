"""
Tests: ConcurrencyLimiter.

Run with:
    pytest precision_engine/tests/test_concurrency.py -v
"""

import asyncio

import pytest

from precision_engine.engine.concurrency import ConcurrencyLimiter


class TestConcurrencyLimiter:
    def test_rejects_non_positive_limit(self):
        with pytest.raises(ValueError):
            ConcurrencyLimiter(0)

    def test_peak_never_exceeds_limit(self):
        limiter = ConcurrencyLimiter(3, name="test")

        async def work():
            await asyncio.sleep(0.01)
            return limiter.in_flight

        observed = asyncio.run(limiter.gather([work for _ in range(12)]))
        assert max(observed) <= 3
        assert limiter.peak == 3
        assert limiter.completed == 12
        assert limiter.in_flight == 0

    def test_gather_keeps_order_and_exceptions(self):
        limiter = ConcurrencyLimiter(2)

        def make(i):
            async def call():
                await asyncio.sleep(0.001 * (5 - i))
                if i == 2:
                    raise RuntimeError("two")
                return i
            return call

        results = asyncio.run(limiter.gather([make(i) for i in range(5)]))
        assert results[:2] == [0, 1]
        assert isinstance(results[2], RuntimeError)
        assert results[3:] == [3, 4]
        assert limiter.in_flight == 0

    def test_slot_released_on_error(self):
        limiter = ConcurrencyLimiter(1)

        async def scenario():
            with pytest.raises(KeyError):
                async with limiter.slot():
                    raise KeyError("x")
            async with limiter.slot():
                return limiter.in_flight

        assert asyncio.run(scenario()) == 1
        assert limiter.in_flight == 0

    def test_run_returns_result(self):
        limiter = ConcurrencyLimiter(2)

        async def answer():
            return 42

        assert asyncio.run(limiter.run(answer)) == 42

    def test_reused_across_event_loops(self):
        limiter = ConcurrencyLimiter(1)

        async def noop():
            return None

        asyncio.run(limiter.run(noop))
        asyncio.run(limiter.run(noop))
        assert limiter.snapshot() == {
            "name": "limiter", "limit": 1, "in_flight": 0, "peak": 1, "completed": 2,
        }
