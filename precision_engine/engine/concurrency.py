"""
Concurrency Controller — reusable bounded-concurrency primitive.

A ``ConcurrencyLimiter`` is a counting semaphore with instrumentation
(in flight, peak, completed).  The engine owns one for whole-document
validations; each validation builds a fresh one for its rule checkers.

Work is passed as zero-argument callables returning awaitables; the engine
uses them to hand synchronous rule checkers to its own thread pool while a
slot is held.  Counters are only touched from the event loop thread.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Awaitable, Callable, Sequence, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ConcurrencyLimiter:
    """At most ``limit`` units inside ``slot()`` at once; FIFO wake-up."""

    def __init__(self, limit: int, name: str = "limiter"):
        if limit < 1:
            raise ValueError(f"Concurrency limit must be >= 1, got {limit}")
        self.limit = limit
        self.name = name
        self.in_flight = 0
        self.peak = 0
        self.completed = 0
        self._semaphore: asyncio.Semaphore | None = None
        self._loop: asyncio.AbstractEventLoop | None = None

    def _get_semaphore(self) -> asyncio.Semaphore:
        # asyncio primitives bind to one loop; an idle limiter may be
        # reused from a new loop (e.g. successive asyncio.run calls)
        loop = asyncio.get_running_loop()
        if self._semaphore is None or (self._loop is not loop and self.in_flight == 0):
            self._semaphore = asyncio.Semaphore(self.limit)
            self._loop = loop
        return self._semaphore

    @asynccontextmanager
    async def slot(self) -> AsyncIterator[None]:
        """Hold one slot; released on every exit path."""
        async with self._get_semaphore():
            self.in_flight += 1
            self.peak = max(self.peak, self.in_flight)
            try:
                yield
            finally:
                self.in_flight -= 1
                self.completed += 1

    async def run(self, func: Callable[[], Awaitable[T]]) -> T:
        async with self.slot():
            return await func()

    async def gather(self, calls: Sequence[Callable[[], Awaitable[T]]]) -> list[T | BaseException]:
        """
        Launch every call; at most ``limit`` run at once.
        Results (or raised exceptions) come back in call order.
        """
        return await asyncio.gather(
            *(self.run(call) for call in calls),
            return_exceptions=True,
        )

    def snapshot(self) -> dict[str, int | str]:
        return {
            "name": self.name,
            "limit": self.limit,
            "in_flight": self.in_flight,
            "peak": self.peak,
            "completed": self.completed,
        }
