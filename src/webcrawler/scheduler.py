"""
Scheduler - Concurrency Control

Bounds how many crawl pipelines run at once and tracks how many are in flight.
"""

import asyncio

# Default maximum concurrent pipelines
DEFAULT_MAX_CONCURRENT = 100


class Slot:
    """Permission to run one pipeline. Release exactly once; extra calls are no-ops."""

    def __init__(self, controller: "ConcurrencyController"):
        self._controller = controller
        self._released = False

    def release(self) -> None:
        if self._released:
            return
        self._released = True
        self._controller._on_release()


class ConcurrencyController:
    """
    Semaphore-style pipeline admission.

    acquire() waits for a free slot and never fails. The in-flight count is
    incremented when a slot is granted and decremented when it is released;
    the engine reads it to detect quiescence.
    """

    def __init__(self, max_concurrent: int = DEFAULT_MAX_CONCURRENT):
        if max_concurrent < 1:
            raise ValueError(f"max_concurrent must be at least 1 (got {max_concurrent})")
        self._max_concurrent = max_concurrent
        self._semaphore = asyncio.Semaphore(max_concurrent)
        self._in_flight = 0
        self._peak_in_flight = 0
        self._granted = 0

    @property
    def max_concurrent(self) -> int:
        return self._max_concurrent

    async def acquire(self) -> Slot:
        """Wait until a slot is available and take it."""
        await self._semaphore.acquire()
        self._in_flight += 1
        self._granted += 1
        self._peak_in_flight = max(self._peak_in_flight, self._in_flight)
        return Slot(self)

    def _on_release(self) -> None:
        self._in_flight = max(0, self._in_flight - 1)
        self._semaphore.release()

    def in_flight_count(self) -> int:
        return self._in_flight

    def stats(self) -> dict:
        """Get controller statistics."""
        return {
            "max_concurrent": self._max_concurrent,
            "in_flight": self._in_flight,
            "peak_in_flight": self._peak_in_flight,
            "slots_granted": self._granted,
        }
