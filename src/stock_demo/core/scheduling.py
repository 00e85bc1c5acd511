# src/stock_demo/core/scheduling.py

"""
Fixed-delay schedulers.

All three implement the Scheduler port:
- ThreadingScheduler: one daemon threading.Timer per call (default for the console app)
- AsyncioScheduler: loop.call_later, safe to call from any thread
- VirtualTimeScheduler: manual clock; time only moves on advance()

The feed never busy-waits: each tick schedules the next one.
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
import threading
from collections.abc import Callable
from dataclasses import dataclass, field


class ThreadingScheduler:
    def __init__(self, *, name_prefix: str = "feed-timer") -> None:
        self._name_prefix = name_prefix
        self._counter = itertools.count(1)

    def schedule(self, delay_seconds: float, fn: Callable[[], None]) -> threading.Timer:
        timer = threading.Timer(max(0.0, float(delay_seconds)), fn)
        timer.daemon = True
        timer.name = f"{self._name_prefix}-{next(self._counter)}"
        timer.start()
        return timer


class _AsyncioCall:
    def __init__(self, loop: asyncio.AbstractEventLoop) -> None:
        self._loop = loop
        self._lock = threading.Lock()
        self._handle: asyncio.TimerHandle | None = None
        self._cancelled = False

    def _arm(self, delay_seconds: float, fn: Callable[[], None]) -> None:
        with self._lock:
            if self._cancelled:
                return
            self._handle = self._loop.call_later(delay_seconds, fn)

    def cancel(self) -> None:
        with self._lock:
            self._cancelled = True
            handle = self._handle
        if handle is None:
            return
        if _running_loop() is self._loop:
            handle.cancel()
        elif not self._loop.is_closed():
            self._loop.call_soon_threadsafe(handle.cancel)


def _running_loop() -> asyncio.AbstractEventLoop | None:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None


class AsyncioScheduler:
    """Schedules calls on a given event loop; ticks run on the loop's thread."""

    def __init__(self, loop: asyncio.AbstractEventLoop) -> None:
        self._loop = loop

    def schedule(self, delay_seconds: float, fn: Callable[[], None]) -> _AsyncioCall:
        call = _AsyncioCall(self._loop)
        delay = max(0.0, float(delay_seconds))
        if _running_loop() is self._loop:
            call._arm(delay, fn)
        else:
            self._loop.call_soon_threadsafe(call._arm, delay, fn)
        return call


@dataclass(order=True, slots=True)
class _VirtualCall:
    due: float
    seq: int
    fn: Callable[[], None] = field(compare=False)
    cancelled: bool = field(default=False, compare=False)

    def cancel(self) -> None:
        self.cancelled = True


class VirtualTimeScheduler:
    """
    Deterministic scheduler for tests and simulations.

    Calls run synchronously inside advance(), on the caller's thread, in (due time,
    scheduling order) order. Calls scheduled while advancing run in the same advance()
    if they fall due before the target time.
    """

    def __init__(self, *, start: float = 0.0) -> None:
        self._now = float(start)
        self._queue: list[_VirtualCall] = []
        self._seq = itertools.count()
        self._lock = threading.Lock()

    @property
    def now(self) -> float:
        return self._now

    @property
    def pending(self) -> int:
        with self._lock:
            return sum(1 for c in self._queue if not c.cancelled)

    def schedule(self, delay_seconds: float, fn: Callable[[], None]) -> _VirtualCall:
        with self._lock:
            call = _VirtualCall(self._now + max(0.0, float(delay_seconds)), next(self._seq), fn)
            heapq.heappush(self._queue, call)
        return call

    def advance(self, seconds: float) -> int:
        """Move the clock forward by `seconds`; return how many calls ran."""
        return self._advance_to(self._now + max(0.0, float(seconds)))

    def _advance_to(self, target: float) -> int:
        ran = 0
        while True:
            with self._lock:
                if not self._queue or self._queue[0].due > target:
                    break
                call = heapq.heappop(self._queue)
                self._now = call.due
            if call.cancelled:
                continue
            call.fn()
            ran += 1
        self._now = target
        return ran

    def run_until_idle(self, *, max_calls: int = 100_000) -> int:
        """Run every pending call, jumping the clock as needed."""
        ran = 0
        while ran < max_calls:
            with self._lock:
                while self._queue and self._queue[0].cancelled:
                    heapq.heappop(self._queue)
                if not self._queue:
                    break
                due = self._queue[0].due
            ran += self._advance_to(max(due, self._now))
        return ran
