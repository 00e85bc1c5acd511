# tests/fakes.py

from __future__ import annotations

import queue
import threading
from collections.abc import Callable

from stock_demo.tasks.task_models import TaskOutcome


class QueuedDispatcher:
    """
    Dispatcher that only queues callables.

    Tests decide when the "UI context" runs them (run_next / drain), which makes
    ordering around detach/discard deterministic.
    """

    def __init__(self) -> None:
        self._queue: "queue.Queue[Callable[[], None]]" = queue.Queue()

    def __call__(self, fn: Callable[[], None]) -> None:
        self._queue.put(fn)

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def run_next(self, timeout: float = 2.0) -> bool:
        try:
            fn = self._queue.get(timeout=timeout)
        except queue.Empty:
            return False
        fn()
        return True

    def drain(self) -> int:
        n = 0
        while True:
            try:
                fn = self._queue.get_nowait()
            except queue.Empty:
                return n
            fn()
            n += 1


class RecordingContinuation:
    """Continuation that records every delivery and the thread it ran on."""

    def __init__(self) -> None:
        self.outcomes: list[TaskOutcome] = []
        self.threads: list[threading.Thread] = []
        self.called = threading.Event()

    def __call__(self, outcome: TaskOutcome) -> None:
        self.outcomes.append(outcome)
        self.threads.append(threading.current_thread())
        self.called.set()


class GatedWaiter:
    """
    Waiter driven by a fake millisecond clock.

    A call blocks until the test advances the clock to the requested deadline, so
    "not before N ms" can be asserted without real sleeps.
    """

    def __init__(self) -> None:
        self.now_ms = 0
        self.requested: list[float] = []
        self._cond = threading.Condition()

    def __call__(self, seconds: float) -> bool:
        with self._cond:
            deadline = self.now_ms + round(seconds * 1000)
            self.requested.append(seconds)
            self._cond.notify_all()
            reached = self._cond.wait_for(lambda: self.now_ms >= deadline, timeout=5.0)
        # True means "interrupted", same contract as threading.Event.wait.
        return not reached

    def wait_started(self, timeout: float = 2.0) -> bool:
        with self._cond:
            return self._cond.wait_for(lambda: bool(self.requested), timeout=timeout)

    def advance_ms(self, ms: int) -> None:
        with self._cond:
            self.now_ms += ms
            self._cond.notify_all()


def no_wait(seconds: float) -> bool:
    return False
