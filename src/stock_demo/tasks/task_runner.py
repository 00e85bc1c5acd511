# src/stock_demo/tasks/task_runner.py

from __future__ import annotations

"""
Background task runner.

run(work) returns a PENDING TaskHandle immediately and executes `work` on its own
daemon thread. When `work` returns or raises, the handle settles exactly once and its
single continuation receives the TaskOutcome exactly once:
- on the worker thread (default), or
- through `completion_dispatcher` (e.g. a UiThread or asyncio_dispatcher(loop)).

Failures never cross thread boundaries as exceptions; they become FAILED outcomes.

The runner does not cancel in-flight work. A caller that no longer cares calls
handle.discard(): the work still finishes but the continuation is not invoked.
"""

import itertools
import logging
import threading
from collections.abc import Callable
from typing import Any

from ..core.dispatch import inline_dispatcher
from ..core.ports import Dispatcher
from ..errors import ContinuationAlreadySetError, RunnerBusyError, WorkInterrupted
from .task_models import TaskOutcome, TaskState

logger = logging.getLogger(__name__)

Continuation = Callable[[TaskOutcome], None]


def _error_message(exc: BaseException) -> str:
    detail = str(exc).strip() or exc.__class__.__name__
    return f"Error - {detail}"


class TaskHandle:
    def __init__(self, name: str, dispatcher: Dispatcher) -> None:
        self.name = name
        self._dispatcher = dispatcher
        self._lock = threading.Lock()
        self._settled = threading.Event()
        self._outcome: TaskOutcome | None = None
        self._continuation: Continuation | None = None
        self._delivered = False
        self._discarded = False

    @property
    def state(self) -> TaskState:
        outcome = self._outcome
        return TaskState.PENDING if outcome is None else outcome.state

    @property
    def outcome(self) -> TaskOutcome | None:
        return self._outcome

    @property
    def discarded(self) -> bool:
        return self._discarded

    def done(self) -> bool:
        return self._settled.is_set()

    def on_done(self, continuation: Continuation) -> TaskHandle:
        """
        Register the single continuation.

        If the task already settled, delivery happens right away (through the
        dispatcher). A second registration raises ContinuationAlreadySetError.
        """
        with self._lock:
            if self._continuation is not None:
                raise ContinuationAlreadySetError(f"{self.name}: continuation already registered")
            self._continuation = continuation
        self._deliver()
        return self

    def discard(self) -> None:
        """Ignore the result: the continuation will not be invoked (work keeps running)."""
        with self._lock:
            if self._discarded:
                return
            self._discarded = True
        logger.debug("%s: discarded (state=%s)", self.name, self.state.value)

    def wait(self, timeout: float | None = None) -> TaskOutcome | None:
        """Block until settled; returns None on timeout."""
        if not self._settled.wait(timeout):
            return None
        return self._outcome

    def _settle(self, outcome: TaskOutcome) -> None:
        with self._lock:
            if self._outcome is not None:
                return
            self._outcome = outcome
        self._settled.set()
        self._deliver()

    def _deliver(self) -> None:
        with self._lock:
            if self._delivered or self._discarded:
                return
            continuation = self._continuation
            outcome = self._outcome
            if continuation is None or outcome is None:
                return
            self._delivered = True

        def invoke() -> None:
            # discard() may have happened while the call sat in the dispatcher queue.
            if self._discarded:
                return
            try:
                continuation(outcome)
            except Exception:
                logger.exception("%s: continuation failed", self.name)

        try:
            self._dispatcher(invoke)
        except Exception:
            logger.exception("%s: completion dispatcher failed", self.name)

    def __repr__(self) -> str:
        return f"TaskHandle(name={self.name!r}, state={self.state.value}, discarded={self._discarded})"


class BackgroundTaskRunner:
    """
    One daemon worker thread per task, capped at `max_outstanding` concurrently
    running tasks. Past the cap run() raises RunnerBusyError and starts nothing.
    """

    def __init__(
        self,
        *,
        max_outstanding: int = 8,
        completion_dispatcher: Dispatcher | None = None,
        name: str = "task",
    ) -> None:
        if max_outstanding < 1:
            raise ValueError("max_outstanding must be >= 1")
        self._max_outstanding = int(max_outstanding)
        self._dispatcher: Dispatcher = completion_dispatcher or inline_dispatcher
        self._name = name
        self._counter = itertools.count(1)
        self._lock = threading.Lock()
        self._outstanding = 0

    @property
    def outstanding(self) -> int:
        return self._outstanding

    def run(
        self,
        work: Callable[[], Any],
        continuation: Continuation | None = None,
    ) -> TaskHandle:
        with self._lock:
            if self._outstanding >= self._max_outstanding:
                raise RunnerBusyError(
                    f"{self._outstanding} tasks still running (max_outstanding={self._max_outstanding})"
                )
            self._outstanding += 1
            task_name = f"{self._name}-{next(self._counter)}"

        handle = TaskHandle(task_name, self._dispatcher)
        if continuation is not None:
            handle.on_done(continuation)

        worker = threading.Thread(
            target=self._execute,
            args=(handle, work),
            name=task_name,
            daemon=True,
        )
        try:
            worker.start()
        except Exception:
            self._release()
            raise

        logger.debug("%s: started", task_name)
        return handle

    def _execute(self, handle: TaskHandle, work: Callable[[], Any]) -> None:
        try:
            try:
                result = work()
            except WorkInterrupted as e:
                logger.info("%s: interrupted: %s", handle.name, e)
                outcome = TaskOutcome.failed(_error_message(e))
            except Exception as e:
                logger.exception("%s: work failed", handle.name)
                outcome = TaskOutcome.failed(_error_message(e))
            except BaseException as e:
                # SystemExit or KeyboardInterrupt from work ends only this worker.
                logger.warning("%s: work aborted: %r", handle.name, e)
                outcome = TaskOutcome.failed(_error_message(e))
            else:
                outcome = TaskOutcome.completed(result)
        finally:
            self._release()

        logger.debug("%s: settled -> %s", handle.name, outcome.state.value)
        handle._settle(outcome)

    def _release(self) -> None:
        with self._lock:
            self._outstanding = max(0, self._outstanding - 1)
