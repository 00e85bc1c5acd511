# src/stock_demo/core/dispatch.py

"""
Dispatchers: how a background value gets back into a caller-owned context.

The feed and the runner never assume a target context. A consumer picks one of these
(or supplies its own callable) and owns the marshalling.
"""

from __future__ import annotations

import asyncio
import logging
import queue
import threading
from collections.abc import Callable
from concurrent.futures import Future
from typing import TypeVar

from .ports import Dispatcher

logger = logging.getLogger(__name__)

T = TypeVar("T")


def inline_dispatcher(fn: Callable[[], None]) -> None:
    """Run immediately on the calling thread."""
    fn()


def asyncio_dispatcher(loop: asyncio.AbstractEventLoop) -> Dispatcher:
    """Marshal onto an event loop thread."""

    def dispatch(fn: Callable[[], None]) -> None:
        loop.call_soon_threadsafe(fn)

    return dispatch


class UiThread:
    """
    A single thread that owns "UI" state.

    Every mutation of view state is posted here via access(fn) and runs in FIFO order
    on this one thread, the way a UI toolkit serializes access to its components.
    Exceptions from posted callables are logged and do not kill the thread.
    """

    def __init__(self, *, name: str = "ui-thread") -> None:
        self._queue: "queue.Queue[Callable[[], None] | None]" = queue.Queue()
        self._stop_requested = False
        self._thread = threading.Thread(target=self._worker, name=name, daemon=True)
        self._thread.start()
        logger.debug("UI thread %s started.", name)

    def _worker(self) -> None:
        while True:
            item = self._queue.get()
            try:
                if item is None:
                    logger.debug("UI thread received stop signal.")
                    return
                try:
                    item()
                except Exception:
                    logger.exception("UI callback failed.")
            finally:
                self._queue.task_done()

    @property
    def is_current(self) -> bool:
        return threading.current_thread() is self._thread

    def access(self, fn: Callable[[], None]) -> None:
        """Queue fn to run on the UI thread (dropped after stop())."""
        if self._stop_requested:
            logger.debug("UI thread stopped; dropping callback.")
            return
        self._queue.put(fn)

    __call__ = access

    def call(self, fn: Callable[[], T], timeout: float | None = None) -> T:
        """
        Run fn on the UI thread and return its result to the caller.

        Exceptions raised by fn are re-raised here. Runs inline when already on the UI thread.
        """
        if self.is_current:
            return fn()
        if self._stop_requested:
            raise RuntimeError("UI thread is stopped")

        fut: Future[T] = Future()

        def run() -> None:
            if not fut.set_running_or_notify_cancel():
                return
            try:
                fut.set_result(fn())
            except Exception as e:
                fut.set_exception(e)

        self._queue.put(run)
        return fut.result(timeout=timeout)

    def wait_idle(self) -> None:
        """Block until every callback queued so far has run."""
        if self.is_current:
            raise RuntimeError("wait_idle() called from the UI thread itself")
        self._queue.join()

    def stop(self) -> None:
        if self._stop_requested:
            return
        self._stop_requested = True
        self._queue.put(None)

    def join(self, timeout: float | None = None) -> None:
        self._thread.join(timeout=timeout)
