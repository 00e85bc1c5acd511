# src/stock_demo/services/stock_data.py

from __future__ import annotations

import itertools
import logging
import random
import threading

from ..core.ports import Scheduler, Waiter
from ..core.scheduling import ThreadingScheduler
from ..errors import WorkInterrupted
from ..feed.live_feed import LiveValueFeed

logger = logging.getLogger(__name__)


class StockDataService:
    """
    Data source behind the advanced demo screen.

    - stock_price_feed(): a fresh, finite random price feed per call
    - long_running_task(): blocking work meant to run on a BackgroundTaskRunner

    interrupt() is a shutdown signal: the current and every later long_running_task()
    fail with WorkInterrupted.
    """

    def __init__(
        self,
        settings,
        *,
        scheduler: Scheduler | None = None,
        rng: random.Random | None = None,
        waiter: Waiter | None = None,
    ) -> None:
        self._settings = settings
        self._scheduler: Scheduler = scheduler or ThreadingScheduler()
        self._rng = rng
        self._interrupt = threading.Event()
        self._waiter: Waiter = waiter or self._interrupt.wait
        self._feed_ids = itertools.count(1)

    @property
    def interrupted(self) -> bool:
        return self._interrupt.is_set()

    def stock_price_feed(self) -> LiveValueFeed:
        s = self._settings
        return LiveValueFeed(
            self._scheduler,
            interval_seconds=float(s.feed_interval_seconds),
            max_samples=int(s.feed_max_samples),
            max_hundredths=int(s.feed_max_hundredths),
            rng=self._rng,
            name=f"stock-price-{next(self._feed_ids)}",
        )

    def long_running_task(self) -> str:
        seconds = float(self._settings.long_task_seconds)
        logger.debug("long_running_task: waiting %.1fs", seconds)

        interrupted = self._waiter(seconds)
        if interrupted or self._interrupt.is_set():
            raise WorkInterrupted("sleep interrupted")

        return f"ready in {int(seconds)} seconds"

    def interrupt(self) -> None:
        if self._interrupt.is_set():
            return
        logger.info("StockDataService interrupted; pending long-running work will fail.")
        self._interrupt.set()
