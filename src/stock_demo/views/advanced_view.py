# src/stock_demo/views/advanced_view.py

"""
Headless "advanced use cases" view.

Lifecycle contract:
- attach(): start a fresh price feed subscription
- detach(): cancel it and discard any outstanding task result

Threading contract:
- attach/detach/fetch_async_data are called from the UI context (whatever `dispatcher`
  marshals into)
- price ticks and task results arrive on background threads and are posted through
  `dispatcher` before touching view state
"""

from __future__ import annotations

import itertools
import logging
from collections.abc import Callable

from ..core.ports import Dispatcher
from ..errors import RunnerBusyError, ViewStateError
from ..feed.feed_models import Sample
from ..feed.live_feed import FeedSubscription, LiveValueFeed
from ..services.stock_data import StockDataService
from ..tasks.task_models import TaskOutcome
from ..tasks.task_runner import BackgroundTaskRunner, TaskHandle
from .drag_drop import DragDropBoard, Notifier

logger = logging.getLogger(__name__)

DEFAULT_PRICE_FORMAT = "Current Price: {} €"
PLEASE_WAIT = "please wait ..."
BUSY_TEXT = "Too many tasks running, try again later."


class AdvancedView:
    def __init__(
        self,
        service: StockDataService,
        runner: BackgroundTaskRunner,
        dispatcher: Dispatcher,
        *,
        price_format: str = DEFAULT_PRICE_FORMAT,
        notifier: Notifier | None = None,
        on_change: Callable[[str], None] | None = None,
    ) -> None:
        self._service = service
        self._runner = runner
        self._dispatch = dispatcher
        self._price_format = price_format
        self._on_change = on_change

        self.realtime_text = price_format.format(0)
        self.result_text = ""
        self.button_enabled = True
        self.board = DragDropBoard(notifier=notifier)

        self._feed: LiveValueFeed | None = None
        self._subscription: FeedSubscription | None = None
        self._task: TaskHandle | None = None
        self._task_ids = itertools.count(1)
        self._active_task_id: int | None = None

    @property
    def attached(self) -> bool:
        return self._subscription is not None

    @property
    def subscription(self) -> FeedSubscription | None:
        return self._subscription

    def _changed(self, what: str) -> None:
        if self._on_change is None:
            return
        try:
            self._on_change(what)
        except Exception:
            logger.exception("on_change listener failed (%s)", what)

    # ---- Realtime price ----

    def attach(self) -> None:
        if self._subscription is not None:
            raise ViewStateError("view is already attached")

        feed = self._service.stock_price_feed()

        def on_sample(sample: Sample) -> None:
            self._dispatch(lambda: self._show_price(feed, sample))

        self._feed = feed
        self._subscription = feed.subscribe(
            on_sample,
            on_complete=lambda: logger.info("%s finished.", feed.name),
        )
        logger.info("View attached to %s.", feed.name)

    def _show_price(self, feed: LiveValueFeed, sample: Sample) -> None:
        # A tick queued just before detach() must not repaint a detached view.
        if feed is not self._feed:
            return
        self.realtime_text = self._price_format.format(sample.value)
        self._changed("realtime")

    def detach(self) -> None:
        sub = self._subscription
        self._subscription = None
        self._feed = None
        if sub is not None:
            sub.cancel()
            logger.info("View detached (delivered=%d).", sub.delivered)

        task = self._task if self._active_task_id is not None else None
        self._task = None
        self._active_task_id = None
        if task is not None:
            task.discard()
            self.result_text = ""
            self.button_enabled = True
            self._changed("result")

    # ---- Async data ----

    def fetch_async_data(self) -> TaskHandle | None:
        """
        Start the long-running task unless one is already outstanding.

        Returns the handle, or None when the click was ignored or rejected.
        """
        if not self.button_enabled or self._active_task_id is not None:
            logger.debug("fetch_async_data ignored: task already outstanding")
            return None

        self.result_text = PLEASE_WAIT
        self.button_enabled = False
        self._changed("result")

        task_id = next(self._task_ids)
        self._active_task_id = task_id

        def continuation(outcome: TaskOutcome) -> None:
            self._dispatch(lambda: self._show_result(task_id, outcome))

        try:
            handle = self._runner.run(self._service.long_running_task, continuation)
        except RunnerBusyError:
            logger.warning("Background runner is saturated; fetch rejected.")
            self._active_task_id = None
            self.result_text = BUSY_TEXT
            self.button_enabled = True
            self._changed("result")
            return None

        self._task = handle
        return handle

    def _show_result(self, task_id: int, outcome: TaskOutcome) -> None:
        if task_id != self._active_task_id:
            return
        self._task = None
        self._active_task_id = None
        self.result_text = outcome.display_text()
        self.button_enabled = True
        self._changed("result")
