# src/stock_demo/feed/live_feed.py

from __future__ import annotations

"""
Live value feed.

A scheduler-driven producer that:
- waits one interval, draws a uniformly random sample, delivers it,
- repeats until max_samples were delivered (then COMPLETED),
- or stops for good when its single subscription is cancelled (CANCELLED).

Delivery runs on whatever thread the scheduler uses. Marshalling into a UI thread or
event loop is the subscriber's job (see core/dispatch.py).

Cancellation is race-free: the cancel flag is checked and the sample delivered while
holding the feed lock, and cancel() takes the same lock. Once cancel() returns no
further on_sample call can start. The lock is re-entrant so on_sample may cancel.
"""

import logging
import random
import threading
from collections.abc import Callable

from ..core.ports import ScheduledCall, Scheduler
from ..errors import FeedClosedError, SubscriptionActiveError
from .feed_models import MAX_HUNDREDTHS, FeedState, Sample

logger = logging.getLogger(__name__)

SampleCallback = Callable[[Sample], None]
CompleteCallback = Callable[[], None]


class FeedSubscription:
    """
    One observer's attachment to a LiveValueFeed.

    Owned by the observer. The feed keeps a reference only while the subscription is
    live and drops it as soon as the feed reaches a final state.
    """

    def __init__(self, feed: LiveValueFeed) -> None:
        self._feed: LiveValueFeed | None = feed
        self._cancelled = False
        self.completed = False
        self.last_sample: Sample | None = None
        self.delivered = 0

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def active(self) -> bool:
        return not self._cancelled and not self.completed

    def cancel(self) -> None:
        """Stop deliveries. Calling it again, or after completion, does nothing."""
        feed = self._feed
        if feed is None:
            self._cancelled = True
            return
        feed._cancel(self)

    def __repr__(self) -> str:
        return (
            f"FeedSubscription(cancelled={self._cancelled}, completed={self.completed}, "
            f"delivered={self.delivered})"
        )


class LiveValueFeed:
    def __init__(
        self,
        scheduler: Scheduler,
        *,
        interval_seconds: float = 0.5,
        max_samples: int = 50,
        max_hundredths: int = MAX_HUNDREDTHS,
        rng: random.Random | None = None,
        name: str = "feed",
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be > 0")
        if max_samples < 0:
            raise ValueError("max_samples must be >= 0")
        if not 0 <= max_hundredths <= MAX_HUNDREDTHS:
            raise ValueError(f"max_hundredths must be in [0, {MAX_HUNDREDTHS}]")

        self.name = name
        self._scheduler = scheduler
        self._interval = float(interval_seconds)
        self._max_samples = int(max_samples)
        self._max_hundredths = int(max_hundredths)
        self._rng = rng or random.Random()

        self._lock = threading.RLock()
        self._state = FeedState.IDLE
        self._subscription: FeedSubscription | None = None
        self._on_sample: SampleCallback | None = None
        self._on_complete: CompleteCallback | None = None
        self._pending: ScheduledCall | None = None
        self._produced = 0

    @property
    def state(self) -> FeedState:
        return self._state

    @property
    def produced(self) -> int:
        return self._produced

    def subscribe(
        self,
        on_sample: SampleCallback,
        *,
        on_complete: CompleteCallback | None = None,
    ) -> FeedSubscription:
        """
        Attach the single observer and start producing.

        Raises SubscriptionActiveError while another subscription is live and
        FeedClosedError once the feed completed or was cancelled.
        """
        with self._lock:
            if self._state is FeedState.ACTIVE:
                raise SubscriptionActiveError(f"{self.name}: feed already has a subscriber")
            if self._state.is_terminal:
                raise FeedClosedError(f"{self.name}: feed is {self._state.value}; create a new one")

            sub = FeedSubscription(self)
            self._subscription = sub
            self._on_sample = on_sample
            self._on_complete = on_complete
            self._state = FeedState.ACTIVE
            logger.debug(
                "%s: subscribed (interval=%.3fs, max_samples=%d)",
                self.name,
                self._interval,
                self._max_samples,
            )

            if self._max_samples == 0:
                self._complete()
            else:
                self._pending = self._scheduler.schedule(self._interval, self._tick)
            return sub

    def _tick(self) -> None:
        with self._lock:
            self._pending = None
            sub = self._subscription
            on_sample = self._on_sample
            if self._state is not FeedState.ACTIVE or sub is None or on_sample is None:
                return
            if sub._cancelled:
                return

            sample = Sample(self._rng.randint(0, self._max_hundredths), index=self._produced)
            self._produced += 1
            sub.last_sample = sample
            sub.delivered += 1

            try:
                on_sample(sample)
            except Exception:
                logger.exception("%s: on_sample callback failed (sample #%d)", self.name, sample.index)

            # on_sample may have cancelled us.
            if self._state is not FeedState.ACTIVE:
                return

            if self._produced >= self._max_samples:
                self._complete()
                return

            self._pending = self._scheduler.schedule(self._interval, self._tick)

    def _complete(self) -> None:
        sub = self._subscription
        on_complete = self._on_complete
        self._state = FeedState.COMPLETED
        self._release()
        logger.debug("%s: completed after %d samples", self.name, self._produced)

        if sub is not None:
            sub.completed = True
        if on_complete is not None:
            try:
                on_complete()
            except Exception:
                logger.exception("%s: on_complete callback failed", self.name)

    def _cancel(self, sub: FeedSubscription) -> None:
        with self._lock:
            if sub._cancelled:
                return
            sub._cancelled = True
            if self._state is not FeedState.ACTIVE or self._subscription is not sub:
                return

            pending = self._pending
            self._state = FeedState.CANCELLED
            self._release()
            if pending is not None:
                pending.cancel()
            logger.debug("%s: cancelled after %d samples", self.name, self._produced)

    def _release(self) -> None:
        if self._subscription is not None:
            self._subscription._feed = None
        self._subscription = None
        self._on_sample = None
        self._on_complete = None
        self._pending = None
