# tests/test_live_feed.py

from __future__ import annotations

import asyncio
import random
import threading
import time
from decimal import Decimal

import pytest

from stock_demo.core.scheduling import AsyncioScheduler, ThreadingScheduler, VirtualTimeScheduler
from stock_demo.errors import FeedClosedError, SubscriptionActiveError
from stock_demo.feed.feed_models import FeedState, Sample
from stock_demo.feed.live_feed import LiveValueFeed


def test_sample_value_is_fixed_point_hundredths() -> None:
    assert Sample(1230).value == Decimal("12.30")
    assert str(Sample(5)) == "0.05"
    assert str(Sample(0)) == "0.00"
    assert Sample(9999).value == Decimal("99.99")


@pytest.mark.parametrize("bad", [-1, 10000])
def test_sample_rejects_out_of_range(bad: int) -> None:
    with pytest.raises(ValueError):
        Sample(bad)


def test_advancing_2500ms_delivers_five_samples(scheduler: VirtualTimeScheduler) -> None:
    feed = LiveValueFeed(scheduler, interval_seconds=0.5, max_samples=50)
    got: list[Sample] = []

    sub = feed.subscribe(got.append)
    scheduler.advance(2.5)

    assert len(got) == 5
    assert [s.index for s in got] == [0, 1, 2, 3, 4]
    assert all(Decimal("0.00") <= s.value <= Decimal("99.99") for s in got)
    assert sub.delivered == 5
    assert sub.last_sample == got[-1]
    assert feed.state is FeedState.ACTIVE


def test_first_sample_arrives_after_one_interval(scheduler: VirtualTimeScheduler) -> None:
    feed = LiveValueFeed(scheduler, interval_seconds=0.5)
    got: list[Sample] = []
    feed.subscribe(got.append)

    scheduler.advance(0.4)
    assert got == []
    scheduler.advance(0.1)
    assert len(got) == 1


def test_cancel_before_first_tick_delivers_nothing(scheduler: VirtualTimeScheduler) -> None:
    feed = LiveValueFeed(scheduler)
    got: list[Sample] = []

    sub = feed.subscribe(got.append)
    sub.cancel()
    scheduler.advance(60.0)

    assert got == []
    assert sub.cancelled
    assert feed.state is FeedState.CANCELLED
    assert scheduler.pending == 0


def test_run_to_exhaustion_delivers_exactly_max_samples(scheduler: VirtualTimeScheduler) -> None:
    feed = LiveValueFeed(scheduler, interval_seconds=0.5, max_samples=50)
    got: list[Sample] = []
    completions: list[int] = []

    sub = feed.subscribe(got.append, on_complete=lambda: completions.append(len(got)))
    scheduler.advance(25.0)

    assert len(got) == 50
    assert completions == [50]
    assert feed.state is FeedState.COMPLETED
    assert sub.completed and not sub.active

    # Nothing more is produced afterwards.
    scheduler.advance(100.0)
    assert len(got) == 50
    assert scheduler.pending == 0
    assert all(0 <= s.hundredths <= 9999 for s in got)


def test_cancel_is_idempotent(scheduler: VirtualTimeScheduler) -> None:
    feed = LiveValueFeed(scheduler)
    got: list[Sample] = []
    sub = feed.subscribe(got.append)
    scheduler.advance(1.0)

    sub.cancel()
    sub.cancel()
    scheduler.advance(5.0)

    assert len(got) == 2
    assert feed.state is FeedState.CANCELLED


def test_cancel_after_completion_is_a_no_op(scheduler: VirtualTimeScheduler) -> None:
    feed = LiveValueFeed(scheduler, max_samples=2)
    sub = feed.subscribe(lambda s: None)
    scheduler.advance(1.0)

    sub.cancel()

    assert feed.state is FeedState.COMPLETED
    assert sub.cancelled


def test_cancel_from_inside_callback_stops_delivery(scheduler: VirtualTimeScheduler) -> None:
    feed = LiveValueFeed(scheduler)
    got: list[Sample] = []
    holder = []

    def on_sample(sample: Sample) -> None:
        got.append(sample)
        if len(got) == 3:
            holder[0].cancel()

    holder.append(feed.subscribe(on_sample))
    scheduler.advance(10.0)

    assert len(got) == 3
    assert feed.state is FeedState.CANCELLED


def test_second_subscribe_while_active_is_rejected(scheduler: VirtualTimeScheduler) -> None:
    feed = LiveValueFeed(scheduler)
    feed.subscribe(lambda s: None)

    with pytest.raises(SubscriptionActiveError):
        feed.subscribe(lambda s: None)


def test_subscribe_after_cancel_or_completion_is_rejected(scheduler: VirtualTimeScheduler) -> None:
    cancelled = LiveValueFeed(scheduler)
    cancelled.subscribe(lambda s: None).cancel()
    with pytest.raises(FeedClosedError):
        cancelled.subscribe(lambda s: None)

    completed = LiveValueFeed(scheduler, max_samples=1)
    completed.subscribe(lambda s: None)
    scheduler.advance(0.5)
    with pytest.raises(FeedClosedError):
        completed.subscribe(lambda s: None)


def test_zero_max_samples_completes_on_subscribe(scheduler: VirtualTimeScheduler) -> None:
    feed = LiveValueFeed(scheduler, max_samples=0)
    done: list[bool] = []

    sub = feed.subscribe(lambda s: None, on_complete=lambda: done.append(True))

    assert done == [True]
    assert sub.completed
    assert scheduler.pending == 0


def test_failing_callback_does_not_stop_the_feed(scheduler: VirtualTimeScheduler) -> None:
    feed = LiveValueFeed(scheduler, max_samples=4)
    seen: list[int] = []

    def on_sample(sample: Sample) -> None:
        seen.append(sample.index)
        raise RuntimeError("boom")

    feed.subscribe(on_sample)
    scheduler.advance(2.0)

    assert seen == [0, 1, 2, 3]
    assert feed.state is FeedState.COMPLETED


def test_values_are_drawn_independently_from_the_rng(scheduler: VirtualTimeScheduler) -> None:
    feed = LiveValueFeed(scheduler, max_samples=10, rng=random.Random(42))
    got: list[Sample] = []
    feed.subscribe(got.append)
    scheduler.advance(5.0)

    ref = random.Random(42)
    assert [s.hundredths for s in got] == [ref.randint(0, 9999) for _ in range(10)]


def test_max_hundredths_bounds_values(scheduler: VirtualTimeScheduler) -> None:
    feed = LiveValueFeed(scheduler, max_samples=50, max_hundredths=99)
    got: list[Sample] = []
    feed.subscribe(got.append)
    scheduler.advance(25.0)

    assert len(got) == 50
    assert all(s.hundredths <= 99 for s in got)


@pytest.mark.parametrize(
    "kwargs",
    [{"interval_seconds": 0}, {"max_samples": -1}, {"max_hundredths": 10000}],
)
def test_invalid_configuration_is_rejected(scheduler: VirtualTimeScheduler, kwargs) -> None:
    with pytest.raises(ValueError):
        LiveValueFeed(scheduler, **kwargs)


def test_no_delivery_after_cancel_returns_with_real_threads() -> None:
    feed = LiveValueFeed(ThreadingScheduler(), interval_seconds=0.001, max_samples=10_000)
    got: list[Sample] = []
    first = threading.Event()

    def on_sample(sample: Sample) -> None:
        got.append(sample)
        first.set()
        # Widen the window in which cancel() races with an in-flight delivery.
        time.sleep(0.002)

    sub = feed.subscribe(on_sample)
    assert first.wait(2.0)

    sub.cancel()
    count_at_cancel = len(got)
    time.sleep(0.05)

    assert len(got) == count_at_cancel
    assert feed.state is FeedState.CANCELLED


@pytest.mark.asyncio
async def test_asyncio_scheduler_drives_feed_on_the_loop() -> None:
    loop = asyncio.get_running_loop()
    feed = LiveValueFeed(AsyncioScheduler(loop), interval_seconds=0.01, max_samples=3)
    got: list[Sample] = []
    done = asyncio.Event()

    feed.subscribe(got.append, on_complete=done.set)
    await asyncio.wait_for(done.wait(), timeout=2.0)

    assert [s.index for s in got] == [0, 1, 2]
    assert feed.state is FeedState.COMPLETED


@pytest.mark.asyncio
async def test_asyncio_scheduler_cancel_stops_ticks() -> None:
    loop = asyncio.get_running_loop()
    feed = LiveValueFeed(AsyncioScheduler(loop), interval_seconds=0.05, max_samples=50)
    got: list[Sample] = []

    sub = feed.subscribe(got.append)
    sub.cancel()
    await asyncio.sleep(0.15)

    assert got == []
