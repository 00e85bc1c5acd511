# tests/test_stock_data.py

from __future__ import annotations

import random

import pytest

from stock_demo.core.scheduling import VirtualTimeScheduler
from stock_demo.errors import WorkInterrupted
from stock_demo.feed.feed_models import FeedState, Sample
from stock_demo.services.stock_data import StockDataService

from .fakes import no_wait


def test_each_call_returns_a_fresh_idle_feed(settings, scheduler: VirtualTimeScheduler) -> None:
    service = StockDataService(settings, scheduler=scheduler)

    a = service.stock_price_feed()
    b = service.stock_price_feed()

    assert a is not b
    assert a.name != b.name
    assert a.state is FeedState.IDLE and b.state is FeedState.IDLE


def test_feed_follows_settings(settings, scheduler: VirtualTimeScheduler) -> None:
    settings.feed_interval_seconds = 0.25
    settings.feed_max_samples = 3
    service = StockDataService(settings, scheduler=scheduler, rng=random.Random(7))
    got: list[Sample] = []

    service.stock_price_feed().subscribe(got.append)
    scheduler.advance(10.0)

    assert len(got) == 3
    assert scheduler.now == 10.0


def test_long_running_task_reports_whole_seconds(settings) -> None:
    requested: list[float] = []

    def waiter(seconds: float) -> bool:
        requested.append(seconds)
        return False

    service = StockDataService(settings, waiter=waiter)

    assert service.long_running_task() == "ready in 6 seconds"
    assert requested == [6.0]


def test_long_running_task_raises_when_interrupted(settings) -> None:
    service = StockDataService(settings, waiter=no_wait)
    service.interrupt()
    service.interrupt()

    assert service.interrupted
    with pytest.raises(WorkInterrupted, match="sleep interrupted"):
        service.long_running_task()


def test_waiter_reporting_interruption_raises(settings) -> None:
    service = StockDataService(settings, waiter=lambda seconds: True)

    with pytest.raises(WorkInterrupted):
        service.long_running_task()
