# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from stock_demo.core.scheduling import VirtualTimeScheduler


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with the service, runner and bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="stock-demo-test",
        log_level="DEBUG",
        data_dir=tmp_path / "data",
        feed_interval_seconds=0.5,
        feed_max_samples=50,
        feed_max_hundredths=9999,
        long_task_seconds=6.0,
        max_outstanding_tasks=4,
        price_format="Current Price: {} €",
        print_ticks=False,
    )


@pytest.fixture()
def scheduler() -> VirtualTimeScheduler:
    return VirtualTimeScheduler()
