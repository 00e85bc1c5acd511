# src/stock_demo/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures the local (gitignored) data directory exists,
- wires the UI thread, service, runner and view into AppState,
- tears everything down again on exit.
"""

from __future__ import annotations

import contextlib
import logging
from collections.abc import Callable

from ..config import get_settings
from ..core.dispatch import UiThread
from ..core.ports import Scheduler
from ..core.state import AppState
from ..services.stock_data import StockDataService
from ..tasks.task_runner import BackgroundTaskRunner
from ..views.advanced_view import AdvancedView

logger = logging.getLogger(__name__)


def create_initial_state(
    *,
    settings=None,
    scheduler: Scheduler | None = None,
    on_change: Callable[[str], None] | None = None,
) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    settings.data_dir.mkdir(parents=True, exist_ok=True)

    ui = UiThread()
    service = StockDataService(settings, scheduler=scheduler)
    runner = BackgroundTaskRunner(max_outstanding=settings.max_outstanding_tasks)
    notifications: list[str] = []

    def notify(message: str) -> None:
        notifications.append(message)
        logger.info("Notification: %s", message)

    view = AdvancedView(
        service,
        runner,
        ui.access,
        price_format=settings.price_format,
        notifier=notify,
        on_change=on_change,
    )

    return AppState(
        settings=settings,
        ui=ui,
        service=service,
        runner=runner,
        view=view,
        notifications=notifications,
    )


def shutdown_state(state: AppState) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    with contextlib.suppress(Exception):
        state.ui.call(state.view.detach, timeout=2.0)
    with contextlib.suppress(Exception):
        state.service.interrupt()

    try:
        state.ui.stop()
        state.ui.join(timeout=2.0)
    except Exception:
        logger.debug("UI thread shutdown failed.", exc_info=True)
