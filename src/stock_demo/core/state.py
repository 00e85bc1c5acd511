# src/stock_demo/core/state.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..services.stock_data import StockDataService
from ..tasks.task_runner import BackgroundTaskRunner
from ..views.advanced_view import AdvancedView
from .dispatch import UiThread


@dataclass
class AppState:
    # Settings object (real Settings or a SimpleNamespace in tests).
    settings: Any

    ui: UiThread
    service: StockDataService
    runner: BackgroundTaskRunner
    view: AdvancedView

    notifications: list[str] = field(default_factory=list)
