# src/stock_demo/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Every knob has a working default, so the demo runs with an empty environment.
- Components receive settings by injection; tests pass a SimpleNamespace.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "STOCK_DEMO"

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    data_dir: Path

    # ---- Live price feed ----
    feed_interval_seconds: float
    feed_max_samples: int
    feed_max_hundredths: int

    # ---- Background tasks ----
    long_task_seconds: float
    max_outstanding_tasks: int

    # ---- Console view ----
    price_format: str
    print_ticks: bool

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "stock-demo").strip() or "stock-demo"
        log_level = _env(_k("LOG_LEVEL"), "INFO")
        data_dir = _env_path(_k("DATA_DIR"), Path(".local/stock_demo"))

        interval_ms = _env_int(_k("FEED_INTERVAL_MS"), 500)
        feed_interval_seconds = max(1, interval_ms) / 1000.0
        feed_max_samples = max(0, _env_int(_k("FEED_MAX_SAMPLES"), 50))
        # Hundredths are clamped to the 4-digit range the price display supports.
        feed_max_hundredths = min(9999, max(0, _env_int(_k("FEED_MAX_HUNDREDTHS"), 9999)))

        long_task_seconds = max(0.0, _env_float(_k("LONG_TASK_SECONDS"), 6.0))
        max_outstanding_tasks = max(1, _env_int(_k("MAX_OUTSTANDING_TASKS"), 8))

        price_format = _env(_k("PRICE_FORMAT"), "Current Price: {} €")
        print_ticks = _env_bool(_k("PRINT_TICKS"), True)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            feed_interval_seconds=feed_interval_seconds,
            feed_max_samples=feed_max_samples,
            feed_max_hundredths=feed_max_hundredths,
            long_task_seconds=long_task_seconds,
            max_outstanding_tasks=max_outstanding_tasks,
            price_format=price_format,
            print_ticks=print_ticks,
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = Settings.from_env()
    return _SETTINGS
