# src/stock_demo/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The feed and the task runner depend on Protocols instead of concrete schedulers or
UI toolkits. This keeps execution contexts swappable (threads, asyncio, virtual time)
and makes testing easier.
"""

from collections.abc import Callable
from typing import Protocol

Dispatcher = Callable[[Callable[[], None]], None]
# Marshals a callable into a caller-owned execution context (UI thread, event loop...).


class ScheduledCall(Protocol):
    """A pending delayed call. cancel() is a no-op once the call has started."""

    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Fixed-delay scheduler driving feed producers."""

    def schedule(self, delay_seconds: float, fn: Callable[[], None]) -> ScheduledCall: ...


class Waiter(Protocol):
    """
    Blocking wait used by long-running work.

    Returns True when the wait was interrupted before `seconds` elapsed
    (same contract as threading.Event.wait).
    """

    def __call__(self, seconds: float) -> bool: ...
