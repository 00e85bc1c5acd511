# src/stock_demo/feed/feed_models.py

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import StrEnum

MAX_HUNDREDTHS = 9999


class FeedState(StrEnum):
    """
    Feed lifecycle.

    IDLE -> ACTIVE on subscribe; ACTIVE -> COMPLETED after the last sample or
    ACTIVE -> CANCELLED on cancel. COMPLETED and CANCELLED are final.
    """

    IDLE = "idle"
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (FeedState.COMPLETED, FeedState.CANCELLED)


@dataclass(slots=True, frozen=True)
class Sample:
    """One price tick: an integer count of hundredths plus its production index."""

    hundredths: int
    index: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.hundredths <= MAX_HUNDREDTHS:
            raise ValueError(f"hundredths out of range [0, {MAX_HUNDREDTHS}]: {self.hundredths}")

    @property
    def value(self) -> Decimal:
        return Decimal(self.hundredths).scaleb(-2)

    def __str__(self) -> str:
        return str(self.value)
