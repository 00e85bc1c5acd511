# src/stock_demo/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class TaskState(StrEnum):
    """
    Background task lifecycle.

    PENDING -> COMPLETED or PENDING -> FAILED, exactly once.
    """

    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(slots=True, frozen=True)
class TaskOutcome:
    state: TaskState
    result: Any = None
    error: str | None = None

    @classmethod
    def completed(cls, result: Any) -> TaskOutcome:
        return cls(state=TaskState.COMPLETED, result=result)

    @classmethod
    def failed(cls, error: str) -> TaskOutcome:
        return cls(state=TaskState.FAILED, error=error or "Error - unknown failure")

    @property
    def ok(self) -> bool:
        return self.state is TaskState.COMPLETED

    def display_text(self) -> str:
        """What a caller would show to the user for this outcome."""
        if self.ok:
            return str(self.result)
        return self.error or ""
