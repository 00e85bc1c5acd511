# src/stock_demo/errors.py

"""
Exception hierarchy.

Errors raised on the caller's thread (subscribe/run/attach misuse) are exceptions.
Failures of background work are never raised across threads: they become a FAILED
TaskOutcome delivered to the task's continuation.
"""

from __future__ import annotations


class StockDemoError(Exception):
    """Base class for all errors raised by this package."""


class FeedError(StockDemoError):
    pass


class FeedClosedError(FeedError):
    """The feed already completed or was cancelled; create a new feed to replay."""


class SubscriptionActiveError(FeedError):
    """The feed already has its one subscriber."""


class TaskError(StockDemoError):
    pass


class RunnerBusyError(TaskError):
    """Too many tasks are still running; nothing was started."""


class ContinuationAlreadySetError(TaskError):
    pass


class WorkInterrupted(StockDemoError):
    """Background work was interrupted before it finished."""


class ViewStateError(StockDemoError):
    pass
