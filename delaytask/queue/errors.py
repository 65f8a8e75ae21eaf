"""
Delay-task queue errors.

An empty pull is never an error; it just means no task is due yet.
"""


class DelayTaskError(Exception):
    """Base class for all delay-task queue errors."""


class InvalidIntervalError(DelayTaskError, ValueError):
    """Raised when a tick interval is zero or negative."""

    def __init__(self, interval: int):
        self.interval = interval
        super().__init__(f"Interval must be positive, got {interval}")


class InvalidTaskNameError(DelayTaskError, ValueError):
    """Raised when a task name cannot be turned into a store key."""

    def __init__(self, taskname: str):
        self.taskname = taskname
        super().__init__(f"Invalid task name: {taskname!r}")


class StoreError(DelayTaskError):
    """
    Raised when a round trip to Redis fails.

    Covers connection failures, timeouts and script evaluation errors.
    The underlying ``redis`` exception is chained as ``__cause__``.
    Nothing is retried; pull is always safe to retry, push duplicates the
    payload if the failed call actually reached the store.
    """

    def __init__(self, operation: str, taskname: str, error: Exception):
        self.operation = operation
        self.taskname = taskname
        super().__init__(f"{operation} failed for task {taskname!r}: {error}")
