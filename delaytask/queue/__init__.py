"""
Queue module.
Contains the tick/key scheme, the atomic scripts, and the push/pull operations.
"""

from delaytask.queue.client import DelayTaskQueue
from delaytask.queue.errors import (
    DelayTaskError,
    InvalidIntervalError,
    InvalidTaskNameError,
    StoreError,
)
from delaytask.queue.keys import (
    bucket_key,
    cursor_key,
    matured_tick,
    push_tick,
)

__all__ = [
    "DelayTaskQueue",
    "DelayTaskError",
    "InvalidIntervalError",
    "InvalidTaskNameError",
    "StoreError",
    "bucket_key",
    "cursor_key",
    "matured_tick",
    "push_tick",
]
