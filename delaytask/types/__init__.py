"""
Type definitions for the delay-task queue.
Contains input/output type definitions, grouped by module.
"""

from delaytask.types.api import (
    BucketResponse,
    CursorResponse,
    ErrorResponse,
    HealthResponse,
    PullTaskResponse,
    PushTaskRequest,
    PushTaskResponse,
)
from delaytask.types.task import (
    PullResult,
    TaskContext,
)

__all__ = [
    # API types
    "PushTaskRequest",
    "PushTaskResponse",
    "PullTaskResponse",
    "CursorResponse",
    "BucketResponse",
    "HealthResponse",
    "ErrorResponse",
    # Task types
    "PullResult",
    "TaskContext",
]
