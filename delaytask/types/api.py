"""
API request and response type definitions.
"""

from datetime import datetime

from pydantic import BaseModel, Field, model_validator


class PushTaskRequest(BaseModel):
    """Request body for scheduling a task."""

    payload: str = Field(..., description="Opaque task payload")
    tick_time: int | None = Field(
        default=None, ge=0, description="Absolute due time in milliseconds"
    )
    delay_ms: int | None = Field(
        default=None, ge=0, description="Due time relative to now, in milliseconds"
    )
    interval: int | None = Field(
        default=None, gt=0, description="Tick width in milliseconds"
    )

    @model_validator(mode="after")
    def check_due_time(self) -> "PushTaskRequest":
        """Only one way of giving the due time is accepted."""
        if self.tick_time is not None and self.delay_ms is not None:
            raise ValueError("tick_time and delay_ms are mutually exclusive")
        return self


class PushTaskResponse(BaseModel):
    """Response body after scheduling a task."""

    taskname: str
    tick: int
    tick_time: int
    interval: int
    message: str = "Task scheduled successfully"


class PullTaskResponse(BaseModel):
    """Due tasks popped by one pull call."""

    taskname: str
    cursor: int
    matured: int
    tasks: list[str]
    count: int


class CursorResponse(BaseModel):
    """Current sweep cursor for a task name."""

    taskname: str
    cursor: int


class BucketResponse(BaseModel):
    """Number of payloads waiting in one bucket."""

    taskname: str
    tick: int
    size: int


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    redis: str
    timestamp: datetime


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str
    detail: str | None = None
