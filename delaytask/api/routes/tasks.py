"""
Delay-task routes.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status
from redis.asyncio import Redis

from delaytask.constants import API_V1_PREFIX
from delaytask.queue.client import DelayTaskQueue
from delaytask.store import get_redis
from delaytask.types.api import (
    BucketResponse,
    CursorResponse,
    PullTaskResponse,
    PushTaskRequest,
    PushTaskResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix=f"{API_V1_PREFIX}/tasks", tags=["Tasks"])

TaskName = Annotated[str, Path(min_length=1, max_length=200)]


async def get_queue(redis: Redis = Depends(get_redis)) -> DelayTaskQueue:
    """Dependency providing a queue over the shared Redis client."""
    return DelayTaskQueue(redis)


@router.post(
    "/{taskname}",
    response_model=PushTaskResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Schedule a task",
    description=(
        "Push a payload into the bucket of the tick it is due in. A tick_time in "
        "the past is accepted as is: the payload is pulled only if sweepers have "
        "not yet moved past its tick."
    ),
)
async def push_task(
    taskname: TaskName,
    request: PushTaskRequest,
    queue: DelayTaskQueue = Depends(get_queue),
) -> PushTaskResponse:
    """
    Schedule a task.

    The due time is ``tick_time`` if given, otherwise now plus ``delay_ms``
    (or now). Submitting the same request twice schedules the payload twice.

    Args:
        taskname: Task name.
        request: Push request.
        queue: Delay-task queue.

    Returns:
        PushTaskResponse with the tick the payload landed in.
    """
    interval = request.interval or queue.default_interval

    if request.tick_time is not None:
        tick_time = request.tick_time
    else:
        tick_time = queue.now_ms() + (request.delay_ms or 0)

    tick = await queue.push(taskname, tick_time, request.payload, interval)

    logger.info(
        "Task scheduled",
        extra={"taskname": taskname, "tick": tick, "interval": interval},
    )

    return PushTaskResponse(
        taskname=taskname,
        tick=tick,
        tick_time=tick_time,
        interval=interval,
    )


@router.post(
    "/{taskname}/pull",
    response_model=PullTaskResponse,
    summary="Pull due tasks",
    description="Pop a batch of due tasks. An empty list means nothing is due yet.",
)
async def pull_tasks(
    taskname: TaskName,
    interval: int | None = Query(default=None, gt=0),
    queue: DelayTaskQueue = Depends(get_queue),
) -> PullTaskResponse:
    """
    Pull due tasks.

    Popped tasks are removed from the store; pulling again never returns
    them a second time.

    Args:
        taskname: Task name.
        interval: Tick width producers pushed with.
        queue: Delay-task queue.

    Returns:
        PullTaskResponse with the popped tasks in FIFO order.
    """
    result = await queue.pull_batch(taskname, interval or queue.default_interval)

    return PullTaskResponse(
        taskname=taskname,
        cursor=result.cursor,
        matured=result.matured,
        tasks=result.tasks,
        count=len(result.tasks),
    )


@router.get(
    "/{taskname}/cursor",
    response_model=CursorResponse,
    summary="Get sweep cursor",
    description="Read the shared sweep cursor of a task name without moving it.",
)
async def get_cursor(
    taskname: TaskName,
    queue: DelayTaskQueue = Depends(get_queue),
) -> CursorResponse:
    """
    Get the sweep cursor.

    Args:
        taskname: Task name.
        queue: Delay-task queue.

    Returns:
        CursorResponse with the current cursor tick.

    Raises:
        HTTPException: If no sweeper has pulled this task name recently.
    """
    cursor = await queue.get_cursor(taskname)

    if cursor is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No cursor for task name {taskname}",
        )

    return CursorResponse(taskname=taskname, cursor=cursor)


@router.get(
    "/{taskname}/buckets/{tick}",
    response_model=BucketResponse,
    summary="Get bucket size",
    description="Count the payloads still waiting in one tick's bucket.",
)
async def get_bucket(
    taskname: TaskName,
    tick: int,
    queue: DelayTaskQueue = Depends(get_queue),
) -> BucketResponse:
    """Get the number of payloads waiting in a bucket (0 if it never existed or expired)."""
    size = await queue.bucket_size(taskname, tick)
    return BucketResponse(taskname=taskname, tick=tick, size=size)
