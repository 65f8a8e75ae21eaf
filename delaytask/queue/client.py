"""
Delay-task queue operations.

Producers push payloads into per-tick buckets; sweepers pull from the bucket
under a cursor shared by every sweeper of a task name. Both operations are a
single script round trip, so any number of processes can call them
concurrently without further locking.
"""

import logging
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager

from redis.asyncio import Redis
from redis.exceptions import RedisError

from delaytask.config import get_settings
from delaytask.constants import SPAN_PULL_TASK, SPAN_PUSH_TASK
from delaytask.observability.metrics import MetricsCollector, get_metrics
from delaytask.observability.tracing import get_tracer
from delaytask.queue.errors import StoreError
from delaytask.queue.keys import (
    bucket_key,
    bucket_prefix,
    current_millis,
    cursor_key,
    matured_tick,
    push_tick,
)
from delaytask.queue.scripts import PULL_SCRIPT, PUSH_SCRIPT
from delaytask.types.task import PullResult

logger = logging.getLogger(__name__)


class DelayTaskQueue:
    """
    Redis-backed delay-task queue.

    Keeps no state of its own besides configuration: buckets and cursors
    live in the store, so separate instances (in separate processes) over the
    same Redis behave as one queue.
    """

    def __init__(
        self,
        redis: Redis,
        bucket_ttl_seconds: int | None = None,
        cursor_ttl_seconds: int | None = None,
        batch_size: int | None = None,
        default_interval: int | None = None,
        clock: Callable[[], int] | None = None,
        metrics: MetricsCollector | None = None,
    ):
        """
        Initialize the queue.

        Args:
            redis: Async Redis client created with ``decode_responses=True``.
            bucket_ttl_seconds: Expiry refreshed on a bucket by every push.
            cursor_ttl_seconds: Expiry refreshed on the cursor when it moves.
            batch_size: Maximum payloads returned by one pull.
            default_interval: Tick width used by ``push_task``/``pull_task``.
            clock: Millisecond clock. Defaults to wall-clock time.
            metrics: Metrics collector. Defaults to the global one.
        """
        settings = get_settings()

        def pick(value: int | None, default: int) -> int:
            return value if value is not None else default

        self.bucket_ttl_seconds = pick(bucket_ttl_seconds, settings.bucket_ttl_seconds)
        self.cursor_ttl_seconds = pick(cursor_ttl_seconds, settings.cursor_ttl_seconds)
        self.batch_size = pick(batch_size, settings.pull_batch_size)
        self.default_interval = pick(default_interval, settings.default_interval)

        for name in (
            "bucket_ttl_seconds",
            "cursor_ttl_seconds",
            "batch_size",
            "default_interval",
        ):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive")
        # A bucket must outlive any cursor that could still be walking towards it
        if self.bucket_ttl_seconds < self.cursor_ttl_seconds:
            raise ValueError("bucket_ttl_seconds must be at least cursor_ttl_seconds")

        self._redis = redis
        self._clock = clock or current_millis
        self._metrics = metrics or get_metrics()

        # EVALSHA with a transparent SCRIPT LOAD on NOSCRIPT
        self._push_script = redis.register_script(PUSH_SCRIPT)
        self._pull_script = redis.register_script(PULL_SCRIPT)

    def now_ms(self) -> int:
        """Current time according to the queue's clock."""
        return self._clock()

    @contextmanager
    def _store_errors(self, operation: str, taskname: str) -> Iterator[None]:
        try:
            yield
        except RedisError as e:
            self._metrics.record_store_error(operation)
            raise StoreError(operation, taskname, e) from e

    async def push(
        self,
        taskname: str,
        tick_time: int,
        payload: str,
        interval: int,
    ) -> int:
        """
        Schedule a payload for the tick containing ``tick_time``.

        Appends to the bucket and refreshes its expiry in one atomic script.
        Pushing the same payload twice enqueues it twice.

        Args:
            taskname: Task name; each one has its own buckets and cursor.
            tick_time: Due time, in the same unit as ``interval``.
            payload: Opaque payload.
            interval: Tick width.

        Returns:
            The tick the payload was bucketed into.

        Raises:
            InvalidIntervalError: If ``interval`` is not positive.
            InvalidTaskNameError: If ``taskname`` is empty.
            StoreError: If the round trip to Redis fails.
        """
        tick = push_tick(tick_time, interval)
        key = bucket_key(taskname, tick)

        with get_tracer().start_as_current_span(SPAN_PUSH_TASK) as span:
            span.set_attribute("taskname", taskname)
            span.set_attribute("tick", tick)

            start = time.perf_counter()
            with self._store_errors("push", taskname):
                size = await self._push_script(
                    keys=[key],
                    args=[payload, self.bucket_ttl_seconds],
                )
            duration = time.perf_counter() - start

        self._metrics.record_push(taskname, duration)

        logger.debug(
            "Task pushed",
            extra={"taskname": taskname, "tick": tick, "bucket_size": size},
        )

        return tick

    async def pull_batch(self, taskname: str, interval: int) -> PullResult:
        """
        Pop up to ``batch_size`` due payloads for ``taskname``.

        Runs a single atomic script that:
        1. Reads the cursor, creating it at the matured tick if absent.
        2. Pops payloads from the head of the bucket under the cursor.
        3. If nothing was popped and the cursor is behind the matured tick,
           advances the cursor by exactly one tick.

        The cursor only moves once its bucket has been seen empty, and never
        past the matured tick.

        Args:
            taskname: Task name.
            interval: Tick width; must match the one producers push with.

        Returns:
            PullResult with the popped payloads in FIFO order.

        Raises:
            InvalidIntervalError: If ``interval`` is not positive.
            InvalidTaskNameError: If ``taskname`` is empty.
            StoreError: If the round trip to Redis fails.
        """
        matured = matured_tick(self.now_ms(), interval)

        with get_tracer().start_as_current_span(SPAN_PULL_TASK) as span:
            span.set_attribute("taskname", taskname)
            span.set_attribute("matured_tick", matured)

            start = time.perf_counter()
            with self._store_errors("pull", taskname):
                cursor, tasks = await self._pull_script(
                    keys=[cursor_key(taskname)],
                    args=[
                        matured,
                        self.cursor_ttl_seconds,
                        self.batch_size,
                        bucket_prefix(taskname),
                    ],
                )
            duration = time.perf_counter() - start

            span.set_attribute("cursor_tick", int(cursor))
            span.set_attribute("task_count", len(tasks))

        result = PullResult(
            taskname=taskname,
            cursor=int(cursor),
            matured=matured,
            tasks=list(tasks),
        )

        # Mirrors the script's advance condition
        advanced = result.is_empty and result.is_behind
        self._metrics.record_pull(
            taskname=taskname,
            count=len(result.tasks),
            cursor=result.cursor,
            advanced=advanced,
            duration_seconds=duration,
        )

        if not result.is_empty:
            logger.debug(
                "Tasks pulled",
                extra={
                    "taskname": taskname,
                    "tick": result.cursor,
                    "count": len(result.tasks),
                },
            )
        elif advanced:
            logger.debug(
                "Cursor advanced",
                extra={"taskname": taskname, "tick": result.cursor + 1},
            )

        return result

    async def pull(self, taskname: str, interval: int) -> list[str]:
        """
        Pop up to ``batch_size`` due payloads for ``taskname``.

        See ``pull_batch``; an empty list means nothing is due yet.
        """
        result = await self.pull_batch(taskname, interval)
        return result.tasks

    async def push_task(self, taskname: str, tick_time: int, payload: str) -> int:
        """Push with the default interval."""
        return await self.push(taskname, tick_time, payload, self.default_interval)

    async def pull_task(self, taskname: str) -> list[str]:
        """Pull with the default interval."""
        return await self.pull(taskname, self.default_interval)

    async def get_cursor(self, taskname: str) -> int | None:
        """
        Read the sweep cursor without touching it.

        Returns:
            The cursor tick, or None if no sweeper has pulled recently.
        """
        with self._store_errors("get_cursor", taskname):
            raw = await self._redis.get(cursor_key(taskname))
        return int(raw) if raw is not None else None

    async def bucket_size(self, taskname: str, tick: int) -> int:
        """Number of payloads still waiting in one bucket."""
        with self._store_errors("bucket_size", taskname):
            return await self._redis.llen(bucket_key(taskname, tick))
