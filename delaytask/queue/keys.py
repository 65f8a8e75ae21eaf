"""
Tick arithmetic and store key scheme.

Producers round a timestamp *up* to its tick so a task never lands in a
window that has already elapsed. Consumers round ``now - 1`` *down* so they
only ever look at windows that have fully elapsed, lagging producers by up to
one interval.
"""

import time

from delaytask.constants import BUCKET_KEY_PREFIX, CURSOR_KEY_PREFIX
from delaytask.queue.errors import InvalidIntervalError, InvalidTaskNameError


def current_millis() -> int:
    """Current wall-clock time in milliseconds since the epoch."""
    return time.time_ns() // 1_000_000


def _check_interval(interval: int) -> None:
    if interval <= 0:
        raise InvalidIntervalError(interval)


def _check_taskname(taskname: str) -> None:
    if not taskname:
        raise InvalidTaskNameError(taskname)


def push_tick(tick_time: int, interval: int) -> int:
    """
    Get the tick a task scheduled at ``tick_time`` is bucketed into.

    Args:
        tick_time: Target timestamp, in the same unit as ``interval``.
        interval: Tick width.

    Returns:
        ``ceil(tick_time / interval)``.
    """
    _check_interval(interval)
    return (tick_time + interval - 1) // interval


def matured_tick(now_ms: int, interval: int) -> int:
    """
    Get the most recent tick that has fully elapsed at ``now_ms``.

    Args:
        now_ms: Current time in milliseconds.
        interval: Tick width.

    Returns:
        ``floor((now_ms - 1) / interval)``.
    """
    _check_interval(interval)
    return (now_ms - 1) // interval


def bucket_prefix(taskname: str) -> str:
    """Key prefix shared by every bucket of one task name."""
    _check_taskname(taskname)
    # Braces are a Redis Cluster hash tag: all keys of a task name share a slot
    return f"{BUCKET_KEY_PREFIX}:{{{taskname}}}:"


def bucket_key(taskname: str, tick: int) -> str:
    """Key of the list holding payloads for ``(taskname, tick)``."""
    return f"{bucket_prefix(taskname)}{tick}"


def cursor_key(taskname: str) -> str:
    """Key of the shared sweep cursor for ``taskname``."""
    _check_taskname(taskname)
    return f"{CURSOR_KEY_PREFIX}:{{{taskname}}}"
