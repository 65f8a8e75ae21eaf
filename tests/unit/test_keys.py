"""
Unit tests for tick arithmetic and the key scheme.
"""

import pytest

from delaytask.constants import (
    INTERVAL_HOUR,
    INTERVAL_MILLISECONDS,
    INTERVAL_MINUTES,
    INTERVAL_SECONDS,
)
from delaytask.queue.errors import InvalidIntervalError, InvalidTaskNameError
from delaytask.queue.keys import (
    bucket_key,
    bucket_prefix,
    current_millis,
    cursor_key,
    matured_tick,
    push_tick,
)


class TestPushTick:
    """Tests for producer-side tick rounding."""

    def test_exact_boundary(self):
        """A timestamp on a boundary stays in that tick."""
        assert push_tick(5000, INTERVAL_SECONDS) == 5

    def test_rounds_up(self):
        """Anything past a boundary moves to the next tick."""
        assert push_tick(5001, INTERVAL_SECONDS) == 6
        assert push_tick(5999, INTERVAL_SECONDS) == 6

    def test_zero(self):
        assert push_tick(0, INTERVAL_SECONDS) == 0

    @pytest.mark.parametrize(
        "interval,expected",
        [
            (INTERVAL_MILLISECONDS, 90_061_001),
            (INTERVAL_SECONDS, 90_062),
            (INTERVAL_MINUTES, 1_502),
            (INTERVAL_HOUR, 26),
        ],
    )
    def test_other_granularities(self, interval: int, expected: int):
        """Tick arithmetic does not depend on the interval width."""
        # 1 day, 1 hour, 1 minute, 1 second and 1 millisecond
        assert push_tick(90_061_001, interval) == expected

    @pytest.mark.parametrize("interval", [0, -1000])
    def test_invalid_interval(self, interval: int):
        with pytest.raises(InvalidIntervalError):
            push_tick(5000, interval)


class TestMaturedTick:
    """Tests for consumer-side tick rounding."""

    def test_lags_boundary(self):
        """Exactly on a boundary, that tick has not matured yet."""
        assert matured_tick(5000, INTERVAL_SECONDS) == 4

    def test_just_past_boundary(self):
        assert matured_tick(5001, INTERVAL_SECONDS) == 5
        assert matured_tick(6000, INTERVAL_SECONDS) == 5

    def test_pushed_tick_matures_once_its_window_passes(self):
        """A task pushed at t is visible to a consumer from just after t."""
        tick = push_tick(5000, INTERVAL_SECONDS)
        assert matured_tick(5000, INTERVAL_SECONDS) < tick
        assert matured_tick(5001, INTERVAL_SECONDS) == tick

    def test_invalid_interval(self):
        with pytest.raises(InvalidIntervalError):
            matured_tick(5000, 0)

    def test_current_millis(self):
        """The wall clock is in milliseconds, not seconds."""
        assert current_millis() > 1_600_000_000_000


class TestKeys:
    """Tests for store key naming."""

    def test_bucket_key(self):
        assert bucket_key("orders", 5) == "dtaskq:{orders}:5"

    def test_bucket_prefix(self):
        assert bucket_prefix("orders") == "dtaskq:{orders}:"

    def test_cursor_key(self):
        assert cursor_key("orders") == "dtaskt:{orders}"

    def test_distinct_ticks(self):
        assert bucket_key("orders", 5) != bucket_key("orders", 6)

    def test_empty_taskname(self):
        with pytest.raises(InvalidTaskNameError):
            bucket_key("", 5)
        with pytest.raises(InvalidTaskNameError):
            cursor_key("")

    def test_errors_are_value_errors(self):
        with pytest.raises(ValueError):
            cursor_key("")
