"""
Unit tests for logging and metrics setup.
"""

import logging

import structlog

from delaytask.observability.logging import (
    bind_context,
    clear_context,
    setup_logging,
)
from delaytask.observability.metrics import MetricsCollector


class TestLogging:
    """Tests for structured logging setup."""

    def test_setup_logging_installs_one_handler(self):
        setup_logging()
        setup_logging()

        assert len(logging.getLogger().handlers) == 1

    def test_bound_context_is_merged(self):
        bind_context(sweeper_id="test-sweeper")
        try:
            assert structlog.contextvars.get_contextvars() == {"sweeper_id": "test-sweeper"}
        finally:
            clear_context()

        assert structlog.contextvars.get_contextvars() == {}

    def test_records_carry_component_and_extra(self, capsys):
        setup_logging("sweeper")

        logging.getLogger("delaytask.test").warning(
            "Cursor advanced", extra={"taskname": "orders", "tick": 6}
        )

        line = capsys.readouterr().out.strip().splitlines()[-1]
        assert "Cursor advanced" in line
        assert "sweeper" in line
        assert "orders" in line


class TestMetrics:
    """Tests for MetricsCollector."""

    def test_exposition(self, metrics: MetricsCollector):
        metrics.record_push("orders", 0.001)
        metrics.record_handler_failure("orders")

        body = metrics.get_metrics().decode()

        assert 'delaytask_tasks_pushed_total{taskname="orders"} 1.0' in body
        assert 'delaytask_handler_failures_total{taskname="orders"} 1.0' in body
        assert metrics.get_content_type().startswith("text/plain")
