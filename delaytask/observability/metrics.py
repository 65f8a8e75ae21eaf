"""
Prometheus metrics collection.
"""

from prometheus_client import (
    Counter,
    Gauge,
    Histogram,
    CollectorRegistry,
    generate_latest,
    CONTENT_TYPE_LATEST,
    REGISTRY,
)

from delaytask.constants import (
    METRIC_TASKS_PUSHED,
    METRIC_TASKS_PULLED,
    METRIC_EMPTY_PULLS,
    METRIC_CURSOR_ADVANCES,
    METRIC_CURSOR_TICK,
    METRIC_HANDLER_FAILURES,
    METRIC_STORE_ERRORS,
    METRIC_STORE_LATENCY,
)

# Global metrics instance
_metrics: "MetricsCollector | None" = None


class MetricsCollector:
    """
    Prometheus metrics collector for the delay-task queue.

    Collects metrics for:
    - Tasks pushed and pulled
    - Empty pulls and cursor advances
    - Sweep cursor position
    - Handler failures
    - Store round trips and errors
    """

    def __init__(self, registry: CollectorRegistry | None = None):
        """
        Initialize the metrics collector.

        Args:
            registry: Optional custom registry. Uses default if not provided.
        """
        self._registry = registry or REGISTRY

        self.tasks_pushed = Counter(
            METRIC_TASKS_PUSHED,
            "Total number of tasks pushed into buckets",
            ["taskname"],
            registry=self._registry,
        )

        self.tasks_pulled = Counter(
            METRIC_TASKS_PULLED,
            "Total number of tasks popped from buckets",
            ["taskname"],
            registry=self._registry,
        )

        self.empty_pulls = Counter(
            METRIC_EMPTY_PULLS,
            "Total number of pull calls that found nothing due",
            ["taskname"],
            registry=self._registry,
        )

        # Counted client-side: an empty pull behind the matured tick advances
        self.cursor_advances = Counter(
            METRIC_CURSOR_ADVANCES,
            "Total number of sweep cursor advances",
            ["taskname"],
            registry=self._registry,
        )

        self.cursor_tick = Gauge(
            METRIC_CURSOR_TICK,
            "Tick the sweep cursor was at on the last pull",
            ["taskname"],
            registry=self._registry,
        )

        self.handler_failures = Counter(
            METRIC_HANDLER_FAILURES,
            "Total number of task handlers that raised",
            ["taskname"],
            registry=self._registry,
        )

        self.store_errors = Counter(
            METRIC_STORE_ERRORS,
            "Total number of failed store round trips",
            ["operation"],
            registry=self._registry,
        )

        self.store_latency = Histogram(
            METRIC_STORE_LATENCY,
            "Store round-trip latency in seconds",
            ["operation"],
            buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0),
            registry=self._registry,
        )

    def record_push(self, taskname: str, duration_seconds: float) -> None:
        """Record a successful push."""
        self.tasks_pushed.labels(taskname=taskname).inc()
        self.store_latency.labels(operation="push").observe(duration_seconds)

    def record_pull(
        self,
        taskname: str,
        count: int,
        cursor: int,
        advanced: bool,
        duration_seconds: float,
    ) -> None:
        """Record a successful pull."""
        self.store_latency.labels(operation="pull").observe(duration_seconds)
        self.cursor_tick.labels(taskname=taskname).set(cursor)
        if count:
            self.tasks_pulled.labels(taskname=taskname).inc(count)
        else:
            self.empty_pulls.labels(taskname=taskname).inc()
        if advanced:
            self.cursor_advances.labels(taskname=taskname).inc()

    def record_handler_failure(self, taskname: str) -> None:
        """Record a task handler failure."""
        self.handler_failures.labels(taskname=taskname).inc()

    def record_store_error(self, operation: str) -> None:
        """Record a failed store round trip."""
        self.store_errors.labels(operation=operation).inc()

    def get_metrics(self) -> bytes:
        """Get all metrics in Prometheus format."""
        return generate_latest(self._registry)

    def get_content_type(self) -> str:
        """Get the content type for metrics response."""
        return CONTENT_TYPE_LATEST


def setup_metrics() -> MetricsCollector:
    """
    Set up and return the metrics collector.

    Returns:
        MetricsCollector: The metrics collector instance.
    """
    global _metrics
    if _metrics is None:
        _metrics = MetricsCollector()
    return _metrics


def get_metrics() -> MetricsCollector:
    """
    Get the metrics collector instance, creating it on first use.

    Returns:
        MetricsCollector: The metrics collector instance.
    """
    if _metrics is None:
        return setup_metrics()
    return _metrics
