"""
Application constants.
Centralized location for all constant values used across the application.
"""

# Tick widths, in milliseconds
INTERVAL_MILLISECONDS = 1
INTERVAL_SECONDS = 1000
INTERVAL_MINUTES = 60 * 1000
INTERVAL_HOUR = 60 * 60 * 1000

DEFAULT_INTERVAL = INTERVAL_SECONDS

# Store key prefixes. Existing data depends on these; version them if changed.
BUCKET_KEY_PREFIX = "dtaskq"
CURSOR_KEY_PREFIX = "dtaskt"

# Default values
DEFAULT_BUCKET_TTL_SECONDS = 24 * 60 * 60
DEFAULT_CURSOR_TTL_SECONDS = 2 * 60 * 60
DEFAULT_PULL_BATCH_SIZE = 100

# API constants
API_V1_PREFIX = "/v1"

# Metrics names
METRIC_TASKS_PUSHED = "delaytask_tasks_pushed_total"
METRIC_TASKS_PULLED = "delaytask_tasks_pulled_total"
METRIC_EMPTY_PULLS = "delaytask_empty_pulls_total"
METRIC_CURSOR_ADVANCES = "delaytask_cursor_advances_total"
METRIC_CURSOR_TICK = "delaytask_cursor_tick"
METRIC_HANDLER_FAILURES = "delaytask_handler_failures_total"
METRIC_STORE_ERRORS = "delaytask_store_errors_total"
METRIC_STORE_LATENCY = "delaytask_store_latency_seconds"

# Trace span names
SPAN_PUSH_TASK = "push_task"
SPAN_PULL_TASK = "pull_task"
SPAN_HANDLE_TASK = "handle_task"
