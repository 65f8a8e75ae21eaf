"""
Task-related type definitions for internal use.
"""

from dataclasses import dataclass, field


@dataclass
class PullResult:
    """
    Outcome of a single pull call.

    ``cursor`` is the tick the pull script drained from, before any advance.
    ``matured`` is the newest fully-elapsed tick at the time of the call.
    """

    taskname: str
    cursor: int
    matured: int
    tasks: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        """Check if nothing was due."""
        return not self.tasks

    @property
    def is_behind(self) -> bool:
        """Check if the cursor still has elapsed ticks to walk through."""
        return self.cursor < self.matured


@dataclass
class TaskContext:
    """
    Context passed to task handlers by the sweeper.
    """

    taskname: str
    tick: int
    payload: str
    sweeper_id: str
    received_at_ms: int
