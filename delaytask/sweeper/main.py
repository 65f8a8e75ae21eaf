"""
Sweeper process for consuming due tasks.

The sweeper pulls due payloads for its task names and hands each one to the
registered handler. Any number of sweepers may run against the same task
names; they share one cursor per task name and split the work.
"""

import asyncio
import logging
import os
import signal

from delaytask.config import get_settings
from delaytask.constants import SPAN_HANDLE_TASK
from delaytask.observability.logging import bind_context, clear_context, setup_logging
from delaytask.observability.metrics import get_metrics
from delaytask.observability.tracing import get_tracer
from delaytask.queue.client import DelayTaskQueue
from delaytask.queue.errors import StoreError
from delaytask.store import close_redis, init_redis
from delaytask.sweeper.handlers import execute_task, list_handlers
from delaytask.types.task import PullResult, TaskContext

logger = logging.getLogger(__name__)


class Sweeper:
    """
    Sweeper that polls task names for due payloads and dispatches them.

    Features:
    - One pull per task name per round, all coordination in Redis
    - No idle sleep while a cursor is still catching up to the matured tick
    - Payloads of one pull dispatched in pop (FIFO) order
    - Graceful shutdown on SIGTERM/SIGINT
    """

    def __init__(
        self,
        queue: DelayTaskQueue,
        tasknames: list[str] | None = None,
        interval: int | None = None,
        poll_interval: float | None = None,
        sweeper_id: str | None = None,
    ):
        """
        Initialize the sweeper.

        Args:
            queue: The queue to pull from.
            tasknames: Task names to sweep. Defaults to the configured ones,
                or every task name with a registered handler.
            interval: Tick width producers push with. Defaults to the
                queue's default interval.
            poll_interval: Seconds to sleep after a round with nothing due.
            sweeper_id: Unique sweeper identifier. Defaults to hostname + PID.
        """
        settings = get_settings()

        self.queue = queue
        self.tasknames = tasknames or settings.sweeper_tasknames or list_handlers()
        self.interval = interval or queue.default_interval
        self.poll_interval = (
            poll_interval
            if poll_interval is not None
            else settings.sweeper_poll_interval_seconds
        )
        if self.poll_interval < 0:
            raise ValueError("poll_interval must not be negative")
        self.sweeper_id = (
            sweeper_id or settings.sweeper_id or f"{os.uname().nodename}-{os.getpid()}"
        )

        self._running = False
        self._metrics = get_metrics()

    async def start(self) -> None:
        """Start the sweeper."""
        logger.info(
            "Sweeper starting",
            extra={"sweeper_id": self.sweeper_id, "tasknames": self.tasknames},
        )

        self._running = True

        while self._running:
            try:
                busy = await self.run_once()

                if not busy:
                    await asyncio.sleep(self.poll_interval)

            except StoreError as e:
                logger.exception(
                    f"Store error in sweeper loop: {e}",
                    extra={"sweeper_id": self.sweeper_id}
                )
                await asyncio.sleep(self.poll_interval)

        logger.info("Sweeper stopped", extra={"sweeper_id": self.sweeper_id})

    async def stop(self) -> None:
        """Stop the sweeper after the current round."""
        logger.info("Sweeper stopping", extra={"sweeper_id": self.sweeper_id})
        self._running = False

    async def run_once(self) -> bool:
        """
        Run one sweep round over every task name.

        A store error on one task name does not stop the round; the others
        are still swept and the first error is raised once the round ends.

        Returns:
            True if any task name had payloads or a cursor still behind the
            matured tick, meaning another round should follow immediately.

        Raises:
            StoreError: If a pull failed for any task name.
        """
        busy = False
        failure: StoreError | None = None

        for taskname in self.tasknames:
            try:
                result = await self.queue.pull_batch(taskname, self.interval)
            except StoreError as e:
                logger.warning(
                    "Pull failed",
                    extra={"taskname": taskname, "error": str(e)},
                )
                if failure is None:
                    failure = e
                continue

            if result.is_behind:
                busy = True

            if result.is_empty:
                continue

            busy = True
            logger.info(
                f"Pulled {len(result.tasks)} tasks",
                extra={"taskname": taskname, "tick": result.cursor},
            )
            await self._dispatch(result)

        if failure is not None:
            raise failure

        return busy

    async def _dispatch(self, result: PullResult) -> None:
        """
        Hand every payload of one pull to its handler, in pop order.

        Args:
            result: The pull result.
        """
        received_at = self.queue.now_ms()

        for payload in result.tasks:
            context = TaskContext(
                taskname=result.taskname,
                tick=result.cursor,
                payload=payload,
                sweeper_id=self.sweeper_id,
                received_at_ms=received_at,
            )

            with get_tracer().start_as_current_span(SPAN_HANDLE_TASK) as span:
                span.set_attribute("taskname", result.taskname)
                span.set_attribute("tick", result.cursor)

                handled = await execute_task(context)

            if not handled:
                self._metrics.record_handler_failure(result.taskname)


async def run_async() -> None:
    """Run the sweeper asynchronously."""
    setup_logging("sweeper")
    redis = await init_redis()

    sweeper = Sweeper(DelayTaskQueue(redis))
    bind_context(sweeper_id=sweeper.sweeper_id)

    # Handle shutdown signals
    loop = asyncio.get_running_loop()

    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(
            sig,
            lambda: asyncio.create_task(sweeper.stop())
        )

    try:
        await sweeper.start()
    finally:
        clear_context()
        await close_redis()


def run() -> None:
    """Run the sweeper."""
    asyncio.run(run_async())


if __name__ == "__main__":
    run()
