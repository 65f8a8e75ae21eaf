"""
Task handler registry and built-in handlers.

A handler receives one payload popped by the sweeper. Popped payloads are
gone from the store, so a handler that raises loses its task; handlers that
need redelivery must push the payload again themselves.
"""

import json
import logging
from typing import Awaitable, Callable

import httpx

from delaytask.types.task import TaskContext

logger = logging.getLogger(__name__)

# Type alias for task handler functions
TaskHandler = Callable[[TaskContext], Awaitable[None]]

# Handler registry, keyed by task name
_handlers: dict[str, TaskHandler] = {}


def register_handler(taskname: str) -> Callable[[TaskHandler], TaskHandler]:
    """
    Decorator to register a task handler.

    Args:
        taskname: The task name this handler consumes.

    Returns:
        Decorator function.

    Example:
        @register_handler("send_reminder")
        async def handle_send_reminder(context: TaskContext) -> None:
            ...
    """
    def decorator(handler: TaskHandler) -> TaskHandler:
        _handlers[taskname] = handler
        logger.info(f"Registered handler for task name: {taskname}")
        return handler
    return decorator


def get_handler(taskname: str) -> TaskHandler | None:
    """
    Get the handler for a task name.

    Args:
        taskname: The task name.

    Returns:
        The handler function or None if not found.
    """
    return _handlers.get(taskname)


def list_handlers() -> list[str]:
    """List all task names that have a handler."""
    return list(_handlers.keys())


# ============================================================================
# Built-in task handlers
# ============================================================================


@register_handler("echo")
async def handle_echo(context: TaskContext) -> None:
    """
    Echo handler for testing.

    Logs the payload and the tick it was bucketed into.
    """
    logger.info(
        "Echo task received",
        extra={
            "taskname": context.taskname,
            "tick": context.tick,
            "payload": context.payload,
        },
    )


@register_handler("webhook")
async def handle_webhook(context: TaskContext) -> None:
    """
    Fire an HTTP request once the task is due.

    Payload is a JSON object:
    - url: The URL to request
    - method: HTTP method (defaults to POST)
    - headers: Optional headers
    - body: Optional JSON body
    """
    data = json.loads(context.payload)
    url = data.get("url")
    if not url:
        raise ValueError("Missing 'url' in webhook payload")

    method = data.get("method", "POST").upper()

    logger.info(
        "Webhook task",
        extra={"tick": context.tick, "method": method, "url": url},
    )

    async with httpx.AsyncClient() as client:
        response = await client.request(
            method=method,
            url=url,
            headers=data.get("headers", {}),
            json=data.get("body") if method in ["POST", "PUT", "PATCH"] else None,
            timeout=30.0,
        )
        response.raise_for_status()


async def execute_task(context: TaskContext) -> bool:
    """
    Run the handler registered for the task's name.

    Args:
        context: The task context.

    Returns:
        True if the handler completed, False if there was none or it raised.
    """
    handler = get_handler(context.taskname)

    if handler is None:
        logger.error(
            f"No handler for task name: {context.taskname}",
            extra={"tick": context.tick},
        )
        return False

    try:
        await handler(context)
        return True
    except Exception as e:
        logger.exception(
            "Handler raised exception",
            extra={"taskname": context.taskname, "tick": context.tick, "error": str(e)},
        )
        return False
