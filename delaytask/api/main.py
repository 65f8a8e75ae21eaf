"""
FastAPI application entry point.
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from delaytask import __version__
from delaytask.api.routes import health_router, tasks_router
from delaytask.config import get_settings
from delaytask.observability.logging import setup_logging
from delaytask.observability.metrics import setup_metrics
from delaytask.observability.tracing import instrument_fastapi, setup_tracing
from delaytask.queue.errors import DelayTaskError, StoreError
from delaytask.store import close_redis, init_redis
from delaytask.types.api import ErrorResponse

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Handles startup and shutdown events.
    """
    # Startup
    setup_logging("api")
    setup_metrics()
    setup_tracing()
    await init_redis()

    logger.info("Application started")

    yield

    # Shutdown
    await close_redis()
    logger.info("Application shutdown")


async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
    """Report a failed Redis round trip as 503; the caller decides whether to retry."""
    logger.warning(
        "Store unavailable",
        extra={"operation": exc.operation, "taskname": exc.taskname, "error": str(exc)},
    )
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content=ErrorResponse(error="store_unavailable", detail=str(exc)).model_dump(),
    )


async def delay_task_error_handler(request: Request, exc: DelayTaskError) -> JSONResponse:
    """Report an invalid task name or interval as 422."""
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=ErrorResponse(error="invalid_request", detail=str(exc)).model_dump(),
    )


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        FastAPI: The configured application instance.
    """
    app = FastAPI(
        title="Delay Task Queue API",
        description="Distributed delay-task queue coordinated through Redis scripts",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # StoreError is a DelayTaskError; the more specific handler wins
    app.add_exception_handler(StoreError, store_error_handler)
    app.add_exception_handler(DelayTaskError, delay_task_error_handler)

    app.include_router(health_router)
    app.include_router(tasks_router)

    instrument_fastapi(app)

    return app


def run() -> None:
    """Run the API server."""
    settings = get_settings()

    uvicorn.run(
        "delaytask.api.main:create_app",
        factory=True,
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
