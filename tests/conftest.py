"""
Pytest configuration and shared fixtures.
"""

import os
from collections.abc import AsyncGenerator

import fakeredis
import fakeredis.aioredis
import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from prometheus_client import CollectorRegistry
from redis.asyncio.retry import Retry
from redis.backoff import NoBackoff

# Keep tests from exporting spans; set BEFORE any imports that read settings
os.environ["OTEL_ENABLED"] = "false"

from delaytask.api.main import create_app  # noqa: E402
from delaytask.api.routes.tasks import get_queue  # noqa: E402
from delaytask.observability.metrics import MetricsCollector  # noqa: E402
from delaytask.queue.client import DelayTaskQueue  # noqa: E402
from delaytask.store import get_redis  # noqa: E402


class FakeClock:
    """Millisecond clock the tests move by hand."""

    def __init__(self, now_ms: int):
        self.now_ms = now_ms

    def __call__(self) -> int:
        return self.now_ms

    def advance(self, ms: int) -> None:
        self.now_ms += ms


@pytest.fixture
def clock() -> FakeClock:
    """Clock at 5.5s: tick 5 of a 1000ms interval has just matured."""
    return FakeClock(5500)


@pytest.fixture
def fake_server() -> fakeredis.FakeServer:
    """An in-process Redis server with Lua scripting."""
    return fakeredis.FakeServer()


@pytest_asyncio.fixture
async def redis(fake_server: fakeredis.FakeServer) -> AsyncGenerator[fakeredis.aioredis.FakeRedis]:
    """Create an async client on the fake server."""
    client = fakeredis.aioredis.FakeRedis(server=fake_server, decode_responses=True)
    yield client
    await client.aclose()


@pytest.fixture
def metrics() -> MetricsCollector:
    """Metrics collector on its own registry."""
    return MetricsCollector(registry=CollectorRegistry())


@pytest.fixture
def queue(redis, clock: FakeClock, metrics: MetricsCollector) -> DelayTaskQueue:
    """Create a queue with default limits and a test-controlled clock."""
    return DelayTaskQueue(redis, clock=clock, metrics=metrics)


@pytest.fixture
def broken_queue(metrics: MetricsCollector, clock: FakeClock) -> DelayTaskQueue:
    """Create a queue whose store refuses every connection."""
    server = fakeredis.FakeServer()
    server.connected = False
    client = fakeredis.aioredis.FakeRedis(
        server=server,
        decode_responses=True,
        retry=Retry(NoBackoff(), 0),
    )
    return DelayTaskQueue(client, clock=clock, metrics=metrics)


@pytest.fixture
def app(redis, queue: DelayTaskQueue) -> FastAPI:
    """Create a FastAPI app wired to the fake store."""
    app = create_app()
    app.dependency_overrides[get_redis] = lambda: redis
    app.dependency_overrides[get_queue] = lambda: queue
    return app


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """Create an async HTTP client for testing."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
