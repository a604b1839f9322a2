"""
Root Pytest Fixtures.

Shared fixtures available to all test types.

Network access is never needed: clients are built on httpx.MockTransport
routed to tests.fakes.FakeTogglApi, and the transport's backoff sleep is
replaced by one that only records the requested interval.
"""

from collections.abc import AsyncGenerator, Callable
from typing import Any

import httpx
import pytest

from tests.fakes import TOKEN, FakeTogglApi
from toggl_cli.api.client import TogglClient
from toggl_cli.core.config_schema import (
    ApiSchema,
    ApplicationSchema,
    ConcurrencySchema,
    RetrySchema,
    SemaphoresSchema,
)


@pytest.fixture
def application() -> ApplicationSchema:
    """Application settings matching config/settings/application.yaml, with a small retry budget."""
    return ApplicationSchema(
        name="toggl-cli",
        version="1.0.0",
        description="test",
        api=ApiSchema(
            base_url="https://api.track.toggl.com/api/v9/",
            user_agent="Toggl-CLI/1.0",
            auth_password="api_token",
            timeout_seconds=5,
        ),
        retry=RetrySchema(backoff_seconds=1.0, max_attempts=5, max_wait_seconds=60),
        concurrency=ConcurrencySchema(semaphores=SemaphoresSchema(workspace_fetch=2)),
    )


@pytest.fixture
def api() -> FakeTogglApi:
    return FakeTogglApi()


@pytest.fixture
def sleeps() -> list[float]:
    """Backoff intervals the transport waited, in order."""
    return []


@pytest.fixture
def make_client(
    api: FakeTogglApi,
    application: ApplicationSchema,
    sleeps: list[float],
) -> Callable[..., TogglClient]:
    """Factory for clients wired to the fake API. Each call builds a fresh client."""

    async def fake_sleep(seconds: float) -> None:
        sleeps.append(seconds)

    def factory(*_: Any) -> TogglClient:
        return TogglClient.from_config(
            TOKEN,
            application,
            http_transport=httpx.MockTransport(api.handler),
            sleep=fake_sleep,
        )

    return factory


@pytest.fixture
async def client(make_client: Callable[..., TogglClient]) -> AsyncGenerator[TogglClient, None]:
    client = make_client()
    yield client
    await client.close()
