"""Unit tests for the Toggl HTTP transport."""

import base64

import httpx
import pytest

from tests.fakes import TOKEN, FakeTogglApi, request_json
from toggl_cli.api.transport import Transport
from toggl_cli.core.config_schema import ApplicationSchema
from toggl_cli.core.exceptions import (
    ExternalServiceError,
    MalformedResponseError,
    RetryTimeoutError,
)


@pytest.fixture
def transport(api: FakeTogglApi, application: ApplicationSchema, sleeps: list[float]) -> Transport:
    async def fake_sleep(seconds: float) -> None:
        sleeps.append(seconds)

    return Transport(
        TOKEN,
        api=application.api,
        retry=application.retry,
        http_transport=httpx.MockTransport(api.handler),
        sleep=fake_sleep,
    )


class TestRequests:
    """Tests for request construction."""

    @pytest.mark.asyncio
    async def test_sends_basic_auth_with_token_and_marker(self, transport: Transport, api: FakeTogglApi) -> None:
        api.respond("GET", "me/workspaces", json=[])

        await transport.send("GET", "me/workspaces")

        expected = base64.b64encode(f"{TOKEN}:api_token".encode()).decode()
        assert api.requests[0].headers["Authorization"] == f"Basic {expected}"
        await transport.close()

    @pytest.mark.asyncio
    async def test_sends_user_agent(self, transport: Transport, api: FakeTogglApi) -> None:
        api.respond("GET", "me/workspaces", json=[])

        await transport.send("GET", "me/workspaces")

        assert api.requests[0].headers["User-Agent"] == "Toggl-CLI/1.0"
        await transport.close()

    @pytest.mark.asyncio
    async def test_path_is_relative_to_base_url(self, transport: Transport, api: FakeTogglApi) -> None:
        api.respond("GET", "me/projects", json=[])

        await transport.send("GET", "/me/projects")

        assert str(api.requests[0].url) == "https://api.track.toggl.com/api/v9/me/projects"
        await transport.close()

    @pytest.mark.asyncio
    async def test_body_is_sent_as_json(self, transport: Transport, api: FakeTogglApi) -> None:
        api.respond("PUT", "workspaces/1/time_entries/5", json={"id": 5})

        result = await transport.send("put", "workspaces/1/time_entries/5", {"description": "x"})

        assert result == {"id": 5}
        assert request_json(api.requests[0]) == {"description": "x"}
        assert api.requests[0].headers["Content-Type"] == "application/json"
        await transport.close()

    @pytest.mark.asyncio
    async def test_rejects_unsupported_method(self, transport: Transport) -> None:
        with pytest.raises(ValueError):
            await transport.send("DELETE", "workspaces/1/time_entries/5")

    @pytest.mark.asyncio
    async def test_json_null_body_parses_to_none(self, transport: Transport, api: FakeTogglApi) -> None:
        api.respond("GET", "me/time_entries/current", json=None)

        assert await transport.send("GET", "me/time_entries/current") is None
        await transport.close()


class TestRateLimitRetry:
    """Tests for HTTP 429 handling."""

    @pytest.mark.asyncio
    async def test_retries_until_success(
        self, transport: Transport, api: FakeTogglApi, sleeps: list[float]
    ) -> None:
        for _ in range(3):
            api.respond("GET", "me/workspaces", status=429, text="Too Many Requests")
        api.respond("GET", "me/workspaces", json=[{"id": 1, "name": "Acme"}])

        result = await transport.send("GET", "me/workspaces")

        assert result == [{"id": 1, "name": "Acme"}]
        assert len(api.requests) == 4
        assert sleeps == [1.0, 1.0, 1.0]
        await transport.close()

    @pytest.mark.asyncio
    async def test_no_wait_without_rate_limit(
        self, transport: Transport, api: FakeTogglApi, sleeps: list[float]
    ) -> None:
        api.respond("GET", "me/workspaces", json=[])

        await transport.send("GET", "me/workspaces")

        assert sleeps == []
        await transport.close()

    @pytest.mark.asyncio
    async def test_gives_up_after_max_attempts(
        self, transport: Transport, api: FakeTogglApi, sleeps: list[float]
    ) -> None:
        api.respond("GET", "me/workspaces", status=429, text="Too Many Requests")

        with pytest.raises(RetryTimeoutError) as exc_info:
            await transport.send("GET", "me/workspaces")

        assert len(api.requests) == 5
        assert len(sleeps) == 4
        assert "me/workspaces" in exc_info.value.message
        await transport.close()


class TestResponseParsing:
    """Tests for body parsing and error statuses."""

    @pytest.mark.asyncio
    async def test_malformed_body_keeps_raw_text(self, transport: Transport, api: FakeTogglApi) -> None:
        api.respond("GET", "me/workspaces", text="<html>bad gateway</html>")

        with pytest.raises(MalformedResponseError) as exc_info:
            await transport.send("GET", "me/workspaces")

        assert exc_info.value.raw == "<html>bad gateway</html>"
        assert "<html>bad gateway</html>" in str(exc_info.value)
        assert exc_info.value.__cause__ is not None
        await transport.close()

    @pytest.mark.asyncio
    async def test_plain_text_error_surfaces_server_message(
        self, transport: Transport, api: FakeTogglApi
    ) -> None:
        api.respond("PUT", "workspaces/1/time_entries/5", status=400, text="Invalid project_id")

        with pytest.raises(MalformedResponseError) as exc_info:
            await transport.send("PUT", "workspaces/1/time_entries/5", {"project_id": 9})

        assert exc_info.value.raw == "Invalid project_id"
        assert exc_info.value.status_code == 400
        await transport.close()

    @pytest.mark.asyncio
    async def test_json_error_status_raises_external_service_error(
        self, transport: Transport, api: FakeTogglApi
    ) -> None:
        api.respond("GET", "me/workspaces", status=403, json={"error": "forbidden"})

        with pytest.raises(ExternalServiceError) as exc_info:
            await transport.send("GET", "me/workspaces")

        assert exc_info.value.status_code == 403
        assert "forbidden" in exc_info.value.message
        await transport.close()

    @pytest.mark.asyncio
    async def test_network_errors_propagate(self, application: ApplicationSchema) -> None:
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("Connection refused", request=request)

        transport = Transport(
            TOKEN,
            api=application.api,
            retry=application.retry,
            http_transport=httpx.MockTransport(refuse),
        )

        with pytest.raises(httpx.ConnectError):
            await transport.send("GET", "me/workspaces")
        await transport.close()


class TestLifecycle:
    """Tests for client creation and close."""

    @pytest.mark.asyncio
    async def test_close_client(self, transport: Transport) -> None:
        await transport._get_client()
        assert transport._client is not None

        await transport.close()
        assert transport._client is None

    def test_base_url_gets_trailing_slash(self, application: ApplicationSchema) -> None:
        api = application.api.model_copy(update={"base_url": "https://example.test/api/v9"})
        transport = Transport(TOKEN, api=api, retry=application.retry)
        assert transport.base_url == "https://example.test/api/v9/"
