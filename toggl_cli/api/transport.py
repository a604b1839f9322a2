"""
Toggl HTTP Transport.

Sends one logical request to the Toggl Track API and returns the parsed
JSON body. Every request carries the configured User-Agent and HTTP Basic
auth with the API token as username and the fixed marker password.

HTTP 429 responses are retried with a fixed backoff (see
toggl_cli.core.resilience); the caller never sees them unless the retry
budget runs out, in which case RetryTimeoutError is raised.
"""

import asyncio
import json
from collections.abc import Awaitable, Callable
from typing import Any

import httpx
from tenacity import RetryError

from toggl_cli.core.config_schema import ApiSchema, RetrySchema
from toggl_cli.core.exceptions import (
    ExternalServiceError,
    MalformedResponseError,
    RateLimitError,
    RetryTimeoutError,
)
from toggl_cli.core.logging import get_logger, log_with_source
from toggl_cli.core.resilience import rate_limit_retrying

logger = get_logger(__name__)

ALLOWED_METHODS = frozenset({"GET", "POST", "PUT", "PATCH"})


class Transport:
    """
    Authenticated HTTP transport for the Toggl API.

    Features:
    - Base URL, User-Agent and timeout from application.yaml
    - Basic auth (token, auth_password) on every request
    - Bounded retry on HTTP 429
    - Raw body preserved when the response is not JSON

    Usage:
        transport = Transport(token, api=config.api, retry=config.retry)
        entry = await transport.send("GET", "me/time_entries/current")
        await transport.close()
    """

    def __init__(
        self,
        token: str,
        api: ApiSchema,
        retry: RetrySchema,
        source: str = "api",
        http_transport: httpx.AsyncBaseTransport | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """
        Initialize the transport.

        Args:
            token: Toggl API token, sent as the Basic auth username.
            api: Endpoint, User-Agent, auth password and timeout settings.
            retry: Rate-limit retry policy.
            source: Log source recorded on every request log line.
            http_transport: Optional httpx transport (tests pass httpx.MockTransport).
            sleep: Coroutine used to wait between rate-limited attempts.
        """
        self.source = source
        self.base_url = api.base_url if api.base_url.endswith("/") else api.base_url + "/"
        self.user_agent = api.user_agent
        self.timeout = api.timeout_seconds
        self.retry = retry
        self._auth = httpx.BasicAuth(token, api.auth_password)
        self._http_transport = http_transport
        self._sleep = sleep
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                auth=self._auth,
                headers={"User-Agent": self.user_agent},
                transport=self._http_transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def send(self, method: str, path: str, body: dict[str, Any] | None = None) -> Any:
        """
        Send a request and return the parsed JSON body.

        Args:
            method: GET, POST, PUT or PATCH
            path: Resource path relative to the API base URL (e.g. me/projects)
            body: JSON object payload, if any

        Returns:
            Parsed JSON (dict, list, or None for a JSON null body)

        Raises:
            MalformedResponseError: Body is not valid JSON
            ExternalServiceError: HTTP error status with a JSON body
            RetryTimeoutError: Still rate limited when the retry budget ran out
            httpx.HTTPError: Connection, DNS, TLS or timeout failure
        """
        method = method.upper()
        if method not in ALLOWED_METHODS:
            raise ValueError(f"Unsupported HTTP method: {method}")

        try:
            async for attempt in rate_limit_retrying(self.retry, sleep=self._sleep):
                with attempt:
                    response = await self._request(method, path, body)
        except RetryError as e:
            raise RetryTimeoutError(
                f"Toggl is still rate limiting {method} {path} "
                f"after {e.last_attempt.attempt_number} attempts"
            ) from e

        return self._parse(method, path, response)

    async def _request(
        self,
        method: str,
        path: str,
        body: dict[str, Any] | None,
    ) -> httpx.Response:
        client = await self._get_client()

        log_with_source(logger, self.source, "debug", "API request", method=method, path=path)

        try:
            response = await client.request(method, path.lstrip("/"), json=body)
        except httpx.HTTPError as e:
            log_with_source(
                logger,
                self.source,
                "error",
                "API request failed",
                method=method,
                path=path,
                error=str(e),
            )
            raise

        log_with_source(
            logger,
            self.source,
            "debug",
            "API response",
            method=method,
            path=path,
            status_code=response.status_code,
        )

        if response.status_code == httpx.codes.TOO_MANY_REQUESTS:
            raise RateLimitError(f"Rate limited on {method} {path}")
        return response

    def _parse(self, method: str, path: str, response: httpx.Response) -> Any:
        text = response.text
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            log_with_source(
                logger,
                self.source,
                "warning",
                "Unparsable API response",
                method=method,
                path=path,
                status_code=response.status_code,
            )
            raise MalformedResponseError(text, status_code=response.status_code) from e

        if response.is_error:
            raise ExternalServiceError(
                f"Toggl API returned {response.status_code} for {method} {path}: {text}",
                status_code=response.status_code,
            )
        return data
