"""
Resilience Infrastructure.

Retry policy and structured retry logging for calls to the Toggl API.

The only transient failure retried is HTTP 429. The wait between attempts is
a fixed interval with no jitter; the loop stops after a maximum number of
attempts or a maximum total wait, whichever comes first.

Usage:
    from toggl_cli.core.resilience import rate_limit_retrying

    retrying = rate_limit_retrying(retry_config)
    async for attempt in retrying:
        with attempt:
            response = await send_once()
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    stop_after_delay,
    wait_fixed,
)

from toggl_cli.core.config_schema import RetrySchema
from toggl_cli.core.exceptions import RateLimitError
from toggl_cli.core.logging import get_logger

logger = get_logger(__name__)


def log_retry(retry_state: Any) -> None:
    """Tenacity before_sleep callback that emits structured retry events.

    Args:
        retry_state: tenacity.RetryCallState instance
    """
    duration_ms = None
    if retry_state.outcome_timestamp and retry_state.start_time:
        duration_ms = round(
            (retry_state.outcome_timestamp - retry_state.start_time) * 1000
        )

    error = None
    if retry_state.outcome and retry_state.outcome.failed:
        error = str(retry_state.outcome.exception())

    fn_name = getattr(retry_state.fn, "__name__", None) or "toggl_api"

    logger.warning(
        f"Retrying {fn_name} (attempt {retry_state.attempt_number})",
        extra={
            "resilience_event": "retry_attempt",
            "dependency": fn_name,
            "attempt": retry_state.attempt_number,
            "duration_ms": duration_ms,
            "error": error,
        },
    )


def rate_limit_retrying(
    policy: RetrySchema,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> AsyncRetrying:
    """Build the retry loop used by the transport for rate-limited requests.

    Args:
        policy: Backoff interval and stop limits from application.yaml
        sleep: Coroutine used to wait between attempts

    Returns:
        AsyncRetrying that raises tenacity.RetryError once the limits are hit
    """
    return AsyncRetrying(
        retry=retry_if_exception_type(RateLimitError),
        wait=wait_fixed(policy.backoff_seconds),
        stop=stop_after_attempt(policy.max_attempts) | stop_after_delay(policy.max_wait_seconds),
        before_sleep=log_retry,
        sleep=sleep,
        reraise=False,
    )
