"""Unit tests for toggl_cli.core.resilience."""

from unittest.mock import MagicMock, patch

import pytest

from toggl_cli.core.config_schema import RetrySchema
from toggl_cli.core.exceptions import RateLimitError
from toggl_cli.core.resilience import log_retry, rate_limit_retrying


class TestLogRetry:
    def test_emits_structured_event(self):
        """log_retry should emit a warning with retry metadata."""
        mock_state = MagicMock()
        mock_state.attempt_number = 2
        mock_state.fn.__name__ = "send"
        mock_state.outcome_timestamp = 1000.5
        mock_state.start_time = 1000.0
        mock_state.outcome.failed = True
        mock_state.outcome.exception.return_value = RateLimitError("Rate limited on GET me/projects")

        with patch("toggl_cli.core.resilience.logger") as mock_logger:
            log_retry(mock_state)
            mock_logger.warning.assert_called_once()
            call_args = mock_logger.warning.call_args
            assert "send" in call_args[0][0]
            extra = call_args[1]["extra"]
            assert extra["resilience_event"] == "retry_attempt"
            assert extra["attempt"] == 2
            assert extra["duration_ms"] == 500
            assert "me/projects" in extra["error"]

    def test_without_function_name(self):
        """Retry loops driven by AsyncRetrying iteration have no wrapped function."""
        mock_state = MagicMock()
        mock_state.fn = None
        mock_state.attempt_number = 1
        mock_state.outcome_timestamp = None
        mock_state.outcome.failed = False

        with patch("toggl_cli.core.resilience.logger") as mock_logger:
            log_retry(mock_state)
            extra = mock_logger.warning.call_args[1]["extra"]
            assert extra["dependency"] == "toggl_api"
            assert extra["error"] is None


class TestRateLimitRetrying:
    @pytest.mark.asyncio
    async def test_waits_fixed_interval_between_attempts(self):
        waits = []

        async def fake_sleep(seconds):
            waits.append(seconds)

        policy = RetrySchema(backoff_seconds=2.5, max_attempts=10, max_wait_seconds=60)
        outcomes = iter([RateLimitError(), RateLimitError(), "ok"])
        result = None

        async for attempt in rate_limit_retrying(policy, sleep=fake_sleep):
            with attempt:
                outcome = next(outcomes)
                if isinstance(outcome, Exception):
                    raise outcome
                result = outcome

        assert result == "ok"
        assert waits == [2.5, 2.5]

    @pytest.mark.asyncio
    async def test_other_errors_are_not_retried(self):
        async def fake_sleep(seconds):
            raise AssertionError("should not wait")

        policy = RetrySchema(backoff_seconds=1, max_attempts=10, max_wait_seconds=60)

        with pytest.raises(ValueError):
            async for attempt in rate_limit_retrying(policy, sleep=fake_sleep):
                with attempt:
                    raise ValueError("not a rate limit")
