"""
Custom Exceptions.

Application-specific exception classes for consistent error handling.
Everything raised here propagates to the CLI error boundary, which prints
the message and exits non-zero. Network failures are left as httpx errors.
"""


class ApplicationError(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, code: str = "SYS_INTERNAL_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(self.message)


class ConfigurationError(ApplicationError):
    """Raised when required configuration or secrets are missing."""

    def __init__(self, message: str = "Invalid configuration") -> None:
        super().__init__(message, code="CONFIG_INVALID")


class NotFoundError(ApplicationError):
    """Raised when a named lookup matches nothing."""

    def __init__(self, message: str = "Resource not found", query: str | None = None) -> None:
        self.query = query
        super().__init__(message, code="RES_NOT_FOUND")


class NoWorkspaceAvailableError(ApplicationError):
    """Raised when the account has no workspace to start a timer in."""

    def __init__(self, message: str = "No workspace available to start a timer in") -> None:
        super().__init__(message, code="RES_NO_WORKSPACE")


class NoRunningTimerError(ApplicationError):
    """Raised when a timer field update is requested but nothing is running."""

    def __init__(self, message: str = "No timer is running") -> None:
        super().__init__(message, code="RES_NO_RUNNING_TIMER")


class MalformedResponseError(ApplicationError):
    """Raised when a response body cannot be parsed into the expected structure.

    The raw body is kept because the service often answers errors in plain text.
    """

    def __init__(self, raw: str, status_code: int | None = None) -> None:
        self.raw = raw
        self.status_code = status_code
        super().__init__(raw or "Empty response from Toggl", code="API_MALFORMED_RESPONSE")


class ExternalServiceError(ApplicationError):
    """Raised when the Toggl API answers with an error status."""

    def __init__(self, message: str = "External service error", status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message, code="SYS_EXTERNAL_SERVICE_ERROR")


class RateLimitError(ApplicationError):
    """Raised when rate limit is exceeded. Retried inside the transport."""

    def __init__(self, message: str = "Rate limit exceeded") -> None:
        super().__init__(message, code="RATE_LIMITED")


class RetryTimeoutError(ApplicationError):
    """Raised when rate-limit retries run out of attempts or time."""

    def __init__(self, message: str = "Gave up waiting for the rate limit to clear") -> None:
        super().__init__(message, code="RATE_LIMIT_TIMEOUT")
