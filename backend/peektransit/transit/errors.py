"""Errors raised by the transit API client."""


class TransitError(Exception):
    """Base error for transit API access."""


class TransitConfigError(TransitError):
    """Raised when the client is missing required configuration."""


class InvalidResponseError(TransitError):
    """Raised for non-retryable HTTP failures."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ServiceUnavailableError(TransitError):
    """Raised when the service keeps failing after all retries."""


class TransitParseError(TransitError):
    """Raised when a response body is not the JSON shape expected."""
