"""Errors raised by the Log Analytics collector."""
from typing import Any, Optional


class LogAnalyticsError(Exception):
    """Base class for every error raised by this package."""


class ConfigError(LogAnalyticsError, ValueError):
    """Missing or malformed workspace credentials."""


class NullInputError(LogAnalyticsError, TypeError):
    """A record or a batch of records was None."""


class InvalidArgumentError(LogAnalyticsError, ValueError):
    """An argument violates the Data Collector API constraints."""

    def __init__(self, message: str, argument: Optional[str] = None, value: Any = None):
        super().__init__(message)
        self.argument = argument
        self.value = value


class SubmissionFailedError(LogAnalyticsError):
    """The ingestion endpoint answered with a non-success status."""

    def __init__(self, status_code: int, body: str):
        super().__init__(f"Log Analytics rejected the request: HTTP {status_code} - {body}")
        self.status_code = status_code
        self.body = body
