"""
Log Analytics Collector Package.

A small client for the Azure Log Analytics HTTP Data Collector API: it
validates typed records, serializes them to JSON, signs each request with
the workspace shared key and posts the batch.
"""
import logging

# Applications using this package should configure their own logging.
logging.getLogger(__name__).addHandler(logging.NullHandler())

from .client import LogAnalyticsClient, SendResult
from .config import Settings
from .exceptions import (
    ConfigError,
    InvalidArgumentError,
    LogAnalyticsError,
    NullInputError,
    SubmissionFailedError,
)
from .models import LogRecord

__all__ = [
    "ConfigError",
    "InvalidArgumentError",
    "LogAnalyticsClient",
    "LogAnalyticsError",
    "LogRecord",
    "NullInputError",
    "SendResult",
    "Settings",
    "SubmissionFailedError",
]

VERSION = "0.1.0"
