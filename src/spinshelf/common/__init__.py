"""Common utilities and shared components for Spinshelf."""

from .config import (
    ClientConfig,
    Config,
    HTTPConfig,
    LoggingConfig,
    QueueConfig,
    StackConfig,
)
from .logging_config import setup_logging
from .call_queue import CallQueue
from .http_client import AsyncHTTPClient
from .rate_limit import RateLimit, parse_rate_limit
from .string_utils import escape, strip_variation, to_query_string, with_query

__all__ = [
    "ClientConfig",
    "Config",
    "HTTPConfig",
    "LoggingConfig",
    "QueueConfig",
    "StackConfig",
    "setup_logging",
    "CallQueue",
    "AsyncHTTPClient",
    "RateLimit",
    "parse_rate_limit",
    "escape",
    "strip_variation",
    "to_query_string",
    "with_query",
]
