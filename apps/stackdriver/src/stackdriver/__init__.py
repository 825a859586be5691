"""
Stackdriver formatter for structured logging.

Renders log records as Google Cloud Logging JSON entries, with Error
Reporting metadata (service context and report location) on error-level
entries.

Library: structlog + orjson, configuration via pydantic-settings.
"""

from .entry import (
    HTTPRequest,
    LogRecord,
    ReportLocation,
    ServiceContext,
    Severity,
)
from .exceptions import FormatterError, SerializationError
from .formatter import (
    DEFAULT_STACK_SKIP,
    ERROR_KEY,
    KEY_HTTP_REQUEST,
    KEY_LOG_ID,
    KEY_SPAN_ID,
    KEY_TRACE,
    Formatter,
    new_formatter,
    with_clock,
    with_project_id,
    with_service,
    with_stack_skip,
    with_timestamps,
    with_version,
)

__all__ = [
    "DEFAULT_STACK_SKIP",
    "ERROR_KEY",
    "KEY_HTTP_REQUEST",
    "KEY_LOG_ID",
    "KEY_SPAN_ID",
    "KEY_TRACE",
    "Formatter",
    "FormatterError",
    "HTTPRequest",
    "LogRecord",
    "ReportLocation",
    "SerializationError",
    "ServiceContext",
    "Severity",
    "new_formatter",
    "with_clock",
    "with_project_id",
    "with_service",
    "with_stack_skip",
    "with_timestamps",
    "with_version",
]
