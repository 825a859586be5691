"""
structlog processors.
"""

from __future__ import annotations

import sys
from typing import Any

from structlog.typing import EventDict, WrappedLogger

from ..entry import LogRecord
from ..formatter import Formatter


def _exc_info_error(exc_info: Any) -> BaseException | None:
    if isinstance(exc_info, BaseException):
        return exc_info
    if isinstance(exc_info, tuple):
        return exc_info[1] if len(exc_info) > 1 else None
    if exc_info:
        return sys.exc_info()[1]
    return None


def record_from_event_dict(method_name: str, event_dict: EventDict) -> LogRecord:
    """Build a log record from a structlog event dict."""
    fields = dict(event_dict)
    message = fields.pop("event", "")
    level = fields.pop("level", method_name)
    error = _exc_info_error(fields.pop("exc_info", None))
    return LogRecord(
        level=level,
        message=message if isinstance(message, str) else str(message),
        fields=fields,
        error=error,
    )


class StackdriverRenderer:
    """Render the event dict as a Cloud Logging entry. Must be the last processor."""

    def __init__(self, formatter: Formatter):
        self.formatter = formatter

    def __call__(self, logger: WrappedLogger, method_name: str, event_dict: EventDict) -> bytes:
        return self.formatter.format(record_from_event_dict(method_name, event_dict))
