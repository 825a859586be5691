"""
Standard library logging integration.
"""

from __future__ import annotations

import logging
from typing import Any

from ..entry import LogRecord
from ..formatter import Formatter, new_formatter
from .core import get_logger

_STANDARD_RECORD_KEYS = {
    "name",
    "msg",
    "args",
    "levelname",
    "levelno",
    "pathname",
    "filename",
    "module",
    "exc_info",
    "exc_text",
    "stack_info",
    "lineno",
    "funcName",
    "created",
    "msecs",
    "relativeCreated",
    "thread",
    "threadName",
    "processName",
    "process",
    "taskName",
    "message",
    "asctime",
}

_STANDARD_LEVELS = (logging.CRITICAL, logging.ERROR, logging.WARNING, logging.INFO, logging.DEBUG)


def _extra_fields(record: logging.LogRecord) -> dict[str, Any]:
    """Fields passed through ``extra=`` on the logging call."""
    return {k: v for k, v in record.__dict__.items() if k not in _STANDARD_RECORD_KEYS and not k.startswith("_")}


def record_from_log_record(record: logging.LogRecord) -> LogRecord:
    """Build a log record from a stdlib ``LogRecord``."""
    error = record.exc_info[1] if record.exc_info else None
    return LogRecord(
        level=record.levelname,
        message=record.getMessage(),
        fields=_extra_fields(record),
        error=error,
        time_ns=int(record.created * 1_000_000_000),
    )


class CloudLoggingFormatter(logging.Formatter):
    """Formats stdlib log records as Cloud Logging JSON entries."""

    def __init__(self, formatter: Formatter | None = None):
        super().__init__()
        self._formatter = formatter or new_formatter()

    def format(self, record: logging.LogRecord) -> str:
        # Handlers append their own terminator.
        return self._formatter.format(record_from_log_record(record)).decode("utf-8").rstrip("\n")


class RedirectStdLibHandler(logging.Handler):
    """
    Redirect standard library logging events to structlog.
    This ensures third-party logs pass through the same entry pipeline.
    """

    def emit(self, record: logging.LogRecord) -> None:
        try:
            # Skip if coming from structlog to avoid infinite loops
            if record.name.startswith("structlog"):
                return

            fields = _extra_fields(record)
            if record.exc_info and record.exc_info[1] is not None:
                fields["exc_info"] = record.exc_info[1]

            # Bound rather than passed as keywords: extra keys may shadow log() parameters.
            logger = get_logger(record.name).bind(**fields)
            logger.log(self._standard_level(record.levelno), record.getMessage())
        except Exception:
            self.handleError(record)

    @staticmethod
    def _standard_level(levelno: int) -> int:
        """Clamp custom levels to the closest standard level below them."""
        for level in _STANDARD_LEVELS:
            if levelno >= level:
                return level
        return logging.DEBUG
