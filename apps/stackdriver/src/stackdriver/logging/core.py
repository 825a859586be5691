"""
Core logging configuration and initialization logic.
"""

from __future__ import annotations

import logging
import sys
import threading
from typing import Any, BinaryIO

import structlog

from ..config import FormatterSettings, LoggingSettings
from ..formatter import Formatter
from .processors import StackdriverRenderer


def get_logger(name: str | None = None) -> Any:
    """Get a structured logger instance; ``name`` is bound as ``logger``."""
    logger = structlog.get_logger()
    if name:
        return logger.bind(logger=name)
    return logger


# =============================================================================
# Output
# =============================================================================


class StdioLogger:
    """Writes rendered entries verbatim to a binary stream.

    Rendered entries already end with a newline.
    """

    def __init__(self, stream: BinaryIO | None = None):
        self._stream = stream if stream is not None else sys.stdout.buffer
        self._lock = threading.Lock()

    def msg(self, message: bytes) -> None:
        with self._lock:
            self._stream.write(message)
            self._stream.flush()

    log = debug = info = warn = warning = msg
    fatal = failure = err = error = critical = exception = msg


class StdioLoggerFactory:
    """Logger factory sharing one :class:`StdioLogger` per stream."""

    def __init__(self, stream: BinaryIO | None = None):
        self._logger = StdioLogger(stream)

    def __call__(self, *args: Any) -> StdioLogger:
        return self._logger


# =============================================================================
# Configuration Logic
# =============================================================================


def _configure_structlog(level: str, formatter: Formatter, stream: BinaryIO | None) -> None:
    """Configure structlog processors and factory."""
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            StackdriverRenderer(formatter),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, level.upper(), logging.INFO)),
        context_class=dict,
        logger_factory=StdioLoggerFactory(stream),
        cache_logger_on_first_use=False,
    )


def configure_logging(
    *,
    level: str | None = None,
    formatter: Formatter | None = None,
    stream: BinaryIO | None = None,
) -> None:
    """
    Configure structlog and stdlib logging to emit Cloud Logging entries.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL); defaults to LoggingSettings
        formatter: Entry formatter; defaults to one built from FormatterSettings
        stream: Binary output stream (default: stdout)
    """
    from .interceptors import RedirectStdLibHandler

    if level is None:
        level = LoggingSettings().level.value
    if formatter is None:
        formatter = Formatter.from_settings(FormatterSettings())

    _configure_structlog(level, formatter, stream)

    # Route stdlib records (third-party libraries) through the same pipeline.
    root_logger = logging.getLogger()
    root_logger.handlers = []
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    root_logger.addHandler(RedirectStdLibHandler())
