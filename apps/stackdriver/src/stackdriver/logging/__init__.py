"""
Host logging integration.

Provides the Cloud Logging entry pipeline for:
- structlog: StackdriverRenderer as the final processor
- stdlib logging: CloudLoggingFormatter, or RedirectStdLibHandler into structlog

Library: structlog + orjson for high-performance JSON serialization.
"""

from .core import StdioLogger, StdioLoggerFactory, configure_logging, get_logger
from .interceptors import CloudLoggingFormatter, RedirectStdLibHandler, record_from_log_record
from .processors import StackdriverRenderer, record_from_event_dict

__all__ = [
    "CloudLoggingFormatter",
    "RedirectStdLibHandler",
    "StackdriverRenderer",
    "StdioLogger",
    "StdioLoggerFactory",
    "configure_logging",
    "get_logger",
    "record_from_event_dict",
    "record_from_log_record",
]
