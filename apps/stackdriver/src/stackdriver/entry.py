"""
Cloud Logging entry model.

More information: https://cloud.google.com/logging/docs/reference/v2/rest/v2/LogEntry
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

# =============================================================================
# Severity
# =============================================================================


class Severity(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"
    ALERT = "ALERT"


ERROR_SEVERITIES = frozenset({Severity.ERROR, Severity.CRITICAL, Severity.ALERT})

# Host level names (lower-cased) to Cloud Logging severities.
LEVEL_TO_SEVERITY: dict[str, Severity] = {
    "debug": Severity.DEBUG,
    "info": Severity.INFO,
    "warn": Severity.WARNING,
    "warning": Severity.WARNING,
    "error": Severity.ERROR,
    "exception": Severity.ERROR,
    "critical": Severity.CRITICAL,
    "fatal": Severity.CRITICAL,
    "alert": Severity.ALERT,
    "panic": Severity.ALERT,
}


def severity_for(level: str) -> str:
    """Translate a host level name, returning "" for unknown levels."""
    return LEVEL_TO_SEVERITY.get(str(level).lower(), "")


# =============================================================================
# Input
# =============================================================================


@dataclass(frozen=True)
class LogRecord:
    """A completed log call as handed over by the host logger.

    ``time_ns`` is the host's record time. It is informational only: entries
    are stamped from the formatter's clock.
    """

    level: str
    message: str
    fields: dict[str, Any] = field(default_factory=dict)
    error: BaseException | None = None
    time_ns: int | None = None


# =============================================================================
# Output
# =============================================================================


def _prune(payload: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in payload.items() if v not in (None, "", 0, {})}


@dataclass(frozen=True)
class HTTPRequest:
    """Details of a request and response to attach to a log entry."""

    request_method: str = ""
    request_url: str = ""
    request_size: str = ""
    status: str = ""
    response_size: str = ""
    user_agent: str = ""
    remote_ip: str = ""
    server_ip: str = ""
    referer: str = ""
    latency: str = ""
    protocol: str = ""

    def to_dict(self) -> dict[str, Any]:
        return _prune(
            {
                "requestMethod": self.request_method,
                "requestUrl": self.request_url,
                "requestSize": self.request_size,
                "status": self.status,
                "responseSize": self.response_size,
                "userAgent": self.user_agent,
                "remoteIp": self.remote_ip,
                "serverIp": self.server_ip,
                "referer": self.referer,
                "latency": self.latency,
                "protocol": self.protocol,
            }
        )


@dataclass(frozen=True)
class ServiceContext:
    """The service the entries are reported for (used by Error Reporting)."""

    service: str = ""
    version: str = ""

    def to_dict(self) -> dict[str, Any]:
        return _prune({"service": self.service, "version": self.version})


@dataclass(frozen=True)
class ReportLocation:
    """Where an error was logged."""

    file_path: str = ""
    line_number: int = 0
    function_name: str = ""

    def to_dict(self) -> dict[str, Any]:
        return _prune(
            {
                "filePath": self.file_path,
                "lineNumber": self.line_number,
                "functionName": self.function_name,
            }
        )


@dataclass
class Context:
    """Sent with every entry; ``data`` holds the residual structured fields."""

    data: dict[str, Any] = field(default_factory=dict)
    report_location: ReportLocation | None = None
    http_request: HTTPRequest | None = None

    def to_dict(self) -> dict[str, Any]:
        return _prune(
            {
                "data": self.data,
                "reportLocation": self.report_location.to_dict() if self.report_location else None,
                "httpRequest": self.http_request.to_dict() if self.http_request else None,
            }
        )


@dataclass
class Entry:
    """A single Cloud Logging entry."""

    message: str = ""
    severity: str = ""
    context: Context = field(default_factory=Context)
    log_name: str = ""
    timestamp: str = ""
    http_request: HTTPRequest | None = None
    trace: str = ""
    span_id: str = ""
    service_context: ServiceContext | None = None
    source_location: ReportLocation | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serializable form; empty fields are dropped, ``context`` is always kept."""
        payload = _prune(
            {
                "timestamp": self.timestamp,
                "logName": self.log_name,
                "httpRequest": self.http_request.to_dict() if self.http_request else None,
                "trace": self.trace,
                "spanId": self.span_id,
                "serviceContext": self.service_context.to_dict() if self.service_context else None,
                "message": self.message,
                "severity": self.severity.value if isinstance(self.severity, Severity) else self.severity,
            }
        )
        payload["context"] = self.context.to_dict()
        if self.source_location:
            source_location = self.source_location.to_dict()
            if source_location:
                payload["sourceLocation"] = source_location
        return payload


def format_timestamp(ns: int) -> str:
    """RFC 3339 UTC timestamp with nanoseconds, trailing zeros trimmed."""
    seconds, nanos = divmod(ns, 1_000_000_000)
    stamp = time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime(seconds))
    if nanos:
        stamp += "." + f"{nanos:09d}".rstrip("0")
    return stamp + "Z"
