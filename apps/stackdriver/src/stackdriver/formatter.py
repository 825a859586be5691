"""
Stackdriver formatter.

Maps host log records to Cloud Logging entries and renders them as
single-line JSON. Error-level entries are annotated for Error Reporting:
the attached error is appended to the message and the call site is
reported as the entry's source location.

Usage:
    from stackdriver import new_formatter, with_service, with_version

    formatter = new_formatter(with_service("api"), with_version("1.2.0"))
    line = formatter.format(record)
"""

from __future__ import annotations

import dataclasses
import time
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any, Callable
from urllib.parse import quote_plus

import orjson

from .entry import (
    ERROR_SEVERITIES,
    Context,
    Entry,
    HTTPRequest,
    LogRecord,
    ServiceContext,
    format_timestamp,
    severity_for,
)
from .exceptions import SerializationError
from .origin import error_origin

if TYPE_CHECKING:
    from .config import FormatterSettings

# Known keys
KEY_TRACE = "trace"
KEY_SPAN_ID = "spanID"
KEY_HTTP_REQUEST = "httpRequest"
KEY_LOG_ID = "logID"
ERROR_KEY = "error"

# Host logging packages and our own adapters never count as the error origin.
# structlog's async methods render in an executor thread, where the stack ends
# in executor plumbing; skipping it reports no location rather than a wrong one.
DEFAULT_STACK_SKIP: tuple[str, ...] = (
    "structlog",
    "logging",
    "stackdriver.logging",
    "concurrent.futures",
    "threading",
)

Clock = Callable[[], int]


def replace_errors(source: dict[str, Any]) -> dict[str, Any]:
    """Copy ``source`` with exceptions replaced by their text."""
    return {k: str(v) if isinstance(v, BaseException) else v for k, v in source.items()}


def _json_default(obj: Any) -> Any:
    to_dict = getattr(obj, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return dataclasses.asdict(obj)
    raise TypeError(f"Type is not JSON serializable: {type(obj).__name__}")


@dataclass(frozen=True)
class Formatter:
    """Immutable formatter configuration; build it with :func:`new_formatter`."""

    service: str = ""
    version: str = ""
    project_id: str = ""
    stack_skip: tuple[str, ...] = DEFAULT_STACK_SKIP
    timestamps: bool = True
    clock: Clock = field(default=time.time_ns, compare=False)

    @classmethod
    def from_settings(cls, settings: FormatterSettings) -> Formatter:
        return new_formatter(
            with_service(settings.service),
            with_version(settings.version),
            with_project_id(settings.project_id),
            *[with_stack_skip(pkg) for pkg in settings.stack_skip_packages],
            with_timestamps(settings.timestamps),
        )

    def to_entry(self, record: LogRecord) -> Entry:
        """Map a host log record to a Cloud Logging entry."""
        severity = severity_for(record.level)

        fields = dict(record.fields)
        if record.error is not None:
            fields[ERROR_KEY] = record.error

        entry = Entry(
            message=record.message,
            severity=severity,
            context=Context(data=replace_errors(fields)),
            service_context=ServiceContext(service=self.service, version=self.version),
        )
        data = entry.context.data

        trace = fields.get(KEY_TRACE)
        if isinstance(trace, str):
            entry.trace = trace
            del data[KEY_TRACE]

        span_id = fields.get(KEY_SPAN_ID)
        if isinstance(span_id, str):
            entry.span_id = span_id
            del data[KEY_SPAN_ID]

        request = fields.get(KEY_HTTP_REQUEST)
        if isinstance(request, HTTPRequest):
            entry.http_request = request
            entry.context.http_request = request
            del data[KEY_HTTP_REQUEST]

        # Without a project id the log id stays in the context data.
        log_id = fields.get(KEY_LOG_ID)
        if isinstance(log_id, str) and self.project_id:
            entry.log_name = f"projects/{self.project_id}/logs/{quote_plus(log_id)}"
            del data[KEY_LOG_ID]

        if self.timestamps:
            entry.timestamp = format_timestamp(self.clock())

        if severity in ERROR_SEVERITIES:
            # https://cloud.google.com/error-reporting/docs/formatting-error-messages
            # Error Reporting expects the error as part of the message.
            if ERROR_KEY in data:
                entry.message = f"{record.message}: {data.pop(ERROR_KEY)}"

            location = error_origin(self.stack_skip)
            if location is not None:
                entry.context.report_location = location
                entry.source_location = location

        return entry

    def format(self, record: LogRecord) -> bytes:
        """Render a record as a newline-terminated JSON document."""
        entry = self.to_entry(record)
        payload = entry.to_dict()
        try:
            encoded = orjson.dumps(
                payload,
                default=_json_default,
                option=orjson.OPT_UTC_Z | orjson.OPT_NAIVE_UTC | orjson.OPT_PASSTHROUGH_DATACLASS,
            )
        except orjson.JSONEncodeError as exc:
            raise SerializationError(f"Unable to encode log entry: {exc}", entry=payload) from exc
        return encoded + b"\n"


# =============================================================================
# Options
# =============================================================================

Option = Callable[[Formatter], Formatter]


def with_service(name: str) -> Option:
    """Service name reported to Error Reporting."""
    return lambda f: replace(f, service=name)


def with_version(version: str) -> Option:
    """Service version reported to Error Reporting."""
    return lambda f: replace(f, version=version)


def with_project_id(project_id: str) -> Option:
    """Project used to qualify log names."""
    return lambda f: replace(f, project_id=project_id)


def with_stack_skip(package: str) -> Option:
    """Skip frames of ``package`` when locating the error origin."""
    return lambda f: replace(f, stack_skip=f.stack_skip + (package,))


def with_timestamps(enabled: bool) -> Option:
    return lambda f: replace(f, timestamps=enabled)


def with_clock(clock: Clock) -> Option:
    """Source of the entry timestamp, in nanoseconds since the epoch."""
    return lambda f: replace(f, clock=clock)


def new_formatter(*options: Option) -> Formatter:
    formatter = Formatter()
    for option in options:
        formatter = option(formatter)
    return formatter
