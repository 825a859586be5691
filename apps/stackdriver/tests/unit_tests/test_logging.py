"""
Host logging integration tests (structlog pipeline and stdlib logging).
"""

from __future__ import annotations

import inspect
import io
import logging

import orjson
import pytest
import structlog

from stackdriver import new_formatter, with_service, with_timestamps, with_version
from stackdriver.logging import (
    CloudLoggingFormatter,
    RedirectStdLibHandler,
    configure_logging,
    get_logger,
    record_from_event_dict,
    record_from_log_record,
)


class TestRecordFromEventDict:
    def test_event_and_level(self) -> None:
        record = record_from_event_dict("info", {"event": "hello", "level": "warning", "foo": 1})

        assert record.level == "warning"
        assert record.message == "hello"
        assert record.fields == {"foo": 1}
        assert record.error is None

    def test_method_name_without_level(self) -> None:
        assert record_from_event_dict("error", {"event": "x"}).level == "error"

    def test_exc_info_exception(self) -> None:
        err = ValueError("bad")

        record = record_from_event_dict("error", {"event": "x", "exc_info": err})

        assert record.error is err
        assert "exc_info" not in record.fields

    def test_exc_info_true_uses_current_exception(self) -> None:
        try:
            raise KeyError("missing")
        except KeyError as err:
            record = record_from_event_dict("error", {"event": "x", "exc_info": True})
            assert record.error is err

    def test_exc_info_tuple(self) -> None:
        err = RuntimeError("boom")

        record = record_from_event_dict("error", {"event": "x", "exc_info": (RuntimeError, err, None)})

        assert record.error is err

    def test_exc_info_false(self) -> None:
        assert record_from_event_dict("error", {"event": "x", "exc_info": False}).error is None

    def test_non_string_event(self) -> None:
        assert record_from_event_dict("info", {"event": {"a": 1}}).message == "{'a': 1}"


@pytest.mark.usefixtures("restore_logging")
class TestConfigureLogging:
    """configure_logging() wiring"""

    @pytest.fixture
    def configure(self, output):
        def _configure(level: str = "DEBUG") -> None:
            configure_logging(
                level=level,
                formatter=new_formatter(with_service("test"), with_version("0.1"), with_timestamps(False)),
                stream=output,
            )

        return _configure

    def test_structlog_entry(self, configure, read_entries) -> None:
        configure()

        get_logger("app").info("hello", foo="bar")

        assert read_entries() == [
            {
                "severity": "INFO",
                "message": "hello",
                "context": {"data": {"logger": "app", "foo": "bar"}},
                "serviceContext": {"service": "test", "version": "0.1"},
            }
        ]

    def test_level_filtering(self, configure, read_entries) -> None:
        configure("WARNING")

        logger = get_logger()
        logger.info("dropped")
        logger.warning("kept")

        assert [e["message"] for e in read_entries()] == ["kept"]

    def test_context_vars_trace(self, configure, read_entries) -> None:
        configure()
        structlog.contextvars.bind_contextvars(trace="projects/p/traces/abc", spanID="42")

        get_logger().info("in request")

        (entry,) = read_entries()
        assert entry["trace"] == "projects/p/traces/abc"
        assert entry["spanId"] == "42"
        assert entry["context"] == {}

    def test_error_location(self, configure, read_entries) -> None:
        configure()

        get_logger().error("failed", exc_info=ValueError("bad"))
        line = inspect.currentframe().f_lineno - 1

        (entry,) = read_entries()
        assert entry["message"] == "failed: bad"
        assert entry["sourceLocation"] == {
            "filePath": __file__,
            "lineNumber": line,
            "functionName": "test_error_location",
        }

    def test_stdlib_records_are_redirected(self, configure, read_entries) -> None:
        configure()

        logging.getLogger("third.party").warning("disk %s", "full", extra={"device": "sda"})

        assert read_entries() == [
            {
                "severity": "WARNING",
                "message": "disk full",
                "context": {"data": {"logger": "third.party", "device": "sda"}},
                "serviceContext": {"service": "test", "version": "0.1"},
            }
        ]

    def test_named_logger_binds_name(self, configure, read_entries) -> None:
        configure()

        logger = get_logger("orders")
        logger.info("created")

        (entry,) = read_entries()
        assert entry["context"] == {"data": {"logger": "orders"}}

    def test_stdlib_extra_shadowing_log_arguments(self, configure, read_entries) -> None:
        configure()

        logging.getLogger("third.party").warning("disk full", extra={"event": "login", "level": "x"})

        (entry,) = read_entries()
        assert entry["severity"] == "WARNING"
        assert entry["message"] == "disk full"

    def test_stdlib_error_location(self, configure, read_entries) -> None:
        configure()

        logging.getLogger("third.party").error("failed", exc_info=ValueError("bad"))
        line = inspect.currentframe().f_lineno - 1

        (entry,) = read_entries()
        assert entry["message"] == "failed: bad"
        assert entry["sourceLocation"]["functionName"] == "test_stdlib_error_location"
        assert entry["sourceLocation"]["lineNumber"] == line

    def test_root_handler_installed(self, configure) -> None:
        configure()

        root = logging.getLogger()
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0], RedirectStdLibHandler)
        assert root.level == logging.DEBUG


class TestRedirectStdLibHandler:
    @pytest.mark.parametrize(
        ("levelno", "expected"),
        [
            (5, logging.DEBUG),
            (logging.DEBUG, logging.DEBUG),
            (25, logging.INFO),
            (logging.WARNING, logging.WARNING),
            (60, logging.CRITICAL),
        ],
    )
    def test_standard_level(self, levelno, expected) -> None:
        assert RedirectStdLibHandler._standard_level(levelno) == expected


class TestCloudLoggingFormatter:
    """stdlib logging.Formatter adapter"""

    @pytest.fixture
    def stdlib_logger(self):
        stream = io.StringIO()
        handler = logging.StreamHandler(stream)
        handler.setFormatter(
            CloudLoggingFormatter(new_formatter(with_service("test"), with_version("0.1"), with_timestamps(False)))
        )
        logger = logging.getLogger("stackdriver.tests.stdlib")
        logger.handlers = [handler]
        logger.propagate = False
        logger.setLevel(logging.DEBUG)
        yield logger, stream
        logger.handlers = []

    def test_info_with_extra(self, stdlib_logger) -> None:
        logger, stream = stdlib_logger

        logger.info("hello %s", "world", extra={"httpStatus": 200})

        assert stream.getvalue().endswith("}\n")
        assert orjson.loads(stream.getvalue()) == {
            "severity": "INFO",
            "message": "hello world",
            "context": {"data": {"httpStatus": 200}},
            "serviceContext": {"service": "test", "version": "0.1"},
        }

    def test_exception_location(self, stdlib_logger) -> None:
        logger, stream = stdlib_logger

        try:
            raise ValueError("bad")
        except ValueError:
            logger.exception("failed")
            line = inspect.currentframe().f_lineno - 1

        entry = orjson.loads(stream.getvalue())
        location = {"filePath": __file__, "lineNumber": line, "functionName": "test_exception_location"}
        assert entry["severity"] == "ERROR"
        assert entry["message"] == "failed: bad"
        assert entry["sourceLocation"] == location
        assert entry["context"] == {"reportLocation": location}

    def test_record_from_log_record(self) -> None:
        record = logging.LogRecord("app", logging.CRITICAL, __file__, 1, "down %d", (1,), None)
        record.trace = "t"

        mapped = record_from_log_record(record)

        assert mapped.level == "CRITICAL"
        assert mapped.message == "down 1"
        assert mapped.fields == {"trace": "t"}
        assert mapped.time_ns == int(record.created * 1_000_000_000)
