import io
import logging
import typing as t

import orjson
import pytest
import structlog

from stackdriver import Formatter, new_formatter, with_service, with_timestamps, with_version
from stackdriver.logging import RedirectStdLibHandler, StackdriverRenderer, StdioLogger


@pytest.fixture
def output() -> io.BytesIO:
    return io.BytesIO()


@pytest.fixture
def formatter() -> Formatter:
    """Formatter used across tests; timestamps are disabled for stable output."""
    return new_formatter(
        with_service("test"),
        with_version("0.1"),
        with_timestamps(False),
    )


@pytest.fixture
def make_logger(output) -> t.Callable[[Formatter], t.Any]:
    """Build a structlog logger that renders into ``output``."""

    def _make(formatter: Formatter) -> t.Any:
        return structlog.wrap_logger(
            StdioLogger(output),
            processors=[structlog.stdlib.add_log_level, StackdriverRenderer(formatter)],
            wrapper_class=structlog.make_filtering_bound_logger(logging.DEBUG),
            context_class=dict,
        )

    return _make


@pytest.fixture
def logger(make_logger, formatter):
    return make_logger(formatter)


@pytest.fixture
def read_entries(output) -> t.Callable[[], list[dict]]:
    def _read() -> list[dict]:
        return [orjson.loads(line) for line in output.getvalue().splitlines()]

    return _read


@pytest.fixture
def restore_logging():
    """Reset structlog and the stdlib root logger after configure_logging()."""
    root = logging.getLogger()
    level = root.level
    yield
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()
    for handler in root.handlers[:]:
        if isinstance(handler, RedirectStdLibHandler):
            root.removeHandler(handler)
    root.setLevel(level)
