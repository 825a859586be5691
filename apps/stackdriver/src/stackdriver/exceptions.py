"""
Formatter exceptions.
"""

from __future__ import annotations


class FormatterError(Exception):
    """Base class for errors raised while formatting log entries."""


class SerializationError(FormatterError):
    """The assembled entry could not be encoded as JSON.

    The original encoder error is chained as ``__cause__``.
    """

    def __init__(self, message: str, *, entry: dict | None = None) -> None:
        super().__init__(message)
        self.entry = entry or {}
