"""Application-side logging helper used by the stack skip tests."""


class LogWrapper:
    """Wraps a logger."""

    def __init__(self, logger):
        self.logger = logger

    def error(self, msg: str) -> None:
        self.logger.error(msg)
