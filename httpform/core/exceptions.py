"""Exceptions for httpform encoding errors."""


class EncodeError(Exception):
    """Represents a failure to encode a request body."""

    def __init__(self, message, cause=None):
        super().__init__(message)
        self.cause = cause
