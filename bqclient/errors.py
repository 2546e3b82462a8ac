"""Error types raised by the client core."""

from __future__ import annotations

from typing import Optional


class BigQueryError(Exception):
    """Base class for all errors raised by bqclient."""


class ScopeMismatchError(BigQueryError):
    """A fetch was issued for a scope other than the one the iterator is bound to."""

    def __init__(self, message: str, expected: Optional[str] = None, actual: Optional[str] = None) -> None:
        super().__init__(message)
        self.expected = expected
        self.actual = actual


class DecodeError(BigQueryError):
    """A page payload could not be decoded into domain items."""


class ValidationError(BigQueryError):
    """A configuration value cannot be written to the server."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field


class TransportError(BigQueryError):
    """Failure reported by the service collaborator, tagged with the operation name."""

    def __init__(self, operation: str, message: str) -> None:
        super().__init__(f"{operation} failed: {message}")
        self.operation = operation
