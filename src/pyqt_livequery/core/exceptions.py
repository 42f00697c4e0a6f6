"""Lookup and configuration exceptions."""

from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    """Why a lookup did not produce results."""
    CANCELLED = "cancelled"  # Internal only, never shown to the user
    UPSTREAM = "upstream"
    TIMEOUT = "timeout"

    @property
    def user_message(self) -> str:
        if self is ErrorKind.TIMEOUT:
            return "Search timed out"
        return "Couldn't load results"


class QueryLookupError(Exception):
    """Base class for failures raised by a lookup backend."""

    kind: ErrorKind = ErrorKind.UPSTREAM


class LookupCancelled(QueryLookupError):
    """Raised when a backend abandons work because its token was signaled."""

    kind = ErrorKind.CANCELLED


class UpstreamError(QueryLookupError):
    """Raised for failure statuses and malformed payloads."""

    kind = ErrorKind.UPSTREAM

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class LookupTimeoutError(QueryLookupError):
    """Raised when a backend gives up after its internal deadline."""

    kind = ErrorKind.TIMEOUT


class ConfigError(ValueError):
    """Raised when a query configuration is invalid."""
