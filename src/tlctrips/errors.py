"""Errors raised by the trip retrieval-and-query pipeline.

Every failure aborts the request that triggered it. Nothing is retried
automatically: retry policy belongs to the caller.
"""

from __future__ import annotations

from pathlib import Path


class TripsError(Exception):
    """Base class for all the errors raised by this package."""


class ResolutionError(TripsError):
    """The timestamp is outside the representable calendar range."""


class FetchError(TripsError):
    """
    Cannot download a partition file from the remote source.

    Attributes:
        url: the remote address we tried to fetch.
        status: the HTTP status code, if we received a response.
    """

    def __init__(self, message: str, *, url: str, status: int | None = None):
        super().__init__(message)
        self.url = url
        self.status = status


class CacheIOError(TripsError):
    """
    Local filesystem failure while writing or reading a cached file.

    The message only names the file; the full path is kept in `path`
    for logging and diagnostics.
    """

    def __init__(self, message: str, *, path: Path | None = None):
        super().__init__(message)
        self.path = path


class SchemaError(TripsError):
    """A required column is missing or has an unexpected type."""


class ScanError(TripsError):
    """The partition file content is corrupt or cannot be read."""


class ValidationError(TripsError):
    """The request parameters are invalid."""
