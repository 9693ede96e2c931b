"""Exceptions for query-normalizer.

Normalization itself never raises: malformed or absent request input
degrades to safe defaults. The errors below cover configuration mistakes
made at startup, the version guard that runs before normalization, and the
opening of the Mongo database. Errors raised by the document store while
counting or finding are propagated unchanged and are not wrapped here.
"""

from __future__ import annotations


class QueryNormalizerError(Exception):
    """Root exception for the query-normalizer package."""


class ConfigurationError(QueryNormalizerError, ValueError):
    """Raised when a NormalizerConfig is built with inconsistent values."""


class UnsupportedVersionError(QueryNormalizerError):
    """Raised when a caller asks for an API version that is not served."""

    def __init__(self, requested: object, latest: str) -> None:
        self.requested = requested
        self.latest = latest
        super().__init__(
            f"You requested version {requested} but only the latest "
            f"version {latest} is supported"
        )


class StoreError(QueryNormalizerError):
    """Base class for document-store setup errors."""


class StoreConnectionError(StoreError):
    """Raised when the Mongo client or database cannot be opened."""
