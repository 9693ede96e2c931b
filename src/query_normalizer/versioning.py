"""API version guard, run by the transport before normalization."""

from __future__ import annotations

from .exceptions import UnsupportedVersionError


def ensure_supported_version(requested: object, latest: str) -> None:
    """Raise UnsupportedVersionError unless ``requested`` is ``latest``."""
    if requested != latest:
        raise UnsupportedVersionError(requested, latest)
