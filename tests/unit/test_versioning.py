"""Tests for the API version guard and exception hierarchy."""

from __future__ import annotations

import pytest

from query_normalizer.exceptions import (
    QueryNormalizerError,
    StoreConnectionError,
    StoreError,
    UnsupportedVersionError,
)
from query_normalizer.versioning import ensure_supported_version


def test_latest_version_passes() -> None:
    ensure_supported_version("v0.2.0", "v0.2.0")


def test_other_version_rejected() -> None:
    with pytest.raises(UnsupportedVersionError) as exc_info:
        ensure_supported_version("v0.1.0", "v0.2.0")
    err = exc_info.value
    assert err.requested == "v0.1.0"
    assert err.latest == "v0.2.0"
    assert str(err) == (
        "You requested version v0.1.0 but only the latest version v0.2.0 "
        "is supported"
    )


def test_hierarchy() -> None:
    assert issubclass(UnsupportedVersionError, QueryNormalizerError)
    assert issubclass(StoreConnectionError, StoreError)
    assert issubclass(StoreError, QueryNormalizerError)
