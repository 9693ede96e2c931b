"""Normalize untrusted query parameters into a safe, bounded document-store query."""

from __future__ import annotations

from .config import NormalizerConfig, charity_register_config
from .descriptor import QueryDescriptor, QueryResult
from .exceptions import (
    ConfigurationError,
    QueryNormalizerError,
    StoreConnectionError,
    StoreError,
    UnsupportedVersionError,
)
from .normalizer import QueryNormalizer
from .parser import QueryParamParser
from .ports import IDocumentStore
from .versioning import ensure_supported_version
from .whitelist import FieldWhitelist

__all__ = [
    "ConfigurationError",
    "FieldWhitelist",
    "IDocumentStore",
    "NormalizerConfig",
    "QueryDescriptor",
    "QueryNormalizer",
    "QueryNormalizerError",
    "QueryParamParser",
    "QueryResult",
    "StoreConnectionError",
    "StoreError",
    "UnsupportedVersionError",
    "charity_register_config",
    "ensure_supported_version",
]
