"""MongoDB document store backed by Motor."""

from __future__ import annotations

from .store import (
    MongoDocumentStore,
    build_wire_projection,
    build_wire_sort,
    open_database,
)

__all__ = [
    "MongoDocumentStore",
    "build_wire_projection",
    "build_wire_sort",
    "open_database",
]
