"""
Query descriptor and execution result.

``QueryDescriptor`` is the single mutable value threaded through the
normalization pipeline: the parser fills it from raw request parameters,
each pipeline step narrows or completes it, and the finished descriptor is
handed to the document store.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any


@dataclass
class QueryDescriptor:
    """
    In-flight bundle of filter, projection, sort and pagination.

    Attributes:
        filter: Field path -> value or operator expression.
        projection: Field path -> ``1`` or a ``{"$meta": ...}`` clause.
        sort: Ordered field path -> ``1``/``-1`` or a ``{"$meta": ...}``
            clause. ``None`` (or empty) means no sort was requested.
        skip: Offset; ``None`` until bounded.
        limit: Page size; ``None`` until bounded.
    """

    filter: dict[str, Any] = field(default_factory=dict)
    projection: dict[str, Any] = field(default_factory=dict)
    sort: dict[str, Any] | None = None
    skip: int | None = None
    limit: int | None = None

    @property
    def has_sort(self) -> bool:
        """True when a non-empty sort is present."""
        return bool(self.sort)

    def copy(self) -> QueryDescriptor:
        """Return a deep copy; nested operator expressions are not shared."""
        return QueryDescriptor(
            filter=copy.deepcopy(self.filter),
            projection=copy.deepcopy(self.projection),
            sort=copy.deepcopy(self.sort),
            skip=self.skip,
            limit=self.limit,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialise to a JSON-compatible dictionary."""
        return {
            "filter": copy.deepcopy(self.filter),
            "projection": copy.deepcopy(self.projection),
            "sort": copy.deepcopy(self.sort),
            "skip": self.skip,
            "limit": self.limit,
        }


@dataclass(frozen=True)
class QueryResult:
    """Outcome of one normalized query: the descriptor, count and page."""

    query: QueryDescriptor
    total_matches: int | None
    records: list[dict[str, Any]]

    def to_dict(self) -> dict[str, Any]:
        return {
            "query": self.query.to_dict(),
            "totalMatches": self.total_matches,
            "records": list(self.records),
        }
