"""PaginationBounder — clamp page size and normalise offset."""

from __future__ import annotations

from typing import Any, NamedTuple


class PaginationBounds(NamedTuple):
    skip: int
    limit: int


def _as_int(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def bound_limit(requested: Any, default_limit: int, max_limit: int) -> int:
    """Clamp to ``max_limit``; fall back to ``default_limit`` when not positive."""
    limit = _as_int(requested)
    if limit is None:
        return default_limit
    if limit > max_limit:
        return max_limit
    return limit if limit > 0 else default_limit


def bound_skip(requested: Any) -> int:
    skip = _as_int(requested)
    return skip if skip is not None and skip >= 0 else 0


class PaginationBounder:
    """Bound skip/limit for one deployment's limits."""

    def __init__(self, default_limit: int = 10, max_limit: int = 50) -> None:
        self.default_limit = default_limit
        self.max_limit = max_limit

    def bound(self, limit: Any = None, skip: Any = None) -> PaginationBounds:
        return PaginationBounds(
            skip=bound_skip(skip),
            limit=bound_limit(limit, self.default_limit, self.max_limit),
        )
