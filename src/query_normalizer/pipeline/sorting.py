"""Fallback sort."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from ..descriptor import QueryDescriptor


def apply_default_sort(
    descriptor: QueryDescriptor,
    default_sort: Mapping[str, int] | Iterable[tuple[str, int]],
) -> None:
    """Set a deterministic key order when no sort is present."""
    if descriptor.has_sort:
        return
    items = default_sort.items() if hasattr(default_sort, "items") else default_sort
    descriptor.sort = dict(items)
