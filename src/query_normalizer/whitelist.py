"""FieldWhitelist — exact field paths (dotted allowed) the parser may filter on."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator


class FieldWhitelist:
    """Immutable set of filterable field paths.

    Membership is exact: whitelisting ``mainCharity`` does not make
    ``mainCharity.income`` filterable, and vice versa.
    """

    __slots__ = ("_fields",)

    def __init__(self, fields: Iterable[str] = ()) -> None:
        self._fields = frozenset(fields)

    @property
    def fields(self) -> frozenset[str]:
        return self._fields

    def allows(self, field: str) -> bool:
        """Return True if ``field`` may become a filter clause."""
        return field in self._fields

    def __contains__(self, field: object) -> bool:
        return field in self._fields

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._fields))

    def __len__(self) -> int:
        return len(self._fields)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FieldWhitelist):
            return NotImplemented
        return self._fields == other._fields

    def __hash__(self) -> int:
        return hash(self._fields)

    def __repr__(self) -> str:
        return f"FieldWhitelist({sorted(self._fields)!r})"
