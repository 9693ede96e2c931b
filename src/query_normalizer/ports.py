"""IDocumentStore — protocol for the backend that executes a descriptor."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class IDocumentStore(Protocol):
    """Count and fetch documents for a normalized query.

    Implementations must not swallow or remap driver errors: a failing
    ``count`` or ``find`` raises straight through to the caller.
    """

    async def count(self, filter: dict[str, Any]) -> int:
        """Return the number of documents matching ``filter``."""
        ...

    async def find(
        self,
        filter: dict[str, Any],
        projection: dict[str, Any],
        sort: dict[str, Any],
        skip: int,
        limit: int,
    ) -> list[dict[str, Any]]:
        """Return one page of documents."""
        ...
