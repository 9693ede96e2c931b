"""Dotted field-path classification."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable


def is_descendant(candidate: str, ancestor: str) -> bool:
    """Return True if ``candidate`` is ``ancestor`` or nested below it.

    Paths are compared segment-wise: ``a.b.c`` descends from ``a`` and
    ``a.b``, but ``a.bc`` does not descend from ``a.b``.
    """
    if candidate == ancestor:
        return True
    return candidate.startswith(ancestor + ".")


def is_descendant_of_any(candidate: str, ancestors: Iterable[str]) -> bool:
    return any(is_descendant(candidate, ancestor) for ancestor in ancestors)


def is_private(path: str, private_fields: Iterable[str]) -> bool:
    """True if ``path`` equals or descends from a private field."""
    return is_descendant_of_any(path, private_fields)


def is_public(path: str, private_fields: Iterable[str]) -> bool:
    return not is_private(path, private_fields)
