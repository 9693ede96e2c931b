"""
Projection sanitization.

Reduces a raw, caller-supplied projection to a safe inclusion-only map.
Each step is a pure function returning a new dict, applied in a fixed
order by :func:`sanitize_projection`:

1. ``keep_inclusions``: drop exclusion entries (the store forbids mixing
   inclusion and exclusion in one projection).
2. ``redact_private``: drop private fields and their descendants.
3. ``force_compulsory``: add every compulsory field, even private ones.
4. ``drop_identity``: remove the internal identity field.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .paths import is_public

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping


def is_include_signal(value: Any) -> bool:
    """Only ``1`` (or ``True``) counts as a request to include a field."""
    if isinstance(value, bool):
        return value
    return isinstance(value, int) and value == 1


def keep_inclusions(projection: Mapping[str, Any]) -> dict[str, int]:
    return {key: 1 for key, value in projection.items() if is_include_signal(value)}


def redact_private(
    projection: Mapping[str, Any], private_fields: Iterable[str]
) -> dict[str, Any]:
    private = tuple(private_fields)
    return {key: value for key, value in projection.items() if is_public(key, private)}


def force_compulsory(
    projection: Mapping[str, Any], compulsory_fields: Iterable[str]
) -> dict[str, Any]:
    result = dict(projection)
    for key in compulsory_fields:
        result[key] = 1
    return result


def drop_identity(projection: Mapping[str, Any], identity_field: str) -> dict[str, Any]:
    return {key: value for key, value in projection.items() if key != identity_field}


def sanitize_projection(
    raw: Mapping[str, Any] | None,
    private_fields: Iterable[str] = (),
    compulsory_fields: Iterable[str] = (),
    *,
    identity_field: str = "_id",
) -> dict[str, Any]:
    """Return the sanitized copy of ``raw``.

    Anything that is not a mapping is treated as an empty projection.
    """
    if raw is None or not hasattr(raw, "items"):
        raw = {}
    result = keep_inclusions(raw)
    result = redact_private(result, private_fields)
    result = force_compulsory(result, compulsory_fields)
    return drop_identity(result, identity_field)
