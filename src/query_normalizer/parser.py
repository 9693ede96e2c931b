"""
QueryParamParser — raw request parameters -> QueryDescriptor.

Understands the ``key=value`` query-string grammar used by the public API::

    name=Oxfam                      equality
    registered=true                 typed equality (bool, null, numbers, dates)
    mainCharity.income>=1000        range ($gt, $gte, $lt, $lte)
    charityNumber!=200              $ne
    subNumber=0,1                   $in       (and != with commas -> $nin)
    name=/^ox/i                     $regex with $options
    mainCharity.website             $exists: true  (key without a value)
    !mainCharity.website            $exists: false
    fields=name,-activities         projection
    sort=-mainCharity.income,name   sort
    skip=20&limit=10                pagination

Form parsers split ``a>=5`` at the first ``=``, handing us key ``a>`` and
value ``5``; ``a>5`` arrives as key ``a>5`` with an empty value. Both shapes
are accepted.

Parsing never raises on user input: unknown shapes degrade to equality,
unparsable integers to ``None``, and non-whitelisted filter keys are
dropped.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime
from typing import TYPE_CHECKING, Any

from .descriptor import QueryDescriptor

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from .whitelist import FieldWhitelist

logger = logging.getLogger("query_normalizer.parser")

_INT_RE = re.compile(r"^-?\d+$")
_FLOAT_RE = re.compile(r"^-?\d+\.\d+(?:[eE][+-]?\d+)?$|^-?\d+[eE][+-]?\d+$")
_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}(?:[T ][\d:.]+(?:Z|[+-]\d{2}:?\d{2})?)?$")
_REGEX_RE = re.compile(r"^/(?P<pattern>.*)/(?P<flags>[imxs]*)$")
_STRING_RE = re.compile(r"^string\((?P<value>.*)\)$")
_KEY_OP_RE = re.compile(r"^(?P<field>[^<>!=]+)(?P<op><=|>=|!=|<|>|=)(?P<value>.*)$")

_COMPARISON_OPS: dict[str, str] = {
    ">": "$gt",
    ">=": "$gte",
    "<": "$lt",
    "<=": "$lte",
}

RESERVED_KEYS = frozenset({"fields", "sort", "skip", "limit"})


class QueryParamParser:
    """Parse raw request parameters into a :class:`QueryDescriptor`."""

    def __init__(
        self,
        *,
        ignored_keys: Iterable[str] = (),
        fields_key: str = "fields",
        sort_key: str = "sort",
        skip_key: str = "skip",
        limit_key: str = "limit",
    ) -> None:
        """
        Initialize QueryParamParser.

        Args:
            ignored_keys: Parameters consumed elsewhere (e.g. the search
                term) that must never become filter clauses.
            fields_key: Parameter holding the projection list.
            sort_key: Parameter holding the sort list.
            skip_key: Parameter holding the offset.
            limit_key: Parameter holding the page size.
        """
        self._fields_key = fields_key
        self._sort_key = sort_key
        self._skip_key = skip_key
        self._limit_key = limit_key
        self._reserved = frozenset(
            {fields_key, sort_key, skip_key, limit_key, *ignored_keys}
        )

    def parse(
        self,
        raw_params: Mapping[str, Any],
        whitelist: FieldWhitelist | None = None,
    ) -> QueryDescriptor:
        """Return a descriptor; ``whitelist`` restricts which keys filter."""
        descriptor = QueryDescriptor()
        for key, raw_value in raw_params.items():
            if key in self._reserved:
                continue
            for value in _as_list(raw_value):
                self._apply_filter(
                    descriptor.filter, str(key).strip(), value, whitelist
                )

        fields = _join(raw_params.get(self._fields_key))
        if fields:
            descriptor.projection = self._parse_fields(fields)
        sort = _join(raw_params.get(self._sort_key))
        if sort:
            descriptor.sort = self._parse_sort(sort) or None
        descriptor.skip = _int_param(_last(raw_params.get(self._skip_key)))
        descriptor.limit = _int_param(_last(raw_params.get(self._limit_key)))
        return descriptor

    # -- filter --------------------------------------------------------------

    def _apply_filter(
        self,
        filter_doc: dict[str, Any],
        key: str,
        value: Any,
        whitelist: FieldWhitelist | None,
    ) -> None:
        parsed = self._split_clause(key, value)
        if parsed is None:
            return
        field, op, text = parsed
        if whitelist is not None and not whitelist.allows(field):
            logger.debug("Dropping non-whitelisted filter key %r", field)
            return
        clause = _build_clause(op, text)
        existing = filter_doc.get(field)
        if _is_operator_doc(existing) and _is_operator_doc(clause):
            existing.update(clause)
        else:
            filter_doc[field] = clause

    def _split_clause(
        self, key: str, value: Any
    ) -> tuple[str, str, str | None] | None:
        """Return ``(field, op, value)``; ``exists``/``!exists`` carry no value."""
        if not key:
            return None
        text = None if value is None else str(value)
        if not text:
            if key.startswith("!"):
                field = key[1:].strip()
                return (field, "!exists", None) if field else None
            match = _KEY_OP_RE.match(key)
            if match and match.group("value"):
                field = match.group("field").strip()
                return field, match.group("op"), match.group("value")
            return key, "exists", None
        if key[-1] in "<>!":
            field = key[:-1].strip()
            return (field, key[-1] + "=", text) if field else None
        return key, "=", text

    # -- projection / sort ---------------------------------------------------

    def _parse_fields(self, raw: str) -> dict[str, int]:
        projection: dict[str, int] = {}
        for part in raw.split(","):
            name = part.strip()
            if not name:
                continue
            if name.startswith("-"):
                projection[name[1:]] = 0
            else:
                projection[name.lstrip("+")] = 1
        projection.pop("", None)
        return projection

    def _parse_sort(self, raw: str) -> dict[str, int]:
        sort: dict[str, int] = {}
        for part in raw.split(","):
            name = part.strip()
            if not name:
                continue
            if name.startswith("-"):
                sort[name[1:]] = -1
            else:
                sort[name.lstrip("+")] = 1
        sort.pop("", None)
        return sort


def _build_clause(op: str, text: str | None) -> Any:
    if op == "exists":
        return {"$exists": True}
    if op == "!exists":
        return {"$exists": False}
    text = text or ""
    if op in _COMPARISON_OPS:
        return {_COMPARISON_OPS[op]: cast_value(text)}
    regex = _REGEX_RE.match(text)
    if op == "!=":
        if regex:
            return {"$not": _regex_clause(regex)}
        if "," in text:
            return {"$nin": [cast_value(v) for v in text.split(",")]}
        return {"$ne": cast_value(text)}
    if regex:
        return _regex_clause(regex)
    if "," in text:
        return {"$in": [cast_value(v) for v in text.split(",")]}
    return cast_value(text)


def _regex_clause(match: re.Match[str]) -> dict[str, str]:
    clause = {"$regex": match.group("pattern")}
    if match.group("flags"):
        clause["$options"] = match.group("flags")
    return clause


def _is_operator_doc(value: Any) -> bool:
    return (
        isinstance(value, dict)
        and bool(value)
        and all(str(k).startswith("$") for k in value)
    )


def cast_value(text: str) -> Any:
    """Cast a raw string to bool, None, int, float, datetime or str."""
    value = text.strip()
    wrapped = _STRING_RE.match(value)
    if wrapped:
        return wrapped.group("value")
    lowered = value.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    if lowered == "null":
        return None
    if _INT_RE.match(value):
        return int(value)
    if _FLOAT_RE.match(value):
        return float(value)
    if _DATE_RE.match(value):
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return value
    return value


def _as_list(value: Any) -> list[Any]:
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def _last(value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        return value[-1] if value else None
    return value


def _join(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return ",".join(str(v) for v in value if v is not None)
    return str(value)


def _int_param(v: Any) -> int | None:
    if v is None or isinstance(v, bool):
        return None
    try:
        return int(v)
    except (TypeError, ValueError):
        return None
