"""
Normalizer configuration.

``NormalizerConfig`` carries the per-deployment policy consulted by the
normalization pipeline: which fields may be filtered on, which are private,
which are always returned, the pagination bounds and the fallback sort.

The config is immutable and passed to :class:`QueryNormalizer` at
construction time, so several deployments (or tests) with different
policies can coexist in one process.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from .exceptions import ConfigurationError
from .whitelist import FieldWhitelist

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping


def _freeze_sort(
    sort: Mapping[str, int] | Iterable[tuple[str, int]],
) -> tuple[tuple[str, int], ...]:
    items = sort.items() if hasattr(sort, "items") else sort
    return tuple((str(k), v) for k, v in items)


@dataclass(frozen=True)
class NormalizerConfig:
    """
    Immutable normalization policy.

    Attributes:
        whitelist: Top-level field paths the parser may turn into filters.
        private_fields: Field paths (and their descendants) never projected.
        compulsory_fields: Field paths always projected, even if private.
        default_limit: Page size used when none (or a non-positive one) is requested.
        max_limit: Upper bound for the page size.
        default_sort: Fallback ``(field, direction)`` order used when the
            request has neither a sort nor a search term.
        identity_field: Internal document id, never projected.
        score_field: Name of the synthetic text-relevance projection.
        search_param: Raw parameter carrying the free-text search term.
        count_param: Raw parameter whose presence requests a total count.
        latest_version: API version served, if the transport checks one.
    """

    whitelist: FieldWhitelist = field(default_factory=FieldWhitelist)
    private_fields: frozenset[str] = frozenset()
    compulsory_fields: tuple[str, ...] = ()
    default_limit: int = 10
    max_limit: int = 50
    default_sort: tuple[tuple[str, int], ...] = (("_id", 1),)
    identity_field: str = "_id"
    score_field: str = "score"
    search_param: str = "search"
    count_param: str = "countResults"
    latest_version: str | None = None

    def __post_init__(self) -> None:
        # Accept plain iterables/mappings and freeze them.
        if not isinstance(self.whitelist, FieldWhitelist):
            object.__setattr__(self, "whitelist", FieldWhitelist(self.whitelist))
        object.__setattr__(self, "private_fields", frozenset(self.private_fields))
        object.__setattr__(
            self, "compulsory_fields", tuple(dict.fromkeys(self.compulsory_fields))
        )
        object.__setattr__(self, "default_sort", _freeze_sort(self.default_sort))
        self._validate()

    def _validate(self) -> None:
        for name in ("default_limit", "max_limit"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ConfigurationError(
                    f"{name} must be a positive integer, got {value!r}"
                )
        if self.max_limit < self.default_limit:
            raise ConfigurationError(
                f"max_limit ({self.max_limit}) must be >= default_limit "
                f"({self.default_limit})"
            )
        if not self.default_sort:
            raise ConfigurationError("default_sort must name at least one field")
        for key, direction in self.default_sort:
            if direction not in (1, -1) or isinstance(direction, bool):
                raise ConfigurationError(
                    f"default_sort direction for {key!r} must be 1 or -1, "
                    f"got {direction!r}"
                )

    @property
    def default_sort_map(self) -> dict[str, int]:
        """Return a fresh ordered dict of the default sort."""
        return dict(self.default_sort)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> NormalizerConfig:
        """Build a config from plain settings (e.g. parsed JSON/YAML).

        Unknown keys are rejected so that typos do not silently fall back
        to defaults.
        """
        known = set(cls.__dataclass_fields__)
        unknown = set(data) - known
        if unknown:
            raise ConfigurationError(
                f"Unknown configuration keys: {', '.join(sorted(unknown))}"
            )
        return cls(**dict(data))


def charity_register_config() -> NormalizerConfig:
    """Policy of the public charity-register API."""
    return NormalizerConfig(
        whitelist=FieldWhitelist(
            ["charityNumber", "subNumber", "registered", "mainCharity.income"]
        ),
        private_fields=frozenset(),
        compulsory_fields=("charityNumber", "subNumber", "registered", "name"),
        default_limit=10,
        max_limit=50,
        default_sort=(("charityNumber", 1), ("subNumber", 1)),
        latest_version="v0.2.0",
    )
