"""Shared fixtures for query-normalizer tests."""

from __future__ import annotations

import copy
from typing import Any

import pytest

from query_normalizer import (
    FieldWhitelist,
    NormalizerConfig,
    QueryNormalizer,
    charity_register_config,
)


class RecordingStore:
    """In-memory IDocumentStore that records the calls it receives."""

    def __init__(
        self,
        records: list[dict[str, Any]] | None = None,
        *,
        total: int = 0,
        error: Exception | None = None,
    ) -> None:
        self.records = records or []
        self.total = total
        self.error = error
        self.calls: list[tuple[str, dict[str, Any]]] = []

    async def count(self, filter: dict[str, Any]) -> int:
        self.calls.append(("count", {"filter": copy.deepcopy(filter)}))
        if self.error is not None:
            raise self.error
        return self.total

    async def find(
        self,
        filter: dict[str, Any],
        projection: dict[str, Any],
        sort: dict[str, Any],
        skip: int,
        limit: int,
    ) -> list[dict[str, Any]]:
        self.calls.append(
            (
                "find",
                {
                    "filter": copy.deepcopy(filter),
                    "projection": projection,
                    "sort": sort,
                    "skip": skip,
                    "limit": limit,
                },
            )
        )
        if self.error is not None:
            raise self.error
        return list(self.records)


@pytest.fixture
def charity_config() -> NormalizerConfig:
    return charity_register_config()


@pytest.fixture
def private_config() -> NormalizerConfig:
    """Policy with private and compulsory fields, used by redaction tests."""
    return NormalizerConfig(
        whitelist=FieldWhitelist(["a", "status"]),
        private_fields=frozenset({"secret"}),
        compulsory_fields=("id", "name"),
        default_limit=10,
        max_limit=50,
        default_sort={"charityNumber": 1, "subNumber": 1},
    )


@pytest.fixture
def store() -> RecordingStore:
    return RecordingStore(records=[{"charityNumber": 1, "name": "A"}], total=7)


@pytest.fixture
def normalizer(
    charity_config: NormalizerConfig, store: RecordingStore
) -> QueryNormalizer:
    return QueryNormalizer(charity_config, store)


@pytest.fixture
def make_store() -> type[RecordingStore]:
    """The RecordingStore class, for tests that need a custom store."""
    return RecordingStore
