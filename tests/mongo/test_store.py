"""Tests for the Mongo document store, using mongomock-motor."""

from __future__ import annotations

import pytest
from mongomock_motor import AsyncMongoMockClient

from query_normalizer import (
    IDocumentStore,
    NormalizerConfig,
    QueryNormalizer,
    StoreConnectionError,
    charity_register_config,
)
from query_normalizer.mongo import (
    MongoDocumentStore,
    build_wire_projection,
    build_wire_sort,
    open_database,
)

TEXT_SCORE = {"$meta": "textScore"}

CHARITIES = [
    {
        "charityNumber": n,
        "subNumber": sub,
        "registered": n != 3,
        "name": f"Charity {n}.{sub}",
        "mainCharity": {"income": n * 1000, "email": f"c{n}@example.org"},
        "trustees": {"address": "private"},
    }
    for n in (3, 1, 2)
    for sub in (1, 0)
]


@pytest.fixture
def database():
    """In-memory Mongo database."""
    return AsyncMongoMockClient()["test_db"]


@pytest.fixture
async def store(database):
    await database.get_collection("charities").insert_many(
        [dict(doc) for doc in CHARITIES]
    )
    return MongoDocumentStore(database, "charities", hidden_fields=("trustees",))


def test_store_satisfies_protocol(database) -> None:
    assert isinstance(MongoDocumentStore(database, "c"), IDocumentStore)


def test_wire_projection_excludes_identity() -> None:
    assert build_wire_projection({"name": 1}) == {"name": 1, "_id": 0}


def test_empty_wire_projection_excludes_hidden_fields() -> None:
    assert build_wire_projection({}, "_id", ["trustees"]) == {
        "trustees": 0,
        "_id": 0,
    }


def test_score_only_wire_projection_excludes_hidden_fields() -> None:
    config = NormalizerConfig(private_fields=frozenset({"secret"}))
    query = QueryNormalizer(config).normalize({}, search_term="oxfam")
    assert query.projection == {"score": TEXT_SCORE}
    assert build_wire_projection(query.projection, "_id", ["secret"]) == {
        "secret": 0,
        "score": TEXT_SCORE,
        "_id": 0,
    }


def test_wire_projection_with_inclusions_keeps_score() -> None:
    wire = build_wire_projection({"name": 1, "score": TEXT_SCORE}, "_id", ["secret"])
    assert wire == {"name": 1, "score": TEXT_SCORE, "_id": 0}


def test_wire_sort_keeps_order() -> None:
    sort = {"score": TEXT_SCORE, "name": 1}
    assert build_wire_sort(sort) == [("score", TEXT_SCORE), ("name", 1)]
    assert build_wire_sort({}) is None
    assert build_wire_sort(None) is None


class TestOpenDatabase:
    def test_name_required(self) -> None:
        with pytest.raises(StoreConnectionError):
            open_database("mongodb://localhost:27017", "")

    def test_invalid_url(self) -> None:
        with pytest.raises(StoreConnectionError):
            open_database("not-a-mongo-url", "charities")

    @pytest.mark.asyncio
    async def test_returns_named_database(self) -> None:
        db = open_database("mongodb://localhost:27017", "charities")
        try:
            assert db.name == "charities"
        finally:
            db.client.close()


class TestMongoDocumentStore:
    @pytest.mark.asyncio
    async def test_count(self, store) -> None:
        assert await store.count({}) == 6
        assert await store.count({"registered": True}) == 4

    @pytest.mark.asyncio
    async def test_find_projects_sorts_and_pages(self, store) -> None:
        docs = await store.find(
            {"registered": True},
            {"charityNumber": 1, "subNumber": 1, "name": 1},
            {"charityNumber": 1, "subNumber": 1},
            1,
            2,
        )
        assert docs == [
            {"charityNumber": 1, "subNumber": 1, "name": "Charity 1.1"},
            {"charityNumber": 2, "subNumber": 0, "name": "Charity 2.0"},
        ]

    @pytest.mark.asyncio
    async def test_find_with_empty_projection_hides_private_data(self, store) -> None:
        docs = await store.find({}, {}, {"charityNumber": -1}, 0, 1)
        assert len(docs) == 1
        assert "_id" not in docs[0]
        assert "trustees" not in docs[0]
        assert docs[0]["charityNumber"] == 3

    @pytest.mark.asyncio
    async def test_for_config_hides_private_fields(self, database) -> None:
        await database.get_collection("charities").insert_many(
            [dict(doc) for doc in CHARITIES]
        )
        config = NormalizerConfig(private_fields=frozenset({"trustees"}))
        store = MongoDocumentStore.for_config(database, "charities", config)
        docs = await store.find({}, {}, {"charityNumber": 1}, 0, 1)
        assert docs[0]["charityNumber"] == 1
        assert "trustees" not in docs[0]
        assert "_id" not in docs[0]

class TestNormalizerWithMongo:
    @pytest.mark.asyncio
    async def test_charity_request_end_to_end(self, store) -> None:
        normalizer = QueryNormalizer(charity_register_config(), store)
        result = await normalizer.handle_request(
            {
                "mainCharity.income>": "2000",
                "fields": "mainCharity.email,trustees.address",
                "countResults": "",
                "limit": "1000",
            }
        )
        assert result.total_matches == 4
        assert result.query.limit == 50
        assert [(d["charityNumber"], d["subNumber"]) for d in result.records] == [
            (2, 0),
            (2, 1),
            (3, 0),
            (3, 1),
        ]
        first = result.records[0]
        assert "_id" not in first
        assert set(first) == {
            "charityNumber",
            "subNumber",
            "registered",
            "name",
            "mainCharity",
            "trustees",
        }

    @pytest.mark.asyncio
    async def test_non_whitelisted_filter_is_ignored(self, store) -> None:
        normalizer = QueryNormalizer(charity_register_config(), store)
        result = await normalizer.handle_request({"name": "nothing matches this"})
        assert len(result.records) == 6
