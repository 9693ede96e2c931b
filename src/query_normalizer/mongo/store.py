"""MongoDocumentStore — IDocumentStore over a Motor database."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from motor.motor_asyncio import AsyncIOMotorClient
from pymongo.errors import PyMongoError

from ..exceptions import StoreConnectionError
from ..pipeline.projection import is_include_signal

if TYPE_CHECKING:
    from collections.abc import Iterable

    from motor.motor_asyncio import AsyncIOMotorDatabase

    from ..config import NormalizerConfig

logger = logging.getLogger("query_normalizer.mongo")


def open_database(
    url: str,
    name: str,
    **client_options: Any,
) -> AsyncIOMotorDatabase[Any]:
    """Create a Motor client for ``url`` and return its ``name`` database.

    The client connects lazily on the first query. Close it through
    ``database.client.close()``.
    """
    if not name:
        raise StoreConnectionError("A database name is required")
    client_options.setdefault("serverSelectionTimeoutMS", 5000)
    try:
        client: AsyncIOMotorClient[Any] = AsyncIOMotorClient(url, **client_options)
    except PyMongoError as e:
        raise StoreConnectionError(str(e)) from e
    logger.info("Mongo client created for database %s", name)
    return client[name]


def build_wire_projection(
    projection: dict[str, Any],
    identity_field: str = "_id",
    hidden_fields: Iterable[str] = (),
) -> dict[str, Any]:
    """Translate a sanitized projection into the document sent to Mongo.

    Mongo returns the identity field unless it is explicitly excluded; that
    exclusion is the only one allowed inside an inclusion projection.

    A projection without any inclusion entry (empty, or only ``$meta``
    entries such as the text score) is exclusion-style to Mongo and would
    return whole documents. It becomes an exclusion of every hidden field
    and the identity field, with the ``$meta`` entries kept.
    """
    if any(is_include_signal(value) for value in projection.values()):
        wire = dict(projection)
    else:
        wire = dict.fromkeys(hidden_fields, 0)
        wire.update(
            (key, value) for key, value in projection.items() if isinstance(value, dict)
        )
    wire[identity_field] = 0
    return wire


def build_wire_sort(sort: dict[str, Any] | None) -> list[tuple[str, Any]] | None:
    """Ordered ``(field, direction)`` pairs; ``None`` when there is no sort."""
    if not sort:
        return None
    return list(sort.items())


class MongoDocumentStore:
    """Execute normalized queries against one collection.

    Driver errors from ``count`` and ``find`` propagate unchanged.
    """

    def __init__(
        self,
        database: AsyncIOMotorDatabase[Any],
        collection: str,
        *,
        identity_field: str = "_id",
        hidden_fields: Iterable[str] = (),
    ) -> None:
        self._database = database
        self._collection_name = collection
        self._identity_field = identity_field
        self._hidden_fields = tuple(hidden_fields)

    @classmethod
    def for_config(
        cls,
        database: AsyncIOMotorDatabase[Any],
        collection: str,
        config: NormalizerConfig,
    ) -> MongoDocumentStore:
        """Store hiding the config's private fields and identity field."""
        return cls(
            database,
            collection,
            identity_field=config.identity_field,
            hidden_fields=sorted(config.private_fields),
        )

    def _collection(self) -> Any:
        return self._database.get_collection(self._collection_name)

    async def count(self, filter: dict[str, Any]) -> int:
        return int(await self._collection().count_documents(filter))

    async def find(
        self,
        filter: dict[str, Any],
        projection: dict[str, Any],
        sort: dict[str, Any],
        skip: int,
        limit: int,
    ) -> list[dict[str, Any]]:
        wire_projection = build_wire_projection(
            projection, self._identity_field, self._hidden_fields
        )
        kwargs: dict[str, Any] = {"skip": skip, "limit": limit}
        wire_sort = build_wire_sort(sort)
        if wire_sort:
            kwargs["sort"] = wire_sort
        cursor = self._collection().find(filter, wire_projection, **kwargs)
        return [doc async for doc in cursor]
