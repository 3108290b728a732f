"""MongoDB adapter for the entry store."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.errors import DuplicateKeyError, OperationFailure, PyMongoError

from betboard.errors import DuplicateRecordError, QueryRejectedError, StoreUnavailableError
from betboard.store.base import Ordering, RangeFilter

logger = logging.getLogger(__name__)

_MONGO_OPERATORS = {">=": "$gte", "<": "$lt"}


def build_filter(equals: Mapping[str, Any], ranges: Sequence[RangeFilter] | None = None) -> dict[str, Any]:
    """Translate equality and range filters into a Mongo query document."""

    query: dict[str, Any] = dict(equals)
    for r in ranges or ():
        clause = query.get(r.field)
        if not isinstance(clause, dict):
            if r.field in query:
                raise QueryRejectedError(f"Field {r.field!r} used for both equality and range")
            clause = {}
            query[r.field] = clause
        clause[_MONGO_OPERATORS[r.op]] = r.value
    return query


def _to_record(doc: Mapping[str, Any]) -> dict[str, Any]:
    record = {k: v for k, v in doc.items() if k != "_id"}
    record["id"] = str(doc["_id"])
    return record


class MongoEntryStore:
    """Entry store on a MongoDB database."""

    def __init__(self, client: MongoClient, database: str, *, unique_fields: Sequence[str] = ("source_id",)) -> None:
        self._client = client
        self._db = client[database]
        self._unique_fields = tuple(unique_fields)

    @classmethod
    def from_uri(cls, uri: str, database: str, *, timeout_ms: int = 5000) -> "MongoEntryStore":
        client = MongoClient(uri, serverSelectionTimeoutMS=int(timeout_ms))
        return cls(client, database)

    def insert(self, collection: str, record: Mapping[str, Any]) -> str:
        doc = {k: v for k, v in record.items() if k != "id"}
        try:
            result = self._db[collection].insert_one(doc)
        except DuplicateKeyError as exc:
            raise DuplicateRecordError(details=str(exc)) from exc
        except PyMongoError as exc:
            logger.warning("Mongo insert into %s failed: %s", collection, exc)
            raise StoreUnavailableError(details=str(exc)) from exc
        return str(result.inserted_id)

    def find(
        self,
        collection: str,
        equals: Mapping[str, Any],
        ranges: Sequence[RangeFilter] | None = None,
        order_by: Ordering | None = None,
    ) -> list[dict[str, Any]]:
        query = build_filter(equals, ranges)
        try:
            cur = self._db[collection].find(query)
            if order_by is not None:
                cur = cur.sort(order_by.field, DESCENDING if order_by.descending else ASCENDING)
            return [_to_record(doc) for doc in cur]
        except OperationFailure as exc:
            logger.warning("Mongo rejected query on %s: %s", collection, exc)
            raise QueryRejectedError(message="Query rejected", details=str(exc)) from exc
        except PyMongoError as exc:
            logger.warning("Mongo query on %s failed: %s", collection, exc)
            raise StoreUnavailableError(details=str(exc)) from exc

    def ensure_indexes(self, collection: str = "bets") -> None:
        col = self._db[collection]
        try:
            col.create_index([("date", ASCENDING), ("type", ASCENDING), ("settled", ASCENDING), ("created_at", ASCENDING)])
            for name in self._unique_fields:
                # Pending originals have no source_id; only settled copies are constrained.
                col.create_index(
                    name,
                    unique=True,
                    partialFilterExpression={name: {"$type": "string"}},
                )
        except PyMongoError as exc:
            logger.exception("Failed to create indexes on %s", collection)
            raise StoreUnavailableError(details=str(exc)) from exc

    def close(self) -> None:
        self._client.close()
