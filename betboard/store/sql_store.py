"""SQL adapter for the entry store.

Each collection maps onto one ORM model; filter fields must be columns of
that model.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from sqlalchemy import select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from betboard.errors import DuplicateRecordError, QueryRejectedError, StoreUnavailableError
from betboard.models.base import Base
from betboard.models.bet import Bet
from betboard.store.base import Ordering, RangeFilter

logger = logging.getLogger(__name__)

# SQLSTATE unique_violation.
_UNIQUE_VIOLATION = "23505"


def _is_unique_violation(exc: IntegrityError) -> bool:
    """True only for unique-key collisions, not NOT NULL or foreign-key failures."""

    orig = exc.orig
    if getattr(orig, "pgcode", None) == _UNIQUE_VIOLATION or getattr(orig, "sqlstate", None) == _UNIQUE_VIOLATION:
        return True
    message = str(orig or exc).lower()
    return "unique constraint" in message or "duplicate key" in message or "duplicate entry" in message


class SqlEntryStore:
    """Entry store on a relational database via SQLAlchemy."""

    def __init__(self, engine: Engine, models: Mapping[str, type[Base]] | None = None) -> None:
        self._engine = engine
        self._session_factory: sessionmaker[Session] = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
        self._models: dict[str, type[Base]] = dict(models or {"bets": Bet})

    def _model(self, collection: str) -> type[Base]:
        model = self._models.get(collection)
        if model is None:
            raise QueryRejectedError(message="Query rejected", details=f"Unknown collection {collection!r}")
        return model

    @staticmethod
    def _column(model: type[Base], field: str) -> Any:
        if field not in model.__table__.columns:
            raise QueryRejectedError(message="Query rejected", details=f"Unknown field {field!r}")
        return getattr(model, field)

    @staticmethod
    def _to_record(obj: Base) -> dict[str, Any]:
        record = {c.name: getattr(obj, c.name) for c in obj.__table__.columns}
        record["id"] = str(record["id"])
        return record

    def insert(self, collection: str, record: Mapping[str, Any]) -> str:
        model = self._model(collection)
        values = {k: v for k, v in record.items() if k != "id"}
        for field in values:
            self._column(model, field)

        session = self._session_factory()
        try:
            obj = model(**values)
            session.add(obj)
            session.commit()
            return str(obj.id)
        except IntegrityError as exc:
            session.rollback()
            detail = str(exc.orig) if exc.orig else str(exc)
            if _is_unique_violation(exc):
                raise DuplicateRecordError(details=detail) from exc
            logger.warning("SQL insert into %s violated a constraint: %s", collection, detail)
            raise StoreUnavailableError(details=detail) from exc
        except SQLAlchemyError as exc:
            session.rollback()
            logger.warning("SQL insert into %s failed: %s", collection, exc)
            raise StoreUnavailableError(details=str(exc)) from exc
        finally:
            session.close()

    def find(
        self,
        collection: str,
        equals: Mapping[str, Any],
        ranges: Sequence[RangeFilter] | None = None,
        order_by: Ordering | None = None,
    ) -> list[dict[str, Any]]:
        model = self._model(collection)
        stmt = select(model)
        for field, value in equals.items():
            stmt = stmt.where(self._column(model, field) == value)
        for r in ranges or ():
            col = self._column(model, r.field)
            stmt = stmt.where(col >= r.value if r.op == ">=" else col < r.value)
        if order_by is not None:
            col = self._column(model, order_by.field)
            stmt = stmt.order_by(col.desc() if order_by.descending else col.asc())

        session = self._session_factory()
        try:
            return [self._to_record(obj) for obj in session.scalars(stmt).all()]
        except SQLAlchemyError as exc:
            logger.warning("SQL query on %s failed: %s", collection, exc)
            raise StoreUnavailableError(details=str(exc)) from exc
        finally:
            session.close()

    def ensure_indexes(self, collection: str = "bets") -> None:
        model = self._model(collection)
        try:
            model.__table__.create(bind=self._engine, checkfirst=True)
        except SQLAlchemyError as exc:
            logger.exception("Failed to create tables")
            raise StoreUnavailableError(details=str(exc)) from exc

    def close(self) -> None:
        self._engine.dispose()
