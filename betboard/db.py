"""Entry store wiring.

One store per app, chosen by DB_BACKEND ("sql" or "mongo"). Stores open
their own short-lived sessions so scheduler jobs can use them outside a
request.
"""

from __future__ import annotations

import logging

from flask import Flask, current_app
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url

from betboard.errors import StoreUnavailableError
from betboard.models.bet import Bet
from betboard.store.base import EntryStore
from betboard.store.mongo_store import MongoEntryStore
from betboard.store.sql_store import SqlEntryStore

logger = logging.getLogger(__name__)


def create_app_engine(database_url: str) -> Engine:
    url = make_url(database_url)
    if url.get_backend_name() == "sqlite":
        # Scheduler jobs share the engine with request threads.
        return create_engine(database_url, connect_args={"check_same_thread": False}, future=True)
    return create_engine(database_url, pool_pre_ping=True, future=True)


def get_db_backend() -> str:
    return str(current_app.config.get("DB_BACKEND", "sql")).lower().strip()


def create_store(config: dict) -> EntryStore:
    """Build the entry store described by an app config mapping."""

    backend = str(config.get("DB_BACKEND", "sql")).lower().strip()
    if backend == "mongo":
        return MongoEntryStore.from_uri(
            str(config["MONGODB_URI"]),
            str(config["MONGODB_DB"]),
            timeout_ms=int(config.get("MONGODB_TIMEOUT_MS", 5000)),
        )
    if backend == "sql":
        collection = str(config.get("BETS_COLLECTION", "bets"))
        return SqlEntryStore(create_app_engine(str(config["DATABASE_URL"])), {collection: Bet})
    raise RuntimeError(f"Unknown DB_BACKEND: {backend!r}")


def init_db(app: Flask, store: EntryStore | None = None) -> EntryStore:
    """Attach the entry store to the app and make sure its indexes exist."""

    store = store or create_store(app.config)
    try:
        store.ensure_indexes(str(app.config.get("BETS_COLLECTION", "bets")))
    except StoreUnavailableError:
        # Queries surface the outage per request; the app still starts.
        logger.warning("Entry store not reachable at startup; indexes not verified")
    app.extensions["store"] = store
    return store
