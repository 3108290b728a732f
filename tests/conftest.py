"""Shared fixtures: a SQLite-backed entry store and a hand-driven clock."""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from betboard import create_app
from betboard.db import create_app_engine
from betboard.repositories.bet_repository import BetRepository
from betboard.services.bet_service import BetService
from betboard.services.promotion_service import PromotionService
from betboard.store.sql_store import SqlEntryStore

DAY = "2025-01-31"


class FakeClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def set(self, hh_mm: str, seconds: int = 0, day: str = DAY) -> None:
        self.now = datetime.strptime(f"{day} {hh_mm}", "%Y-%m-%d %H:%M") + timedelta(seconds=seconds)

    def advance(self, **kwargs: int) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2025, 1, 31, 12, 7, 0))


@pytest.fixture
def store(tmp_path):
    s = SqlEntryStore(create_app_engine(f"sqlite:///{tmp_path / 'bets.db'}"))
    s.ensure_indexes()
    yield s
    s.close()


@pytest.fixture
def repo(store) -> BetRepository:
    return BetRepository(store)


@pytest.fixture
def bet_service(repo, clock) -> BetService:
    return BetService(repo, clock=clock)


@pytest.fixture
def promotion_service(repo, clock) -> PromotionService:
    return PromotionService(repo, clock=clock)


@pytest.fixture
def app(store, clock):
    app = create_app(
        {
            "TESTING": True,
            "DB_BACKEND": "sql",
            "SCHEDULER_ENABLED": False,
            "STORE": store,
            "CLOCK": clock,
        }
    )
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


def settled_records(store, **equals):
    return store.find("bets", {"settled": True, **equals})
