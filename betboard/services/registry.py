"""Service wiring: one set of services per app, sharing the app's entry store."""

from __future__ import annotations

from flask import Flask, current_app

from betboard.clock import Clock, make_clock
from betboard.numbers import Variant
from betboard.repositories.bet_repository import BetRepository
from betboard.services.bet_service import BetService
from betboard.services.dashboard_service import DashboardMonitor
from betboard.services.promotion_service import PromotionService
from betboard.store.base import EntryStore


def parse_variants(raw: str) -> list[Variant]:
    return [Variant(v.strip().lower()) for v in raw.split(",") if v.strip()]


def init_services(app: Flask, store: EntryStore, clock: Clock | None = None) -> None:
    clock = clock or make_clock(str(app.config.get("TIMEZONE", "UTC")))
    repo = BetRepository(store, collection=str(app.config.get("BETS_COLLECTION", "bets")))

    bets = BetService(repo, clock=clock)
    promotions = PromotionService(repo, clock=clock)
    monitor = DashboardMonitor(
        bets,
        promotions,
        variants=parse_variants(str(app.config.get("DASHBOARD_VARIANTS", "jodi,single"))),
    )

    app.extensions["bet_service"] = bets
    app.extensions["promotion_service"] = promotions
    app.extensions["dashboard_monitor"] = monitor


def get_bet_service() -> BetService:
    return current_app.extensions["bet_service"]


def get_promotion_service() -> PromotionService:
    return current_app.extensions["promotion_service"]


def get_dashboard_monitor() -> DashboardMonitor:
    return current_app.extensions["dashboard_monitor"]
