"""Dashboard and promotion routes (controllers). No business logic here."""

from __future__ import annotations

from flask import Blueprint, request

from betboard.schemas.bet import ViewQuerySchema
from betboard.schemas.dashboard import (
    DashboardSelectSchema,
    DashboardViewSchema,
    PromotionRequestSchema,
    PromotionResultSchema,
)
from betboard.services.registry import get_bet_service, get_dashboard_monitor, get_promotion_service
from betboard.services.bet_service import parse_date_str, parse_variant
from betboard.utils.responses import ok

dashboard_bp = Blueprint("dashboard", __name__)

_query_schema = ViewQuerySchema()
_select_schema = DashboardSelectSchema()
_view_schema = DashboardViewSchema()
_promotion_schema = PromotionRequestSchema()
_results_schema = PromotionResultSchema(many=True)


@dashboard_bp.get("/dashboard")
def get_dashboard():
    """Latest monitored view; built on demand when the jobs have not run yet."""

    query = _query_schema.load(request.args)
    variant = parse_variant(query["variant"])
    monitor = get_dashboard_monitor()

    view = monitor.snapshot(variant)
    if view.history is None or view.current is None:
        view = monitor.refresh(variant)
    return ok(_view_schema.dump(view))


@dashboard_bp.post("/dashboard/selection")
def select_dashboard():
    """Pin the dashboard to a date (null = today) and a set of variants."""

    data = _select_schema.load(request.get_json(silent=True) or {})
    date_str = parse_date_str(data["date"]) if data["date"] else None
    variants = [parse_variant(v) for v in data["variants"]] if data["variants"] else None

    monitor = get_dashboard_monitor()
    monitor.select(date_str, variants)
    return ok({"date": monitor.selected_date(), "variants": [v.value for v in monitor.variants]})


@dashboard_bp.post("/promotions")
def promote():
    """Settle pending bets: the slot that just closed, or every elapsed slot."""

    data = _promotion_schema.load(request.get_json(silent=True) or {})
    monitor = get_dashboard_monitor()
    promotions = get_promotion_service()

    date_str = parse_date_str(data["date"]) if data["date"] else get_bet_service().today()
    variants = [parse_variant(data["variant"])] if data["variant"] else list(monitor.variants)

    results = []
    for variant in variants:
        if data["scope"] == "backlog":
            results.append(promotions.promote_backlog(date_str, variant))
        else:
            results.append(promotions.promote_previous_slot(date_str, variant))
        monitor.refresh(variant)

    return ok(_results_schema.dump(results))
