"""Summary routes (controllers). No business logic here."""

from __future__ import annotations

from flask import Blueprint, request

from betboard.schemas.bet import CurrentSlotPreviewSchema, SlotSummarySchema, SummaryItemSchema, ViewQuerySchema
from betboard.services.registry import get_bet_service
from betboard.services.bet_service import parse_date_str, parse_variant
from betboard.utils.responses import ok

summary_bp = Blueprint("summary", __name__)

_query_schema = ViewQuerySchema()
_items_schema = SummaryItemSchema(many=True)
_slots_schema = SlotSummarySchema(many=True)
_preview_schema = CurrentSlotPreviewSchema()


def _scope() -> tuple[str, str]:
    query = _query_schema.load(request.args)
    date_str = parse_date_str(query["date"]) if query["date"] else get_bet_service().today()
    return date_str, query["variant"]


@summary_bp.get("/summary/day")
def day_summary():
    """Settled totals per legal number for the whole day."""

    date_str, variant = _scope()
    items = get_bet_service().get_day_summary(date_str, parse_variant(variant))
    return ok({"date": date_str, "variant": variant, "items": _items_schema.dump(items)})


@summary_bp.get("/summary/slots")
def slot_summaries():
    """Settled totals per slot, newest slot first; slots without bets omitted."""

    date_str, variant = _scope()
    slots = get_bet_service().get_slot_summaries(date_str, parse_variant(variant))
    return ok({"date": date_str, "variant": variant, "slots": _slots_schema.dump(slots)})


@summary_bp.get("/summary/current")
def current_slot_preview():
    """Live preview of the running slot, pending bets included."""

    _, variant = _scope()
    preview = get_bet_service().get_current_slot_preview(parse_variant(variant))
    return ok({"variant": variant, **_preview_schema.dump(preview)})
