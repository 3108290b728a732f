"""Bet entry routes (controllers). No business logic here."""

from __future__ import annotations

from flask import Blueprint, request

from betboard.schemas.bet import BetCreateSchema, BetSchema, ViewQuerySchema
from betboard.services.registry import get_bet_service
from betboard.services.bet_service import parse_date_str, parse_variant
from betboard.utils.actors import current_actor_id
from betboard.utils.responses import ok

bets_bp = Blueprint("bets", __name__)

_create_schema = BetCreateSchema()
_bet_schema = BetSchema()
_bets_schema = BetSchema(many=True)
_query_schema = ViewQuerySchema()


@bets_bp.post("/bets")
def submit_bet():
    """Store a pending bet; it shows in settled views after its slot closes."""

    payload = request.get_json(silent=True) or {}
    data = _create_schema.load(payload)

    record = get_bet_service().submit_entry(
        data["number"],
        data["amount"],
        data["variant"],
        date_str=data.get("date"),
        actor_id=current_actor_id(),
    )
    return ok(_bet_schema.dump(record), status_code=201)


@bets_bp.get("/bets/pending")
def list_pending():
    service = get_bet_service()
    query = _query_schema.load(request.args)
    date_str = parse_date_str(query["date"]) if query["date"] else service.today()

    entries = service.list_pending_entries(date_str, parse_variant(query["variant"]))
    return ok({"date": date_str, "entries": _bets_schema.dump(entries)})
