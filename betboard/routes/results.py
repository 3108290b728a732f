"""Results viewer: least-bet numbers per closed slot."""

from __future__ import annotations

from datetime import datetime

from flask import Blueprint, request

from betboard.schemas.dashboard import ResultRowSchema, ResultsQuerySchema
from betboard.services.registry import get_bet_service
from betboard.services.bet_service import parse_date_str, parse_variant
from betboard.utils.actors import require_actor
from betboard.utils.responses import ok

results_bp = Blueprint("results", __name__)

_query_schema = ResultsQuerySchema()
_rows_schema = ResultRowSchema(many=True)


@results_bp.get("/results")
@require_actor
def list_results():
    """Least-bet numbers (A, B, C) for each closed slot of a day.

    Query params:
    - date: YYYY-MM-DD, default today
    - variant: jodi | single
    - at: optional HH:MM; show the day as it looked at that time
    """

    service = get_bet_service()
    query = _query_schema.load(request.args)
    date_str = parse_date_str(query["date"]) if query["date"] else service.today()

    at = None
    if query["at"]:
        at = datetime.strptime(f"{date_str} {query['at']}", "%Y-%m-%d %H:%M")

    rows = service.get_results(date_str, parse_variant(query["variant"]), at=at)
    return ok(
        {
            "date": date_str,
            "variant": query["variant"],
            "last_updated": service.now().isoformat(timespec="seconds"),
            "slots": _rows_schema.dump(rows),
        }
    )
