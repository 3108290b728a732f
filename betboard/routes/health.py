"""Health check routes."""

from __future__ import annotations

from flask import Blueprint, current_app

from betboard.db import get_db_backend
from betboard.utils.responses import ok

health_bp = Blueprint("health", __name__)


@health_bp.get("/health")
def health_check():
    """Health check endpoint."""

    scheduler = current_app.extensions.get("slot_scheduler")
    return ok(
        {
            "status": "ok",
            "backend": get_db_backend(),
            "scheduler_running": bool(scheduler and scheduler.running),
        }
    )
