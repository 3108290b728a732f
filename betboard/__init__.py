"""Flask application package."""

from __future__ import annotations

import atexit
from collections.abc import Mapping
from typing import Any

from dotenv import load_dotenv
from flask import Flask


def create_app(overrides: Mapping[str, Any] | None = None) -> Flask:
    """Application factory.

    Args:
        overrides: config values applied on top of the environment config.
            ``STORE`` and ``CLOCK`` may be given to inject an entry store and
            a wall-clock source.

    Returns:
        Configured Flask application.
    """
    load_dotenv()

    from betboard.config import get_config
    from betboard.db import init_db
    from betboard.error_handlers import register_error_handlers
    from betboard.logging_config import configure_logging
    from betboard.routes.bets import bets_bp
    from betboard.routes.dashboard import dashboard_bp
    from betboard.routes.health import health_bp
    from betboard.routes.results import results_bp
    from betboard.routes.summary import summary_bp
    from betboard.scheduler.slot_jobs import SlotScheduler
    from betboard.services.registry import init_services

    app = Flask(__name__)
    app.config.from_object(get_config())
    if overrides:
        app.config.update(overrides)

    configure_logging(app)
    store = init_db(app, app.config.get("STORE"))
    init_services(app, store, app.config.get("CLOCK"))
    register_error_handlers(app)

    app.register_blueprint(health_bp)
    app.register_blueprint(bets_bp, url_prefix="/api")
    app.register_blueprint(summary_bp, url_prefix="/api")
    app.register_blueprint(dashboard_bp, url_prefix="/api")
    app.register_blueprint(results_bp, url_prefix="/api")

    if app.config.get("SCHEDULER_ENABLED"):
        scheduler = SlotScheduler(
            app.extensions["dashboard_monitor"],
            interval_seconds=int(app.config.get("SCHEDULER_INTERVAL_SECONDS", 60)),
            timezone=str(app.config.get("TIMEZONE", "UTC")),
        )
        scheduler.start()
        app.extensions["slot_scheduler"] = scheduler
        atexit.register(scheduler.stop)

    return app
