"""Settle every pending bet whose slot has already closed.

Run after downtime, when boundary ticks were missed.

Usage (PowerShell):
  $env:DB_BACKEND = 'mongo'
  $env:MONGODB_URI = 'mongodb://localhost:27017'
  ./.venv/Scripts/python scripts/promote_pending.py --date 2025-01-31

Options:
  --date YYYY-MM-DD     (default: today in TIMEZONE)
  --variant jodi|single (repeatable; default: both)
  --at HH:MM            treat this time of --date as "now"
"""

from __future__ import annotations

import argparse
import logging
import pathlib
import sys
from collections.abc import Sequence
from datetime import datetime

from dotenv import load_dotenv

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT))

# Config classes read the environment at import time.
load_dotenv()
env_local = PROJECT_ROOT / ".env.local"
if env_local.exists():
    load_dotenv(dotenv_path=env_local, override=True)

from betboard.clock import fixed_clock, make_clock
from betboard.config import config_as_dict
from betboard.db import create_store
from betboard.errors import StoreUnavailableError
from betboard.numbers import Variant
from betboard.repositories.bet_repository import BetRepository
from betboard.services.promotion_service import PromotionService

logger = logging.getLogger(__name__)


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Promote pending bets of elapsed slots")
    parser.add_argument("--date", dest="date_str", type=str, default=None)
    parser.add_argument(
        "--variant",
        dest="variants",
        action="append",
        choices=[v.value for v in Variant],
        default=None,
    )
    parser.add_argument("--at", dest="at", type=str, default=None, help="HH:MM on --date")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")

    config = config_as_dict()

    clock = make_clock(str(config.get("TIMEZONE", "UTC")))
    date_str = args.date_str or clock().date().isoformat()
    if args.at:
        try:
            clock = fixed_clock(datetime.strptime(f"{date_str} {args.at}", "%Y-%m-%d %H:%M"))
        except ValueError:
            raise SystemExit("--date must be YYYY-MM-DD and --at must be HH:MM")

    variants = [Variant(v) for v in (args.variants or [v.value for v in Variant])]

    store = create_store(config)
    service = PromotionService(BetRepository(store, collection=str(config.get("BETS_COLLECTION", "bets"))), clock=clock)
    try:
        for variant in variants:
            result = service.promote_backlog(date_str, variant)
            logger.info(
                "%s %s: promoted %s, already settled %s (cutoff %s)",
                date_str,
                variant.value,
                result.promoted,
                result.already_settled,
                result.cutoff.strftime("%H:%M"),
            )
    except StoreUnavailableError as exc:
        logger.error("Promotion aborted: %s", exc.details or exc.message)
        return 1
    finally:
        store.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
