"""Create the bets table (SQL backend) or its indexes (Mongo backend).

Reads DB_BACKEND / DATABASE_URL / MONGODB_URI from .env / environment.

Usage:
  ./.venv/Scripts/python scripts/create_tables.py
"""

from __future__ import annotations

import logging
import pathlib
import sys

from dotenv import load_dotenv

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT))

# Config classes read the environment at import time.
load_dotenv()
env_local = PROJECT_ROOT / ".env.local"
if env_local.exists():
    load_dotenv(dotenv_path=env_local, override=True)

from betboard.config import config_as_dict
from betboard.db import create_store
from betboard.errors import StoreUnavailableError


def main() -> int:
    """Create the table or indexes backing the bets collection."""

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")

    config = config_as_dict()
    collection = str(config.get("BETS_COLLECTION", "bets"))

    store = create_store(config)
    try:
        store.ensure_indexes(collection)
    except StoreUnavailableError as exc:
        logging.error("Could not prepare %s: %s", collection, exc.details)
        return 1
    finally:
        store.close()

    print(f"{config['DB_BACKEND']} store ready: {collection} (created or already existed).")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
