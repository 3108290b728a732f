"""Fold bet entries into per-number summaries."""

from __future__ import annotations

import logging
import math
import uuid
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from betboard.numbers import Variant, legal_numbers
from betboard.slots import slot_key_for_timestamp

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SummaryItem:
    number: str
    total: float
    user_count: int
    min_amount: float = 0


@dataclass
class _Bucket:
    total: float = 0
    users: set[str] = field(default_factory=set)
    min_amount: float = math.inf


def _actor_token(entry: Mapping[str, Any]) -> str:
    actor_id = entry.get("actor_id")
    if actor_id:
        return f"actor:{actor_id}"
    # Anonymous entries never share a user slot.
    return f"anon:{uuid.uuid4().hex}"


def summarize(entries: Iterable[Mapping[str, Any]], variant: Variant | str) -> list[SummaryItem]:
    """One SummaryItem per legal number of ``variant``, in canonical order.

    Numbers without entries are present with zero totals. The fold is
    independent of entry order.
    """

    buckets: dict[str, _Bucket] = {n: _Bucket() for n in legal_numbers(variant)}

    for entry in entries:
        bucket = buckets.get(str(entry.get("number")))
        if bucket is None:
            logger.debug("Skipping entry with illegal number %r", entry.get("number"))
            continue

        amount = entry.get("amount") or 0
        bucket.total += amount
        bucket.users.add(_actor_token(entry))
        if amount > 0:
            bucket.min_amount = min(bucket.min_amount, amount)

    return [
        SummaryItem(
            number=number,
            total=b.total,
            user_count=len(b.users),
            min_amount=b.min_amount if b.min_amount != math.inf else 0,
        )
        for number, b in buckets.items()
    ]


def group_by_slot_key(entries: Iterable[Mapping[str, Any]]) -> dict[datetime, list[Mapping[str, Any]]]:
    """Bucket entries by the end boundary of their slot."""

    grouped: dict[datetime, list[Mapping[str, Any]]] = {}
    for entry in entries:
        key = slot_key_for_timestamp(entry["created_at"])
        grouped.setdefault(key, []).append(entry)
    return grouped
