"""Promotion of pending entries into settled copies.

An entry stays pending until the slot it was created in has fully elapsed.
Promotion inserts a settled copy carrying ``source_id`` = the original's id;
the original is never modified. A copy is only created when no settled record
with that ``source_id`` exists, and the store rejects a second one, so running
promotion twice for the same slot (or from two processes) settles each entry
exactly once.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from threading import Lock
from typing import Any, Sequence

from betboard.clock import Clock, make_clock
from betboard.errors import DuplicateRecordError
from betboard.numbers import Variant
from betboard.repositories.bet_repository import BetRepository
from betboard.slots import SLOT_MINUTES, TimeSlot, current_slot, previous_slot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PromotionResult:
    date: str
    variant: Variant
    cutoff: datetime
    promoted: int
    already_settled: int


def is_slot_boundary(now: datetime) -> bool:
    """True during the first minute of a slot."""

    return now.minute % SLOT_MINUTES == 0


class PromotionService:
    """Settles pending entries whose slot has elapsed."""

    def __init__(self, repository: BetRepository, clock: Clock | None = None) -> None:
        self._repo = repository
        self._clock = clock or make_clock()
        self._lock = Lock()

    def promote_previous_slot(self, date_str: str, variant: Variant, now: datetime | None = None) -> PromotionResult:
        """Settle pending entries created in the slot that just closed."""

        opened: TimeSlot = current_slot(now or self._clock())
        closed = previous_slot(opened)

        with self._lock:
            pending = self._repo.list_in_window(date_str, variant, closed.start, closed.end, settled=False)
            settled = self._repo.list_in_window(date_str, variant, closed.start, closed.end, settled=True)
            return self._promote(date_str, variant, opened.start, pending, settled)

    def promote_backlog(self, date_str: str, variant: Variant, now: datetime | None = None) -> PromotionResult:
        """Settle every pending entry of the day whose slot has closed.

        Catches up on slots whose boundary tick was missed.
        """

        cutoff = current_slot(now or self._clock()).start

        with self._lock:
            pending = [e for e in self._repo.list_pending(date_str, variant) if e["created_at"] < cutoff]
            settled = self._repo.list_settled(date_str, variant)
            return self._promote(date_str, variant, cutoff, pending, settled)

    def _promote(
        self,
        date_str: str,
        variant: Variant,
        cutoff: datetime,
        pending: Sequence[dict[str, Any]],
        settled: Sequence[dict[str, Any]],
    ) -> PromotionResult:
        done = self._repo.promoted_source_ids(settled)
        promoted_at = self._clock()

        promoted = 0
        already = 0
        for entry in pending:
            if str(entry["id"]) in done:
                already += 1
                continue
            try:
                self._repo.create_settled_copy(entry, promoted_at)
            except DuplicateRecordError:
                # Another writer settled it between our read and insert.
                logger.info("Entry %s already settled elsewhere", entry["id"])
                already += 1
                continue
            done.add(str(entry["id"]))
            promoted += 1

        if promoted:
            logger.info(
                "Promoted %s pending %s entries for %s before %s (%s already settled)",
                promoted,
                variant.value,
                date_str,
                cutoff.strftime("%H:%M"),
                already,
            )
        return PromotionResult(
            date=date_str,
            variant=variant,
            cutoff=cutoff,
            promoted=promoted,
            already_settled=already,
        )
