"""Bet submission and the aggregate views served to the dashboard."""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from betboard.aggregation import SummaryItem, group_by_slot_key, summarize
from betboard.clock import Clock, make_clock
from betboard.errors import ValidationError
from betboard.numbers import Variant, is_legal_number, legal_numbers
from betboard.ranking import least_bet_numbers
from betboard.repositories.bet_repository import BetRepository
from betboard.slots import TimeSlot, current_slot, parse_day, slot_boundaries_for_day, slot_for_key

logger = logging.getLogger(__name__)

# ASCII decimal literal only; float() alone would accept "1_000".
_AMOUNT_RE = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


@dataclass(frozen=True)
class SlotSummary:
    slot: TimeSlot
    items: list[SummaryItem]
    entry_count: int
    least_bet: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class CurrentSlotPreview:
    slot: TimeSlot
    date: str
    items: list[SummaryItem]
    entry_count: int


@dataclass(frozen=True)
class ResultRow:
    slot: TimeSlot
    numbers: list[str]


def parse_variant(value: Any) -> Variant:
    try:
        return Variant(str(value).strip().lower())
    except ValueError as e:
        raise ValidationError("variant must be 'jodi' or 'single'", details={"variant": value}) from e


def parse_date_str(value: Any) -> str:
    try:
        return parse_day(str(value).strip()).isoformat()
    except ValueError as e:
        raise ValidationError("date must be YYYY-MM-DD", details={"date": value}) from e


def parse_amount(value: Any) -> int | float:
    if isinstance(value, bool):
        raise ValidationError("Enter a valid amount", details={"amount": value})
    if isinstance(value, (int, float)):
        try:
            amount = float(value)
        except OverflowError as e:
            raise ValidationError("Enter a valid amount", details={"amount": value}) from e
    else:
        raw = str(value if value is not None else "").strip()
        if not _AMOUNT_RE.fullmatch(raw):
            raise ValidationError("Enter a valid amount", details={"amount": value})
        amount = float(raw)
    if not math.isfinite(amount) or amount <= 0:
        raise ValidationError("Enter a valid amount", details={"amount": value})
    return int(amount) if amount.is_integer() else amount


def parse_number(value: Any, variant: Variant) -> str:
    # Matched as given; surrounding whitespace makes the number invalid.
    number = str(value if value is not None else "")
    if is_legal_number(number, variant):
        return number
    if variant is Variant.SINGLE:
        message = "Enter a single number from 1 to 9 without leading zero"
    else:
        message = "Enter a jodi number from 01 to 99 with leading zero if < 10"
    raise ValidationError(message, details={"number": value})


class BetService:
    """Bet use-cases over one entry collection."""

    def __init__(self, repository: BetRepository, clock: Clock | None = None) -> None:
        self._repo = repository
        self._clock = clock or make_clock()

    def now(self) -> datetime:
        return self._clock()

    def today(self) -> str:
        return self.now().date().isoformat()

    def submit_entry(
        self,
        number: Any,
        amount: Any,
        variant: Any,
        date_str: Any | None = None,
        actor_id: str | None = None,
    ) -> dict[str, Any]:
        """Validate and store a pending entry.

        Validation happens before any store access; the entry stays out of
        settled views until its slot has elapsed and it is promoted.
        """

        v = parse_variant(variant)
        num = parse_number(number, v)
        amt = parse_amount(amount)
        day = parse_date_str(date_str) if date_str else self.today()

        record = self._repo.create_pending(
            number=num,
            amount=amt,
            variant=v,
            date_str=day,
            created_at=self.now(),
            actor_id=actor_id,
        )
        logger.info("Stored pending %s bet %s x %s for %s (id=%s)", v.value, num, amt, day, record["id"])
        return record

    def list_pending_entries(self, date_str: str, variant: Variant) -> Sequence[dict[str, Any]]:
        """Pending entries, newest first."""

        return self._repo.list_pending(date_str, variant)

    def get_day_summary(self, date_str: str, variant: Variant) -> list[SummaryItem]:
        return summarize(self._repo.list_settled(date_str, variant), variant)

    def get_slot_summaries(self, date_str: str, variant: Variant) -> list[SlotSummary]:
        """Settled summaries per slot of the day, newest first, empty slots omitted."""

        grouped = group_by_slot_key(self._repo.list_settled(date_str, variant))

        out: list[SlotSummary] = []
        for slot in slot_boundaries_for_day(date_str):
            entries = grouped.pop(slot.key, None)
            if not entries:
                continue
            items = summarize(entries, variant)
            out.append(
                SlotSummary(
                    slot=slot,
                    items=items,
                    entry_count=len(entries),
                    least_bet=self.get_least_bet_numbers(items, variant),
                )
            )

        if grouped:
            logger.debug(
                "%s settled entries filed under %s fall outside its slots",
                sum(len(e) for e in grouped.values()),
                date_str,
            )
        return out

    def get_current_slot_preview(self, variant: Variant) -> CurrentSlotPreview:
        """Live view of the running slot, pending entries included."""

        now = self.now()
        slot = current_slot(now)
        day = now.date().isoformat()

        entries = self._repo.list_in_window(day, variant, slot.start, slot.end)
        promoted = self._repo.promoted_source_ids(e for e in entries if e.get("settled"))
        visible = [e for e in entries if e.get("settled") or str(e.get("id")) not in promoted]

        return CurrentSlotPreview(slot=slot, date=day, items=summarize(visible, variant), entry_count=len(visible))

    def get_least_bet_numbers(
        self,
        slot_summary: SlotSummary | Iterable[SummaryItem],
        variant: Variant,
    ) -> list[str]:
        items = slot_summary.items if isinstance(slot_summary, SlotSummary) else slot_summary
        legal = set(legal_numbers(variant))
        return least_bet_numbers(i for i in items if i.number in legal)

    def get_results(self, date_str: str, variant: Variant, at: datetime | None = None) -> list[ResultRow]:
        """Least-bet numbers for every slot that has closed by ``at``, newest first."""

        cutoff = at or self.now()
        grouped = group_by_slot_key(self._repo.list_settled(date_str, variant))

        rows: list[ResultRow] = []
        for key in sorted(grouped, reverse=True):
            if key > cutoff:
                continue
            items = summarize(grouped[key], variant)
            rows.append(ResultRow(slot=slot_for_key(key), numbers=self.get_least_bet_numbers(items, variant)))
        return rows
