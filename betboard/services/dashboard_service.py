"""Dashboard state kept fresh by the recurring slot jobs.

Each refresh takes a generation token for the part of the view it rebuilds
(the live slot, or the settled history). A finished refresh is applied only
if its token is still the newest one for that part; stopping the monitor
invalidates every outstanding token so late results are dropped.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from threading import Lock
from typing import Any

from betboard.aggregation import SummaryItem
from betboard.errors import StoreUnavailableError
from betboard.numbers import Variant
from betboard.services.bet_service import BetService, CurrentSlotPreview, SlotSummary
from betboard.services.promotion_service import PromotionResult, PromotionService, is_slot_boundary
from betboard.slots import SLOT_LENGTH, current_slot, previous_slot

logger = logging.getLogger(__name__)

LIVE = "live"
HISTORY = "history"


@dataclass(frozen=True)
class HistoryView:
    date: str
    day_summary: list[SummaryItem]
    slot_summaries: list[SlotSummary]
    pending: Sequence[dict[str, Any]]
    refreshed_at: datetime


@dataclass(frozen=True)
class DashboardView:
    variant: Variant
    history: HistoryView | None
    current: CurrentSlotPreview | None


class DashboardMonitor:
    """Holds the latest dashboard view per watched variant."""

    def __init__(
        self,
        bets: BetService,
        promotions: PromotionService,
        variants: Sequence[Variant] = (Variant.JODI, Variant.SINGLE),
        date_str: str | None = None,
    ) -> None:
        self._bets = bets
        self._promotions = promotions
        self._variants = tuple(variants)
        self._date_str = date_str

        self._lock = Lock()
        self._tokens: dict[tuple[str, Variant], int] = {}
        self._stopped = False
        self._live: dict[Variant, CurrentSlotPreview] = {}
        self._history: dict[Variant, HistoryView] = {}
        self._last_opened: datetime | None = None
        self._backlog_due: set[Variant] = set()

    @property
    def variants(self) -> tuple[Variant, ...]:
        return self._variants

    def selected_date(self) -> str:
        """Selected date, or today when none is pinned."""

        return self._date_str or self._bets.today()

    def select(self, date_str: str | None = None, variants: Sequence[Variant] | None = None) -> None:
        with self._lock:
            self._date_str = date_str
            if variants:
                self._variants = tuple(variants)
            self._live.clear()
            self._history.clear()
            for key in list(self._tokens):
                self._tokens[key] += 1

    def _begin(self, part: str, variant: Variant) -> int:
        with self._lock:
            token = self._tokens.get((part, variant), 0) + 1
            self._tokens[(part, variant)] = token
            return token

    def _is_current(self, part: str, variant: Variant, token: int) -> bool:
        return not self._stopped and self._tokens.get((part, variant)) == token

    def refresh_live(self, variant: Variant) -> CurrentSlotPreview:
        token = self._begin(LIVE, variant)
        preview = self._bets.get_current_slot_preview(variant)
        with self._lock:
            if self._is_current(LIVE, variant, token):
                self._live[variant] = preview
            else:
                logger.debug("Dropping stale live preview for %s", variant.value)
        return preview

    def refresh_history(self, variant: Variant) -> HistoryView:
        token = self._begin(HISTORY, variant)
        date_str = self.selected_date()
        view = HistoryView(
            date=date_str,
            day_summary=self._bets.get_day_summary(date_str, variant),
            slot_summaries=self._bets.get_slot_summaries(date_str, variant),
            pending=self._bets.list_pending_entries(date_str, variant),
            refreshed_at=self._bets.now(),
        )
        with self._lock:
            if self._is_current(HISTORY, variant, token):
                self._history[variant] = view
            else:
                logger.debug("Dropping stale history view for %s", variant.value)
        return view

    def refresh(self, variant: Variant) -> DashboardView:
        """Rebuild every part of the view for ``variant``."""

        self.refresh_history(variant)
        self.refresh_live(variant)
        return self.snapshot(variant)

    def refresh_all_live(self) -> None:
        for variant in self._variants:
            try:
                self.refresh_live(variant)
            except StoreUnavailableError as exc:
                logger.warning("Live preview refresh for %s failed: %s", variant.value, exc.message)

    def snapshot(self, variant: Variant) -> DashboardView:
        with self._lock:
            return DashboardView(
                variant=variant,
                history=self._history.get(variant),
                current=self._live.get(variant),
            )

    def run_promotion_tick(self, now: datetime | None = None) -> list[PromotionResult]:
        """Settle elapsed slots; runs at most once per slot.

        The tick in a slot's boundary minute settles just the slot that
        closed. A tick that finds a boundary was skipped (late run, misfire,
        first tick after start-up) settles the whole backlog instead.
        """

        now = now or self._bets.now()
        opened = current_slot(now)
        with self._lock:
            last = self._last_opened
            if last == opened.start:
                return []
            self._last_opened = opened.start

        on_time = last == opened.start - SLOT_LENGTH and is_slot_boundary(now)
        if self._date_str:
            dates = [self._date_str]
        else:
            # At midnight the slot that just closed belongs to the previous day.
            days = {previous_slot(opened).start.date()}
            if last is not None and not on_time:
                days.add(last.date())
            dates = sorted(d.isoformat() for d in days)

        results: list[PromotionResult] = []
        for variant in self._variants:
            try:
                if not on_time or variant in self._backlog_due:
                    for date_str in dates:
                        results.append(self._promotions.promote_backlog(date_str, variant, now))
                    self._backlog_due.discard(variant)
                else:
                    results.append(self._promotions.promote_previous_slot(dates[-1], variant, now))
            except StoreUnavailableError as exc:
                logger.warning("Promotion for %s %s aborted: %s", dates[-1], variant.value, exc.message)
                self._backlog_due.add(variant)
                continue
            try:
                self.refresh(variant)
            except StoreUnavailableError as exc:
                logger.warning("Refresh after promotion for %s failed: %s", variant.value, exc.message)
        return results

    def stop(self) -> None:
        with self._lock:
            self._stopped = True
            for key in list(self._tokens):
                self._tokens[key] += 1

    def resume(self) -> None:
        with self._lock:
            self._stopped = False
