"""Fixed 15-minute time slots.

A day is split into 96 slots ``[start, end)``. Entries are keyed by the *end*
of the slot they fall in, so an entry at 12:07 belongs to the slot ending
12:15 and an entry at exactly 12:15:00 belongs to the slot ending 12:30.

All datetimes are naive wall-clock values in the configured timezone.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

SLOT_MINUTES = 15
SLOTS_PER_DAY = 24 * 60 // SLOT_MINUTES
SLOT_LENGTH = timedelta(minutes=SLOT_MINUTES)


@dataclass(frozen=True)
class TimeSlot:
    start: datetime
    end: datetime
    label: str

    @property
    def key(self) -> datetime:
        """Slots are identified by their end boundary."""

        return self.end

    def contains(self, ts: datetime) -> bool:
        return self.start <= ts < self.end


def format_slot_label(start: datetime, end: datetime) -> str:
    return f"{start:%H:%M} - {end:%H:%M}"


def _floor_to_slot(ts: datetime) -> datetime:
    minute = (ts.minute // SLOT_MINUTES) * SLOT_MINUTES
    return ts.replace(minute=minute, second=0, microsecond=0)


def _make_slot(start: datetime) -> TimeSlot:
    end = start + SLOT_LENGTH
    return TimeSlot(start=start, end=end, label=format_slot_label(start, end))


def parse_day(value: str) -> date:
    """Parse a ``YYYY-MM-DD`` date string."""

    return datetime.strptime(value, "%Y-%m-%d").date()


def slot_boundaries_for_day(day: date | str) -> list[TimeSlot]:
    """All 96 slots of ``day``, most recent first."""

    if isinstance(day, str):
        day = parse_day(day)
    midnight = datetime.combine(day, time.min)
    slots = [_make_slot(midnight + i * SLOT_LENGTH) for i in range(SLOTS_PER_DAY)]
    slots.reverse()
    return slots


def current_slot(now: datetime) -> TimeSlot:
    return _make_slot(_floor_to_slot(now))


def previous_slot(slot: TimeSlot) -> TimeSlot:
    return _make_slot(slot.start - SLOT_LENGTH)


def slot_key_for_timestamp(ts: datetime) -> datetime:
    """End boundary of the slot ``ts`` belongs to.

    This is the smallest multiple of 15 minutes strictly greater than ``ts``,
    carrying into the next hour or day.
    """

    return _floor_to_slot(ts) + SLOT_LENGTH


def slot_for_key(key: datetime) -> TimeSlot:
    return _make_slot(key - SLOT_LENGTH)
