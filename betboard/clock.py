"""Wall-clock source for slot calculations."""

from __future__ import annotations

from datetime import datetime
from typing import Callable
from zoneinfo import ZoneInfo

Clock = Callable[[], datetime]


def make_clock(tz_name: str = "UTC") -> Clock:
    """Clock returning naive wall-clock time in ``tz_name``.

    Stored timestamps are naive in the same zone, so comparisons stay local.
    """

    tz = ZoneInfo(tz_name)

    def _now() -> datetime:
        return datetime.now(tz).replace(tzinfo=None)

    return _now


def fixed_clock(moment: datetime) -> Clock:
    return lambda: moment
