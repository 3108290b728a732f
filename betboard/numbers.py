"""Bet variants and the legal number space for each of them."""

from __future__ import annotations

import re
from enum import Enum


class Variant(str, Enum):
    JODI = "jodi"
    SINGLE = "single"


_SINGLE_RE = re.compile(r"[1-9]")
_JODI_RE = re.compile(r"[0-9]{2}")


def legal_numbers(variant: Variant | str) -> list[str]:
    """Every number a bet of ``variant`` may carry, in canonical order.

    single: "1".."9" (no zero)
    jodi:   "01".."99" (zero-padded, "00" excluded)
    """

    variant = Variant(variant)
    if variant is Variant.SINGLE:
        return [str(n) for n in range(1, 10)]
    return [f"{n:02d}" for n in range(1, 100)]


def is_legal_number(number: str, variant: Variant | str) -> bool:
    """Submission format rule for ``number`` under ``variant``."""

    variant = Variant(variant)
    if variant is Variant.SINGLE:
        return bool(_SINGLE_RE.fullmatch(number))
    if not _JODI_RE.fullmatch(number):
        return False
    return 1 <= int(number) <= 99
