"""Least-bet ranking used by the results viewer."""

from __future__ import annotations

from collections.abc import Iterable

from betboard.aggregation import SummaryItem

PLACEHOLDER = "-"
RESULT_SIZE = 3


def least_bet_numbers(items: Iterable[SummaryItem], size: int = RESULT_SIZE) -> list[str]:
    """The ``size`` numbers with the smallest stake, padded with placeholders.

    Only numbers that received at least one bet are eligible. Ties on amount
    go to the lower user count, then to the lower number.
    """

    eligible = [i for i in items if i.user_count > 0]
    eligible.sort(key=lambda i: (i.total, i.user_count, int(i.number)))

    ranked = [i.number for i in eligible[:size]]
    ranked.extend([PLACEHOLDER] * (size - len(ranked)))
    return ranked
