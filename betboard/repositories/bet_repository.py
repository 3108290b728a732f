"""Repository layer for bet entries."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import datetime
from typing import Any

from betboard.numbers import Variant
from betboard.store.base import EntryStore, Ordering, RangeFilter


class BetRepository:
    """Queries over the bets collection, partitioned by (date, variant)."""

    def __init__(self, store: EntryStore, collection: str = "bets") -> None:
        self._store = store
        self._collection = collection

    @property
    def collection(self) -> str:
        return self._collection

    @staticmethod
    def _window(start: datetime, end: datetime) -> list[RangeFilter]:
        return [RangeFilter("created_at", ">=", start), RangeFilter("created_at", "<", end)]

    def create_pending(
        self,
        *,
        number: str,
        amount: float,
        variant: Variant,
        date_str: str,
        created_at: datetime,
        actor_id: str | None = None,
    ) -> dict[str, Any]:
        record: dict[str, Any] = {
            "number": number,
            "amount": amount,
            "type": variant.value,
            "date": date_str,
            "created_at": created_at,
            "settled": False,
        }
        if actor_id:
            record["actor_id"] = actor_id
        record["id"] = self._store.insert(self._collection, record)
        return record

    def create_settled_copy(self, original: dict[str, Any], promoted_at: datetime) -> str:
        """Insert a settled copy of ``original``; the original is left as is."""

        copy = {k: v for k, v in original.items() if k not in ("id", "source_id", "promoted_at")}
        copy["settled"] = True
        copy["promoted_at"] = promoted_at
        copy["source_id"] = str(original["id"])
        return self._store.insert(self._collection, copy)

    def list_settled(self, date_str: str, variant: Variant) -> Sequence[dict[str, Any]]:
        return self._store.find(
            self._collection,
            {"date": date_str, "type": variant.value, "settled": True},
            order_by=Ordering("created_at"),
        )

    def list_pending(self, date_str: str, variant: Variant) -> Sequence[dict[str, Any]]:
        return self._store.find(
            self._collection,
            {"date": date_str, "type": variant.value, "settled": False},
            order_by=Ordering("created_at", descending=True),
        )

    def list_in_window(
        self,
        date_str: str,
        variant: Variant,
        start: datetime,
        end: datetime,
        *,
        settled: bool | None = None,
    ) -> Sequence[dict[str, Any]]:
        """Entries created in ``[start, end)``; ``settled=None`` means both states."""

        equals: dict[str, Any] = {"date": date_str, "type": variant.value}
        if settled is not None:
            equals["settled"] = settled
        return self._store.find(self._collection, equals, self._window(start, end))

    def promoted_source_ids(self, settled: Iterable[dict[str, Any]]) -> set[str]:
        return {str(r["source_id"]) for r in settled if r.get("source_id")}
