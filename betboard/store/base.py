"""Protocol for the entry store. Mongo and SQL adapters share the same contract."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Protocol

RANGE_OPERATORS = (">=", "<")


@dataclass(frozen=True)
class RangeFilter:
    field: str
    op: str
    value: Any

    def __post_init__(self) -> None:
        if self.op not in RANGE_OPERATORS:
            raise ValueError(f"Unsupported range operator: {self.op}")


@dataclass(frozen=True)
class Ordering:
    field: str
    descending: bool = False


class EntryStore(Protocol):
    """Append-only document collection.

    Records are plain dicts. Returned records carry their generated id under
    ``"id"`` as a string.
    """

    def insert(self, collection: str, record: Mapping[str, Any]) -> str:
        """Append one record and return its id.

        Raises DuplicateRecordError when a unique field collides and
        StoreUnavailableError on transport/backend failure.
        """
        ...

    def find(
        self,
        collection: str,
        equals: Mapping[str, Any],
        ranges: Sequence[RangeFilter] | None = None,
        order_by: Ordering | None = None,
    ) -> list[dict[str, Any]]:
        """All records matching every equality and range filter.

        Raises QueryRejectedError for unsupported query shapes and
        StoreUnavailableError on transport/backend failure.
        """
        ...

    def ensure_indexes(self, collection: str = "bets") -> None:
        """Create the table or indexes backing ``collection``."""
        ...

    def close(self) -> None:
        ...
