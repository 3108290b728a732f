"""Bet entries stored in one append-only table.

Pending originals and their settled copies live side by side; a settled copy
points back at its original through ``source_id``.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Float, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from betboard.models.base import Base


class Bet(Base):
    """One submitted bet, or the settled copy of one."""

    __tablename__ = "bets"
    __table_args__ = (
        Index("ix_bets_date_type_settled_created_at", "date", "type", "settled", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    number: Mapped[str] = mapped_column(String(2), nullable=False)
    amount: Mapped[float] = mapped_column(Float, nullable=False)
    actor_id: Mapped[str | None] = mapped_column(String(128), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    date: Mapped[str] = mapped_column(String(10), nullable=False)
    type: Mapped[str] = mapped_column(String(10), nullable=False)

    settled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    promoted_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    source_id: Mapped[str | None] = mapped_column(String(64), nullable=True, unique=True)
