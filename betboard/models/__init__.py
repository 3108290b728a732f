"""ORM models."""

from betboard.models.bet import Bet

__all__ = ["Bet"]
