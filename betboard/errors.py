"""Custom exceptions for centralized error handling."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class AppError(Exception):
    """Base application error."""

    code: str
    message: str
    status_code: int
    details: Any | None = None


class ValidationError(AppError):
    """Input validation error."""

    def __init__(self, message: str = "Validation error", details: Any | None = None) -> None:
        super().__init__(code="validation_error", message=message, status_code=400, details=details)


class UnauthorizedError(AppError):
    """No recognized actor on the request."""

    def __init__(self, message: str = "Sign in required", details: Any | None = None) -> None:
        super().__init__(code="unauthorized", message=message, status_code=401, details=details)


class DuplicateRecordError(AppError):
    """A unique field already holds the inserted value."""

    def __init__(self, message: str = "Conflict", details: Any | None = None) -> None:
        super().__init__(code="conflict", message=message, status_code=409, details=details)


class StoreUnavailableError(AppError):
    """Transport or backend failure talking to the entry store."""

    def __init__(self, message: str = "Entry store unavailable", details: Any | None = None) -> None:
        super().__init__(code="store_unavailable", message=message, status_code=503, details=details)


class QueryRejectedError(StoreUnavailableError):
    """The store refused the query shape (unknown field, missing index).

    Reported to callers exactly like StoreUnavailableError.
    """
