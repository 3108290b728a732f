"""Recognized-actor check.

Sign-in happens outside this service; a request carrying X-Actor-Id is
treated as coming from a recognized actor. The value is not verified.
"""

from __future__ import annotations

from functools import wraps
from typing import Any, Callable

from flask import request

from betboard.errors import UnauthorizedError

ACTOR_HEADER = "X-Actor-Id"


def current_actor_id() -> str | None:
    value = (request.headers.get(ACTOR_HEADER) or "").strip()
    return value or None


def require_actor(view: Callable[..., Any]) -> Callable[..., Any]:
    @wraps(view)
    def _wrapped(*args: Any, **kwargs: Any) -> Any:
        if current_actor_id() is None:
            raise UnauthorizedError()
        return view(*args, **kwargs)

    return _wrapped
