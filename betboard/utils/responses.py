"""JSON envelope shared by every endpoint: {"success", "data", "error"}."""

from __future__ import annotations

from typing import Any

from flask import Response, jsonify

ApiResponse = tuple[Response, int]


def ok(data: Any, status_code: int = 200) -> ApiResponse:
    return jsonify({"success": True, "data": data, "error": None}), status_code


def fail(code: str, message: str, status_code: int, details: Any | None = None) -> ApiResponse:
    """Error envelope; ``code`` is the stable machine-readable part."""

    error = {"code": code, "message": message, "details": details}
    return jsonify({"success": False, "data": None, "error": error}), status_code
