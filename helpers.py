"""
Shared helpers used across blueprints.

Request bodies may arrive as JSON or as multipart forms (when files are
attached); ``request_data()`` hides the difference.
"""

from __future__ import annotations

import json
import math
from collections.abc import Iterable
from typing import Any

from flask import jsonify, request

from errors import ValidationError


def request_data() -> dict[str, Any]:
    """JSON body if present, otherwise form fields."""
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict()


def require_fields(data: dict[str, Any], *names: str) -> None:
    missing = [n for n in names if data.get(n) in (None, "")]
    if missing:
        raise ValidationError(f"Missing required field(s): {', '.join(missing)}")


def as_number(value: Any, field: str) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be a number") from None
    if not math.isfinite(number):
        raise ValidationError(f"{field} must be a finite number")
    return number


def as_list(value: Any, field: str) -> list:
    """Accept a list, or a JSON-encoded list from a form field."""
    if value in (None, ""):
        return []
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except json.JSONDecodeError:
            raise ValidationError(f"{field} must be a JSON list") from None
    if not isinstance(value, list):
        raise ValidationError(f"{field} must be a list")
    return value


def success(message: str | None = None, **payload: Any):
    body: dict[str, Any] = {"success": True}
    if message:
        body["message"] = message
    body.update(payload)
    return jsonify(body)


def dicts(records: Iterable[Any]) -> list[dict]:
    return [r.to_dict() for r in records]
