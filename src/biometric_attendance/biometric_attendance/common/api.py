from __future__ import annotations

from datetime import date
from functools import wraps
from typing import Optional

from flask import current_app, jsonify, request

from ..core.enums import ErrorKind
from ..core.exceptions import DomainError, ValidationError
from .datetime_utils import now_utc, parse_iso_date

STATUS_BY_KIND = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.DEVICE_UNAVAILABLE: 409,
    ErrorKind.CONNECTION_FAILURE: 502,
    ErrorKind.PERSISTENCE_FAILURE: 503,
}


def token_required(view):
    """Require the X-API-Token header when API_TOKEN is configured."""

    @wraps(view)
    async def wrapper(*args, **kwargs):
        expected = current_app.config.get("API_TOKEN")
        if expected and request.headers.get("X-API-Token") != expected:
            return jsonify({"success": False, "message": "Invalid or missing API token"}), 403
        return await view(*args, **kwargs)

    return wrapper


def error_response(exc: DomainError):
    status = STATUS_BY_KIND.get(exc.kind, 400)
    return jsonify({"success": False, "error": exc.kind.value, "message": str(exc)}), status


def date_arg(name: str, default: Optional[date] = None) -> date:
    value = request.args.get(name)
    if not value:
        if default is None:
            raise ValidationError(f"Query parameter '{name}' is required")
        return default
    try:
        return parse_iso_date(value)
    except ValueError:
        raise ValidationError(f"Query parameter '{name}' must be YYYY-MM-DD") from None


def today_utc() -> date:
    return now_utc().date()


def int_arg(name: str, *, minimum: Optional[int] = None) -> Optional[int]:
    value = request.args.get(name)
    if value is None or value == "":
        return None
    try:
        number = int(value)
    except ValueError:
        raise ValidationError(f"Query parameter '{name}' must be an integer") from None
    if minimum is not None and number < minimum:
        raise ValidationError(f"Query parameter '{name}' must be at least {minimum}")
    return number
