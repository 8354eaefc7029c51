from __future__ import annotations

import math

from ..core.exceptions import ValidationError


def require_non_empty(value: str | None, field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_float(value, field_name: str) -> float:
    """Convert ``value`` to a finite float or raise ValidationError."""
    if value is None or isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a number")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    if math.isnan(number) or math.isinf(number):
        raise ValidationError(f"{field_name} must be a finite number")
    return number


def require_coordinate(value, field_name: str, *, limit: float) -> float:
    number = require_float(value, field_name)
    if not -limit <= number <= limit:
        raise ValidationError(f"{field_name} must be between {-limit:g} and {limit:g}")
    return number


def require_latitude(value, field_name: str = "latitude") -> float:
    return require_coordinate(value, field_name, limit=90.0)


def require_longitude(value, field_name: str = "longitude") -> float:
    return require_coordinate(value, field_name, limit=180.0)
