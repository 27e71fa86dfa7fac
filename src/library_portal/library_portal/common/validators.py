from __future__ import annotations

from datetime import time
from typing import Optional

from ..core.exceptions import ValidationError


def require_text(value, field_name: str) -> Optional[str]:
    """JSON bodies can carry numbers, lists or objects where a string belongs."""
    if value is not None and not isinstance(value, str):
        raise ValidationError(f"{field_name} must be text")
    return value


def require_non_empty(value: Optional[str], field_name: str) -> str:
    value = require_text(value, field_name)
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_min_length(value: Optional[str], field_name: str, min_len: int) -> str:
    value = require_text(value, field_name)
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def require_int_range(value, field_name: str, *, low: int, high: Optional[int] = None) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a whole number")
    if number < low or (high is not None and number > high):
        bound = f"between {low} and {high}" if high is not None else f"at least {low}"
        raise ValidationError(f"{field_name} must be {bound}")
    return number


def require_time_order(start: time, end: time, field_name: str = "Time slot") -> None:
    if start >= end:
        raise ValidationError(f"{field_name}: start time must be earlier than end time")


def optional_text(value: Optional[str], field_name: str = "Value") -> Optional[str]:
    v = (require_text(value, field_name) or "").strip()
    return v or None
