from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Optional

from ..core.constants import MAX_HOURLY_RATE
from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def optional_text(value: Optional[str]) -> Optional[str]:
    v = (value or "").strip()
    return v or None


def require_int_in_range(value, field_name: str, low: int, high: int) -> int:
    try:
        number = int(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a whole number")
    if not low <= number <= high:
        raise ValidationError(f"{field_name} must be between {low} and {high}")
    return number


def require_float_in_range(value, field_name: str, low: float, high: float) -> float:
    try:
        number = float(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    if not low <= number <= high:
        raise ValidationError(f"{field_name} must be between {low} and {high}")
    return number


def parse_rate(value: Optional[str], *, fallback: Decimal) -> Decimal:
    """Parse an hourly rate; input outside ``0..MAX_HOURLY_RATE`` keeps ``fallback``."""
    try:
        rate = Decimal(str(value).strip())
    except (InvalidOperation, AttributeError):
        return fallback
    if not rate.is_finite() or not 0 <= rate <= MAX_HOURLY_RATE:
        return fallback
    return rate
