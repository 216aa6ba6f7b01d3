from __future__ import annotations

from datetime import date
from typing import Any, Optional

from ..core.exceptions import ValidationError


def require_text(value: Any, field_name: str) -> str:
    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must be text")
    return value


def require_non_empty(value: Any, field_name: str) -> str:
    if value is None:
        raise ValidationError(f"{field_name} is required")
    value = require_text(value, field_name)
    if not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def optional_text(value: Any, field_name: str) -> Optional[str]:
    """Stripped text, or ``None`` for a missing or blank value."""
    if value is None:
        return None
    return require_text(value, field_name).strip() or None


def require_min_length(value: Any, field_name: str, min_len: int) -> str:
    if value is None or len(require_text(value, field_name)) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def require_date_order(start: date, end: date, *, strict: bool = False) -> None:
    """``end`` must not precede ``start`` (or must follow it, when strict)."""
    if strict and end <= start:
        raise ValidationError("End date must be after start date")
    if end < start:
        raise ValidationError("End date cannot be before start date")
