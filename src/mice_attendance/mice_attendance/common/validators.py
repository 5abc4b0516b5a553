from __future__ import annotations

import re

from ..core.exceptions import ValidationError

# Shape check only (one @, a dot in the domain); deliverability is up to the mail server.
_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def require_email(value: str, field_name: str = "Email") -> str:
    value = require_non_empty(value, field_name)
    if not _EMAIL_RE.match(value):
        raise ValidationError(f"{field_name} is not a valid address")
    return value.lower()


def require_hours(value, *, max_hours: float) -> float:
    try:
        hours = float(value)
    except (TypeError, ValueError):
        raise ValidationError("Hours must be a number") from None
    if hours <= 0 or hours > max_hours:
        raise ValidationError(f"Hours must be a positive number up to {max_hours:g}")
    return hours
