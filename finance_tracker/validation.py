"""Input checks shared by the mutation handlers.

Reporting tolerates dirty rows; writes do not. Each helper returns the
cleaned value or raises ``ValidationError``.
"""

from __future__ import annotations

import math
from datetime import date, datetime
from typing import Any, Optional

from .errors import ValidationError


def require_text(value: Any, field: str) -> str:
    text = str(value).strip() if value is not None else ""
    if not text:
        raise ValidationError(f"{field} cannot be empty")
    return text


def optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def require_number(value: Any, field: str) -> float:
    """Parse a finite float.

    Args:
        value: Raw input (number or numeric string)
        field: Name used in the error message

    Returns:
        The parsed value

    Raises:
        ValidationError: If the value is missing, non-numeric, NaN or infinite
    """
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a number")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be a number") from None
    if not math.isfinite(number):
        raise ValidationError(f"{field} must be a finite number")
    return number


def require_positive(value: Any, field: str) -> float:
    number = require_number(value, field)
    if number <= 0:
        raise ValidationError(f"{field} must be greater than zero")
    return number


def require_non_negative(value: Any, field: str) -> float:
    number = require_number(value, field)
    if number < 0:
        raise ValidationError(f"{field} cannot be negative")
    return number


def require_nonzero(value: Any, field: str) -> float:
    number = require_number(value, field)
    if number == 0:
        raise ValidationError(f"{field} cannot be zero")
    return number


def optional_positive(value: Any, field: str) -> Optional[float]:
    if value is None or value == "":
        return None
    return require_positive(value, field)


def require_threshold(value: Any) -> float:
    number = require_number(value, "Warning threshold")
    if number <= 0 or number > 100:
        raise ValidationError("Warning threshold must be between 0 and 100")
    return number


def require_iso_date(value: Any, field: str = "Date") -> str:
    """Normalise a date or ISO string to ``YYYY-MM-DD``."""
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    text = require_text(value, field)
    try:
        return date.fromisoformat(text[:10]).isoformat()
    except ValueError:
        raise ValidationError(f"{field} must be an ISO date (YYYY-MM-DD)") from None


def optional_iso_date(value: Any, field: str = "Date") -> Optional[str]:
    if value is None or value == "":
        return None
    return require_iso_date(value, field)
