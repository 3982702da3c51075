"""Formatting utilities for amounts, percentages and advisory text."""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Union

from .config import CURRENCY_LABEL

Number = Union[float, int]


def round_half_up(value: Number) -> int:
    """Round to the nearest integer, halves away from negative infinity.

    Percentages shown to users round 12.5 -> 13 and -12.5 -> -12, unlike
    the built-in ``round`` which rounds halves to even.
    """
    return int(math.floor(value + 0.5))


def to_fixed(value: Number, digits: int = 0) -> str:
    """Fixed-point text with ties rounded up.

    Example:
        >>> to_fixed(2500.5)
        '2501'
        >>> to_fixed(4.25, 1)
        '4.3'
    """
    quantum = Decimal(1).scaleb(-digits)
    return str(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def format_plain(value: Number) -> str:
    """Shortest text for a number, without a trailing ``.0`` on whole values."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_amount(amount: Number) -> str:
    """Group thousands and keep at most three decimals.

    Example:
        >>> format_amount(1234567)
        '1,234,567'
        >>> format_amount(-1234.5)
        '-1,234.5'
    """
    if not math.isfinite(amount):
        return str(amount)
    text = f"{round(float(amount), 3):,.3f}".rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text


def format_currency(amount: Number, include_label: bool = True) -> str:
    """Format an amount for display.

    Args:
        amount: The amount to format
        include_label: Whether to prefix the currency label

    Returns:
        Formatted string (e.g., "UGX 1,234,567" or "1,234,567")
    """
    formatted = format_amount(amount)
    return f"{CURRENCY_LABEL} {formatted}" if include_label else formatted


def format_percentage(value: Number, digits: int = 1) -> str:
    return f"{to_fixed(value, digits)}%"
