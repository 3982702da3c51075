"""Report windows, sub-period keys and the cleaned transaction frame."""

from __future__ import annotations

import calendar
import logging
import math
from datetime import date, datetime, timedelta
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

import numpy as np
import pandas as pd

from .config import DEFAULT_CATEGORY
from .models import ReportPeriod, Transaction, normalize_period

logger = logging.getLogger(__name__)

TransactionLike = Union[Transaction, Mapping[str, Any]]
BucketKey = Union[str, int]

FRAME_COLUMNS = ['Date', 'Amount', 'Category']


def parse_date(value: Any) -> Optional[date]:
    """Calendar date from a date, datetime or ISO string; None when unparsable."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        pass
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


def as_day(now: Union[date, datetime]) -> date:
    return now.date() if isinstance(now, datetime) else now


def days_in_month(day: date) -> int:
    return calendar.monthrange(day.year, day.month)[1]


def week_of_month(day: date) -> int:
    """Week number 1-5 with weeks starting on Sunday.

    A sixth calendar week (possible in 30/31-day months that start late in
    the week) is folded into week 5.
    """
    offset = (day.replace(day=1).weekday() + 1) % 7
    return min(5, math.ceil((day.day + offset) / 7))


def period_window(period: str, now: Union[date, datetime]) -> Tuple[date, date]:
    """Inclusive ``(start, end)`` of the window ending today."""
    period = normalize_period(period)
    today = as_day(now)
    if period == ReportPeriod.WEEKLY:
        return today - timedelta(days=6), today
    if period == ReportPeriod.MONTHLY:
        return today.replace(day=1), today
    return today.replace(month=1, day=1), today


def bucket_skeleton(period: str, start: date) -> List[Tuple[BucketKey, str]]:
    """Every sub-period of a window as ``(key, label)`` in display order."""
    if period == ReportPeriod.WEEKLY:
        days = [start + timedelta(days=i) for i in range(7)]
        return [(d.isoformat(), d.strftime('%a')) for d in days]
    if period == ReportPeriod.MONTHLY:
        return [(n, f"Week {n}") for n in range(1, 6)]
    return [(m, calendar.month_abbr[m + 1]) for m in range(12)]


def bucket_key(period: str, day: date) -> BucketKey:
    if period == ReportPeriod.WEEKLY:
        return day.isoformat()
    if period == ReportPeriod.MONTHLY:
        return week_of_month(day)
    return day.month - 1


def _fields(item: TransactionLike) -> Tuple[Any, Any, Any]:
    if isinstance(item, Transaction):
        return item.date, item.amount, item.category
    return item.get('date'), item.get('amount'), item.get('category')


def transactions_frame(transactions: Iterable[TransactionLike]) -> pd.DataFrame:
    """Clean DataFrame with ``Date``, ``Amount`` and ``Category`` columns.

    Rows without a usable date are dropped. Zero amounts are dropped too;
    they are neither income nor expense.
    """
    rows = []
    skipped = 0
    for item in transactions:
        raw_date, raw_amount, raw_category = _fields(item)
        day = parse_date(raw_date)
        if day is None:
            skipped += 1
            continue
        category = str(raw_category).strip() if raw_category is not None else ''
        rows.append({'Date': day, 'Amount': raw_amount, 'Category': category or DEFAULT_CATEGORY})
    if skipped:
        logger.debug("Skipped %d transactions with unusable dates", skipped)

    df = pd.DataFrame(rows, columns=FRAME_COLUMNS)
    df['Amount'] = pd.to_numeric(df['Amount'], errors='coerce').fillna(0.0).astype(float)
    df = df[np.isfinite(df['Amount']) & (df['Amount'] != 0)].copy()
    df['Date'] = pd.to_datetime(df['Date'])
    return df.reset_index(drop=True)


def window_rows(df: pd.DataFrame, start: date, end: date) -> pd.DataFrame:
    if df.empty:
        return df
    mask = (df['Date'] >= pd.Timestamp(start)) & (df['Date'] <= pd.Timestamp(end))
    return df[mask]


def month_rows(df: pd.DataFrame, day: date) -> pd.DataFrame:
    """Rows in the calendar month of ``day``."""
    if df.empty:
        return df
    return df[(df['Date'].dt.year == day.year) & (df['Date'].dt.month == day.month)]


def totals(df: pd.DataFrame) -> Tuple[float, float]:
    """``(income, expenses)`` with expenses as a positive number."""
    if df.empty:
        return 0.0, 0.0
    income = float(df.loc[df['Amount'] > 0, 'Amount'].sum())
    expenses = float(-df.loc[df['Amount'] < 0, 'Amount'].sum())
    return income, expenses


def category_totals(df: pd.DataFrame) -> Dict[str, float]:
    """Expense amount per category (positive numbers)."""
    if df.empty:
        return {}
    expenses = df[df['Amount'] < 0]
    if expenses.empty:
        return {}
    sums = expenses.groupby('Category')['Amount'].sum().abs()
    return {str(cat): float(amount) for cat, amount in sums.items()}
