"""Category spending against prorated budget limits.

Limits are stored per month. For a report period the monthly figure is
prorated (weekly = /4, yearly = x12); spending is never re-prorated.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date, datetime
from typing import Iterable, List, Mapping, Optional, Sequence, Union

import pandas as pd

from .config import DEFAULT_WARNING_THRESHOLD, MAX_COMPARISON_ROWS
from .formatting import format_percentage, to_fixed
from .models import BudgetLimit, ReportPeriod, normalize_period
from .periods import TransactionLike, as_day, category_totals, period_window, transactions_frame, window_rows

STATUS_OK = "ok"
STATUS_NEAR = "near"
STATUS_OVER = "over"

COMPARISON_COLUMNS = ['Category', 'Spending', 'Budget', 'Warning At', 'Used', 'Status']


@dataclass(frozen=True)
class ComparisonRow:
    category: str
    spending: float
    budget: float
    warning_threshold: float
    percentage: float
    percentage_label: str
    status: str


@dataclass(frozen=True)
class PlannedVsActualRow:
    category: str
    planned: float
    actual: float
    difference: float
    percentage_diff: float
    status: str


@dataclass(frozen=True)
class SpendingWarning:
    category: str
    kind: str  # "monthly" or "daily"
    limit: float
    spent: float
    percentage: float
    remaining: float


def prorate_budget(monthly_limit: float, period: str) -> float:
    period = normalize_period(period)
    if period == ReportPeriod.WEEKLY:
        return monthly_limit / 4
    if period == ReportPeriod.YEARLY:
        return monthly_limit * 12
    return monthly_limit


def status_for(spending: float, budget: float, warning_value: float) -> str:
    if spending > budget:
        return STATUS_OVER
    if spending > warning_value:
        return STATUS_NEAR
    return STATUS_OK


def compare_to_budget(
    category_totals_by_name: Mapping[str, float],
    limits: Sequence[BudgetLimit],
    period: str,
    max_rows: int = MAX_COMPARISON_ROWS,
) -> List[ComparisonRow]:
    """Compare each limited category's spending with its prorated budget.

    Only limits with a positive monthly amount whose category has spending
    in ``category_totals_by_name`` produce a row. Rows are ordered by
    percentage used, highest first, and capped at ``max_rows``.
    """
    period = normalize_period(period)
    rows = []
    for limit in limits:
        if not limit.monthly_limit or limit.monthly_limit <= 0:
            continue
        if limit.category not in category_totals_by_name:
            continue
        spending = float(category_totals_by_name[limit.category])
        budget = prorate_budget(limit.monthly_limit, period)
        warning_value = budget * limit.threshold / 100
        percentage = spending / budget * 100 if budget > 0 else 0.0
        rows.append(ComparisonRow(
            category=limit.category,
            spending=spending,
            budget=budget,
            warning_threshold=warning_value,
            percentage=percentage,
            percentage_label=format_percentage(percentage) if budget > 0 else "0%",
            status=status_for(spending, budget, warning_value),
        ))
    rows.sort(key=lambda r: r.percentage, reverse=True)
    return rows[:max_rows]


def sample_comparison() -> List[ComparisonRow]:
    """Placeholder rows for an account with no limits and no transactions."""
    samples = [
        ("Food", 450000.0, 600000.0),
        ("Transport", 320000.0, 400000.0),
        ("Utilities", 180000.0, 200000.0),
        ("Entertainment", 150000.0, 200000.0),
    ]
    rows = []
    for category, spending, budget in samples:
        warning_value = budget * DEFAULT_WARNING_THRESHOLD / 100
        percentage = spending / budget * 100
        rows.append(ComparisonRow(
            category, spending, budget, warning_value, percentage,
            format_percentage(percentage), status_for(spending, budget, warning_value),
        ))
    return rows


def daily_budget_total(limits: Sequence[BudgetLimit]) -> float:
    """Sum of daily limits, using monthly / 30 where a limit has no daily figure."""
    total = 0.0
    for limit in limits:
        if limit.daily_limit:
            total += limit.daily_limit
        elif limit.monthly_limit:
            total += limit.monthly_limit / 30
    return total


def monthly_budget_total(limits: Sequence[BudgetLimit]) -> float:
    """Sum of monthly limits, using daily x 30 where a limit has no monthly figure."""
    total = 0.0
    for limit in limits:
        if limit.monthly_limit:
            total += limit.monthly_limit
        elif limit.daily_limit:
            total += limit.daily_limit * 30
    return total


def average_warning_threshold(limits: Sequence[BudgetLimit]) -> float:
    if not limits:
        return DEFAULT_WARNING_THRESHOLD
    return sum(limit.threshold for limit in limits) / len(limits)


def _planned_status(planned: float, percentage_diff: float) -> str:
    if planned == 0:
        return "Unplanned"
    label = to_fixed(percentage_diff)
    if percentage_diff <= 80:
        return f"{label}% (Good)"
    if percentage_diff <= 100:
        return f"{label}% (On Target)"
    if percentage_diff <= 120:
        return f"{label}% (Over)"
    return f"{label}% (High)"


def planned_vs_actual(
    transactions: Iterable[TransactionLike],
    limits: Sequence[BudgetLimit],
    period: str,
    now: Union[date, datetime],
) -> List[PlannedVsActualRow]:
    """Every category with a budget or spending in the window, by actual spend."""
    period = normalize_period(period)
    start, end = period_window(period, now)
    actual_by_category = category_totals(window_rows(transactions_frame(transactions), start, end))

    planned_by_category = {}
    for limit in limits:
        planned_by_category[limit.category] = prorate_budget(limit.monthly_limit or 0.0, period)

    categories = list(planned_by_category) + [c for c in actual_by_category if c not in planned_by_category]
    rows = []
    for category in categories:
        planned = planned_by_category.get(category, 0.0)
        actual = actual_by_category.get(category, 0.0)
        if planned > 0:
            percentage_diff = actual / planned * 100
        else:
            percentage_diff = 100.0 if actual > 0 else 0.0
        rows.append(PlannedVsActualRow(
            category=category,
            planned=planned,
            actual=actual,
            difference=planned - actual,
            percentage_diff=percentage_diff,
            status=_planned_status(planned, percentage_diff),
        ))
    rows.sort(key=lambda r: r.actual, reverse=True)
    return rows


def check_spending_warnings(
    transactions: Iterable[TransactionLike],
    limits: Sequence[BudgetLimit],
    today: Union[date, datetime],
    category: Optional[str] = None,
) -> List[SpendingWarning]:
    """Month-to-date spend at or past the warning threshold, and today's spend
    at or past the daily limit, per limit."""
    today = as_day(today)
    if category is not None:
        limits = [limit for limit in limits if limit.category == category]
    if not limits:
        return []

    frame = transactions_frame(transactions)
    monthly = category_totals(window_rows(frame, today.replace(day=1), today))
    daily = category_totals(window_rows(frame, today, today))

    warnings = []
    for limit in limits:
        spent_month = monthly.get(limit.category, 0.0)
        if limit.monthly_limit:
            percentage = spent_month / limit.monthly_limit * 100
            if percentage >= limit.threshold:
                warnings.append(SpendingWarning(
                    category=limit.category,
                    kind="monthly",
                    limit=limit.monthly_limit,
                    spent=spent_month,
                    percentage=percentage,
                    remaining=limit.monthly_limit - spent_month,
                ))

        spent_today = daily.get(limit.category, 0.0)
        if limit.daily_limit and spent_today >= limit.daily_limit:
            warnings.append(SpendingWarning(
                category=limit.category,
                kind="daily",
                limit=limit.daily_limit,
                spent=spent_today,
                percentage=spent_today / limit.daily_limit * 100,
                remaining=limit.daily_limit - spent_today,
            ))
    return warnings


def comparison_frame(rows: Sequence[ComparisonRow]) -> pd.DataFrame:
    """Comparison rows as a display table."""
    if not rows:
        return pd.DataFrame(columns=COMPARISON_COLUMNS)
    df = pd.DataFrame([asdict(r) for r in rows])
    df = df.rename(columns={
        'category': 'Category',
        'spending': 'Spending',
        'budget': 'Budget',
        'warning_threshold': 'Warning At',
        'percentage_label': 'Used',
        'status': 'Status',
    })
    return df[COMPARISON_COLUMNS]
