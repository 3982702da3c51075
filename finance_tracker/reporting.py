"""Period reports over a snapshot of transactions.

This module turns a flat list of signed transactions into weekly, monthly
or yearly summaries: income, expenses, category shares, sub-period
breakdowns, a least-squares expense trend and the advisory messages from
:mod:`finance_tracker.advice`.

Reporting tolerates dirty rows. Unparsable dates are skipped, missing
categories become ``Uncategorized`` and non-numeric amounts count as zero.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Mapping, Sequence, Union

import numpy as np
import pandas as pd

from .advice import generate_budget_tips, generate_budget_warnings, generate_warning_messages
from .budget_comparison import average_warning_threshold, daily_budget_total, monthly_budget_total
from .formatting import round_half_up
from .models import BudgetLimit, ReportPeriod, normalize_period
from .periods import (
    BucketKey,
    TransactionLike,
    as_day,
    bucket_key,
    bucket_skeleton,
    category_totals,
    days_in_month,
    month_rows,
    period_window,
    totals,
    transactions_frame,
    window_rows,
)


SAMPLE_CATEGORIES = ["Food", "Transport", "Utilities", "Entertainment", "Shopping"]
SAMPLE_CATEGORY_SPLIT = [35, 25, 15, 15, 10]
SAMPLE_TOTALS = {
    ReportPeriod.WEEKLY: (450000.0, 220000.0),
    ReportPeriod.MONTHLY: (1800000.0, 1100000.0),
    ReportPeriod.YEARLY: (21600000.0, 14400000.0),
}


@dataclass(frozen=True)
class CategoryShare:
    category: str
    amount: float
    percentage: int


@dataclass(frozen=True)
class PeriodBucket:
    """One sub-period: a day (weekly), week of month (monthly) or month (yearly)."""

    key: BucketKey
    label: str
    income: float
    expenses: float


@dataclass
class PeriodReport:
    period: str
    window_start: date
    window_end: date
    income: float
    expenses: float
    net_balance: float
    savings_rate: float
    avg_daily_expense: float
    top_categories: List[CategoryShare] = field(default_factory=list)
    category_totals: Dict[str, float] = field(default_factory=dict)
    breakdown: List[PeriodBucket] = field(default_factory=list)
    trend: List[float] = field(default_factory=list)
    tips: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    is_sample: bool = False


@dataclass
class DashboardSummary:
    total_income: float
    total_expenses: float
    total_balance: float
    today_income: float
    today_expenses: float
    month_income: float
    month_expenses: float
    expenses_by_category: List[CategoryShare]
    daily_stats: List[PeriodBucket]
    daily_budget: float
    monthly_budget: float
    daily_progress: float
    monthly_progress: float
    warning_messages: List[str]


def category_breakdown(totals_by_category: Mapping[str, float]) -> List[CategoryShare]:
    """Categories by amount (descending, ties alphabetical) with rounded shares."""
    total = sum(totals_by_category.values())
    denominator = max(total, 1)
    ordered = sorted(totals_by_category.items(), key=lambda kv: (-kv[1], kv[0]))
    return [
        CategoryShare(category, amount, round_half_up(amount / denominator * 100))
        for category, amount in ordered
    ]


def calculate_trend_line(series: Sequence[float]) -> List[float]:
    """Ordinary least-squares fit over the bucket index.

    Returns the fitted value for every index; a single point is returned
    as-is and an empty series gives an empty list.
    """
    y = np.asarray(list(series), dtype=float)
    n = len(y)
    if n == 0:
        return []
    if n == 1:
        return [float(y[0])]

    x = np.arange(n, dtype=float)
    mean_x = x.mean()
    mean_y = y.mean()
    denominator = float(((x - mean_x) ** 2).sum())
    slope = float(((x - mean_x) * (y - mean_y)).sum()) / denominator if denominator != 0 else 0.0
    intercept = mean_y - slope * mean_x
    return [float(v) for v in slope * x + intercept]


def savings_rate(income: float, net_balance: float) -> float:
    return net_balance / income * 100 if income > 0 else 0.0


def average_daily_expense(period: str, expenses: float, now: Union[date, datetime]) -> float:
    period = normalize_period(period)
    if period == ReportPeriod.WEEKLY:
        return expenses / 7
    if period == ReportPeriod.MONTHLY:
        return expenses / days_in_month(as_day(now))
    return expenses / 365


def period_breakdown(period: str, start: date, rows: pd.DataFrame) -> List[PeriodBucket]:
    """Income and expenses per sub-period; monthly lists only active weeks."""
    sums: Dict[BucketKey, tuple] = {}
    if not rows.empty:
        keys = rows['Date'].dt.date.map(lambda d: bucket_key(period, d))
        grouped = rows.assign(Bucket=keys.values).groupby('Bucket')['Amount']
        for key, amounts in grouped:
            sums[key] = (float(amounts[amounts > 0].sum()), float(-amounts[amounts < 0].sum()))

    buckets = []
    for key, label in bucket_skeleton(period, start):
        income, expenses = sums.get(key, (0.0, 0.0))
        if period == ReportPeriod.MONTHLY and income == 0 and expenses == 0:
            continue
        buckets.append(PeriodBucket(key, label, income, expenses))
    return buckets


def _sample_breakdown(period: str, start: date) -> List[PeriodBucket]:
    skeleton = bucket_skeleton(period, start)
    if period == ReportPeriod.WEEKLY:
        return [
            PeriodBucket(key, label, 50000.0 if i % 2 == 0 else 0.0, 30000.0 + i * 5000)
            for i, (key, label) in enumerate(skeleton)
        ]
    if period == ReportPeriod.MONTHLY:
        return [
            PeriodBucket(key, label, 450000.0 if key in (1, 3) else 0.0, 210000.0 + key * 20000)
            for key, label in skeleton
        ]
    return [
        PeriodBucket(key, label, 1800000.0 - key * 50000, 1200000.0 + key * 30000)
        for key, label in skeleton
    ]


def _build_report(
    period: str,
    now: Union[date, datetime],
    income: float,
    expenses: float,
    top_categories: List[CategoryShare],
    breakdown: List[PeriodBucket],
    budget_limits: Sequence[BudgetLimit],
    is_sample: bool,
) -> PeriodReport:
    start, end = period_window(period, now)
    net_balance = income - expenses
    rate = savings_rate(income, net_balance)
    return PeriodReport(
        period=period,
        window_start=start,
        window_end=end,
        income=income,
        expenses=expenses,
        net_balance=net_balance,
        savings_rate=rate,
        avg_daily_expense=average_daily_expense(period, expenses, now),
        top_categories=top_categories,
        category_totals={c.category: c.amount for c in top_categories},
        breakdown=breakdown,
        trend=calculate_trend_line([b.expenses for b in breakdown]),
        tips=generate_budget_tips(period, income, expenses, top_categories, budget_limits, rate),
        warnings=generate_budget_warnings(period, income, expenses, top_categories, net_balance),
        is_sample=is_sample,
    )


def sample_report(
    period: str,
    now: Union[date, datetime],
    budget_limits: Sequence[BudgetLimit] = (),
) -> PeriodReport:
    """Fixed placeholder report used when there are no transactions at all."""
    period = normalize_period(period)
    start, _ = period_window(period, now)
    income, expenses = SAMPLE_TOTALS[period]
    top_categories = [
        CategoryShare(category, expenses * share / 100, share)
        for category, share in zip(SAMPLE_CATEGORIES, SAMPLE_CATEGORY_SPLIT)
    ]
    return _build_report(
        period, now, income, expenses, top_categories,
        _sample_breakdown(period, start), list(budget_limits), is_sample=True,
    )


def aggregate(
    transactions: Iterable[TransactionLike],
    period: str,
    now: Union[date, datetime],
    budget_limits: Sequence[BudgetLimit] = (),
) -> PeriodReport:
    """Summarise ``transactions`` for the period window ending at ``now``.

    Args:
        transactions: Transaction objects or record mappings
        period: ``"weekly"``, ``"monthly"`` or ``"yearly"``
        now: Reference date; the window ends on this day inclusive
        budget_limits: Limits consulted by the advisory tips

    Returns:
        PeriodReport. An empty transaction list yields the sample report.
    """
    period = normalize_period(period)
    items = list(transactions)
    if not items:
        return sample_report(period, now, budget_limits)

    start, end = period_window(period, now)
    rows = window_rows(transactions_frame(items), start, end)
    income, expenses = totals(rows)

    return _build_report(
        period, now, income, expenses,
        category_breakdown(category_totals(rows)),
        period_breakdown(period, start, rows),
        list(budget_limits),
        is_sample=False,
    )


def dashboard_summary(
    transactions: Iterable[TransactionLike],
    budget_limits: Sequence[BudgetLimit],
    today: Union[date, datetime],
) -> DashboardSummary:
    """All-time, today and month-to-date figures for the home page."""
    today = as_day(today)
    df = transactions_frame(transactions)

    total_income, total_expenses = totals(df)
    today_income, today_expenses = totals(window_rows(df, today, today))
    this_month = month_rows(df, today)
    month_income, month_expenses = totals(this_month)

    week_start = today - timedelta(days=6)
    daily_stats = period_breakdown(ReportPeriod.WEEKLY, week_start, window_rows(df, week_start, today))

    daily_budget = daily_budget_total(budget_limits)
    monthly_budget = monthly_budget_total(budget_limits)
    threshold = average_warning_threshold(budget_limits)

    return DashboardSummary(
        total_income=total_income,
        total_expenses=total_expenses,
        total_balance=total_income - total_expenses,
        today_income=today_income,
        today_expenses=today_expenses,
        month_income=month_income,
        month_expenses=month_expenses,
        expenses_by_category=category_breakdown(category_totals(this_month)),
        daily_stats=daily_stats,
        daily_budget=daily_budget,
        monthly_budget=monthly_budget,
        daily_progress=min(100.0, today_expenses / daily_budget * 100) if daily_budget > 0 else 0.0,
        monthly_progress=min(100.0, month_expenses / monthly_budget * 100) if monthly_budget > 0 else 0.0,
        warning_messages=generate_warning_messages(
            today_expenses,
            month_expenses,
            daily_budget,
            monthly_budget,
            daily_budget * threshold / 100,
            monthly_budget * threshold / 100,
        ),
    )
