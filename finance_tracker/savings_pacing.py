"""Savings goal pacing: actual progress against an even contribution schedule."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, Union

import pandas as pd

from .config import DAYS_PER_MONTH
from .models import SavingsGoal
from .periods import as_day, parse_date

PACING_COLUMNS = [
    'Goal', 'Target', 'Saved', 'Progress %', 'Expected %',
    'On Track', 'Remaining', 'Monthly Needed', 'Days Left',
]


@dataclass(frozen=True)
class GoalPacing:
    progress_pct: float
    expected_progress_pct: float
    is_on_track: bool
    remaining_amount: float
    required_periodic_saving: float
    days_remaining: int


def pace_savings_goal(goal: SavingsGoal, today: Union[date, datetime]) -> GoalPacing:
    """Compare a goal's progress with where it should be today.

    ``required_periodic_saving`` is per month of 30.44 days. Dates are
    compared at day granularity.

    A goal without a usable deadline (or creation date) or with a
    non-positive target is reported as not on track with nothing
    required. A deadline on or before the creation day is on track only
    once the target has been reached.
    """
    today = as_day(today)
    target = goal.target_amount or 0.0
    current = goal.current_amount or 0.0
    progress = current / target * 100 if target > 0 else 0.0
    remaining = max(0.0, target - current)

    deadline = parse_date(goal.deadline)
    created = parse_date(goal.created_at)
    if deadline is None or created is None or target <= 0:
        return GoalPacing(progress, 0.0, False, remaining, 0.0, 0)

    if deadline <= created:
        done = current >= target
        return GoalPacing(progress, 100.0, done, remaining, 0.0, 0)

    total_days = (deadline - created).days
    elapsed_days = min(max((today - created).days, 0), total_days)
    days_remaining = max(0, (deadline - today).days)
    expected = elapsed_days / total_days * 100

    months_remaining = days_remaining / DAYS_PER_MONTH
    if months_remaining > 0:
        required = remaining / months_remaining
    else:
        required = remaining if remaining > 0 else 0.0

    return GoalPacing(
        progress_pct=progress,
        expected_progress_pct=expected,
        is_on_track=progress >= expected,
        remaining_amount=remaining,
        required_periodic_saving=required,
        days_remaining=days_remaining,
    )


def pace_goals(goals: Iterable[SavingsGoal], today: Union[date, datetime]) -> pd.DataFrame:
    """One pacing row per goal for the Savings and Reports pages."""
    rows = []
    for goal in goals:
        pacing = pace_savings_goal(goal, today)
        rows.append({
            'Goal': goal.title,
            'Target': goal.target_amount,
            'Saved': goal.current_amount,
            'Progress %': round(pacing.progress_pct, 1),
            'Expected %': round(pacing.expected_progress_pct, 1),
            'On Track': pacing.is_on_track,
            'Remaining': pacing.remaining_amount,
            'Monthly Needed': pacing.required_periodic_saving,
            'Days Left': pacing.days_remaining,
        })
    return pd.DataFrame(rows, columns=PACING_COLUMNS)
