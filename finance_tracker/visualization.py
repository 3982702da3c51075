"""Plotly visualisation helpers for the finance tracker.

The ``*_series`` / ``*_data`` functions turn engine output into small
DataFrames or Series, which keeps them testable without rendering. The
``create_*`` functions wrap those in interactive Plotly figures for
``st.plotly_chart``. Every figure helper returns an empty figure titled
"No data to display" when there is nothing to plot.
"""

from __future__ import annotations

from typing import Mapping, Sequence

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from .budget_comparison import (
    STATUS_NEAR,
    STATUS_OK,
    STATUS_OVER,
    ComparisonRow,
    PlannedVsActualRow,
    average_warning_threshold,
    daily_budget_total,
    monthly_budget_total,
)
from .config import CURRENCY_LABEL
from .models import BudgetLimit, ReportPeriod
from .reporting import PeriodBucket, PeriodReport

INCOME_COLOR = "rgba(16, 185, 129, 1)"
EXPENSE_COLOR = "rgba(239, 68, 68, 1)"
BUDGET_COLOR = "rgba(59, 130, 246, 1)"
WARNING_COLOR = "rgba(245, 158, 11, 1)"
TREND_COLOR = "rgba(139, 92, 246, 1)"

STATUS_COLORS = {
    STATUS_OVER: "rgba(239, 68, 68, 0.7)",
    STATUS_NEAR: "rgba(245, 158, 11, 0.7)",
    STATUS_OK: "rgba(16, 185, 129, 0.7)",
}

SERIES_COLUMNS = ["Label", "Income", "Expenses", "Budget Limit", "Warning Threshold", "Expense Trend"]


def _empty_figure() -> go.Figure:
    fig = go.Figure()
    fig.update_layout(title="No data to display")
    return fig


def period_budget_line(period: str, budget_limits: Sequence[BudgetLimit]) -> float:
    """Budget per sub-bucket: daily total (weekly), a quarter month (monthly), a month (yearly)."""
    if period == ReportPeriod.WEEKLY:
        return daily_budget_total(budget_limits)
    if period == ReportPeriod.MONTHLY:
        return monthly_budget_total(budget_limits) / 4
    return monthly_budget_total(budget_limits)


def period_chart_series(report: PeriodReport, budget_limits: Sequence[BudgetLimit] = ()) -> pd.DataFrame:
    """Per-bucket income, expenses, budget and warning lines, and the trend.

    Parameters
    ----------
    report : PeriodReport
        Output of :func:`finance_tracker.reporting.aggregate`.
    budget_limits : sequence of BudgetLimit
        Limits used for the flat budget and warning lines.

    Returns
    -------
    pandas.DataFrame
        One row per breakdown bucket with the columns in ``SERIES_COLUMNS``.
    """
    if not report.breakdown:
        return pd.DataFrame(columns=SERIES_COLUMNS)
    budget = period_budget_line(report.period, budget_limits)
    warning = budget * average_warning_threshold(budget_limits) / 100
    return pd.DataFrame({
        "Label": [b.label for b in report.breakdown],
        "Income": [b.income for b in report.breakdown],
        "Expenses": [b.expenses for b in report.breakdown],
        "Budget Limit": [budget] * len(report.breakdown),
        "Warning Threshold": [warning] * len(report.breakdown),
        "Expense Trend": list(report.trend),
    }, columns=SERIES_COLUMNS)


def category_chart_data(category_totals: Mapping[str, float], top_n: int = 5) -> pd.Series:
    """Largest ``top_n`` categories plus an ``Other`` slice for the rest."""
    if not category_totals:
        return pd.Series(dtype=float, name="Amount")
    ordered = sorted(category_totals.items(), key=lambda kv: (-kv[1], kv[0]))
    top = ordered[:top_n]
    other = sum(amount for _, amount in ordered[top_n:])
    data = dict(top)
    if other > 0:
        data["Other"] = other
    series = pd.Series(data, name="Amount", dtype=float)
    series.index.name = "Category"
    return series


def create_period_overview_chart(series: pd.DataFrame, title: str | None = None) -> go.Figure:
    """Income/expense bars with budget, warning and trend lines.

    Parameters
    ----------
    series : pandas.DataFrame
        Output of :func:`period_chart_series`.
    title : str, optional
        Chart title.

    Returns
    -------
    plotly.graph_objects.Figure
        Combined bar and line chart.
    """
    if series.empty:
        return _empty_figure()
    fig = go.Figure()
    fig.add_bar(x=series["Label"], y=series["Income"], name="Income", marker_color=INCOME_COLOR)
    fig.add_bar(x=series["Label"], y=series["Expenses"], name="Expenses", marker_color=EXPENSE_COLOR)
    if series["Budget Limit"].max() > 0:
        fig.add_scatter(
            x=series["Label"], y=series["Budget Limit"], name="Budget Limit",
            mode="lines", line=dict(color=BUDGET_COLOR, dash="dash"),
        )
        fig.add_scatter(
            x=series["Label"], y=series["Warning Threshold"], name="Warning Threshold",
            mode="lines", line=dict(color=WARNING_COLOR, dash="dot"),
        )
    fig.add_scatter(
        x=series["Label"], y=series["Expense Trend"], name="Expense Trend",
        mode="lines", line=dict(color=TREND_COLOR, dash="dashdot"),
    )
    fig.update_layout(
        title=title or "Income vs expenses",
        barmode="group",
        xaxis_title="Period",
        yaxis_title=f"Amount ({CURRENCY_LABEL})",
    )
    return fig


def create_category_doughnut(series: pd.Series, title: str | None = None) -> go.Figure:
    """Doughnut chart of expenses by category."""
    if series.empty:
        return _empty_figure()
    df = series.reset_index()
    df.columns = ["Category", "Amount"]
    fig = px.pie(df, names="Category", values="Amount", hole=0.5)
    fig.update_layout(title=title or "Expenses by category")
    return fig


def create_budget_comparison_chart(rows: Sequence[ComparisonRow], title: str | None = None) -> go.Figure:
    """Spending bars coloured by status, with budget and warning markers.

    Parameters
    ----------
    rows : sequence of ComparisonRow
        Output of :func:`finance_tracker.budget_comparison.compare_to_budget`.
    title : str, optional
        Chart title.

    Returns
    -------
    plotly.graph_objects.Figure
        Bar chart with budget/warning scatter overlays.
    """
    if not rows:
        return _empty_figure()
    categories = [r.category for r in rows]
    fig = go.Figure()
    fig.add_bar(
        x=categories,
        y=[r.spending for r in rows],
        name="Spending",
        marker_color=[STATUS_COLORS.get(r.status, STATUS_COLORS[STATUS_OK]) for r in rows],
        text=[r.percentage_label for r in rows],
        textposition="outside",
    )
    fig.add_scatter(
        x=categories, y=[r.budget for r in rows], name="Budget",
        mode="markers", marker=dict(color=BUDGET_COLOR, symbol="line-ew-open", size=30),
    )
    fig.add_scatter(
        x=categories, y=[r.warning_threshold for r in rows], name="Warning",
        mode="markers", marker=dict(color=WARNING_COLOR, symbol="line-ew-open", size=30),
    )
    fig.update_layout(
        title=title or "Spending vs budget",
        xaxis_title="Category",
        yaxis_title=f"Amount ({CURRENCY_LABEL})",
    )
    return fig


def create_planned_vs_actual_chart(rows: Sequence[PlannedVsActualRow], title: str | None = None) -> go.Figure:
    if not rows:
        return _empty_figure()
    df = pd.DataFrame({
        "Category": [r.category for r in rows],
        "Planned": [r.planned for r in rows],
        "Actual": [r.actual for r in rows],
    })
    fig = px.bar(df, x="Category", y=["Planned", "Actual"], barmode="group")
    fig.update_layout(title=title or "Planned vs actual", yaxis_title=f"Amount ({CURRENCY_LABEL})")
    return fig


def create_goal_progress_chart(pacing: pd.DataFrame, title: str | None = None) -> go.Figure:
    """Horizontal bars of actual vs expected progress per goal.

    Parameters
    ----------
    pacing : pandas.DataFrame
        Output of :func:`finance_tracker.savings_pacing.pace_goals`.
    title : str, optional
        Chart title.

    Returns
    -------
    plotly.graph_objects.Figure
        Grouped horizontal bar chart.
    """
    if pacing.empty:
        return _empty_figure()
    fig = go.Figure()
    fig.add_bar(
        y=pacing["Goal"], x=pacing["Progress %"], name="Progress",
        orientation="h", marker_color=INCOME_COLOR,
    )
    fig.add_bar(
        y=pacing["Goal"], x=pacing["Expected %"], name="Expected",
        orientation="h", marker_color=BUDGET_COLOR,
    )
    fig.update_layout(title=title or "Savings goal progress", barmode="group", xaxis_title="%")
    return fig


def create_daily_stats_chart(daily_stats: Sequence[PeriodBucket], title: str | None = None) -> go.Figure:
    """Last seven days of income and expenses for the dashboard."""
    if not daily_stats:
        return _empty_figure()
    df = pd.DataFrame({
        "Day": [b.label for b in daily_stats],
        "Income": [b.income for b in daily_stats],
        "Expenses": [b.expenses for b in daily_stats],
    })
    fig = px.line(df, x="Day", y=["Income", "Expenses"], markers=True)
    fig.update_layout(title=title or "Last 7 days", yaxis_title=f"Amount ({CURRENCY_LABEL})")
    return fig
