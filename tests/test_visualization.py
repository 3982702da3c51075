from datetime import date

import pandas as pd

from finance_tracker import visualization as viz
from finance_tracker.budget_comparison import sample_comparison
from finance_tracker.models import BudgetLimit, ReportPeriod
from finance_tracker.reporting import aggregate
from finance_tracker.savings_pacing import pace_goals

LIMITS = [BudgetLimit(category='Food', monthly_limit=400000, daily_limit=10000, warning_threshold=50)]


def test_empty_inputs_give_placeholder_figures():
    for fig in (
        viz.create_period_overview_chart(pd.DataFrame(columns=viz.SERIES_COLUMNS)),
        viz.create_category_doughnut(pd.Series(dtype=float)),
        viz.create_budget_comparison_chart([]),
        viz.create_planned_vs_actual_chart([]),
        viz.create_goal_progress_chart(pace_goals([], date(2024, 1, 1))),
        viz.create_daily_stats_chart([]),
    ):
        assert fig.layout.title.text == "No data to display"


def test_budget_line_per_period():
    assert viz.period_budget_line(ReportPeriod.WEEKLY, LIMITS) == 10000
    assert viz.period_budget_line(ReportPeriod.MONTHLY, LIMITS) == 100000
    assert viz.period_budget_line(ReportPeriod.YEARLY, LIMITS) == 400000


def test_period_chart_series():
    report = aggregate(
        [{'date': '2024-03-14', 'amount': -3000, 'category': 'Food'}],
        ReportPeriod.WEEKLY,
        date(2024, 3, 15),
    )
    series = viz.period_chart_series(report, LIMITS)
    assert list(series.columns) == viz.SERIES_COLUMNS
    assert len(series) == 7
    assert series['Budget Limit'].tolist() == [10000] * 7
    assert series['Warning Threshold'].tolist() == [5000] * 7
    assert series['Expenses'].sum() == 3000

    fig = viz.create_period_overview_chart(series, title='Weekly')
    assert [trace.name for trace in fig.data] == [
        'Income', 'Expenses', 'Budget Limit', 'Warning Threshold', 'Expense Trend',
    ]


def test_category_chart_data_groups_small_categories():
    totals = {'A': 60.0, 'B': 50.0, 'C': 40.0, 'D': 30.0, 'E': 20.0, 'F': 5.0, 'G': 5.0}
    data = viz.category_chart_data(totals)
    assert data.index.tolist() == ['A', 'B', 'C', 'D', 'E', 'Other']
    assert data['Other'] == 10.0
    assert viz.category_chart_data({'A': 1.0}).index.tolist() == ['A']


def test_comparison_chart_uses_status_colours():
    fig = viz.create_budget_comparison_chart(sample_comparison())
    bar = fig.data[0]
    assert list(bar.text) == ['75.0%', '80.0%', '90.0%', '75.0%']
    assert bar.marker.color[2] == viz.STATUS_COLORS['near']
