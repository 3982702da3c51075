from datetime import date

import pytest

from finance_tracker.periods import period_window, transactions_frame, week_of_month
from finance_tracker.reporting import (
    SAMPLE_TOTALS,
    aggregate,
    calculate_trend_line,
    category_breakdown,
    dashboard_summary,
)
from finance_tracker.models import BudgetLimit, ReportPeriod, Transaction
from finance_tracker.errors import ValidationError


NOW = date(2024, 3, 15)


def _txn(day, amount, category='Food'):
    return {'date': day, 'amount': amount, 'category': category}


def test_weekly_income_expenses_and_savings_rate():
    report = aggregate(
        [_txn('2024-03-14', 100000, 'Income'), _txn('2024-03-13', -30000, 'Food')],
        ReportPeriod.WEEKLY,
        NOW,
    )

    assert not report.is_sample
    assert report.income == 100000
    assert report.expenses == 30000
    assert report.net_balance == 70000
    assert report.savings_rate == pytest.approx(70.0)
    assert report.avg_daily_expense == pytest.approx(30000 / 7)
    assert [c.category for c in report.top_categories] == ['Food']
    assert report.top_categories[0].percentage == 100


def test_weekly_window_is_last_seven_days_inclusive():
    start, end = period_window(ReportPeriod.WEEKLY, NOW)
    assert (start, end) == (date(2024, 3, 9), NOW)

    report = aggregate(
        [_txn('2024-03-08', -999), _txn('2024-03-09', -100), _txn('2024-03-16', -5000)],
        ReportPeriod.WEEKLY,
        NOW,
    )
    assert report.expenses == 100
    assert [b.label for b in report.breakdown] == ['Sat', 'Sun', 'Mon', 'Tue', 'Wed', 'Thu', 'Fri']


def test_breakdown_sums_match_totals():
    items = [
        _txn('2024-01-05', 200000, 'Income'),
        _txn('2024-02-11', -45000, 'Transport'),
        _txn('2024-03-02', -12000, 'Food'),
        _txn('2024-03-15', -3000, 'Food'),
    ]
    for period in ReportPeriod.ALL:
        report = aggregate(items, period, NOW)
        assert sum(b.expenses for b in report.breakdown) == pytest.approx(report.expenses)
        assert sum(b.income for b in report.breakdown) == pytest.approx(report.income)


def test_monthly_breakdown_lists_only_active_weeks():
    # March 2024 starts on a Friday
    report = aggregate(
        [_txn('2024-03-02', -1000), _txn('2024-03-10', -2000)],
        ReportPeriod.MONTHLY,
        date(2024, 3, 20),
    )
    assert [b.label for b in report.breakdown] == ['Week 1', 'Week 3']
    assert [b.expenses for b in report.breakdown] == [1000, 2000]


def test_yearly_breakdown_has_every_month():
    report = aggregate([_txn('2024-02-10', -500)], ReportPeriod.YEARLY, NOW)
    assert len(report.breakdown) == 12
    assert report.breakdown[0].label == 'Jan'
    assert report.breakdown[1].expenses == 500


def test_sixth_calendar_week_folds_into_fifth():
    # June 2024 starts on a Saturday
    assert week_of_month(date(2024, 6, 1)) == 1
    assert week_of_month(date(2024, 6, 2)) == 2
    assert week_of_month(date(2024, 6, 30)) == 5


def test_empty_transactions_give_sample_report():
    report = aggregate([], ReportPeriod.MONTHLY, NOW)
    assert report.is_sample
    assert (report.income, report.expenses) == SAMPLE_TOTALS[ReportPeriod.MONTHLY]
    assert report.top_categories[0].category == 'Food'
    assert report.top_categories[0].percentage == 35


def test_unknown_period_rejected():
    with pytest.raises(ValidationError):
        aggregate([], 'daily', NOW)


def test_dirty_rows_are_tolerated():
    df = transactions_frame([
        _txn('not-a-date', -100),
        _txn('2024-03-10', 0),
        _txn('2024-03-10', 'abc'),
        {'date': '2024-03-11', 'amount': -50, 'category': None},
        Transaction(description='Lunch', amount=-20, category='Food', date='2024-03-12'),
    ])
    assert len(df) == 2
    assert set(df['Category']) == {'Uncategorized', 'Food'}


def test_category_breakdown_orders_by_amount_then_name():
    shares = category_breakdown({'Transport': 100.0, 'Food': 300.0, 'Bills': 100.0})
    assert [s.category for s in shares] == ['Food', 'Bills', 'Transport']
    assert [s.percentage for s in shares] == [60, 20, 20]


def test_category_breakdown_rounds_halves_up():
    shares = category_breakdown({'A': 1.0, 'B': 7.0})
    # 12.5 -> 13, 87.5 -> 88
    assert [s.percentage for s in shares] == [88, 13]


def test_trend_line_fits_linear_data():
    assert calculate_trend_line([]) == []
    assert calculate_trend_line([5.0]) == [5.0]
    assert calculate_trend_line([0, 10, 20, 30]) == pytest.approx([0, 10, 20, 30])

    fitted = calculate_trend_line([3, 1, 4, 1, 5, 9, 2])
    slope = fitted[1] - fitted[0]
    assert all(b - a == pytest.approx(slope) for a, b in zip(fitted, fitted[1:]))
    assert sum(fitted) == pytest.approx(25)


def test_trend_of_flat_series_is_flat():
    assert calculate_trend_line([7, 7, 7]) == pytest.approx([7, 7, 7])


def test_aggregate_is_deterministic():
    items = [_txn('2024-03-10', -2000, 'Food'), _txn('2024-03-11', 5000, 'Income')]
    assert aggregate(items, ReportPeriod.MONTHLY, NOW) == aggregate(items, ReportPeriod.MONTHLY, NOW)


def test_dashboard_summary_today_and_month():
    today = date(2024, 3, 15)
    limits = [BudgetLimit(category='Food', monthly_limit=300000, daily_limit=10000)]
    summary = dashboard_summary(
        [
            _txn('2024-03-15', -12000, 'Food'),
            _txn('2024-03-01', 500000, 'Income'),
            _txn('2024-02-28', -7000, 'Transport'),
        ],
        limits,
        today,
    )

    assert summary.total_income == 500000
    assert summary.total_expenses == 19000
    assert summary.total_balance == 481000
    assert summary.today_expenses == 12000
    assert summary.month_expenses == 12000
    assert summary.daily_budget == 10000
    assert summary.daily_progress == 100.0
    assert summary.monthly_progress == pytest.approx(4.0)
    assert summary.warning_messages == ["You've exceeded your daily budget limit!"]
    assert len(summary.daily_stats) == 7
    assert [c.category for c in summary.expenses_by_category] == ['Food']


def test_top_categories_sum_to_expenses():
    report = aggregate(
        [
            _txn('2024-03-02', 500000, 'Income'),
            _txn('2024-03-03', -42000.5, 'Food'),
            _txn('2024-03-07', -18000, 'Transport'),
            _txn('2024-03-09', -7500.25, 'Food'),
            _txn('2024-03-12', -95000, 'Utilities'),
        ],
        ReportPeriod.MONTHLY,
        NOW,
    )

    assert len(report.top_categories) == 3
    assert sum(s.amount for s in report.top_categories) == pytest.approx(report.expenses)
