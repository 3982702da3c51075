#!/usr/bin/env python3
"""Print a weekly, monthly or yearly report for one owner."""

from __future__ import annotations

import argparse
import sys
from datetime import date
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from finance_tracker import budget_limits, transactions
from finance_tracker.budget_comparison import compare_to_budget, comparison_frame
from finance_tracker.config import DEFAULT_OWNER, configure_logging
from finance_tracker.db import RecordStore
from finance_tracker.formatting import format_currency, format_percentage
from finance_tracker.models import ReportPeriod
from finance_tracker.reporting import aggregate


def main(owner: str, period: str, db_path: str | None = None) -> None:
    store = RecordStore(Path(db_path) if db_path else None)
    items = transactions.list_transactions(store, owner)
    limits = budget_limits.list_limits(store, owner)
    report = aggregate(items, period, date.today(), limits)

    heading = f"{report.period.title()} report for {owner}"
    if report.is_sample:
        heading += " (sample data, no transactions recorded)"
    print(heading)
    print(f"Window: {report.window_start} to {report.window_end}")
    print(f"Income:       {format_currency(report.income)}")
    print(f"Expenses:     {format_currency(report.expenses)}")
    print(f"Net:          {format_currency(report.net_balance)}")
    print(f"Savings rate: {format_percentage(report.savings_rate)}")
    print(f"Avg / day:    {format_currency(report.avg_daily_expense)}")

    if report.top_categories:
        print("\nTop categories:")
        for share in report.top_categories:
            print(f"  {share.category}: {format_currency(share.amount)} ({share.percentage}%)")

    rows = compare_to_budget(report.category_totals, limits, report.period)
    if rows:
        print("\nBudget comparison:")
        print(comparison_frame(rows).to_string(index=False))

    if report.tips:
        print("\nTips:")
        for tip in report.tips:
            print(f"  - {tip}")
    if report.warnings:
        print("\nWarnings:")
        for warning in report.warnings:
            print(f"  ! {warning}")


if __name__ == '__main__':
    parser = argparse.ArgumentParser(description='Print a spending report.')
    parser.add_argument('--owner', default=DEFAULT_OWNER, help='User id whose records to report on')
    parser.add_argument('--period', default=ReportPeriod.MONTHLY, choices=ReportPeriod.ALL)
    parser.add_argument('--db', default=None, help='Path to the SQLite database')
    parser.add_argument('--log-level', default=None, help='Logging level, e.g. DEBUG')
    args = parser.parse_args()
    configure_logging(args.log_level)
    main(owner=args.owner, period=args.period, db_path=args.db)
