"""Main entry point for Streamlit multi-page app.

This file enables Streamlit's automatic page discovery and renders the
dashboard: today's and this month's figures, budget progress, warnings
and the last seven days. Pages in the pages/ directory appear in the
sidebar automatically.
"""

from __future__ import annotations

import sys
from datetime import date
from pathlib import Path

import streamlit as st

# Add project root to path for imports
project_root = Path(__file__).parent.parent.resolve()
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from finance_tracker import transactions as txn_handlers
from finance_tracker.formatting import format_currency
from finance_tracker.reporting import dashboard_summary
from finance_tracker.shared_sidebar import render_shared_sidebar, show_error
from finance_tracker.errors import FinanceTrackerError
from finance_tracker.visualization import create_daily_stats_chart


def _render_budget_progress(summary) -> None:
    st.subheader("Budget Progress")
    if summary.daily_budget <= 0 and summary.monthly_budget <= 0:
        st.info("Set budget limits on the Budgets page to track progress.")
        return
    col1, col2 = st.columns(2)
    with col1:
        st.caption(
            f"Today: {format_currency(summary.today_expenses)} of {format_currency(summary.daily_budget)}"
        )
        st.progress(summary.daily_progress / 100)
    with col2:
        st.caption(
            f"This month: {format_currency(summary.month_expenses)} of "
            f"{format_currency(summary.monthly_budget)}"
        )
        st.progress(summary.monthly_progress / 100)


def main() -> None:
    st.set_page_config(page_title="Finance Tracker", page_icon="💰", layout="wide")
    sidebar = render_shared_sidebar()

    st.title("💰 Dashboard")
    if not sidebar['owner']:
        return

    summary = dashboard_summary(sidebar['transactions'], sidebar['budget_limits'], date.today())

    for message in summary.warning_messages:
        st.warning(message)

    col1, col2, col3 = st.columns(3)
    col1.metric("Balance", format_currency(summary.total_balance))
    col2.metric("Total Income", format_currency(summary.total_income))
    col3.metric("Total Expenses", format_currency(summary.total_expenses))

    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Today's Income", format_currency(summary.today_income))
    col2.metric("Today's Expenses", format_currency(summary.today_expenses))
    col3.metric("Month Income", format_currency(summary.month_income))
    col4.metric("Month Expenses", format_currency(summary.month_expenses))

    _render_budget_progress(summary)

    st.plotly_chart(create_daily_stats_chart(summary.daily_stats), use_container_width=True)

    if summary.expenses_by_category:
        st.subheader("This Month by Category")
        for share in summary.expenses_by_category:
            st.write(f"**{share.category}**: {format_currency(share.amount)} ({share.percentage}%)")

    st.subheader("Recent Transactions")
    try:
        recent = txn_handlers.get_recent(sidebar['store'], sidebar['owner'])
    except FinanceTrackerError as exc:
        show_error(exc)
        return
    if not recent:
        st.info("No transactions yet. Add one on the Transactions page.")
    for txn in recent:
        st.write(f"{txn.date} · {txn.description} · {txn.category} · {format_currency(txn.amount)}")


if __name__ == "__main__":
    main()
