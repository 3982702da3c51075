"""Shared sidebar components for the multi-page app.

Every page calls :func:`render_shared_sidebar` to pick the signed-in
owner and load a fresh snapshot of that owner's records. Pages then
re-run the pure report functions over the snapshot.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import streamlit as st

from . import budget_limits, budget_plans, savings_goals, transactions
from .config import DEFAULT_OWNER, configure_logging
from .db import RecordStore, get_store
from .errors import AuthorizationError, FinanceTrackerError, NotFoundError, ValidationError
from .models import ReportPeriod

PERIOD_LABELS = {
    ReportPeriod.WEEKLY: "Weekly",
    ReportPeriod.MONTHLY: "Monthly",
    ReportPeriod.YEARLY: "Yearly",
}


def load_snapshot(store: RecordStore, owner: str) -> Dict[str, Any]:
    """Fetch everything the pages read for one owner."""
    return {
        'transactions': transactions.list_transactions(store, owner),
        'budget_limits': budget_limits.list_limits(store, owner),
        'goals': savings_goals.list_goals(store, owner),
        'plans': budget_plans.list_plans(store, owner),
    }


def render_shared_sidebar(store: Optional[RecordStore] = None) -> Dict[str, Any]:
    """Render shared sidebar elements available on all pages.

    Returns:
        Dict with keys: 'store', 'owner', 'transactions', 'budget_limits',
        'goals', 'plans'
    """
    configure_logging()
    store = store or get_store()

    st.sidebar.title("💰 Finance Tracker")
    if 'owner' not in st.session_state:
        st.session_state.owner = DEFAULT_OWNER
    owner = st.sidebar.text_input(
        "Signed in as",
        value=st.session_state.owner,
        help="Records are scoped to this user id",
    ).strip()
    st.session_state.owner = owner

    snapshot: Dict[str, Any] = {'transactions': [], 'budget_limits': [], 'goals': [], 'plans': []}
    if not owner:
        st.sidebar.warning("Enter a user id to load your data.")
    else:
        try:
            snapshot = load_snapshot(store, owner)
        except FinanceTrackerError as exc:
            show_error(exc)

    st.sidebar.caption(
        f"{len(snapshot['transactions'])} transactions · "
        f"{len(snapshot['budget_limits'])} limits · "
        f"{len(snapshot['goals'])} goals"
    )
    return {'store': store, 'owner': owner, **snapshot}


def render_period_selector(key: str = 'report_period', default: str = ReportPeriod.MONTHLY) -> str:
    options = list(ReportPeriod.ALL)
    return st.radio(
        "Report period",
        options=options,
        index=options.index(default),
        format_func=lambda p: PERIOD_LABELS[p],
        horizontal=True,
        key=key,
    )


def error_message(exc: Exception) -> str:
    if isinstance(exc, AuthorizationError):
        return "You are not allowed to change that record."
    if isinstance(exc, NotFoundError):
        return f"Record not found: {exc}"
    if isinstance(exc, ValidationError):
        return str(exc)
    return f"Could not save your change: {exc}"


def show_error(exc: Exception) -> None:
    st.error(error_message(exc))
