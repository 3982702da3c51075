"""Budget limit handlers.

One limit per (owner, category). ``create`` refuses duplicates; use
``update`` to change an existing limit.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, List, Optional

from .budget_comparison import SpendingWarning
from .budget_comparison import check_spending_warnings as _check_spending_warnings
from .config import DEFAULT_WARNING_THRESHOLD
from .db import BUDGET_LIMITS, TRANSACTIONS, RecordStore, require_owner
from .errors import DuplicateRecordError
from .models import BudgetLimit, Transaction, now_millis
from .validation import optional_positive, require_positive, require_text, require_threshold

logger = logging.getLogger(__name__)

_UNSET: Any = object()


def list_limits(store: RecordStore, owner: str) -> List[BudgetLimit]:
    require_owner(owner)
    return [BudgetLimit.from_record(r) for r in store.query(BUDGET_LIMITS, owner)]


def get_by_category(store: RecordStore, owner: str, category: str) -> Optional[BudgetLimit]:
    require_owner(owner)
    records = store.query(BUDGET_LIMITS, owner, limit=1, category=category)
    return BudgetLimit.from_record(records[0]) if records else None


def create(
    store: RecordStore,
    owner: str,
    category: str,
    monthly_limit: float,
    daily_limit: Optional[float] = None,
    warning_threshold: Optional[float] = None,
) -> BudgetLimit:
    require_owner(owner)
    category = require_text(category, "Category")
    limit = BudgetLimit(
        owner=owner,
        category=category,
        monthly_limit=require_positive(monthly_limit, "Monthly limit"),
        daily_limit=optional_positive(daily_limit, "Daily limit"),
        warning_threshold=(
            require_threshold(warning_threshold)
            if warning_threshold is not None
            else DEFAULT_WARNING_THRESHOLD
        ),
    )

    if get_by_category(store, owner, category) is not None:
        raise DuplicateRecordError(f"Budget limit for {category} already exists. Use update instead.")

    record = limit.to_record()
    stamp = now_millis()
    record.update(createdAt=stamp, updatedAt=stamp)
    limit_id = store.insert(BUDGET_LIMITS, record)
    logger.info("Created budget limit %s (%s) for %s", limit_id, category, owner)
    return BudgetLimit.from_record({**record, "id": limit_id})


def update(
    store: RecordStore,
    owner: str,
    limit_id: str,
    monthly_limit: Any = _UNSET,
    daily_limit: Any = _UNSET,
    warning_threshold: Any = _UNSET,
) -> BudgetLimit:
    """Patch only the fields that were passed; always bumps ``updatedAt``.

    Passing ``daily_limit=None`` clears the daily limit.
    """
    record = store.get_owned(BUDGET_LIMITS, limit_id, owner)

    updates = {"updatedAt": now_millis()}
    if monthly_limit is not _UNSET:
        updates["monthlyLimit"] = require_positive(monthly_limit, "Monthly limit")
    if daily_limit is not _UNSET:
        updates["dailyLimit"] = optional_positive(daily_limit, "Daily limit")
    if warning_threshold is not _UNSET:
        updates["warningThreshold"] = require_threshold(warning_threshold)

    store.patch(BUDGET_LIMITS, limit_id, updates)
    logger.info("Updated budget limit %s for %s", limit_id, owner)
    return BudgetLimit.from_record({**record, **updates})


def remove(store: RecordStore, owner: str, limit_id: str) -> str:
    store.get_owned(BUDGET_LIMITS, limit_id, owner)
    store.delete(BUDGET_LIMITS, limit_id)
    logger.info("Deleted budget limit %s for %s", limit_id, owner)
    return limit_id


def check_spending_warnings(
    store: RecordStore,
    owner: str,
    category: Optional[str] = None,
    today: Optional[date] = None,
) -> List[SpendingWarning]:
    """Month-to-date and today's spend checked against the owner's limits."""
    require_owner(owner)
    today = today or date.today()
    if category is not None:
        limit = get_by_category(store, owner, category)
        limits = [limit] if limit else []
    else:
        limits = list_limits(store, owner)
    if not limits:
        return []

    month_start = today.replace(day=1).isoformat()
    transactions = [
        Transaction.from_record(r)
        for r in store.query(TRANSACTIONS, owner)
        if (r.get("date") or "") >= month_start
    ]
    return _check_spending_warnings(transactions, limits, today)
