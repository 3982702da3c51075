"""Income recording with optional auto-save to a savings goal."""

from __future__ import annotations

import logging
import re
from collections import OrderedDict
from dataclasses import dataclass
from datetime import date
from typing import Dict, Iterable, List, Optional

from . import savings_goals, transactions
from .config import INCOME_CATEGORY
from .db import RecordStore
from .formatting import round_half_up
from .models import SavingsGoal, Transaction
from .periods import parse_date
from .validation import optional_text, require_number, require_positive, require_text

logger = logging.getLogger(__name__)

INCOME_SOURCES = ["Salary", "Freelance", "Business", "Investments", "Gifts", "Other"]

_SOURCE_PATTERN = re.compile(r"Source: ([^-]+)")


@dataclass
class IncomeResult:
    transaction: Transaction
    goal: Optional[SavingsGoal] = None
    saved_amount: float = 0.0


def build_notes(source: str, notes: Optional[str] = None) -> str:
    notes = optional_text(notes)
    return f"Source: {source}" + (f" - {notes}" if notes else "")


def source_of(txn: Transaction) -> str:
    match = _SOURCE_PATTERN.search(txn.notes or "")
    return match.group(1).strip() if match else "Unknown"


def record_income(
    store: RecordStore,
    owner: str,
    description: str,
    amount: float,
    source: str = "Salary",
    date_value: Optional[object] = None,
    notes: Optional[str] = None,
    savings_goal_id: Optional[str] = None,
    savings_percent: float = 0,
) -> IncomeResult:
    """Record a positive Income transaction.

    When ``savings_goal_id`` is given and ``savings_percent`` (clamped to
    0-100) is positive, that share of the amount is transferred to the goal.
    """
    description = require_text(description, "Description")
    amount = require_positive(amount, "Amount")
    percent = min(max(require_number(savings_percent or 0, "Savings percent"), 0.0), 100.0)

    txn = transactions.create(
        store,
        owner,
        description=description,
        amount=amount,
        category=INCOME_CATEGORY,
        date_value=date_value if date_value is not None else date.today(),
        notes=build_notes(require_text(source, "Income source"), notes),
    )
    result = IncomeResult(transaction=txn)

    if savings_goal_id and percent > 0:
        saved = amount * percent / 100
        result.goal = savings_goals.transfer_from_earnings(
            store,
            owner,
            savings_goal_id,
            saved,
            description=f"Auto-save from {description}",
        )
        result.saved_amount = saved
        logger.info("Auto-saved %.0f%% of income %s to goal %s", percent, txn.id, savings_goal_id)
    return result


def income_by_source(items: Iterable[Transaction]) -> List[Dict[str, object]]:
    """Income totals per source, largest first, with rounded shares."""
    incomes = [t for t in items if t.amount > 0]
    total = sum(t.amount for t in incomes)
    by_source: Dict[str, float] = {}
    for txn in incomes:
        key = source_of(txn)
        by_source[key] = by_source.get(key, 0.0) + txn.amount
    rows = [
        {
            "source": source,
            "amount": amount,
            "percentage": round_half_up(amount / total * 100) if total > 0 else 0,
        }
        for source, amount in by_source.items()
    ]
    return sorted(rows, key=lambda r: -r["amount"])


def income_by_month(items: Iterable[Transaction]) -> "OrderedDict[str, Dict[str, object]]":
    """Group income by ``Month YYYY``; newest month first, newest rows first."""
    groups: Dict[str, Dict[str, object]] = {}
    for txn in items:
        if txn.amount <= 0:
            continue
        day = parse_date(txn.date)
        if day is None:
            continue
        label = day.strftime("%B %Y")
        group = groups.setdefault(label, {"transactions": [], "total": 0.0, "latest": day})
        group["transactions"].append(txn)
        group["total"] += txn.amount
        group["latest"] = max(group["latest"], day)

    ordered = OrderedDict()
    for label, group in sorted(groups.items(), key=lambda kv: kv[1]["latest"], reverse=True):
        group["transactions"].sort(key=lambda t: t.date, reverse=True)
        ordered[label] = {"transactions": group["transactions"], "total": group["total"]}
    return ordered
