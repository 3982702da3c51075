"""Savings goal handlers, including transfers out of earnings."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, List, Optional

from . import transactions
from .config import SAVINGS_CATEGORY
from .db import SAVINGS_GOALS, RecordStore, require_owner
from .models import SavingsGoal, now_millis
from .validation import (
    optional_iso_date,
    optional_text,
    require_non_negative,
    require_positive,
    require_text,
)

logger = logging.getLogger(__name__)

_UNSET: Any = object()


def list_goals(store: RecordStore, owner: str) -> List[SavingsGoal]:
    """Owner's goals, newest first."""
    require_owner(owner)
    records = store.query(SAVINGS_GOALS, owner, order_by="createdAt", descending=True)
    return [SavingsGoal.from_record(r) for r in records]


def get_goal(store: RecordStore, owner: str, goal_id: str) -> SavingsGoal:
    return SavingsGoal.from_record(store.get_owned(SAVINGS_GOALS, goal_id, owner))


def create(
    store: RecordStore,
    owner: str,
    title: str,
    target_amount: float,
    current_amount: Optional[float] = 0.0,
    deadline: Optional[str] = None,
    notes: Optional[str] = None,
) -> SavingsGoal:
    require_owner(owner)
    goal = SavingsGoal(
        owner=owner,
        title=require_text(title, "Title"),
        target_amount=require_positive(target_amount, "Target amount"),
        current_amount=require_non_negative(current_amount or 0, "Current amount"),
        deadline=optional_iso_date(deadline, "Deadline"),
        notes=optional_text(notes),
    )
    record = goal.to_record()
    record["createdAt"] = now_millis()
    goal_id = store.insert(SAVINGS_GOALS, record)
    logger.info("Created savings goal %s for %s", goal_id, owner)
    return SavingsGoal.from_record({**record, "id": goal_id})


def update(
    store: RecordStore,
    owner: str,
    goal_id: str,
    title: Any = _UNSET,
    target_amount: Any = _UNSET,
    current_amount: Any = _UNSET,
    deadline: Any = _UNSET,
    notes: Any = _UNSET,
) -> SavingsGoal:
    record = store.get_owned(SAVINGS_GOALS, goal_id, owner)

    updates = {}
    if title is not _UNSET:
        updates["title"] = require_text(title, "Title")
    if target_amount is not _UNSET:
        updates["targetAmount"] = require_positive(target_amount, "Target amount")
    if current_amount is not _UNSET:
        updates["currentAmount"] = require_non_negative(current_amount, "Current amount")
    if deadline is not _UNSET:
        updates["deadline"] = optional_iso_date(deadline, "Deadline")
    if notes is not _UNSET:
        updates["notes"] = optional_text(notes)

    if updates:
        store.patch(SAVINGS_GOALS, goal_id, updates)
        logger.info("Updated savings goal %s for %s", goal_id, owner)
    return SavingsGoal.from_record({**record, **updates})


def add_funds(store: RecordStore, owner: str, goal_id: str, amount: float) -> SavingsGoal:
    amount = require_positive(amount, "Amount")
    record = store.get_owned(SAVINGS_GOALS, goal_id, owner)
    new_amount = (record.get("currentAmount") or 0.0) + amount
    store.patch(SAVINGS_GOALS, goal_id, {"currentAmount": new_amount})
    logger.info("Added %.2f to savings goal %s for %s", amount, goal_id, owner)
    return SavingsGoal.from_record({**record, "currentAmount": new_amount})


def remove(store: RecordStore, owner: str, goal_id: str) -> str:
    store.get_owned(SAVINGS_GOALS, goal_id, owner)
    store.delete(SAVINGS_GOALS, goal_id)
    logger.info("Deleted savings goal %s for %s", goal_id, owner)
    return goal_id


def transfer_from_earnings(
    store: RecordStore,
    owner: str,
    goal_id: str,
    amount: float,
    description: Optional[str] = None,
    today: Optional[date] = None,
) -> SavingsGoal:
    """Move ``amount`` into a goal and record it as a Savings expense.

    The goal update and the negative transaction commit together.
    """
    amount = require_positive(amount, "Amount")
    with store.transaction() as conn:
        record = store.get_owned(SAVINGS_GOALS, goal_id, owner, conn=conn)
        title = record.get("title") or ""
        new_amount = (record.get("currentAmount") or 0.0) + amount
        store.patch(SAVINGS_GOALS, goal_id, {"currentAmount": new_amount}, conn=conn)
        transactions.create(
            store,
            owner,
            description=optional_text(description) or f"Transfer to {title} savings goal",
            amount=-amount,
            category=SAVINGS_CATEGORY,
            date_value=today or date.today(),
            notes=f"Transfer to savings goal: {title}",
            conn=conn,
        )
    logger.info("Transferred %.2f from earnings to goal %s for %s", amount, goal_id, owner)
    return SavingsGoal.from_record({**record, "currentAmount": new_amount})
