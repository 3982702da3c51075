"""Shopping-list budget plans.

Checking an item off records the purchase as an expense transaction in
the same store transaction as the item update.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from . import transactions
from .config import DEFAULT_CATEGORY
from .db import BUDGET_PLANS, RecordStore, require_owner
from .errors import NotFoundError
from .models import BudgetPlan, PlanItem, now_millis
from .validation import optional_text, require_positive, require_text

logger = logging.getLogger(__name__)

_UNSET: Any = object()

ItemInput = Union[PlanItem, Mapping[str, Any]]


@dataclass
class PlanStats:
    total_planned: float
    total_spent: float
    remaining: float
    completed_count: int
    total_count: int
    progress: int


def _clean_item(raw: ItemInput) -> PlanItem:
    data = raw.to_record() if isinstance(raw, PlanItem) else dict(raw)
    return PlanItem(
        id=str(data.get("id") or uuid.uuid4().hex),
        name=require_text(data.get("name"), "Item name"),
        price=require_positive(data.get("price"), "Item price"),
        quantity=require_positive(data.get("quantity", 1), "Item quantity"),
        category=optional_text(data.get("category")) or DEFAULT_CATEGORY,
        completed=bool(data.get("completed", False)),
    )


def _clean_items(items: Optional[Iterable[ItemInput]]) -> List[PlanItem]:
    return [_clean_item(item) for item in items or []]


def list_plans(store: RecordStore, owner: str) -> List[BudgetPlan]:
    """Owner's plans, newest first."""
    require_owner(owner)
    records = store.query(BUDGET_PLANS, owner, order_by="createdAt", descending=True)
    return [BudgetPlan.from_record(r) for r in records]


def get_by_id(store: RecordStore, owner: str, plan_id: str) -> BudgetPlan:
    return BudgetPlan.from_record(store.get_owned(BUDGET_PLANS, plan_id, owner))


def create(
    store: RecordStore,
    owner: str,
    title: str,
    total_budget: float,
    items: Optional[Iterable[ItemInput]] = None,
) -> BudgetPlan:
    require_owner(owner)
    plan = BudgetPlan(
        owner=owner,
        title=require_text(title, "Title"),
        total_budget=require_positive(total_budget, "Total budget"),
        items=_clean_items(items),
    )
    record = plan.to_record()
    record["createdAt"] = now_millis()
    plan_id = store.insert(BUDGET_PLANS, record)
    logger.info("Created budget plan %s for %s", plan_id, owner)
    return BudgetPlan.from_record({**record, "id": plan_id})


def update(
    store: RecordStore,
    owner: str,
    plan_id: str,
    title: Any = _UNSET,
    total_budget: Any = _UNSET,
    items: Any = _UNSET,
    completed: Any = _UNSET,
) -> BudgetPlan:
    record = store.get_owned(BUDGET_PLANS, plan_id, owner)

    updates: Dict[str, Any] = {}
    if title is not _UNSET:
        updates["title"] = require_text(title, "Title")
    if total_budget is not _UNSET:
        updates["totalBudget"] = require_positive(total_budget, "Total budget")
    if items is not _UNSET:
        updates["items"] = [item.to_record() for item in _clean_items(items)]
    if completed is not _UNSET:
        updates["completed"] = bool(completed)

    if updates:
        store.patch(BUDGET_PLANS, plan_id, updates)
        logger.info("Updated budget plan %s for %s", plan_id, owner)
    return BudgetPlan.from_record({**record, **updates})


def add_item(
    store: RecordStore,
    owner: str,
    plan_id: str,
    name: str,
    price: float,
    quantity: float = 1,
    category: Optional[str] = None,
) -> BudgetPlan:
    plan = get_by_id(store, owner, plan_id)
    item = _clean_item({"name": name, "price": price, "quantity": quantity, "category": category})
    return update(store, owner, plan_id, items=plan.items + [item])


def remove_item(store: RecordStore, owner: str, plan_id: str, item_id: str) -> BudgetPlan:
    plan = get_by_id(store, owner, plan_id)
    if plan.find_item(item_id) is None:
        raise NotFoundError(f"Item {item_id} not found in plan {plan_id}")
    return update(store, owner, plan_id, items=[i for i in plan.items if i.id != item_id])


def delete_plan(store: RecordStore, owner: str, plan_id: str) -> bool:
    store.get_owned(BUDGET_PLANS, plan_id, owner)
    store.delete(BUDGET_PLANS, plan_id)
    logger.info("Deleted budget plan %s for %s", plan_id, owner)
    return True


def mark_item_completed(
    store: RecordStore,
    owner: str,
    plan_id: str,
    item_id: str,
    completed: bool,
    today: Optional[date] = None,
) -> BudgetPlan:
    """Set an item's completed flag.

    A false -> true transition inserts one expense of ``price * quantity``
    in the item's category. Marking an already completed item again, or
    un-marking, writes no transaction.
    """
    completed = bool(completed)
    with store.transaction() as conn:
        plan = BudgetPlan.from_record(store.get_owned(BUDGET_PLANS, plan_id, owner, conn=conn))
        item = plan.find_item(item_id)
        if item is None:
            raise NotFoundError(f"Item {item_id} not found in plan {plan_id}")

        updated = plan.with_item(item_id, completed=completed)
        store.patch(
            BUDGET_PLANS,
            plan_id,
            {"items": [i.to_record() for i in updated.items]},
            conn=conn,
        )
        if completed and not item.completed:
            transactions.create(
                store,
                owner,
                description=f"{item.name} (from shopping list)",
                amount=-item.total,
                category=item.category,
                date_value=today or date.today(),
                notes=f"Purchased from {plan.title} shopping list",
                conn=conn,
            )
    logger.info("Marked item %s of plan %s completed=%s", item_id, plan_id, completed)
    return updated


def toggle_item(
    store: RecordStore,
    owner: str,
    plan_id: str,
    item_id: str,
    today: Optional[date] = None,
) -> BudgetPlan:
    plan = get_by_id(store, owner, plan_id)
    item = plan.find_item(item_id)
    if item is None:
        raise NotFoundError(f"Item {item_id} not found in plan {plan_id}")
    return mark_item_completed(store, owner, plan_id, item_id, not item.completed, today=today)


def complete_plan(store: RecordStore, owner: str, plan_id: str) -> BudgetPlan:
    return update(store, owner, plan_id, completed=True)


def plan_stats(plan: Optional[BudgetPlan]) -> PlanStats:
    if plan is None:
        return PlanStats(0.0, 0.0, 0.0, 0, 0, 0)
    total_planned = sum(item.total for item in plan.items)
    done = [item for item in plan.items if item.completed]
    total_spent = sum(item.total for item in done)
    total_count = len(plan.items)
    progress = int((len(done) / total_count) * 100 + 0.5) if total_count else 0
    return PlanStats(
        total_planned=total_planned,
        total_spent=total_spent,
        remaining=plan.total_budget - total_spent,
        completed_count=len(done),
        total_count=total_count,
        progress=progress,
    )


def grouped_items(plan: BudgetPlan) -> Dict[str, List[PlanItem]]:
    """Items grouped by category, first-seen category order."""
    groups: Dict[str, List[PlanItem]] = {}
    for item in plan.items:
        groups.setdefault(item.category, []).append(item)
    return groups
