"""Record types for the four owned collections.

Attributes are snake_case; ``to_record``/``from_record`` translate to the
persisted field names (``monthlyLimit``, ``createdAt`` ...), which must not
change between releases.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

from .config import DEFAULT_CATEGORY, DEFAULT_WARNING_THRESHOLD
from .errors import ValidationError


class ReportPeriod:
    """Reporting period names accepted by the engine."""

    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"
    ALL = (WEEKLY, MONTHLY, YEARLY)


def normalize_period(value: str) -> str:
    period = str(value or "").strip().lower()
    if period not in ReportPeriod.ALL:
        raise ValidationError(f"Unknown report period: {value!r}")
    return period


def now_millis() -> int:
    return int(datetime.now().timestamp() * 1000)


def to_millis(value: Optional[datetime]) -> Optional[int]:
    if value is None:
        return None
    return int(value.timestamp() * 1000)


def from_millis(value: Any) -> Optional[datetime]:
    """Convert a stored epoch-milliseconds value to a local datetime."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    try:
        return datetime.fromtimestamp(float(value) / 1000)
    except (TypeError, ValueError, OverflowError, OSError):
        return None


@dataclass(frozen=True)
class Transaction:
    description: str
    amount: float
    category: str = DEFAULT_CATEGORY
    date: str = ""
    time: Optional[str] = None
    notes: Optional[str] = None
    owner: str = ""
    id: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def is_income(self) -> bool:
        return self.amount > 0

    @property
    def is_expense(self) -> bool:
        return self.amount < 0

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "owner": self.owner,
            "description": self.description,
            "amount": self.amount,
            "category": self.category,
            "date": self.date,
            "time": self.time,
            "notes": self.notes,
            "createdAt": to_millis(self.created_at),
        }

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Transaction":
        return cls(
            id=record.get("id"),
            owner=record.get("owner") or "",
            description=record.get("description") or "",
            amount=record.get("amount") if record.get("amount") is not None else 0.0,
            category=record.get("category") or DEFAULT_CATEGORY,
            date=record.get("date") or "",
            time=record.get("time"),
            notes=record.get("notes"),
            created_at=from_millis(record.get("createdAt")),
        )


@dataclass
class BudgetLimit:
    category: str
    monthly_limit: float
    daily_limit: Optional[float] = None
    warning_threshold: Optional[float] = DEFAULT_WARNING_THRESHOLD
    owner: str = ""
    id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def threshold(self) -> float:
        """Warning threshold percentage, falling back to the default when unset or zero."""
        return self.warning_threshold or DEFAULT_WARNING_THRESHOLD

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "owner": self.owner,
            "category": self.category,
            "monthlyLimit": self.monthly_limit,
            "dailyLimit": self.daily_limit,
            "warningThreshold": self.warning_threshold,
            "createdAt": to_millis(self.created_at),
            "updatedAt": to_millis(self.updated_at),
        }

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "BudgetLimit":
        return cls(
            id=record.get("id"),
            owner=record.get("owner") or "",
            category=record.get("category") or DEFAULT_CATEGORY,
            monthly_limit=record.get("monthlyLimit") or 0.0,
            daily_limit=record.get("dailyLimit"),
            warning_threshold=record.get("warningThreshold"),
            created_at=from_millis(record.get("createdAt")),
            updated_at=from_millis(record.get("updatedAt")),
        )


@dataclass
class SavingsGoal:
    title: str
    target_amount: float
    current_amount: float = 0.0
    deadline: Optional[str] = None
    notes: Optional[str] = None
    owner: str = ""
    id: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def remaining_amount(self) -> float:
        return max(0.0, self.target_amount - self.current_amount)

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "owner": self.owner,
            "title": self.title,
            "targetAmount": self.target_amount,
            "currentAmount": self.current_amount,
            "deadline": self.deadline,
            "notes": self.notes,
            "createdAt": to_millis(self.created_at),
        }

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "SavingsGoal":
        return cls(
            id=record.get("id"),
            owner=record.get("owner") or "",
            title=record.get("title") or "",
            target_amount=record.get("targetAmount") or 0.0,
            current_amount=record.get("currentAmount") or 0.0,
            deadline=record.get("deadline"),
            notes=record.get("notes"),
            created_at=from_millis(record.get("createdAt")),
        )


@dataclass
class PlanItem:
    id: str
    name: str
    price: float
    quantity: float = 1
    category: str = DEFAULT_CATEGORY
    completed: bool = False

    @property
    def total(self) -> float:
        return self.price * self.quantity

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "price": self.price,
            "quantity": self.quantity,
            "category": self.category,
            "completed": bool(self.completed),
        }

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "PlanItem":
        return cls(
            id=str(record.get("id")),
            name=record.get("name") or "",
            price=record.get("price") or 0.0,
            quantity=record.get("quantity") or 0,
            category=record.get("category") or DEFAULT_CATEGORY,
            completed=bool(record.get("completed")),
        )


@dataclass
class BudgetPlan:
    title: str
    total_budget: float
    items: List[PlanItem] = field(default_factory=list)
    completed: bool = False
    owner: str = ""
    id: Optional[str] = None
    created_at: Optional[datetime] = None

    def find_item(self, item_id: str) -> Optional[PlanItem]:
        return next((item for item in self.items if item.id == item_id), None)

    def with_item(self, item_id: str, **changes: Any) -> "BudgetPlan":
        """Return a copy of the plan with one item replaced."""
        items = [replace(item, **changes) if item.id == item_id else item for item in self.items]
        return replace(self, items=items)

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "owner": self.owner,
            "title": self.title,
            "totalBudget": self.total_budget,
            "items": [item.to_record() for item in self.items],
            "createdAt": to_millis(self.created_at),
            "completed": bool(self.completed),
        }

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "BudgetPlan":
        return cls(
            id=record.get("id"),
            owner=record.get("owner") or "",
            title=record.get("title") or "",
            total_budget=record.get("totalBudget") or 0.0,
            items=[PlanItem.from_record(item) for item in record.get("items") or []],
            created_at=from_millis(record.get("createdAt")),
            completed=bool(record.get("completed")),
        )
