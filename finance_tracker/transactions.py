"""Transaction handlers: create, list, recent and delete for one owner."""

from __future__ import annotations

import logging
import sqlite3
from datetime import date, datetime
from typing import List, Optional

from .config import DEFAULT_CATEGORY, RECENT_TRANSACTIONS_LIMIT
from .db import TRANSACTIONS, RecordStore, require_owner
from .models import Transaction, now_millis
from .validation import optional_text, require_iso_date, require_nonzero, require_text

logger = logging.getLogger(__name__)


def create(
    store: RecordStore,
    owner: str,
    description: str,
    amount: float,
    category: Optional[str] = None,
    date_value: Optional[object] = None,
    time: Optional[str] = None,
    notes: Optional[str] = None,
    conn: Optional[sqlite3.Connection] = None,
) -> Transaction:
    """Insert a signed transaction (positive income, negative expense).

    ``conn`` lets callers put the insert inside an open store transaction.
    """
    require_owner(owner)
    txn = Transaction(
        owner=owner,
        description=require_text(description, "Description"),
        amount=require_nonzero(amount, "Amount"),
        category=optional_text(category) or DEFAULT_CATEGORY,
        date=require_iso_date(date_value if date_value is not None else date.today()),
        time=optional_text(time),
        notes=optional_text(notes),
        created_at=datetime.now(),
    )
    record = txn.to_record()
    record["createdAt"] = now_millis()
    txn_id = store.insert(TRANSACTIONS, record, conn=conn)
    logger.info("Created transaction %s for %s", txn_id, owner)
    return Transaction.from_record({**record, "id": txn_id})


def list_transactions(store: RecordStore, owner: str) -> List[Transaction]:
    require_owner(owner)
    records = store.query(TRANSACTIONS, owner, order_by="createdAt")
    return [Transaction.from_record(r) for r in records]


def get_recent(store: RecordStore, owner: str, limit: Optional[int] = None) -> List[Transaction]:
    """Newest transactions first, five by default."""
    require_owner(owner)
    records = store.query(
        TRANSACTIONS,
        owner,
        order_by="createdAt",
        descending=True,
        limit=limit or RECENT_TRANSACTIONS_LIMIT,
    )
    return [Transaction.from_record(r) for r in records]


def remove(store: RecordStore, owner: str, transaction_id: str) -> str:
    store.get_owned(TRANSACTIONS, transaction_id, owner)
    store.delete(TRANSACTIONS, transaction_id)
    logger.info("Deleted transaction %s for %s", transaction_id, owner)
    return transaction_id
