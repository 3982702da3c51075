from __future__ import annotations

import json
import logging
import sqlite3
import uuid
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional

import pandas as pd

from .config import DB_PATH, ensure_data_directories
from .errors import (
    AuthorizationError,
    DuplicateRecordError,
    NotFoundError,
    StoreError,
    ValidationError,
)

logger = logging.getLogger(__name__)

TRANSACTIONS = "transactions"
BUDGET_LIMITS = "budgetLimits"
SAVINGS_GOALS = "savingsGoals"
BUDGET_PLANS = "budgetPlans"

# collection -> table layout; column names are the persisted field names
COLLECTIONS: Dict[str, Dict[str, Any]] = {
    TRANSACTIONS: {
        'table': 'transactions',
        'columns': ('id', 'owner', 'description', 'amount', 'category', 'date', 'time', 'notes', 'createdAt'),
        'json': set(),
        'bool': set(),
    },
    BUDGET_LIMITS: {
        'table': 'budget_limits',
        'columns': ('id', 'owner', 'category', 'monthlyLimit', 'dailyLimit', 'warningThreshold', 'createdAt', 'updatedAt'),
        'json': set(),
        'bool': set(),
    },
    SAVINGS_GOALS: {
        'table': 'savings_goals',
        'columns': ('id', 'owner', 'title', 'targetAmount', 'currentAmount', 'deadline', 'notes', 'createdAt'),
        'json': set(),
        'bool': set(),
    },
    BUDGET_PLANS: {
        'table': 'budget_plans',
        'columns': ('id', 'owner', 'title', 'totalBudget', 'items', 'createdAt', 'completed'),
        'json': {'items'},
        'bool': {'completed'},
    },
}

SCHEMA_SQL = """
PRAGMA journal_mode=WAL;
PRAGMA synchronous=NORMAL;

CREATE TABLE IF NOT EXISTS transactions (
    id TEXT PRIMARY KEY,
    owner TEXT NOT NULL,
    description TEXT NOT NULL,
    amount REAL NOT NULL,
    category TEXT NOT NULL,
    date TEXT NOT NULL,
    time TEXT,
    notes TEXT,
    createdAt INTEGER
);

CREATE INDEX IF NOT EXISTS ix_txn_owner ON transactions (owner);
CREATE INDEX IF NOT EXISTS ix_txn_owner_date ON transactions (owner, date);

CREATE TABLE IF NOT EXISTS budget_limits (
    id TEXT PRIMARY KEY,
    owner TEXT NOT NULL,
    category TEXT NOT NULL,
    monthlyLimit REAL NOT NULL,
    dailyLimit REAL,
    warningThreshold REAL,
    createdAt INTEGER,
    updatedAt INTEGER
);

CREATE INDEX IF NOT EXISTS ix_limit_owner ON budget_limits (owner);
CREATE UNIQUE INDEX IF NOT EXISTS ux_limit_owner_category ON budget_limits (owner, category);

CREATE TABLE IF NOT EXISTS savings_goals (
    id TEXT PRIMARY KEY,
    owner TEXT NOT NULL,
    title TEXT NOT NULL,
    targetAmount REAL NOT NULL,
    currentAmount REAL NOT NULL DEFAULT 0,
    deadline TEXT,
    notes TEXT,
    createdAt INTEGER
);

CREATE INDEX IF NOT EXISTS ix_goal_owner ON savings_goals (owner);

CREATE TABLE IF NOT EXISTS budget_plans (
    id TEXT PRIMARY KEY,
    owner TEXT NOT NULL,
    title TEXT NOT NULL,
    totalBudget REAL NOT NULL,
    items TEXT NOT NULL DEFAULT '[]',
    createdAt INTEGER,
    completed INTEGER NOT NULL DEFAULT 0
);

CREATE INDEX IF NOT EXISTS ix_plan_owner ON budget_plans (owner);
"""

# Optional columns added after the first release; older files get them on init
_MIGRATION_COLUMNS = {
    'transactions': [('time', 'TEXT'), ('notes', 'TEXT')],
    'budget_limits': [('dailyLimit', 'REAL'), ('warningThreshold', 'REAL')],
    'savings_goals': [('deadline', 'TEXT'), ('notes', 'TEXT')],
}


def require_owner(owner: Optional[str]) -> str:
    """Every handler call needs a signed-in owner id."""
    if not owner or not str(owner).strip():
        raise AuthorizationError("Unauthorized")
    return str(owner)


def _layout(collection: str) -> Dict[str, Any]:
    try:
        return COLLECTIONS[collection]
    except KeyError:
        raise ValidationError(f"Unknown collection: {collection!r}") from None


def _encode(layout: Dict[str, Any], column: str, value: Any) -> Any:
    if column in layout['json']:
        return json.dumps(value if value is not None else [])
    if column in layout['bool']:
        return 1 if value else 0
    return value


def _decode_row(layout: Dict[str, Any], row: sqlite3.Row) -> Dict[str, Any]:
    record = dict(row)
    for column in layout['json']:
        raw = record.get(column)
        try:
            record[column] = json.loads(raw) if raw else []
        except json.JSONDecodeError:
            logger.warning("Corrupt %s payload on record %s", column, record.get('id'))
            record[column] = []
    for column in layout['bool']:
        record[column] = bool(record.get(column))
    return record


class RecordStore:
    """Owner-scoped document store on top of a single SQLite file.

    Every collection is queryable by owner plus equality on any of its
    columns. Writes can be grouped with :meth:`transaction` so that causal
    pairs (goal update + transfer transaction) commit together.
    """

    def __init__(self, db_path: Optional[Path] = None, *, initialize: bool = True):
        self.db_path = Path(db_path) if db_path is not None else DB_PATH
        if initialize:
            self.init_db()

    @contextmanager
    def connect(self) -> Iterator[sqlite3.Connection]:
        if self.db_path == DB_PATH:
            ensure_data_directories()
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            conn = sqlite3.connect(str(self.db_path))
        except sqlite3.Error as exc:
            raise StoreError(f"Could not open database at {self.db_path}: {exc}") from exc
        conn.row_factory = sqlite3.Row
        try:
            yield conn
        finally:
            conn.close()

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """Open a connection whose writes commit together or not at all."""
        with self.connect() as conn:
            try:
                yield conn
                conn.commit()
            except Exception:
                conn.rollback()
                raise

    @contextmanager
    def _session(self, conn: Optional[sqlite3.Connection]) -> Iterator[sqlite3.Connection]:
        if conn is not None:
            yield conn
            return
        with self.transaction() as own:
            yield own

    def init_db(self) -> None:
        try:
            with self.connect() as conn:
                conn.executescript(SCHEMA_SQL)
                conn.commit()
                self._migrate_database(conn)
        except sqlite3.Error as exc:
            raise StoreError(f"Failed to initialise database {self.db_path}: {exc}") from exc

    def _migrate_database(self, conn: sqlite3.Connection) -> None:
        """Add new columns to existing database if they don't exist."""
        cursor = conn.cursor()
        for table, columns in _MIGRATION_COLUMNS.items():
            cursor.execute(f"PRAGMA table_info({table})")
            existing = {row[1] for row in cursor.fetchall()}
            for column_name, column_type in columns:
                if column_name in existing:
                    continue
                cursor.execute(f"ALTER TABLE {table} ADD COLUMN {column_name} {column_type}")
                logger.info("Added column %s to %s table", column_name, table)
        conn.commit()

    def _execute(self, conn: sqlite3.Connection, sql: str, params: Any = ()) -> sqlite3.Cursor:
        try:
            return conn.execute(sql, params)
        except sqlite3.IntegrityError as exc:
            if "UNIQUE" in str(exc):
                raise DuplicateRecordError(f"Record violates a uniqueness rule: {exc}") from exc
            logger.warning("Store constraint failed: %s", exc)
            raise StoreError(str(exc)) from exc
        except sqlite3.Error as exc:
            logger.exception("Store statement failed: %s", sql.split()[0])
            raise StoreError(str(exc)) from exc

    def insert(self, collection: str, record: Mapping[str, Any], conn: Optional[sqlite3.Connection] = None) -> str:
        layout = _layout(collection)
        values = dict(record)
        if not values.get('id'):
            values['id'] = uuid.uuid4().hex
        columns = [c for c in layout['columns'] if c in values]
        sql = "INSERT INTO {} ({}) VALUES ({})".format(
            layout['table'],
            ", ".join(columns),
            ", ".join("?" for _ in columns),
        )
        params = [_encode(layout, c, values[c]) for c in columns]
        with self._session(conn) as session:
            self._execute(session, sql, params)
        return values['id']

    def get(self, collection: str, record_id: str, conn: Optional[sqlite3.Connection] = None) -> Optional[Dict[str, Any]]:
        layout = _layout(collection)
        with self._session(conn) as session:
            row = self._execute(
                session,
                f"SELECT * FROM {layout['table']} WHERE id = ?",
                (record_id,),
            ).fetchone()
        return _decode_row(layout, row) if row else None

    def query(
        self,
        collection: str,
        owner: str,
        *,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
        conn: Optional[sqlite3.Connection] = None,
        **equals: Any,
    ) -> List[Dict[str, Any]]:
        """Fetch an owner's records, optionally filtered by exact column values."""
        layout = _layout(collection)
        where = ["owner = ?"]
        params: List[Any] = [owner]
        for column, value in equals.items():
            if column not in layout['columns']:
                raise ValidationError(f"Unknown field {column!r} for {collection}")
            where.append(f"{column} = ?")
            params.append(_encode(layout, column, value))

        sql = f"SELECT * FROM {layout['table']} WHERE " + " AND ".join(where)
        if order_by:
            if order_by not in layout['columns']:
                raise ValidationError(f"Unknown field {order_by!r} for {collection}")
            direction = "DESC" if descending else "ASC"
            sql += f" ORDER BY {order_by} {direction}, rowid {direction}"
        else:
            sql += " ORDER BY rowid ASC"
        if limit is not None:
            sql += " LIMIT ?"
            params.append(int(limit))

        with self._session(conn) as session:
            rows = self._execute(session, sql, params).fetchall()
        return [_decode_row(layout, row) for row in rows]

    def patch(
        self,
        collection: str,
        record_id: str,
        updates: Mapping[str, Any],
        conn: Optional[sqlite3.Connection] = None,
    ) -> bool:
        layout = _layout(collection)
        columns = [c for c in updates if c in layout['columns'] and c not in ('id', 'owner')]
        if not columns:
            return False
        sql = "UPDATE {} SET {} WHERE id = ?".format(
            layout['table'],
            ", ".join(f"{c} = ?" for c in columns),
        )
        params = [_encode(layout, c, updates[c]) for c in columns] + [record_id]
        with self._session(conn) as session:
            cursor = self._execute(session, sql, params)
        return cursor.rowcount > 0

    def delete(self, collection: str, record_id: str, conn: Optional[sqlite3.Connection] = None) -> bool:
        layout = _layout(collection)
        with self._session(conn) as session:
            cursor = self._execute(session, f"DELETE FROM {layout['table']} WHERE id = ?", (record_id,))
        return cursor.rowcount > 0

    def get_owned(
        self,
        collection: str,
        record_id: str,
        owner: str,
        conn: Optional[sqlite3.Connection] = None,
    ) -> Dict[str, Any]:
        """Load a record and check it belongs to ``owner``.

        Raises ``NotFoundError`` for a missing id and ``AuthorizationError``
        when the record belongs to someone else.
        """
        require_owner(owner)
        record = self.get(collection, record_id, conn=conn)
        if record is None:
            raise NotFoundError(f"{collection} record {record_id} not found")
        if record.get('owner') != owner:
            logger.warning("Refused %s access to %s record %s", owner, collection, record_id)
            raise AuthorizationError("Unauthorized")
        return record

    def fetch_transactions_frame(
        self,
        owner: str,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> pd.DataFrame:
        """Owner's transactions as a DataFrame for tables and exports."""
        require_owner(owner)
        where = ["owner = ?"]
        params: List[Any] = [owner]
        if start_date:
            where.append("date >= ?")
            params.append(start_date)
        if end_date:
            where.append("date <= ?")
            params.append(end_date)

        sql = (
            "SELECT id, date AS 'Date', time AS 'Time', description AS 'Description', "
            "category AS 'Category', amount AS 'Amount', notes AS 'Notes', createdAt "
            "FROM transactions WHERE " + " AND ".join(where) + " ORDER BY date DESC, createdAt DESC"
        )
        with self.connect() as conn:
            try:
                df = pd.read_sql_query(sql, conn, params=params)
            except (sqlite3.Error, pd.errors.DatabaseError) as exc:
                raise StoreError(f"Failed to read transactions: {exc}") from exc
        if not df.empty:
            df['Date'] = pd.to_datetime(df['Date'], errors='coerce')
        return df


_default_store: Optional[RecordStore] = None


def get_store() -> RecordStore:
    """Return the process-wide store at ``config.DB_PATH``."""
    global _default_store
    if _default_store is None:
        _default_store = RecordStore()
    return _default_store
