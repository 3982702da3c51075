import sqlite3

import pytest

from conftest import OTHER, OWNER
from finance_tracker.db import (
    BUDGET_LIMITS,
    BUDGET_PLANS,
    TRANSACTIONS,
    RecordStore,
    require_owner,
)
from finance_tracker.errors import (
    AuthorizationError,
    DuplicateRecordError,
    NotFoundError,
    StoreError,
    ValidationError,
)


def _txn(owner=OWNER, **overrides):
    record = {
        'owner': owner,
        'description': 'Lunch',
        'amount': -15000.0,
        'category': 'Food',
        'date': '2024-03-10',
        'createdAt': 1710000000000,
    }
    record.update(overrides)
    return record


def test_init_creates_tables(store):
    with store.connect() as conn:
        tables = {row[0] for row in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")}
    assert {'transactions', 'budget_limits', 'savings_goals', 'budget_plans'} <= tables


def test_migration_adds_missing_columns(tmp_path):
    path = tmp_path / 'old.db'
    conn = sqlite3.connect(str(path))
    conn.execute(
        "CREATE TABLE transactions (id TEXT PRIMARY KEY, owner TEXT NOT NULL, description TEXT NOT NULL, "
        "amount REAL NOT NULL, category TEXT NOT NULL, date TEXT NOT NULL, createdAt INTEGER)"
    )
    conn.commit()
    conn.close()

    store = RecordStore(path)
    with store.connect() as conn:
        columns = {row[1] for row in conn.execute("PRAGMA table_info(transactions)")}
    assert {'time', 'notes'} <= columns


def test_insert_assigns_id_and_get_returns_record(store):
    record_id = store.insert(TRANSACTIONS, _txn())
    assert len(record_id) == 32

    record = store.get(TRANSACTIONS, record_id)
    assert record['owner'] == OWNER
    assert record['amount'] == -15000.0
    assert record['time'] is None
    assert store.get(TRANSACTIONS, 'missing') is None


def test_query_is_scoped_to_owner(store):
    store.insert(TRANSACTIONS, _txn(description='Mine'))
    store.insert(TRANSACTIONS, _txn(owner=OTHER, description='Theirs'))
    store.insert(TRANSACTIONS, _txn(description='Bus', category='Transport'))

    assert [r['description'] for r in store.query(TRANSACTIONS, OWNER)] == ['Mine', 'Bus']
    assert [r['description'] for r in store.query(TRANSACTIONS, OWNER, category='Transport')] == ['Bus']
    assert [r['description'] for r in store.query(TRANSACTIONS, OTHER)] == ['Theirs']


def test_query_rejects_unknown_fields(store):
    with pytest.raises(ValidationError):
        store.query(TRANSACTIONS, OWNER, colour='red')
    with pytest.raises(ValidationError):
        store.query(TRANSACTIONS, OWNER, order_by='colour')
    with pytest.raises(ValidationError):
        store.query('accounts', OWNER)


def test_patch_never_changes_owner(store):
    record_id = store.insert(TRANSACTIONS, _txn())
    assert store.patch(TRANSACTIONS, record_id, {'owner': OTHER, 'amount': -1.0})
    record = store.get(TRANSACTIONS, record_id)
    assert record['owner'] == OWNER
    assert record['amount'] == -1.0
    assert not store.patch(TRANSACTIONS, record_id, {'id': 'x'})


def test_plan_items_round_trip_as_json(store):
    items = [{'id': 'a', 'name': 'Rice', 'price': 5000, 'quantity': 2, 'category': 'Food', 'completed': False}]
    plan_id = store.insert(BUDGET_PLANS, {
        'owner': OWNER, 'title': 'Groceries', 'totalBudget': 20000, 'items': items, 'completed': False,
    })
    record = store.get(BUDGET_PLANS, plan_id)
    assert record['items'] == items
    assert record['completed'] is False


def test_get_owned_checks_owner(store):
    record_id = store.insert(TRANSACTIONS, _txn())
    assert store.get_owned(TRANSACTIONS, record_id, OWNER)['id'] == record_id
    with pytest.raises(AuthorizationError):
        store.get_owned(TRANSACTIONS, record_id, OTHER)
    with pytest.raises(NotFoundError):
        store.get_owned(TRANSACTIONS, 'missing', OWNER)
    with pytest.raises(AuthorizationError):
        store.get_owned(TRANSACTIONS, record_id, '')


def test_transaction_rolls_back_on_error(store):
    with pytest.raises(RuntimeError):
        with store.transaction() as conn:
            store.insert(TRANSACTIONS, _txn(), conn=conn)
            raise RuntimeError('boom')
    assert store.query(TRANSACTIONS, OWNER) == []


def test_unique_limit_per_category(store):
    limit = {'owner': OWNER, 'category': 'Food', 'monthlyLimit': 300000}
    store.insert(BUDGET_LIMITS, limit)
    with pytest.raises(DuplicateRecordError):
        store.insert(BUDGET_LIMITS, limit)
    store.insert(BUDGET_LIMITS, {**limit, 'owner': OTHER})


def test_not_null_violation_is_store_error(store):
    record = _txn()
    del record['description']
    with pytest.raises(StoreError) as excinfo:
        store.insert(TRANSACTIONS, record)
    assert not isinstance(excinfo.value, DuplicateRecordError)
    assert 'NOT NULL' in str(excinfo.value)


def test_fetch_transactions_frame(store):
    store.insert(TRANSACTIONS, _txn(date='2024-03-01', description='Early'))
    store.insert(TRANSACTIONS, _txn(date='2024-03-20', description='Late'))
    store.insert(TRANSACTIONS, _txn(owner=OTHER))

    df = store.fetch_transactions_frame(OWNER)
    assert df['Description'].tolist() == ['Late', 'Early']
    assert {'Date', 'Time', 'Description', 'Category', 'Amount', 'Notes'} <= set(df.columns)

    df = store.fetch_transactions_frame(OWNER, start_date='2024-03-10')
    assert df['Description'].tolist() == ['Late']


def test_require_owner():
    assert require_owner('abc') == 'abc'
    for missing in (None, '', '   '):
        with pytest.raises(AuthorizationError):
            require_owner(missing)
