from datetime import date

import pytest

from conftest import OTHER, OWNER
from finance_tracker import transactions
from finance_tracker.errors import AuthorizationError, NotFoundError, ValidationError


def test_create_expense(store):
    txn = transactions.create(store, OWNER, ' Lunch ', -15000, category='Food', date_value='2024-03-10')
    assert txn.id
    assert txn.description == 'Lunch'
    assert txn.amount == -15000
    assert txn.is_expense
    assert txn.date == '2024-03-10'
    assert transactions.list_transactions(store, OWNER) == [txn]


def test_create_defaults(store):
    txn = transactions.create(store, OWNER, 'Gift', 5000)
    assert txn.category == 'Uncategorized'
    assert txn.date == date.today().isoformat()
    assert txn.notes is None


@pytest.mark.parametrize('amount', [0, 'abc', float('nan'), None])
def test_create_rejects_bad_amounts(store, amount):
    with pytest.raises(ValidationError):
        transactions.create(store, OWNER, 'Lunch', amount)
    assert transactions.list_transactions(store, OWNER) == []


def test_create_requires_owner(store):
    with pytest.raises(AuthorizationError):
        transactions.create(store, '', 'Lunch', -100)


def test_get_recent_newest_first(store):
    for i in range(7):
        transactions.create(store, OWNER, f"T{i}", -100 - i)
    recent = transactions.get_recent(store, OWNER)
    assert [t.description for t in recent] == ['T6', 'T5', 'T4', 'T3', 'T2']
    assert len(transactions.get_recent(store, OWNER, limit=2)) == 2


def test_remove(store):
    txn = transactions.create(store, OWNER, 'Lunch', -100)
    assert transactions.remove(store, OWNER, txn.id) == txn.id
    assert transactions.list_transactions(store, OWNER) == []
    with pytest.raises(NotFoundError):
        transactions.remove(store, OWNER, txn.id)


def test_unauthorized_delete_leaves_store_unchanged(store):
    txn = transactions.create(store, OWNER, 'Lunch', -100)
    with pytest.raises(AuthorizationError):
        transactions.remove(store, OTHER, txn.id)
    assert transactions.list_transactions(store, OWNER) == [txn]
