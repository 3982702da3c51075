import pytest

from conftest import OWNER
from finance_tracker import income, savings_goals, transactions
from finance_tracker.errors import ValidationError
from finance_tracker.models import Transaction


def test_record_income_without_auto_save(store):
    result = income.record_income(store, OWNER, 'March salary', 1500000, date_value='2024-03-01', notes='bonus')
    assert result.goal is None
    assert result.saved_amount == 0
    assert result.transaction.amount == 1500000
    assert result.transaction.category == 'Income'
    assert result.transaction.notes == 'Source: Salary - bonus'
    assert income.source_of(result.transaction) == 'Salary'


def test_record_income_auto_saves_share(store):
    goal = savings_goals.create(store, OWNER, 'Emergency fund', 5000000)
    result = income.record_income(
        store, OWNER, 'Design job', 400000,
        source='Freelance', savings_goal_id=goal.id, savings_percent=25,
    )

    assert result.saved_amount == 100000
    assert result.goal.current_amount == 100000
    saved = [t for t in transactions.list_transactions(store, OWNER) if t.category == 'Savings']
    assert len(saved) == 1
    assert saved[0].amount == -100000
    assert saved[0].description == 'Auto-save from Design job'


def test_savings_percent_is_clamped(store):
    goal = savings_goals.create(store, OWNER, 'Emergency fund', 5000000)
    result = income.record_income(store, OWNER, 'Gift', 1000, savings_goal_id=goal.id, savings_percent=250)
    assert result.saved_amount == 1000

    result = income.record_income(store, OWNER, 'Gift', 1000, savings_goal_id=goal.id, savings_percent=-5)
    assert result.goal is None


def test_record_income_validates(store):
    with pytest.raises(ValidationError):
        income.record_income(store, OWNER, 'Refund', -100)
    with pytest.raises(ValidationError):
        income.record_income(store, OWNER, '', 100)


def _income(day, amount, notes=None):
    return Transaction(description='x', amount=amount, category='Income', date=day, notes=notes)


def test_income_by_source():
    rows = income.income_by_source([
        _income('2024-03-01', 750, 'Source: Salary'),
        _income('2024-03-02', 250, 'Source: Freelance - logo'),
        _income('2024-03-03', -400),
        _income('2024-03-04', 100),
    ])
    assert [(r['source'], r['amount']) for r in rows] == [('Salary', 750), ('Freelance', 250), ('Unknown', 100)]
    assert [r['percentage'] for r in rows] == [68, 23, 9]


def test_income_by_month_newest_first():
    groups = income.income_by_month([
        _income('2024-02-10', 100),
        _income('2024-03-05', 200),
        _income('2024-03-20', 300),
        _income('bad', 50),
    ])
    assert list(groups) == ['March 2024', 'February 2024']
    assert groups['March 2024']['total'] == 500
    assert [t.date for t in groups['March 2024']['transactions']] == ['2024-03-20', '2024-03-05']
