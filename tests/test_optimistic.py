import pytest

from finance_tracker.optimistic import apply_optimistic


def test_success_keeps_new_value():
    state = {'item': False}
    assert apply_optimistic(state, 'item', True, lambda: 'saved') == 'saved'
    assert state['item'] is True


def test_failure_restores_previous_value():
    state = {'item': False}

    def fail():
        assert state['item'] is True
        raise RuntimeError('offline')

    with pytest.raises(RuntimeError):
        apply_optimistic(state, 'item', True, fail)
    assert state['item'] is False


def test_failure_removes_new_key():
    state = {}

    def fail():
        raise ValueError('bad')

    with pytest.raises(ValueError):
        apply_optimistic(state, 'item', True, fail)
    assert 'item' not in state
