from datetime import date, datetime

import pytest

from finance_tracker.models import SavingsGoal
from finance_tracker.savings_pacing import PACING_COLUMNS, pace_goals, pace_savings_goal

CREATED = datetime(2024, 1, 1, 9, 30)


def _goal(target=1000.0, current=500.0, deadline='2024-01-11', created=CREATED):
    return SavingsGoal(
        title='Laptop',
        target_amount=target,
        current_amount=current,
        deadline=deadline,
        created_at=created,
    )


def test_halfway_goal_is_on_track():
    pacing = pace_savings_goal(_goal(), date(2024, 1, 6))
    assert pacing.progress_pct == pytest.approx(50.0)
    assert pacing.expected_progress_pct == pytest.approx(50.0)
    assert pacing.is_on_track
    assert pacing.days_remaining == 5
    assert pacing.remaining_amount == 500
    assert pacing.required_periodic_saving == pytest.approx(500 / (5 / 30.44))


def test_behind_schedule():
    pacing = pace_savings_goal(_goal(current=100.0), date(2024, 1, 9))
    assert pacing.expected_progress_pct == pytest.approx(80.0)
    assert not pacing.is_on_track


def test_past_deadline():
    pacing = pace_savings_goal(_goal(current=900.0), date(2024, 2, 1))
    assert pacing.expected_progress_pct == pytest.approx(100.0)
    assert pacing.days_remaining == 0
    assert pacing.required_periodic_saving == 100
    assert not pacing.is_on_track


def test_goal_without_deadline():
    pacing = pace_savings_goal(_goal(deadline=None), date(2024, 1, 6))
    assert pacing.expected_progress_pct == 0
    assert not pacing.is_on_track
    assert pacing.required_periodic_saving == 0


def test_deadline_on_creation_day():
    done = pace_savings_goal(_goal(current=1000.0, deadline='2024-01-01'), date(2024, 1, 1))
    assert done.expected_progress_pct == 100
    assert done.is_on_track

    short = pace_savings_goal(_goal(current=10.0, deadline='2023-12-01'), date(2024, 1, 1))
    assert not short.is_on_track


def test_pace_goals_frame():
    frame = pace_goals([_goal(), _goal(deadline=None)], date(2024, 1, 6))
    assert list(frame.columns) == PACING_COLUMNS
    assert frame['On Track'].tolist() == [True, False]
    assert frame.loc[0, 'Days Left'] == 5
    assert pace_goals([], date(2024, 1, 6)).empty


def test_goal_already_met_before_deadline():
    pacing = pace_savings_goal(_goal(target=100.0, current=150.0, deadline='2030-01-01'), date(2024, 6, 1))
    assert pacing.is_on_track
    assert pacing.remaining_amount == 0
    assert pacing.required_periodic_saving == 0
