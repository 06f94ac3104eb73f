"""Tests for goal evaluation and pace monitoring."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from debtplan.errors import InvalidInputError
from debtplan.services.debts import SimulateRequest, simulate
from debtplan.services.goals import Goal, GoalType, PaceStatus, evaluate_goal, pace_status, parse_goal


@pytest.fixture
def plan(debt, start_date):
    # Debt free on 2025-01-15
    return simulate(
        SimulateRequest(
            debts=(debt("card", 1200, 0.199, 45), debt("loan", 800, 0, 40)),
            extra_monthly=100,
            start_date=start_date,
        )
    )


@pytest.fixture
def capped_plan(debt, start_date):
    return simulate(
        SimulateRequest(debts=(debt("grow", 1000, 0.24, 15),), start_date=start_date, max_months=12)
    )


def test_debt_free_goal_met(plan):
    goal = Goal(label="Spring", goal_type=GoalType.DEBT_FREE_BY, target_date=date(2025, 3, 1))

    result = evaluate_goal(goal, plan, today=date(2024, 2, 1))

    assert result.on_track is True
    assert result.days_delta == 45
    assert "2025-01-15" in result.message


def test_debt_free_goal_missed(plan):
    goal = Goal(label="New year", goal_type=GoalType.DEBT_FREE_BY, target_date=date(2025, 1, 1))

    result = evaluate_goal(goal, plan, today=date(2024, 2, 1))

    assert result.on_track is False
    assert result.days_delta == -14
    assert "14 day(s)" in result.message


def test_debt_free_goal_with_capped_plan(capped_plan):
    goal = Goal(label="Soon", goal_type=GoalType.DEBT_FREE_BY, target_date=date(2030, 1, 1))

    assert evaluate_goal(goal, capped_plan, today=date(2024, 2, 1)).on_track is False


def test_extra_amount_goal_pending(plan):
    goal = Goal(
        label="Raise extra",
        goal_type=GoalType.EXTRA_AMOUNT_BY_DATE,
        target_date=date(2024, 6, 1),
        target_value=Decimal("150"),
    )

    result = evaluate_goal(goal, plan, today=date(2024, 2, 1))

    assert result.on_track is None
    assert "$50.00 below" in result.message


def test_extra_amount_goal_already_met(plan):
    goal = Goal(
        label="Keep extra",
        goal_type=GoalType.EXTRA_AMOUNT_BY_DATE,
        target_date=date(2024, 6, 1),
        target_value=Decimal("75"),
    )

    assert evaluate_goal(goal, plan, today=date(2024, 2, 1)).on_track is True


def test_extra_amount_goal_past_deadline(plan):
    goal = Goal(
        label="Raise extra",
        goal_type=GoalType.EXTRA_AMOUNT_BY_DATE,
        target_date=date(2024, 6, 1),
        target_value=Decimal("150"),
    )

    result = evaluate_goal(goal, plan, today=date(2024, 7, 1))

    assert result.on_track is False
    assert result.days_delta == -30


def test_goal_without_target_is_not_evaluated(plan):
    result = evaluate_goal(Goal(label="Someday", goal_type=GoalType.DEBT_FREE_BY), plan, today=date(2024, 2, 1))

    assert result.on_track is None


@pytest.mark.parametrize(
    ("target", "status", "delta"),
    [
        (date(2025, 3, 1), PaceStatus.AHEAD, 45),
        (date(2025, 2, 14), PaceStatus.AHEAD, 30),
        (date(2025, 2, 13), PaceStatus.ON_TRACK, 29),
        (date(2025, 1, 1), PaceStatus.ON_TRACK, -14),
        (date(2024, 12, 16), PaceStatus.BEHIND, -30),
        (None, PaceStatus.NO_GOAL, None),
    ],
)
def test_pace_status(plan, target, status, delta):
    assert pace_status(plan, target) == (status, delta)


def test_pace_status_behind_when_plan_never_finishes(capped_plan):
    assert pace_status(capped_plan, date(2030, 1, 1)) == (PaceStatus.BEHIND, None)


def test_parse_goal():
    goal = parse_goal({"label": "Free", "goal_type": "DEBT_FREE_BY", "target_date": "2026-05-01"})

    assert goal.goal_type is GoalType.DEBT_FREE_BY
    assert goal.target_date == date(2026, 5, 1)
    assert goal.target_value is None

    with pytest.raises(InvalidInputError):
        parse_goal({"goal_type": "retire_early"})
