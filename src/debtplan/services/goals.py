"""Goal tracking against a projected plan."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum

from ..dates import days_between
from ..errors import InvalidInputError
from ..models.plan import PaymentPlan
from ..money import to_money

PACE_WINDOW_DAYS = 30


class GoalType(str, Enum):
    DEBT_FREE_BY = "debt_free_by"
    EXTRA_AMOUNT_BY_DATE = "extra_amount_by_date"


class PaceStatus(str, Enum):
    AHEAD = "ahead"
    ON_TRACK = "on_track"
    BEHIND = "behind"
    NO_GOAL = "no_goal"


@dataclass(frozen=True, slots=True)
class Goal:
    """A user goal. ``target_value`` is only used by extra-amount goals."""

    label: str
    goal_type: GoalType
    target_date: date | None = None
    target_value: Decimal | None = None


@dataclass(frozen=True, slots=True)
class GoalEvaluation:
    """``on_track`` is ``None`` when the outcome cannot be decided yet."""

    goal: Goal
    on_track: bool | None
    message: str
    days_delta: int | None = None


def evaluate_goal(goal: Goal, plan: PaymentPlan, *, today: date) -> GoalEvaluation:
    """Judge ``goal`` against ``plan`` as of ``today``."""

    goal_type = GoalType(goal.goal_type)

    if goal_type is GoalType.DEBT_FREE_BY and goal.target_date:
        debt_free = plan.totals.debt_free_date
        if debt_free is None:
            return GoalEvaluation(
                goal=goal,
                on_track=False,
                message=f"The plan does not reach zero within {plan.max_months} months.",
            )
        delta = days_between(debt_free, goal.target_date)
        if delta >= 0:
            return GoalEvaluation(
                goal=goal,
                on_track=True,
                message=f"Debt free by {debt_free.isoformat()}, which meets this goal.",
                days_delta=delta,
            )
        return GoalEvaluation(
            goal=goal,
            on_track=False,
            message=(
                f"Projection is later than this goal by about {-delta} day(s). "
                "A larger extra payment could close the gap."
            ),
            days_delta=delta,
        )

    if goal_type is GoalType.EXTRA_AMOUNT_BY_DATE and goal.target_date and goal.target_value is not None:
        target = to_money(goal.target_value, field="target_value")
        current = plan.extra_monthly
        days_left = days_between(today, goal.target_date)
        if days_left < 0:
            achieved = current >= target
            return GoalEvaluation(
                goal=goal,
                on_track=achieved,
                message=(
                    "Target extra payment reached by the deadline."
                    if achieved
                    else "Target extra payment was not reached by the deadline."
                ),
                days_delta=days_left,
            )
        gap = target - current
        if gap <= 0:
            return GoalEvaluation(
                goal=goal,
                on_track=True,
                message=f"Already at or above this extra payment goal with {days_left} day(s) left.",
                days_delta=days_left,
            )
        return GoalEvaluation(
            goal=goal,
            on_track=None,
            message=f"${gap} below the target extra payment with {days_left} day(s) left.",
            days_delta=days_left,
        )

    return GoalEvaluation(goal=goal, on_track=None, message="Goal has no automated evaluation.")


def pace_status(plan: PaymentPlan, target_date: date | None) -> tuple[PaceStatus, int | None]:
    """Compare the projected debt-free date with ``target_date``.

    Returns the status and the day delta (positive means ahead of the goal).
    """

    if target_date is None:
        return PaceStatus.NO_GOAL, None
    debt_free = plan.totals.debt_free_date
    if debt_free is None:
        return PaceStatus.BEHIND, None

    delta = days_between(debt_free, target_date)
    if delta >= PACE_WINDOW_DAYS:
        return PaceStatus.AHEAD, delta
    if delta <= -PACE_WINDOW_DAYS:
        return PaceStatus.BEHIND, delta
    return PaceStatus.ON_TRACK, delta


def parse_goal(raw: dict) -> Goal:
    """Build a ``Goal`` from a plain mapping such as a JSON payload."""

    try:
        goal_type = GoalType(str(raw.get("goal_type", "")).strip().lower())
    except ValueError as exc:
        raise InvalidInputError(f"Unknown goal type {raw.get('goal_type')!r}") from exc

    target_date = raw.get("target_date")
    if isinstance(target_date, str):
        try:
            target_date = date.fromisoformat(target_date)
        except ValueError as exc:
            raise InvalidInputError(f"target_date is not an ISO date: {target_date!r}") from exc

    value = raw.get("target_value")
    return Goal(
        label=str(raw.get("label") or goal_type.value),
        goal_type=goal_type,
        target_date=target_date,
        target_value=to_money(value, field="target_value") if value is not None else None,
    )
