"""Engine-driven payoff recommendations.

Every impact figure comes from re-running the simulator, never from rules of
thumb.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import ROUND_FLOOR, Decimal
from enum import Enum
from typing import Any, Callable

from ..logging_config import get_logger
from ..models.debt import Strategy
from ..money import ZERO
from .comparison import compare_strategies, what_if
from .debts import SimulateRequest, simulate

logger = get_logger(__name__)

ACCELERATE_MAX_EXTRA = Decimal("100")
ACCELERATE_MIN_DEBT = Decimal("5000")
ACCELERATE_CAP = Decimal("50")
CONSOLIDATION_MIN_DEBTS = 5
CONSOLIDATION_MIN_APR = Decimal("0.12")
MAX_RECOMMENDATIONS = 4


class RecommendationType(str, Enum):
    WARNING = "warning"
    ACCELERATE = "accelerate"
    STRATEGY = "strategy"
    CONSOLIDATION = "consolidation"


@dataclass(frozen=True, slots=True)
class Recommendation:
    type: RecommendationType
    text: str
    impact: dict[str, Any] = field(default_factory=dict)
    action: dict[str, Any] = field(default_factory=dict)


def _alternative(strategy: Strategy) -> Strategy:
    return Strategy.SNOWBALL if strategy is Strategy.AVALANCHE else Strategy.AVALANCHE


def generate_recommendations(
    request: SimulateRequest,
    *,
    clock: Callable[[], date] = date.today,
    limit: int = MAX_RECOMMENDATIONS,
) -> list[Recommendation]:
    """Suggestions for ``request``, most urgent first."""

    plan = simulate(request, clock=clock)
    recommendations: list[Recommendation] = []
    total_debt = sum((d.original_balance for d in plan.debts), ZERO)

    for debt_id in plan.non_amortizing:
        debt = plan.debt(debt_id)
        recommendations.append(
            Recommendation(
                type=RecommendationType.WARNING,
                text=(
                    f"{debt.label}: the ${debt.min_payment} minimum does not cover monthly "
                    "interest, so this balance grows unless it receives extra payment."
                ),
                action={"type": "increase_payment", "target_debt_id": debt_id},
            )
        )

    if plan.extra_monthly < ACCELERATE_MAX_EXTRA and total_debt > ACCELERATE_MIN_DEBT:
        suggested = min(ACCELERATE_CAP, (total_debt / 100).quantize(Decimal(1), rounding=ROUND_FLOOR))
        result = what_if(request, clock=clock, extra_monthly=plan.extra_monthly + suggested)
        months_saved = -result.months_delta
        interest_saved = -result.interest_delta
        if months_saved > 0 or interest_saved > 0:
            recommendations.append(
                Recommendation(
                    type=RecommendationType.ACCELERATE,
                    text=f"Add ${suggested} per month to finish {months_saved} month(s) sooner.",
                    impact={"months_saved": months_saved, "interest_saved": interest_saved},
                    action={"type": "increase_payment", "amount": suggested},
                )
            )

    if len(plan.debts) > 1:
        other = _alternative(plan.strategy)
        comparison = compare_strategies(request, plan.strategy, other, clock=clock)
        if comparison.lower_interest == other.value:
            recommendations.append(
                Recommendation(
                    type=RecommendationType.STRATEGY,
                    text=(
                        f"Switching to {other.value} saves ${comparison.interest_difference} "
                        "in interest."
                    ),
                    impact={
                        "interest_saved": comparison.interest_difference,
                        "months_saved": comparison.first.totals.months_to_debt_free
                        - comparison.second.totals.months_to_debt_free,
                    },
                    action={"type": "switch_strategy", "strategy": other.value},
                )
            )

    if len(plan.debts) > CONSOLIDATION_MIN_DEBTS:
        average_apr = sum((d.apr for d in plan.debts), Decimal(0)) / len(plan.debts)
        if average_apr > CONSOLIDATION_MIN_APR:
            recommendations.append(
                Recommendation(
                    type=RecommendationType.CONSOLIDATION,
                    text=(
                        f"With {len(plan.debts)} debts at {average_apr * 100:.1f}% average APR, "
                        "a consolidation loan could simplify payments and lower interest."
                    ),
                    impact={"average_apr": average_apr},
                )
            )

    logger.debug("Generated %d recommendations", len(recommendations))
    return recommendations[:limit]
