"""Side-by-side plan comparisons built on repeated simulation."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Callable

from ..models.debt import Strategy
from ..models.plan import PaymentPlan
from .debts import SimulateRequest, minimum_only_request, simulate

BOTH = "both"


@dataclass(frozen=True, slots=True)
class StrategyComparison:
    """Two strategies run against the same debts and policy."""

    first: PaymentPlan
    second: PaymentPlan
    faster: str
    lower_interest: str
    months_difference: int
    interest_difference: Decimal


@dataclass(frozen=True, slots=True)
class MinimumComparison:
    """A plan measured against paying minimums only."""

    plan: PaymentPlan
    baseline: PaymentPlan
    months_saved: int
    interest_saved: Decimal

    @property
    def plan_debt_free_date(self) -> date | None:
        return self.plan.totals.debt_free_date

    @property
    def baseline_debt_free_date(self) -> date | None:
        return self.baseline.totals.debt_free_date


@dataclass(frozen=True, slots=True)
class WhatIfResult:
    """Deltas are ``scenario - baseline``; negative means the scenario is better."""

    baseline: PaymentPlan
    scenario: PaymentPlan
    months_delta: int
    interest_delta: Decimal
    paid_delta: Decimal


def _pick(first: PaymentPlan, second: PaymentPlan, first_value, second_value) -> str:
    if first_value == second_value:
        return BOTH
    winner = first if first_value < second_value else second
    return winner.strategy.value


def compare_strategies(
    request: SimulateRequest,
    first: Strategy | str = Strategy.SNOWBALL,
    second: Strategy | str = Strategy.AVALANCHE,
    *,
    clock: Callable[[], date] = date.today,
) -> StrategyComparison:
    """Simulate ``request`` under two strategies and report which one wins."""

    plan_a = simulate(request.with_changes(strategy=Strategy.parse(first)), clock=clock)
    plan_b = simulate(request.with_changes(strategy=Strategy.parse(second)), clock=clock)
    months_a = plan_a.totals.months_to_debt_free
    months_b = plan_b.totals.months_to_debt_free
    return StrategyComparison(
        first=plan_a,
        second=plan_b,
        faster=_pick(plan_a, plan_b, months_a, months_b),
        lower_interest=_pick(plan_a, plan_b, plan_a.totals.total_interest, plan_b.totals.total_interest),
        months_difference=abs(months_a - months_b),
        interest_difference=abs(plan_a.totals.total_interest - plan_b.totals.total_interest),
    )


def compare_to_minimum_only(
    request: SimulateRequest, *, clock: Callable[[], date] = date.today
) -> MinimumComparison:
    """How much the request's extra money saves over paying minimums only."""

    plan = simulate(request, clock=clock)
    baseline = simulate(minimum_only_request(request), clock=clock)
    return MinimumComparison(
        plan=plan,
        baseline=baseline,
        months_saved=baseline.totals.months_to_debt_free - plan.totals.months_to_debt_free,
        interest_saved=baseline.totals.total_interest - plan.totals.total_interest,
    )


def what_if(
    request: SimulateRequest,
    *,
    clock: Callable[[], date] = date.today,
    **overrides: Any,
) -> WhatIfResult:
    """Re-run ``request`` with ``overrides`` applied and diff the outcomes."""

    baseline = simulate(request, clock=clock)
    scenario = simulate(request.with_changes(**overrides), clock=clock)
    return WhatIfResult(
        baseline=baseline,
        scenario=scenario,
        months_delta=scenario.totals.months_to_debt_free - baseline.totals.months_to_debt_free,
        interest_delta=scenario.totals.total_interest - baseline.totals.total_interest,
        paid_delta=scenario.totals.total_outlay - baseline.totals.total_outlay,
    )
