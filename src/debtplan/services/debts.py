"""Debt payoff simulator.

The single month-by-month engine behind every plan, export, comparison and
goal check. Each month:

1. (month 1 only) cascade the one-time extra through debts in strategy order
2. accrue ``apr / 12`` interest on each unpaid balance as it stood at the start
   of the month
3. pick the target debt by re-ordering against current balances
4. pay every unpaid debt its minimum, the target also gets the extra pool;
   payments are capped at ``balance + interest``
5. when a debt reaches zero, its minimum joins the extra pool from next month
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date
from decimal import Decimal
from typing import Any, Callable, Iterable

from ..dates import add_months, parse_start_date
from ..errors import InvalidInputError, NumericAnomalyError
from ..logging_config import get_logger
from ..models.debt import Debt, Strategy
from ..models.plan import DebtMonthLine, MonthSnapshot, PaymentPlan, PlanStatus
from ..money import CENT, ZERO, monthly_interest, to_decimal
from .normalize import normalize_inputs
from .ordering import DEFAULT_TIE_TOLERANCE, order_debts, target_debt
from .reports import build_payment_plan

logger = get_logger(__name__)

DEFAULT_MAX_MONTHS = 360


@dataclass(frozen=True, slots=True)
class SimulateRequest:
    """Everything a plan depends on. Nothing is read from ambient state."""

    debts: tuple[Any, ...]
    strategy: Strategy | str = Strategy.SNOWBALL
    extra_monthly: object = 0
    one_time_extra: object = 0
    start_date: date | str | None = None
    max_months: int = DEFAULT_MAX_MONTHS
    rollover: bool = True
    tie_tolerance: Decimal = DEFAULT_TIE_TOLERANCE
    require_min_payment: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "debts", tuple(self.debts))

    def with_changes(self, **changes: Any) -> "SimulateRequest":
        return replace(self, **changes)


def minimum_only_request(request: SimulateRequest) -> SimulateRequest:
    """Same debts paying only their minimums, no extra and no rollover."""

    return request.with_changes(extra_monthly=0, one_time_extra=0, rollover=False)


@dataclass(slots=True)
class _DebtState:
    debt: Debt
    balance: Decimal
    one_time_applied: Decimal = ZERO
    payoff_month: int | None = None

    @property
    def id(self) -> str:
        return self.debt.id

    @property
    def apr(self) -> Decimal:
        return self.debt.apr

    @property
    def min_payment(self) -> Decimal:
        return self.debt.min_payment


@dataclass(slots=True)
class _PlanRun:
    request: SimulateRequest
    clock: Callable[[], date]
    status: PlanStatus = PlanStatus.INITIALIZED
    months: list[MonthSnapshot] = field(default_factory=list)

    def _advance(self, status: PlanStatus) -> None:
        logger.debug("Plan run %s -> %s", self.status.value, status.value)
        self.status = status

    def execute(self) -> PaymentPlan:
        self._advance(PlanStatus.NORMALIZING)
        strategy = Strategy.parse(self.request.strategy)
        max_months = _validate_max_months(self.request.max_months)
        tie_tolerance = _validate_tolerance(self.request.tie_tolerance)
        start_date = parse_start_date(self.request.start_date, today=self.clock())
        normalized = normalize_inputs(
            self.request.debts,
            extra_monthly=self.request.extra_monthly,
            one_time_extra=self.request.one_time_extra,
            require_min_payment=self.request.require_min_payment,
        )

        self._advance(PlanStatus.SIMULATING)
        logger.debug(
            "Simulating %d debts",
            len(normalized.debts),
            extra={
                "strategy": strategy.value,
                "extra_monthly": str(normalized.extra_monthly),
                "one_time_extra": str(normalized.one_time_extra),
                "max_months": max_months,
            },
        )
        states = [_DebtState(debt=d, balance=d.balance) for d in normalized.debts]
        pool = normalized.extra_monthly
        non_amortizing: tuple[str, ...] = ()

        for month in range(1, max_months + 1):
            if month == 1:
                _cascade_one_time(states, normalized.one_time_extra, strategy, tie_tolerance)
                non_amortizing = _find_non_amortizing(states)
            snapshot, freed = self._simulate_month(
                month, states, pool, strategy, tie_tolerance, start_date
            )
            self.months.append(snapshot)
            if self.request.rollover:
                pool += freed
            if snapshot.total_remaining <= 0:
                break

        remaining = sum((s.balance for s in states), ZERO)
        self._advance(PlanStatus.COMPLETE if remaining <= 0 else PlanStatus.CAPPED_INCOMPLETE)
        plan = build_payment_plan(
            strategy=strategy,
            start_date=start_date,
            normalized=normalized,
            max_months=max_months,
            months=self.months,
            one_time_by_debt={s.id: s.one_time_applied for s in states},
            status=self.status,
            non_amortizing=non_amortizing,
        )
        _log_outcome(plan)
        return plan

    def _simulate_month(
        self,
        month: int,
        states: list[_DebtState],
        pool: Decimal,
        strategy: Strategy,
        tie_tolerance: Decimal,
        start_date: date,
    ) -> tuple[MonthSnapshot, Decimal]:
        target = target_debt(states, strategy, tie_tolerance=tie_tolerance)
        lines: list[DebtMonthLine] = []
        freed = ZERO

        for state in states:
            lump = state.one_time_applied if month == 1 else ZERO
            if state.balance <= 0:
                cleared_now = month == 1 and state.payoff_month is None and lump > 0
                if cleared_now:
                    state.payoff_month = month
                    freed += state.min_payment
                lines.append(
                    DebtMonthLine(
                        debt_id=state.id,
                        starting_balance=ZERO,
                        payment=ZERO,
                        interest=ZERO,
                        principal=ZERO,
                        ending_balance=ZERO,
                        paid_off=cleared_now,
                        one_time_applied=lump,
                    )
                )
                continue

            opening = state.balance
            interest = monthly_interest(opening, state.apr)
            is_target = state is target
            wanted = state.min_payment + (pool if is_target else ZERO)
            payment = min(wanted, opening + interest)
            principal = payment - interest
            closing = _close_balance(state, principal=principal, month=month)

            paid_off = closing == 0 and state.payoff_month is None
            if paid_off:
                state.payoff_month = month
                freed += state.min_payment

            lines.append(
                DebtMonthLine(
                    debt_id=state.id,
                    starting_balance=opening,
                    payment=payment,
                    interest=interest,
                    principal=principal,
                    ending_balance=closing,
                    targeted=is_target,
                    paid_off=paid_off,
                    one_time_applied=lump,
                )
            )

        snapshot = MonthSnapshot(
            month=month,
            date=add_months(start_date, month),
            lines=tuple(lines),
            extra_pool=pool,
            total_paid=sum((line.payment for line in lines), ZERO),
            total_interest=sum((line.interest for line in lines), ZERO),
            total_principal=sum((line.principal for line in lines), ZERO),
            total_remaining=sum((s.balance for s in states), ZERO),
        )
        return snapshot, freed


def _close_balance(state: _DebtState, *, principal: Decimal, month: int) -> Decimal:
    """Apply principal to the balance; a sub-cent overshoot rounds to zero.

    Raises:
        NumericAnomalyError: the payment overshoots the balance by more than a cent
    """

    closing = state.balance - principal
    if closing < 0:
        if closing < -CENT:
            raise NumericAnomalyError(f"Debt {state.id!r} would end month {month} at {closing}")
        closing = ZERO
    state.balance = closing
    return closing


def _validate_max_months(value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInputError(f"max_months must be an integer, got {value!r}")
    if value <= 0:
        raise InvalidInputError(f"max_months must be positive, got {value}")
    return value


def _validate_tolerance(value: object) -> Decimal:
    tolerance = to_decimal(value, field="tie_tolerance")
    if tolerance < 0:
        raise InvalidInputError("tie_tolerance cannot be negative")
    return tolerance


def _cascade_one_time(
    states: list[_DebtState], amount: Decimal, strategy: Strategy, tie_tolerance: Decimal
) -> None:
    """Spend the lump sum on debts in strategy order before any interest accrues."""

    remaining = amount
    for state in order_debts(states, strategy, tie_tolerance=tie_tolerance):
        if remaining <= 0:
            break
        applied = min(remaining, state.balance)
        state.balance -= applied
        state.one_time_applied = applied
        remaining -= applied


def _find_non_amortizing(states: Iterable[_DebtState]) -> tuple[str, ...]:
    flagged = tuple(
        s.id for s in states if s.balance > 0 and s.min_payment <= monthly_interest(s.balance, s.apr)
    )
    for debt_id in flagged:
        logger.warning("Minimum payment never covers interest", extra={"debt_id": debt_id})
    return flagged


def _log_outcome(plan: PaymentPlan) -> None:
    if plan.totals.incomplete:
        remaining = plan.months[-1].total_remaining if plan.months else ZERO
        logger.warning(
            "Plan did not reach zero within %d months",
            plan.max_months,
            extra={"strategy": plan.strategy.value, "remaining": str(remaining)},
        )
        return
    logger.info(
        "Plan complete in %d months",
        plan.totals.months_to_debt_free,
        extra={
            "strategy": plan.strategy.value,
            "total_interest": str(plan.totals.total_interest),
            "total_paid": str(plan.totals.total_paid),
        },
    )


def simulate(request: SimulateRequest, *, clock: Callable[[], date] = date.today) -> PaymentPlan:
    """Run one payoff simulation.

    Raises:
        InvalidInputError: the request is rejected before any month is simulated
    """
    return _PlanRun(request=request, clock=clock).execute()


def simulate_debts(
    debts: Iterable[Any],
    *,
    strategy: Strategy | str = Strategy.SNOWBALL,
    extra_monthly: object = 0,
    one_time_extra: object = 0,
    start_date: date | str | None = None,
    max_months: int = DEFAULT_MAX_MONTHS,
    clock: Callable[[], date] = date.today,
) -> PaymentPlan:
    """Keyword convenience wrapper around :func:`simulate`."""
    request = SimulateRequest(
        debts=tuple(debts),
        strategy=strategy,
        extra_monthly=extra_monthly,
        one_time_extra=one_time_extra,
        start_date=start_date,
        max_months=max_months,
    )
    return simulate(request, clock=clock)


def snowball_schedule(*, debts: Iterable[Any], surplus: object, **options: Any) -> PaymentPlan:
    """Return a plan prioritizing smallest balances first."""
    return simulate_debts(debts, strategy=Strategy.SNOWBALL, extra_monthly=surplus, **options)


def avalanche_schedule(*, debts: Iterable[Any], surplus: object, **options: Any) -> PaymentPlan:
    """Return a plan prioritizing highest APR first."""
    return simulate_debts(debts, strategy=Strategy.AVALANCHE, extra_monthly=surplus, **options)


__all__ = [
    "DEFAULT_MAX_MONTHS",
    "SimulateRequest",
    "avalanche_schedule",
    "minimum_only_request",
    "simulate",
    "simulate_debts",
    "snowball_schedule",
]
