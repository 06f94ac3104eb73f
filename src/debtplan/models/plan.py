"""Immutable payoff plan produced by the simulator."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any

from .debt import Strategy


class PlanStatus(str, Enum):
    """Lifecycle of a single plan run."""

    INITIALIZED = "initialized"
    NORMALIZING = "normalizing"
    SIMULATING = "simulating"
    COMPLETE = "complete"
    CAPPED_INCOMPLETE = "capped_incomplete"

    @property
    def is_final(self) -> bool:
        return self in (PlanStatus.COMPLETE, PlanStatus.CAPPED_INCOMPLETE)


@dataclass(frozen=True, slots=True)
class DebtMonthLine:
    """What happened to one debt during one simulated month."""

    debt_id: str
    starting_balance: Decimal
    payment: Decimal
    interest: Decimal
    principal: Decimal
    ending_balance: Decimal
    targeted: bool = False
    paid_off: bool = False
    one_time_applied: Decimal = Decimal("0.00")


@dataclass(frozen=True, slots=True)
class MonthSnapshot:
    """One ledger entry; ``month`` is 1-based."""

    month: int
    date: date
    lines: tuple[DebtMonthLine, ...]
    extra_pool: Decimal
    total_paid: Decimal
    total_interest: Decimal
    total_principal: Decimal
    total_remaining: Decimal

    def line_for(self, debt_id: str) -> DebtMonthLine:
        for line in self.lines:
            if line.debt_id == debt_id:
                return line
        raise KeyError(debt_id)


@dataclass(frozen=True, slots=True)
class PlanTotals:
    """Summary totals folded from the ledger."""

    months_to_debt_free: int
    total_interest: Decimal
    total_paid: Decimal
    one_time_applied: Decimal
    incomplete: bool
    debt_free_date: date | None = None
    first_payoff_month: int | None = None

    @property
    def total_outlay(self) -> Decimal:
        """Everything that left the borrower's pocket, lump sum included."""

        return self.total_paid + self.one_time_applied


@dataclass(frozen=True, slots=True)
class DebtResult:
    """Per-debt result row."""

    id: str
    name: str
    last4: str | None
    original_balance: Decimal
    starting_balance: Decimal
    one_time_applied: Decimal
    min_payment: Decimal
    apr: Decimal
    payoff_month: int | None
    payoff_date: date | None
    total_interest: Decimal
    total_paid: Decimal
    amortizes: bool = True
    due_day: int | None = None

    @property
    def label(self) -> str:
        return f"{self.name} ({self.last4})" if self.last4 else self.name

    @property
    def monthly_rate(self) -> Decimal:
        return self.apr / 12


@dataclass(frozen=True, slots=True)
class PaymentPlan:
    """Result of one simulation run; a pure function of its request."""

    strategy: Strategy
    start_date: date
    extra_monthly: Decimal
    one_time_extra: Decimal
    max_months: int
    months: tuple[MonthSnapshot, ...]
    totals: PlanTotals
    debts: tuple[DebtResult, ...]
    status: PlanStatus
    non_amortizing: tuple[str, ...] = field(default_factory=tuple)

    @property
    def incomplete(self) -> bool:
        return self.totals.incomplete

    def debt(self, debt_id: str) -> DebtResult:
        for result in self.debts:
            if result.id == debt_id:
                return result
        raise KeyError(debt_id)

    def to_dict(self) -> dict[str, Any]:
        """Plain, JSON-ready representation (money as strings)."""

        def _date(value: date | None) -> str | None:
            return value.isoformat() if value else None

        return {
            "strategy": self.strategy.value,
            "start_date": self.start_date.isoformat(),
            "extra_monthly": str(self.extra_monthly),
            "one_time_extra": str(self.one_time_extra),
            "max_months": self.max_months,
            "status": self.status.value,
            "non_amortizing": list(self.non_amortizing),
            "totals": {
                "months_to_debt_free": self.totals.months_to_debt_free,
                "total_interest": str(self.totals.total_interest),
                "total_paid": str(self.totals.total_paid),
                "one_time_applied": str(self.totals.one_time_applied),
                "incomplete": self.totals.incomplete,
                "debt_free_date": _date(self.totals.debt_free_date),
                "first_payoff_month": self.totals.first_payoff_month,
            },
            "debts": [
                {
                    "id": d.id,
                    "name": d.name,
                    "last4": d.last4,
                    "starting_balance": str(d.starting_balance),
                    "one_time_applied": str(d.one_time_applied),
                    "apr": str(d.apr),
                    "min_payment": str(d.min_payment),
                    "payoff_month": d.payoff_month,
                    "payoff_date": _date(d.payoff_date),
                    "total_interest": str(d.total_interest),
                    "total_paid": str(d.total_paid),
                    "amortizes": d.amortizes,
                }
                for d in self.debts
            ],
            "months": [
                {
                    "month": m.month,
                    "date": m.date.isoformat(),
                    "extra_pool": str(m.extra_pool),
                    "total_paid": str(m.total_paid),
                    "total_interest": str(m.total_interest),
                    "total_principal": str(m.total_principal),
                    "total_remaining": str(m.total_remaining),
                    "payments": [
                        {
                            "debt_id": line.debt_id,
                            "payment": str(line.payment),
                            "interest": str(line.interest),
                            "principal": str(line.principal),
                            "ending_balance": str(line.ending_balance),
                            "targeted": line.targeted,
                        }
                        for line in m.lines
                    ],
                }
                for m in self.months
            ],
        }
