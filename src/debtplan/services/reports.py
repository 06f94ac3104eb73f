"""Ledger aggregation and payoff reporting."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Iterable, Mapping, Sequence

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
import matplotlib.ticker as mticker
from matplotlib.figure import Figure

from ..dates import add_months
from ..models.debt import Strategy
from ..models.plan import DebtResult, MonthSnapshot, PaymentPlan, PlanStatus, PlanTotals
from ..money import ZERO, monthly_interest
from .normalize import NormalizedInput


@dataclass(frozen=True, slots=True)
class PayoffEvent:
    """A debt reaching zero, in payoff order."""

    debt_id: str
    debt_name: str
    month: int
    date: date
    remaining: Decimal


class MilestoneKind(str, Enum):
    FIRST_PAYOFF = "first_payoff"
    REMAINING_75 = "remaining_75"
    REMAINING_50 = "remaining_50"
    REMAINING_25 = "remaining_25"
    DEBT_FREE = "debt_free"


_REMAINING_CHECKPOINTS = (
    (MilestoneKind.REMAINING_75, Decimal("0.75"), "75% Remaining"),
    (MilestoneKind.REMAINING_50, Decimal("0.50"), "50% Remaining"),
    (MilestoneKind.REMAINING_25, Decimal("0.25"), "25% Remaining"),
)

# Chart annotations for the remaining-balance checkpoints, phrased as progress.
_CHART_MARKERS = {
    MilestoneKind.REMAINING_75: ("25% Paid!", "#86EFAC"),
    MilestoneKind.REMAINING_50: ("50% Paid!", "#22C55E"),
    MilestoneKind.REMAINING_25: ("75% Paid!", "#16A34A"),
}


@dataclass(frozen=True, slots=True)
class Milestone:
    """A progress checkpoint on the way to debt free."""

    kind: MilestoneKind
    label: str
    month: int
    date: date
    remaining: Decimal


def summarize_ledger(
    months: Sequence[MonthSnapshot],
    *,
    normalized: NormalizedInput,
    one_time_by_debt: Mapping[str, Decimal],
    start_date: date,
    incomplete: bool,
) -> tuple[PlanTotals, tuple[DebtResult, ...]]:
    """Fold the monthly ledger into plan totals and per-debt rows."""

    interest_by_debt: dict[str, Decimal] = {d.id: ZERO for d in normalized.debts}
    paid_by_debt: dict[str, Decimal] = {d.id: ZERO for d in normalized.debts}
    payoff_by_debt: dict[str, int] = {}

    for snapshot in months:
        for line in snapshot.lines:
            interest_by_debt[line.debt_id] += line.interest
            paid_by_debt[line.debt_id] += line.payment
            if line.paid_off and line.debt_id not in payoff_by_debt:
                payoff_by_debt[line.debt_id] = snapshot.month

    results = []
    for debt in normalized.debts:
        lump = one_time_by_debt.get(debt.id, ZERO)
        starting = debt.balance - lump
        payoff_month = payoff_by_debt.get(debt.id)
        results.append(
            DebtResult(
                id=debt.id,
                name=debt.name,
                last4=debt.last4,
                original_balance=debt.balance,
                starting_balance=starting,
                one_time_applied=lump,
                min_payment=debt.min_payment,
                apr=debt.apr,
                payoff_month=payoff_month,
                payoff_date=add_months(start_date, payoff_month) if payoff_month else None,
                total_interest=interest_by_debt[debt.id],
                total_paid=paid_by_debt[debt.id],
                amortizes=starting <= 0 or debt.min_payment > monthly_interest(starting, debt.apr),
                due_day=debt.due_day,
            )
        )

    months_to_debt_free = months[-1].month if months else 0
    totals = PlanTotals(
        months_to_debt_free=months_to_debt_free,
        total_interest=sum((m.total_interest for m in months), ZERO),
        total_paid=sum((m.total_paid for m in months), ZERO),
        one_time_applied=sum(one_time_by_debt.values(), ZERO),
        incomplete=incomplete,
        debt_free_date=None if incomplete else add_months(start_date, months_to_debt_free),
        first_payoff_month=min(payoff_by_debt.values()) if payoff_by_debt else None,
    )
    return totals, tuple(results)


def build_payment_plan(
    *,
    strategy: Strategy,
    start_date: date,
    normalized: NormalizedInput,
    max_months: int,
    months: Sequence[MonthSnapshot],
    one_time_by_debt: Mapping[str, Decimal],
    status: PlanStatus,
    non_amortizing: Iterable[str] = (),
) -> PaymentPlan:
    """Assemble the immutable plan once the run reached a final state."""

    if not status.is_final:
        raise ValueError(f"Cannot build a plan from a run in state {status.value!r}")

    totals, results = summarize_ledger(
        months,
        normalized=normalized,
        one_time_by_debt=one_time_by_debt,
        start_date=start_date,
        incomplete=status is PlanStatus.CAPPED_INCOMPLETE,
    )
    return PaymentPlan(
        strategy=strategy,
        start_date=start_date,
        extra_monthly=normalized.extra_monthly,
        one_time_extra=normalized.one_time_extra,
        max_months=max_months,
        months=tuple(months),
        totals=totals,
        debts=results,
        status=status,
        non_amortizing=tuple(non_amortizing),
    )


def remaining_balance_series(plan: PaymentPlan) -> list[Decimal]:
    """Total remaining balance before month 1 and after every month."""

    opening = sum((d.original_balance for d in plan.debts), ZERO)
    return [opening] + [m.total_remaining for m in plan.months]


def payoff_order(plan: PaymentPlan) -> list[PayoffEvent]:
    """Debts in the order they were paid off (1-based months)."""

    remaining_at = {m.month: m.total_remaining for m in plan.months}
    paid = [d for d in plan.debts if d.payoff_month is not None]
    paid.sort(key=lambda d: d.payoff_month)
    return [
        PayoffEvent(
            debt_id=d.id,
            debt_name=d.name,
            month=d.payoff_month,
            date=d.payoff_date,
            remaining=remaining_at.get(d.payoff_month, ZERO),
        )
        for d in paid
    ]


def milestones(plan: PaymentPlan) -> list[Milestone]:
    """Checkpoints reached by the plan, ordered by month.

    The first payoff, the months total debt first falls to 75%, 50% and 25% of
    the opening balance, and the debt-free month when the plan completes. A
    checkpoint the plan never reaches is left out.
    """

    if not plan.months:
        return []

    found: list[Milestone] = []
    first = plan.totals.first_payoff_month
    if first is not None:
        snapshot = plan.months[first - 1]
        found.append(
            Milestone(
                kind=MilestoneKind.FIRST_PAYOFF,
                label="First Debt Paid",
                month=first,
                date=snapshot.date,
                remaining=snapshot.total_remaining,
            )
        )

    opening = remaining_balance_series(plan)[0]
    for kind, fraction, label in _REMAINING_CHECKPOINTS:
        threshold = opening * fraction
        hit = next((m for m in plan.months if m.total_remaining <= threshold), None)
        if hit is not None:
            found.append(
                Milestone(kind=kind, label=label, month=hit.month, date=hit.date, remaining=hit.total_remaining)
            )

    if not plan.totals.incomplete:
        last = plan.months[-1]
        found.append(
            Milestone(
                kind=MilestoneKind.DEBT_FREE,
                label="Debt Free!",
                month=last.month,
                date=last.date,
                remaining=ZERO,
            )
        )

    # stable: same-month checkpoints keep the order above
    found.sort(key=lambda m: m.month)
    return found


def schedule_summary(plan: PaymentPlan) -> tuple[str | None, Decimal, int]:
    """Return (debt_free_date_iso, total_interest, months)."""

    debt_free = plan.totals.debt_free_date
    return (
        debt_free.isoformat() if debt_free else None,
        plan.totals.total_interest,
        plan.totals.months_to_debt_free,
    )


def build_payoff_chart(plan: PaymentPlan) -> Figure:
    """Render total remaining balance over time with payoff milestones."""

    totals = [float(v) for v in remaining_balance_series(plan)]
    timeline = [plan.start_date.isoformat()] + [m.date.isoformat() for m in plan.months]

    fig, ax = plt.subplots(figsize=(10, 6))

    if len(totals) > 1:
        x_vals = list(range(len(totals)))

        ax.plot(x_vals, totals, marker="o", color="#4F46E5", linewidth=2.5, markersize=4)
        ax.fill_between(x_vals, totals, color="#E0E7FF", alpha=0.5)

        initial = totals[0]
        reached = milestones(plan)
        # x index 0 is the opening balance, so month N sits at x = N
        for milestone in reached:
            if milestone.kind in _CHART_MARKERS:
                label, color = _CHART_MARKERS[milestone.kind]
                ax.axvline(x=milestone.month, color=color, linestyle="--", alpha=0.6, linewidth=1.5)
                ax.annotate(
                    label,
                    (milestone.month, float(milestone.remaining)),
                    xytext=(10, 25),
                    textcoords="offset points",
                    fontsize=9,
                    color=color,
                    fontweight="bold",
                )

        for event in payoff_order(plan):
            ax.scatter([event.month], [float(event.remaining)], s=40, c="#F59E0B", zorder=4)

        for milestone in reached:
            if milestone.kind is MilestoneKind.DEBT_FREE:
                ax.scatter([milestone.month], [0], s=200, c="gold", marker="*", zorder=5, edgecolors="#F59E0B")
                ax.annotate(
                    "DEBT FREE!",
                    (milestone.month, 0),
                    xytext=(0, 25),
                    textcoords="offset points",
                    ha="center",
                    fontsize=12,
                    fontweight="bold",
                    color="#16A34A",
                )

        ax.grid(True, linestyle="--", alpha=0.3)
        ax.set_axisbelow(True)
        ax.set_title(
            f"Debt Payoff Projection ({plan.strategy.value.replace('_', ' ')})",
            fontsize=14,
            fontweight="bold",
            pad=15,
        )
        ax.set_ylabel("Remaining Balance ($)", fontsize=11)
        ax.set_xlabel("Month", fontsize=11)

        # Ticks before labels
        tick_step = max(1, len(x_vals) // 8)
        ax.set_xticks(x_vals[::tick_step])
        ax.set_xticklabels(timeline[::tick_step], rotation=45, ha="right")
        ax.yaxis.set_major_formatter(mticker.FuncFormatter(lambda x, p: f"${x:,.0f}"))

        months_label = (
            f"{plan.totals.months_to_debt_free}+ (capped)"
            if plan.totals.incomplete
            else str(plan.totals.months_to_debt_free)
        )
        textstr = (
            f"Starting Debt: ${initial:,.0f}\n"
            f"Months to Payoff: {months_label}\n"
            f"Total Interest: ${float(plan.totals.total_interest):,.0f}"
        )
        props = dict(boxstyle="round", facecolor="lavender", alpha=0.8)
        ax.text(0.02, 0.98, textstr, transform=ax.transAxes, fontsize=9, verticalalignment="top", bbox=props)
    else:
        ax.text(0.5, 0.5, "No payoff schedule", ha="center", va="center", fontsize=14, color="#666")
        ax.axis("off")

    fig.tight_layout()
    return fig


def payoff_chart_png(plan: PaymentPlan, output_path: Path) -> Path:
    """Write the payoff chart to ``output_path`` and return it."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig = build_payoff_chart(plan)
    fig.savefig(output_path, bbox_inches="tight", dpi=100)
    plt.close(fig)
    return output_path
