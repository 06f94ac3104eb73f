"""CSV export helpers for payoff plans."""

from __future__ import annotations

import csv
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Iterable

from ..models.plan import PaymentPlan
from ..money import ZERO, to_money

PLAN_HEADERS = [
    "index",
    "debt",
    "balance",
    "min_payment",
    "apr",
    "monthly_rate",
    "total_payment",
    "total_interest",
    "months_to_payoff",
    "payoff_date",
    "due_day",
]

SCHEDULE_HEADERS = [
    "month",
    "date",
    "debt_id",
    "starting_balance",
    "one_time_applied",
    "payment",
    "interest",
    "principal",
    "ending_balance",
    "targeted",
    "paid_off",
]


def _serialize_value(value):
    if value is None:
        return ""
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, bool):
        return "yes" if value else "no"
    return str(value)


def _percent(rate: Decimal, places: str) -> Decimal:
    return (rate * 100).quantize(Decimal(places))


def plan_rows(plan: PaymentPlan) -> list[dict[str, str]]:
    """One row per debt plus a trailing TOTALS row."""

    rows: list[dict[str, str]] = []
    for index, debt in enumerate(plan.debts, start=1):
        rows.append(
            {
                "index": str(index),
                "debt": debt.label,
                "balance": _serialize_value(debt.original_balance),
                "min_payment": _serialize_value(debt.min_payment),
                "apr": _serialize_value(_percent(debt.apr, "0.01")),
                "monthly_rate": _serialize_value(_percent(debt.monthly_rate, "0.0001")),
                "total_payment": _serialize_value(debt.total_paid + debt.one_time_applied),
                "total_interest": _serialize_value(debt.total_interest),
                "months_to_payoff": _serialize_value(debt.payoff_month),
                "payoff_date": _serialize_value(debt.payoff_date),
                "due_day": _serialize_value(debt.due_day),
            }
        )

    rows.append(
        {
            "index": "",
            "debt": "TOTALS",
            "balance": _serialize_value(sum((d.original_balance for d in plan.debts), ZERO)),
            "min_payment": _serialize_value(sum((d.min_payment for d in plan.debts), ZERO)),
            "apr": "",
            "monthly_rate": "",
            "total_payment": _serialize_value(to_money(plan.totals.total_outlay)),
            "total_interest": _serialize_value(plan.totals.total_interest),
            "months_to_payoff": _serialize_value(plan.totals.months_to_debt_free),
            "payoff_date": _serialize_value(plan.totals.debt_free_date),
            "due_day": "",
        }
    )
    return rows


def schedule_rows(plan: PaymentPlan) -> list[dict[str, str]]:
    """One row per simulated month and debt, in ledger order."""

    rows: list[dict[str, str]] = []
    for snapshot in plan.months:
        for line in snapshot.lines:
            rows.append(
                {
                    "month": str(snapshot.month),
                    "date": _serialize_value(snapshot.date),
                    "debt_id": line.debt_id,
                    "starting_balance": _serialize_value(line.starting_balance),
                    "one_time_applied": _serialize_value(line.one_time_applied),
                    "payment": _serialize_value(line.payment),
                    "interest": _serialize_value(line.interest),
                    "principal": _serialize_value(line.principal),
                    "ending_balance": _serialize_value(line.ending_balance),
                    "targeted": _serialize_value(line.targeted),
                    "paid_off": _serialize_value(line.paid_off),
                }
            )
    return rows


def _write_rows(rows: Iterable[dict[str, str]], headers: list[str], output_path: Path) -> Path:
    output_path.parent.mkdir(parents=True, exist_ok=True)

    # Use newline='' for csv on Windows
    with output_path.open("w", newline="", encoding="utf-8") as fh:
        writer = csv.DictWriter(
            fh, fieldnames=headers, extrasaction="ignore", quoting=csv.QUOTE_MINIMAL
        )
        writer.writeheader()
        for row in rows:
            writer.writerow(row)

    return output_path


def export_plan_csv(*, plan: PaymentPlan, output_path: Path) -> Path:
    """Write the per-debt summary to CSV at ``output_path``.

    Columns are deterministic (``PLAN_HEADERS``). Returns the path written.
    """

    return _write_rows(plan_rows(plan), PLAN_HEADERS, output_path)


def export_schedule_csv(*, plan: PaymentPlan, output_path: Path) -> Path:
    """Write the month-by-month ledger to CSV at ``output_path``."""

    return _write_rows(schedule_rows(plan), SCHEDULE_HEADERS, output_path)
