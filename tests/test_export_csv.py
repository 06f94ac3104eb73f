"""Tests for plan and schedule CSV exports."""

from __future__ import annotations

import csv

import pytest

from debtplan.services import export_csv
from debtplan.services.debts import SimulateRequest, simulate


@pytest.fixture
def plan(debt, start_date):
    return simulate(
        SimulateRequest(
            debts=(debt("card", 1200, 0.199, 45, last4="4321"), debt("loan", 800, 0, 40, due_day=3)),
            extra_monthly=100,
            start_date=start_date,
        )
    )


def test_plan_rows_include_totals(plan):
    rows = export_csv.plan_rows(plan)

    assert [r["debt"] for r in rows] == ["Card (4321)", "Loan", "TOTALS"]
    card, loan, totals = rows
    assert card["apr"] == "19.90"
    assert card["monthly_rate"] == "1.6583"
    assert card["total_payment"] == "1374.14"
    assert card["months_to_payoff"] == "12"
    assert loan["balance"] == "800.00"
    assert loan["payoff_date"] == "2024-07-15"
    assert loan["due_day"] == "3"
    assert card["due_day"] == ""
    assert totals["balance"] == "2000.00"
    assert totals["total_interest"] == "174.14"
    assert totals["total_payment"] == "2174.14"
    assert totals["months_to_payoff"] == "12"
    assert totals["payoff_date"] == "2025-01-15"


def test_schedule_rows_cover_every_month_and_debt(plan):
    rows = export_csv.schedule_rows(plan)

    assert len(rows) == 24
    assert rows[0]["month"] == "1"
    assert rows[0]["debt_id"] == "card"
    assert rows[1]["targeted"] == "yes"
    assert rows[-1]["ending_balance"] == "0.00"


def test_export_plan_csv_creates_file(tmp_path, plan):
    output_path = tmp_path / "nested" / "plan.csv"

    written = export_csv.export_plan_csv(plan=plan, output_path=output_path)

    assert written == output_path
    with output_path.open(newline="", encoding="utf-8") as fh:
        reader = csv.DictReader(fh)
        rows = list(reader)
    assert reader.fieldnames == export_csv.PLAN_HEADERS
    assert len(rows) == 3
    assert rows[-1]["debt"] == "TOTALS"


def test_export_schedule_csv_headers_are_deterministic(tmp_path, plan):
    output_path = export_csv.export_schedule_csv(plan=plan, output_path=tmp_path / "schedule.csv")

    with output_path.open(newline="", encoding="utf-8") as fh:
        header = next(csv.reader(fh))
    assert header == export_csv.SCHEDULE_HEADERS
