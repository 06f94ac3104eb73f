"""Tests for the click command line interface."""

from __future__ import annotations

import csv
import json

import pytest
from click.testing import CliRunner

from debtplan.cli import cli


@pytest.fixture
def runner(monkeypatch):
    # Keep INFO records off the console so stdout stays parseable
    monkeypatch.setenv("DEBTPLAN_LOG_LEVEL", "WARNING")
    return CliRunner()


@pytest.fixture
def plan_file(tmp_path):
    path = tmp_path / "plan.json"
    path.write_text(
        json.dumps(
            {
                "strategy": "snowball",
                "extra_monthly": 100,
                "debts": [
                    {"id": "card", "name": "Card", "balance": 1200, "apr": 19.9, "min_payment": 45},
                    {"id": "loan", "name": "Loan", "balance": 800, "apr": 0, "min_payment": 40},
                ],
            }
        ),
        encoding="utf-8",
    )
    return path


@pytest.fixture
def csv_file(tmp_path):
    path = tmp_path / "debts.csv"
    path.write_text(
        "name,balance,apr,min_payment\nCard,1200,19.9,45\nLoan,800,0,40\n",
        encoding="utf-8",
    )
    return path


def test_simulate_prints_summary(runner, plan_file):
    result = runner.invoke(cli, ["simulate", str(plan_file), "--start-date", "2024-01-15"])

    assert result.exit_code == 0, result.output
    assert "Debt free in 12 months (2025-01-15)" in result.output
    assert "Total interest: $174.14" in result.output
    assert "month   6  2024-07-15  Loan" in result.output


def test_simulate_options_override_file_policy(runner, plan_file):
    result = runner.invoke(
        cli,
        ["simulate", str(plan_file), "--strategy", "avalanche", "--start-date", "2024-01-15", "--json"],
    )

    assert result.exit_code == 0, result.output
    payload = json.loads(result.output[result.output.index("{"):])
    assert payload["strategy"] == "avalanche"
    assert payload["extra_monthly"] == "100.00"


def test_simulate_reads_csv_and_writes_outputs(runner, csv_file, tmp_path):
    plan_csv = tmp_path / "out" / "plan.csv"
    chart = tmp_path / "out" / "chart.png"

    result = runner.invoke(
        cli,
        [
            "simulate", str(csv_file), "--extra", "100", "--start-date", "2024-01-15",
            "--csv", str(plan_csv), "--chart", str(chart),
        ],
    )

    assert result.exit_code == 0, result.output
    assert chart.exists()
    with plan_csv.open(newline="", encoding="utf-8") as fh:
        rows = list(csv.DictReader(fh))
    assert rows[-1]["total_interest"] == "174.14"


def test_simulate_reports_capped_plan(runner, csv_file):
    result = runner.invoke(cli, ["simulate", str(csv_file), "--max-months", "3"])

    assert result.exit_code == 0, result.output
    assert "Not debt free within 3 months" in result.output


def test_invalid_input_exits_with_message(runner, tmp_path):
    path = tmp_path / "empty.json"
    path.write_text('{"debts": []}', encoding="utf-8")

    result = runner.invoke(cli, ["simulate", str(path)])

    assert result.exit_code == 1
    assert "No payable debts" in result.output


def test_compare(runner, plan_file):
    result = runner.invoke(cli, ["compare", str(plan_file), "--start-date", "2024-01-15"])

    assert result.exit_code == 0, result.output
    assert "Lower interest: avalanche" in result.output
    assert "vs minimum only" in result.output


def test_export_writes_all_artifacts(runner, plan_file, tmp_path):
    out_dir = tmp_path / "export"

    result = runner.invoke(cli, ["export", str(plan_file), "--out", str(out_dir)])

    assert result.exit_code == 0, result.output
    assert {p.name for p in out_dir.iterdir()} == {"plan.csv", "schedule.csv", "payoff.png"}
