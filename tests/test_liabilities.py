"""Tests for stored liabilities, user settings and request building."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from debtplan.config import TestConfig
from debtplan.infra.repositories import SQLModelLiabilityRepository, SQLModelSettingsRepository
from debtplan.models.debt import Strategy
from debtplan.services.debts import simulate
from debtplan.services.liabilities import (
    EXTRA_MONTHLY_KEY,
    STRATEGY_KEY,
    build_request_for_user,
    debts_from_liabilities,
    load_policy,
)
from debtplan.services.normalize import normalize_inputs


def test_liability_repository_is_user_scoped(session_factory, liability_factory):
    liability_factory(name="Visa", user_id=1)
    liability_factory(name="Other user's card", user_id=2)
    liability_factory(name="Paid off", balance=0, user_id=1)
    repo = SQLModelLiabilityRepository(session_factory)

    assert [l.name for l in repo.list_all(user_id=1)] == ["Visa", "Paid off"]


def test_settings_repository(session_factory):
    repo = SQLModelSettingsRepository(session_factory)

    repo.set(STRATEGY_KEY, "avalanche", user_id=1)
    repo.set(STRATEGY_KEY, "snowball", user_id=2)
    repo.set(STRATEGY_KEY, "highest_balance", user_id=1, description="changed")

    assert repo.get_value(STRATEGY_KEY, user_id=1) == "highest_balance"
    assert repo.get_value(STRATEGY_KEY, user_id=2) == "snowball"
    assert repo.get_value("missing", user_id=1, default="x") == "x"

    repo.delete(STRATEGY_KEY, user_id=1)
    assert repo.get(STRATEGY_KEY, user_id=1) is None


def test_debts_from_liabilities_keeps_percentage_apr(liability_factory):
    stored = liability_factory(name="Visa", balance=1200.0, apr=19.9, minimum_payment=45.0, last4="4321")

    (record,) = debts_from_liabilities([stored])

    assert record["id"] == str(stored.id)
    assert record["apr"] == 19.9
    assert record["min_payment"] == 45.0
    assert record["include"] is True


def test_load_policy_defaults(session_factory):
    policy = load_policy(SQLModelSettingsRepository(session_factory), user_id=1)

    assert policy.strategy is Strategy.SNOWBALL
    assert policy.extra_monthly == Decimal("0.00")
    assert policy.one_time_extra == Decimal("0.00")


def test_build_request_for_user(session_factory, liability_factory):
    liability_factory(name="Card", balance=1200.0, apr=19.9, minimum_payment=45.0)
    liability_factory(name="Loan", balance=800.0, apr=0.0, minimum_payment=40.0)
    liability_factory(name="Closed", balance=300.0, apr=10.0, minimum_payment=20.0, include=False)
    liability_factory(name="Neighbour", balance=999.0, user_id=2)
    settings = SQLModelSettingsRepository(session_factory)
    settings.set(STRATEGY_KEY, "avalanche", user_id=1)
    settings.set(EXTRA_MONTHLY_KEY, "100", user_id=1)

    request = build_request_for_user(
        user_id=1,
        liabilities=SQLModelLiabilityRepository(session_factory),
        settings=settings,
        config=TestConfig(),
        start_date=date(2024, 1, 15),
    )

    assert request.strategy is Strategy.AVALANCHE
    assert request.extra_monthly == Decimal("100.00")
    assert request.max_months == 360
    assert len(request.debts) == 3
    dropped = normalize_inputs(request.debts).dropped
    assert [(d.name, d.reason) for d in dropped] == [("Closed", "excluded")]

    plan = simulate(request)
    assert [d.name for d in plan.debts] == ["Card", "Loan"]
    assert plan.debt(request.debts[0]["id"]).apr == Decimal("0.199")
    assert plan.months[0].line_for(request.debts[0]["id"]).targeted
