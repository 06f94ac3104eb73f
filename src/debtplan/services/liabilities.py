"""Boundary between stored liabilities/settings and the payoff engine."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Iterable, Protocol

from ..config import BaseConfig
from ..logging_config import get_logger
from ..models.debt import Strategy
from ..models.liability import Liability
from ..money import ZERO
from .debts import SimulateRequest
from .normalize import clamp_money

logger = get_logger(__name__)

STRATEGY_KEY = "plan.strategy"
EXTRA_MONTHLY_KEY = "plan.extra_monthly"
ONE_TIME_EXTRA_KEY = "plan.one_time_extra"


class LiabilitySource(Protocol):
    def list_all(self, *, user_id: int) -> list[Liability]: ...


class SettingsSource(Protocol):
    def get_value(self, key: str, *, user_id: int, default: str | None = None) -> str | None: ...


@dataclass(frozen=True, slots=True)
class PlanPolicy:
    """A user's saved payoff policy."""

    strategy: Strategy = Strategy.SNOWBALL
    extra_monthly: Decimal = ZERO
    one_time_extra: Decimal = ZERO


def debts_from_liabilities(liabilities: Iterable[Liability]) -> list[dict]:
    """Map stored rows onto raw debt records.

    APR is passed through as stored; the normalizer reads values above 1 as
    percentages. Excluded rows are kept so the normalizer reports them.
    """

    return [
        {
            "id": str(item.id) if item.id is not None else None,
            "name": item.name,
            "balance": item.balance,
            "apr": item.apr,
            "min_payment": item.minimum_payment,
            "last4": item.last4,
            "due_day": item.due_day,
            "include": item.include,
        }
        for item in liabilities
    ]


def load_policy(settings: SettingsSource, *, user_id: int) -> PlanPolicy:
    """Read the saved policy, falling back to defaults for missing keys."""

    strategy = settings.get_value(STRATEGY_KEY, user_id=user_id)
    return PlanPolicy(
        strategy=Strategy.parse(strategy) if strategy else Strategy.SNOWBALL,
        extra_monthly=clamp_money(
            settings.get_value(EXTRA_MONTHLY_KEY, user_id=user_id), field=EXTRA_MONTHLY_KEY
        ),
        one_time_extra=clamp_money(
            settings.get_value(ONE_TIME_EXTRA_KEY, user_id=user_id), field=ONE_TIME_EXTRA_KEY
        ),
    )


def build_request_for_user(
    *,
    user_id: int,
    liabilities: LiabilitySource,
    settings: SettingsSource,
    config: BaseConfig | None = None,
    start_date: date | None = None,
) -> SimulateRequest:
    """Assemble a fully explicit ``SimulateRequest`` from stored state."""

    policy = load_policy(settings, user_id=user_id)
    debts = debts_from_liabilities(liabilities.list_all(user_id=user_id))
    defaults = (config or BaseConfig()).engine_defaults()
    logger.debug(
        "Built request for user",
        extra={"user_id": user_id, "debts": len(debts), "strategy": policy.strategy.value},
    )
    return SimulateRequest(
        debts=tuple(debts),
        strategy=policy.strategy,
        extra_monthly=policy.extra_monthly,
        one_time_extra=policy.one_time_extra,
        start_date=start_date,
        **defaults,
    )
