"""Debt record normalization.

Every debt shape the engine can receive (form state, stored ``Liability`` rows,
CSV imports, already-built ``Debt`` objects) passes through here exactly once.
This is the only place where a percentage APR is turned into a fraction.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Iterable, Mapping

from ..errors import InvalidInputError
from ..logging_config import get_logger
from ..models.debt import Debt
from ..money import ZERO, to_decimal, to_money

logger = get_logger(__name__)

_HUNDRED = Decimal(100)
MAX_APR = Decimal(1)

# Accepted spellings for each canonical field, first match wins.
_ALIASES: dict[str, tuple[str, ...]] = {
    "id": ("id", "debt_id"),
    "name": ("name",),
    "balance": ("balance",),
    "apr": ("apr", "interest_rate"),
    "min_payment": ("min_payment", "minimum_payment", "minPayment"),
    "last4": ("last4",),
    "due_day": ("due_day", "dueDay"),
    "include": ("include", "included"),
}


@dataclass(frozen=True, slots=True)
class DroppedDebt:
    """A raw record filtered out before simulation, with the reason."""

    id: str
    name: str
    reason: str


@dataclass(frozen=True, slots=True)
class NormalizedInput:
    """Cleaned debts plus validated policy scalars."""

    debts: tuple[Debt, ...]
    extra_monthly: Decimal
    one_time_extra: Decimal
    dropped: tuple[DroppedDebt, ...] = ()


def normalize_apr(value: object) -> Decimal:
    """Return APR as a fraction.

    Strings ending in ``%`` are always percentages, so ``"0.9%"`` is 0.009.
    Bare numbers above 1 are read as percentages too.
    """

    percent = isinstance(value, str) and value.strip().endswith("%")
    apr = to_decimal(value, field="apr")
    if apr <= 0:
        return Decimal(0)
    if percent or apr > 1:
        return apr / _HUNDRED
    return apr


def clamp_money(value: object, *, field: str) -> Decimal:
    """Cent-rounded amount with negatives clamped to zero."""

    amount = to_money(value, field=field)
    return amount if amount > 0 else ZERO


def _lookup(raw: Any, key: str) -> Any:
    for alias in _ALIASES[key]:
        if isinstance(raw, Mapping):
            if alias in raw:
                return raw[alias]
        elif hasattr(raw, alias):
            return getattr(raw, alias)
    return None


def _is_missing(value: Any) -> bool:
    # pandas hands us NaN for empty cells
    return value is None or (isinstance(value, float) and value != value)


def _coerce_due_day(value: Any) -> int | None:
    if _is_missing(value) or value == "":
        return None
    try:
        day = int(float(value))
    except (TypeError, ValueError):
        return None
    return day if 1 <= day <= 31 else None


def _coerce_last4(value: Any) -> str | None:
    if _is_missing(value):
        return None
    text = str(value).strip()
    return text[-4:] if text else None


def _coerce_include(value: Any) -> bool:
    if _is_missing(value):
        return True
    if isinstance(value, str):
        return value.strip().lower() not in {"no", "false", "0", "n"}
    return bool(value)


def coerce_debt(raw: Any, *, index: int, require_min_payment: bool = True) -> Debt | DroppedDebt:
    """Build a ``Debt`` from one raw record or explain why it was dropped."""

    raw_id = _lookup(raw, "id")
    debt_id = str(raw_id) if not _is_missing(raw_id) and str(raw_id).strip() else f"debt-{index}"
    raw_name = _lookup(raw, "name")
    name = "" if _is_missing(raw_name) else str(raw_name).strip()

    if not name:
        return DroppedDebt(id=debt_id, name=name, reason="blank name")
    if not _coerce_include(_lookup(raw, "include")):
        return DroppedDebt(id=debt_id, name=name, reason="excluded")

    balance = clamp_money(_none_if_missing(_lookup(raw, "balance")), field="balance")
    if balance <= 0:
        return DroppedDebt(id=debt_id, name=name, reason="balance <= 0")

    min_payment = clamp_money(_none_if_missing(_lookup(raw, "min_payment")), field="min_payment")
    if require_min_payment and min_payment <= 0:
        return DroppedDebt(id=debt_id, name=name, reason="min_payment <= 0")

    apr = normalize_apr(_none_if_missing(_lookup(raw, "apr")))
    if apr > MAX_APR:
        return DroppedDebt(id=debt_id, name=name, reason="apr > 100%")

    return Debt(
        id=debt_id,
        name=name,
        balance=balance,
        apr=apr,
        min_payment=min_payment,
        last4=_coerce_last4(_lookup(raw, "last4")),
        due_day=_coerce_due_day(_lookup(raw, "due_day")),
    )


def _none_if_missing(value: Any) -> Any:
    return None if _is_missing(value) else value


def normalize_debts(
    raw_debts: Iterable[Any], *, require_min_payment: bool = True
) -> tuple[list[Debt], list[DroppedDebt]]:
    """Clean a list of raw debt records, preserving input order."""

    debts: list[Debt] = []
    dropped: list[DroppedDebt] = []
    seen: set[str] = set()

    for index, raw in enumerate(raw_debts, start=1):
        result = coerce_debt(raw, index=index, require_min_payment=require_min_payment)
        if isinstance(result, DroppedDebt):
            logger.debug("Dropping debt %s (%s): %s", result.id, result.name, result.reason)
            dropped.append(result)
            continue
        if result.id in seen:
            raise InvalidInputError(f"Duplicate debt id {result.id!r}")
        seen.add(result.id)
        debts.append(result)

    return debts, dropped


def normalize_inputs(
    raw_debts: Iterable[Any],
    *,
    extra_monthly: object = 0,
    one_time_extra: object = 0,
    require_min_payment: bool = True,
) -> NormalizedInput:
    """Validate debts and policy scalars for one simulation run.

    Raises:
        InvalidInputError: when no debt survives normalization
    """

    debts, dropped = normalize_debts(raw_debts, require_min_payment=require_min_payment)
    if not debts:
        raise InvalidInputError("No payable debts after normalization")

    return NormalizedInput(
        debts=tuple(debts),
        extra_monthly=clamp_money(extra_monthly, field="extra_monthly"),
        one_time_extra=clamp_money(one_time_extra, field="one_time_extra"),
        dropped=tuple(dropped),
    )
