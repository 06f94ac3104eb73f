"""Decimal money helpers shared by the engine."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from .errors import InvalidInputError

CENT = Decimal("0.01")
ZERO = Decimal("0.00")
MONTHS_PER_YEAR = Decimal(12)


def to_decimal(value: object, *, field: str = "value") -> Decimal:
    """Convert user-supplied numbers into ``Decimal``.

    Floats go through ``str`` so ``19.9`` stays ``Decimal("19.9")``. Strings may
    carry ``$``, ``,`` and ``%`` decorations. ``None`` and blank strings are zero.
    """

    if value is None:
        return Decimal(0)
    if isinstance(value, bool):
        raise InvalidInputError(f"{field} must be a number, got {value!r}")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float)):
        result = Decimal(str(value))
    elif isinstance(value, str):
        cleaned = value.strip().replace("$", "").replace(",", "").replace("%", "")
        if not cleaned:
            return Decimal(0)
        try:
            result = Decimal(cleaned)
        except InvalidOperation as exc:
            raise InvalidInputError(f"{field} is not a number: {value!r}") from exc
    else:
        raise InvalidInputError(f"{field} must be a number, got {type(value).__name__}")

    if not result.is_finite():
        raise InvalidInputError(f"{field} must be finite, got {value!r}")
    return result


def to_money(value: object, *, field: str = "value") -> Decimal:
    """Round to cents using half-up rounding."""

    return to_decimal(value, field=field).quantize(CENT, rounding=ROUND_HALF_UP)


def monthly_interest(balance: Decimal, apr: Decimal) -> Decimal:
    """Simple monthly interest on ``balance`` at ``apr / 12``, rounded to cents."""

    if balance <= 0 or apr <= 0:
        return ZERO
    return (balance * apr / MONTHS_PER_YEAR).quantize(CENT, rounding=ROUND_HALF_UP)
