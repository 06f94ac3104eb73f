"""Calendar helpers for payoff dates."""

from __future__ import annotations

from calendar import monthrange
from datetime import date, datetime

from .errors import InvalidInputError


def add_months(value: date, months: int) -> date:
    """Return ``value`` shifted by ``months``, clamping the day to the month length."""

    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, monthrange(year, month)[1])
    return date(year, month, day)


def parse_start_date(value: date | str | None, *, today: date) -> date:
    """Coerce a request start date, defaulting to ``today``."""

    if value is None:
        return today
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip())
        except ValueError as exc:
            raise InvalidInputError(f"start_date is not an ISO date: {value!r}") from exc
    raise InvalidInputError(f"start_date must be a date or ISO string, got {type(value).__name__}")


def days_between(start: date, end: date) -> int:
    """Signed number of days from ``start`` to ``end``."""

    return (end - start).days
