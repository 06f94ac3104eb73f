"""Canonical debt record consumed by the payoff engine."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from ..errors import InvalidInputError


class Strategy(str, Enum):
    """Ordering policy used to pick the debt that receives extra payment."""

    SNOWBALL = "snowball"
    AVALANCHE = "avalanche"
    HIGHEST_BALANCE = "highest_balance"

    @classmethod
    def parse(cls, value: "Strategy | str") -> "Strategy":
        """Accept enum members or their string values (case-insensitive)."""

        if isinstance(value, cls):
            return value
        key = str(value).strip().lower().replace("-", "_")
        try:
            return cls(key)
        except ValueError as exc:
            allowed = ", ".join(s.value for s in cls)
            raise InvalidInputError(f"Unknown strategy {value!r}; expected one of: {allowed}") from exc


@dataclass(frozen=True, slots=True)
class Debt:
    """One liability after normalization.

    ``apr`` is a fraction in [0, 1]; percentage inputs are converted by the
    normalizer before a ``Debt`` is built. Money fields are cent-quantized.
    """

    id: str
    name: str
    balance: Decimal
    apr: Decimal
    min_payment: Decimal
    last4: str | None = None
    due_day: int | None = None

    def __post_init__(self) -> None:
        if self.balance < 0:
            raise InvalidInputError(f"Debt {self.id!r} has a negative balance")
        if self.min_payment < 0:
            raise InvalidInputError(f"Debt {self.id!r} has a negative minimum payment")
        if not Decimal(0) <= self.apr <= Decimal(1):
            raise InvalidInputError(f"Debt {self.id!r} APR must be a fraction in [0, 1], got {self.apr}")
        if self.due_day is not None and not 1 <= self.due_day <= 31:
            raise InvalidInputError(f"Debt {self.id!r} due_day must be within 1..31")

    @property
    def label(self) -> str:
        """Display label with the masked account suffix when present."""

        return f"{self.name} ({self.last4})" if self.last4 else self.name

    @property
    def monthly_rate(self) -> Decimal:
        return self.apr / 12
