"""Strategy ordering for payoff targeting."""

from __future__ import annotations

from decimal import Decimal
from functools import cmp_to_key
from typing import Protocol, Sequence, TypeVar

from ..models.debt import Strategy

DEFAULT_TIE_TOLERANCE = Decimal("5.00")


class Rankable(Protocol):
    """Anything with the fields the comparators look at."""

    @property
    def balance(self) -> Decimal: ...

    @property
    def apr(self) -> Decimal: ...

    @property
    def min_payment(self) -> Decimal: ...


T = TypeVar("T", bound=Rankable)


def _snowball_cmp(tolerance: Decimal):
    def compare(a: Rankable, b: Rankable) -> int:
        # Nearly-equal balances go to the higher APR first.
        if abs(a.balance - b.balance) < tolerance and a.apr != b.apr:
            return -1 if a.apr > b.apr else 1
        if a.balance != b.balance:
            return -1 if a.balance < b.balance else 1
        return 0

    return compare


def order_debts(
    debts: Sequence[T],
    strategy: Strategy | str,
    *,
    tie_tolerance: Decimal = DEFAULT_TIE_TOLERANCE,
) -> list[T]:
    """Return ``debts`` in payoff priority for ``strategy``.

    Sorting is stable, so anything the comparator treats as equal keeps its
    input order.
    """

    strategy = Strategy.parse(strategy)
    items = list(debts)

    if strategy is Strategy.SNOWBALL:
        # Pre-sort by balance so the tolerance comparator sees neighbours first.
        items.sort(key=lambda d: d.balance)
        return sorted(items, key=cmp_to_key(_snowball_cmp(tie_tolerance)))
    if strategy is Strategy.AVALANCHE:
        return sorted(items, key=lambda d: (-d.apr, d.balance, -d.min_payment))
    return sorted(items, key=lambda d: -d.balance)


def target_debt(
    debts: Sequence[T],
    strategy: Strategy | str,
    *,
    tie_tolerance: Decimal = DEFAULT_TIE_TOLERANCE,
) -> T | None:
    """First unpaid debt in strategy order, or ``None`` once everything is paid."""

    unpaid = [d for d in debts if d.balance > 0]
    if not unpaid:
        return None
    return order_debts(unpaid, strategy, tie_tolerance=tie_tolerance)[0]
