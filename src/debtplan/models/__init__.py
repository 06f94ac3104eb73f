"""Domain records and SQLModel table exports."""

from .debt import Debt, Strategy
from .liability import Liability
from .plan import (
    DebtMonthLine,
    DebtResult,
    MonthSnapshot,
    PaymentPlan,
    PlanStatus,
    PlanTotals,
)
from .settings import UserSetting

__all__ = [
    "Debt",
    "DebtMonthLine",
    "DebtResult",
    "Liability",
    "MonthSnapshot",
    "PaymentPlan",
    "PlanStatus",
    "PlanTotals",
    "Strategy",
    "UserSetting",
]
