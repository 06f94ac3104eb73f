"""Debt payoff planning engine."""

from .errors import ConfigurationError, DebtPlanError, InvalidInputError, NumericAnomalyError
from .models import Debt, PaymentPlan, PlanStatus, Strategy
from .services.comparison import compare_strategies, compare_to_minimum_only, what_if
from .services.debts import SimulateRequest, minimum_only_request, simulate, simulate_debts
from .services.normalize import normalize_inputs
from .services.ordering import order_debts

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "Debt",
    "DebtPlanError",
    "InvalidInputError",
    "NumericAnomalyError",
    "PaymentPlan",
    "PlanStatus",
    "SimulateRequest",
    "Strategy",
    "compare_strategies",
    "compare_to_minimum_only",
    "minimum_only_request",
    "normalize_inputs",
    "order_debts",
    "simulate",
    "simulate_debts",
    "what_if",
]
