"""Exception hierarchy for the payoff engine."""

from __future__ import annotations


class DebtPlanError(Exception):
    """Base exception for all debtplan errors."""


class InvalidInputError(DebtPlanError, ValueError):
    """Raised when a simulation request is rejected before it runs."""


class NumericAnomalyError(DebtPlanError, ArithmeticError):
    """Raised when a payment would drive a balance below zero."""


class ConfigurationError(DebtPlanError):
    """Raised when environment configuration is invalid."""
