"""Concrete repository implementations using SQLModel."""

from .liability import SQLModelLiabilityRepository
from .settings import SQLModelSettingsRepository

__all__ = [
    "SQLModelLiabilityRepository",
    "SQLModelSettingsRepository",
]
