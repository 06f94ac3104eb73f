"""Service module exports."""

from . import (
    comparison,
    debts,
    export_csv,
    goals,
    import_csv,
    liabilities,
    normalize,
    ordering,
    recommendations,
    reports,
)

__all__ = [
    "comparison",
    "debts",
    "export_csv",
    "goals",
    "import_csv",
    "liabilities",
    "normalize",
    "ordering",
    "recommendations",
    "reports",
]
