"""Application configuration objects and helpers."""

from __future__ import annotations

import os
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from .errors import ConfigurationError

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}") from exc


def _env_decimal(name: str, default: str) -> Decimal:
    value = os.getenv(name)
    if value is None or not value.strip():
        return Decimal(default)
    try:
        return Decimal(value.strip())
    except InvalidOperation as exc:
        raise ConfigurationError(f"{name} must be a number, got {value!r}") from exc


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "DebtPlan"
    DB_FILENAME = "debtplan.db"
    DEFAULT_MAX_MONTHS = 360
    DEFAULT_TIE_TOLERANCE = "5.00"

    def __init__(self) -> None:
        self.DATA_DIR = self._resolve_data_dir()
        self.DEV_MODE = _env_bool("DEBTPLAN_DEV_MODE", default=True)
        self.DATABASE_URL = os.getenv("DEBTPLAN_DATABASE_URL", self._build_sqlite_url())
        self.LOG_LEVEL = os.getenv("DEBTPLAN_LOG_LEVEL", "INFO").upper()
        self.MAX_MONTHS = _env_int("DEBTPLAN_MAX_MONTHS", self.DEFAULT_MAX_MONTHS)
        self.TIE_TOLERANCE = _env_decimal("DEBTPLAN_TIE_TOLERANCE", self.DEFAULT_TIE_TOLERANCE)
        self.REQUIRE_MIN_PAYMENT = _env_bool("DEBTPLAN_REQUIRE_MIN_PAYMENT", default=True)

        if self.MAX_MONTHS <= 0:
            raise ConfigurationError("DEBTPLAN_MAX_MONTHS must be positive.")
        if self.TIE_TOLERANCE < 0:
            raise ConfigurationError("DEBTPLAN_TIE_TOLERANCE cannot be negative.")

    def _resolve_data_dir(self) -> Path:
        """Return the directory where the SQLite file and logs live."""

        data_root = os.getenv("DEBTPLAN_DATA_DIR", "instance")
        path = Path(data_root).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    def _build_sqlite_url(self) -> str:
        db_path = self.DATA_DIR / self.DB_FILENAME
        return f"sqlite:///{db_path}"

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Expose engine kwargs for SQLModel to consume."""

        return {"connect_args": {"check_same_thread": False}}

    def engine_defaults(self) -> dict[str, Any]:
        """Policy defaults handed to ``SimulateRequest`` at the boundary."""

        return {
            "max_months": self.MAX_MONTHS,
            "tie_tolerance": self.TIE_TOLERANCE,
            "require_min_payment": self.REQUIRE_MIN_PAYMENT,
        }


class DevConfig(BaseConfig):
    """Development configuration using local SQLite."""

    DEBUG = True
    TESTING = False


class TestConfig(BaseConfig):
    """Configuration used by the test-suite (in-memory database)."""

    __test__ = False
    DEBUG = False
    TESTING = True

    def __init__(self) -> None:
        super().__init__()
        self.DATABASE_URL = "sqlite://"
