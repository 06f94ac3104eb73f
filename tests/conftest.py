"""Pytest configuration and shared fixtures for debtplan tests.

Database fixtures run against a throwaway SQLite file per test; engine tests
use plain dict debts and a fixed start date so plans are reproducible.
"""

from __future__ import annotations

import logging
import tempfile
from datetime import date
from pathlib import Path

import pytest
from sqlmodel import Session, SQLModel, create_engine

from debtplan.infra.database import create_session_factory
from debtplan.logging_config import ROOT_LOGGER_NAME
from debtplan.models import Liability, UserSetting  # noqa: F401

TEST_USER_ID = 1


# =============================================================================
# Environment
# =============================================================================


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Keep config and log files out of the working tree."""

    for name in (
        "DEBTPLAN_MAX_MONTHS",
        "DEBTPLAN_TIE_TOLERANCE",
        "DEBTPLAN_REQUIRE_MIN_PAYMENT",
        "DEBTPLAN_DATABASE_URL",
        "DEBTPLAN_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("DEBTPLAN_DATA_DIR", str(tmp_path / "instance"))
    yield
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine():
    """Create an isolated SQLite database for each test.

    Yields:
        Engine: SQLModel engine connected to test database
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    engine = create_engine(f"sqlite:///{db_path}", echo=False)
    SQLModel.metadata.create_all(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture(scope="function")
def db_session(db_engine):
    session = Session(db_engine, expire_on_commit=False)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Session factory matching what the repositories expect."""

    return create_session_factory(db_engine)


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def liability_factory(db_session):
    """Factory for creating stored liabilities.

    Returns:
        Callable: Function that creates and persists Liability instances
    """

    def _create_liability(
        name: str = "Test Debt",
        balance: float = 1000.00,
        apr: float = 18.0,
        minimum_payment: float = 25.00,
        due_day: int | None = 15,
        include: bool = True,
        last4: str | None = None,
        user_id: int = TEST_USER_ID,
    ) -> Liability:
        """Create a liability; ``apr`` is a percentage like the UI stores it."""
        liability = Liability(
            user_id=user_id,
            name=name,
            balance=balance,
            apr=apr,
            minimum_payment=minimum_payment,
            due_day=due_day,
            include=include,
            last4=last4,
        )
        db_session.add(liability)
        db_session.commit()
        db_session.refresh(liability)
        return liability

    return _create_liability


@pytest.fixture
def start_date() -> date:
    return date(2024, 1, 15)


@pytest.fixture
def debt():
    """Factory for raw debt records as a form or JSON payload would send them."""

    def _debt(id: str, balance, apr, min_payment, name: str | None = None, **extra) -> dict:
        return {
            "id": id,
            "name": name or id.title(),
            "balance": balance,
            "apr": apr,
            "min_payment": min_payment,
            **extra,
        }

    return _debt


