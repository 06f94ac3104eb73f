"""Stored debt records."""

from __future__ import annotations

from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel


class Liability(SQLModel, table=True):
    """A user's debt as entered in the UI or imported from a bank feed.

    ``apr`` is stored as typed by the user (``19.99`` or ``0.1999``); the
    engine normalizer decides which form it is.
    """

    __tablename__: ClassVar[str] = "liability"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(nullable=False, index=True)
    name: str = Field(nullable=False, max_length=80, index=True)
    last4: Optional[str] = Field(default=None, max_length=4)
    balance: float = Field(nullable=False)
    apr: float = Field(default=0.0, nullable=False)
    minimum_payment: float = Field(default=0.0, nullable=False)
    due_day: Optional[int] = Field(default=None, ge=1, le=31)
    include: bool = Field(default=True, nullable=False)
