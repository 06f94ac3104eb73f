"""Per-user plan settings stored as key/value pairs."""

from __future__ import annotations

from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel


class UserSetting(SQLModel, table=True):
    """Key-value storage for a user's payoff policy (strategy, extra amounts)."""

    __tablename__: ClassVar[str] = "user_setting"

    user_id: int = Field(primary_key=True)
    key: str = Field(primary_key=True, max_length=64)
    value: str = Field(nullable=False, max_length=255)
    description: Optional[str] = Field(default=None, max_length=255)
