"""SQLModel implementation of the liability repository."""

from __future__ import annotations

from typing import Callable

from sqlmodel import Session, select

from ...models.liability import Liability


class SQLModelLiabilityRepository:
    """User-scoped read access to stored liabilities."""

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def list_all(self, *, user_id: int) -> list[Liability]:
        """All liabilities for ``user_id`` in insertion order.

        Excluded and paid-off rows are returned too; the normalizer reports
        why each one is dropped.
        """
        with self.session_factory() as session:
            statement = (
                select(Liability)
                .where(Liability.user_id == user_id)
                .order_by(Liability.id)  # type: ignore
            )
            return list(session.exec(statement).all())


__all__ = ["SQLModelLiabilityRepository"]
