"""Statistic persistence: paginated and time-windowed reads."""
from datetime import datetime

from sqlalchemy import func
from sqlmodel import col, select

from xtrack.db.models import Statistic
from xtrack.repositories.base import SoftDeleteRepository


class StatisticRepository(SoftDeleteRepository[Statistic]):
    model = Statistic

    def _account_filter(self, account_id: int, start: datetime | None, end: datetime | None) -> list:
        clauses = [col(Statistic.account_id) == account_id, col(Statistic.deleted_at).is_(None)]
        if start is not None:
            clauses.append(col(Statistic.timestamp) >= start)
        if end is not None:
            clauses.append(col(Statistic.timestamp) <= end)
        return clauses

    def find_page(
        self,
        account_id: int,
        *,
        offset: int,
        limit: int,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> tuple[list[Statistic], int]:
        """One page of rows (newest first) plus the total matching count.

        ``start`` and ``end`` are both inclusive when given.
        """
        clauses = self._account_filter(account_id, start, end)
        total = self._session.exec(
            select(func.count()).select_from(Statistic).where(*clauses)
        ).one()
        rows = self._session.exec(
            select(Statistic)
            .where(*clauses)
            .order_by(col(Statistic.timestamp).desc(), col(Statistic.id).desc())
            .offset(offset)
            .limit(limit)
        ).all()
        return list(rows), total

    def find_in_window(self, account_id: int, start: datetime, end_exclusive: datetime) -> list[Statistic]:
        """All rows with ``start <= timestamp < end_exclusive``, newest first."""
        statement = (
            select(Statistic)
            .where(
                col(Statistic.account_id) == account_id,
                col(Statistic.deleted_at).is_(None),
                col(Statistic.timestamp) >= start,
                col(Statistic.timestamp) < end_exclusive,
            )
            .order_by(col(Statistic.timestamp).desc(), col(Statistic.id).desc())
        )
        return list(self._session.exec(statement).all())

    def latest(self, account_id: int) -> Statistic | None:
        statement = (
            self._live()
            .where(col(Statistic.account_id) == account_id)
            .order_by(col(Statistic.timestamp).desc(), col(Statistic.id).desc())
            .limit(1)
        )
        return self._session.exec(statement).first()
