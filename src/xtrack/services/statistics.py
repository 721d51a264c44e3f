"""Statistic service: ingestion, paginated history and on-read summaries."""
import logging
from collections.abc import Callable
from datetime import datetime

from sqlmodel import Session

from xtrack.db.models import Statistic
from xtrack.repositories import AccountRepository, StatisticRepository
from xtrack.schemas import OverallSummary, StatisticView, TodaySummary
from xtrack.services.exceptions import NotFoundError
from xtrack.services.pagination import Page, PageRequest
from xtrack.utils import day_window, local_now, to_utc

logger = logging.getLogger(__name__)


class StatisticService:
    """Business rules for statistic snapshots.

    Args:
        session: Request-scoped database session.
        clock: Returns the current time in the server's timezone; "today" is
            the calendar day it falls on.
    """

    def __init__(self, session: Session, *, clock: Callable[[], datetime] = local_now) -> None:
        self._statistics = StatisticRepository(session)
        self._accounts = AccountRepository(session)
        self._clock = clock

    def create_statistic(
        self,
        account_id: int,
        timestamp: datetime,
        daily_pl: float,
        trades_today: int,
        total_balance: float,
    ) -> Statistic:
        """Record a snapshot. Input ranges are validated by the caller."""
        if self._accounts.get(account_id) is None:
            raise NotFoundError("account not found")

        statistic = Statistic(
            account_id=account_id,
            timestamp=to_utc(timestamp),
            daily_pl=daily_pl,
            trades_today=trades_today,
            total_balance=total_balance,
        )
        statistic = self._statistics.add(statistic)
        logger.debug("Stored statistic id=%s for account id=%s", statistic.id, account_id)
        return statistic

    def list_by_date_range(
        self,
        account_id: int,
        start: datetime,
        end: datetime,
        page: PageRequest,
    ) -> Page[Statistic]:
        """Snapshots with ``start <= timestamp <= end``, newest first.

        Callers wanting a whole last day pass its 23:59:59 as ``end``.
        """
        rows, total = self._statistics.find_page(
            account_id,
            offset=page.offset,
            limit=page.page_size,
            start=to_utc(start),
            end=to_utc(end),
        )
        return Page(items=rows, pagination=page.meta(total))

    def list_by_account_id(self, account_id: int, page: PageRequest) -> Page[Statistic]:
        rows, total = self._statistics.find_page(
            account_id, offset=page.offset, limit=page.page_size
        )
        return Page(items=rows, pagination=page.meta(total))

    def today_summary(self, account_id: int) -> TodaySummary:
        start, end = day_window(self._clock())
        rows = self._statistics.find_in_window(account_id, start, end)
        if not rows:
            return TodaySummary()

        latest = rows[0]
        return TodaySummary(
            total_records=len(rows),
            latest_balance=latest.total_balance,
            daily_pl=latest.daily_pl,
            trades_today=latest.trades_today,
            latest_update=latest.timestamp,
            statistics=[StatisticView.model_validate(row) for row in rows],
        )

    def overall_summary(self, account_id: int) -> OverallSummary:
        latest = self._statistics.latest(account_id)
        if latest is None:
            return OverallSummary()

        return OverallSummary(
            has_data=True,
            current_balance=latest.total_balance,
            latest_pl=latest.daily_pl,
            latest_trades=latest.trades_today,
            latest_update=latest.timestamp,
        )
