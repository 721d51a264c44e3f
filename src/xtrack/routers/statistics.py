"""Statistic query routes: paginated history, date ranges and summaries.

Every route checks that the caller may read the account's statistics first.
"""
from fastapi import APIRouter, Query

from xtrack.deps import (AccountServiceDep, CurrentIdentity,
                         StatisticServiceDep, require_path_id)
from xtrack.schemas import (Envelope, OverallSummary, PaginatedEnvelope,
                            StatisticView, TodaySummary)
from xtrack.services import Identity, Page, PageRequest
from xtrack.services.accounts import AccountService
from xtrack.services.authorization import ensure_statistics_access
from xtrack.services.exceptions import InvalidInputError
from xtrack.utils import end_of_day, parse_calendar_date, start_of_day

router = APIRouter(prefix="/statistics", tags=["statistics"])


def _authorized_account_id(raw_id: str, identity: Identity, accounts: AccountService) -> int:
    account_id = require_path_id(raw_id, "account")
    ensure_statistics_access(identity, account_id, accounts)
    return account_id


def _paginated(page: Page) -> PaginatedEnvelope[StatisticView]:
    return PaginatedEnvelope(
        message="Statistics retrieved successfully",
        data=[StatisticView.model_validate(row) for row in page.items],
        pagination=page.pagination,
    )


@router.get("/{account_id}", response_model=PaginatedEnvelope[StatisticView])
def list_statistics(
    account_id: str,
    identity: CurrentIdentity,
    accounts: AccountServiceDep,
    statistics: StatisticServiceDep,
    page: str | None = Query(default=None, description="Page number (default 1)"),
    page_size: str | None = Query(default=None, description="Page size, 1-100 (default 20)"),
) -> PaginatedEnvelope[StatisticView]:
    """All snapshots for the account, newest first."""
    account = _authorized_account_id(account_id, identity, accounts)
    return _paginated(statistics.list_by_account_id(account, PageRequest.of(page, page_size)))


@router.get("/{account_id}/range", response_model=PaginatedEnvelope[StatisticView])
def list_statistics_by_date_range(
    account_id: str,
    identity: CurrentIdentity,
    accounts: AccountServiceDep,
    statistics: StatisticServiceDep,
    start_date: str | None = Query(default=None, description="Start date (YYYY-MM-DD)"),
    end_date: str | None = Query(default=None, description="End date (YYYY-MM-DD), inclusive"),
    page: str | None = Query(default=None, description="Page number (default 1)"),
    page_size: str | None = Query(default=None, description="Page size, 1-100 (default 20)"),
) -> PaginatedEnvelope[StatisticView]:
    """Snapshots between two calendar dates (UTC), both days included in full."""
    account = _authorized_account_id(account_id, identity, accounts)

    if not start_date or not end_date:
        raise InvalidInputError("start_date and end_date are required")
    try:
        start = parse_calendar_date(start_date)
    except ValueError as exc:
        raise InvalidInputError("Invalid start_date format, use YYYY-MM-DD") from exc
    try:
        end = parse_calendar_date(end_date)
    except ValueError as exc:
        raise InvalidInputError("Invalid end_date format, use YYYY-MM-DD") from exc

    result = statistics.list_by_date_range(
        account,
        start_of_day(start),
        end_of_day(end),
        PageRequest.of(page, page_size),
    )
    return _paginated(result)


@router.get("/{account_id}/today", response_model=Envelope[TodaySummary])
def get_today_summary(
    account_id: str,
    identity: CurrentIdentity,
    accounts: AccountServiceDep,
    statistics: StatisticServiceDep,
) -> Envelope[TodaySummary]:
    account = _authorized_account_id(account_id, identity, accounts)
    return Envelope(
        message="Today's summary retrieved successfully",
        data=statistics.today_summary(account),
    )


@router.get("/{account_id}/summary", response_model=Envelope[OverallSummary])
def get_overall_summary(
    account_id: str,
    identity: CurrentIdentity,
    accounts: AccountServiceDep,
    statistics: StatisticServiceDep,
) -> Envelope[OverallSummary]:
    account = _authorized_account_id(account_id, identity, accounts)
    return Envelope(
        message="Overall summary retrieved successfully",
        data=statistics.overall_summary(account),
    )
