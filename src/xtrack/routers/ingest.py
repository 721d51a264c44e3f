"""Statistics ingestion for trading clients, authenticated by account API token only."""
from fastapi import APIRouter, status

from xtrack.deps import ApiTokenIdentity, StatisticServiceDep
from xtrack.schemas import Envelope, IngestStatisticRequest, StatisticView
from xtrack.services.exceptions import InvalidInputError
from xtrack.utils import parse_rfc3339

router = APIRouter(prefix="/ingest", tags=["ingest"])


@router.post(
    "/statistics",
    response_model=Envelope[StatisticView],
    status_code=status.HTTP_201_CREATED,
)
def ingest_statistic(
    body: IngestStatisticRequest,
    caller: ApiTokenIdentity,
    statistics: StatisticServiceDep,
) -> Envelope[StatisticView]:
    """Record a snapshot for the account that owns the ``X-API-Token``."""
    try:
        timestamp = parse_rfc3339(body.timestamp)
    except ValueError as exc:
        raise InvalidInputError(
            "Invalid timestamp format, use RFC3339 (e.g., 2024-01-15T10:30:00Z)"
        ) from exc

    statistic = statistics.create_statistic(
        caller.account_id,
        timestamp,
        body.daily_profit_loss,
        body.total_trades_today,
        body.total_balance,
    )
    return Envelope(
        message="Statistic ingested successfully",
        data=StatisticView.model_validate(statistic),
    )
