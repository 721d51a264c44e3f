"""Statistic request, response and summary schemas."""
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field

from xtrack.schemas.common import OmitNoneModel, UtcDatetime


class StatisticView(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    account_id: int
    timestamp: UtcDatetime
    daily_pl: float
    trades_today: int
    total_balance: float
    created_at: UtcDatetime
    updated_at: UtcDatetime


class IngestStatisticRequest(BaseModel):
    """Snapshot posted by a trading client. ``timestamp`` is RFC 3339."""

    model_config = ConfigDict(allow_inf_nan=False)

    timestamp: str = Field(min_length=1)
    daily_profit_loss: float
    total_trades_today: int = Field(ge=0)
    total_balance: float = Field(ge=0)


class TodaySummary(OmitNoneModel):
    """Aggregate over the server's current calendar day.

    ``statistics`` (newest first) is omitted when there were no snapshots today.
    """

    omit_if_none: ClassVar[tuple[str, ...]] = ("statistics",)

    total_records: int = 0
    latest_balance: float = 0.0
    daily_pl: float = 0.0
    trades_today: int = 0
    latest_update: UtcDatetime | None = None
    statistics: list[StatisticView] | None = None


class OverallSummary(OmitNoneModel):
    """Latest snapshot ever recorded for an account."""

    omit_if_none: ClassVar[tuple[str, ...]] = ("latest_pl", "latest_trades")

    has_data: bool = False
    current_balance: float = 0.0
    latest_pl: float | None = None
    latest_trades: int | None = None
    latest_update: UtcDatetime | None = None
