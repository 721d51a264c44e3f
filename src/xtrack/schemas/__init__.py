"""Pydantic schemas for API and runtime use. Not persisted to DB."""
from xtrack.schemas.accounts import (AccountView, AccountWithOwnerView,
                                     CreateAccountRequest,
                                     UpdateAccountRequest)
from xtrack.schemas.common import (Envelope, ErrorEnvelope, PaginatedEnvelope,
                                   PaginationMeta)
from xtrack.schemas.statistics import (IngestStatisticRequest, OverallSummary,
                                       StatisticView, TodaySummary)
from xtrack.schemas.users import (CreateUserRequest, LoginData, LoginRequest,
                                  UpdateUserRequest, UserSummary, UserView)

__all__ = [
    "AccountView",
    "AccountWithOwnerView",
    "CreateAccountRequest",
    "CreateUserRequest",
    "Envelope",
    "ErrorEnvelope",
    "IngestStatisticRequest",
    "LoginData",
    "LoginRequest",
    "OverallSummary",
    "PaginatedEnvelope",
    "PaginationMeta",
    "StatisticView",
    "TodaySummary",
    "UpdateAccountRequest",
    "UpdateUserRequest",
    "UserSummary",
    "UserView",
]
