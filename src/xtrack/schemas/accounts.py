"""Account request and response schemas."""
from pydantic import BaseModel, ConfigDict, Field

from xtrack.schemas.common import UtcDatetime
from xtrack.schemas.users import UserView


class AccountView(BaseModel):
    """Outward view of an account, including its API token."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    name: str
    api_token: str
    created_at: UtcDatetime
    updated_at: UtcDatetime


class AccountWithOwnerView(AccountView):
    """Account plus its owning user, for admin listings and detail reads."""

    user: UserView


class CreateAccountRequest(BaseModel):
    user_id: int = Field(gt=0)
    name: str = Field(min_length=1, max_length=100)


class UpdateAccountRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
