"""User request and response schemas. Password hashes never appear here."""
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from xtrack.schemas.common import UtcDatetime

RoleName = Literal["admin", "user"]


class UserView(BaseModel):
    """Outward view of a user."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    role: str
    created_at: UtcDatetime
    updated_at: UtcDatetime


class UserSummary(BaseModel):
    """Identity fields returned alongside a session credential."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    role: str


class CreateUserRequest(BaseModel):
    username: str = Field(min_length=1, max_length=50)
    password: str = Field(min_length=6)
    role: RoleName


class UpdateUserRequest(BaseModel):
    """Partial update; absent or empty fields are left unchanged."""

    username: str | None = Field(default=None, max_length=50)
    password: str | None = None
    role: RoleName | None = None

    @field_validator("username", "password", "role", mode="before")
    @classmethod
    def _empty_is_absent(cls, value: object) -> object:
        return None if value == "" else value

    @field_validator("password")
    @classmethod
    def _password_length(cls, value: str | None) -> str | None:
        if value is not None and len(value) < 6:
            raise ValueError("password must be at least 6 characters")
        return value


class LoginRequest(BaseModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class LoginData(BaseModel):
    token: str
    user: UserSummary
