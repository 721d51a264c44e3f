"""Database models for the X-Track statistics service.

Every table carries created/updated timestamps and a nullable ``deleted_at``
soft-delete marker; rows with ``deleted_at`` set are invisible to normal reads.
Datetimes are stored as UTC.
"""
from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import DateTime, Index, text
from sqlmodel import Field, Relationship, SQLModel

from xtrack.utils import utcnow


class Role(str, Enum):
    """User roles."""

    ADMIN = "admin"
    USER = "user"


class TimestampedModel(SQLModel):
    """Shared audit and soft-delete columns."""

    created_at: datetime = Field(
        default_factory=utcnow, sa_type=DateTime(timezone=True), nullable=False
    )
    updated_at: datetime = Field(
        default_factory=utcnow, sa_type=DateTime(timezone=True), nullable=False
    )
    deleted_at: datetime | None = Field(
        default=None, sa_type=DateTime(timezone=True), index=True
    )


class User(TimestampedModel, table=True):
    """A person who logs in and owns trading accounts."""

    __tablename__ = "users"
    # Unique among live rows only, so a soft-deleted username can be reused.
    __table_args__ = (
        Index(
            "uq_users_username_live",
            "username",
            unique=True,
            postgresql_where=text("deleted_at IS NULL"),
            sqlite_where=text("deleted_at IS NULL"),
        ),
    )

    id: int | None = Field(default=None, primary_key=True)
    username: str = Field(max_length=50, nullable=False)
    password_hash: str = Field(nullable=False)
    role: str = Field(
        default=Role.USER.value,
        max_length=20,
        nullable=False,
        sa_column_kwargs={"server_default": Role.USER.value},
    )

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value


class Account(TimestampedModel, table=True):
    """A trading account; statistics are ingested against its API token."""

    __tablename__ = "accounts"

    id: int | None = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True, nullable=False)
    name: str = Field(max_length=100, nullable=False)
    api_token: str = Field(max_length=64, unique=True, index=True, nullable=False)

    user: Optional[User] = Relationship()


class Statistic(TimestampedModel, table=True):
    """A point-in-time performance snapshot reported by a trading client."""

    __tablename__ = "statistics"
    __table_args__ = (
        Index("idx_account_timestamp", "account_id", "timestamp"),
        Index("idx_timestamp", "timestamp"),
    )

    id: int | None = Field(default=None, primary_key=True)
    account_id: int = Field(foreign_key="accounts.id", nullable=False)
    timestamp: datetime = Field(sa_type=DateTime(timezone=True), nullable=False)
    daily_pl: float = Field(nullable=False)
    trades_today: int = Field(nullable=False)
    total_balance: float = Field(nullable=False)
