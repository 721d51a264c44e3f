"""initial schema: users, accounts, statistics

Revision ID: 0001
Revises:
Create Date: 2024-01-10 09:00:00
"""
from alembic import op
import sqlalchemy as sa

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def _audit_columns() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("username", sa.String(length=50), nullable=False),
        sa.Column("password_hash", sa.String(), nullable=False),
        sa.Column("role", sa.String(length=20), nullable=False, server_default="user"),
        *_audit_columns(),
    )
    op.create_index("ix_users_deleted_at", "users", ["deleted_at"])
    op.create_index(
        "uq_users_username_live",
        "users",
        ["username"],
        unique=True,
        postgresql_where=sa.text("deleted_at IS NULL"),
        sqlite_where=sa.text("deleted_at IS NULL"),
    )

    op.create_table(
        "accounts",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("api_token", sa.String(length=64), nullable=False),
        *_audit_columns(),
    )
    op.create_index("ix_accounts_user_id", "accounts", ["user_id"])
    op.create_index("ix_accounts_api_token", "accounts", ["api_token"], unique=True)
    op.create_index("ix_accounts_deleted_at", "accounts", ["deleted_at"])

    op.create_table(
        "statistics",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("account_id", sa.Integer(), sa.ForeignKey("accounts.id"), nullable=False),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False),
        sa.Column("daily_pl", sa.Float(), nullable=False),
        sa.Column("trades_today", sa.Integer(), nullable=False),
        sa.Column("total_balance", sa.Float(), nullable=False),
        *_audit_columns(),
    )
    op.create_index("idx_account_timestamp", "statistics", ["account_id", "timestamp"])
    op.create_index("idx_timestamp", "statistics", ["timestamp"])
    op.create_index("ix_statistics_deleted_at", "statistics", ["deleted_at"])


def downgrade() -> None:
    op.drop_table("statistics")
    op.drop_table("accounts")
    op.drop_table("users")
