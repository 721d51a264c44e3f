"""Repositories: typed, soft-delete aware data access per table."""
from xtrack.repositories.accounts import AccountRepository
from xtrack.repositories.statistics import StatisticRepository
from xtrack.repositories.users import UserRepository

__all__ = ["AccountRepository", "StatisticRepository", "UserRepository"]
