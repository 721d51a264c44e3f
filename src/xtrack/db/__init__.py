"""Database package: models and session management."""
from xtrack.db.models import Account, Role, Statistic, User

__all__ = ["Account", "Role", "Statistic", "User"]
