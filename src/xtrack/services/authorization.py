"""Request identities and the authorization rules evaluated per endpoint.

Admins bypass every ownership check. Everyone else may only touch accounts
(and their statistics) that they own.
"""
import logging
from dataclasses import dataclass

from xtrack.db.models import Account, Role
from xtrack.services.accounts import AccountService
from xtrack.services.exceptions import ForbiddenError, NotFoundError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Identity:
    """Caller resolved from a verified session credential."""

    user_id: int
    username: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value


@dataclass(frozen=True)
class ApiIdentity:
    """Caller resolved from an account API token (ingestion only)."""

    account_id: int
    user_id: int


def ensure_admin(identity: Identity) -> None:
    if not identity.is_admin:
        logger.warning("User %s denied admin-only operation", identity.user_id)
        raise ForbiddenError("Admin access required")


def ensure_can_create_account_for(identity: Identity, user_id: int) -> None:
    """Non-admins may only create accounts owned by themselves."""
    if not identity.is_admin and user_id != identity.user_id:
        logger.warning("User %s denied account creation for user %s", identity.user_id, user_id)
        raise ForbiddenError("You can only create accounts for yourself")


def ensure_account_access(identity: Identity, account: Account) -> None:
    if not identity.is_admin and account.user_id != identity.user_id:
        logger.warning("User %s denied access to account %s", identity.user_id, account.id)
        raise ForbiddenError("Access denied")


def ensure_statistics_access(identity: Identity, account_id: int, accounts: AccountService) -> None:
    """Gate statistics reads for ``account_id``.

    Admins pass without a lookup. For anyone else a missing account is denied
    the same way as someone else's account.
    """
    if identity.is_admin:
        return
    try:
        account = accounts.get_by_id(account_id)
    except NotFoundError as exc:
        logger.warning("User %s denied statistics of unknown account %s", identity.user_id, account_id)
        raise ForbiddenError("Access denied") from exc
    ensure_account_access(identity, account)
