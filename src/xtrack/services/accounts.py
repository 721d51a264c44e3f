"""Account service: creation, API token issuance and rotation."""
import logging
from collections.abc import Callable

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from xtrack.db.models import Account
from xtrack.repositories import AccountRepository, UserRepository
from xtrack.security import generate_secure_token
from xtrack.services.exceptions import (ConflictError, NotFoundError,
                                        TokenGenerationError)

logger = logging.getLogger(__name__)

MAX_TOKEN_ATTEMPTS = 5


class AccountService:
    """Business rules for trading accounts.

    Args:
        session: Request-scoped database session.
        token_factory: Source of fresh API tokens (defaults to 32 random bytes as hex).
    """

    def __init__(
        self,
        session: Session,
        *,
        token_factory: Callable[[], str] = generate_secure_token,
    ) -> None:
        self._accounts = AccountRepository(session)
        self._users = UserRepository(session)
        self._token_factory = token_factory

    def create_account(self, user_id: int, name: str) -> Account:
        if self._users.get(user_id) is None:
            raise NotFoundError("user not found")

        account = Account(user_id=user_id, name=name, api_token=self.generate_unique_token())
        try:
            account = self._accounts.add(account)
        except IntegrityError as exc:
            raise ConflictError("api token already in use") from exc
        logger.info("Created account id=%s for user id=%s", account.id, user_id)
        return account

    def generate_unique_token(self) -> str:
        """A token no account holds yet; gives up after MAX_TOKEN_ATTEMPTS collisions."""
        for _ in range(MAX_TOKEN_ATTEMPTS):
            token = self._token_factory()
            if not self._accounts.token_exists(token):
                return token
        logger.error("API token generation collided %d times in a row", MAX_TOKEN_ATTEMPTS)
        raise TokenGenerationError()

    def regenerate_token(self, account_id: int) -> Account:
        """Replace the account's API token; the old one stops working immediately."""
        account = self.get_by_id(account_id)
        account.api_token = self.generate_unique_token()
        try:
            account = self._accounts.save(account)
        except IntegrityError as exc:
            raise ConflictError("api token already in use") from exc
        logger.info("Regenerated API token for account id=%s", account_id)
        return account

    def update_account(self, account_id: int, name: str | None) -> Account:
        account = self.get_by_id(account_id)
        if not name:
            return account
        account.name = name
        return self._accounts.save(account)

    def get_by_id(self, account_id: int) -> Account:
        account = self._accounts.get(account_id)
        if account is None:
            raise NotFoundError("Account not found")
        return account

    def get_with_owner(self, account_id: int) -> Account:
        account = self._accounts.get_with_owner(account_id)
        if account is None:
            raise NotFoundError("Account not found")
        return account

    def get_by_user_id(self, user_id: int) -> list[Account]:
        return self._accounts.list_by_user_id(user_id)

    def get_all(self) -> list[Account]:
        return self._accounts.list_all_with_owner()

    def find_by_token(self, token: str) -> Account | None:
        """Live account for an API token, or None."""
        return self._accounts.get_by_token(token)

    def delete(self, account_id: int) -> None:
        account = self.get_by_id(account_id)
        self._accounts.soft_delete(account)
        logger.info("Deleted account id=%s", account_id)
