"""Account persistence."""
from sqlalchemy import func
from sqlalchemy.orm import selectinload
from sqlmodel import col, select

from xtrack.db.models import Account
from xtrack.repositories.base import SoftDeleteRepository


class AccountRepository(SoftDeleteRepository[Account]):
    model = Account

    def get_with_owner(self, account_id: int) -> Account | None:
        statement = (
            self._live()
            .where(col(Account.id) == account_id)
            .options(selectinload(Account.user))  # type: ignore[arg-type]
        )
        return self._session.exec(statement).first()

    def list_all_with_owner(self) -> list[Account]:
        statement = (
            self._live()
            .options(selectinload(Account.user))  # type: ignore[arg-type]
            .order_by(col(Account.id))
        )
        return list(self._session.exec(statement).all())

    def list_by_user_id(self, user_id: int) -> list[Account]:
        statement = self._live().where(col(Account.user_id) == user_id).order_by(col(Account.id))
        return list(self._session.exec(statement).all())

    def get_by_token(self, token: str) -> Account | None:
        """Live account holding ``token``; exact match."""
        return self._session.exec(self._live().where(col(Account.api_token) == token)).first()

    def token_exists(self, token: str) -> bool:
        """Whether any row, deleted or not, holds ``token``.

        Deleted rows count because the unique index covers them too.
        """
        statement = select(func.count()).select_from(Account).where(col(Account.api_token) == token)
        return self._session.exec(statement).one() > 0
