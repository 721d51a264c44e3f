"""User persistence."""
from sqlalchemy import func
from sqlmodel import col, select

from xtrack.db.models import User
from xtrack.repositories.base import SoftDeleteRepository


class UserRepository(SoftDeleteRepository[User]):
    model = User

    def get_by_username(self, username: str) -> User | None:
        return self._session.exec(self._live().where(col(User.username) == username)).first()

    def username_exists(self, username: str) -> bool:
        return self.get_by_username(username) is not None

    def count_by_role(self, role: str) -> int:
        statement = (
            select(func.count())
            .select_from(User)
            .where(col(User.role) == role, col(User.deleted_at).is_(None))
        )
        return self._session.exec(statement).one()
