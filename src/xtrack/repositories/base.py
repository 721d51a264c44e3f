"""Soft-delete aware data access shared by all repositories."""
from typing import Generic, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.sql import Select
from sqlmodel import Session, col, select

from xtrack.db.models import TimestampedModel
from xtrack.utils import utcnow

ModelT = TypeVar("ModelT", bound=TimestampedModel)


class SoftDeleteRepository(Generic[ModelT]):
    """CRUD over one table; every read excludes soft-deleted rows.

    Writes commit immediately. Storage errors (including IntegrityError from
    unique indexes) roll the session back and propagate unchanged.
    """

    model: type[ModelT]

    def __init__(self, session: Session) -> None:
        self._session = session

    def _live(self) -> Select:
        return select(self.model).where(col(self.model.deleted_at).is_(None))

    def _commit(self) -> None:
        try:
            self._session.commit()
        except SQLAlchemyError:
            self._session.rollback()
            raise

    def get(self, row_id: int) -> ModelT | None:
        return self._session.exec(self._live().where(col(self.model.id) == row_id)).first()

    def list_all(self) -> list[ModelT]:
        return list(self._session.exec(self._live().order_by(col(self.model.id))).all())

    def add(self, row: ModelT) -> ModelT:
        self._session.add(row)
        self._commit()
        self._session.refresh(row)
        return row

    def save(self, row: ModelT) -> ModelT:
        row.updated_at = utcnow()
        return self.add(row)

    def soft_delete(self, row: ModelT) -> None:
        now = utcnow()
        row.deleted_at = now
        row.updated_at = now
        self._session.add(row)
        self._commit()
