"""User service: creation, authentication, updates and admin bootstrap."""
import logging

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from xtrack.db.models import Role, User
from xtrack.repositories import UserRepository
from xtrack.security import PasswordHasher
from xtrack.services.exceptions import (ConflictError, InvalidInputError,
                                        NotFoundError, UnauthorizedError)

logger = logging.getLogger(__name__)

VALID_ROLES = frozenset(role.value for role in Role)

_INVALID_ROLE = "invalid role, must be 'admin' or 'user'"
_DUPLICATE_USERNAME = "username already exists"


def _validate_role(role: str) -> None:
    if role not in VALID_ROLES:
        raise InvalidInputError(_INVALID_ROLE)


class UserService:
    """Business rules for users over UserRepository.

    Username uniqueness is checked up front for a friendly error, but the
    partial unique index on live usernames is what actually enforces it.
    """

    def __init__(self, session: Session, hasher: PasswordHasher) -> None:
        self._users = UserRepository(session)
        self._hasher = hasher

    def create_user(self, username: str, password: str, role: str) -> User:
        _validate_role(role)
        if self._users.username_exists(username):
            raise ConflictError(_DUPLICATE_USERNAME)

        user = User(username=username, password_hash=self._hasher.hash(password), role=role)
        try:
            user = self._users.add(user)
        except IntegrityError as exc:
            raise ConflictError(_DUPLICATE_USERNAME) from exc
        logger.info("Created user %s (id=%s, role=%s)", user.username, user.id, user.role)
        return user

    def authenticate(self, username: str, password: str) -> User:
        """Return the user for a valid credential pair.

        Raises:
            UnauthorizedError: for an unknown username or a wrong password alike.
        """
        user = self._users.get_by_username(username)
        if user is None or not self._hasher.verify(user.password_hash, password):
            logger.warning("Failed login attempt for username=%s", username)
            raise UnauthorizedError("invalid credentials")
        return user

    def get_by_id(self, user_id: int) -> User:
        user = self._users.get(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def list_all(self) -> list[User]:
        return self._users.list_all()

    def update_user(
        self,
        user_id: int,
        *,
        username: str | None = None,
        password: str | None = None,
        role: str | None = None,
    ) -> User:
        """Partial update; None or empty arguments leave the field as is."""
        if role:
            _validate_role(role)
        user = self.get_by_id(user_id)

        if username and username != user.username:
            if self._users.username_exists(username):
                raise ConflictError(_DUPLICATE_USERNAME)
            user.username = username

        if password:
            user.password_hash = self._hasher.hash(password)

        if role:
            user.role = role

        try:
            return self._users.save(user)
        except IntegrityError as exc:
            raise ConflictError(_DUPLICATE_USERNAME) from exc

    def delete_user(self, user_id: int) -> None:
        user = self.get_by_id(user_id)
        self._users.soft_delete(user)
        logger.info("Deleted user id=%s", user_id)

    def ensure_admin_exists(self, username: str, password: str) -> User | None:
        """Create the bootstrap admin if there is no admin yet.

        Returns the created user, or None when an admin already existed.
        """
        if self._users.count_by_role(Role.ADMIN.value) > 0:
            return None
        return self.create_user(username, password, Role.ADMIN.value)
