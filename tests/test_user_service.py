import pytest
from sqlalchemy import text

from xtrack.repositories import UserRepository
from xtrack.services import UserService
from xtrack.services.exceptions import (ConflictError, InvalidInputError,
                                        NotFoundError, UnauthorizedError)


@pytest.fixture
def users(session, hasher) -> UserService:
    return UserService(session, hasher)


def test_create_then_authenticate(users):
    created = users.create_user("alice", "pw123456", "user")

    assert created.id is not None
    assert created.password_hash != "pw123456"
    assert users.authenticate("alice", "pw123456").id == created.id


@pytest.mark.parametrize("username,password", [("alice", "wrong-pass"), ("nobody", "pw123456")])
def test_bad_credentials_are_indistinguishable(users, username, password):
    users.create_user("alice", "pw123456", "user")

    with pytest.raises(UnauthorizedError) as excinfo:
        users.authenticate(username, password)
    assert excinfo.value.message == "invalid credentials"


def test_invalid_role_is_rejected(users):
    with pytest.raises(InvalidInputError):
        users.create_user("alice", "pw123456", "superuser")


def test_duplicate_username_conflicts(users):
    users.create_user("alice", "pw123456", "user")

    with pytest.raises(ConflictError) as excinfo:
        users.create_user("alice", "other-pass", "admin")
    assert excinfo.value.message == "username already exists"


def test_unique_index_catches_a_lost_race(users, monkeypatch):
    users.create_user("alice", "pw123456", "user")
    # Simulate a concurrent writer slipping past the pre-check.
    monkeypatch.setattr(UserRepository, "username_exists", lambda self, username: False)

    with pytest.raises(ConflictError):
        users.create_user("alice", "pw123456", "user")
    assert [u.username for u in users.list_all()] == ["alice"]


def test_deleted_username_can_be_reused(users):
    first = users.create_user("alice", "pw123456", "user")
    users.delete_user(first.id)

    second = users.create_user("alice", "pw654321", "user")

    assert second.id != first.id
    with pytest.raises(NotFoundError):
        users.get_by_id(first.id)


def test_deleted_user_cannot_log_in(users):
    user = users.create_user("alice", "pw123456", "user")
    users.delete_user(user.id)

    with pytest.raises(UnauthorizedError):
        users.authenticate("alice", "pw123456")


def test_partial_update(users):
    user = users.create_user("alice", "pw123456", "user")
    original_hash = user.password_hash

    updated = users.update_user(user.id, role="admin")
    assert updated.role == "admin"
    assert updated.username == "alice"
    assert updated.password_hash == original_hash

    updated = users.update_user(user.id, username="alice2", password="newpass1")
    assert updated.username == "alice2"
    assert users.authenticate("alice2", "newpass1").id == user.id


def test_update_with_bad_role_changes_nothing(users):
    user = users.create_user("alice", "pw123456", "user")

    with pytest.raises(InvalidInputError):
        users.update_user(user.id, username="renamed", role="root")
    assert users.get_by_id(user.id).username == "alice"


def test_update_to_taken_username_conflicts(users):
    users.create_user("alice", "pw123456", "user")
    bob = users.create_user("bob", "pw123456", "user")

    with pytest.raises(ConflictError):
        users.update_user(bob.id, username="alice")


def test_update_and_delete_of_missing_user(users):
    with pytest.raises(NotFoundError):
        users.update_user(999, username="ghost")
    with pytest.raises(NotFoundError):
        users.delete_user(999)


def test_ensure_admin_exists_only_creates_once(users):
    created = users.ensure_admin_exists("admin", "admin123")

    assert created is not None
    assert created.role == "admin"
    assert users.ensure_admin_exists("admin", "admin123") is None
    assert len(users.list_all()) == 1


def test_role_defaults_to_user_in_the_database(session):
    connection = session.connection()
    connection.execute(
        text(
            "INSERT INTO users (username, password_hash, created_at, updated_at) "
            "VALUES ('raw', 'x', '2024-01-15 00:00:00', '2024-01-15 00:00:00')"
        )
    )

    assert connection.execute(text("SELECT role FROM users WHERE username = 'raw'")).scalar_one() == "user"
