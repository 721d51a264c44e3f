"""Shared fixtures: an in-memory SQLite database and a TestClient over the full app."""
from collections.abc import Generator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine
from sqlmodel import Session

from xtrack.config import Settings
from xtrack.db.sessions import create_db_engine, init_db
from xtrack.main import create_app
from xtrack.security import PasswordHasher

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "admin123"
TEST_ROUNDS = 1000


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        DATABASE_URL="sqlite://",
        JWT_SECRET="test-secret",
        JWT_EXPIRATION_HOURS=1,
        ADMIN_USERNAME=ADMIN_USERNAME,
        ADMIN_PASSWORD=ADMIN_PASSWORD,
        PASSWORD_HASH_ROUNDS=TEST_ROUNDS,
        LOG_LEVEL="WARNING",
    )


@pytest.fixture
def engine() -> Generator[Engine, None, None]:
    db_engine = create_db_engine("sqlite://")
    init_db(db_engine)
    yield db_engine
    db_engine.dispose()


@pytest.fixture
def session(engine: Engine) -> Generator[Session, None, None]:
    with Session(engine) as db_session:
        yield db_session


@pytest.fixture
def hasher() -> PasswordHasher:
    return PasswordHasher(rounds=TEST_ROUNDS)


@pytest.fixture
def app(settings: Settings, engine: Engine) -> FastAPI:
    return create_app(settings=settings, engine=engine)


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    with TestClient(app) as test_client:
        yield test_client


def login(client: TestClient, username: str, password: str) -> str:
    response = client.post("/api/auth/login", json={"username": username, "password": password})
    assert response.status_code == 200, response.text
    return response.json()["data"]["token"]


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(client: TestClient) -> dict[str, str]:
    return bearer(login(client, ADMIN_USERNAME, ADMIN_PASSWORD))


@pytest.fixture
def make_user(client: TestClient, admin_headers: dict[str, str]):
    """Create a user through the API; returns (user, auth headers)."""

    def _make(username: str, password: str = "pw123456", role: str = "user"):
        response = client.post(
            "/api/users",
            json={"username": username, "password": password, "role": role},
            headers=admin_headers,
        )
        assert response.status_code == 201, response.text
        return response.json()["data"], bearer(login(client, username, password))

    return _make


@pytest.fixture
def make_account(client: TestClient):
    """Create an account as the given caller; returns the account payload."""

    def _make(user_id: int, headers: dict[str, str], name: str = "Main"):
        response = client.post("/api/accounts", json={"user_id": user_id, "name": name}, headers=headers)
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _make


@pytest.fixture
def login_headers(client: TestClient):
    """Log in and return the Authorization header for the session."""

    def _login(username: str, password: str) -> dict[str, str]:
        return bearer(login(client, username, password))

    return _login
