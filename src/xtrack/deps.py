"""FastAPI dependency injection: app.state holds singletons; Depends() resolves them.

Lifespan (main.py) attaches settings, the engine and the password hasher to
app.state. Services are built per request around a request-scoped session.
Identity dependencies resolve the caller and are passed to handlers as typed
values (Identity / ApiIdentity).
"""
from collections.abc import Generator
from typing import Annotated

from fastapi import Depends, Request, Security
from fastapi.security import APIKeyHeader
from sqlmodel import Session

from xtrack.config import Settings
from xtrack.security import InvalidCredentialError, verify_session
from xtrack.services import (AccountService, ApiIdentity, Identity,
                             StatisticService, UserService)
from xtrack.services.authorization import ensure_admin
from xtrack.services.exceptions import InvalidInputError, UnauthorizedError
from xtrack.utils import parse_positive_id

_authorization_header = APIKeyHeader(
    name="Authorization",
    auto_error=False,
    scheme_name="BearerAuth",
    description='Type "Bearer" followed by a space and the session token.',
)
_api_token_header = APIKeyHeader(
    name="X-API-Token",
    auto_error=False,
    scheme_name="ApiKeyAuth",
    description="Account API token for statistics ingestion.",
)


def get_settings(request: Request) -> Settings:
    """Resolve settings from app.state (set at startup)."""
    return request.app.state.settings


def get_db(request: Request) -> Generator[Session, None, None]:
    """Yield a session bound to the shared engine; closed after the request."""
    with Session(request.app.state.engine) as session:
        yield session


SettingsDep = Annotated[Settings, Depends(get_settings)]
DbSession = Annotated[Session, Depends(get_db)]


def get_user_service(request: Request, session: DbSession) -> UserService:
    return UserService(session, request.app.state.password_hasher)


def get_account_service(session: DbSession) -> AccountService:
    return AccountService(session)


def get_statistic_service(session: DbSession) -> StatisticService:
    return StatisticService(session)


UserServiceDep = Annotated[UserService, Depends(get_user_service)]
AccountServiceDep = Annotated[AccountService, Depends(get_account_service)]
StatisticServiceDep = Annotated[StatisticService, Depends(get_statistic_service)]


def get_current_identity(
    request: Request,
    settings: SettingsDep,
    authorization: Annotated[str | None, Security(_authorization_header)] = None,
) -> Identity:
    """Resolve the caller from ``Authorization: Bearer <token>``."""
    if not authorization:
        raise UnauthorizedError("Authorization header required")

    parts = authorization.split(" ")
    if len(parts) != 2 or parts[0] != "Bearer":
        raise UnauthorizedError("Invalid authorization header format")

    try:
        claims = verify_session(parts[1], settings.JWT_SECRET)
    except InvalidCredentialError as exc:
        raise UnauthorizedError("Invalid or expired token") from exc

    identity = Identity(user_id=claims.user_id, username=claims.username, role=claims.role)
    request.state.identity = identity
    return identity


CurrentIdentity = Annotated[Identity, Depends(get_current_identity)]


def require_admin(identity: CurrentIdentity) -> Identity:
    ensure_admin(identity)
    return identity


AdminIdentity = Annotated[Identity, Depends(require_admin)]


def get_api_identity(
    accounts: AccountServiceDep,
    token: Annotated[str | None, Security(_api_token_header)] = None,
) -> ApiIdentity:
    """Resolve the ingesting account from ``X-API-Token``."""
    if not token:
        raise UnauthorizedError("API token required")

    account = accounts.find_by_token(token)
    if account is None:
        raise UnauthorizedError("Invalid API token")
    return ApiIdentity(account_id=account.id, user_id=account.user_id)


ApiTokenIdentity = Annotated[ApiIdentity, Depends(get_api_identity)]


def require_path_id(value: str, entity: str) -> int:
    """Positive integer id from a path segment, else InvalidInputError("Invalid <entity> ID")."""
    parsed = parse_positive_id(value)
    if parsed is None:
        raise InvalidInputError(f"Invalid {entity} ID")
    return parsed
