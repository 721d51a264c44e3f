"""Opaque API tokens and signed session credentials (JWT, HS256)."""
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

ALGORITHM = "HS256"
API_TOKEN_BYTES = 32


class InvalidCredentialError(Exception):
    """Session credential has a bad signature, is malformed, or has expired."""


@dataclass(frozen=True)
class SessionClaims:
    """Identity asserted by a verified session credential."""

    user_id: int
    username: str
    role: str


def generate_secure_token(byte_length: int = API_TOKEN_BYTES) -> str:
    """Random hex token from the OS CSPRNG; ``2 * byte_length`` characters long."""
    return secrets.token_hex(byte_length)


def issue_session(
    user_id: int,
    username: str,
    role: str,
    secret: str,
    ttl_hours: int,
) -> str:
    """Sign a session credential for the user, valid for ``ttl_hours``."""
    issued_at = datetime.now(timezone.utc)
    claims = {
        "sub": username,
        "user_id": user_id,
        "username": username,
        "role": role,
        "iat": issued_at,
        "exp": issued_at + timedelta(hours=ttl_hours),
    }
    return jwt.encode(claims, secret, algorithm=ALGORITHM)


def verify_session(token: str, secret: str) -> SessionClaims:
    """Verify signature and expiry and return the embedded claims.

    Raises:
        InvalidCredentialError: for any invalid, tampered or expired token.
    """
    try:
        payload = jwt.decode(token, secret, algorithms=[ALGORITHM])
    except JWTError as exc:
        raise InvalidCredentialError("invalid or expired session credential") from exc

    user_id = payload.get("user_id")
    username = payload.get("username")
    role = payload.get("role")
    exp = payload.get("exp")
    if not isinstance(user_id, int) or not isinstance(username, str) or not isinstance(role, str):
        raise InvalidCredentialError("session credential is missing identity claims")
    if not isinstance(exp, (int, float)):
        raise InvalidCredentialError("session credential has no expiry")

    return SessionClaims(
        user_id=user_id,
        username=username,
        role=role,
    )
