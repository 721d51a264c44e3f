"""Credential utilities: password hashing, API tokens, session credentials."""
from xtrack.security.passwords import PasswordHasher
from xtrack.security.tokens import (InvalidCredentialError, SessionClaims,
                                    generate_secure_token, issue_session,
                                    verify_session)

__all__ = [
    "InvalidCredentialError",
    "PasswordHasher",
    "SessionClaims",
    "generate_secure_token",
    "issue_session",
    "verify_session",
]
