"""Password hashing and verification (passlib, pbkdf2_sha256)."""
import logging

from passlib.context import CryptContext

logger = logging.getLogger(__name__)

_SCHEME = "pbkdf2_sha256"


class PasswordHasher:
    """Salted, deliberately slow password hashing.

    ``rounds`` tunes the pbkdf2 cost; None keeps passlib's default.
    """

    def __init__(self, rounds: int | None = None) -> None:
        settings: dict[str, int] = {}
        if rounds:
            settings[f"{_SCHEME}__rounds"] = rounds
        self._context = CryptContext(schemes=[_SCHEME], deprecated="auto", **settings)

    def hash(self, plaintext: str) -> str:
        return self._context.hash(plaintext)

    def verify(self, password_hash: str, plaintext: str) -> bool:
        """True only if ``plaintext`` matches ``password_hash``.

        A malformed or unknown hash is a mismatch, never an error.
        """
        try:
            return self._context.verify(plaintext, password_hash)
        except (ValueError, TypeError):
            logger.debug("Password hash could not be verified; treating as mismatch")
            return False

