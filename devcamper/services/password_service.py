"""One-way password hashing with bcrypt."""

from typing import Optional

import bcrypt
import structlog

from devcamper.config import get_settings
from devcamper.exceptions import ValidationError
from devcamper.models.auth import MAX_PASSWORD_BYTES

logger = structlog.get_logger(__name__)


class PasswordService:
    """Slow salted password hashing and constant-time verification."""

    def __init__(self, rounds: Optional[int] = None):
        self.rounds = rounds if rounds is not None else get_settings().bcrypt_rounds

    def hash(self, password: str) -> str:
        """Hash a password using bcrypt with a fresh per-call salt.

        Args:
            password: Plain-text password to hash

        Returns:
            Bcrypt hash string

        Raises:
            ValidationError: If the password is longer than bcrypt accepts
        """
        encoded = password.encode("utf-8")
        if len(encoded) > MAX_PASSWORD_BYTES:
            raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
        salt = bcrypt.gensalt(rounds=self.rounds)
        hashed = bcrypt.hashpw(encoded, salt)
        return hashed.decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        """Verify a password against a bcrypt hash.

        Args:
            password: Plain-text password to check
            password_hash: Bcrypt hash to verify against

        Returns:
            True if the password matches, False otherwise (including when the
            password is too long to have been hashed or the stored hash is
            malformed)
        """
        encoded = password.encode("utf-8")
        if len(encoded) > MAX_PASSWORD_BYTES:
            # Nothing this long was ever hashed, so it cannot match
            return False
        try:
            return bcrypt.checkpw(encoded, password_hash.encode("utf-8"))
        except ValueError:
            logger.warning("password_hash_malformed")
            return False
