"""One-time password reset tokens."""

import hashlib
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

from devcamper.config import get_settings

RESET_TOKEN_BYTES = 32


class ResetTokenService:
    """Generates high-entropy reset tokens and their lookup hashes.

    Only the SHA-256 hex digest is persisted; the raw token travels to the
    user inside the reset URL. A fast hash is enough because the token itself
    carries 256 bits of entropy.
    """

    def __init__(self, expire_minutes: Optional[int] = None):
        if expire_minutes is None:
            expire_minutes = get_settings().reset_token_expire_minutes
        self.expire_minutes = expire_minutes

    @staticmethod
    def hash_token(raw_token: str) -> str:
        return hashlib.sha256(raw_token.encode("utf-8")).hexdigest()

    def generate(self) -> tuple[str, str]:
        """Create a new reset token.

        Returns:
            Tuple of (raw_token, token_hash)
        """
        raw_token = secrets.token_hex(RESET_TOKEN_BYTES)
        return raw_token, self.hash_token(raw_token)

    def expires_at(self, now: Optional[datetime] = None) -> datetime:
        """Expiry timestamp for a token created at ``now``."""
        now = now or datetime.now(timezone.utc)
        return now + timedelta(minutes=self.expire_minutes)
