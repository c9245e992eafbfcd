"""Signed, stateless session tokens (JWT)."""

from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import UUID

import jwt
import structlog

from devcamper.config import get_settings
from devcamper.exceptions import InvalidToken
from devcamper.models.user import TokenClaims

logger = structlog.get_logger(__name__)

JWT_ALGORITHM = "HS256"


class TokenService:
    """Issues and verifies HS256 session tokens.

    Tokens carry the user id (``sub``), the user's token version (``ver``),
    ``iat`` and ``exp``. Nothing is stored server-side.
    """

    def __init__(self, secret: Optional[str] = None, expire_days: Optional[int] = None):
        settings = get_settings()
        self.secret = secret or settings.jwt_secret
        self.expire_days = expire_days if expire_days is not None else settings.jwt_expire_days

    def issue(self, user_id: UUID, token_version: int = 0) -> str:
        """Create a signed session token.

        Args:
            user_id: User UUID (placed in the ``sub`` claim)
            token_version: Current token epoch of the user

        Returns:
            Encoded JWT string
        """
        now = datetime.now(timezone.utc)
        payload = {
            "sub": str(user_id),
            "ver": token_version,
            "iat": now,
            "exp": now + timedelta(days=self.expire_days),
        }
        token = jwt.encode(payload, self.secret, algorithm=JWT_ALGORITHM)
        logger.debug(
            "session_token_issued",
            user_id=str(user_id),
            expires_days=self.expire_days,
        )
        return token

    def verify(self, token: str) -> TokenClaims:
        """Decode and validate a session token.

        Args:
            token: Encoded JWT string

        Returns:
            Verified claims

        Raises:
            InvalidToken: If the token is expired, tampered with, or malformed
        """
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[JWT_ALGORITHM],
                options={"require": ["sub", "exp", "iat"]},
            )
        except jwt.ExpiredSignatureError:
            logger.info("session_token_expired")
            raise InvalidToken()
        except jwt.InvalidTokenError as e:
            logger.info("session_token_invalid", error=str(e))
            raise InvalidToken()

        try:
            return TokenClaims(
                user_id=UUID(payload["sub"]),
                token_version=int(payload.get("ver", 0)),
                issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
                expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
            )
        except (TypeError, ValueError):
            logger.info("session_token_payload_invalid")
            raise InvalidToken()
