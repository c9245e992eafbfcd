"""FastAPI dependencies for request authentication."""

from typing import Optional

import structlog
from fastapi import Cookie, Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from devcamper.api.session import SESSION_COOKIE
from devcamper.exceptions import InvalidToken
from devcamper.models.user import User
from devcamper.services.token_service import TokenService
from devcamper.services.user_service import UserService

logger = structlog.get_logger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    session_cookie: Optional[str] = Cookie(default=None, alias=SESSION_COOKIE),
) -> User:
    """Resolve the authenticated user from a Bearer header or the session cookie.

    The header wins when both are present. Tokens minted before the user's
    last password change carry a stale version and are rejected.

    Raises:
        InvalidToken: If no token is sent, it fails verification, the user is
            gone, or the token version is stale
    """
    token = credentials.credentials if credentials else session_cookie
    if not token:
        raise InvalidToken()

    claims = TokenService().verify(token)

    user = await UserService().get_by_id(claims.user_id)
    if user is None:
        logger.info("auth_user_not_found", user_id=str(claims.user_id))
        raise InvalidToken()

    if claims.token_version != user.token_version:
        logger.info("auth_token_version_stale", user_id=str(user.id))
        raise InvalidToken()

    return user
