"""Session delivery: token cookie plus JSON body."""

from datetime import datetime, timedelta, timezone

from fastapi import status
from fastapi.responses import JSONResponse

from devcamper.config import get_settings
from devcamper.models.auth import TokenResponse, UserPublic
from devcamper.models.user import User

SESSION_COOKIE = "token"
LOGOUT_COOKIE_VALUE = "none"
LOGOUT_COOKIE_TTL_SECONDS = 10


def user_public(user: User) -> UserPublic:
    """Convert a User model to its public API representation."""
    return UserPublic(
        id=user.id,
        name=user.name,
        email=user.email,
        role=user.role,
        created_at=user.created_at,
    )


def send_token_response(
    user: User, token: str, status_code: int = status.HTTP_200_OK
) -> JSONResponse:
    """Build a response carrying the session token as cookie and in the body."""
    settings = get_settings()
    body = TokenResponse(token=token, data=user_public(user))

    response = JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json"),
    )
    response.set_cookie(
        key=SESSION_COOKIE,
        value=token,
        expires=datetime.now(timezone.utc) + timedelta(days=settings.jwt_cookie_expire_days),
        httponly=True,
        samesite="lax",
        secure=settings.is_production,
    )
    return response


def clear_session_cookie(response: JSONResponse) -> JSONResponse:
    """Overwrite the session cookie with a placeholder that expires in seconds."""
    settings = get_settings()
    response.set_cookie(
        key=SESSION_COOKIE,
        value=LOGOUT_COOKIE_VALUE,
        expires=datetime.now(timezone.utc) + timedelta(seconds=LOGOUT_COOKIE_TTL_SECONDS),
        httponly=True,
        samesite="lax",
        secure=settings.is_production,
    )
    return response
