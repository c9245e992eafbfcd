"""Authentication API endpoints."""

import structlog
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from devcamper.api.dependencies import get_current_user
from devcamper.api.session import clear_session_cookie, send_token_response, user_public
from devcamper.models.auth import (
    DataResponse,
    ForgotPasswordRequest,
    LoginRequest,
    RegisterRequest,
    ResetPasswordRequest,
    UpdateDetailsRequest,
    UpdatePasswordRequest,
)
from devcamper.models.user import User
from devcamper.services.auth_service import AuthService

logger = structlog.get_logger(__name__)

AUTH_PREFIX = "/api/v1/auth"

router = APIRouter(prefix=AUTH_PREFIX, tags=["Auth"])


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(request: RegisterRequest) -> JSONResponse:
    """Register a new user and start a session.

    Raises:
        ValidationError 400: If the email is already registered
    """
    auth_service = AuthService()
    user, token = await auth_service.register(
        name=request.name,
        email=request.email,
        password=request.password,
        role=request.role,
    )
    return send_token_response(user, token, status.HTTP_201_CREATED)


@router.post("/login")
async def login(request: LoginRequest) -> JSONResponse:
    """Login with email and password.

    Raises:
        BadRequest 400: If email or password is missing
        InvalidCredentials 401: If credentials do not match
    """
    auth_service = AuthService()
    user, token = await auth_service.login(request.email, request.password)
    return send_token_response(user, token)


@router.get("/logout")
async def logout(current_user: User = Depends(get_current_user)) -> JSONResponse:
    """Clear the session cookie. Issued tokens are not tracked server-side."""
    response = JSONResponse(content=DataResponse(data={}).model_dump(mode="json"))
    logger.info("user_logged_out", user_id=str(current_user.id))
    return clear_session_cookie(response)


@router.get("/me")
async def get_me(current_user: User = Depends(get_current_user)) -> DataResponse:
    """Get the currently logged-in user."""
    return DataResponse(data=user_public(current_user))


@router.put("/updatedetails")
async def update_details(
    request: UpdateDetailsRequest,
    current_user: User = Depends(get_current_user),
) -> DataResponse:
    """Update name and/or email of the current user.

    Raises:
        BadRequest 400: If neither name nor email is provided
        NotFound 404: If the user no longer exists
    """
    auth_service = AuthService()
    user = await auth_service.update_details(
        current_user.id, name=request.name, email=request.email
    )
    return DataResponse(data=user_public(user))


@router.put("/updatepassword")
async def update_password(
    request: UpdatePasswordRequest,
    current_user: User = Depends(get_current_user),
) -> JSONResponse:
    """Change the current user's password and issue a fresh session.

    Raises:
        Unauthorized 401: If the current password is wrong
    """
    auth_service = AuthService()
    user, token = await auth_service.update_password(
        current_user.id, request.current_password, request.new_password
    )
    return send_token_response(user, token)


@router.post("/forgotpassword")
async def forgot_password(
    request: ForgotPasswordRequest, http_request: Request
) -> DataResponse:
    """Email a password reset link.

    Raises:
        NotFound 404: If no user has this email
        EmailDeliveryError 500: If the email could not be sent
    """
    reset_url_base = f"{str(http_request.base_url).rstrip('/')}{AUTH_PREFIX}/resetpassword"

    auth_service = AuthService()
    await auth_service.forgot_password(request.email, reset_url_base)
    return DataResponse(data="Email sent")


@router.put("/resetpassword/{resettoken}")
async def reset_password(resettoken: str, request: ResetPasswordRequest) -> JSONResponse:
    """Set a new password using the token from the reset email.

    Raises:
        InvalidOrExpiredToken 400: If the token is unknown or expired
    """
    auth_service = AuthService()
    user, token = await auth_service.reset_password(resettoken, request.password)
    return send_token_response(user, token)
