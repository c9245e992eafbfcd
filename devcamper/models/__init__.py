"""Models package exports."""

from devcamper.models.auth import (
    DataResponse,
    ErrorResponse,
    ForgotPasswordRequest,
    LoginRequest,
    RegisterRequest,
    ResetPasswordRequest,
    TokenResponse,
    UpdateDetailsRequest,
    UpdatePasswordRequest,
    UserPublic,
)
from devcamper.models.user import Role, TokenClaims, User, UserCredentials

__all__ = [
    "DataResponse",
    "ErrorResponse",
    "ForgotPasswordRequest",
    "LoginRequest",
    "RegisterRequest",
    "ResetPasswordRequest",
    "Role",
    "TokenClaims",
    "TokenResponse",
    "UpdateDetailsRequest",
    "UpdatePasswordRequest",
    "User",
    "UserCredentials",
    "UserPublic",
]
