"""Auth request and response models with validation."""

import re
from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from devcamper.models.user import Role

# bcrypt only reads the first 72 bytes of its input
MAX_PASSWORD_BYTES = 72

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def _validate_email(v: str) -> str:
    v = v.strip().lower()
    if not EMAIL_PATTERN.match(v):
        raise ValueError("Please add a valid email")
    return v


def _validate_password(v: str) -> str:
    if not v.strip():
        raise ValueError("Password cannot be empty or whitespace only")
    if len(v.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    return v


class RegisterRequest(BaseModel):
    """New account registration.

    Attributes:
        name: Display name (1-50 chars)
        email: Unique email address
        password: Plain-text password (min 6 chars)
        role: ``user`` or ``publisher``; ``admin`` cannot self-register
    """

    name: str = Field(..., min_length=1, max_length=50)
    email: str
    password: str = Field(..., min_length=6)
    role: Role = Role.USER

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        """Ensure name is not whitespace only."""
        stripped = v.strip()
        if not stripped:
            raise ValueError("Please add a name")
        return stripped

    @field_validator("email")
    @classmethod
    def email_valid(cls, v: str) -> str:
        return _validate_email(v)

    @field_validator("password")
    @classmethod
    def password_not_empty(cls, v: str) -> str:
        return _validate_password(v)

    @field_validator("role")
    @classmethod
    def role_self_assignable(cls, v: Role) -> Role:
        """Reject self-registration as admin."""
        if v == Role.ADMIN:
            raise ValueError("Role must be 'user' or 'publisher'")
        return v


class LoginRequest(BaseModel):
    """Login credentials.

    Fields are optional at the schema level so that a missing value surfaces
    as the service's own "Please provide an email and password" error.
    """

    email: Optional[str] = None
    password: Optional[str] = None


class UpdateDetailsRequest(BaseModel):
    """Profile update. Only provided fields are changed."""

    name: Optional[str] = Field(default=None, max_length=50)
    email: Optional[str] = None

    @field_validator("email")
    @classmethod
    def email_valid(cls, v: Optional[str]) -> Optional[str]:
        if not v:
            return None
        return _validate_email(v)

    @field_validator("name")
    @classmethod
    def name_blank_as_missing(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        return v.strip()


class UpdatePasswordRequest(BaseModel):
    """Password change for the authenticated user."""

    current_password: str = Field(..., alias="currentPassword")
    new_password: str = Field(..., alias="newPassword", min_length=6)

    model_config = {"populate_by_name": True}

    @field_validator("new_password")
    @classmethod
    def password_not_empty(cls, v: str) -> str:
        return _validate_password(v)


class ForgotPasswordRequest(BaseModel):
    email: str

    @field_validator("email")
    @classmethod
    def email_valid(cls, v: str) -> str:
        return _validate_email(v)


class ResetPasswordRequest(BaseModel):
    """New password supplied with a reset token from the URL."""

    password: str = Field(..., min_length=6)

    @field_validator("password")
    @classmethod
    def password_not_empty(cls, v: str) -> str:
        return _validate_password(v)


class UserPublic(BaseModel):
    """Public user fields returned by the API."""

    id: UUID
    name: str
    email: str
    role: Role
    created_at: datetime


class TokenResponse(BaseModel):
    """Successful authentication response.

    Attributes:
        success: Always True
        token: Signed session token (also set as the ``token`` cookie)
        data: Public fields of the authenticated user
    """

    success: bool = True
    token: str
    data: UserPublic


class DataResponse(BaseModel):
    """Generic success envelope."""

    success: bool = True
    data: Any


class ErrorResponse(BaseModel):
    """Uniform failure envelope."""

    success: bool = False
    message: str
