"""User and credential models."""

from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID

from pydantic import BaseModel


class Role(str, Enum):
    """Access level of a user account."""

    USER = "user"
    PUBLISHER = "publisher"
    ADMIN = "admin"


class User(BaseModel):
    """A registered user. Never carries the password hash."""

    id: UUID
    name: str
    email: str
    role: Role = Role.USER
    token_version: int = 0
    created_at: datetime
    updated_at: datetime


class UserCredentials(BaseModel):
    """A user together with the secrets needed to authenticate them.

    Only returned by the explicit ``*_with_password`` store lookups.
    """

    user: User
    password_hash: str
    reset_password_token: Optional[str] = None
    reset_password_expire: Optional[datetime] = None


class TokenClaims(BaseModel):
    """Verified contents of a session token."""

    user_id: UUID
    token_version: int = 0
    issued_at: datetime
    expires_at: datetime
