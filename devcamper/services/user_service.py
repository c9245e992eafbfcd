"""User credential store backed by PostgreSQL."""

from datetime import datetime, timezone
from typing import Optional
from uuid import UUID, uuid4

import asyncpg
import structlog

from devcamper.database import get_pool
from devcamper.exceptions import ValidationError
from devcamper.models.user import Role, User, UserCredentials
from devcamper.services.password_service import PasswordService

logger = structlog.get_logger(__name__)

USER_COLUMNS = "id, name, email, role, token_version, created_at, updated_at"
CREDENTIAL_COLUMNS = (
    f"{USER_COLUMNS}, password_hash, reset_password_token, reset_password_expire"
)

DUPLICATE_EMAIL_MESSAGE = "Duplicate field value entered"


def _row_to_user(row) -> User:
    return User(
        id=row["id"],
        name=row["name"],
        email=row["email"],
        role=Role(row["role"]),
        token_version=row["token_version"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def _row_to_credentials(row) -> UserCredentials:
    return UserCredentials(
        user=_row_to_user(row),
        password_hash=row["password_hash"],
        reset_password_token=row["reset_password_token"],
        reset_password_expire=row["reset_password_expire"],
    )


class UserService:
    """Service for user persistence.

    Passwords are accepted in plain text and hashed here, so no code path can
    store one unhashed. Lookups return ``User`` (no secrets) unless the
    ``*_with_password`` variant is used.
    """

    def __init__(self, password_service: Optional[PasswordService] = None):
        self.password_service = password_service or PasswordService()

    async def create_user(
        self,
        name: str,
        email: str,
        password: str,
        role: Role = Role.USER,
    ) -> User:
        """Create a new user with a hashed password.

        Args:
            name: Display name
            email: Email address (stored lower-cased)
            password: Plain-text password (will be hashed)
            role: Access level

        Returns:
            Created User model

        Raises:
            ValidationError: If the email is already registered
        """
        user_id = uuid4()
        now = datetime.now(timezone.utc)
        password_hash = self.password_service.hash(password)

        pool = await get_pool()

        try:
            async with pool.acquire() as conn:
                await conn.execute(
                    """
                    INSERT INTO users (id, name, email, role, password_hash, token_version, created_at, updated_at)
                    VALUES ($1, $2, $3, $4, $5, 0, $6, $7)
                    """,
                    user_id,
                    name,
                    email.lower(),
                    role.value,
                    password_hash,
                    now,
                    now,
                )
        except asyncpg.UniqueViolationError:
            logger.info("user_create_duplicate_email", email=email)
            raise ValidationError(DUPLICATE_EMAIL_MESSAGE)

        logger.info("user_created", user_id=str(user_id), role=role.value)

        return User(
            id=user_id,
            name=name,
            email=email.lower(),
            role=role,
            token_version=0,
            created_at=now,
            updated_at=now,
        )

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get a user by email (case-insensitive)."""
        pool = await get_pool()

        async with pool.acquire() as conn:
            row = await conn.fetchrow(
                f"SELECT {USER_COLUMNS} FROM users WHERE LOWER(email) = LOWER($1)",
                email,
            )

        return _row_to_user(row) if row is not None else None

    async def get_by_email_with_password(self, email: str) -> Optional[UserCredentials]:
        """Get a user and their password hash by email, for authentication."""
        pool = await get_pool()

        async with pool.acquire() as conn:
            row = await conn.fetchrow(
                f"SELECT {CREDENTIAL_COLUMNS} FROM users WHERE LOWER(email) = LOWER($1)",
                email,
            )

        return _row_to_credentials(row) if row is not None else None

    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        pool = await get_pool()

        async with pool.acquire() as conn:
            row = await conn.fetchrow(
                f"SELECT {USER_COLUMNS} FROM users WHERE id = $1",
                user_id,
            )

        return _row_to_user(row) if row is not None else None

    async def get_by_id_with_password(self, user_id: UUID) -> Optional[UserCredentials]:
        pool = await get_pool()

        async with pool.acquire() as conn:
            row = await conn.fetchrow(
                f"SELECT {CREDENTIAL_COLUMNS} FROM users WHERE id = $1",
                user_id,
            )

        return _row_to_credentials(row) if row is not None else None

    async def reset_password_with_token(
        self, token_hash: str, password: str, now: Optional[datetime] = None
    ) -> Optional[User]:
        """Consume an unexpired reset token and store a new password.

        Matching the token, checking its expiry and writing the new hash
        happen in one UPDATE, so a token can be consumed at most once even
        when two resets race. Like ``set_password`` it clears both reset
        fields and bumps ``token_version``.

        Args:
            token_hash: SHA-256 hex digest of the raw reset token
            password: New plain-text password
            now: Reference time for the expiry check (defaults to current UTC)

        Returns:
            Updated User model, or None if no user holds an unexpired token
            with this hash
        """
        password_hash = self.password_service.hash(password)
        now = now or datetime.now(timezone.utc)
        pool = await get_pool()

        async with pool.acquire() as conn:
            row = await conn.fetchrow(
                f"""
                UPDATE users
                SET password_hash = $1,
                    reset_password_token = NULL,
                    reset_password_expire = NULL,
                    token_version = token_version + 1,
                    updated_at = $2
                WHERE reset_password_token = $3
                  AND reset_password_expire > $2
                RETURNING {USER_COLUMNS}
                """,
                password_hash,
                now,
                token_hash,
            )

        if row is None:
            return None

        user = _row_to_user(row)
        logger.info("user_password_reset", user_id=str(user.id))
        return user

    async def update_details(
        self,
        user_id: UUID,
        name: Optional[str] = None,
        email: Optional[str] = None,
    ) -> Optional[User]:
        """Update name and/or email. Fields that are None are left unchanged.

        Returns:
            Updated User model, or None if user not found

        Raises:
            ValidationError: If the new email belongs to another user
        """
        set_clauses = []
        params = []
        param_idx = 1

        if name is not None:
            set_clauses.append(f"name = ${param_idx}")
            params.append(name)
            param_idx += 1

        if email is not None:
            set_clauses.append(f"email = ${param_idx}")
            params.append(email.lower())
            param_idx += 1

        if not set_clauses:
            return await self.get_by_id(user_id)

        set_clauses.append(f"updated_at = ${param_idx}")
        params.append(datetime.now(timezone.utc))
        param_idx += 1

        params.append(user_id)

        query = f"""
            UPDATE users
            SET {', '.join(set_clauses)}
            WHERE id = ${param_idx}
            RETURNING {USER_COLUMNS}
        """

        pool = await get_pool()

        try:
            async with pool.acquire() as conn:
                row = await conn.fetchrow(query, *params)
        except asyncpg.UniqueViolationError:
            logger.info("user_update_duplicate_email", user_id=str(user_id))
            raise ValidationError(DUPLICATE_EMAIL_MESSAGE)

        if row is None:
            return None

        logger.info(
            "user_updated",
            user_id=str(user_id),
            fields_updated=[c.split(" = ")[0] for c in set_clauses if "updated_at" not in c],
        )

        return _row_to_user(row)

    async def set_password(self, user_id: UUID, password: str) -> Optional[User]:
        """Re-hash and store a new password.

        Also clears any outstanding reset token and bumps ``token_version`` so
        that session tokens issued before the change stop authenticating.

        Returns:
            Updated User model, or None if user not found
        """
        password_hash = self.password_service.hash(password)
        now = datetime.now(timezone.utc)
        pool = await get_pool()

        async with pool.acquire() as conn:
            row = await conn.fetchrow(
                f"""
                UPDATE users
                SET password_hash = $1,
                    reset_password_token = NULL,
                    reset_password_expire = NULL,
                    token_version = token_version + 1,
                    updated_at = $2
                WHERE id = $3
                RETURNING {USER_COLUMNS}
                """,
                password_hash,
                now,
                user_id,
            )

        if row is None:
            return None

        logger.info("user_password_changed", user_id=str(user_id))
        return _row_to_user(row)

    async def set_reset_token(
        self, user_id: UUID, token_hash: str, expires_at: datetime
    ) -> None:
        """Store the hash and expiry of a newly issued reset token."""
        pool = await get_pool()

        async with pool.acquire() as conn:
            await conn.execute(
                """
                UPDATE users
                SET reset_password_token = $1, reset_password_expire = $2
                WHERE id = $3
                """,
                token_hash,
                expires_at,
                user_id,
            )

        logger.info(
            "reset_token_stored",
            user_id=str(user_id),
            expires_at=expires_at.isoformat(),
        )

    async def clear_reset_token(self, user_id: UUID) -> None:
        pool = await get_pool()

        async with pool.acquire() as conn:
            await conn.execute(
                """
                UPDATE users
                SET reset_password_token = NULL, reset_password_expire = NULL
                WHERE id = $1
                """,
                user_id,
            )

        logger.info("reset_token_cleared", user_id=str(user_id))
