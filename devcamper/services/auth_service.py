"""Authentication and credential-lifecycle flows."""

from typing import Optional
from uuid import UUID

import structlog

from devcamper.exceptions import (
    BadRequest,
    EmailDeliveryError,
    InvalidCredentials,
    InvalidOrExpiredToken,
    NotFound,
    Unauthorized,
)
from devcamper.models.user import Role, User
from devcamper.services.email_service import EmailService
from devcamper.services.password_service import PasswordService
from devcamper.services.reset_token_service import ResetTokenService
from devcamper.services.token_service import TokenService
from devcamper.services.user_service import UserService

logger = structlog.get_logger(__name__)

RESET_EMAIL_SUBJECT = "Password reset token"


class AuthService:
    """Orchestrates register, login, profile and password flows.

    Holds no per-request state; collaborators default to the production
    implementations and can be swapped for tests.
    """

    def __init__(
        self,
        user_service: Optional[UserService] = None,
        password_service: Optional[PasswordService] = None,
        token_service: Optional[TokenService] = None,
        reset_token_service: Optional[ResetTokenService] = None,
        email_service: Optional[EmailService] = None,
    ):
        self.password_service = password_service or PasswordService()
        self.user_service = user_service or UserService(self.password_service)
        self.token_service = token_service or TokenService()
        self.reset_token_service = reset_token_service or ResetTokenService()
        self.email_service = email_service or EmailService()

    def _issue(self, user: User) -> str:
        return self.token_service.issue(user.id, user.token_version)

    async def register(
        self,
        name: str,
        email: str,
        password: str,
        role: Role = Role.USER,
    ) -> tuple[User, str]:
        """Create an account and start a session for it.

        Raises:
            ValidationError: If the email is already registered
        """
        user = await self.user_service.create_user(
            name=name, email=email, password=password, role=role
        )
        logger.info("user_registered", user_id=str(user.id), role=user.role.value)
        return user, self._issue(user)

    async def login(
        self, email: Optional[str], password: Optional[str]
    ) -> tuple[User, str]:
        """Authenticate with email and password.

        Unknown email and wrong password raise the same error so callers
        cannot tell which check failed.

        Raises:
            BadRequest: If either field is missing
            InvalidCredentials: If authentication fails
        """
        if not email or not password:
            raise BadRequest("Please provide an email and password")

        credentials = await self.user_service.get_by_email_with_password(email)

        if credentials is None:
            logger.info("login_failed", reason="unknown_email")
            raise InvalidCredentials()

        if not self.password_service.verify(password, credentials.password_hash):
            logger.info("login_failed", reason="bad_password", user_id=str(credentials.user.id))
            raise InvalidCredentials()

        user = credentials.user
        logger.info("user_logged_in", user_id=str(user.id))
        return user, self._issue(user)

    async def get_me(self, user_id: UUID) -> User:
        user = await self.user_service.get_by_id(user_id)
        if user is None:
            raise NotFound("User not found")
        return user

    async def update_details(
        self,
        user_id: UUID,
        name: Optional[str] = None,
        email: Optional[str] = None,
    ) -> User:
        """Change name and/or email of a user.

        Raises:
            BadRequest: If neither field is provided (nothing is written)
            NotFound: If the user does not exist
            ValidationError: If the email is taken
        """
        if not name and not email:
            raise BadRequest("Please provide name or email to update")

        user = await self.user_service.update_details(user_id, name=name, email=email)
        if user is None:
            raise NotFound("User not found")

        return user

    async def update_password(
        self, user_id: UUID, current_password: str, new_password: str
    ) -> tuple[User, str]:
        """Change the password after re-checking the current one.

        Raises:
            NotFound: If the user does not exist
            Unauthorized: If ``current_password`` is wrong (hash left unchanged)
        """
        credentials = await self.user_service.get_by_id_with_password(user_id)
        if credentials is None:
            raise NotFound("User not found")

        if not self.password_service.verify(current_password, credentials.password_hash):
            logger.info("password_change_rejected", user_id=str(user_id))
            raise Unauthorized("Password is incorrect")

        user = await self.user_service.set_password(user_id, new_password)
        if user is None:
            raise NotFound("User not found")

        return user, self._issue(user)

    async def forgot_password(self, email: str, reset_url_base: str) -> None:
        """Issue a reset token and email the reset link to the user.

        The response waits on SMTP delivery. If delivery fails the stored
        token is cleared again before the error propagates.

        Args:
            email: Address of the account to reset
            reset_url_base: URL the raw token is appended to

        Raises:
            NotFound: If no user has this email
            EmailDeliveryError: If the email could not be sent
        """
        user = await self.user_service.get_by_email(email)
        if user is None:
            raise NotFound(f"There is no user with that email of {email}")

        raw_token, token_hash = self.reset_token_service.generate()
        await self.user_service.set_reset_token(
            user.id, token_hash, self.reset_token_service.expires_at()
        )

        reset_url = f"{reset_url_base.rstrip('/')}/{raw_token}"
        message = (
            "You are receiving this email because you (or someone else) has "
            "requested the reset of a password. Please make a PUT request to: "
            f"\n\n {reset_url}"
        )

        try:
            await self.email_service.send(
                to=user.email, subject=RESET_EMAIL_SUBJECT, body=message
            )
        except EmailDeliveryError:
            logger.error("password_reset_email_failed", user_id=str(user.id))
            await self.user_service.clear_reset_token(user.id)
            raise

        logger.info("password_reset_requested", user_id=str(user.id))

    async def reset_password(
        self, raw_token: str, new_password: str
    ) -> tuple[User, str]:
        """Set a new password using a reset token from the emailed link.

        Raises:
            InvalidOrExpiredToken: If no user holds this token or it has expired
        """
        token_hash = self.reset_token_service.hash_token(raw_token)
        updated = await self.user_service.reset_password_with_token(
            token_hash, new_password
        )
        if updated is None:
            logger.info("password_reset_rejected")
            raise InvalidOrExpiredToken("Invalid token")

        logger.info("password_reset_completed", user_id=str(updated.id))
        return updated, self._issue(updated)
