"""Services package exports."""

from devcamper.services.auth_service import AuthService
from devcamper.services.email_service import EmailService
from devcamper.services.logging_service import configure_logging, get_logger
from devcamper.services.password_service import PasswordService
from devcamper.services.reset_token_service import ResetTokenService
from devcamper.services.token_service import TokenService
from devcamper.services.user_service import UserService

__all__ = [
    "AuthService",
    "EmailService",
    "PasswordService",
    "ResetTokenService",
    "TokenService",
    "UserService",
    "configure_logging",
    "get_logger",
]
