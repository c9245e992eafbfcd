"""Outbound email delivery over SMTP."""

import aiosmtplib
import structlog

from devcamper.config import get_settings
from devcamper.exceptions import EmailDeliveryError

logger = structlog.get_logger(__name__)


class EmailService:
    """Notifier that sends plain-text emails through the configured SMTP relay."""

    async def send(self, to: str, subject: str, body: str) -> None:
        """Send a single email.

        Args:
            to: Recipient address
            subject: Subject line
            body: Plain-text body

        Raises:
            EmailDeliveryError: If the SMTP relay rejects or cannot be reached
        """
        settings = get_settings()

        message = (
            f"From: {settings.email_from_name} <{settings.email_from_address}>\r\n"
            f"To: {to}\r\n"
            f"Subject: {subject}\r\n"
            f"Content-Type: text/plain; charset=utf-8\r\n"
            f"\r\n"
            f"{body}"
        )

        try:
            await aiosmtplib.send(
                message,
                sender=settings.email_from_address,
                recipients=[to],
                hostname=settings.smtp_host,
                port=settings.smtp_port,
                username=settings.smtp_username or None,
                password=settings.smtp_password or None,
                use_tls=settings.smtp_use_tls,
            )
        except Exception as e:
            logger.error("email_send_failed", to=to, subject=subject, error=str(e))
            raise EmailDeliveryError() from e

        logger.info("email_sent", to=to, subject=subject)
