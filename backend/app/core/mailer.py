"""
Outgoing mail for password reset keys.
"""
import asyncio
import logging
import smtplib
from email.message import EmailMessage
from typing import Optional

from app.config import Settings, get_settings

logger = logging.getLogger(__name__)


class Mailer:
    """Send mail through an SMTP relay."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    def send_message_sync(self, message: EmailMessage) -> None:
        with smtplib.SMTP(host=self.settings.smtp_host, port=self.settings.smtp_port) as smtp:
            smtp.send_message(message)

    async def send_message(self, message: EmailMessage) -> None:
        await asyncio.to_thread(self.send_message_sync, message)

    def reset_link(self, domain: str, reset_key: str) -> str:
        base = self.settings.reset_url.rstrip("/")
        if not base.startswith(("http://", "https://")):
            base = f"{domain.rstrip('/')}/{base.lstrip('/')}"
        return f"{base}/{reset_key}"

    def build_reset_key_message(
        self,
        domain: str,
        ip: str,
        user_cookie: Optional[str],
        username: str,
        reset_key: str,
        recipient: str,
    ) -> EmailMessage:
        """Compose the reset mail; the requester's IP and last_user cookie are included for audit."""
        reset_url = self.reset_link(domain, reset_key)
        validity = self.settings.reset_validity_hours

        message = EmailMessage()
        message["Subject"] = "Password reset request"
        message["From"] = self.settings.mail_from
        message["To"] = recipient
        message.set_content(
            f"Hello {username},\n\n"
            f"A password reset was requested for your account.\n"
            f"Use the link below within {validity:g} hours to choose a new password:\n\n"
            f"    {reset_url}\n\n"
            f"Request origin: {ip}\n"
            f"Last user on that browser: {user_cookie or 'unknown'}\n\n"
            f"If you did not request this, you can ignore this message.\n"
        )
        return message

    async def mail_reset_key(
        self,
        domain: str,
        ip: str,
        user_cookie: Optional[str],
        username: str,
        reset_key: str,
        recipient: Optional[str],
    ) -> bool:
        """
        Mail a reset key to the user.

        Returns:
            True if the message was handed to the relay, False otherwise
        """
        if not recipient:
            logger.warning(f"RESET KEY NOT MAILED - NO ADDRESS ON RECORD (username={username})")
            return False

        message = self.build_reset_key_message(
            domain, ip, user_cookie, username, reset_key, recipient
        )
        try:
            await self.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"RESET KEY MAIL FAILED (username={username}, smtp_host={self.settings.smtp_host}): {e}")
            return False

        logger.info(f"RESET KEY MAILED (username={username}, ip={ip})")
        return True
