from __future__ import annotations

import asyncio
import logging
import smtplib
from abc import ABC, abstractmethod
from email.message import EmailMessage

from app.core.config import settings
from app.mail.templates import (
    ONE_TIME_CODE_SUBJECT,
    one_time_code_html,
    one_time_code_text,
)

logger = logging.getLogger(__name__)


class MailDeliveryError(Exception):
    """Raised when an outbound message could not be handed to the mail server."""

    def __init__(self, message: str = "Failed to send OTP email") -> None:
        super().__init__(message)
        self.error_code = "mail_delivery_failed"


class MailClient(ABC):
    """Abstract base class for outbound mail."""

    @abstractmethod
    async def send_one_time_code(self, email: str, code: str, user_name: str) -> None:
        """Deliver a password-reset code to ``email``."""
        raise NotImplementedError


class SMTPMailClient(MailClient):
    """Sends mail through an SMTP relay. The blocking client runs in a worker thread."""

    def __init__(
        self,
        host: str,
        port: int,
        username: str | None = None,
        password: str | None = None,
        use_tls: bool = True,
        sender: str | None = None,
    ) -> None:
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.sender = sender or settings.mail_from

    def _build_message(self, email: str, code: str, user_name: str) -> EmailMessage:
        message = EmailMessage()
        message["Subject"] = ONE_TIME_CODE_SUBJECT
        message["From"] = self.sender
        message["To"] = email
        message.set_content(one_time_code_text(code, user_name, settings.otp_expire_minutes))
        message.add_alternative(
            one_time_code_html(code, user_name, settings.otp_expire_minutes), subtype="html"
        )
        return message

    def _send(self, message: EmailMessage) -> None:
        with smtplib.SMTP(self.host, self.port, timeout=10) as smtp:
            if self.use_tls:
                smtp.starttls()
            if self.username and self.password:
                smtp.login(self.username, self.password)
            smtp.send_message(message)

    async def send_one_time_code(self, email: str, code: str, user_name: str) -> None:
        message = self._build_message(email, code, user_name)
        try:
            await asyncio.to_thread(self._send, message)
        except (smtplib.SMTPException, OSError) as e:
            logging.error(f"SMTP delivery to {self.host}:{self.port} failed. Error: {e}")
            raise MailDeliveryError() from e
        logger.info("One-time code email sent", extra={"recipient": email})


class LoggingMailClient(MailClient):
    """Development stand-in that logs instead of sending.

    The code itself is only logged outside production.
    """

    def __init__(self) -> None:
        self.sent: list[tuple[str, str]] = []

    async def send_one_time_code(self, email: str, code: str, user_name: str) -> None:
        self.sent.append((email, code))
        if settings.is_production:
            logger.warning("No SMTP host configured; one-time code for %s not delivered", email)
        else:
            logger.info("One-time code for %s: %s", email, code)


def build_mail_client() -> MailClient:
    if settings.smtp_host:
        return SMTPMailClient(
            host=settings.smtp_host,
            port=settings.smtp_port,
            username=settings.smtp_username,
            password=settings.smtp_password,
            use_tls=settings.smtp_use_tls,
        )
    return LoggingMailClient()
