# projectdesk/services/email_service.py
"""
Outgoing mail.

``EmailSender`` is the capability the rest of the code depends on; the SMTP
implementation is what runs in production and tests substitute their own.
"""

import logging
import smtplib
from abc import ABC, abstractmethod
from email.message import EmailMessage
from typing import Tuple

from projectdesk.config import settings
from projectdesk.errors import EmailDeliveryError

logger = logging.getLogger(__name__)


class EmailSender(ABC):
    @abstractmethod
    def send(self, to: str, subject: str, body: str) -> None:
        """Deliver one plain-text message or raise EmailDeliveryError"""


class SmtpEmailSender(EmailSender):
    def __init__(self, host: str, port: int, username: str = "", password: str = "",
                 use_tls: bool = True, mail_from: str = ""):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.mail_from = mail_from

    @classmethod
    def from_settings(cls) -> "SmtpEmailSender":
        return cls(
            host=settings.SMTP_HOST,
            port=settings.SMTP_PORT,
            username=settings.SMTP_USERNAME,
            password=settings.SMTP_PASSWORD,
            use_tls=settings.SMTP_TLS,
            mail_from=settings.MAIL_FROM,
        )

    def send(self, to: str, subject: str, body: str) -> None:
        if not self.host:
            raise EmailDeliveryError("Email is not configured (SMTP_HOST is empty)")

        msg = EmailMessage()
        msg["From"] = self.mail_from
        msg["To"] = to
        msg["Subject"] = subject
        msg.set_content(body)

        try:
            with smtplib.SMTP(self.host, self.port, timeout=30) as s:
                if self.use_tls:
                    s.starttls()
                if self.username and self.password:
                    s.login(self.username, self.password)
                s.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            raise EmailDeliveryError(f"Failed to send email to {to}") from e

        logger.info(f"Sent email '{subject}' to {to}")


def get_email_sender() -> EmailSender:
    """FastAPI dependency returning the configured sender"""
    return SmtpEmailSender.from_settings()


def shared_link_url(shared_link_token: str) -> str:
    return f"{settings.BASE_URL}/api/v1/clients/{shared_link_token}"


def build_start_reminder(project_name: str, shared_link_token: str) -> Tuple[str, str]:
    """Subject and body of the project start reminder"""
    subject = f"{project_name} Start Reminder"
    body = f"Click the link to view the project details: {shared_link_url(shared_link_token)}"
    return subject, body
