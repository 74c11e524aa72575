"""
Email delivery for reminder messages.

Two backends share one call contract, send(to, subject, html):
- SMTP (host, port, secure flag, user, password, sender name)
- Resend API (api key, from address, sender name)

Configuration is checked when a sender is built; message fields are checked
on every call before anything touches the network.
"""

import re
import smtplib
from email.mime.text import MIMEText
from email.utils import make_msgid

import resend

from shared.config import EmailSettings
from shared.errors import DeliveryError, ValidationError

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def validate_email_message(to: str, subject: str, html: str) -> None:
    """
    Check an outgoing email before any transport call.

    Raises:
        ValidationError: On a malformed address, empty or non-text subject/body
    """
    if not isinstance(subject, str) or not isinstance(html, str):
        raise ValidationError("Subject and HTML content must be strings.")
    if not to or not subject.strip() or not html.strip():
        raise ValidationError("Email parameters (to, subject, html) must be provided.")
    if not isinstance(to, str) or not EMAIL_PATTERN.match(to):
        raise ValidationError(f"Invalid email address: {to}")


class SmtpEmailSender:
    """Sends HTML email through an SMTP server."""

    def __init__(self, settings: EmailSettings):
        settings.require_complete()
        self.settings = settings

    def _build_message(self, to: str, subject: str, html: str) -> MIMEText:
        msg = MIMEText(html, "html", "utf-8")
        msg["From"] = self.settings.from_header
        msg["To"] = to
        msg["Subject"] = subject
        msg["Message-ID"] = make_msgid()
        return msg

    def send(self, to: str, subject: str, html: str) -> str:
        """
        Send one email.

        Returns:
            Message-ID of the sent email

        Raises:
            ValidationError: If the message fails validation
            DeliveryError: If the SMTP conversation fails
        """
        validate_email_message(to, subject, html)
        msg = self._build_message(to, subject, html)
        s = self.settings

        try:
            if s.secure:
                with smtplib.SMTP_SSL(s.host, s.port) as server:
                    server.login(s.user, s.password)
                    server.send_message(msg)
            else:
                with smtplib.SMTP(s.host, s.port) as server:
                    server.ehlo()
                    if not server.has_extn("starttls"):
                        raise DeliveryError(
                            f"SMTP server {s.host}:{s.port} does not offer STARTTLS, "
                            "refusing to send credentials unencrypted"
                        )
                    server.starttls()
                    server.ehlo()
                    server.login(s.user, s.password)
                    server.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            raise DeliveryError(f"SMTP delivery to {to} failed: {e}") from e

        return msg["Message-ID"]


class ResendEmailSender:
    """Sends HTML email through the Resend API."""

    def __init__(self, settings: EmailSettings):
        settings.require_complete()
        self.settings = settings
        resend.api_key = settings.resend_api_key

    def send(self, to: str, subject: str, html: str) -> str | None:
        validate_email_message(to, subject, html)

        try:
            response = resend.Emails.send(
                {
                    "from": self.settings.from_header,
                    "to": to,
                    "subject": subject,
                    "html": html,
                }
            )
        except Exception as e:
            raise DeliveryError(f"Resend delivery to {to} failed: {e}") from e

        return response.get("id")


def build_email_sender(settings: EmailSettings) -> SmtpEmailSender | ResendEmailSender:
    """Pick the backend named in settings. Raises ConfigurationError if incomplete."""
    if settings.backend == "resend":
        return ResendEmailSender(settings)
    return SmtpEmailSender(settings)
