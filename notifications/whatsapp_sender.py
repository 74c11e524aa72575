"""WhatsApp Cloud API delivery for reminder messages."""

import logging
import re

import requests

from shared.config import ChatSettings
from shared.errors import DeliveryError, ValidationError

logger = logging.getLogger(__name__)

# E.164: + followed by country code and subscriber number
PHONE_PATTERN = re.compile(r"^\+\d{1,3}\d{1,14}$")


def validate_whatsapp_message(phone: str, text: str) -> None:
    if not isinstance(text, str):
        raise ValidationError("Message text must be a string.")
    if not phone or not text.strip():
        raise ValidationError("Missing recipient phone number or message text.")
    if not isinstance(phone, str) or not PHONE_PATTERN.match(phone):
        raise ValidationError(
            f"Invalid phone number format: {phone}. "
            "Please use E.164 format (e.g., +1234567890)."
        )


def _message_id(response: requests.Response) -> str | None:
    """Pull the message id from an accepted reply; the send has already succeeded."""
    try:
        body = response.json()
    except ValueError:
        logger.warning("WhatsApp reply was not JSON, message id unknown")
        return None
    if not isinstance(body, dict):
        return None
    messages = body.get("messages")
    if not isinstance(messages, list) or not messages or not isinstance(messages[0], dict):
        return None
    return messages[0].get("id")


class WhatsAppSender:
    """Sends plain text messages through the WhatsApp Business API."""

    def __init__(self, settings: ChatSettings, session: requests.Session | None = None):
        settings.require_complete()
        self.settings = settings
        self.session = session or requests.Session()

    @property
    def endpoint(self) -> str:
        return f"{self.settings.api_url.rstrip('/')}/{self.settings.phone_number_id}/messages"

    def send(self, to: str, subject: str, text: str) -> str | None:
        """
        Send one text message. The subject is not used by this channel.

        Returns:
            WhatsApp message id, if the API returned one

        Raises:
            ValidationError: If the phone number or text is invalid
            DeliveryError: If the API call fails
        """
        validate_whatsapp_message(to, text)

        headers = {
            "Authorization": f"Bearer {self.settings.api_token}",
            "Content-Type": "application/json",
        }
        payload = {
            "messaging_product": "whatsapp",
            "to": to,
            "type": "text",
            "text": {"body": text},
        }

        try:
            response = self.session.post(
                self.endpoint,
                json=payload,
                headers=headers,
                timeout=self.settings.timeout,
            )
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise DeliveryError(f"WhatsApp delivery to {to} failed: {e}") from e

        return _message_id(response)
