"""
Message templates for celebrant and company reminders.

The built-in set can be overridden per template by dropping a file named
after the template (e.g. birthday_email.html or company_events_whatsapp.txt)
into the configured templates directory.
"""

import logging
from pathlib import Path

from pydantic import BaseModel, ConfigDict

from shared.errors import ConfigurationError

logger = logging.getLogger(__name__)

BIRTHDAY_REMINDER_EMAIL_MESSAGE = """<div>
  <h1>BIRTHDAY REMINDER 🎉</h1>
  <p>Hi [[RECIPIENT_FIRSTNAME]], 👋🏽</p>
  <p>This is a friendly birthday reminder.</p>
  <p>Today, <b>[[BIRTH_DATE]]</b> is <b><i>[[BIRTH_DAY_CELEBRANT]]'s</i></b> birthday!🎉</p>
  <p>Best regards,</p>
  <p>[[APP_NAME]] Team</p>
</div>"""

BIRTHDAY_REMINDER_WHATSAPP_MESSAGE = (
    "Hi [[RECIPIENT_FIRSTNAME]], it is [[BIRTH_DAY_CELEBRANT]]'s birthday today! 🎉"
)

ANNIVERSARY_REMINDER_EMAIL_MESSAGE = """<div>
  <h1>ANNIVERSARY REMINDER 🎊</h1>
  <p>Hi [[RECIPIENT_FIRSTNAME]], 👋🏽</p>
  <p>This is a friendly wedding anniversary reminder.</p>
  <p>Today, <b>[[ANNIVERSARY_DATE]]</b> is <b><i>[[ANNIVERSARY_CELEBRANT]]'s</i></b> wedding anniversary!🎊</p>
  <p>Best regards,</p>
  <p>[[APP_NAME]] Team</p>
</div>"""

ANNIVERSARY_REMINDER_WHATSAPP_MESSAGE = (
    "Hi [[RECIPIENT_FIRSTNAME]], it is [[ANNIVERSARY_CELEBRANT]]'s wedding anniversary today!🎊"
)

CELEBRANT_REMINDER_EMAIL_MESSAGE = """<div>
  <h1> CELEBRATIONS REMINDER 🎉</h1>
  <p>Hi [[RECIPIENT_FIRSTNAME]], 👋🏽</p>
  <p>This is a friendly reminder for today's celebrations.</p>
  <h2>Today's Birthdays 🎉</h2>
  <p>[[BIRTHDAY_CELEBRANTS]]</p>
  <h2>Today's Wedding Anniversaries 🎊</h2>
  <p>[[ANNIVERSARY_CELEBRANTS]]</p>
  <p>Best regards,</p>
  <p>[[APP_NAME]] Team</p>
</div>"""

CELEBRANT_REMINDER_WHATSAPP_MESSAGE = """Hi [[RECIPIENT_FIRSTNAME]],
here are today's celebrations!
Birthdays🎉: [[BIRTHDAY_CELEBRANTS]]
Anniversaries🎊: [[ANNIVERSARY_CELEBRANTS]]"""

COMPANY_EVENT_REMINDER_EMAIL_MESSAGE = """<div>
  <h1> COMPANY EVENT REMINDER 🗣️</h1>
  <p>Hi [[RECIPIENT_FIRSTNAME]], 👋🏽</p>
  <p>This is a friendly reminder for company filings due in exactly [[LEAD_DAYS]] days.</p>
  <h2>Upcoming Due Accounts</h2>
  <p>[[ACCOUNT_DUE_COMPANIES]]</p>
  <h2>Upcoming Due Returns</h2>
  <p>[[RETURNS_DUE_COMPANIES]]</p>
  <p>Best regards,</p>
  <p>[[APP_NAME]] Team</p>
</div>"""

COMPANY_EVENT_REMINDER_WHATSAPP_MESSAGE = """Hi [[RECIPIENT_FIRSTNAME]],
company filings due in exactly [[LEAD_DAYS]] days:
Accounts: [[ACCOUNT_DUE_COMPANIES]]
Returns: [[RETURNS_DUE_COMPANIES]]"""


class TemplateSet(BaseModel):
    """All message bodies and subjects used by the dispatcher."""

    model_config = ConfigDict(frozen=True)

    birthday_email: str = BIRTHDAY_REMINDER_EMAIL_MESSAGE
    birthday_whatsapp: str = BIRTHDAY_REMINDER_WHATSAPP_MESSAGE
    birthday_subject: str = "Birthday Reminder"

    anniversary_email: str = ANNIVERSARY_REMINDER_EMAIL_MESSAGE
    anniversary_whatsapp: str = ANNIVERSARY_REMINDER_WHATSAPP_MESSAGE
    anniversary_subject: str = "Anniversary Reminder"

    celebrations_email: str = CELEBRANT_REMINDER_EMAIL_MESSAGE
    celebrations_whatsapp: str = CELEBRANT_REMINDER_WHATSAPP_MESSAGE
    celebrations_subject: str = "Today's Celebrations Reminder 🎉"

    company_events_email: str = COMPANY_EVENT_REMINDER_EMAIL_MESSAGE
    company_events_whatsapp: str = COMPANY_EVENT_REMINDER_WHATSAPP_MESSAGE
    company_events_subject: str = "Company Events Reminder"


def load_templates(templates_dir: Path | None = None) -> TemplateSet:
    """
    Build the template set, applying any overrides found in templates_dir.

    Args:
        templates_dir: Directory holding <template_name>.html / .txt files

    Returns:
        TemplateSet with overrides applied

    Raises:
        ConfigurationError: If the directory does not exist or a file can't be read
    """
    if templates_dir is None:
        return TemplateSet()

    templates_dir = Path(templates_dir)
    if not templates_dir.is_dir():
        raise ConfigurationError(f"Templates directory not found: {templates_dir}")

    overrides = {}
    for name in TemplateSet.model_fields:
        for suffix in (".html", ".txt"):
            candidate = templates_dir / f"{name}{suffix}"
            if not candidate.is_file():
                continue
            try:
                overrides[name] = candidate.read_text(encoding="utf-8").strip()
            except OSError as e:
                raise ConfigurationError(f"Could not read template {candidate}: {e}") from e
            logger.info("Using template override %s", candidate)
            break

    return TemplateSet(**overrides)
