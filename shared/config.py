"""
Settings for the reminder jobs.

Values come from the process environment (a local .env file is loaded first)
and are validated once into pydantic models. The dispatcher and jobs receive
these objects explicitly; nothing re-reads the environment per send.
"""

import os
from collections.abc import Mapping
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from models.notification import Channel
from shared.errors import ConfigurationError

DEFAULT_APP_NAME = "Event Announcer"
DEFAULT_WHATSAPP_API_URL = "https://graph.facebook.com/v19.0"


def _missing(settings: BaseModel, fields: list[str]) -> list[str]:
    return [name for name in fields if getattr(settings, name) in (None, "")]


class EmailSettings(BaseModel):
    """Outbound mail configuration (SMTP or Resend)."""

    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    backend: str = Field("smtp", pattern="^(smtp|resend)$")
    host: str | None = None
    port: int | None = 587
    secure: bool = False
    user: str | None = None
    password: str | None = None
    sender_name: str | None = DEFAULT_APP_NAME
    resend_api_key: str | None = None
    from_address: str | None = None

    @property
    def sender_address(self) -> str | None:
        return self.from_address or self.user

    @property
    def from_header(self) -> str:
        return f'"{self.sender_name}" <{self.sender_address}>'

    def require_complete(self) -> None:
        """Raise ConfigurationError if any field the backend needs is unset."""
        if self.backend == "resend":
            missing = _missing(self, ["resend_api_key", "sender_name"])
            if not self.sender_address:
                missing.append("from_address")
        else:
            missing = _missing(self, ["host", "port", "user", "password", "sender_name"])
        if missing:
            raise ConfigurationError(
                f"Email configuration incomplete, missing: {', '.join(missing)}"
            )


class ChatSettings(BaseModel):
    """WhatsApp Cloud API configuration."""

    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    api_token: str | None = None
    phone_number_id: str | None = None
    api_url: str = DEFAULT_WHATSAPP_API_URL
    timeout: float = Field(10.0, gt=0)

    def require_complete(self) -> None:
        missing = _missing(self, ["api_token", "phone_number_id"])
        if missing:
            raise ConfigurationError(
                f"WhatsApp configuration incomplete, missing: {', '.join(missing)}"
            )


class AppSettings(BaseModel):
    """Everything one job run needs to know."""

    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    app_name: str = DEFAULT_APP_NAME
    data_dir: Path = Path("data")
    family_members_file: str = "family_members.csv"
    recipients_file: str = "recipients.csv"
    companies_file: str = "companies.csv"
    company_officers_file: str = "company-officers.csv"
    channels: tuple[Channel, ...] = (Channel.EMAIL,)
    digest_mode: str = Field("individual", pattern="^(individual|combined)$")
    timezone: str = "UTC"
    company_lead_days: int = Field(30, ge=0)
    date_dayfirst: bool = False
    templates_dir: Path | None = None
    celebrant_schedule: str = "0 7 * * *"
    company_schedule: str = "0 7 * * *"
    log_dir: Path | None = None
    log_level: str = Field("INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    email: EmailSettings = Field(default_factory=EmailSettings)
    chat: ChatSettings = Field(default_factory=ChatSettings)

    @field_validator("channels", mode="before")
    @classmethod
    def _split_channels(cls, value):
        if isinstance(value, str):
            value = [part.strip().lower() for part in value.split(",") if part.strip()]
        return tuple(value)

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value):
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"unknown timezone: {value}") from e
        return value

    @field_validator("channels")
    @classmethod
    def _require_channel(cls, value):
        if not value:
            raise ValueError("at least one notification channel is required")
        return value

    def source_path(self, filename: str) -> Path:
        return self.data_dir / filename

    def validate_channels(self) -> None:
        """Startup check: every enabled channel must be fully configured."""
        if Channel.EMAIL in self.channels:
            self.email.require_complete()
        if Channel.WHATSAPP in self.channels:
            self.chat.require_complete()


def _flag(value: str | None) -> bool | None:
    if value is None or value == "":
        return None
    return value.strip().lower() in ("1", "true", "yes", "on")


def _drop_unset(values: dict) -> dict:
    return {key: value for key, value in values.items() if value not in (None, "")}


def load_settings(environ: Mapping[str, str] | None = None) -> AppSettings:
    """
    Build AppSettings from environment variables.

    Args:
        environ: Mapping to read from. Defaults to os.environ after loading .env.

    Returns:
        Validated AppSettings

    Raises:
        ConfigurationError: If any value is malformed
    """
    if environ is None:
        load_dotenv()
        environ = os.environ

    app_name = environ.get("APP_NAME") or DEFAULT_APP_NAME

    email = _drop_unset(
        {
            "backend": (environ.get("EMAIL_BACKEND") or "").lower(),
            "host": environ.get("SMTP_HOST"),
            "port": environ.get("SMTP_PORT"),
            "secure": _flag(environ.get("SMTP_SECURE")),
            "user": environ.get("SMTP_USER"),
            "password": environ.get("SMTP_PASSWORD"),
            "sender_name": app_name,
            "resend_api_key": environ.get("RESEND_API_KEY"),
            "from_address": environ.get("NOTIFICATION_FROM_EMAIL"),
        }
    )
    chat = _drop_unset(
        {
            "api_token": environ.get("WHATSAPP_TOKEN"),
            "phone_number_id": environ.get("PHONE_NUMBER_ID"),
            "api_url": environ.get("WHATSAPP_API_URL"),
            "timeout": environ.get("WHATSAPP_TIMEOUT"),
        }
    )
    app = _drop_unset(
        {
            "app_name": app_name,
            "data_dir": environ.get("DATA_DIR"),
            "family_members_file": environ.get("FAMILY_MEMBERS_FILE"),
            "recipients_file": environ.get("RECIPIENTS_FILE"),
            "companies_file": environ.get("COMPANIES_FILE"),
            "company_officers_file": environ.get("COMPANY_OFFICERS_FILE"),
            "channels": environ.get("NOTIFY_CHANNELS"),
            "digest_mode": (environ.get("DIGEST_MODE") or "").lower(),
            "timezone": environ.get("REMINDER_TIMEZONE"),
            "company_lead_days": environ.get("COMPANY_LEAD_DAYS"),
            "date_dayfirst": _flag(environ.get("DATE_DAYFIRST")),
            "templates_dir": environ.get("TEMPLATES_DIR"),
            "celebrant_schedule": environ.get("CELEBRANT_SCHEDULE"),
            "company_schedule": environ.get("COMPANY_SCHEDULE"),
            "log_dir": environ.get("REMINDER_LOG_DIR"),
            "log_level": (environ.get("LOG_LEVEL") or "").upper(),
        }
    )

    try:
        return AppSettings(
            **app,
            email=EmailSettings(**email),
            chat=ChatSettings(**chat),
        )
    except PydanticValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e
