"""
Error taxonomy for the reminder jobs.

Only SourceReadError and startup ConfigurationError are fatal to a run.
Everything raised at the transport boundary is contained per delivery.
"""

from models.notification import ErrorKind


class ReminderError(Exception):
    """Base class for all reminder errors."""

    kind: ErrorKind = ErrorKind.DELIVERY


class SourceReadError(ReminderError):
    """A record source is missing, unreadable or malformed."""

    kind = ErrorKind.SOURCE_READ


class ConfigurationError(ReminderError):
    """Required settings are missing or invalid."""

    kind = ErrorKind.CONFIGURATION


class ValidationError(ReminderError):
    """Bad recipient address, empty message field or wrong field type."""

    kind = ErrorKind.VALIDATION


class DeliveryError(ReminderError):
    """The transport failed to hand the message over."""

    kind = ErrorKind.DELIVERY


# Prefix on every contained or fatal error log line, for log scraping
FAILURE_MARKER = "Sending Message failed"
