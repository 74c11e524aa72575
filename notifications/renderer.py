"""
Template rendering.

Substitutes [[TOKEN]] placeholders with text. Tokens with no provided value
are left as they are.
"""

import re
from collections.abc import Mapping, Sequence
from datetime import date

from models import Company
from shared.utils import format_event_date, join_names

RECIPIENT_FIRSTNAME = "RECIPIENT_FIRSTNAME"
BIRTH_DAY_CELEBRANT = "BIRTH_DAY_CELEBRANT"
BIRTH_DATE = "BIRTH_DATE"
ANNIVERSARY_CELEBRANT = "ANNIVERSARY_CELEBRANT"
ANNIVERSARY_DATE = "ANNIVERSARY_DATE"
BIRTHDAY_CELEBRANTS = "BIRTHDAY_CELEBRANTS"
ANNIVERSARY_CELEBRANTS = "ANNIVERSARY_CELEBRANTS"
ACCOUNT_DUE_COMPANIES = "ACCOUNT_DUE_COMPANIES"
RETURNS_DUE_COMPANIES = "RETURNS_DUE_COMPANIES"
APP_NAME = "APP_NAME"
LEAD_DAYS = "LEAD_DAYS"

TOKEN_PATTERN = re.compile(r"\[\[([A-Z_]+)\]\]")


def render_template(template: str, values: Mapping[str, str]) -> str:
    """
    Replace every [[NAME]] found in values with its text, in a single pass.

    Substituted text is never scanned again, so a value that itself looks like
    a token is rendered literally.
    """

    def substitute(match: re.Match) -> str:
        return values.get(match.group(1), match.group(0))

    return TOKEN_PATTERN.sub(substitute, template)


def birthday_values(
    recipient_firstname: str, label: str, on: date, app_name: str
) -> dict[str, str]:
    """Values for one birthday message; `on` is the day being celebrated."""
    return {
        RECIPIENT_FIRSTNAME: recipient_firstname,
        BIRTH_DAY_CELEBRANT: label,
        BIRTH_DATE: format_event_date(on),
        APP_NAME: app_name,
    }


def anniversary_values(
    recipient_firstname: str, label: str, on: date, app_name: str
) -> dict[str, str]:
    return {
        RECIPIENT_FIRSTNAME: recipient_firstname,
        ANNIVERSARY_CELEBRANT: label,
        ANNIVERSARY_DATE: format_event_date(on),
        APP_NAME: app_name,
    }


def celebrations_values(
    recipient_firstname: str,
    birthday_labels: Sequence[str],
    anniversary_labels: Sequence[str],
    app_name: str,
) -> dict[str, str]:
    return {
        RECIPIENT_FIRSTNAME: recipient_firstname,
        BIRTHDAY_CELEBRANTS: join_names(list(birthday_labels)),
        ANNIVERSARY_CELEBRANTS: join_names(list(anniversary_labels)),
        APP_NAME: app_name,
    }


def company_events_values(
    recipient_firstname: str,
    accounts_due: Sequence[Company],
    returns_due: Sequence[Company],
    app_name: str,
    lead_days: int,
) -> dict[str, str]:
    return {
        RECIPIENT_FIRSTNAME: recipient_firstname,
        ACCOUNT_DUE_COMPANIES: join_names([c.display_name for c in accounts_due]),
        RETURNS_DUE_COMPANIES: join_names([c.display_name for c in returns_due]),
        LEAD_DAYS: str(lead_days),
        APP_NAME: app_name,
    }
