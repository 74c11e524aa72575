"""
Date window matching for celebrants and company deadlines.

Three windows are supported:
- today: day and month equal today's (year ignored, recurring anniversary)
- this month: month equals the current month
- in N days: calendar date equals today + N days exactly (a point, not a range)

A record whose date field is None never matches. Output keeps input order.
"""

import logging
from collections.abc import Callable, Sequence
from datetime import date, timedelta
from typing import NamedTuple, TypeVar

from models import Company, FamilyMember

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_LEAD_DAYS = 30


class Celebrants(NamedTuple):
    birthdays: list[FamilyMember]
    anniversaries: list[FamilyMember]


class UpcomingEvents(NamedTuple):
    accounts_due: list[Company]
    returns_due: list[Company]


def matches_today(value: date | None, today: date) -> bool:
    if value is None:
        return False
    return value.day == today.day and value.month == today.month


def matches_month(value: date | None, today: date) -> bool:
    if value is None:
        return False
    return value.month == today.month


def matches_in_days(value: date | None, today: date, days: int) -> bool:
    if value is None:
        return False
    return value == today + timedelta(days=days)


def filter_window(
    records: Sequence[T],
    field: Callable[[T], date | None],
    predicate: Callable[[date | None], bool],
) -> list[T]:
    """Keep records whose date field satisfies the window predicate."""
    return [record for record in records if predicate(field(record))]


def get_today_celebrants(
    family_members: Sequence[FamilyMember], today: date | None = None
) -> Celebrants:
    """
    Find family members with a birthday or wedding anniversary today.

    Args:
        family_members: Records to scan
        today: Reference date, defaults to the local date

    Returns:
        Celebrants with birthdays and anniversaries, each possibly empty
    """
    if not family_members:
        logger.debug("No family members provided for celebrant lookup")
        return Celebrants([], [])

    today = today or date.today()

    def is_today(value: date | None) -> bool:
        return matches_today(value, today)

    return Celebrants(
        birthdays=filter_window(family_members, lambda m: m.birth_date, is_today),
        anniversaries=filter_window(family_members, lambda m: m.wedding_date, is_today),
    )


def get_month_celebrants(
    family_members: Sequence[FamilyMember], today: date | None = None
) -> Celebrants:
    """Find family members with a birthday or anniversary in today's month."""
    if not family_members:
        logger.debug("No family members provided for monthly celebrant lookup")
        return Celebrants([], [])

    today = today or date.today()

    def is_this_month(value: date | None) -> bool:
        return matches_month(value, today)

    return Celebrants(
        birthdays=filter_window(family_members, lambda m: m.birth_date, is_this_month),
        anniversaries=filter_window(family_members, lambda m: m.wedding_date, is_this_month),
    )


def get_upcoming_events(
    companies: Sequence[Company], today: date | None = None, days: int = DEFAULT_LEAD_DAYS
) -> UpcomingEvents:
    """
    Find companies whose accounts or returns fall due exactly `days` from today.

    A company due in days-1 or days+1 is not included.
    """
    if not companies:
        logger.debug("No companies provided for upcoming event lookup")
        return UpcomingEvents([], [])

    today = today or date.today()

    def is_due(value: date | None) -> bool:
        return matches_in_days(value, today, days)

    return UpcomingEvents(
        accounts_due=filter_window(companies, lambda c: c.accounts_due_date, is_due),
        returns_due=filter_window(companies, lambda c: c.returns_due_date, is_due),
    )
