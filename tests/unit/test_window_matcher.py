"""
Unit tests for notifications/window_matcher.py

Tests today / this month / in-N-days windows, absent dates and ordering.
"""

import unittest
from datetime import date, timedelta
from unittest.mock import patch

from notifications.window_matcher import (
    get_month_celebrants,
    get_today_celebrants,
    get_upcoming_events,
    matches_in_days,
    matches_month,
    matches_today,
)
from tests.fixtures.family_factory import create_test_company, create_test_member

TODAY = date(2026, 10, 19)


class TestPredicates(unittest.TestCase):
    """Tests for the point predicates."""

    def test_today_ignores_year(self):
        self.assertTrue(matches_today(date(1961, 10, 19), TODAY))
        self.assertTrue(matches_today(date(2030, 10, 19), TODAY))

    def test_today_requires_day_and_month(self):
        self.assertFalse(matches_today(date(1961, 10, 18), TODAY))
        self.assertFalse(matches_today(date(1961, 9, 19), TODAY))

    def test_month_ignores_day(self):
        self.assertTrue(matches_month(date(1961, 10, 1), TODAY))
        self.assertTrue(matches_month(date(1961, 10, 31), TODAY))
        self.assertFalse(matches_month(date(1961, 11, 19), TODAY))

    def test_in_days_is_exact(self):
        self.assertTrue(matches_in_days(TODAY + timedelta(days=30), TODAY, 30))
        self.assertFalse(matches_in_days(TODAY + timedelta(days=29), TODAY, 30))
        self.assertFalse(matches_in_days(TODAY + timedelta(days=31), TODAY, 30))

    def test_in_days_uses_full_date(self):
        """Same day/month in another year is not a match."""
        target = TODAY + timedelta(days=30)
        self.assertFalse(matches_in_days(target.replace(year=target.year + 1), TODAY, 30))

    def test_none_never_matches(self):
        self.assertFalse(matches_today(None, TODAY))
        self.assertFalse(matches_month(None, TODAY))
        self.assertFalse(matches_in_days(None, TODAY, 30))

    def test_leap_day_matches_only_on_leap_day(self):
        self.assertFalse(matches_today(date(2000, 2, 29), date(2027, 2, 28)))
        self.assertFalse(matches_today(date(2000, 2, 29), date(2027, 3, 1)))
        self.assertTrue(matches_today(date(2000, 2, 29), date(2028, 2, 29)))


class TestGetTodayCelebrants(unittest.TestCase):
    """Tests for get_today_celebrants()."""

    def test_empty_input_returns_empty_lists(self):
        birthdays, anniversaries = get_today_celebrants([], TODAY)

        self.assertEqual(birthdays, [])
        self.assertEqual(anniversaries, [])

    def test_empty_input_logs_debug(self):
        with self.assertLogs("notifications.window_matcher", level="DEBUG") as logs:
            get_today_celebrants([], TODAY)

        self.assertIn("No family members", logs.output[0])

    def test_members_without_dates_never_match(self):
        members = [create_test_member("1"), create_test_member("2")]

        result = get_today_celebrants(members, TODAY)

        self.assertEqual(result.birthdays, [])
        self.assertEqual(result.anniversaries, [])

    def test_birthday_today(self):
        mark = create_test_member("1", birth_date=date(1961, 10, 19))
        jane = create_test_member("2", birth_date=date(1964, 10, 18))

        result = get_today_celebrants([mark, jane], TODAY)

        self.assertEqual(result.birthdays, [mark])
        self.assertEqual(result.anniversaries, [])

    def test_member_in_both_buckets(self):
        """Each field is matched independently."""
        mark = create_test_member("1", birth_date=date(1961, 10, 19), wedding_date=date(1988, 10, 19))

        result = get_today_celebrants([mark], TODAY)

        self.assertEqual(result.birthdays, [mark])
        self.assertEqual(result.anniversaries, [mark])

    def test_preserves_input_order(self):
        members = [
            create_test_member(str(i), birth_date=date(1950 + i, 10, 19)) for i in range(5)
        ]

        result = get_today_celebrants(list(reversed(members)), TODAY)

        self.assertEqual([m.id for m in result.birthdays], ["4", "3", "2", "1", "0"])

    @patch("notifications.window_matcher.date")
    def test_defaults_to_local_date(self, mock_date):
        mock_date.today.return_value = TODAY
        mark = create_test_member("1", birth_date=date(1961, 10, 19))

        result = get_today_celebrants([mark])

        self.assertEqual(result.birthdays, [mark])


class TestGetMonthCelebrants(unittest.TestCase):
    """Tests for get_month_celebrants()."""

    def test_empty_input_returns_empty_lists(self):
        result = get_month_celebrants([], TODAY)

        self.assertEqual(result.birthdays, [])
        self.assertEqual(result.anniversaries, [])

    def test_whole_month_matches(self):
        first = create_test_member("1", birth_date=date(1990, 10, 1))
        last = create_test_member("2", wedding_date=date(2010, 10, 31))
        other = create_test_member("3", birth_date=date(1990, 11, 19), wedding_date=date(2010, 9, 19))

        result = get_month_celebrants([first, last, other], TODAY)

        self.assertEqual(result.birthdays, [first])
        self.assertEqual(result.anniversaries, [last])


class TestGetUpcomingEvents(unittest.TestCase):
    """Tests for get_upcoming_events()."""

    def test_empty_input_returns_empty_lists(self):
        result = get_upcoming_events([], TODAY)

        self.assertEqual(result.accounts_due, [])
        self.assertEqual(result.returns_due, [])

    def test_accounts_due_in_exactly_30_days(self):
        abc = create_test_company("1", accounts_due_date=TODAY + timedelta(days=30))

        result = get_upcoming_events([abc], TODAY)

        self.assertEqual(result.accounts_due, [abc])
        self.assertEqual(result.returns_due, [])

    def test_29_and_31_days_excluded(self):
        """The window is a single day, not a 'within 30 days' range."""
        early = create_test_company("1", accounts_due_date=TODAY + timedelta(days=29))
        late = create_test_company("2", accounts_due_date=TODAY + timedelta(days=31))
        soon = create_test_company("3", returns_due_date=TODAY + timedelta(days=15))

        result = get_upcoming_events([early, late, soon], TODAY)

        self.assertEqual(result.accounts_due, [])
        self.assertEqual(result.returns_due, [])

    def test_both_deadlines(self):
        due = TODAY + timedelta(days=30)
        abc = create_test_company("1", accounts_due_date=due, returns_due_date=due)

        result = get_upcoming_events([abc], TODAY)

        self.assertEqual(result.accounts_due, [abc])
        self.assertEqual(result.returns_due, [abc])

    def test_next_due_dates_ignored(self):
        """Only the *_due_date fields take part."""
        abc = create_test_company(
            "1",
            accounts_next_due_date=TODAY + timedelta(days=30),
            returns_next_due_date=TODAY + timedelta(days=30),
        )

        result = get_upcoming_events([abc], TODAY)

        self.assertEqual(result.accounts_due, [])
        self.assertEqual(result.returns_due, [])

    def test_custom_lead_days(self):
        abc = create_test_company("1", returns_due_date=TODAY + timedelta(days=7))

        result = get_upcoming_events([abc], TODAY, days=7)

        self.assertEqual(result.returns_due, [abc])


if __name__ == "__main__":
    unittest.main()
