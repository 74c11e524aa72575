"""
Integration tests for complete reminder runs.

Drives the CLI and the scheduler setup against real record files, with
transports replaced by mocks at the factory seam.
"""

import tempfile
import unittest
from datetime import date
from pathlib import Path
from unittest.mock import Mock, patch

from apscheduler.triggers.cron import CronTrigger

from ingest.csv_reader import (
    COMPANY_COLUMNS,
    COMPANY_OFFICER_COLUMNS,
    FAMILY_MEMBER_COLUMNS,
    RECIPIENT_COLUMNS,
)
from models import Channel
from notifications.email_sender import validate_email_message
from notifications.event_reminder import CelebrantReminderJob, CompanyReminderJob
from notifications.run_reminders import main, run_once
from notifications.scheduler import build_scheduler
from shared.errors import ConfigurationError
from tests.fixtures.mock_helpers import create_mock_sender, create_test_settings, write_csv

TODAY = date(2026, 10, 19)


class TestFullReminderRun(unittest.TestCase):
    """A household with a couple, a child and an outside recipient."""

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.dir = Path(self._tmp.name)

        write_csv(
            self.dir / "family_members.csv",
            FAMILY_MEMBER_COLUMNS,
            [
                ["1", "Mark", "", "Owusu", "1961-10-19", "male", "", "1988-10-19", "2", ""],
                ["2", "Grace", "", "Owusu", "1964-03-02", "female", "", "1988-10-19", "1", ""],
                ["3", "Kofi", "", "Owusu", "1990-10-19", "male", "1,2", "", "", ""],
                ["4", "Esi", "", "Owusu", "", "female", "1,2", "", "", ""],
            ],
        )
        write_csv(
            self.dir / "recipients.csv",
            RECIPIENT_COLUMNS,
            [
                ["10", "Mark", "Owusu", "+233200000001", "mark@example.com", "1"],
                ["11", "Grace", "Owusu", "+233200000002", "grace@example.com", "2"],
                ["12", "Ama", "Mensah", "+233200000003", "not-an-email", ""],
                ["13", "Yaw", "Boateng", "+233200000004", "yaw@example.com", ""],
            ],
        )
        write_csv(
            self.dir / "companies.csv",
            COMPANY_COLUMNS,
            [
                ["1", "ABC Ltd", "12345", "Private", "2020-01-01", "Active", "1 ABC Street",
                 "2026-11-18", "", "", "2026-11-18", "", ""],
                ["2", "XYZ Ltd", "67890", "Private", "2021-01-01", "Active", "2 XYZ Street",
                 "2026-11-17", "", "", "2026-11-19", "", ""],
            ],
        )
        write_csv(
            self.dir / "company-officers.csv",
            COMPANY_OFFICER_COLUMNS,
            [["1", "John", "Doe", "+441234567890", "john.doe@example.com"]],
        )

        self.sender = create_mock_sender(side_effect=self.validating_send)
        self.factories = {Channel.EMAIL: Mock(return_value=self.sender)}

        patcher = patch("notifications.event_reminder.today_in", return_value=TODAY)
        patcher.start()
        self.addCleanup(patcher.stop)

    def tearDown(self):
        self._tmp.cleanup()

    @staticmethod
    def validating_send(to, subject, html):
        validate_email_message(to, subject, html)
        return "msg_123"

    def settings(self, **overrides):
        return create_test_settings(data_dir=self.dir, log_dir=self.dir / "logs", **overrides)

    def sent_to(self, address):
        return [c.args for c in self.sender.send.call_args_list if c.args[0] == address]

    def test_individual_celebrant_run(self):
        """
        Mark and Kofi have birthdays, Mark and Grace an anniversary.

        Mark and Grace never hear about their own events and see each other
        as 'Your spouse' on the anniversary. Ama's bad address fails alone.
        """
        result = CelebrantReminderJob(self.settings(), sender_factories=self.factories).run()

        self.assertTrue(result.ok)
        report = result.report

        mark_messages = self.sent_to("mark@example.com")
        self.assertEqual(len(mark_messages), 2)
        self.assertIn("Kofi Owusu's", mark_messages[0][2])
        self.assertEqual(mark_messages[1][1], "Anniversary Reminder")
        self.assertIn("Your spouse's", mark_messages[1][2])

        grace_messages = self.sent_to("grace@example.com")
        self.assertEqual(len(grace_messages), 3)
        self.assertIn("Mark Owusu's", grace_messages[0][2])
        self.assertIn("Your spouse's", grace_messages[2][2])

        self.assertEqual(len(self.sent_to("yaw@example.com")), 4)
        self.assertEqual(report.sent, 9)
        self.assertEqual(report.skipped, 3)
        self.assertEqual(report.failed, 4)
        self.assertTrue(
            all(r.recipient_id == "12" for r in report.results if not r.success)
        )

    def test_combined_celebrant_run(self):
        result = CelebrantReminderJob(
            self.settings(digest_mode="combined"), sender_factories=self.factories
        ).run()

        self.assertTrue(result.ok)
        self.assertEqual(self.sender.send.call_count, 4)
        self.assertEqual(result.report.sent, 3)
        self.assertEqual(result.report.failed, 1)

        grace_html = self.sent_to("grace@example.com")[0][2]
        self.assertIn("<p>Mark Owusu, Kofi Owusu</p>", grace_html)
        self.assertIn("<p>Your spouse, Yourself</p>", grace_html)

    def test_company_run(self):
        result = CompanyReminderJob(self.settings(), sender_factories=self.factories).run()

        self.assertTrue(result.ok)
        html = self.sent_to("john.doe@example.com")[0][2]
        self.assertIn("<p>ABC Ltd(12345)</p>", html)
        self.assertNotIn("XYZ Ltd", html)

    @patch("builtins.print")
    def test_run_once_prints_summaries(self, mock_print):
        jobs = [
            CelebrantReminderJob(self.settings(), sender_factories=self.factories),
            CompanyReminderJob(self.settings(), sender_factories=self.factories),
        ]

        self.assertTrue(run_once(jobs))
        printed = " ".join(str(c) for c in mock_print.call_args_list)
        self.assertIn("celebrant reminders complete", printed)
        self.assertIn("company reminders complete", printed)

    @patch("builtins.print")
    @patch("notifications.run_reminders.load_settings")
    def test_cli_dry_run(self, mock_load_settings, mock_print):
        mock_load_settings.return_value = self.settings()

        with patch("notifications.dispatcher.build_email_sender") as mock_build:
            exit_code = main(["--once", "--dry-run", "--job", "companies"])

        self.assertEqual(exit_code, 0)
        mock_build.assert_not_called()

    @patch("builtins.print")
    @patch("notifications.run_reminders.load_settings")
    def test_cli_failed_run_exit_code(self, mock_load_settings, mock_print):
        (self.dir / "recipients.csv").unlink()
        mock_load_settings.return_value = self.settings()

        self.assertEqual(main(["--once", "--dry-run", "--job", "celebrants"]), 1)

    @patch("builtins.print")
    @patch("notifications.run_reminders.load_settings")
    def test_cli_configuration_error(self, mock_load_settings, mock_print):
        mock_load_settings.side_effect = ConfigurationError("bad")

        self.assertEqual(main(["--once"]), 2)

    @patch("notifications.run_reminders.today_in", return_value=TODAY)
    @patch("builtins.print")
    @patch("notifications.run_reminders.load_settings")
    def test_cli_list_month(self, mock_load_settings, mock_print, _mock_today):
        mock_load_settings.return_value = self.settings()

        self.assertEqual(main(["--list-month"]), 0)

        printed = [c.args[0] for c in mock_print.call_args_list]
        self.assertIn("This Month's Birthdays: Mark Owusu, Kofi Owusu", printed)
        self.assertIn("This Month's Anniversaries: Mark Owusu, Grace Owusu", printed)


class TestBuildScheduler(unittest.TestCase):
    """Tests for build_scheduler()."""

    def test_jobs_registered_with_guards(self):
        settings = create_test_settings(celebrant_schedule="0 7 * * *", company_schedule="30 8 * * 1")
        jobs = [CelebrantReminderJob(settings), CompanyReminderJob(settings)]

        scheduler = build_scheduler(settings, jobs)

        registered = {job.id: job for job in scheduler.get_jobs()}
        self.assertEqual(
            set(registered), {"send_celebrant_reminders", "send_company_reminders"}
        )
        company = registered["send_company_reminders"]
        self.assertEqual(company.max_instances, 1)
        self.assertTrue(company.coalesce)
        self.assertIsInstance(company.trigger, CronTrigger)

    def test_invalid_crontab_rejected(self):
        settings = create_test_settings(celebrant_schedule="every morning")

        with self.assertRaises(ConfigurationError):
            build_scheduler(settings, [CelebrantReminderJob(settings)])


if __name__ == "__main__":
    unittest.main()
