"""
CLI script for running reminder jobs.

Usage:
    # Run both jobs once and exit
    uv run python -m notifications.run_reminders --once

    # Run only the company deadline job, without sending anything
    uv run python -m notifications.run_reminders --once --job companies --dry-run

    # Keep running, firing each job on its configured cron schedule
    uv run python -m notifications.run_reminders

    # Print this month's birthdays and anniversaries
    uv run python -m notifications.run_reminders --list-month
"""

import argparse
import logging
import sys

from ingest import read_family_members
from notifications.event_reminder import CelebrantReminderJob, CompanyReminderJob, ReminderJob
from notifications.scheduler import build_scheduler
from notifications.window_matcher import get_month_celebrants
from shared.config import AppSettings, load_settings
from shared.errors import FAILURE_MARKER, ConfigurationError, SourceReadError
from shared.utils import print_summary, today_in

logger = logging.getLogger(__name__)

JOB_CHOICES = {
    "celebrants": [CelebrantReminderJob],
    "companies": [CompanyReminderJob],
    "all": [CelebrantReminderJob, CompanyReminderJob],
}


def run_once(jobs: list[ReminderJob]) -> bool:
    """
    Run each job once and print a summary per job.

    Returns:
        True if every job finished successfully
    """
    all_ok = True
    for job in jobs:
        result = job.run()
        if result.report is not None:
            print_summary(job.name, result.report.sent, result.report.failed, result.report.skipped)
        if not result.ok:
            print(f"✗ {job.name} reminders {result.status}: {result.error or ''}")
            all_ok = False
    return all_ok


def print_month_celebrants(settings: AppSettings) -> None:
    """Print this month's birthdays and wedding anniversaries."""
    family_members = read_family_members(
        settings.source_path(settings.family_members_file), dayfirst=settings.date_dayfirst
    )
    birthdays, anniversaries = get_month_celebrants(family_members, today_in(settings.timezone))
    print(f"This Month's Birthdays: {', '.join(m.full_name for m in birthdays) or 'None'}")
    print(f"This Month's Anniversaries: {', '.join(m.full_name for m in anniversaries) or 'None'}")


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="Send birthday, anniversary and company reminders")

    parser.add_argument(
        "--job",
        choices=sorted(JOB_CHOICES),
        default="all",
        help="Which reminders to send (default: all)",
    )

    parser.add_argument(
        "--once",
        action="store_true",
        help="Run the selected jobs once and exit instead of scheduling them",
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Dry run mode (don't actually send messages)",
    )

    parser.add_argument(
        "--list-month",
        action="store_true",
        help="Print this month's celebrants and exit",
    )

    args = parser.parse_args(argv)

    try:
        settings = load_settings()
    except ConfigurationError as e:
        print(f"{FAILURE_MARKER}: {e}", file=sys.stderr)
        return 2

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.list_month:
        try:
            print_month_celebrants(settings)
        except SourceReadError as e:
            print(f"{FAILURE_MARKER}: {e}", file=sys.stderr)
            return 1
        return 0

    jobs = [job_class(settings, dry_run=args.dry_run) for job_class in JOB_CHOICES[args.job]]

    if args.once:
        return 0 if run_once(jobs) else 1

    try:
        scheduler = build_scheduler(settings, jobs)
    except ConfigurationError as e:
        print(f"{FAILURE_MARKER}: {e}", file=sys.stderr)
        return 2

    print("Reminder scheduler is running. Press Ctrl+C to exit.")
    try:
        scheduler.start()
    except (KeyboardInterrupt, SystemExit):
        # Let in-flight deliveries finish, start no new ones
        for job in jobs:
            job.cancel_event.set()
        scheduler.shutdown(wait=True)
    return 0


if __name__ == "__main__":
    sys.exit(main())
