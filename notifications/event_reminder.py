"""
Reminder jobs.

Each run walks a fixed sequence of states:

    START -> LOAD_RECIPIENTS -> LOAD_ENTITIES -> MATCH_WINDOW -> DISPATCH -> DONE

Any unrecoverable error (unreadable source, bad configuration) moves the run
to FAILED, which logs the failure marker and stops. Nothing is retried and
nothing is carried over to the next run.
"""

import logging
import threading
from collections.abc import Mapping
from datetime import date, datetime
from typing import Any

from ingest import (
    read_companies,
    read_company_officers,
    read_family_members,
    read_recipients,
)
from models import Channel, DispatchReport, JobState, RunResult
from notifications.dispatcher import NotificationDispatcher, SenderFactory
from notifications.error_logger import log_reminder_error
from notifications.templates import load_templates
from notifications.window_matcher import get_today_celebrants, get_upcoming_events
from shared.config import AppSettings, load_settings
from shared.errors import FAILURE_MARKER, ConfigurationError, ReminderError
from shared.utils import today_in

logger = logging.getLogger(__name__)


class ReminderJob:
    """
    Base class for one kind of reminder run.

    Subclasses implement the load/match/dispatch steps. A job instance can be
    shared by a scheduler: overlapping calls to run() return a 'skipped'
    result instead of starting a second run.
    """

    name = "reminder"

    def __init__(
        self,
        settings: AppSettings,
        sender_factories: Mapping[Channel, SenderFactory] | None = None,
        cancel_event: threading.Event | None = None,
        dry_run: bool = False,
    ):
        self.settings = settings
        self.sender_factories = sender_factories
        self.cancel_event = cancel_event or threading.Event()
        self.dry_run = dry_run

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        # One guard per job kind, shared by every instance of it
        cls._running = threading.Lock()

    def load_recipients(self) -> list[Any]:
        raise NotImplementedError

    def load_entities(self) -> list[Any]:
        raise NotImplementedError

    def match(self, entities: list[Any], today: date) -> Any:
        raise NotImplementedError

    def dispatch(
        self,
        dispatcher: NotificationDispatcher,
        recipients: list[Any],
        matched: Any,
        today: date,
    ) -> DispatchReport:
        raise NotImplementedError

    def _build_dispatcher(self) -> NotificationDispatcher:
        if not self.dry_run:
            self.settings.validate_channels()
        return NotificationDispatcher(
            self.settings,
            templates=load_templates(self.settings.templates_dir),
            sender_factories=self.sender_factories,
            cancel_event=self.cancel_event,
            dry_run=self.dry_run,
        )

    def run(self) -> RunResult:
        if not self._running.acquire(blocking=False):
            logger.warning("%s reminder run already in progress, skipping this tick", self.name)
            return RunResult(job=self.name, status="skipped", state=JobState.START)
        try:
            return self._run()
        finally:
            self._running.release()

    def _run(self) -> RunResult:
        state = JobState.START
        logger.info("Running scheduled %s reminder job", self.name)

        try:
            dispatcher = self._build_dispatcher()

            state = JobState.LOAD_RECIPIENTS
            recipients = self.load_recipients()
            logger.info("Recipients: %s", ", ".join(r.firstname for r in recipients))

            state = JobState.LOAD_ENTITIES
            entities = self.load_entities()

            state = JobState.MATCH_WINDOW
            today = today_in(self.settings.timezone)
            matched = self.match(entities, today)

            state = JobState.DISPATCH
            report = self.dispatch(dispatcher, recipients, matched, today)

        except Exception as e:
            if isinstance(e, ReminderError) and e.kind.is_fatal:
                error_kind, error, error_type = e.kind, str(e), e.kind.value
                logger.error("%s: %s", FAILURE_MARKER, e)
            else:
                error_kind, error, error_type = None, repr(e), "unexpected"
                logger.exception("%s: unexpected error in state %s", FAILURE_MARKER, state.value)
            error_file = log_reminder_error(
                error_type=error_type,
                error_message=error,
                context={"job": self.name, "state": state.value},
                log_dir=self.settings.log_dir,
            )
            logger.error("Error details logged to: %s", error_file)
            return RunResult(
                job=self.name,
                status="failed",
                state=JobState.FAILED,
                error_kind=error_kind,
                error=error,
            )

        logger.info("ALL DONE at: %s", datetime.now().isoformat())
        return RunResult(job=self.name, status="success", state=JobState.DONE, report=report)


class CelebrantReminderJob(ReminderJob):
    """Birthday and wedding anniversary reminders for family recipients."""

    name = "celebrant"

    def load_recipients(self):
        return read_recipients(self.settings.source_path(self.settings.recipients_file))

    def load_entities(self):
        return read_family_members(
            self.settings.source_path(self.settings.family_members_file),
            dayfirst=self.settings.date_dayfirst,
        )

    def match(self, entities, today):
        celebrants = get_today_celebrants(entities, today)
        logger.info("Today's Birthdays: %s", ", ".join(m.full_name for m in celebrants.birthdays))
        logger.info(
            "Today's Anniversaries: %s", ", ".join(m.full_name for m in celebrants.anniversaries)
        )
        return celebrants

    def dispatch(self, dispatcher, recipients, matched, today):
        return dispatcher.send_celebrant_reminders(recipients, matched, today=today)


class CompanyReminderJob(ReminderJob):
    """Accounts and returns deadline reminders for company officers."""

    name = "company"

    def load_recipients(self):
        return read_company_officers(
            self.settings.source_path(self.settings.company_officers_file)
        )

    def load_entities(self):
        return read_companies(
            self.settings.source_path(self.settings.companies_file),
            dayfirst=self.settings.date_dayfirst,
        )

    def match(self, entities, today):
        events = get_upcoming_events(entities, today, days=self.settings.company_lead_days)
        logger.info(
            "Upcoming Due Accounts: %s", ", ".join(c.display_name for c in events.accounts_due)
        )
        logger.info(
            "Upcoming Due Returns: %s", ", ".join(c.display_name for c in events.returns_due)
        )
        return events

    def dispatch(self, dispatcher, recipients, matched, today):
        return dispatcher.send_company_event_reminders(recipients, matched)


def _run_from_environment(job_class: type[ReminderJob]) -> bool:
    try:
        settings = load_settings()
    except ConfigurationError as e:
        logger.error("%s: %s", FAILURE_MARKER, e)
        return False
    return job_class(settings).run().ok


def send_celebrant_reminders() -> bool:
    """Scheduler entry point: one celebrant run with settings from the environment."""
    return _run_from_environment(CelebrantReminderJob)


def send_company_reminders() -> bool:
    """Scheduler entry point: one company deadline run with settings from the environment."""
    return _run_from_environment(CompanyReminderJob)
