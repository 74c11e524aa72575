"""
Notification dispatcher.

Fans rendered reminders out to recipients over every enabled channel. Each
(recipient, message, channel) delivery is independent: a failure is logged,
recorded in the DispatchReport and processing moves on to the next one.
Recipients are processed strictly in list order.
"""

import logging
import threading
from collections.abc import Callable, Mapping, Sequence
from datetime import date
from typing import Protocol

from models import (
    Channel,
    CompanyOfficer,
    DeliveryResult,
    DispatchReport,
    ErrorKind,
    Recipient,
)
from notifications.email_sender import build_email_sender
from notifications.relationship import (
    EventType,
    Relationship,
    resolve_label,
    resolve_relationship,
)
from notifications.renderer import (
    anniversary_values,
    birthday_values,
    celebrations_values,
    company_events_values,
    render_template,
)
from notifications.templates import TemplateSet
from notifications.whatsapp_sender import WhatsAppSender
from notifications.window_matcher import Celebrants, UpcomingEvents
from shared.config import AppSettings
from shared.errors import FAILURE_MARKER, ReminderError

logger = logging.getLogger(__name__)


class Sender(Protocol):
    def send(self, to: str, subject: str, body: str) -> str | None: ...


SenderFactory = Callable[[], Sender]


class NotificationDispatcher:
    """
    Delivers celebrant and company reminders.

    Senders are built lazily on the first delivery that needs them, so a run
    with nothing to send never constructs a transport.
    """

    def __init__(
        self,
        settings: AppSettings,
        templates: TemplateSet | None = None,
        sender_factories: Mapping[Channel, SenderFactory] | None = None,
        cancel_event: threading.Event | None = None,
        dry_run: bool = False,
    ):
        self.settings = settings
        self.templates = templates or TemplateSet()
        self.cancel_event = cancel_event or threading.Event()
        self.dry_run = dry_run
        self._factories: dict[Channel, SenderFactory] = {
            Channel.EMAIL: lambda: build_email_sender(settings.email),
            Channel.WHATSAPP: lambda: WhatsAppSender(settings.chat),
        }
        if sender_factories:
            self._factories.update(sender_factories)
        self._senders: dict[Channel, Sender] = {}

    def _sender(self, channel: Channel) -> Sender:
        if channel not in self._senders:
            self._senders[channel] = self._factories[channel]()
        return self._senders[channel]

    def _address(self, recipient: Recipient | CompanyOfficer, channel: Channel) -> str:
        if channel is Channel.WHATSAPP:
            return recipient.mobile_no or ""
        return recipient.email or ""

    def _deliver(
        self,
        report: DispatchReport,
        recipient: Recipient | CompanyOfficer,
        subject: str,
        bodies: Mapping[Channel, str],
    ) -> bool:
        """
        Attempt one message on every enabled channel.

        Returns:
            False once cancellation has been requested, True otherwise
        """
        for channel in self.settings.channels:
            if self.cancel_event.is_set():
                report.cancelled = True
                return False

            address = self._address(recipient, channel)

            if self.dry_run:
                logger.info(
                    "[DRY RUN] Would send '%s' to %s via %s", subject, recipient.firstname, channel.value
                )
                report.skipped += 1
                continue

            try:
                self._sender(channel).send(address, subject, bodies[channel])
            except ReminderError as e:
                logger.error(
                    "%s: %s to %s (%s) via %s: %s",
                    FAILURE_MARKER, subject, recipient.firstname, address or "no address", channel.value, e,
                )
                result = DeliveryResult(
                    recipient_id=recipient.id,
                    channel=channel,
                    subject=subject,
                    success=False,
                    error_kind=e.kind,
                    error=str(e),
                )
            except Exception as e:
                logger.exception(
                    "%s: %s to %s (%s) via %s", FAILURE_MARKER, subject, recipient.firstname, address, channel.value
                )
                result = DeliveryResult(
                    recipient_id=recipient.id,
                    channel=channel,
                    subject=subject,
                    success=False,
                    error_kind=ErrorKind.DELIVERY,
                    error=str(e),
                )
            else:
                logger.info("%s sent to %s (%s) via %s", subject, recipient.firstname, address, channel.value)
                result = DeliveryResult(
                    recipient_id=recipient.id, channel=channel, subject=subject, success=True
                )
            report.record(result)

        return True

    def _render(self, email_template: str, whatsapp_template: str, values: dict[str, str]):
        return {
            Channel.EMAIL: render_template(email_template, values),
            Channel.WHATSAPP: render_template(whatsapp_template, values),
        }

    def send_celebrant_reminders(
        self,
        recipients: Sequence[Recipient],
        celebrants: Celebrants,
        today: date | None = None,
    ) -> DispatchReport:
        """
        Notify every recipient about today's celebrants.

        In 'individual' mode each recipient gets one message per celebrant and
        never hears about their own birthday or anniversary. In 'combined'
        mode each recipient gets a single digest listing everyone, with
        self/spouse wording in place of names.
        """
        report = DispatchReport()

        if not celebrants.birthdays and not celebrants.anniversaries:
            logger.info("No celebrants to notify today.")
            return report
        if not recipients:
            logger.info("No recipients found to send celebrant reminders.")
            return report

        if self.settings.digest_mode == "combined":
            self._send_celebration_digests(report, recipients, celebrants)
        else:
            self._send_individual_reminders(report, recipients, celebrants, today or date.today())

        logger.info(
            "Celebrant reminders: %d attempted, %d sent, %d failed, %d skipped",
            report.attempted, report.sent, report.failed, report.skipped,
        )
        return report

    def _send_individual_reminders(
        self,
        report: DispatchReport,
        recipients: Sequence[Recipient],
        celebrants: Celebrants,
        today: date,
    ) -> None:
        t = self.templates
        app_name = self.settings.app_name
        plans = [
            (EventType.BIRTHDAY, celebrants.birthdays, birthday_values,
             t.birthday_subject, t.birthday_email, t.birthday_whatsapp),
            (EventType.ANNIVERSARY, celebrants.anniversaries, anniversary_values,
             t.anniversary_subject, t.anniversary_email, t.anniversary_whatsapp),
        ]

        for recipient in recipients:
            for event, members, build_values, subject, email_tpl, whatsapp_tpl in plans:
                for celebrant in members:
                    relationship = resolve_relationship(recipient.family_id, celebrant, event)
                    if relationship is Relationship.SELF:
                        logger.info(
                            "%s is the %s celebrant, skipping message", recipient.firstname, event.value
                        )
                        report.skipped += 1
                        continue

                    label = resolve_label(recipient.family_id, celebrant, event)
                    values = build_values(recipient.firstname, label, today, app_name)
                    bodies = self._render(email_tpl, whatsapp_tpl, values)
                    if not self._deliver(report, recipient, subject, bodies):
                        return

    def _send_celebration_digests(
        self, report: DispatchReport, recipients: Sequence[Recipient], celebrants: Celebrants
    ) -> None:
        t = self.templates
        for recipient in recipients:
            birthdays = [
                resolve_label(recipient.family_id, c, EventType.BIRTHDAY)
                for c in celebrants.birthdays
            ]
            anniversaries = [
                resolve_label(recipient.family_id, c, EventType.ANNIVERSARY)
                for c in celebrants.anniversaries
            ]
            values = celebrations_values(
                recipient.firstname, birthdays, anniversaries, self.settings.app_name
            )
            bodies = self._render(t.celebrations_email, t.celebrations_whatsapp, values)
            if not self._deliver(report, recipient, t.celebrations_subject, bodies):
                return

    def send_company_event_reminders(
        self, officers: Sequence[CompanyOfficer], events: UpcomingEvents
    ) -> DispatchReport:
        """Send every officer one digest of upcoming accounts and returns deadlines."""
        report = DispatchReport()

        if not events.accounts_due and not events.returns_due:
            logger.info("No upcoming company events to notify.")
            return report
        if not officers:
            logger.info("No company officers found to send event reminders.")
            return report

        t = self.templates
        for officer in officers:
            values = company_events_values(
                officer.firstname,
                events.accounts_due,
                events.returns_due,
                self.settings.app_name,
                self.settings.company_lead_days,
            )
            bodies = self._render(t.company_events_email, t.company_events_whatsapp, values)
            if not self._deliver(report, officer, t.company_events_subject, bodies):
                break

        logger.info(
            "Company reminders: %d attempted, %d sent, %d failed, %d skipped",
            report.attempted, report.sent, report.failed, report.skipped,
        )
        return report
