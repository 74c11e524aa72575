import logging

from apscheduler.schedulers.blocking import BlockingScheduler
from apscheduler.triggers.cron import CronTrigger

from notifications.event_reminder import ReminderJob
from shared.config import AppSettings
from shared.errors import ConfigurationError

logger = logging.getLogger(__name__)


def build_scheduler(settings: AppSettings, jobs: list[ReminderJob]) -> BlockingScheduler:
    """
    Create a scheduler firing each reminder job on its crontab schedule.

    - max_instances=1 keeps a slow run from overlapping the next tick
    - coalesce merges ticks missed while the process was down
    - the jobs carry their own run guard as well
    """
    scheduler = BlockingScheduler(timezone=settings.timezone)

    schedules = {
        "celebrant": settings.celebrant_schedule,
        "company": settings.company_schedule,
    }

    for job in jobs:
        expression = schedules.get(job.name, settings.celebrant_schedule)
        try:
            trigger = CronTrigger.from_crontab(expression, timezone=settings.timezone)
        except ValueError as e:
            raise ConfigurationError(
                f"Invalid schedule for {job.name} reminders: {expression!r} ({e})"
            ) from e

        scheduler.add_job(
            job.run,
            trigger=trigger,
            id=f"send_{job.name}_reminders",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        logger.info("Scheduled %s reminders: %s (%s)", job.name, expression, settings.timezone)

    return scheduler
