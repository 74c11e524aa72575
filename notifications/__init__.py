"""
Reminder notifications for Event Announcer.

This module handles:
- Matching family members and companies against date windows
- Resolving how each celebrant relates to each recipient
- Rendering message templates
- Delivering reminders by email and WhatsApp
- Running the scheduled reminder jobs
"""

from .dispatcher import NotificationDispatcher
from .event_reminder import (
    CelebrantReminderJob,
    CompanyReminderJob,
    send_celebrant_reminders,
    send_company_reminders,
)
from .window_matcher import get_month_celebrants, get_today_celebrants, get_upcoming_events

__all__ = [
    'NotificationDispatcher',
    'CelebrantReminderJob',
    'CompanyReminderJob',
    'send_celebrant_reminders',
    'send_company_reminders',
    'get_today_celebrants',
    'get_month_celebrants',
    'get_upcoming_events',
]
