from datetime import date, datetime
from zoneinfo import ZoneInfo

from dateutil import parser as date_parser

EMPTY_LIST_TEXT = "None"


def parse_date_string(date_str: str, dayfirst: bool = False) -> date | None:
    """Parse various date formats into a calendar date."""
    if not date_str or not date_str.strip():
        return None
    try:
        return date_parser.parse(date_str.strip(), dayfirst=dayfirst).date()
    except (ValueError, OverflowError, TypeError):
        return None


def today_in(timezone: str = "UTC") -> date:
    """Current calendar date in the given IANA timezone."""
    return datetime.now(ZoneInfo(timezone)).date()


def ordinal(day: int) -> str:
    if 11 <= day % 100 <= 13:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")
    return f"{day}{suffix}"


def format_event_date(value: date) -> str:
    """Format a date like 'Monday, 19th October'."""
    return f"{value:%A}, {ordinal(value.day)} {value:%B}"


def join_names(names: list[str]) -> str:
    """Comma-join display names, falling back to 'None' for an empty list."""
    return ", ".join(names) or EMPTY_LIST_TEXT


def print_summary(job: str, sent: int, failed: int, skipped: int) -> None:
    """Print processing summary."""
    print(f"\n{'=' * 60}")
    print(f"[{datetime.now()}] {job} reminders complete")
    print(f"{'=' * 60}")
    print(f"✓ Sent:    {sent}")
    print(f"⊘ Skipped: {skipped}")
    print(f"✗ Failed:  {failed}")
    print(f"Total:     {sent + failed + skipped}")
    print(f"{'=' * 60}\n")
