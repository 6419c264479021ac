"""Date utility functions for togglInvoice."""
from datetime import datetime, date, time, timedelta, timezone, tzinfo
from typing import Optional, Tuple

SATURDAY = 5  # date.weekday() numbering, Monday == 0


def parse_day(value: str) -> date:
    """Parse a YYYY-MM-DD string.

    Args:
        value: Date string

    Returns:
        Parsed date

    Raises:
        ValueError: If the string is not a valid date
    """
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_instant(value: str) -> datetime:
    """Parse an ISO 8601 timestamp as returned by the Toggl API.

    Args:
        value: Timestamp such as ``2016-07-04T23:30:00+02:00`` or ``...Z``

    Returns:
        Parsed datetime (naive when the string carries no offset)
    """
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def to_local(dt: datetime, tz: Optional[tzinfo] = None) -> datetime:
    """Express an instant in the given zone, or the system zone when tz is None."""
    return dt.astimezone(tz)


def start_of_day(day: date, tz: Optional[tzinfo] = None) -> datetime:
    """Get the first instant of a calendar day in the given zone.

    Args:
        day: Calendar day
        tz: Time zone, or None for the system local zone

    Returns:
        Aware datetime at 00:00 of that day
    """
    midnight = datetime.combine(day, time.min)
    if tz is None:
        return midnight.astimezone()
    return midnight.replace(tzinfo=tz)


def truncate_to_minute(dt: datetime) -> datetime:
    """Drop seconds and sub-second precision."""
    return dt.replace(second=0, microsecond=0)


def diff_ms(start: datetime, end: datetime) -> int:
    """Milliseconds elapsed from start to end, measured on absolute time.

    Args:
        start: Start instant
        end: End instant

    Returns:
        Elapsed milliseconds (negative if end precedes start)
    """
    if start.tzinfo is not None and end.tzinfo is not None:
        start = start.astimezone(timezone.utc)
        end = end.astimezone(timezone.utc)
    delta = end - start
    return (delta.days * 86400 + delta.seconds) * 1000 + delta.microseconds // 1000


def get_week_range(target_date: date, week_start: int = 0) -> Tuple[date, date]:
    """Get the start and end dates of the week containing the target date.

    Args:
        target_date: Date within the week
        week_start: Day of week to start on (0=Monday, 6=Sunday)

    Returns:
        Tuple of (start_date, end_date)
    """
    wd = (target_date.weekday() - week_start) % 7
    start = target_date - timedelta(days=wd)
    end = start + timedelta(days=6)
    return start, end


def iso_saturday(target_date: date) -> date:
    """Get the Saturday of the ISO (Monday based) week containing target_date.

    A Sunday belongs to the ISO week that started six days earlier, so its
    Saturday is the day before it.
    """
    return target_date + timedelta(days=SATURDAY - target_date.weekday())


def day_str(dt: date) -> str:
    """Format a date as a string with day of week.

    Args:
        dt: Date to format

    Returns:
        Formatted date string
    """
    return f"({['Mo','Tue','Wed','Thu','Fri','Sat','Sun'][dt.weekday()]}){dt}"
