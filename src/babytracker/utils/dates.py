"""
Date and time helpers for the BabyTracker application.

Entries arrive from several clients that do not agree on a time field, so
the helpers here normalize ISO strings into timezone-aware UTC datetimes
and pick the timestamp an entry should be charted at.

Functions:
    utc_now_iso: Current UTC time as an ISO string with a ``Z`` suffix
    parse_datetime: Parse an ISO date/datetime string into an aware datetime
    entry_event_time: Return the event time string of a tracker entry
    time_range_start: Resolve a report time-range token to its window start
    calendar_date: Calendar date of an ISO string, as written
    calculate_pregnancy_week: Pregnancy week for a due date
    describe_age_or_due: Human readable age or "Due in N days" text
"""

import math
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, Optional

# Ordered by precedence: the first populated field wins.
EVENT_TIME_FIELDS = ("startDateTime", "startTime", "time", "createdAt")

TIME_RANGE_WINDOWS: Dict[str, timedelta] = {
    "last24hours": timedelta(hours=24),
    "last7days": timedelta(days=7),
    "last30days": timedelta(days=30),
}
DEFAULT_TIME_RANGE = "last7days"


def utc_now_iso(now: Optional[datetime] = None) -> str:
    """
    Format a UTC timestamp the way browsers do (``2025-02-10T08:15:00.000Z``).

    Args:
        now: Optional datetime to format, defaults to the current time

    Returns:
        ISO 8601 string with millisecond precision and a ``Z`` suffix
    """
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    now = now.astimezone(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_datetime(value: Any) -> Optional[datetime]:
    """
    Parse an ISO 8601 date or datetime string.

    Naive values are assumed to be UTC. Date-only strings resolve to
    midnight UTC.

    Args:
        value: String to parse (other types return None)

    Returns:
        Timezone-aware datetime, or None if the value is not a valid date
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def entry_event_time(entry: Dict[str, Any]) -> Optional[str]:
    """
    Return the raw timestamp string an entry should be charted at.

    Args:
        entry: Tracker entry dictionary

    Returns:
        First populated value of EVENT_TIME_FIELDS, or None
    """
    for field in EVENT_TIME_FIELDS:
        value = entry.get(field)
        if isinstance(value, str) and value:
            return value
    return None


def time_range_start(time_range: str, now: datetime) -> datetime:
    """
    Resolve a report time-range token to the start of its window.

    Unknown tokens fall back to the last seven days.

    Args:
        time_range: One of ``last24hours``, ``last7days``, ``last30days``
        now: End of the window

    Returns:
        Start of the window
    """
    window = TIME_RANGE_WINDOWS.get(time_range, TIME_RANGE_WINDOWS[DEFAULT_TIME_RANGE])
    return now - window


def calendar_date(value: Any) -> Optional[date]:
    """Return the calendar date of an ISO date/datetime string, or None if it does not parse."""
    parsed = parse_datetime(value)
    if parsed is None:
        return None
    # Calendar date as written, not shifted into UTC
    return date.fromisoformat(str(value).strip()[:10])


def calculate_pregnancy_week(
    due_date: Any, today: Optional[date] = None
) -> Optional[int]:
    """
    Calculate the current pregnancy week from an expected due date.

    A due date 40 weeks out is week 1; the result is clamped to 1..42.

    Args:
        due_date: Due date string (``YYYY-MM-DD`` or ISO datetime)
        today: Reference date, defaults to today (UTC)

    Returns:
        Pregnancy week, or None if the due date cannot be parsed
    """
    due = calendar_date(due_date)
    if due is None:
        return None

    today = today or datetime.now(timezone.utc).date()
    remaining_weeks = (due - today).days / 7
    week = 40 - math.ceil(remaining_weeks)
    return max(1, min(week, 42))


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}{'' if count == 1 else 's'}"


def describe_age_or_due(birthday: Any, today: Optional[date] = None) -> str:
    """
    Describe a profile as an age or as time until the due date.

    Example:
        >>> describe_age_or_due("2023-01-10", today=date(2025, 3, 15))
        '2 years, 2 months'
        >>> describe_age_or_due("2025-03-20", today=date(2025, 3, 15))
        'Due in 5 days'
    """
    born = calendar_date(birthday)
    if born is None:
        return ""

    today = today or datetime.now(timezone.utc).date()
    if born > today:
        return f"Due in {_plural((born - today).days, 'day')}"

    years = today.year - born.year
    months = today.month - born.month
    if today.day < born.day:
        months -= 1
    if months < 0:
        years -= 1
        months += 12

    parts = []
    if years > 0:
        parts.append(_plural(years, "year"))
    if months > 0:
        parts.append(_plural(months, "month"))
    return ", ".join(parts) or "0 months"
