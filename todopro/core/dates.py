"""
FILE: todopro/core/dates.py
PURPOSE: Date parsing, calendar arithmetic and safe date formatting
EXPORTS:
  - parse_iso(value) -> datetime (raises ParseError)
  - safe_parse(value) -> datetime | None
  - has_value(value) -> bool
  - effective_date(task) -> datetime | None
  - is_overdue(task, reference) -> bool
  - start_of_day(), start_of_week(), week_days(), month_grid_days()
  - days_until(due, now) -> int
  - round_half_up(value) -> int
  - resolve_day(value, now) / resolve_month(value, now)
  - format_timestamp(value) / format_due_date(value) -> str
DEPENDENCIES:
  - datetime (stdlib)
  - math (stdlib)
  - todopro.core.exceptions (ParseError)
  - todopro.core.models (Task)
NOTES:
  - Timezone info is dropped: values are compared as local wall-clock times
  - Date-only strings parse to midnight of that day
  - Weeks start on Sunday
  - Formatting never raises; unparsable values render as "Invalid date"
"""

import math
from datetime import date, datetime, timedelta
from typing import List, Optional, Tuple, Union

from .constants import STATUS_COMPLETED
from .exceptions import ParseError
from .models import Task

DateLike = Union[date, datetime]

INVALID_DATE = "Invalid date"


def has_value(value: Optional[str]) -> bool:
    """True when a date field is present and not just whitespace."""
    return bool(value) and bool(str(value).strip())


def parse_iso(value: Optional[str]) -> datetime:
    """
    Parse an ISO-8601 date or timestamp string.

    Args:
        value: "2024-03-01", "2024-03-01T10:00:00Z", "2024-03-01 10:00:00", ...

    Returns:
        Naive datetime (tzinfo dropped, wall-clock preserved)

    Raises:
        ParseError: If value is empty or not ISO-8601
    """
    if not has_value(value):
        raise ParseError(value)

    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        raise ParseError(value) from None

    return parsed.replace(tzinfo=None)


def safe_parse(value: Optional[str]) -> Optional[datetime]:
    """Parse value, returning None instead of raising."""
    try:
        return parse_iso(value)
    except ParseError:
        return None


def to_date(value: DateLike) -> date:
    """Truncate a datetime to its calendar day (dates pass through)."""
    if isinstance(value, datetime):
        return value.date()
    return value


def effective_date(task: Task) -> Optional[datetime]:
    """
    Date used for all calendar placement: due date if set, else creation date.

    Returns:
        Parsed datetime, or None when the chosen field is unparsable

    Notes:
        - An unparsable due date does NOT fall back to created_at; the task
          is simply excluded from date buckets
    """
    if has_value(task.due_date):
        return safe_parse(task.due_date)
    return safe_parse(task.created_at)


def start_of_day(value: DateLike) -> datetime:
    day = to_date(value)
    return datetime(day.year, day.month, day.day)


def start_of_week(value: DateLike) -> date:
    """Sunday on or before the given day."""
    day = to_date(value)
    days_since_sunday = (day.weekday() + 1) % 7
    return day - timedelta(days=days_since_sunday)


def end_of_week(value: DateLike) -> date:
    """Saturday on or after the given day."""
    return start_of_week(value) + timedelta(days=6)


def week_days(value: DateLike) -> List[date]:
    """The 7 days (Sunday..Saturday) of the week containing value."""
    start = start_of_week(value)
    return [start + timedelta(days=offset) for offset in range(7)]


def month_grid_days(year: int, month: int) -> List[date]:
    """
    Days of a calendar grid covering the whole month in full weeks.

    The grid runs from the Sunday on/before the 1st to the Saturday
    on/after the last day, so it may include adjacent-month days.
    """
    first = date(year, month, 1)
    if month == 12:
        last = date(year, 12, 31)
    else:
        last = date(year, month + 1, 1) - timedelta(days=1)

    day = start_of_week(first)
    end = end_of_week(last)
    days = []
    while day <= end:
        days.append(day)
        day += timedelta(days=1)
    return days


def is_overdue(task: Task, reference: Optional[DateLike] = None) -> bool:
    """
    Overdue = due date set, before the start of the reference day, not completed.

    Independent of whichever calendar bucket is being shown.
    """
    if not has_value(task.due_date) or task.status == STATUS_COMPLETED:
        return False

    due = safe_parse(task.due_date)
    if due is None:
        return False

    reference = reference if reference is not None else datetime.now()
    return due < start_of_day(reference)


def days_until(due: datetime, now: datetime) -> int:
    """Whole days until due, rounded up (a deadline later today is 0)."""
    return math.ceil((due - now).total_seconds() / 86400)


def round_half_up(value: float) -> int:
    """Round like a spreadsheet would: 33.5 -> 34, 33.33 -> 33."""
    return int(math.floor(value + 0.5))


def percentage(part: int, total: int) -> int:
    """Rounded percentage, 0 when total is 0."""
    if total <= 0:
        return 0
    return round_half_up(part / total * 100)


def format_timestamp(value: Optional[str]) -> str:
    """
    Format a timestamp for display.

    Examples:
        >>> format_timestamp("2024-03-01T15:30:00Z")
        "Mar 01, 2024 at 3:30 PM"
        >>> format_timestamp("")
        "Not set"
        >>> format_timestamp("yesterday-ish")
        "Invalid date"
    """
    if not has_value(value):
        return "Not set"

    parsed = safe_parse(value)
    if parsed is None:
        return INVALID_DATE

    hour = parsed.strftime("%I").lstrip("0") or "12"
    return parsed.strftime(f"%b %d, %Y at {hour}:%M %p")


def format_due_date(value: Optional[str]) -> str:
    """Format a due date for display ("No due date" / "Invalid date" sentinels)."""
    if not has_value(value):
        return "No due date"

    parsed = safe_parse(value)
    if parsed is None:
        return INVALID_DATE

    return parsed.strftime("%b %d, %Y")


def resolve_day(value: Optional[str], now: datetime) -> datetime:
    """A user-supplied day ("2024-03-01"), or now when omitted."""
    if not has_value(value):
        return now
    return parse_iso(value)


def resolve_month(value: Optional[str], now: datetime) -> Tuple[int, int]:
    """
    A user-supplied month as (year, month).

    Accepts "YYYY-MM" or any ISO date; defaults to the month of now.
    """
    if not has_value(value):
        return now.year, now.month
    text = str(value).strip()
    if len(text) == 7:
        text += "-01"
    parsed = parse_iso(text)
    return parsed.year, parsed.month
