"""Tests for date parsing, effective dates and display formatting."""

from datetime import date, datetime

import pytest

from todopro.core.dates import (
    days_until,
    effective_date,
    format_due_date,
    format_timestamp,
    is_overdue,
    month_grid_days,
    parse_iso,
    percentage,
    resolve_day,
    resolve_month,
    round_half_up,
    start_of_week,
    week_days,
)
from todopro.core.exceptions import ParseError
from todopro.core.models import Task


def test_parse_iso_accepts_common_shapes():
    """Date-only, Z-suffixed and SQLite-style timestamps all parse."""
    assert parse_iso("2024-03-01") == datetime(2024, 3, 1)
    assert parse_iso("2024-03-01T15:30:00Z") == datetime(2024, 3, 1, 15, 30)
    assert parse_iso("2024-03-01 15:30:00") == datetime(2024, 3, 1, 15, 30)
    # Offset is dropped, wall clock kept
    assert parse_iso("2024-03-01T15:30:00+05:00") == datetime(2024, 3, 1, 15, 30)


@pytest.mark.parametrize("value", ["", "   ", None, "yesterday", "2024-13-01"])
def test_parse_iso_rejects_garbage(value):
    with pytest.raises(ParseError):
        parse_iso(value)


def test_effective_date_falls_back_to_created_at():
    """Empty or absent due_date means the creation date is used."""
    task = Task(id="1", title="A", due_date="", created_at="2024-03-01T00:00:00Z")
    assert effective_date(task).date() == date(2024, 3, 1)

    task = Task(id="2", title="B", created_at="2024-03-05T10:00:00Z")
    assert effective_date(task).date() == date(2024, 3, 5)


def test_effective_date_prefers_due_date():
    task = Task(id="1", title="A", due_date="2024-04-10", created_at="2024-03-01T00:00:00Z")
    assert effective_date(task) == datetime(2024, 4, 10)


def test_effective_date_unparsable_due_does_not_fall_back():
    task = Task(id="1", title="A", due_date="soon", created_at="2024-03-01T00:00:00Z")
    assert effective_date(task) is None


def test_weeks_start_on_sunday():
    # 2024-03-06 is a Wednesday
    assert start_of_week(date(2024, 3, 6)) == date(2024, 3, 3)
    assert start_of_week(date(2024, 3, 3)) == date(2024, 3, 3)
    days = week_days(datetime(2024, 3, 9, 18, 0))
    assert days[0] == date(2024, 3, 3)
    assert days[-1] == date(2024, 3, 9)


def test_month_grid_covers_whole_weeks():
    days = month_grid_days(2024, 3)
    assert len(days) % 7 == 0
    assert days[0] == date(2024, 2, 25)
    assert days[-1] == date(2024, 4, 6)
    assert date(2024, 3, 1) in days and date(2024, 3, 31) in days


def test_december_grid():
    days = month_grid_days(2024, 12)
    assert date(2024, 12, 31) in days
    assert days[-1].weekday() == 5  # Saturday


def test_is_overdue():
    now = datetime(2024, 3, 10, 12, 0)
    assert is_overdue(Task(id="1", title="A", due_date="2024-03-09"), now)
    # Due today is not overdue yet
    assert not is_overdue(Task(id="2", title="B", due_date="2024-03-10"), now)
    assert not is_overdue(Task(id="3", title="C", due_date="2024-03-01", status="completed"), now)
    assert not is_overdue(Task(id="4", title="D"), now)
    assert not is_overdue(Task(id="5", title="E", due_date="garbage"), now)


def test_days_until_rounds_up():
    now = datetime(2024, 3, 1, 12, 0)
    assert days_until(datetime(2024, 3, 1, 12, 0), now) == 0
    assert days_until(datetime(2024, 3, 1, 18, 0), now) == 1
    assert days_until(datetime(2024, 3, 4, 12, 0), now) == 3
    assert days_until(datetime(2024, 2, 28), now) == -2


def test_rounding_and_percentages():
    assert round_half_up(33.5) == 34
    assert round_half_up(33.33) == 33
    assert round_half_up(2.5) == 3
    assert percentage(1, 3) == 33
    assert percentage(2, 3) == 67
    assert percentage(5, 0) == 0


def test_formatting_never_raises():
    assert format_timestamp("2024-03-01T15:30:00Z") == "Mar 01, 2024 at 3:30 PM"
    assert format_timestamp("2024-03-01T00:05:00") == "Mar 01, 2024 at 12:05 AM"
    assert format_timestamp("") == "Not set"
    assert format_timestamp("yesterday-ish") == "Invalid date"
    assert format_due_date("2024-03-01") == "Mar 01, 2024"
    assert format_due_date(None) == "No due date"
    assert format_due_date("nope") == "Invalid date"


def test_resolve_day_and_month():
    now = datetime(2024, 3, 15, 8, 0)
    assert resolve_day(None, now) == now
    assert resolve_day("2024-01-20", now) == datetime(2024, 1, 20)
    assert resolve_month(None, now) == (2024, 3)
    assert resolve_month("2023-11", now) == (2023, 11)
    assert resolve_month("2023-11-20", now) == (2023, 11)
    with pytest.raises(ParseError):
        resolve_month("2023-1x", now)
