"""Tests for day, week, month and year calendar bucketing."""

from datetime import date, datetime

import pytest

from todopro.core.bucketing import (
    bucket,
    day_view,
    month_view,
    overdue_tasks,
    sort_by_priority,
    tasks_for_day,
    week_view,
    year_view,
)
from todopro.core.exceptions import ValidationError

NOW = datetime(2024, 3, 6, 12, 0)  # Wednesday


def test_day_bucket_is_exact_and_keeps_order(make_task):
    """Only the two tasks on 2024-03-02 come back, in input order."""
    a = make_task(due_date="2024-03-01")
    b = make_task(due_date="2024-03-02")
    c = make_task(due_date="", created_at="2024-03-02T23:59:00Z")

    assert tasks_for_day([a, b, c], date(2024, 3, 2)) == [b, c]


def test_unparsable_dates_are_excluded_not_raised(make_task):
    good = make_task(due_date="2024-03-02")
    bad_due = make_task(due_date="next week")
    bad_created = make_task(created_at="whenever")
    assert tasks_for_day([good, bad_due, bad_created], datetime(2024, 3, 2, 8, 0)) == [good]


def test_sort_by_priority_is_stable(make_task):
    low = make_task(priority="low")
    high1 = make_task(priority="high")
    medium = make_task(priority="medium")
    high2 = make_task(priority="high")
    assert sort_by_priority([low, high1, medium, high2]) == [high1, high2, medium, low]


def test_day_view_lists_overdue_from_unfiltered_source(make_task):
    today = make_task(due_date="2024-03-06", priority="low")
    late = make_task(due_date="2024-03-01", priority="high")
    done_late = make_task(due_date="2024-03-01", status="completed")

    view = day_view([today], NOW, overdue_source=[today, late, done_late], now=NOW)
    assert view.tasks == [today]
    assert view.overdue == [late]
    assert view.is_today
    assert view.to_dict()["date"] == "2024-03-06"


def test_week_view_runs_sunday_to_saturday(make_task):
    monday = make_task(due_date="2024-03-04", priority="low")
    monday_high = make_task(due_date="2024-03-04", priority="high")
    next_week = make_task(due_date="2024-03-10")

    cells = week_view([monday, monday_high, next_week], NOW, now=NOW)
    assert [c.day for c in cells][0] == date(2024, 3, 3)
    assert [c.day for c in cells][-1] == date(2024, 3, 9)
    assert cells[1].tasks == [monday_high, monday]
    assert sum(len(c.tasks) for c in cells) == 2
    assert [c.is_today for c in cells].index(True) == 3


def test_month_cells_overflow_after_three(make_task):
    tasks = [make_task(due_date="2024-03-15", status="completed" if i == 0 else "pending") for i in range(5)]
    grid = month_view(tasks, 2024, 3, now=NOW)

    cell = next(c for c in grid.cells if c.day == date(2024, 3, 15))
    assert len(cell.visible) == 3
    assert cell.overflow == 2
    assert cell.completed_count == 1
    assert grid.label == "Mar 2024"
    assert all(len(week) == 7 for week in grid.weeks)


def test_month_flags_adjacent_days(make_task):
    grid = month_view([], 2024, 3, now=NOW)
    first = grid.cells[0]
    assert first.day == date(2024, 2, 25)
    assert not first.in_month
    assert sum(1 for c in grid.cells if c.is_today) == 1


def test_month_view_rejects_bad_month():
    with pytest.raises(ValidationError):
        month_view([], 2024, 13)


def test_year_view_uses_created_at(make_task):
    tasks = [
        make_task(created_at="2024-01-05T10:00:00Z", status="completed", category="Work"),
        make_task(created_at="2024-01-20T10:00:00Z", status="pending", category="Work", due_date="2025-01-01"),
        make_task(created_at="2024-03-02T10:00:00Z", status="in_progress", priority="high", category="Home"),
        make_task(created_at="2023-12-31T10:00:00Z"),
        make_task(created_at="bad"),
    ]
    summary = year_view(tasks, 2024)

    assert summary.total == 3
    assert summary.completed == 1
    assert summary.completion_rate == 33
    assert summary.months[0].total == 2
    assert summary.months[0].completion_rate == 50
    assert summary.months[2].in_progress == 1
    assert summary.most_productive.label == "Jan"
    assert summary.average_monthly == 0
    assert summary.category_counts == {"Work": 2, "Home": 1}
    assert summary.priority_counts == {"medium": 2, "high": 1}


def test_empty_year_has_no_most_productive_month():
    summary = year_view([], 2024)
    assert summary.most_productive is None
    assert summary.to_dict()["most_productive_month"] is None


def test_overdue_tasks_keep_input_order(make_task):
    a = make_task(due_date="2024-03-02")
    b = make_task(due_date="2024-02-01")
    assert overdue_tasks([a, b], NOW) == [a, b]


def test_bucket_dispatch(make_task):
    task = make_task(due_date="2024-03-06")
    assert bucket([task], NOW, "day") == [task]
    assert len(bucket([task], NOW, "week", now=NOW)) == 7
    assert bucket([task], NOW, "month", now=NOW).month == 3
    assert bucket([task], NOW, "year").year == 2024
    with pytest.raises(ValidationError):
        bucket([task], NOW, "decade")
