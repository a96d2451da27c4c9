"""
FILE: todopro/core/bucketing.py
PURPOSE: Date bucketing for the day, week, month and year calendar views
EXPORTS:
  - DayCell, DayView, MonthGrid, MonthStats, YearSummary (dataclasses)
  - tasks_for_day(tasks, day) -> List[Task]
  - sort_by_priority(tasks) -> List[Task]
  - overdue_tasks(tasks, reference) -> List[Task]
  - day_view(tasks, reference, overdue_source, now) -> DayView
  - week_view(tasks, reference, now) -> List[DayCell]
  - month_view(tasks, year, month, now) -> MonthGrid
  - year_view(tasks, year) -> YearSummary
  - bucket(tasks, reference, granularity, now) -> view object for granularity
DEPENDENCIES:
  - datetime, dataclasses, typing (stdlib)
  - todopro.core.dates (effective_date, calendar helpers, percentage)
  - todopro.core.models (Task)
NOTES:
  - Day/week/month placement uses effective_date (due date, else created_at)
  - Year view deliberately buckets by created_at month instead
  - Tasks with unparsable dates are excluded, never raised on
  - "Today" flags compare against the supplied now (wall clock by default),
    computed on every call
  - Pure functions: safe to call on every render
"""

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional, Tuple

from .constants import (
    MAX_TASKS_PER_DAY,
    PRIORITY_RANK,
    STATUS_COMPLETED,
    STATUS_IN_PROGRESS,
    STATUS_PENDING,
)
from .dates import (
    DateLike,
    effective_date,
    is_overdue,
    month_grid_days,
    percentage,
    round_half_up,
    safe_parse,
    to_date,
    week_days,
)
from .exceptions import ValidationError
from .models import Task

GRANULARITIES = ("day", "week", "month", "year")

MONTH_LABELS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


@dataclass
class DayCell:
    """One calendar cell: a day plus its tasks (highest priority first)."""

    day: date
    tasks: List[Task] = field(default_factory=list)
    in_month: bool = True
    is_today: bool = False

    @property
    def visible(self) -> List[Task]:
        """Tasks that fit in the cell."""
        return self.tasks[:MAX_TASKS_PER_DAY]

    @property
    def overflow(self) -> int:
        """Count behind the "+N more" marker."""
        return max(len(self.tasks) - MAX_TASKS_PER_DAY, 0)

    @property
    def completed_count(self) -> int:
        return sum(1 for t in self.tasks if t.status == STATUS_COMPLETED)

    def to_dict(self) -> Dict[str, object]:
        return {
            "date": self.day.isoformat(),
            "in_month": self.in_month,
            "is_today": self.is_today,
            "tasks": [t.to_dict() for t in self.tasks],
            "overflow": self.overflow,
            "completed": self.completed_count,
        }


@dataclass
class DayView:
    """Tasks placed on a single day plus everything overdue as of that day."""

    day: date
    tasks: List[Task]
    overdue: List[Task]
    is_today: bool = False

    def to_dict(self) -> Dict[str, object]:
        return {
            "date": self.day.isoformat(),
            "is_today": self.is_today,
            "tasks": [t.to_dict() for t in self.tasks],
            "overdue": [t.to_dict() for t in self.overdue],
        }


@dataclass
class MonthGrid:
    """Calendar grid of whole weeks covering a month."""

    year: int
    month: int
    cells: List[DayCell]

    @property
    def label(self) -> str:
        return f"{MONTH_LABELS[self.month - 1]} {self.year}"

    @property
    def weeks(self) -> List[List[DayCell]]:
        """Cells split into rows of 7 (Sunday..Saturday)."""
        return [self.cells[i:i + 7] for i in range(0, len(self.cells), 7)]

    def to_dict(self) -> Dict[str, object]:
        return {
            "year": self.year,
            "month": self.month,
            "label": self.label,
            "weeks": [[cell.to_dict() for cell in week] for week in self.weeks],
        }


@dataclass
class MonthStats:
    """Status counts for tasks created in one month."""

    month: int
    total: int = 0
    completed: int = 0
    pending: int = 0
    in_progress: int = 0

    @property
    def label(self) -> str:
        return MONTH_LABELS[self.month - 1]

    @property
    def completion_rate(self) -> int:
        return percentage(self.completed, self.total)

    def to_dict(self) -> Dict[str, object]:
        return {
            "month": self.label,
            "total": self.total,
            "completed": self.completed,
            "pending": self.pending,
            "in_progress": self.in_progress,
            "completion_rate": self.completion_rate,
        }


@dataclass
class YearSummary:
    """Year view: 12 month rows plus yearly totals."""

    year: int
    months: List[MonthStats]
    category_counts: Dict[str, int] = field(default_factory=dict)
    priority_counts: Dict[str, int] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return sum(m.total for m in self.months)

    @property
    def completed(self) -> int:
        return sum(m.completed for m in self.months)

    @property
    def completion_rate(self) -> int:
        return percentage(self.completed, self.total)

    @property
    def average_monthly(self) -> int:
        return round_half_up(self.total / 12)

    @property
    def most_productive(self) -> Optional[MonthStats]:
        """First month with the strictly largest non-zero total."""
        best = None
        for stats in self.months:
            if stats.total > (best.total if best else 0):
                best = stats
        return best

    def to_dict(self) -> Dict[str, object]:
        best = self.most_productive
        return {
            "year": self.year,
            "total": self.total,
            "completed": self.completed,
            "completion_rate": self.completion_rate,
            "average_monthly": self.average_monthly,
            "most_productive_month": best.label if best else None,
            "months": [m.to_dict() for m in self.months],
            "category_counts": dict(self.category_counts),
            "priority_counts": dict(self.priority_counts),
        }


def _dated(tasks: Iterable[Task]) -> List[Tuple[Task, date]]:
    """Pair each task with its effective day, dropping unparsable ones."""
    pairs = []
    for task in tasks:
        when = effective_date(task)
        if when is not None:
            pairs.append((task, when.date()))
    return pairs


def _by_day(tasks: Iterable[Task]) -> Dict[date, List[Task]]:
    buckets: Dict[date, List[Task]] = defaultdict(list)
    for task, day in _dated(tasks):
        buckets[day].append(task)
    return buckets


def _today(now: Optional[datetime]) -> date:
    return (now or datetime.now()).date()


def sort_by_priority(tasks: Iterable[Task]) -> List[Task]:
    """High > medium > low; stable, so equal priorities keep input order."""
    return sorted(tasks, key=lambda t: PRIORITY_RANK.get(t.priority, 0), reverse=True)


def tasks_for_day(tasks: Iterable[Task], day: DateLike) -> List[Task]:
    """
    Tasks whose effective date falls on the given day.

    Args:
        tasks: Tasks to bucket (already filtered by the caller)
        day: Reference day (datetime is truncated)

    Returns:
        Matching tasks in input order
    """
    target = to_date(day)
    return [task for task, when in _dated(tasks) if when == target]


def overdue_tasks(tasks: Iterable[Task], reference: Optional[DateLike] = None) -> List[Task]:
    """Tasks overdue as of the start of the reference day, in input order."""
    reference = reference if reference is not None else datetime.now()
    return [t for t in tasks if is_overdue(t, reference)]


def day_view(
    tasks: Iterable[Task],
    reference: DateLike,
    overdue_source: Optional[Iterable[Task]] = None,
    now: Optional[datetime] = None,
) -> DayView:
    """
    Build the day view.

    Args:
        tasks: Filtered tasks to place on the day
        reference: Day being viewed
        overdue_source: Tasks to scan for overdue items (defaults to tasks);
            the day view lists overdue work from the whole store, unfiltered
        now: Clock override for the "today" flag

    Returns:
        DayView with the day's tasks (input order) and overdue tasks
    """
    tasks = list(tasks)
    source = tasks if overdue_source is None else list(overdue_source)
    day = to_date(reference)
    return DayView(
        day=day,
        tasks=tasks_for_day(tasks, day),
        overdue=overdue_tasks(source, day),
        is_today=day == _today(now),
    )


def week_view(
    tasks: Iterable[Task],
    reference: DateLike,
    now: Optional[datetime] = None,
) -> List[DayCell]:
    """
    Seven cells, Sunday through Saturday, for the week containing reference.

    Each cell's tasks are sorted by priority (high first, stable).
    """
    buckets = _by_day(tasks)
    today = _today(now)
    return [
        DayCell(day=day, tasks=sort_by_priority(buckets.get(day, [])), is_today=day == today)
        for day in week_days(reference)
    ]


def month_view(
    tasks: Iterable[Task],
    year: int,
    month: int,
    now: Optional[datetime] = None,
) -> MonthGrid:
    """
    Calendar grid for a month, padded to whole Sunday-start weeks.

    Adjacent-month days are still populated; they're flagged in_month=False
    so renderers can dim them.
    """
    if not 1 <= month <= 12:
        raise ValidationError(f"Invalid month {month}. Must be 1-12")

    buckets = _by_day(tasks)
    today = _today(now)
    cells = [
        DayCell(
            day=day,
            tasks=sort_by_priority(buckets.get(day, [])),
            in_month=day.month == month,
            is_today=day == today,
        )
        for day in month_grid_days(year, month)
    ]
    return MonthGrid(year=year, month=month, cells=cells)


def year_view(tasks: Iterable[Task], year: int) -> YearSummary:
    """
    Month-by-month statistics for tasks CREATED in the given year.

    Notes:
        - Uses created_at, not effective_date
        - Tasks with unparsable created_at are skipped
    """
    months = [MonthStats(month=m) for m in range(1, 13)]
    category_counts: Dict[str, int] = {}
    priority_counts: Dict[str, int] = {}

    for task in tasks:
        created = safe_parse(task.created_at)
        if created is None or created.year != year:
            continue

        stats = months[created.month - 1]
        stats.total += 1
        if task.status == STATUS_COMPLETED:
            stats.completed += 1
        elif task.status == STATUS_PENDING:
            stats.pending += 1
        elif task.status == STATUS_IN_PROGRESS:
            stats.in_progress += 1

        category_counts[task.category] = category_counts.get(task.category, 0) + 1
        priority_counts[task.priority] = priority_counts.get(task.priority, 0) + 1

    return YearSummary(
        year=year,
        months=months,
        category_counts=category_counts,
        priority_counts=priority_counts,
    )


def bucket(
    tasks: Iterable[Task],
    reference: DateLike,
    granularity: str,
    now: Optional[datetime] = None,
):
    """
    Dispatch to the view for a granularity.

    Returns:
        - "day": List[Task] on that day
        - "week": List[DayCell]
        - "month": MonthGrid for the reference's month
        - "year": YearSummary for the reference's year

    Raises:
        ValidationError: If granularity is unknown
    """
    if granularity == "day":
        return tasks_for_day(tasks, reference)
    if granularity == "week":
        return week_view(tasks, reference, now=now)
    if granularity == "month":
        return month_view(tasks, reference.year, reference.month, now=now)
    if granularity == "year":
        return year_view(tasks, reference.year)

    raise ValidationError(
        f"Invalid granularity '{granularity}'. Must be one of: {', '.join(GRANULARITIES)}"
    )
