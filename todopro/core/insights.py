"""
FILE: todopro/core/insights.py
PURPOSE: Dashboard statistics, productivity scores and natural-language insights
EXPORTS:
  - DayActivity, CategoryPerformance, DeadlineBucket, RadarMetric,
    TaskTotals, BurndownPoint, DashboardStats (dataclasses)
  - aggregate(tasks, now) -> DashboardStats
  - summarize(tasks) -> TaskTotals
  - burndown(tasks, now) -> List[BurndownPoint]
  - generate_insights(tasks, now) -> List[str]
DEPENDENCIES:
  - datetime, dataclasses, typing (stdlib)
  - todopro.core.dates (parsing, days_until, percentage)
  - todopro.core.filters (valid_tasks)
NOTES:
  - Tasks missing id or title are ignored by every statistic
  - Everything is a pure function of (tasks, now); calling twice with the
    same inputs yields identical output
  - Counts keep first-seen order of their keys
  - Burndown is derived from real created_at/completed_at history and is
    kept outside aggregate()
"""

from dataclasses import dataclass, field, asdict
from datetime import date, datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional

from .constants import (
    DEADLINE_FUTURE,
    DEADLINE_ORDER,
    DEADLINE_OVERDUE,
    DEADLINE_SOON,
    DEADLINE_THIS_WEEK,
    DEADLINE_TODAY,
    DEFAULT_CATEGORY,
    DEFAULT_PRIORITY,
    DEFAULT_STATUS,
    HEATMAP_DAYS,
    INSIGHT_DOMINANT_CATEGORY,
    INSIGHT_HIGH_COMPLETION,
    INSIGHT_LOW_COMPLETION,
    INSIGHT_MOMENTUM,
    INSIGHT_PRIORITY_OVERLOAD,
    MAX_INSIGHTS,
    MOMENTUM_DAYS,
    PRIORITY_HIGH,
    RECENT_ACTIVITY_DAYS,
    STATUS_COMPLETED,
    STATUS_IN_PROGRESS,
    STATUS_PENDING,
    TREND_DAYS,
)
from .dates import days_until, has_value, percentage, safe_parse, start_of_day
from .filters import valid_tasks
from .models import Task


@dataclass
class DayActivity:
    """Tasks created on one day."""

    date: str
    label: str
    weekday: str
    count: int
    completed: int

    @property
    def intensity(self) -> float:
        """Heatmap shade, 0..1 (3+ tasks is full)."""
        return min(self.count / 3, 1)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["intensity"] = self.intensity
        return data


@dataclass
class CategoryPerformance:
    category: str
    total: int
    completed: int

    @property
    def rate(self) -> int:
        return percentage(self.completed, self.total)

    @property
    def remaining(self) -> int:
        return self.total - self.completed

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category,
            "total": self.total,
            "completed": self.completed,
            "rate": self.rate,
            "remaining": self.remaining,
        }


@dataclass
class DeadlineBucket:
    """Open tasks sharing a days-until-due band."""

    category: str
    tasks: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.tasks)

    def to_dict(self) -> Dict[str, Any]:
        return {"category": self.category, "count": self.count, "tasks": list(self.tasks)}


@dataclass
class RadarMetric:
    metric: str
    value: int
    full_mark: int = 100

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class TaskTotals:
    """Headline counts shown on the dashboard cards."""

    total: int
    completed: int
    pending: int
    in_progress: int
    open_tasks: List[Task] = field(default_factory=list)
    completed_tasks: List[Task] = field(default_factory=list)

    @property
    def completion_rate(self) -> int:
        return percentage(self.completed, self.total)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "completed": self.completed,
            "pending": self.pending,
            "in_progress": self.in_progress,
            "completion_rate": self.completion_rate,
        }


@dataclass
class BurndownPoint:
    date: str
    total: int
    completed: int
    ideal: float

    @property
    def remaining(self) -> int:
        return self.total - self.completed

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["remaining"] = self.remaining
        return data


@dataclass
class DashboardStats:
    """Everything the dashboard renders, computed in one pass."""

    status_counts: Dict[str, int]
    priority_counts: Dict[str, int]
    category_counts: Dict[str, int]
    trend_7d: List[DayActivity]
    heatmap_35d: List[DayActivity]
    category_performance: List[CategoryPerformance]
    deadline_buckets: List[DeadlineBucket]
    productivity_radar: List[RadarMetric]
    insights: List[str]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status_counts": dict(self.status_counts),
            "priority_counts": dict(self.priority_counts),
            "category_counts": dict(self.category_counts),
            "trend_7d": [d.to_dict() for d in self.trend_7d],
            "heatmap_35d": [d.to_dict() for d in self.heatmap_35d],
            "category_performance": [c.to_dict() for c in self.category_performance],
            "deadline_buckets": [b.to_dict() for b in self.deadline_buckets],
            "productivity_radar": [r.to_dict() for r in self.productivity_radar],
            "insights": list(self.insights),
        }


# --- Helpers ---


def _count_by(tasks: List[Task], attr: str, default: str) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for task in tasks:
        key = getattr(task, attr) or default
        counts[key] = counts.get(key, 0) + 1
    return counts


def _created_day(task: Task) -> Optional[date]:
    created = safe_parse(task.created_at)
    return created.date() if created else None


def _daily_activity(tasks: List[Task], days: int, now: datetime) -> List[DayActivity]:
    """Per-day creation counts for the last `days` days, oldest first."""
    by_day: Dict[date, List[Task]] = {}
    for task in tasks:
        day = _created_day(task)
        if day is not None:
            by_day.setdefault(day, []).append(task)

    today = now.date()
    activity = []
    for offset in range(days - 1, -1, -1):
        day = today - timedelta(days=offset)
        day_tasks = by_day.get(day, [])
        activity.append(
            DayActivity(
                date=day.isoformat(),
                label=day.strftime("%b %d"),
                weekday=day.strftime("%a"),
                count=len(day_tasks),
                completed=sum(1 for t in day_tasks if t.status == STATUS_COMPLETED),
            )
        )
    return activity


def _deadline_band(days: int) -> str:
    if days < 0:
        return DEADLINE_OVERDUE
    if days == 0:
        return DEADLINE_TODAY
    if days <= 3:
        return DEADLINE_SOON
    if days <= 7:
        return DEADLINE_THIS_WEEK
    return DEADLINE_FUTURE


def _deadline_buckets(tasks: List[Task], now: datetime) -> List[DeadlineBucket]:
    """
    Classify open tasks with a due date by days until due.

    Completed tasks and unparsable due dates are skipped. Buckets are
    returned in fixed order, empty ones included.
    """
    buckets = {name: DeadlineBucket(category=name) for name in DEADLINE_ORDER}
    for task in tasks:
        if not has_value(task.due_date) or task.status == STATUS_COMPLETED:
            continue

        due = safe_parse(task.due_date)
        if due is None:
            continue

        days = days_until(due, now)
        buckets[_deadline_band(days)].tasks.append(
            {"title": task.title, "days": days, "priority": task.priority}
        )
    return [buckets[name] for name in DEADLINE_ORDER]


def _created_since(tasks: List[Task], cutoff: datetime) -> int:
    count = 0
    for task in tasks:
        created = safe_parse(task.created_at)
        if created is not None and created > cutoff:
            count += 1
    return count


def _radar(
    tasks: List[Task],
    category_counts: Dict[str, int],
    overdue_count: int,
    now: datetime,
) -> List[RadarMetric]:
    completed = sum(1 for t in tasks if t.status == STATUS_COMPLETED)
    high = sum(1 for t in tasks if t.priority == PRIORITY_HIGH)
    recent = _created_since(tasks, now - timedelta(days=RECENT_ACTIVITY_DAYS))

    return [
        RadarMetric("Task Creation", min(len(tasks) * 10, 100)),
        RadarMetric("Completion Rate", percentage(completed, len(tasks))),
        RadarMetric("Priority Focus", min(high * 20, 100)),
        RadarMetric("Category Balance", min(len(category_counts) * 25, 100)),
        RadarMetric("Deadline Adherence", max(100 - overdue_count * 25, 0)),
        RadarMetric("Recent Activity", min(recent * 15, 100)),
    ]


# --- Public API ---


def generate_insights(tasks: Iterable[Task], now: Optional[datetime] = None) -> List[str]:
    """
    Pick up to 3 insight messages by threshold rules.

    Rules (independent, evaluated in this order, first 3 that fire win):
        1. completion rate > 80%  -> praise
        2. completion rate < 50%  -> break tasks down
        3. more than 5 high-priority tasks -> focus
        4. 4+ tasks completed in the last 3 days -> momentum
        5. one of several categories holds > 60% of tasks -> diversify
    """
    now = now or datetime.now()
    todos = valid_tasks(tasks)
    completed = [t for t in todos if t.status == STATUS_COMPLETED]
    high = [t for t in todos if t.priority == PRIORITY_HIGH]
    rate = percentage(len(completed), len(todos))

    insights = []
    if rate > 80:
        insights.append(INSIGHT_HIGH_COMPLETION)
    if rate < 50:
        insights.append(INSIGHT_LOW_COMPLETION)

    if len(high) > 5:
        insights.append(INSIGHT_PRIORITY_OVERLOAD)

    cutoff = now - timedelta(days=MOMENTUM_DAYS)
    recently_completed = 0
    for task in completed:
        finished = safe_parse(task.completed_at)
        if finished is not None and finished > cutoff:
            recently_completed += 1
    if recently_completed > 3:
        insights.append(INSIGHT_MOMENTUM)

    category_counts = _count_by(todos, "category", DEFAULT_CATEGORY)
    if len(category_counts) > 1:
        # First category wins ties
        dominant = max(category_counts.items(), key=lambda item: item[1])
        if dominant[1] > len(todos) * 0.6:
            insights.append(INSIGHT_DOMINANT_CATEGORY.format(category=dominant[0]))

    return insights[:MAX_INSIGHTS]


def aggregate(tasks: Iterable[Task], now: Optional[datetime] = None) -> DashboardStats:
    """
    Compute every dashboard statistic for a task snapshot.

    Args:
        tasks: Task snapshot (invalid records are dropped first)
        now: Clock override; defaults to wall clock

    Returns:
        DashboardStats (use .to_dict() for JSON)
    """
    now = now or datetime.now()
    todos = valid_tasks(tasks)

    status_counts = _count_by(todos, "status", DEFAULT_STATUS)
    priority_counts = _count_by(todos, "priority", DEFAULT_PRIORITY)
    category_counts = _count_by(todos, "category", DEFAULT_CATEGORY)

    performance = [
        CategoryPerformance(
            category=category,
            total=total,
            completed=sum(
                1 for t in todos
                if (t.category or DEFAULT_CATEGORY) == category and t.status == STATUS_COMPLETED
            ),
        )
        for category, total in category_counts.items()
    ]
    # Stable: equal rates keep first-seen category order
    performance.sort(key=lambda p: p.rate, reverse=True)

    deadlines = _deadline_buckets(todos, now)
    overdue_count = next(b.count for b in deadlines if b.category == DEADLINE_OVERDUE)

    return DashboardStats(
        status_counts=status_counts,
        priority_counts=priority_counts,
        category_counts=category_counts,
        trend_7d=_daily_activity(todos, TREND_DAYS, now),
        heatmap_35d=_daily_activity(todos, HEATMAP_DAYS, now),
        category_performance=performance,
        deadline_buckets=deadlines,
        productivity_radar=_radar(todos, category_counts, overdue_count, now),
        insights=generate_insights(todos, now),
    )


def summarize(tasks: Iterable[Task]) -> TaskTotals:
    """Headline totals plus the open/completed task lists."""
    todos = valid_tasks(tasks)
    open_tasks = [t for t in todos if (t.status or DEFAULT_STATUS) != STATUS_COMPLETED]
    completed_tasks = [t for t in todos if t.status == STATUS_COMPLETED]
    return TaskTotals(
        total=len(todos),
        completed=len(completed_tasks),
        pending=sum(1 for t in todos if t.status == STATUS_PENDING),
        in_progress=sum(1 for t in todos if t.status == STATUS_IN_PROGRESS),
        open_tasks=open_tasks,
        completed_tasks=completed_tasks,
    )


def burndown(tasks: Iterable[Task], now: Optional[datetime] = None) -> List[BurndownPoint]:
    """
    Seven-day burndown from actual history.

    For each of the last 7 days: tasks created by end of day, tasks completed
    by end of day, and the straight ideal line from today's total down to 0.
    Completed tasks without completed_at count as completed at creation.
    """
    now = now or datetime.now()
    todos = valid_tasks(tasks)
    total_now = len(todos)

    points = []
    for offset in range(TREND_DAYS - 1, -1, -1):
        day = now.date() - timedelta(days=offset)
        end_of_day = start_of_day(day) + timedelta(days=1)

        created = 0
        completed = 0
        for task in todos:
            created_at = safe_parse(task.created_at)
            if created_at is None or created_at >= end_of_day:
                continue
            created += 1

            if task.status == STATUS_COMPLETED:
                finished = safe_parse(task.completed_at) or created_at
                if finished < end_of_day:
                    completed += 1

        ideal = max(0.0, total_now - (total_now / TREND_DAYS) * (TREND_DAYS - offset))
        points.append(
            BurndownPoint(date=day.isoformat(), total=created, completed=completed, ideal=round(ideal, 1))
        )
    return points
