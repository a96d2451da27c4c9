"""Tests for dashboard aggregation, insights and burndown."""

import json
from datetime import datetime

from todopro.core.constants import (
    INSIGHT_DOMINANT_CATEGORY,
    INSIGHT_HIGH_COMPLETION,
    INSIGHT_LOW_COMPLETION,
    INSIGHT_MOMENTUM,
    INSIGHT_PRIORITY_OVERLOAD,
)
from todopro.core.insights import (
    CategoryPerformance,
    aggregate,
    burndown,
    generate_insights,
    summarize,
)

NOW = datetime(2024, 3, 10, 12, 0)


def _bucket(stats, name):
    return next(b for b in stats.deadline_buckets if b.category == name)


def test_completion_rate_arithmetic():
    assert CategoryPerformance("Work", total=3, completed=1).rate == 33
    assert CategoryPerformance("Empty", total=0, completed=0).rate == 0
    assert CategoryPerformance("Work", total=3, completed=1).remaining == 2


def test_deadline_boundaries(make_task):
    """Due now is today, +3 days is soon, +4 is this week; completed never counts."""
    tasks = [
        make_task(title="now", due_date="2024-03-10T12:00:00"),
        make_task(title="three", due_date="2024-03-13T12:00:00"),
        make_task(title="four", due_date="2024-03-14T12:00:00"),
        make_task(title="late", due_date="2024-03-08"),
        make_task(title="far", due_date="2024-04-30"),
        make_task(title="done", due_date="2024-03-10T12:00:00", status="completed"),
        make_task(title="broken", due_date="someday"),
    ]
    stats = aggregate(tasks, NOW)

    assert [b.category for b in stats.deadline_buckets] == [
        "Overdue", "Due Today", "Due Soon", "Due This Week", "Future",
    ]
    assert [t["title"] for t in _bucket(stats, "Due Today").tasks] == ["now"]
    assert [t["title"] for t in _bucket(stats, "Due Soon").tasks] == ["three"]
    assert [t["title"] for t in _bucket(stats, "Due This Week").tasks] == ["four"]
    assert [t["title"] for t in _bucket(stats, "Overdue").tasks] == ["late"]
    assert [t["title"] for t in _bucket(stats, "Future").tasks] == ["far"]
    all_titles = [t["title"] for b in stats.deadline_buckets for t in b.tasks]
    assert "done" not in all_titles
    assert "broken" not in all_titles


def test_counts_and_category_performance(make_task):
    tasks = [
        make_task(category="Work", status="completed"),
        make_task(category="Work", status="pending"),
        make_task(category="Home", status="completed"),
        make_task(category="Gym", status="pending", priority="high"),
    ]
    stats = aggregate(tasks, NOW)

    assert stats.status_counts == {"completed": 2, "pending": 2}
    assert stats.category_counts == {"Work": 2, "Home": 1, "Gym": 1}
    assert [p.category for p in stats.category_performance] == ["Home", "Work", "Gym"]
    assert [p.rate for p in stats.category_performance] == [100, 50, 0]


def test_trend_and_heatmap_windows(make_task):
    tasks = [
        make_task(created_at="2024-03-10T08:00:00", status="completed"),
        make_task(created_at="2024-03-10T09:00:00"),
        make_task(created_at="2024-03-04T09:00:00"),
        make_task(created_at="2024-02-01T09:00:00"),
    ]
    stats = aggregate(tasks, NOW)

    assert len(stats.trend_7d) == 7
    assert len(stats.heatmap_35d) == 35
    assert stats.trend_7d[-1].date == "2024-03-10"
    assert stats.trend_7d[-1].count == 2
    assert stats.trend_7d[-1].completed == 1
    assert stats.trend_7d[-1].weekday == "Sun"
    assert stats.trend_7d[0].count == 1
    assert sum(d.count for d in stats.heatmap_35d) == 3


def test_radar_metrics(make_task):
    tasks = [
        make_task(priority="high", status="completed", category="A", created_at="2024-03-09T00:00:00"),
        make_task(priority="high", category="B", due_date="2024-03-01", created_at="2024-01-01T00:00:00"),
    ]
    radar = {m.metric: m.value for m in aggregate(tasks, NOW).productivity_radar}

    assert radar == {
        "Task Creation": 20,
        "Completion Rate": 50,
        "Priority Focus": 40,
        "Category Balance": 50,
        "Deadline Adherence": 75,
        "Recent Activity": 15,
    }


def test_insight_rule_order_and_cap(make_task):
    """High completion and priority overload both fire, in rule order."""
    tasks = [
        make_task(priority="high", status="completed", category=f"C{i}", completed_at="2024-01-01T00:00:00")
        for i in range(6)
    ]
    insights = generate_insights(tasks, NOW)

    assert insights[0] == INSIGHT_HIGH_COMPLETION
    assert insights[1] == INSIGHT_PRIORITY_OVERLOAD
    assert len(insights) <= 3


def test_insights_capped_at_three(make_task):
    tasks = [
        make_task(priority="high", status="completed", category="Work", completed_at="2024-03-09T10:00:00")
        for _ in range(6)
    ]
    insights = generate_insights(tasks, NOW)
    assert insights == [INSIGHT_HIGH_COMPLETION, INSIGHT_PRIORITY_OVERLOAD, INSIGHT_MOMENTUM]


def test_low_completion_and_dominant_category(make_task):
    tasks = [make_task(category="Work") for _ in range(4)] + [make_task(category="Home")]
    insights = generate_insights(tasks, NOW)
    assert insights == [
        INSIGHT_LOW_COMPLETION,
        INSIGHT_DOMINANT_CATEGORY.format(category="Work"),
    ]


def test_single_category_is_not_dominant(make_task):
    tasks = [make_task(category="Work") for _ in range(4)]
    insights = generate_insights(tasks, NOW)
    assert INSIGHT_DOMINANT_CATEGORY.format(category="Work") not in insights
    assert insights == [INSIGHT_LOW_COMPLETION]


def test_no_insights_for_balanced_middling_set(make_task):
    tasks = [
        make_task(category="A", status="completed"),
        make_task(category="B", status="completed"),
        make_task(category="C"),
    ]
    assert generate_insights(tasks, NOW) == []


def test_aggregate_is_idempotent(make_task):
    tasks = [
        make_task(due_date="2024-03-12", priority="high"),
        make_task(status="completed", completed_at="2024-03-09T10:00:00"),
        make_task(category="Home", created_at="2024-03-08T10:00:00"),
    ]
    first = json.dumps(aggregate(tasks, NOW).to_dict(), sort_keys=True)
    second = json.dumps(aggregate(tasks, NOW).to_dict(), sort_keys=True)
    assert first == second


def test_summarize(make_task):
    tasks = [
        make_task(status="completed"),
        make_task(status="pending"),
        make_task(status="in_progress"),
        make_task(status="pending"),
    ]
    totals = summarize(tasks)
    assert (totals.total, totals.completed, totals.pending, totals.in_progress) == (4, 1, 2, 1)
    assert totals.completion_rate == 25
    assert len(totals.open_tasks) == 3


def test_burndown_is_deterministic_history(make_task):
    tasks = [
        make_task(created_at="2024-03-04T08:00:00", status="completed", completed_at="2024-03-09T08:00:00"),
        make_task(created_at="2024-03-06T08:00:00"),
        make_task(created_at="2024-03-10T08:00:00", status="completed"),
    ]
    points = burndown(tasks, NOW)

    assert [p.date for p in points][0] == "2024-03-04"
    assert [p.total for p in points] == [1, 1, 2, 2, 2, 2, 3]
    assert [p.completed for p in points] == [0, 0, 0, 0, 0, 1, 2]
    assert points[-1].remaining == 1
    assert points[-1].ideal == 0.0
    assert points[0].ideal == round(3 - 3 / 7, 1)
    assert burndown(tasks, NOW) == points
