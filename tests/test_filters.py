"""Tests for task filter composition."""

import pytest

from todopro.core.exceptions import ValidationError
from todopro.core.filters import TaskFilter, filter_tasks, valid_tasks
from todopro.core.models import Task


def sample():
    return [
        Task(id="1", title="Write API docs", description="", priority="low", status="pending", category="Documentation"),
        Task(id="2", title="Fix login", description="Users report API timeouts", priority="high", status="in_progress", category="Development"),
        Task(id="3", title="Design logo", priority="medium", status="completed", category="Design"),
        Task(id="4", title="Deploy", priority="high", status="pending", category="Development"),
    ]


def test_no_criteria_keeps_everything():
    tasks = sample()
    assert filter_tasks(tasks) == tasks
    assert filter_tasks(tasks, TaskFilter()) == tasks
    assert not TaskFilter().is_active


def test_search_matches_title_or_description_case_insensitive():
    result = filter_tasks(sample(), TaskFilter(search_text="api"))
    assert [t.id for t in result] == ["1", "2"]


def test_criteria_combine_with_and():
    criteria = TaskFilter(priority="high", status="pending")
    assert [t.id for t in filter_tasks(sample(), criteria)] == ["4"]

    criteria = TaskFilter(category="Development", search_text="login")
    assert [t.id for t in filter_tasks(sample(), criteria)] == ["2"]


def test_filter_does_not_mutate_input():
    tasks = sample()
    filter_tasks(tasks, TaskFilter(priority="low"))
    assert len(tasks) == 4


def test_invalid_enum_values_rejected():
    with pytest.raises(ValidationError):
        TaskFilter(priority="urgent")
    with pytest.raises(ValidationError):
        TaskFilter(status="done")


def test_describe():
    criteria = TaskFilter(search_text="api", priority="high", category="Work")
    assert criteria.is_active
    assert criteria.describe() == 'search="api" | priority=high | category=Work'


def test_valid_tasks_drops_incomplete_records():
    tasks = [Task(id="", title="No id"), Task(id="2", title=""), Task(id="3", title="Ok")]
    assert [t.id for t in valid_tasks(tasks)] == ["3"]
