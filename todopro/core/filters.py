"""
FILE: todopro/core/filters.py
PURPOSE: Predicate composition applied before bucketing, grouping and aggregation
EXPORTS:
  - TaskFilter (dataclass of criteria)
  - filter_tasks(tasks, criteria) -> List[Task]
  - valid_tasks(tasks) -> List[Task]
DEPENDENCIES:
  - dataclasses, typing (stdlib)
  - todopro.core.models (Task)
  - todopro.core.constants (FILTER_ALL, PRIORITIES, STATUSES)
NOTES:
  - Search is a case-insensitive substring match on title OR description
  - Priority/status/category are exact match, or "all"/None for no-op
  - All criteria combine with logical AND
  - Pure: never mutates the input list
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional

from .constants import FILTER_ALL, PRIORITIES, STATUSES
from .exceptions import ValidationError
from .models import Task


@dataclass
class TaskFilter:
    """
    Filter criteria owned by the presentation layer.

    Attributes:
        search_text: Substring to look for in title/description (None = any)
        priority: Exact priority or "all"
        status: Exact status or "all"
        category: Exact category or None for any
    """
    search_text: Optional[str] = None
    priority: str = FILTER_ALL
    status: str = FILTER_ALL
    category: Optional[str] = None

    def __post_init__(self):
        # Validate enum criteria early so typos don't silently hide everything
        if self.priority not in (FILTER_ALL,) + PRIORITIES:
            raise ValidationError(
                f"Invalid priority '{self.priority}'. Must be one of: all, {', '.join(PRIORITIES)}"
            )
        if self.status not in (FILTER_ALL,) + STATUSES:
            raise ValidationError(
                f"Invalid status '{self.status}'. Must be one of: all, {', '.join(STATUSES)}"
            )

    @property
    def is_active(self) -> bool:
        """True when at least one criterion would exclude something."""
        return bool(
            self.search_text
            or self.priority != FILTER_ALL
            or self.status != FILTER_ALL
            or self.category
        )

    def matches(self, task: Task) -> bool:
        if self.search_text:
            needle = self.search_text.lower()
            in_title = needle in (task.title or "").lower()
            in_description = needle in (task.description or "").lower()
            if not (in_title or in_description):
                return False

        if self.priority != FILTER_ALL and task.priority != self.priority:
            return False

        if self.status != FILTER_ALL and task.status != self.status:
            return False

        if self.category and task.category != self.category:
            return False

        return True

    def describe(self) -> str:
        """Short human-readable summary, e.g. 'search="api" | priority=high'."""
        parts = []
        if self.search_text:
            parts.append(f'search="{self.search_text}"')
        if self.priority != FILTER_ALL:
            parts.append(f"priority={self.priority}")
        if self.status != FILTER_ALL:
            parts.append(f"status={self.status}")
        if self.category:
            parts.append(f"category={self.category}")
        return " | ".join(parts)


def filter_tasks(tasks: Iterable[Task], criteria: Optional[TaskFilter] = None) -> List[Task]:
    """
    Return the tasks matching every criterion, in their original order.

    Args:
        tasks: Tasks to filter
        criteria: TaskFilter, or None to keep everything

    Returns:
        New list of matching tasks
    """
    if criteria is None:
        return list(tasks)
    return [t for t in tasks if criteria.matches(t)]


def valid_tasks(tasks: Iterable[Task]) -> List[Task]:
    """Drop incomplete records (missing id or title)."""
    return [t for t in tasks if t is not None and t.is_valid]
