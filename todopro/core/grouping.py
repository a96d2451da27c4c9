"""
FILE: todopro/core/grouping.py
PURPOSE: Parent/child grouping of tasks into kanban status columns
EXPORTS:
  - TaskGroup (dataclass: parent, children, expanded)
  - group_by_status(tasks, expanded) -> Dict[str, List[TaskGroup]]
  - next_order_index(tasks, parent_id) -> int
  - column_total(groups) -> int
DEPENDENCIES:
  - dataclasses, typing (stdlib)
  - todopro.core.models (Task)
  - todopro.core.constants (KANBAN_COLUMNS, DEFAULT_STATUS)
NOTES:
  - Only one level of nesting: tasks without parent_id are parents
  - Children sorted by order_index ascending; ties keep input order
  - Orphans (parent_id pointing at nothing) are promoted to their own
    group with parent_id cleared on a presentation COPY only
  - expanded is session UI state passed in by the caller, never stored
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, List, Optional

from .constants import DEFAULT_STATUS, KANBAN_COLUMNS
from .filters import valid_tasks
from .models import Task


@dataclass
class TaskGroup:
    """A parent card with its ordered subtasks."""

    parent: Task
    children: List[Task] = field(default_factory=list)
    expanded: bool = False

    @property
    def size(self) -> int:
        """Cards in this group (parent + children)."""
        return 1 + len(self.children)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "parent": self.parent.to_dict(),
            "children": [c.to_dict() for c in self.children],
            "expanded": self.expanded,
        }


def _column_for(task: Task) -> str:
    """Kanban column for a task; unset or unknown statuses land in pending."""
    columns = {status for status, _ in KANBAN_COLUMNS}
    return task.status if task.status in columns else DEFAULT_STATUS


def group_by_status(
    tasks: Iterable[Task],
    expanded: Optional[Iterable[str]] = None,
) -> Dict[str, List[TaskGroup]]:
    """
    Partition tasks into kanban columns of parent/child groups.

    Args:
        tasks: Task snapshot (incomplete records are skipped)
        expanded: Ids of parents the user has expanded

    Returns:
        Mapping for every kanban status (pending, in_progress, completed)
        to its groups, in input order; parents first, then promoted orphans

    Notes:
        - Unset or unknown statuses are placed in pending
        - Each task appears exactly once across all columns
    """
    todos = valid_tasks(tasks)
    expanded_ids = set(expanded or ())
    groups: Dict[str, List[TaskGroup]] = {status: [] for status, _ in KANBAN_COLUMNS}
    # Children of a subtask have no card to sit under, so they are promoted too
    top_level_ids = {t.id for t in todos if not t.parent_id}

    # Index children by parent id, keeping input order for the stable sort
    children_by_parent: Dict[str, List[Task]] = {}
    for todo in todos:
        if todo.parent_id:
            children_by_parent.setdefault(todo.parent_id, []).append(todo)

    # Parents (no parent_id) with their ordered children
    for parent in todos:
        if parent.parent_id:
            continue

        children = sorted(
            children_by_parent.get(parent.id, []),
            key=lambda t: t.order_index or 0,
        )
        groups[_column_for(parent)].append(
            TaskGroup(parent=parent, children=children, expanded=parent.id in expanded_ids)
        )

    # Orphans: promoted, with parent_id cleared on the display copy
    for orphan in todos:
        if not orphan.parent_id or orphan.parent_id in top_level_ids:
            continue

        groups[_column_for(orphan)].append(
            TaskGroup(parent=replace(orphan, parent_id=None), children=[], expanded=False)
        )

    return groups


def next_order_index(tasks: Iterable[Task], parent_id: str) -> int:
    """
    Order index for a new subtask: 1 + highest sibling index (siblings count from 0).

    A parent with no subtasks yields 1.
    """
    sibling_indexes = [t.order_index or 0 for t in tasks if t.parent_id == parent_id]
    return max([0] + sibling_indexes) + 1


def column_total(groups: List[TaskGroup]) -> int:
    """Cards in a column, counting subtasks."""
    return sum(group.size for group in groups)
