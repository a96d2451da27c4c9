"""
FILE: todopro/core/store.py
PURPOSE: Session-scoped task collection; the only mutation surface for tasks
EXPORTS:
  - TaskStore
      .load() -> List[Task]
      .list() -> List[Task]
      .get(task_id) -> Task
      .create(draft) -> Task
      .update(task_id, patch) -> Task
      .delete(task_id) -> None
      .add_subtask(parent_id, title) -> Task
      .move(task_id, status) -> Task
      .load_categories() -> List[Category]
      .fetch_range(start, end) -> List[Task]
      .load_stats() -> List[dict]
DEPENDENCIES:
  - logging, datetime, typing (stdlib)
  - todopro.core.gateway (FallbackGateway, GatewayResult)
  - todopro.core.grouping (next_order_index)
  - todopro.core.constants, todopro.core.exceptions, todopro.core.models
NOTES:
  - The gateway is injected; tests pass a fake one
  - Input is validated before any gateway call
  - New tasks are prepended (most recent first)
  - error is set only for unrecoverable failures (NotFound, range/stats
    fetch with no API); fallbacks leave it untouched
  - Last write wins: no locking, no version tokens
"""

import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from .constants import (
    DEFAULT_CATEGORY,
    DEFAULT_PRIORITY,
    DEFAULT_STATUS,
    DEFAULT_SUBTASK_TITLE,
    PATCHABLE_FIELDS,
    PRIORITIES,
    STATUS_PENDING,
    STATUSES,
)
from .exceptions import TaskNotFoundError, ValidationError
from .grouping import next_order_index
from .models import Category, Task

logger = logging.getLogger(__name__)


class TaskStore:
    """
    In-memory ordered task collection backed by a persistence gateway.

    Attributes:
        tasks: Current snapshot, most recent first for created items
        error: Last unrecoverable failure message, or None
        loading: True while a gateway call is in flight
        source: Strategy that served the last load/mutation ("remote"/"local")
    """

    def __init__(self, gateway, clock: Callable[[], datetime] = datetime.now):
        self.gateway = gateway
        self.clock = clock
        self.tasks: List[Task] = []
        self.categories: List[Category] = []
        self.error: Optional[str] = None
        self.loading = False
        self.source: Optional[str] = None

    def now(self) -> datetime:
        """Current time from the injected clock."""
        return self.clock()

    # --- Reads ---

    def load(self) -> List[Task]:
        """
        Rehydrate from the gateway (remote, else built-in seed tasks).

        Returns:
            The new snapshot
        """
        self.loading = True
        try:
            result = self.gateway.list_tasks()
        finally:
            self.loading = False

        if result.ok:
            self.tasks = list(result.value)
            self.source = result.source
            logger.info("Loaded %d tasks from %s", len(self.tasks), result.source)
        else:
            self.error = str(result.error)
        return self.list()

    def list(self) -> List[Task]:
        """Snapshot copy of the collection in store order."""
        return list(self.tasks)

    def find(self, task_id: str) -> Optional[Task]:
        for task in self.tasks:
            if task.id == str(task_id):
                return task
        return None

    def get(self, task_id: str) -> Task:
        """
        Look up a task by id.

        Raises:
            TaskNotFoundError: If no task has this id
        """
        task = self.find(task_id)
        if task is None:
            raise TaskNotFoundError(str(task_id))
        return task

    def _index(self, task_id: str) -> int:
        for index, task in enumerate(self.tasks):
            if task.id == str(task_id):
                return index

        error = TaskNotFoundError(str(task_id))
        self.error = str(error)
        logger.warning("%s", error)
        raise error

    # --- Validation ---

    def _validate_parent(self, parent_id: Optional[str], task_id: Optional[str] = None) -> None:
        """Single-level relation: the parent must exist and must not be a subtask itself."""
        if not parent_id:
            return
        if task_id is not None and str(parent_id) == str(task_id):
            raise ValidationError("A task cannot be its own parent")

        parent = self.find(parent_id)
        if parent is None:
            raise ValidationError(f"Parent task {parent_id} not found")
        if parent.parent_id:
            raise ValidationError(
                f"Task {parent_id} is already a subtask; subtasks cannot have subtasks"
            )
        if task_id is not None and any(t.parent_id == str(task_id) for t in self.tasks):
            raise ValidationError(f"Task {task_id} has subtasks and cannot become a subtask")

    def _clean(self, fields: Dict[str, Any], task_id: Optional[str] = None) -> Dict[str, Any]:
        """Validate draft/patch fields and return a normalized copy."""
        unknown = sorted(set(fields) - set(PATCHABLE_FIELDS))
        if unknown:
            raise ValidationError(
                f"Unknown field(s): {', '.join(unknown)}. Allowed: {', '.join(PATCHABLE_FIELDS)}"
            )

        clean = dict(fields)
        if "title" in clean:
            title = (clean["title"] or "").strip()
            if not title:
                raise ValidationError("Task title cannot be empty")
            clean["title"] = title

        if "priority" in clean and clean["priority"] not in PRIORITIES:
            raise ValidationError(
                f"Invalid priority '{clean['priority']}'. Must be one of: {', '.join(PRIORITIES)}"
            )
        if "status" in clean and clean["status"] not in STATUSES:
            raise ValidationError(
                f"Invalid status '{clean['status']}'. Must be one of: {', '.join(STATUSES)}"
            )

        if "category" in clean:
            clean["category"] = (clean["category"] or "").strip() or DEFAULT_CATEGORY

        if "order_index" in clean:
            try:
                clean["order_index"] = int(clean["order_index"] or 0)
            except (TypeError, ValueError):
                raise ValidationError(f"Invalid order_index '{clean['order_index']}'") from None

        if "parent_id" in clean:
            clean["parent_id"] = str(clean["parent_id"]) if clean["parent_id"] else None
            self._validate_parent(clean["parent_id"], task_id)

        return clean

    # --- Mutations ---

    def _require(self, result):
        """Raise the gateway error when no strategy could serve a mutation."""
        if not result.ok:
            self.error = str(result.error)
            raise result.error
        return result

    def create(self, draft: Dict[str, Any]) -> Task:
        """
        Create a task and prepend it to the store.

        Args:
            draft: Task fields (title required); unset fields get defaults

        Returns:
            The persisted Task (from the API, or synthesized locally)

        Raises:
            ValidationError: Empty title, bad enum value, unknown field, or
                a parent that is itself a subtask
        """
        if "title" not in draft:
            raise ValidationError("Task title cannot be empty")

        payload = {
            "priority": DEFAULT_PRIORITY,
            "status": DEFAULT_STATUS,
            "category": DEFAULT_CATEGORY,
        }
        payload.update(self._clean(draft))

        result = self._require(self.gateway.create_task(payload))
        task = result.value
        self.tasks.insert(0, task)
        self.source = result.source
        return task

    def update(self, task_id: str, patch: Dict[str, Any]) -> Task:
        """
        Merge a partial patch into a task.

        Raises:
            TaskNotFoundError: If task_id is not in the store (error is set)
            ValidationError: If the patch is invalid

        Notes:
            - completed_at is stamped the first time status becomes completed
              and is never cleared afterwards
        """
        index = self._index(task_id)
        current = self.tasks[index]
        clean = self._clean(patch, task_id=current.id)

        result = self._require(self.gateway.update_task(current.id, clean, current))
        self.tasks[index] = result.value
        self.source = result.source
        return result.value

    def delete(self, task_id: str) -> None:
        """
        Remove a task. Children are left in place and become orphans.

        The task is removed locally even when the API call failed.

        Raises:
            TaskNotFoundError: If task_id is not in the store (no API call made)
        """
        index = self._index(task_id)
        result = self.gateway.delete_task(self.tasks[index].id)
        if not result.ok:
            logger.warning("Removing task %s locally: %s", task_id, result.error)
        del self.tasks[index]

    def add_subtask(self, parent_id: str, title: str = DEFAULT_SUBTASK_TITLE) -> Task:
        """
        Create a pending subtask ordered after its existing siblings.

        The subtask never inherits the parent's status.
        """
        parent = self.get(parent_id)
        if parent.parent_id:
            raise ValidationError(
                f"Task {parent.id} is already a subtask; subtasks cannot have subtasks"
            )
        return self.create(
            {
                "title": title,
                "parent_id": parent.id,
                "status": STATUS_PENDING,
                "order_index": next_order_index(self.tasks, parent.id),
            }
        )

    def move(self, task_id: str, status: str) -> Task:
        """Move a task to another kanban column."""
        return self.update(task_id, {"status": status})

    # --- Other endpoints ---

    def load_categories(self) -> List[Category]:
        result = self.gateway.list_categories()
        if result.ok:
            self.categories = list(result.value)
        return list(self.categories)

    def fetch_range(self, start_date: str, end_date: str) -> List[Task]:
        """Tasks due between two dates (inclusive). Empty list when the API is unavailable."""
        result = self.gateway.fetch_range(start_date, end_date)
        if not result.ok:
            self.error = "Failed to fetch todos by date range"
            return []
        return list(result.value)

    def load_stats(self) -> List[Dict[str, Any]]:
        """Grouped stat rows from the API. Empty list when unavailable."""
        result = self.gateway.fetch_stats()
        if not result.ok:
            self.error = "Failed to fetch stats"
            return []
        return list(result.value)

    def clear_error(self) -> None:
        self.error = None

    def close(self) -> None:
        """Release the gateway's connections. The snapshot stays readable."""
        self.gateway.close()

    def __enter__(self) -> "TaskStore":
        return self

    def __exit__(self, *args) -> None:
        self.close()
