"""
FILE: todopro/core/gateway.py
PURPOSE: Persistence gateway: remote API first, local synthesis as fallback
EXPORTS:
  - GatewayResult (dataclass: value, error, source, fallback_reason)
  - PersistenceStrategy (base class)
  - RemoteStrategy (backed by TodoApiClient)
  - LocalSyntheticStrategy (seed data + fabricated results)
  - FallbackGateway (tries primary, then fallback)
  - build_gateway(settings) -> FallbackGateway
DEPENDENCIES:
  - logging, datetime, dataclasses, typing (stdlib)
  - todopro.core.api (TodoApiClient)
  - todopro.core.models (Task, Category)
  - todopro.core.constants (seed data, defaults)
NOTES:
  - Strategies raise GatewayError; FallbackGateway never raises, it returns
    a GatewayResult whose source says which strategy produced the value
  - Reads, creates, updates and deletes fall back; date-range and stats
    fetches do not (no synthetic answer exists)
  - Which strategy served each call is logged, never shown to the user
"""

import logging
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from .api import TodoApiClient
from .constants import (
    DEFAULT_CATEGORY,
    DEFAULT_PRIORITY,
    DEFAULT_STATUS,
    SEED_CATEGORIES,
    SEED_TASKS,
    STATUS_COMPLETED,
)
from .exceptions import GatewayError, RemoteFailure
from .models import Category, Task

logger = logging.getLogger(__name__)

SOURCE_REMOTE = "remote"
SOURCE_LOCAL = "local"

Clock = Callable[[], datetime]


@dataclass
class GatewayResult:
    """
    Outcome of one gateway operation.

    Attributes:
        value: Produced value (None when every strategy failed)
        error: Final error when no strategy succeeded
        source: Strategy that produced value ("remote" or "local")
        fallback_reason: Primary strategy's error message when the
            fallback served the call
    """
    value: Any = None
    error: Optional[GatewayError] = None
    source: str = SOURCE_REMOTE
    fallback_reason: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class PersistenceStrategy:
    """One way of persisting tasks. Every method raises GatewayError on failure."""

    name = "strategy"

    def list_tasks(self) -> List[Task]:
        raise NotImplementedError

    def get_task(self, task_id: str) -> Task:
        raise NotImplementedError

    def create_task(self, payload: Dict[str, Any]) -> Task:
        raise NotImplementedError

    def update_task(self, task_id: str, patch: Dict[str, Any], current: Optional[Task] = None) -> Task:
        raise NotImplementedError

    def delete_task(self, task_id: str) -> bool:
        raise NotImplementedError

    def list_categories(self) -> List[Category]:
        raise NotImplementedError

    def fetch_range(self, start_date: str, end_date: str) -> List[Task]:
        raise NotImplementedError

    def fetch_stats(self) -> List[Dict[str, Any]]:
        raise NotImplementedError

    def close(self) -> None:
        """Release held resources (nothing by default)."""


# --- Remote ---


def _task_from_payload(data: Any) -> Task:
    if not isinstance(data, dict) or data.get("id") in (None, ""):
        raise RemoteFailure(f"Malformed task payload: {data!r}")
    return Task.from_dict(data)


def _rows(data: Any, what: str) -> List[Dict[str, Any]]:
    if not isinstance(data, list) or not all(isinstance(row, dict) for row in data):
        raise RemoteFailure(f"Malformed {what} payload: expected a list of objects")
    return data


class RemoteStrategy(PersistenceStrategy):
    """Persists through the REST API; validates the shape of every response."""

    name = SOURCE_REMOTE

    def __init__(self, client: TodoApiClient):
        self.client = client

    def list_tasks(self) -> List[Task]:
        return [_task_from_payload(row) for row in _rows(self.client.get_todos(), "task list")]

    def get_task(self, task_id: str) -> Task:
        return _task_from_payload(self.client.get_todo(task_id))

    def create_task(self, payload: Dict[str, Any]) -> Task:
        body = {k: v for k, v in payload.items() if k != "id"}
        return _task_from_payload(self.client.create_todo(body))

    def update_task(self, task_id: str, patch: Dict[str, Any], current: Optional[Task] = None) -> Task:
        # The server stamps completed_at itself when status becomes completed
        return _task_from_payload(self.client.update_todo(task_id, patch))

    def delete_task(self, task_id: str) -> bool:
        data = self.client.delete_todo(task_id)
        if not isinstance(data, dict):
            raise RemoteFailure(f"Malformed delete payload: {data!r}")
        return bool(data.get("deleted"))

    def list_categories(self) -> List[Category]:
        return [Category.from_dict(row) for row in _rows(self.client.get_categories(), "category list")]

    def fetch_range(self, start_date: str, end_date: str) -> List[Task]:
        rows = _rows(self.client.get_todos_in_range(start_date, end_date), "task range")
        return [_task_from_payload(row) for row in rows]

    def fetch_stats(self) -> List[Dict[str, Any]]:
        return _rows(self.client.get_stats(), "stats")

    def close(self) -> None:
        self.client.close()


# --- Local synthesis ---


class LocalSyntheticStrategy(PersistenceStrategy):
    """
    Fabricates structurally valid results without a backend.

    Ids come from the clock in milliseconds and are strictly increasing per
    instance, so rapid creates within the same millisecond never collide.
    """

    name = SOURCE_LOCAL

    def __init__(self, clock: Clock = datetime.now):
        self.clock = clock
        self._last_id = 0

    def _next_id(self) -> str:
        candidate = int(self.clock().timestamp() * 1000)
        if candidate <= self._last_id:
            candidate = self._last_id + 1
        self._last_id = candidate
        return str(candidate)

    def _now(self) -> str:
        return self.clock().isoformat()

    def list_tasks(self) -> List[Task]:
        return [Task.from_dict(dict(seed)) for seed in SEED_TASKS]

    def get_task(self, task_id: str) -> Task:
        raise GatewayError(f"Task {task_id} is not available locally")

    def create_task(self, payload: Dict[str, Any]) -> Task:
        now = self._now()
        data = dict(payload)
        data.update(
            id=self._next_id(),
            description=payload.get("description") or "",
            priority=payload.get("priority") or DEFAULT_PRIORITY,
            status=payload.get("status") or DEFAULT_STATUS,
            category=payload.get("category") or DEFAULT_CATEGORY,
            created_at=now,
            updated_at=now,
        )
        return Task.from_dict(data)

    def update_task(self, task_id: str, patch: Dict[str, Any], current: Optional[Task] = None) -> Task:
        if current is None:
            raise GatewayError(f"Cannot update task {task_id} locally without its current state")

        now = self._now()
        changes = dict(patch)
        changes["updated_at"] = now
        if patch.get("status") == STATUS_COMPLETED and not current.completed_at:
            changes["completed_at"] = now
        return replace(current, **changes)

    def delete_task(self, task_id: str) -> bool:
        return True

    def list_categories(self) -> List[Category]:
        return [Category.from_dict(dict(seed)) for seed in SEED_CATEGORIES]

    def fetch_range(self, start_date: str, end_date: str) -> List[Task]:
        raise GatewayError("Date range queries need the API")

    def fetch_stats(self) -> List[Dict[str, Any]]:
        raise GatewayError("Stats need the API")


# --- Composition ---


class FallbackGateway:
    """
    Tries the primary strategy, then the fallback.

    Args:
        primary: Preferred strategy (remote in production)
        fallback: Strategy used when primary raises GatewayError; None
            disables fallback entirely
    """

    def __init__(self, primary: PersistenceStrategy, fallback: Optional[PersistenceStrategy] = None):
        self.primary = primary
        self.fallback = fallback

    def _run(self, operation: str, args: tuple, allow_fallback: bool = True) -> GatewayResult:
        try:
            value = getattr(self.primary, operation)(*args)
        except GatewayError as e:
            if not allow_fallback or self.fallback is None:
                logger.warning("%s failed on %s: %s", operation, self.primary.name, e)
                return GatewayResult(error=e, source=self.primary.name)

            logger.warning(
                "%s failed on %s, falling back to %s: %s",
                operation, self.primary.name, self.fallback.name, e,
            )
            try:
                value = getattr(self.fallback, operation)(*args)
            except GatewayError as fallback_error:
                logger.warning("%s failed on %s: %s", operation, self.fallback.name, fallback_error)
                return GatewayResult(error=fallback_error, source=self.fallback.name, fallback_reason=str(e))
            return GatewayResult(value=value, source=self.fallback.name, fallback_reason=str(e))

        logger.debug("%s served by %s", operation, self.primary.name)
        return GatewayResult(value=value, source=self.primary.name)

    def list_tasks(self) -> GatewayResult:
        return self._run("list_tasks", ())

    def get_task(self, task_id: str) -> GatewayResult:
        return self._run("get_task", (task_id,), allow_fallback=False)

    def create_task(self, payload: Dict[str, Any]) -> GatewayResult:
        return self._run("create_task", (payload,))

    def update_task(self, task_id: str, patch: Dict[str, Any], current: Optional[Task] = None) -> GatewayResult:
        return self._run("update_task", (task_id, patch, current))

    def delete_task(self, task_id: str) -> GatewayResult:
        return self._run("delete_task", (task_id,))

    def list_categories(self) -> GatewayResult:
        return self._run("list_categories", ())

    def fetch_range(self, start_date: str, end_date: str) -> GatewayResult:
        return self._run("fetch_range", (start_date, end_date), allow_fallback=False)

    def fetch_stats(self) -> GatewayResult:
        return self._run("fetch_stats", (), allow_fallback=False)

    def close(self) -> None:
        """Close every strategy (the remote one holds an HTTP connection pool)."""
        self.primary.close()
        if self.fallback is not None:
            self.fallback.close()


def build_gateway(settings, clock: Clock = datetime.now) -> FallbackGateway:
    """
    Wire the production gateway from settings.

    Offline mode uses the local strategy alone.
    """
    local = LocalSyntheticStrategy(clock=clock)
    if settings.offline:
        return FallbackGateway(local)

    client = TodoApiClient(settings.api_base_url, timeout=settings.api_timeout)
    return FallbackGateway(RemoteStrategy(client), local)
