"""Tests for the task store with fake gateways and a fixed clock."""

import pytest

from todopro.core.exceptions import RemoteFailure, TaskNotFoundError, ValidationError
from todopro.core.gateway import FallbackGateway, LocalSyntheticStrategy, PersistenceStrategy
from todopro.core.models import Task
from todopro.core.store import TaskStore


class FailingStrategy(PersistenceStrategy):
    """Remote stand-in whose every call is rejected; records what was attempted."""

    name = "remote"

    def __init__(self):
        self.calls = []

    def _fail(self, operation):
        self.calls.append(operation)
        raise RemoteFailure("connection refused")

    def list_tasks(self):
        self._fail("list_tasks")

    def create_task(self, payload):
        self._fail("create_task")

    def update_task(self, task_id, patch, current=None):
        self._fail("update_task")

    def delete_task(self, task_id):
        self._fail("delete_task")

    def list_categories(self):
        self._fail("list_categories")

    def fetch_range(self, start_date, end_date):
        self._fail("fetch_range")

    def fetch_stats(self):
        self._fail("fetch_stats")


class MemoryStrategy(PersistenceStrategy):
    """Remote stand-in that succeeds, echoing payloads back with server ids."""

    name = "remote"

    def __init__(self, tasks=None):
        self.tasks = list(tasks or [])
        self.next_id = 100
        self.deleted = []

    def list_tasks(self):
        return list(self.tasks)

    def create_task(self, payload):
        self.next_id += 1
        return Task.from_dict(dict(payload, id=self.next_id, created_at="server", updated_at="server"))

    def update_task(self, task_id, patch, current=None):
        data = current.to_dict()
        data.update(patch)
        return Task.from_dict(data)

    def delete_task(self, task_id):
        self.deleted.append(task_id)
        return True


@pytest.fixture
def remote():
    return FailingStrategy()


@pytest.fixture
def store(remote, clock):
    """Store whose API is always down; loaded with the seed tasks."""
    store = TaskStore(FallbackGateway(remote, LocalSyntheticStrategy(clock)), clock=clock)
    store.load()
    return store


def test_load_falls_back_to_seed_tasks(store):
    assert [t.id for t in store.list()] == ["1", "2", "3"]
    assert store.source == "local"
    assert store.error is None


def test_fallback_create(store, clock):
    """Remote create rejected: a synthesized task still comes back and is prepended."""
    task = store.create({"title": "X"})

    assert task.id
    assert task.title == "X"
    assert task.priority == "medium"
    assert task.status == "pending"
    assert task.created_at == clock().isoformat()
    assert task.updated_at == clock().isoformat()
    assert store.list()[0] is task
    assert store.error is None


def test_rapid_creates_get_distinct_ids(store):
    ids = {store.create({"title": f"T{i}"}).id for i in range(5)}
    assert len(ids) == 5


def test_empty_title_rejected_before_gateway(store, remote):
    remote.calls.clear()
    with pytest.raises(ValidationError):
        store.create({"title": "   "})
    with pytest.raises(ValidationError):
        store.create({"priority": "high"})
    assert remote.calls == []


def test_invalid_enums_and_unknown_fields_rejected(store):
    with pytest.raises(ValidationError):
        store.create({"title": "A", "priority": "urgent"})
    with pytest.raises(ValidationError):
        store.update("1", {"status": "done"})
    with pytest.raises(ValidationError):
        store.update("1", {"colour": "red"})


def test_update_merges_and_stamps_completion(store, clock):
    clock.advance(hours=1)
    task = store.update("3", {"status": "completed", "title": "  Docs  "})

    assert task.title == "Docs"
    assert task.status == "completed"
    assert task.completed_at == clock().isoformat()
    assert task.updated_at == clock().isoformat()
    assert task.description == "Create comprehensive documentation for the API"
    assert store.get("3") is task


def test_created_at_cannot_be_patched(store, remote):
    created = store.get("1").created_at
    remote.calls.clear()

    with pytest.raises(ValidationError, match="created_at"):
        store.update("1", {"created_at": "1999-01-01T00:00:00"})
    assert store.get("1").created_at == created
    assert remote.calls == []


def test_completed_at_never_cleared(store, clock):
    store.move("3", "completed")
    stamped = store.get("3").completed_at
    clock.advance(days=1)

    reopened = store.move("3", "pending")
    assert reopened.status == "pending"
    assert reopened.completed_at == stamped

    # Completing again keeps the original stamp
    assert store.move("3", "completed").completed_at == stamped


def test_update_unknown_id_sets_error(store, remote):
    remote.calls.clear()
    with pytest.raises(TaskNotFoundError) as excinfo:
        store.update("999", {"title": "Nope"})
    assert excinfo.value.task_id == "999"
    assert store.error == "Task 999 not found"
    assert remote.calls == []

    store.clear_error()
    assert store.error is None


def test_delete_unknown_id_makes_no_call(store, remote):
    remote.calls.clear()
    with pytest.raises(TaskNotFoundError):
        store.delete("999")
    assert remote.calls == []


def test_delete_keeps_orphaned_children(store):
    child = store.add_subtask("2", "Wireframes")
    store.delete("2")

    assert store.find("2") is None
    assert store.get(child.id).parent_id == "2"


def test_add_subtask_defaults_and_order(store):
    store.move("2", "in_progress")
    first = store.add_subtask("2")
    second = store.add_subtask("2", "Second")

    assert first.title == "New Subtask"
    assert first.status == "pending"
    assert first.parent_id == "2"
    assert first.order_index == 1
    assert second.order_index == 2


def test_single_level_nesting_enforced(store):
    child = store.add_subtask("1", "Child")

    with pytest.raises(ValidationError):
        store.add_subtask(child.id, "Grandchild")
    with pytest.raises(ValidationError):
        store.create({"title": "Grandchild", "parent_id": child.id})
    with pytest.raises(ValidationError):
        store.update("1", {"parent_id": "2"})  # 1 has a subtask
    with pytest.raises(ValidationError):
        store.update("3", {"parent_id": "3"})
    with pytest.raises(ValidationError):
        store.update("3", {"parent_id": "404"})

    # Detaching is allowed
    assert store.update(child.id, {"parent_id": None}).parent_id is None


def test_range_and_stats_have_no_fallback(store):
    assert store.fetch_range("2024-01-01", "2024-01-31") == []
    assert store.error == "Failed to fetch todos by date range"

    store.clear_error()
    assert store.load_stats() == []
    assert store.error == "Failed to fetch stats"


def test_categories_fall_back_to_seed(store):
    names = [c.name for c in store.load_categories()]
    assert names == ["Development", "Design", "Documentation", "Testing", "General"]


def test_remote_success_path(clock):
    existing = Task(id="7", title="From server", priority="low")
    remote = MemoryStrategy([existing])
    store = TaskStore(FallbackGateway(remote, LocalSyntheticStrategy(clock)), clock=clock)

    store.load()
    assert store.source == "remote"

    created = store.create({"title": "New", "category": ""})
    assert created.id == "101"
    assert created.category == "General"
    assert [t.id for t in store.list()] == ["101", "7"]

    store.delete("7")
    assert remote.deleted == ["7"]
    assert [t.id for t in store.list()] == ["101"]


def test_mutation_fails_when_every_strategy_fails(remote, clock):
    store = TaskStore(FallbackGateway(remote), clock=clock)
    store.tasks = [Task(id="1", title="Only")]

    with pytest.raises(RemoteFailure):
        store.create({"title": "X"})
    assert store.error == "connection refused"
    assert [t.id for t in store.list()] == ["1"]

    # Delete still removes the task locally
    store.delete("1")
    assert store.list() == []
