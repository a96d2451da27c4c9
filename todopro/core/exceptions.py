"""
FILE: todopro/core/exceptions.py
PURPOSE: Custom exception classes for error handling
EXPORTS:
  - TodoProError (base exception)
  - ValidationError
  - NotFoundError, TaskNotFoundError, NoteNotFoundError, ReminderNotFoundError
  - GatewayError, RemoteFailure
  - ParseError
DEPENDENCIES:
  - None (stdlib only)
NOTES:
  - All exceptions inherit from TodoProError for easy catching
  - Exceptions include context (IDs, values) for helpful error messages
  - Store raises these, CLI/REPL layers catch and display
  - RemoteFailure never reaches the user for reads/creates/updates; the
    gateway resolves it through the local strategy
"""

from typing import Optional


class TodoProError(Exception):
    """Base exception for all todopro errors."""
    pass


class ValidationError(TodoProError):
    """Input rejected before any store or network call."""

    def __init__(self, message: str):
        super().__init__(message)


class NotFoundError(TodoProError):
    """Entity with given ID doesn't exist."""

    kind = "Entity"

    def __init__(self, entity_id: str):
        self.entity_id = entity_id
        super().__init__(f"{self.kind} {entity_id} not found")


class TaskNotFoundError(NotFoundError):
    """Task with given ID doesn't exist."""

    kind = "Task"

    @property
    def task_id(self) -> str:
        return self.entity_id


class NoteNotFoundError(NotFoundError):
    """Note with given ID doesn't exist."""

    kind = "Note"


class ReminderNotFoundError(NotFoundError):
    """Reminder with given ID doesn't exist."""

    kind = "Reminder"


class GatewayError(TodoProError):
    """A persistence strategy could not complete an operation."""
    pass


class RemoteFailure(GatewayError):
    """Transport error, timeout, non-2xx response or malformed body from the API."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ParseError(TodoProError):
    """Date or timestamp string could not be parsed."""

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Cannot parse date value {value!r}")
