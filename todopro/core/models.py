"""
FILE: todopro/core/models.py
PURPOSE: Domain models for tasks, categories, reminders and notes
EXPORTS:
  - Task (dataclass)
  - Category (dataclass)
  - Reminder (dataclass)
  - Note (dataclass)
DEPENDENCIES:
  - dataclasses (stdlib)
  - typing (stdlib)
NOTES:
  - All models have from_dict() for API/JSON payload conversion
  - All models have to_dict() for serialization
  - Optional fields use None as default
  - Timestamps stored as ISO-8601 strings (parsing lives in core.dates)
  - Note serializes with camelCase keys to match the stored format
"""

from dataclasses import dataclass, asdict, field
from typing import Any, Dict, List, Optional

from .constants import DEFAULT_CATEGORY, DEFAULT_PRIORITY, DEFAULT_STATUS, STATUS_COMPLETED


def _text(value: Any) -> Optional[str]:
    """Coerce a payload value to str, keeping None."""
    if value is None:
        return None
    return str(value)


@dataclass
class Task:
    """A task with priority, status, category, optional due date and parent."""

    id: str
    title: str
    description: Optional[str] = None
    priority: str = DEFAULT_PRIORITY
    status: str = DEFAULT_STATUS
    category: str = DEFAULT_CATEGORY
    due_date: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    completed_at: Optional[str] = None
    parent_id: Optional[str] = None
    order_index: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Task":
        """
        Convert an API or seed payload to a Task object.

        Missing or null enum fields fall back to defaults. Ids are coerced to
        strings since the backend may hand out integers.
        """
        try:
            order_index = int(data.get("order_index") or 0)
        except (TypeError, ValueError):
            order_index = 0

        return cls(
            id=_text(data.get("id")) or "",
            title=_text(data.get("title")) or "",
            description=data.get("description"),
            priority=data.get("priority") or DEFAULT_PRIORITY,
            status=data.get("status") or DEFAULT_STATUS,
            category=data.get("category") or DEFAULT_CATEGORY,
            due_date=_text(data.get("due_date")),
            created_at=_text(data.get("created_at")),
            updated_at=_text(data.get("updated_at")),
            completed_at=_text(data.get("completed_at")),
            parent_id=_text(data.get("parent_id")) or None,
            order_index=order_index,
        )

    @property
    def is_valid(self) -> bool:
        """Records without id or title are incomplete and skipped by views."""
        return bool(self.id) and bool(self.title)

    @property
    def is_completed(self) -> bool:
        return self.status == STATUS_COMPLETED

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class Category:
    """A labeled color used for grouping tasks. Read-only reference data."""

    id: str
    name: str
    color: str = "#0078d4"
    created_at: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Category":
        return cls(
            id=_text(data.get("id")) or "",
            name=data.get("name") or "",
            color=data.get("color") or "#0078d4",
            created_at=_text(data.get("created_at")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class Reminder:
    """A dated reminder, optionally recurring."""

    id: str
    title: str
    reminder_date: str
    reminder_time: str
    description: Optional[str] = None
    priority: str = DEFAULT_PRIORITY
    category: str = DEFAULT_CATEGORY
    is_recurring: bool = False
    recurrence_type: Optional[str] = None
    is_completed: bool = False
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Reminder":
        return cls(
            id=_text(data.get("id")) or "",
            title=data.get("title") or "",
            reminder_date=data.get("reminder_date") or "",
            reminder_time=data.get("reminder_time") or "",
            description=data.get("description"),
            priority=data.get("priority") or DEFAULT_PRIORITY,
            category=data.get("category") or DEFAULT_CATEGORY,
            is_recurring=bool(data.get("is_recurring", False)),
            recurrence_type=data.get("recurrence_type"),
            is_completed=bool(data.get("is_completed", False)),
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class Note:
    """A colored free-text note with labels."""

    id: str
    title: str
    content: str = ""
    color: str = "#ffffff"
    is_pinned: bool = False
    labels: List[str] = field(default_factory=list)
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Note":
        """Convert a stored note (camelCase keys) to a Note object."""
        return cls(
            id=_text(data.get("id")) or "",
            title=data.get("title") or "",
            content=data.get("content") or "",
            color=data.get("color") or "#ffffff",
            is_pinned=bool(data.get("isPinned", False)),
            labels=list(data.get("labels") or []),
            created_at=data.get("createdAt"),
            updated_at=data.get("updatedAt"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with the camelCase keys used in storage and exports."""
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "color": self.color,
            "isPinned": self.is_pinned,
            "labels": list(self.labels),
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }
