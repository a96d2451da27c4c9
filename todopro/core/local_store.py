"""
FILE: todopro/core/local_store.py
PURPOSE: JSON-file persistence for notes and reminders
EXPORTS:
  - JsonCollection (base class)
  - NoteCollection
  - ReminderCollection
  - search_notes: case-insensitive match on title, content or labels
  - filter_reminders, reminder_state: all|upcoming|today|overdue|completed
DEPENDENCIES:
  - json, logging, pathlib, datetime, dataclasses, typing (stdlib)
  - todopro.core.models (Note, Reminder)
  - todopro.core.dates (safe_parse)
  - todopro.core.exceptions (NoteNotFoundError, ReminderNotFoundError, ValidationError)
NOTES:
  - One JSON array per file; the whole file is rewritten on every change
  - Newest entries first
  - Ids come from the clock in milliseconds (strictly increasing per instance)
  - A missing file is an empty collection; an unreadable or corrupt file is
    logged and treated as empty (it is overwritten on the next write)
  - Notes use camelCase keys on disk, reminders snake_case
"""

import json
import logging
from dataclasses import replace
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional

from .constants import (
    DEFAULT_CATEGORY,
    DEFAULT_PRIORITY,
    FILTER_ALL,
    PRIORITIES,
    RECURRENCE_TYPES,
    REMINDER_FILTERS,
)
from .dates import safe_parse
from .exceptions import NoteNotFoundError, ReminderNotFoundError, ValidationError
from .models import Note, Reminder

logger = logging.getLogger(__name__)


class JsonCollection:
    """
    Base for a list of entities persisted as one JSON file.

    Subclasses set model, not_found, and implement _build() and _seed().
    """

    model: Any = None
    not_found = None
    # Dataclass attribute -> patch key accepted by update()
    patchable: Dict[str, str] = {}

    def __init__(self, path: Path, clock: Callable[[], datetime] = datetime.now):
        self.path = Path(path)
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

    def _read(self) -> List[Dict[str, Any]]:
        if not self.path.exists():
            return []
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.error("Could not read %s, treating as empty: %s", self.path, e)
            return []
        if not isinstance(data, list):
            logger.error("Could not read %s, treating as empty: expected a JSON array", self.path)
            return []
        return [row for row in data if isinstance(row, dict)]

    def _write(self, items: List[Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = [item.to_dict() for item in items]
        self.path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")

    # --- Contract ---

    def load_all(self) -> List[Any]:
        return [self.model.from_dict(row) for row in self._read()]

    def get(self, entity_id: str):
        """
        Raises:
            NotFoundError subclass: If no entity has this id
        """
        for item in self.load_all():
            if item.id == str(entity_id):
                return item
        raise self.not_found(str(entity_id))

    def _validate(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        """Check draft/patch values and return a normalized copy."""
        clean = dict(fields)
        if "title" in clean:
            title = (clean["title"] or "").strip()
            if not title:
                raise ValidationError(f"{self.not_found.kind} title cannot be empty")
            clean["title"] = title
        return clean

    def create(self, draft: Dict[str, Any]):
        """Create an entity from a draft and store it first in the list. None values take defaults."""
        given = {key: value for key, value in draft.items() if value is not None}
        item = self._build(self._validate(dict(given, title=draft.get("title"))))
        self._write([item] + self.load_all())
        return item

    def update(self, entity_id: str, patch: Dict[str, Any]):
        """
        Merge a patch into an entity and refresh its updated timestamp.

        Raises:
            NotFoundError subclass: If no entity has this id
            ValidationError: If the patch names an unknown field, empties the
                title or carries a value create() would reject
        """
        unknown = sorted(set(patch) - set(self.patchable.values()))
        if unknown:
            raise ValidationError(f"Unknown field(s): {', '.join(unknown)}")
        patch = self._validate(patch)

        items = self.load_all()
        for index, item in enumerate(items):
            if item.id == str(entity_id):
                changes = {attr: patch[key] for attr, key in self.patchable.items() if key in patch}
                changes["updated_at"] = self._now()
                items[index] = replace(item, **changes)
                self._write(items)
                return items[index]
        raise self.not_found(str(entity_id))

    def delete(self, entity_id: str) -> None:
        """Remove an entity. Unknown ids are a no-op."""
        items = self.load_all()
        remaining = [item for item in items if item.id != str(entity_id)]
        if len(remaining) != len(items):
            self._write(remaining)

    def seed_if_empty(self) -> bool:
        """Write sample entries when the collection is empty. Returns True if seeded."""
        if self.load_all():
            return False
        self._write(self._seed())
        logger.info("Seeded %s with sample data", self.path)
        return True

    def _build(self, draft: Dict[str, Any]):
        raise NotImplementedError

    def _seed(self) -> List[Any]:
        raise NotImplementedError


class NoteCollection(JsonCollection):
    """Notes: colored text cards with labels, pinned first when displayed."""

    model = Note
    not_found = NoteNotFoundError
    patchable = {
        "title": "title",
        "content": "content",
        "color": "color",
        "is_pinned": "isPinned",
        "labels": "labels",
    }

    def _build(self, draft: Dict[str, Any]) -> Note:
        now = self._now()
        return Note(
            id=self._next_id(),
            title=draft["title"],
            content=draft.get("content") or "",
            color=draft.get("color") or "#ffffff",
            is_pinned=bool(draft.get("isPinned", False)),
            labels=list(draft.get("labels") or []),
            created_at=now,
            updated_at=now,
        )

    def _seed(self) -> List[Note]:
        now = self._now()
        return [
            Note(
                id="1",
                title="Project Ideas",
                content="Build a task manager\nCreate a weather app\nDevelop a music player\nDesign a portfolio website",
                color="#f3f9f1",
                is_pinned=True,
                labels=["development", "ideas"],
                created_at=now,
                updated_at=now,
            ),
            Note(
                id="2",
                title="Shopping List",
                content="Milk\nBread\nEggs\nApples\nChicken\nRice",
                color="#fff4e6",
                labels=["personal"],
                created_at=now,
                updated_at=now,
            ),
            Note(
                id="3",
                title="Meeting Notes",
                content=(
                    "Discussed Q4 goals\n- Increase productivity by 20%\n- Launch new feature\n"
                    "- Improve user experience\n\nAction items:\n- Research competitors\n"
                    "- Create mockups\n- Schedule user testing"
                ),
                color="#e6f7ff",
                labels=["work", "meetings"],
                created_at=now,
                updated_at=now,
            ),
        ]


class ReminderCollection(JsonCollection):
    """Dated reminders, optionally recurring."""

    model = Reminder
    not_found = ReminderNotFoundError
    patchable = {
        "title": "title",
        "description": "description",
        "reminder_date": "reminder_date",
        "reminder_time": "reminder_time",
        "priority": "priority",
        "category": "category",
        "is_recurring": "is_recurring",
        "recurrence_type": "recurrence_type",
        "is_completed": "is_completed",
    }

    def _validate(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        clean = super()._validate(fields)
        if "priority" in clean and clean["priority"] not in PRIORITIES:
            raise ValidationError(
                f"Invalid priority '{clean['priority']}'. Must be one of: {', '.join(PRIORITIES)}"
            )
        recurrence = clean.get("recurrence_type")
        if recurrence is not None and recurrence not in RECURRENCE_TYPES:
            raise ValidationError(
                f"Invalid recurrence '{recurrence}'. Must be one of: {', '.join(RECURRENCE_TYPES)}"
            )
        return clean

    def _build(self, draft: Dict[str, Any]) -> Reminder:
        priority = draft.get("priority") or DEFAULT_PRIORITY
        now = self._now()
        return Reminder(
            id=self._next_id(),
            title=draft["title"],
            description=draft.get("description") or "",
            reminder_date=draft.get("reminder_date") or self.clock().date().isoformat(),
            reminder_time=draft.get("reminder_time") or "",
            priority=priority,
            category=draft.get("category") or DEFAULT_CATEGORY,
            is_recurring=bool(draft.get("is_recurring", False)),
            recurrence_type=draft.get("recurrence_type"),
            is_completed=False,
            created_at=now,
            updated_at=now,
        )

    def _seed(self) -> List[Reminder]:
        now = self.clock()
        stamp = now.isoformat()
        today = now.date()
        return [
            Reminder(
                id="1",
                title="Team standup meeting",
                description="Daily standup with the development team",
                reminder_date=today.isoformat(),
                reminder_time="10:00",
                priority="high",
                category="Work",
                is_recurring=True,
                recurrence_type="daily",
                created_at=stamp,
                updated_at=stamp,
            ),
            Reminder(
                id="2",
                title="Doctor appointment",
                description="Annual checkup with Dr. Smith",
                reminder_date=(today + timedelta(days=1)).isoformat(),
                reminder_time="14:30",
                priority="high",
                category="Health",
                created_at=stamp,
                updated_at=stamp,
            ),
            Reminder(
                id="3",
                title="Call mom",
                description="Weekly check-in call",
                reminder_date=(today - timedelta(days=1)).isoformat(),
                reminder_time="19:00",
                priority="medium",
                category="Family",
                is_recurring=True,
                recurrence_type="weekly",
                created_at=stamp,
                updated_at=stamp,
            ),
        ]


def search_notes(notes: Iterable[Note], query: Optional[str]) -> List[Note]:
    """Notes whose title, content or any label contains query (case-insensitive)."""
    needle = (query or "").strip().lower()
    if not needle:
        return list(notes)
    return [
        note for note in notes
        if needle in note.title.lower()
        or needle in note.content.lower()
        or any(needle in label.lower() for label in note.labels)
    ]


def reminder_state(reminder: Reminder, now: datetime) -> Optional[str]:
    """
    Classify a reminder as completed, today, overdue or upcoming.

    Dates compare by calendar day, so a reminder dated today is neither
    overdue nor upcoming. Returns None for an open reminder whose date
    cannot be parsed.
    """
    if reminder.is_completed:
        return "completed"
    when = safe_parse(reminder.reminder_date)
    if when is None:
        return None
    day, today = when.date(), now.date()
    if day == today:
        return "today"
    return "overdue" if day < today else "upcoming"


def filter_reminders(
    reminders: Iterable[Reminder],
    mode: str = FILTER_ALL,
    now: Optional[datetime] = None,
) -> List[Reminder]:
    """
    Keep the reminders matching a list filter.

    Args:
        reminders: Reminders in stored order
        mode: One of REMINDER_FILTERS; "all" keeps everything
        now: Clock override; defaults to wall clock

    Raises:
        ValidationError: If mode is not a known filter
    """
    if mode not in REMINDER_FILTERS:
        raise ValidationError(
            f"Invalid reminder filter '{mode}'. Must be one of: {', '.join(REMINDER_FILTERS)}"
        )
    if mode == FILTER_ALL:
        return list(reminders)
    now = now or datetime.now()
    return [r for r in reminders if reminder_state(r, now) == mode]
