"""Tests for the JSON-file note and reminder collections."""

import json

import pytest

from todopro.core.exceptions import NoteNotFoundError, ReminderNotFoundError, ValidationError
from todopro.core.local_store import (
    NoteCollection,
    ReminderCollection,
    filter_reminders,
    search_notes,
)
from todopro.core.models import Note, Reminder


@pytest.fixture
def notes(tmp_path, clock):
    return NoteCollection(tmp_path / "notes.json", clock=clock)


@pytest.fixture
def reminders(tmp_path, clock):
    return ReminderCollection(tmp_path / "reminders.json", clock=clock)


def test_missing_file_is_empty(notes):
    assert notes.load_all() == []


def test_seed_if_empty_only_once(notes):
    assert notes.seed_if_empty() is True
    assert [n.title for n in notes.load_all()] == ["Project Ideas", "Shopping List", "Meeting Notes"]
    assert notes.seed_if_empty() is False
    assert len(notes.load_all()) == 3


def test_note_create_defaults_and_camel_case_on_disk(notes, clock):
    note = notes.create({"title": "  Ideas  ", "labels": ["dev"]})

    assert note.title == "Ideas"
    assert note.color == "#ffffff"
    assert not note.is_pinned
    assert note.created_at == clock().isoformat()

    stored = json.loads(notes.path.read_text(encoding="utf-8"))
    assert stored[0]["isPinned"] is False
    assert stored[0]["createdAt"] == clock().isoformat()


def test_newest_first(notes, clock):
    notes.create({"title": "Old"})
    clock.advance(minutes=1)
    notes.create({"title": "New"})
    assert [n.title for n in notes.load_all()] == ["New", "Old"]


def test_note_update_and_pin(notes, clock):
    note = notes.create({"title": "Draft"})
    clock.advance(minutes=5)

    updated = notes.update(note.id, {"isPinned": True, "content": "Body"})
    assert updated.is_pinned
    assert updated.content == "Body"
    assert updated.updated_at == clock().isoformat()
    assert notes.get(note.id).is_pinned


def test_update_errors(notes):
    note = notes.create({"title": "Draft"})
    with pytest.raises(NoteNotFoundError):
        notes.update("missing", {"title": "x"})
    with pytest.raises(ValidationError):
        notes.update(note.id, {"title": "  "})
    with pytest.raises(ValidationError):
        notes.update(note.id, {"pinned": True})


def test_create_rejects_empty_title(notes):
    with pytest.raises(ValidationError):
        notes.create({"title": ""})


def test_delete_is_noop_for_unknown_id(notes):
    note = notes.create({"title": "Keep"})
    notes.delete("missing")
    notes.delete(note.id)
    assert notes.load_all() == []


def test_corrupt_file_treated_as_empty(notes):
    notes.path.write_text("{not json", encoding="utf-8")
    assert notes.load_all() == []

    notes.path.write_text('{"an": "object"}', encoding="utf-8")
    assert notes.load_all() == []
    # Next write replaces the bad file
    notes.create({"title": "Fresh"})
    assert [n.title for n in notes.load_all()] == ["Fresh"]


def test_reminder_defaults(reminders, clock):
    reminder = reminders.create({"title": "Call mom", "reminder_time": "19:00"})

    assert reminder.reminder_date == "2024-03-01"
    assert reminder.priority == "medium"
    assert reminder.category == "General"
    assert reminder.is_completed is False
    assert reminder.is_recurring is False


def test_reminder_validation(reminders):
    with pytest.raises(ValidationError):
        reminders.create({"title": "A", "priority": "urgent"})
    with pytest.raises(ValidationError):
        reminders.create({"title": "A", "recurrence_type": "hourly"})


def test_reminder_complete(reminders):
    reminders.seed_if_empty()
    done = reminders.update("1", {"is_completed": True})
    assert done.is_completed
    with pytest.raises(ReminderNotFoundError):
        reminders.get("99")


def test_reminder_seeds_are_relative_to_today(reminders):
    reminders.seed_if_empty()
    dates = {r.title: r.reminder_date for r in reminders.load_all()}
    assert dates == {
        "Team standup meeting": "2024-03-01",
        "Doctor appointment": "2024-03-02",
        "Call mom": "2024-02-29",
    }


def test_reminder_update_uses_create_checks(reminders):
    reminders.seed_if_empty()
    with pytest.raises(ValidationError):
        reminders.update("1", {"priority": "urgent"})
    with pytest.raises(ValidationError):
        reminders.update("1", {"recurrence_type": "hourly"})
    assert reminders.get("1").priority == "high"

    renamed = reminders.update("1", {"title": "  Standup  ", "priority": "low"})
    assert renamed.title == "Standup"
    assert renamed.priority == "low"


def test_note_update_strips_title(notes):
    note = notes.create({"title": "Draft"})
    assert notes.update(note.id, {"title": "  Final  "}).title == "Final"


def test_search_notes_matches_title_content_and_labels():
    notes = [
        Note(id="1", title="Project Ideas", content="Weather app", labels=["dev"]),
        Note(id="2", title="Shopping", content="Milk\nBread", labels=["personal"]),
        Note(id="3", title="Meeting", content="Q4 goals", labels=["Work"]),
    ]
    assert [n.id for n in search_notes(notes, "IDEAS")] == ["1"]
    assert [n.id for n in search_notes(notes, "milk")] == ["2"]
    assert [n.id for n in search_notes(notes, "work")] == ["3"]
    assert search_notes(notes, "nothing") == []
    assert len(search_notes(notes, "  ")) == 3


def test_filter_reminders_by_calendar_day(clock):
    reminders = [
        Reminder(id="1", title="Today morning", reminder_date="2024-03-01", reminder_time=""),
        Reminder(id="2", title="Tomorrow", reminder_date="2024-03-02", reminder_time=""),
        Reminder(id="3", title="Yesterday", reminder_date="2024-02-29", reminder_time=""),
        Reminder(id="4", title="Done", reminder_date="2024-02-20", reminder_time="", is_completed=True),
        Reminder(id="5", title="Garbled", reminder_date="soon", reminder_time=""),
    ]
    now = clock()

    # Today is neither overdue nor upcoming
    assert [r.id for r in filter_reminders(reminders, "today", now)] == ["1"]
    assert [r.id for r in filter_reminders(reminders, "upcoming", now)] == ["2"]
    assert [r.id for r in filter_reminders(reminders, "overdue", now)] == ["3"]
    assert [r.id for r in filter_reminders(reminders, "completed", now)] == ["4"]
    assert len(filter_reminders(reminders, "all", now)) == 5

    with pytest.raises(ValidationError):
        filter_reminders(reminders, "later", now)
