"""Tests for the JSON export document and file."""

import json
from datetime import datetime

from todopro.core.export import build_export, export_filename, write_export
from todopro.core.models import Note, Reminder, Task

NOW = datetime(2024, 3, 1, 9, 30)


def test_build_export_shape():
    tasks = [
        Task(id="1", title="Ship", due_date=None, description=None),
        Task(id="", title="Broken"),
    ]
    reminders = [Reminder(id="1", title="Standup", reminder_date="2024-03-01", reminder_time="10:00")]
    notes = [Note(id="1", title="Ideas", is_pinned=True)]

    document = build_export(tasks, reminders, notes, now=NOW)

    assert document["exportInfo"] == {
        "exportDate": "2024-03-01T09:30:00",
        "exportedBy": "TodoPro Dashboard",
        "version": "1.0.0",
    }
    assert [t["id"] for t in document["tasks"]] == ["1"]
    assert document["tasks"][0]["description"] == ""
    assert document["tasks"][0]["due_date"] == ""
    assert document["tasks"][0]["completed_at"] == ""
    assert document["reminders"][0]["reminder_time"] == "10:00"
    assert document["notes"][0]["isPinned"] is True


def test_export_filename():
    assert export_filename("todopro", NOW) == "todopro-export-2024-03-01.json"


def test_write_export_creates_directory(tmp_path):
    document = build_export([Task(id="1", title="Ship")], now=NOW)
    path = write_export(document, tmp_path / "out", "backup", now=NOW)

    assert path.name == "backup-export-2024-03-01.json"
    assert json.loads(path.read_text(encoding="utf-8")) == document
    assert path.read_text(encoding="utf-8").startswith('{\n  "exportInfo"')
