"""Tests for REPL autocompletion."""

from prompt_toolkit.document import Document

from todopro.core.models import Task
from todopro.repl.completer import create_completer


def complete(completer, text):
    doc = Document(text, cursor_position=len(text))
    return list(completer.get_completions(doc, None))


def texts(completer, text):
    return [c.text for c in complete(completer, text)]


def test_command_completion():
    completer = create_completer()
    assert "mv" in texts(completer, "m")
    assert "month" in texts(completer, "m")
    assert texts(completer, "das") == ["dash"]
    assert len(texts(completer, "")) == len(completer.COMMANDS)


def test_flag_completion():
    completer = create_completer()
    flags = texts(completer, "ls --")
    assert "--status" in flags
    assert "--json" in flags
    assert texts(completer, "export --o") == ["--output"]


def test_enum_values_after_flags():
    completer = create_completer()
    assert texts(completer, "ls -p ") == ["all", "low", "medium", "high"]
    assert texts(completer, "ls --status in") == ["in_progress"]
    assert texts(completer, "remind add Standup --repeat w") == ["weekly"]
    assert texts(completer, "remind ls --filter o") == ["overdue"]
    assert texts(completer, "remind ls -f ") == ["all", "upcoming", "today", "overdue", "completed"]


def test_mv_completes_status_after_id():
    completer = create_completer()
    assert texts(completer, "mv 3 c") == ["completed"]


def test_note_and_remind_subcommands():
    completer = create_completer()
    assert set(texts(completer, "note ")) == {"add", "ls", "edit", "pin", "rm"}
    assert texts(completer, "remind d") == ["done"]
    # Nothing after the subcommand
    assert texts(completer, "note add ") == []


def test_task_ids_come_from_loaded_tasks():
    tasks = [
        Task(id="1", title="Complete project proposal", status="in_progress"),
        Task(id="12", title="Design UI"),
        Task(id="2", title="Documentation"),
    ]
    completer = create_completer(lambda: tasks)

    completions = complete(completer, "done 1")
    assert [c.text for c in completions] == ["1", "12"]
    assert completions[0].display_meta_text == "Complete project proposal [in_progress]"

    # Only the last comma-separated id completes
    assert texts(completer, "rm 1,2") == ["2"]


def test_expand_offers_all():
    completer = create_completer(lambda: [Task(id="1", title="A")])
    assert texts(completer, "expand ") == ["all", "1"]
