"""
FILE: todopro/repl/completer.py
PURPOSE: Autocomplete for REPL commands, flags and values using prompt-toolkit
EXPORTS:
  - TodoProCompleter (prompt_toolkit Completer)
  - create_completer(task_source) -> TodoProCompleter
DEPENDENCIES:
  - prompt_toolkit.completion (Completer, Completion)
  - prompt_toolkit.document (Document)
  - todopro.core.constants (priorities, statuses, recurrence types)
NOTES:
  - Completes command names as the first word
  - Completes flags (long and short) per command
  - Completes priority/status values after -p/--priority and -s/--status
  - Completes task ids from the tasks already loaded in the session; the
    completer itself never calls the API
  - Completes note/remind subcommands
"""

from typing import Callable, Iterable, List, Optional

from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.document import Document

from ..core.constants import PRIORITIES, RECURRENCE_TYPES, REMINDER_FILTERS, STATUSES
from ..core.models import Task


class TodoProCompleter(Completer):
    """
    Autocomplete for todopro REPL commands.

    Provides context-aware completion for:
    - Command names (first word)
    - Flags (after command)
    - Enum values (after a priority/status/repeat flag, or mv <id>)
    - Task ids for commands that take one
    - note/remind subcommands
    """

    COMMANDS = [
        "add", "sub", "ls", "show", "edit", "done", "mv", "rm",
        "day", "today", "week", "month", "year", "board", "expand", "collapse",
        "overdue", "dash", "export", "categories", "stats",
        "note", "remind", "filter", "search", "reload",
        "help", "clear", "exit", "quit",
    ]

    FILTER_FLAGS = ["--search", "--priority", "--status", "--category", "-q", "-p", "-s", "-c"]

    COMMAND_FLAGS = {
        "add": ["--description", "--priority", "--status", "--category", "--due", "--parent", "--json"],
        "ls": FILTER_FLAGS + ["--json", "--raw"],
        "show": ["--json"],
        "edit": ["--title", "--description", "--priority", "--status", "--category", "--due", "--parent"],
        "done": ["--json"],
        "rm": ["--yes", "--json"],
        "day": ["--date", "--json"] + FILTER_FLAGS,
        "today": ["--json"] + FILTER_FLAGS,
        "week": ["--date", "--json"] + FILTER_FLAGS,
        "month": ["--json"] + FILTER_FLAGS,
        "year": ["--json"],
        "board": ["--json"] + FILTER_FLAGS,
        "overdue": ["--json"],
        "dash": ["--json"] + FILTER_FLAGS,
        "export": ["--output"],
        "filter": FILTER_FLAGS,
    }

    PRIORITY_FLAGS = ("--priority", "-p")
    STATUS_FLAGS = ("--status", "-s")
    REPEAT_FLAGS = ("--repeat",)
    REMINDER_FILTER_FLAGS = ("--filter", "-f")

    # Commands whose first positional argument is a task id
    TASK_ID_COMMANDS = ("sub", "show", "view", "edit", "done", "mv", "rm", "expand", "collapse")

    NOTE_SUBCOMMANDS = {
        "add": "Create a note",
        "ls": "List notes",
        "edit": "Update a note",
        "pin": "Toggle pinned",
        "rm": "Delete note(s)",
    }
    REMIND_SUBCOMMANDS = {
        "add": "Create a reminder",
        "ls": "List reminders",
        "done": "Complete reminder(s)",
        "rm": "Delete reminder(s)",
    }

    def __init__(self, task_source: Optional[Callable[[], List[Task]]] = None):
        self.task_source = task_source or (lambda: [])

    def get_completions(self, document: Document, complete_event) -> Iterable[Completion]:
        """
        Generate completions for current input.

        Args:
            document: Current document (text before cursor)
            complete_event: Completion event (unused)

        Yields:
            Completion objects for matching items
        """
        text = document.text_before_cursor
        words = text.split()

        # Empty line: every command
        if not words:
            yield from self._complete_commands("")
            return

        # Still typing the command itself
        if len(words) == 1 and not text.endswith(" "):
            yield from self._complete_commands(words[0])
            return

        command = words[0].lower()
        current_word = "" if text.endswith(" ") else words[-1]
        # Completed words after the command
        previous = words[1:] if text.endswith(" ") else words[1:-1]
        last = previous[-1] if previous else None

        if last in self.PRIORITY_FLAGS:
            yield from self._complete_values(("all",) + PRIORITIES, current_word)
            return
        if last in self.STATUS_FLAGS:
            yield from self._complete_values(("all",) + STATUSES, current_word)
            return
        if command == "remind" and last in self.REMINDER_FILTER_FLAGS:
            yield from self._complete_values(REMINDER_FILTERS, current_word)
            return
        if last in self.REPEAT_FLAGS:
            yield from self._complete_values(RECURRENCE_TYPES, current_word)
            return

        if current_word.startswith("-"):
            yield from self._complete_flags(command, current_word)
            return

        positional = [w for w in previous if not w.startswith("-")]

        if command in ("note", "remind"):
            if not positional:
                subcommands = self.NOTE_SUBCOMMANDS if command == "note" else self.REMIND_SUBCOMMANDS
                yield from self._complete_subcommands(subcommands, current_word)
            return

        if command == "mv" and len(positional) == 1:
            yield from self._complete_values(STATUSES, current_word)
            return

        if command in ("expand", "collapse") and not positional:
            yield from self._complete_values(("all",), current_word)

        if command in self.TASK_ID_COMMANDS and not positional:
            yield from self._complete_task_ids(current_word)

    def _complete_commands(self, word: str) -> Iterable[Completion]:
        """
        Complete command names.

        Args:
            word: Partial command being typed

        Yields:
            Completion objects for matching commands
        """
        word_lower = word.lower()
        for command in self.COMMANDS:
            if command.startswith(word_lower):
                yield Completion(
                    command,
                    start_position=-len(word),
                    display=command,
                    display_meta=self._get_command_description(command),
                )

    def _complete_flags(self, command: str, word: str) -> Iterable[Completion]:
        word_lower = word.lower()
        for flag in self.COMMAND_FLAGS.get(command, []):
            if flag.startswith(word_lower):
                yield Completion(flag, start_position=-len(word), display=flag)

    def _complete_values(self, values: Iterable[str], word: str) -> Iterable[Completion]:
        word_lower = word.lower()
        for value in values:
            if value.startswith(word_lower):
                yield Completion(value, start_position=-len(word), display=value)

    def _complete_subcommands(self, subcommands: dict, word: str) -> Iterable[Completion]:
        word_lower = word.lower()
        for name, description in subcommands.items():
            if name.startswith(word_lower):
                yield Completion(
                    name,
                    start_position=-len(word),
                    display=name,
                    display_meta=description,
                )

    def _complete_task_ids(self, word: str) -> Iterable[Completion]:
        """
        Complete task IDs with the task title as a label.

        Only the last comma-separated id is completed, so "done 1,<tab>" works.
        """
        prefix = word.rsplit(",", 1)[-1]
        for task in self.task_source()[:200]:  # cap for responsiveness
            if task.id and task.id.startswith(prefix):
                title = (task.title or "").strip()
                display_title = title if len(title) <= 40 else title[:37] + "..."
                yield Completion(
                    task.id,
                    start_position=-len(prefix),
                    display=task.id,
                    display_meta=f"{display_title} [{task.status}]",
                )

    @staticmethod
    def _get_command_description(command: str) -> str:
        """Get description for a command (shown in autocomplete menu)."""
        descriptions = {
            "add": "Create a new task",
            "sub": "Add a subtask",
            "ls": "List tasks",
            "show": "View full task details",
            "edit": "Update task fields",
            "done": "Mark task(s) completed",
            "mv": "Move task to a board column",
            "rm": "Delete task(s)",
            "day": "Day view with overdue list",
            "today": "Today's tasks",
            "week": "Week view",
            "month": "Month calendar",
            "year": "Year statistics",
            "board": "Kanban board",
            "expand": "Show subtasks on the board",
            "collapse": "Hide subtasks on the board",
            "overdue": "Overdue tasks",
            "dash": "Dashboard and insights",
            "export": "Export everything to JSON",
            "categories": "List categories",
            "stats": "Grouped stats from the API",
            "note": "Notes",
            "remind": "Reminders",
            "filter": "Set or clear the current filter",
            "search": "Filter by text",
            "reload": "Reload tasks from the API",
            "help": "Show available commands",
            "clear": "Clear the screen",
            "exit": "Exit REPL",
            "quit": "Exit REPL",
        }
        return descriptions.get(command, "")


def create_completer(task_source: Optional[Callable[[], List[Task]]] = None) -> TodoProCompleter:
    """
    Create and return a TodoProCompleter instance.

    Args:
        task_source: Callable returning the tasks to offer as ids

    Usage:
        completer = create_completer(repl_context.loaded_tasks)
        session = PromptSession(completer=completer)
    """
    return TodoProCompleter(task_source)
