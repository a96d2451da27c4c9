"""
FILE: todopro/repl/main.py
PURPOSE: Interactive REPL for task management with prompt-toolkit
EXPORTS:
  - main() - Entry point for REPL mode
  - run_repl() - Main REPL loop
  - execute_command(result) -> bool
  - REPLContext, repl_context
DEPENDENCIES:
  - prompt_toolkit (REPL interface, history, completion)
  - rich (formatted output)
  - todopro.core.store (session task store)
  - todopro.repl.parser (command parsing)
  - todopro.repl.completer (autocomplete)
NOTES:
  - The task store is built on first use and kept for the session
  - The current filter and board expansion persist between commands
  - Bottom toolbar shows column counts and rotating tips
  - Right prompt shows how many tasks match the current filter
  - Ctrl+D or "exit"/"quit" to exit
"""

import logging
import sys
from dataclasses import dataclass, field
from typing import List, Optional, Set

# Fix Windows console encoding for Unicode characters
# Only wrap if not already wrapped to prevent issues
if sys.platform == "win32":
    import io
    if not isinstance(sys.stdout, io.TextIOWrapper) or sys.stdout.encoding != 'utf-8':
        try:
            sys.stdout = io.TextIOWrapper(sys.stdout.buffer, encoding='utf-8')
        except (AttributeError, ValueError):
            pass  # Already wrapped or unavailable

from prompt_toolkit import PromptSession
from prompt_toolkit.formatted_text import HTML
from prompt_toolkit.history import InMemoryHistory
from rich.console import Console

from ..config import get_settings
from ..core.bucketing import overdue_tasks
from ..core.constants import STATUS_COMPLETED, STATUS_IN_PROGRESS, STATUS_PENDING
from ..core.filters import TaskFilter, filter_tasks
from ..core.gateway import build_gateway
from ..core.local_store import NoteCollection, ReminderCollection
from ..core.models import Task
from ..core.store import TaskStore
from .completer import create_completer
from .parser import ParseResult, parse_command

logger = logging.getLogger(__name__)

# Rich console for formatted output
console = Console()


# --- REPL Context (Persistent State) ---


@dataclass
class REPLContext:
    """
    Persistent context for the REPL session.

    Attributes:
        store: Session task store (built lazily on first use)
        criteria: Current filter applied by ls and the calendar views
        expanded: Parent task ids whose subtasks are shown on the board
        notes, reminders: JSON-file collections (built lazily)
    """
    store: Optional[TaskStore] = None
    criteria: TaskFilter = field(default_factory=TaskFilter)
    expanded: Set[str] = field(default_factory=set)
    notes: Optional[NoteCollection] = None
    reminders: Optional[ReminderCollection] = None

    def get_store(self) -> TaskStore:
        """Load the task store once per session (API, else seed tasks)."""
        if self.store is None:
            settings = get_settings()
            self.store = TaskStore(build_gateway(settings))
            self.store.load()
            if self.store.source == "local" and not settings.offline:
                console.print("[yellow]API unavailable, working with local data for this session[/yellow]")
        return self.store

    def close(self) -> None:
        """Close the session store's connections; the next get_store() reloads."""
        if self.store is not None:
            self.store.close()
            self.store = None

    def get_notes(self) -> NoteCollection:
        if self.notes is None:
            self.notes = NoteCollection(get_settings().notes_path)
            self.notes.seed_if_empty()
        return self.notes

    def get_reminders(self) -> ReminderCollection:
        if self.reminders is None:
            self.reminders = ReminderCollection(get_settings().reminders_path)
            self.reminders.seed_if_empty()
        return self.reminders

    def loaded_tasks(self) -> List[Task]:
        """Tasks already in memory; never triggers a load (used by the completer)."""
        return self.store.list() if self.store is not None else []

    def get_prompt(self) -> str:
        """
        Generate prompt string based on current filter.

        Returns:
            Prompt like "todopro> " or "todopro:[priority=high]> "
        """
        if self.criteria.is_active:
            return f"todopro:[{self.criteria.describe()}]> "
        return "todopro> "

    def filter_tasks(self, tasks: List[Task]) -> List[Task]:
        """Apply the current filter to a task list."""
        return filter_tasks(tasks, self.criteria)

    def criteria_with(self, result: ParseResult) -> TaskFilter:
        """
        The current filter with per-command flag overrides applied.

        Raises:
            ValidationError: If a flag names an unknown priority or status
        """
        return TaskFilter(
            search_text=result.flag("search", self.criteria.search_text),
            priority=result.flag("priority", self.criteria.priority),
            status=result.flag("status", self.criteria.status),
            category=result.flag("category", self.criteria.category),
        )


# Global REPL context (persists during session, resets on restart)
repl_context = REPLContext()


def format_prompt() -> HTML:
    """
    Create formatted prompt text with the active filter.

    Returns:
        HTML prompt: "todopro> " or "todopro:[<filter>]> " with the filter in cyan
    """
    if repl_context.criteria.is_active:
        return HTML("<b>todopro:[<cyan>{}</cyan>]&gt; </b>").format(repl_context.criteria.describe())
    return HTML("<b>todopro&gt; </b>")


# Rotating tips for bottom toolbar
_TOOLBAR_TIPS = [
    "Tip: Comma-separate IDs for bulk operations (e.g., 'done 1,2,3')",
    "Tip: 'filter -p high' narrows ls and the calendar views",
    "Tip: 'expand all' shows every subtask on the board",
    "Tip: 'dash' shows trends, deadlines and insights",
    "Tip: Press Ctrl+D or type 'exit' to quit",
    "Tip: Type 'help' to see all available commands",
]
_tip_index = 0


def get_bottom_toolbar() -> HTML:
    """
    Create bottom toolbar showing column counts and rotating tips.

    Returns:
        HTML formatted toolbar with stats and tips
    """
    tasks = repl_context.loaded_tasks()
    tip = _TOOLBAR_TIPS[_tip_index % len(_TOOLBAR_TIPS)]
    if not tasks:
        return HTML("<style bg='#444444' fg='#ffffff'> todopro | {} </style>").format(tip)

    pending = sum(1 for t in tasks if t.status == STATUS_PENDING)
    in_progress = sum(1 for t in tasks if t.status == STATUS_IN_PROGRESS)
    completed = sum(1 for t in tasks if t.status == STATUS_COMPLETED)
    late = len(overdue_tasks(tasks, repl_context.store.now()))

    stats = f"{pending} to do | {in_progress} in progress | {completed} done | {late} overdue"
    return HTML("<style bg='#444444' fg='#ffffff'> {} | {} </style>").format(stats, tip)


def get_right_prompt() -> HTML:
    """
    Create right prompt showing task count under the current filter.

    Returns:
        HTML formatted right prompt with filtered task count
    """
    tasks = repl_context.loaded_tasks()
    if repl_context.criteria.is_active:
        count = len(repl_context.filter_tasks(tasks))
        return HTML("<style fg='#888888'>[{} in view]</style>").format(count)
    return HTML("<style fg='#888888'>[{} total]</style>").format(len(tasks))


# Import command handlers from command modules
from .commands import (  # noqa: E402
    # Task handlers
    handle_add_command,
    handle_sub_command,
    handle_ls_command,
    handle_show_command,
    handle_edit_command,
    handle_done_command,
    handle_mv_command,
    handle_rm_command,
    # View handlers
    handle_day_command,
    handle_week_command,
    handle_month_command,
    handle_year_command,
    handle_board_command,
    handle_expand_command,
    handle_collapse_command,
    handle_overdue_command,
    handle_dash_command,
    handle_export_command,
    handle_categories_command,
    handle_stats_command,
    # Note and reminder handlers
    handle_note_command,
    handle_remind_command,
    # System handlers
    handle_help_command,
    handle_clear_command,
    handle_filter_command,
    handle_search_command,
    handle_reload_command,
)


def execute_command(result: ParseResult) -> bool:
    """
    Execute a parsed command.

    Args:
        result: Parsed command from parser

    Returns:
        True to continue REPL loop, False to exit
    """
    command = result.command.lower()

    # Exit commands
    if command in ("exit", "quit"):
        console.print("[dim]Goodbye![/dim]")
        return False

    # Empty command (just Enter pressed)
    if not command:
        return True

    handlers = {
        "add": handle_add_command,
        "sub": handle_sub_command,
        "ls": handle_ls_command,
        "show": handle_show_command,
        "view": handle_show_command,
        "edit": handle_edit_command,
        "done": handle_done_command,
        "mv": handle_mv_command,
        "rm": handle_rm_command,
        "day": handle_day_command,
        "today": handle_day_command,
        "week": handle_week_command,
        "month": handle_month_command,
        "year": handle_year_command,
        "board": handle_board_command,
        "expand": handle_expand_command,
        "collapse": handle_collapse_command,
        "overdue": handle_overdue_command,
        "dash": handle_dash_command,
        "export": handle_export_command,
        "categories": handle_categories_command,
        "stats": handle_stats_command,
        "note": handle_note_command,
        "remind": handle_remind_command,
        "filter": handle_filter_command,
        "search": handle_search_command,
        "reload": handle_reload_command,
        "help": handle_help_command,
        "clear": handle_clear_command,
    }

    handler = handlers.get(command)
    if handler:
        handler(result)
        # Add whitespace after command output for readability
        console.print()
    else:
        console.print(f"[red]Unknown command:[/red] {command}")
        console.print("[dim]Type 'help' for available commands[/dim]")
        console.print()

    return True


def run_repl() -> None:
    """
    Main REPL loop.

    Sets up prompt_toolkit session with:
    - Command history (in-memory, not persisted)
    - Autocomplete (commands, flags, values, task ids)
    - Filter-aware prompt, toolbar and right prompt

    Exits on:
    - Ctrl+D (EOFError)
    - "exit" or "quit" commands
    """
    global _tip_index

    # In piped/test environments, skip prompt_toolkit entirely
    has_tty = sys.stdin.isatty() and sys.stdout.isatty()

    session = None
    use_simple_input = not has_tty

    if has_tty:
        try:
            session = PromptSession(
                history=InMemoryHistory(),
                completer=create_completer(repl_context.loaded_tasks),
                complete_while_typing=True,
                bottom_toolbar=get_bottom_toolbar,
                rprompt=get_right_prompt,
            )
        except Exception as e:
            console.print(f"[yellow]Warning:[/yellow] Running in simple input mode: {e}")
            use_simple_input = True

    console.print("[bold cyan]todopro REPL[/bold cyan] - Type 'help' for commands, 'exit' to quit")
    if use_simple_input:
        console.print("[dim](Running in simple mode - no autocomplete)[/dim]")
    console.print()

    while True:
        try:
            if use_simple_input or session is None:
                user_input = input(repl_context.get_prompt())
            else:
                try:
                    user_input = session.prompt(format_prompt())
                except (EOFError, KeyboardInterrupt):
                    raise
                except Exception as e:
                    console.print(f"[yellow]Switching to simple input mode: {e}[/yellow]")
                    use_simple_input = True
                    user_input = input(repl_context.get_prompt())

            if not execute_command(parse_command(user_input)):
                break

            _tip_index += 1

        except KeyboardInterrupt:
            console.print("[dim]^C (Press Ctrl+D or type 'exit' to quit)[/dim]")
            continue
        except EOFError:
            console.print()
            console.print("[dim]Goodbye![/dim]")
            break
        except Exception as e:
            # Unexpected error - show but don't crash
            logger.debug("Unhandled error in REPL command", exc_info=True)
            console.print(f"[red]Unexpected error:[/red] {e}")


def main() -> None:
    """
    Entry point for REPL mode.

    Called when user runs: todopro repl (or todopro with no command)
    """
    try:
        run_repl()
    except Exception as e:
        console.print(f"[red]Fatal error:[/red] {e}")
        sys.exit(1)
    finally:
        repl_context.close()


if __name__ == "__main__":
    main()
