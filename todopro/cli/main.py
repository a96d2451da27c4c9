"""
FILE: todopro/cli/main.py
PURPOSE: Typer-based CLI for one-shot task management commands
EXPORTS:
  - app (Typer application)
  - note_app, remind_app (sub-command groups)
  - console, error_console (rich consoles)
  - open_store(), open_notes(), open_reminders(), build_filter(), fail()
  - main() (entry point)
DEPENDENCIES:
  - typer (CLI framework)
  - rich (formatted output, RichHandler logging)
  - todopro.config (settings)
  - todopro.core (store, gateway, local collections)
NOTES:
  - Every invocation loads the task store once (API, else seed tasks) and
    closes it when the command finishes
  - List-producing commands support --json
  - Error messages go to stderr
  - Exit codes: 0=success, 1=error
  - Logging goes to stderr through RichHandler; level from TODOPRO_LOG_LEVEL
    or --verbose
"""

import logging
import sys
from typing import List, NoReturn, Optional

# Fix Windows console encoding for Unicode characters
if sys.platform == "win32":
    import io
    sys.stdout = io.TextIOWrapper(sys.stdout.buffer, encoding='utf-8')
    sys.stderr = io.TextIOWrapper(sys.stderr.buffer, encoding='utf-8')

import typer
from rich.console import Console
from rich.logging import RichHandler

from .. import __version__
from ..config import get_settings
from ..core.exceptions import TodoProError
from ..core.filters import TaskFilter
from ..core.gateway import build_gateway
from ..core.local_store import NoteCollection, ReminderCollection
from ..core.store import TaskStore

# Typer app setup
app = typer.Typer(
    name="todopro",
    help="Task manager with calendar views, a kanban board and a dashboard",
    add_completion=False,
)

# Note sub-command group
note_app = typer.Typer(
    name="note",
    help="Note commands",
)
app.add_typer(note_app, name="note")

# Reminder sub-command group
remind_app = typer.Typer(
    name="remind",
    help="Reminder commands",
)
app.add_typer(remind_app, name="remind")

# Rich console for formatted output
console = Console()
error_console = Console(stderr=True)


def setup_logging(level: str) -> None:
    """Route log records to stderr through rich."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=error_console, show_path=False, rich_tracebacks=False)],
        force=True,
    )


def fail(error: Exception) -> NoReturn:
    """Print an error to stderr and exit 1."""
    error_console.print(f"[red]Error:[/red] {error}")
    raise typer.Exit(1)


# Stores opened by this invocation; closed when the command finishes
_open_stores: List[TaskStore] = []


def close_stores() -> None:
    while _open_stores:
        _open_stores.pop().close()


def open_store() -> TaskStore:
    """Build the task store for this invocation and load it."""
    store = TaskStore(build_gateway(get_settings()))
    _open_stores.append(store)
    store.load()
    if store.source == "local" and not get_settings().offline:
        error_console.print("[yellow]API unavailable, showing local data[/yellow]")
    return store


def open_notes() -> NoteCollection:
    notes = NoteCollection(get_settings().notes_path)
    notes.seed_if_empty()
    return notes


def open_reminders() -> ReminderCollection:
    reminders = ReminderCollection(get_settings().reminders_path)
    reminders.seed_if_empty()
    return reminders


def build_filter(
    search: Optional[str] = None,
    priority: str = "all",
    status: str = "all",
    category: Optional[str] = None,
) -> TaskFilter:
    """TaskFilter from CLI options; exits with an error on bad values."""
    try:
        return TaskFilter(search_text=search, priority=priority, status=status, category=category)
    except TodoProError as e:
        fail(e)


@app.callback(invoke_without_command=True)
def default_command(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
):
    """
    Default callback - configures logging and launches the REPL when no
    command is specified.
    """
    setup_logging("DEBUG" if verbose else get_settings().log_level)
    ctx.call_on_close(close_stores)

    if ctx.invoked_subcommand is None:
        # No command specified, launch REPL
        from ..repl import main as repl_main
        try:
            repl_main()
        except Exception as e:
            error_console.print(f"[red]Error starting REPL:[/red] {e}")
            raise typer.Exit(1)


# Import command modules to register commands with app
# Commands are decorated with @app.command() in their modules
from .commands import (  # noqa: E402
    # System commands
    version,
    help,
    repl,
    # Task commands
    add,
    sub,
    ls,
    show,
    edit,
    done,
    mv,
    rm,
    # View commands
    day,
    week,
    month,
    year,
    board,
    overdue,
    # Dashboard commands
    dash,
    export,
    categories,
    stats,
    # Notes and reminders
    note_add,
    note_ls,
    note_edit,
    note_pin,
    note_rm,
    remind_add,
    remind_ls,
    remind_done,
    remind_rm,
)


def main():
    """Main entry point for CLI."""
    app()


if __name__ == "__main__":
    main()
