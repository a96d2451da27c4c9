"""
FILE: todopro/repl/display.py
PURPOSE: Display functions for tasks and tables
EXPORTS:
  - display_task() - Display a single task
  - display_tasks_table() - Display tasks in a formatted table
  - print_errors() - Print collected bulk-operation errors
DEPENDENCIES:
  - rich (formatted output)
  - todopro.formatting (TaskFormatter)
NOTES:
  - Accepts the console as a parameter to avoid importing repl.main
"""

from datetime import datetime
from typing import Iterable, List, Optional

from rich.console import Console
from rich.markup import escape

from ..core.filters import TaskFilter
from ..core.models import Task
from ..formatting import STATUS_STYLES, TaskFormatter, styled

# Create console instance here to avoid circular import
console = Console()


def display_task(task: Task, message: str = "", console_instance: Optional[Console] = None) -> None:
    """
    Display a single task with optional message.

    Args:
        task: Task object to display
        message: Optional message to show before task (e.g., "Created:")
        console_instance: Optional Rich console instance (defaults to module console)
    """
    if console_instance is None:
        console_instance = console

    if message:
        console_instance.print(f"[green]{message}[/green]")

    console_instance.print(
        f"  [cyan]{task.id}[/cyan]: {escape(task.title)} [dim]([/dim]{styled(task.status, STATUS_STYLES)}[dim])[/dim]"
    )


def display_tasks_table(
    tasks: List[Task],
    criteria: Optional[TaskFilter] = None,
    now: Optional[datetime] = None,
    console_instance: Optional[Console] = None,
) -> None:
    """
    Display tasks in a formatted table.

    Args:
        tasks: Tasks to display (already filtered)
        criteria: Active filter, shown in the table title
        now: Reference time for overdue highlighting
        console_instance: Optional Rich console instance (defaults to module console)
    """
    if console_instance is None:
        console_instance = console

    if not tasks:
        console_instance.print("[dim]No tasks found[/dim]")
        return

    title = "Tasks"
    if criteria is not None and criteria.is_active:
        title += f" ({escape(criteria.describe())})"
    console_instance.print(TaskFormatter.create_table(tasks, title=title, now=now))
    console_instance.print(f"[dim]Total: {len(tasks)} task(s)[/dim]")


def print_errors(errors: Iterable[str], console_instance: Optional[Console] = None) -> None:
    if console_instance is None:
        console_instance = console
    for error in errors:
        console_instance.print(f"[red]Error:[/red] {escape(error)}")
