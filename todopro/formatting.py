"""
FILE: todopro/formatting.py
PURPOSE: Shared formatting utilities for CLI and REPL output
EXPORTS:
  - TaskFormatter: Class for formatting tasks
  - parse_ids: Parse comma-separated ids
  - dump_json / print_json: --json output helpers
  - PRIORITY_STYLES, STATUS_STYLES, STATUS_MARKERS
DEPENDENCIES:
  - rich (for table formatting)
  - json (for JSON serialization)
  - typing (type hints)
  - todopro.core.models (Task, Note, Reminder)
NOTES:
  - Centralized formatting logic for consistency
  - Used by both CLI and REPL
  - Dates go through core.dates so bad values show "Invalid date" instead of raising
"""

import json
from typing import Any, Dict, List, Optional

from rich.markup import escape
from rich.table import Table

from .core.constants import STATUS_COMPLETED, STATUS_IN_PROGRESS
from .core.dates import format_due_date, format_timestamp, is_overdue
from .core.models import Note, Reminder, Task

PRIORITY_STYLES = {
    "high": "bold red",
    "medium": "yellow",
    "low": "green",
}

STATUS_STYLES = {
    "pending": "white",
    "in_progress": "blue",
    "completed": "green",
}

STATUS_MARKERS = {
    "pending": "○",
    "in_progress": "◐",
    "completed": "✓",
}


def styled(value: str, styles: Dict[str, str]) -> str:
    """Wrap a value in its rich style tag."""
    style = styles.get(value, "white")
    return f"[{style}]{value}[/{style}]"


def dump_json(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False)


class TaskFormatter:
    """Centralized task display formatting."""

    @staticmethod
    def create_table(
        tasks: List[Task],
        title: str = "Tasks",
        show_category: bool = True,
        show_due: bool = True,
        now=None,
    ) -> Table:
        """
        Create Rich table for tasks.

        Args:
            tasks: List of tasks to display
            title: Table title
            show_category: Whether to show the category column
            show_due: Whether to show the due date column
            now: Reference time for overdue highlighting

        Returns:
            Rich Table object ready for display
        """
        table = Table(title=title, show_header=True, header_style="bold cyan")
        table.add_column("ID", style="cyan", no_wrap=True)
        table.add_column("", width=1)
        table.add_column("Title", style="white")
        table.add_column("Priority", width=8)

        if show_category:
            table.add_column("Category", style="magenta")

        if show_due:
            table.add_column("Due", no_wrap=True)

        for task in tasks:
            status_style = STATUS_STYLES.get(task.status, "white")
            marker = STATUS_MARKERS.get(task.status, "?")
            title_text = escape(task.title)
            if task.parent_id:
                title_text = f"[dim]↳[/dim] {title_text}"
            if task.status == STATUS_COMPLETED:
                title_text = f"[dim]{title_text}[/dim]"

            row = [
                task.id,
                f"[{status_style}]{marker}[/{status_style}]",
                title_text,
                styled(task.priority, PRIORITY_STYLES),
            ]

            if show_category:
                row.append(escape(task.category or "-"))

            if show_due:
                due = format_due_date(task.due_date) if task.due_date else "-"
                if is_overdue(task, now):
                    due = f"[bold red]{due}[/bold red]"
                row.append(due)

            table.add_row(*row)

        return table

    @staticmethod
    def to_raw_lines(tasks: List[Task]) -> List[str]:
        """One plain-text line per task: "<id>: [<marker>] <title>"."""
        lines = []
        for task in tasks:
            marker = "✓" if task.status == STATUS_COMPLETED else ("~" if task.status == STATUS_IN_PROGRESS else " ")
            lines.append(f"{task.id}: [{marker}] {task.title}")
        return lines

    @staticmethod
    def detail_lines(task: Task, parent: Optional[Task] = None) -> List[str]:
        """Rich-markup lines for the task detail panel."""
        lines = [
            f"[bold]{escape(task.title)}[/bold]",
            "",
            f"[cyan]ID:[/cyan] {task.id}",
            f"[cyan]Status:[/cyan] {styled(task.status, STATUS_STYLES)}",
            f"[cyan]Priority:[/cyan] {styled(task.priority, PRIORITY_STYLES)}",
            f"[cyan]Category:[/cyan] {task.category}",
            f"[cyan]Due:[/cyan] {format_due_date(task.due_date)}",
        ]
        if parent is not None:
            lines.append(f"[cyan]Parent:[/cyan] {parent.id} ({escape(parent.title)})")
        elif task.parent_id:
            lines.append(f"[cyan]Parent:[/cyan] {task.parent_id} [dim](missing)[/dim]")

        lines.extend([
            f"[cyan]Created:[/cyan] {format_timestamp(task.created_at)}",
            f"[cyan]Updated:[/cyan] {format_timestamp(task.updated_at)}",
        ])
        if task.status == STATUS_COMPLETED or task.completed_at:
            lines.append(f"[cyan]Completed:[/cyan] {format_timestamp(task.completed_at)}")

        lines.append("")
        if task.description:
            lines.append(escape(task.description))
        else:
            lines.append("[dim]No description[/dim]")
        return lines


def note_table(notes: List[Note]) -> Table:
    """Notes, pinned first, keeping stored order otherwise."""
    table = Table(title="Notes", show_header=True, header_style="bold cyan")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("", width=1)
    table.add_column("Title", style="white")
    table.add_column("Labels", style="magenta")
    table.add_column("Preview", style="dim")

    ordered = sorted(notes, key=lambda n: not n.is_pinned)
    for note in ordered:
        preview = note.content.splitlines()[0] if note.content else ""
        table.add_row(
            note.id,
            "📌" if note.is_pinned else "",
            escape(note.title),
            ", ".join(note.labels),
            escape(preview[:40]),
        )
    return table


def reminder_table(reminders: List[Reminder]) -> Table:
    table = Table(title="Reminders", show_header=True, header_style="bold cyan")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("", width=1)
    table.add_column("Title", style="white")
    table.add_column("When", no_wrap=True)
    table.add_column("Priority", width=8)
    table.add_column("Repeats", style="dim")

    for reminder in reminders:
        marker = "[green]✓[/green]" if reminder.is_completed else "○"
        when = f"{format_due_date(reminder.reminder_date)} {reminder.reminder_time}".strip()
        repeats = reminder.recurrence_type if reminder.is_recurring else "-"
        table.add_row(
            reminder.id,
            marker,
            escape(reminder.title),
            when,
            styled(reminder.priority, PRIORITY_STYLES),
            repeats or "-",
        )
    return table


def parse_ids(id_string: str) -> List[str]:
    """
    Parse comma-separated ids.

    Args:
        id_string: Comma-separated string of ids (e.g., "1,2,3")

    Returns:
        List of non-empty, stripped ids
    """
    return [part.strip() for part in id_string.split(",") if part.strip()]


def print_json(console, data: Any) -> None:
    """Print JSON without markup parsing or line wrapping so it stays machine-readable."""
    console.print(dump_json(data), markup=False, highlight=False, soft_wrap=True)
