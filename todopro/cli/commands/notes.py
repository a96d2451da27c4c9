"""
FILE: todopro/cli/commands/notes.py
PURPOSE: Note and reminder commands (note add|ls|edit|pin|rm, remind add|ls|done|rm)
"""

from typing import Any, Dict, List, Optional

import typer
from rich.markup import escape

from ..main import console, error_console, fail, note_app, open_notes, open_reminders, remind_app
from ...core.exceptions import TodoProError
from ...core.local_store import filter_reminders, search_notes
from ...formatting import note_table, parse_ids, print_json, reminder_table
from .tasks import normalize_due


def _delete_many(collection, ids: List[str], kind: str) -> None:
    """Delete by comma-separated ids; unknown ids are reported, the rest still go."""
    deleted = 0
    errors = []
    for entity_id in ids:
        try:
            item = collection.get(entity_id)
        except TodoProError as e:
            errors.append(str(e))
            continue
        collection.delete(item.id)
        deleted += 1
        console.print(f"[red]✗[/red] Deleted {kind} {item.id}: {escape(item.title)}")

    for error in errors:
        error_console.print(f"[red]Error:[/red] {error}")
    if errors and not deleted:
        raise typer.Exit(1)


# --- Notes ---


@note_app.command("add")
def note_add(
    title: str = typer.Argument(..., help="Note title"),
    content: str = typer.Option("", "--content", "-m", help="Note text"),
    color: Optional[str] = typer.Option(None, "--color", help="Hex color, e.g. #fff4e6"),
    labels: Optional[str] = typer.Option(None, "--labels", "-l", help="Comma-separated labels"),
    pinned: bool = typer.Option(False, "--pin", help="Pin the note"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Create a note.

    Example:
        todopro note add "Ideas" -m "Weather app" -l ideas,dev
    """
    try:
        note = open_notes().create(
            {
                "title": title,
                "content": content,
                "color": color,
                "labels": parse_ids(labels) if labels else [],
                "isPinned": pinned,
            }
        )
        if json_output:
            print_json(console, note.to_dict())
        else:
            console.print(f"[green]✓[/green] Created note {note.id}: {escape(note.title)}")
    except TodoProError as e:
        fail(e)


@note_app.command("ls")
def note_ls(
    label: Optional[str] = typer.Option(None, "--label", "-l", help="Only notes with this label"),
    search: Optional[str] = typer.Option(None, "--search", "-q", help="Match title, content or labels"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    List notes, pinned first.

    Example:
        todopro note ls
        todopro note ls --label work
        todopro note ls --search milk
    """
    notes = search_notes(open_notes().load_all(), search)
    if label:
        notes = [n for n in notes if label in n.labels]

    if json_output:
        print_json(console, [n.to_dict() for n in notes])
    elif not notes:
        console.print("[dim]No notes found[/dim]")
    else:
        console.print(note_table(notes))


@note_app.command("edit")
def note_edit(
    note_id: str = typer.Argument(..., help="Note ID"),
    title: Optional[str] = typer.Option(None, "--title", "-t", help="New title"),
    content: Optional[str] = typer.Option(None, "--content", "-m", help="New text"),
    color: Optional[str] = typer.Option(None, "--color", help="New color"),
    labels: Optional[str] = typer.Option(None, "--labels", "-l", help="Replace labels (comma-separated)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Update a note.

    Example:
        todopro note edit 2 --content "Milk, eggs"
    """
    patch: Dict[str, Any] = {}
    if title is not None:
        patch["title"] = title
    if content is not None:
        patch["content"] = content
    if color is not None:
        patch["color"] = color
    if labels is not None:
        patch["labels"] = parse_ids(labels)

    if not patch:
        error_console.print("[red]Error:[/red] Nothing to update (pass --title, --content, ...)")
        raise typer.Exit(1)

    try:
        note = open_notes().update(note_id, patch)
        if json_output:
            print_json(console, note.to_dict())
        else:
            console.print(f"[blue]✎[/blue] Updated note {note.id}: {escape(note.title)}")
    except TodoProError as e:
        fail(e)


@note_app.command("pin")
def note_pin(
    note_id: str = typer.Argument(..., help="Note ID"),
):
    """
    Toggle a note's pinned state.

    Example:
        todopro note pin 2
    """
    try:
        notes = open_notes()
        note = notes.get(note_id)
        note = notes.update(note.id, {"isPinned": not note.is_pinned})
        state = "Pinned" if note.is_pinned else "Unpinned"
        console.print(f"[green]✓[/green] {state} note {note.id}: {escape(note.title)}")
    except TodoProError as e:
        fail(e)


@note_app.command("rm")
def note_rm(
    note_ids: str = typer.Argument(..., help="Note ID(s) to delete (comma-separated)"),
):
    """
    Delete one or more notes.

    Example:
        todopro note rm 2,3
    """
    _delete_many(open_notes(), parse_ids(note_ids), "note")


# --- Reminders ---


@remind_app.command("add")
def remind_add(
    title: str = typer.Argument(..., help="Reminder title"),
    date: Optional[str] = typer.Option(None, "--date", help="Date (YYYY-MM-DD, default today)"),
    time: str = typer.Option("", "--time", help="Time (HH:MM)"),
    description: Optional[str] = typer.Option(None, "--description", "-d", help="Description"),
    priority: str = typer.Option("medium", "--priority", "-p", help="low, medium or high"),
    category: str = typer.Option("General", "--category", "-c", help="Category"),
    repeat: Optional[str] = typer.Option(None, "--repeat", help="daily, weekly, monthly or yearly"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Create a reminder.

    Example:
        todopro remind add "Call mom" --date 2024-03-01 --time 19:00 --repeat weekly
    """
    try:
        reminder = open_reminders().create(
            {
                "title": title,
                "reminder_date": normalize_due(date) if date else None,
                "reminder_time": time,
                "description": description,
                "priority": priority,
                "category": category,
                "is_recurring": bool(repeat),
                "recurrence_type": repeat,
            }
        )
        if json_output:
            print_json(console, reminder.to_dict())
        else:
            console.print(
                f"[green]✓[/green] Created reminder {reminder.id}: {escape(reminder.title)} "
                f"[dim]({reminder.reminder_date} {reminder.reminder_time})[/dim]"
            )
    except TodoProError as e:
        fail(e)


@remind_app.command("ls")
def remind_ls(
    show_all: bool = typer.Option(False, "--all", "-a", help="Include completed reminders"),
    when: Optional[str] = typer.Option(
        None, "--filter", "-f", help="all, upcoming, today, overdue or completed"
    ),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    List reminders (open ones unless --all or --filter).

    Example:
        todopro remind ls
        todopro remind ls --filter overdue
    """
    collection = open_reminders()
    reminders = collection.load_all()
    if when:
        try:
            reminders = filter_reminders(reminders, when.lower(), collection.clock())
        except TodoProError as e:
            fail(e)
    elif not show_all:
        reminders = [r for r in reminders if not r.is_completed]

    if json_output:
        print_json(console, [r.to_dict() for r in reminders])
    elif not reminders:
        console.print("[dim]No reminders[/dim]")
    else:
        console.print(reminder_table(reminders))


@remind_app.command("done")
def remind_done(
    reminder_ids: str = typer.Argument(..., help="Reminder ID(s) (comma-separated)"),
):
    """
    Mark reminders as completed.

    Example:
        todopro remind done 1,3
    """
    reminders = open_reminders()
    errors = []
    completed = 0
    for reminder_id in parse_ids(reminder_ids):
        try:
            reminder = reminders.update(reminder_id, {"is_completed": True})
        except TodoProError as e:
            errors.append(str(e))
            continue
        completed += 1
        console.print(f"[green]✓[/green] Completed reminder: {escape(reminder.title)}")

    for error in errors:
        error_console.print(f"[red]Error:[/red] {error}")
    if errors and not completed:
        raise typer.Exit(1)


@remind_app.command("rm")
def remind_rm(
    reminder_ids: str = typer.Argument(..., help="Reminder ID(s) to delete (comma-separated)"),
):
    """
    Delete one or more reminders.

    Example:
        todopro remind rm 2
    """
    _delete_many(open_reminders(), parse_ids(reminder_ids), "reminder")
