"""
FILE: todopro/repl/commands/notes.py
PURPOSE: Note and reminder handlers for REPL (note add|ls|edit|pin|rm, remind add|ls|done|rm)
"""

from typing import Any, Dict

from rich.markup import escape

from ..display import print_errors
from ..main import console, repl_context
from ..parser import ParseResult
from ...core.exceptions import TodoProError
from ...core.local_store import filter_reminders, search_notes
from ...formatting import note_table, parse_ids, print_json, reminder_table
from .tasks import normalize_due


def _sub_result(result: ParseResult) -> ParseResult:
    """Drop the subcommand so handlers see their own positional args."""
    return ParseResult(
        command=result.args[0].lower(),
        args=result.args[1:],
        flags=result.flags,
        raw_input=result.raw_input,
    )


def _delete_many(collection, result: ParseResult, kind: str) -> None:
    if not result.args:
        console.print(f"[red]Error:[/red] {kind.capitalize()} ID required")
        return

    errors = []
    for entity_id in parse_ids(",".join(result.args)):
        try:
            item = collection.get(entity_id)
        except TodoProError as e:
            errors.append(str(e))
            continue
        collection.delete(item.id)
        console.print(f"[red]✗[/red] Deleted {kind} {item.id}: {escape(item.title)}")
    print_errors(errors, console)


# --- Notes ---


def handle_note_add(result: ParseResult) -> None:
    if not result.args:
        console.print("[red]Error:[/red] Note title required")
        console.print('[dim]Usage: note add <title> \\[-m "text"] \\[-l label,label] \\[--pin][/dim]')
        return

    labels = result.flag("labels")
    try:
        note = repl_context.get_notes().create(
            {
                "title": " ".join(result.args),
                "content": result.flag("content", ""),
                "color": result.flag("color"),
                "labels": parse_ids(labels) if labels else [],
                "isPinned": bool(result.flags.get("pin")),
            }
        )
        console.print(f"[green]✓[/green] Created note {note.id}: {escape(note.title)}")
    except TodoProError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")


def handle_note_ls(result: ParseResult) -> None:
    notes = search_notes(repl_context.get_notes().load_all(), result.flag("search"))
    label = result.flag("labels") or (result.args[0] if result.args else None)
    if label:
        notes = [n for n in notes if label in n.labels]

    if result.flags.get("json"):
        print_json(console, [n.to_dict() for n in notes])
    elif not notes:
        console.print("[dim]No notes found[/dim]")
    else:
        console.print(note_table(notes))


def handle_note_edit(result: ParseResult) -> None:
    if not result.args:
        console.print("[red]Error:[/red] Note ID required")
        console.print('[dim]Usage: note edit <id> \\[--title "New"] \\[-m "text"] \\[--color #hex] \\[-l labels][/dim]')
        return

    patch: Dict[str, Any] = {}
    for flag, key in (("title", "title"), ("content", "content"), ("color", "color")):
        value = result.flag(flag)
        if value is not None:
            patch[key] = value
    if result.flag("labels") is not None:
        patch["labels"] = parse_ids(result.flag("labels"))

    if not patch:
        console.print("[red]Error:[/red] Nothing to update (pass --title, --content, ...)")
        return

    try:
        note = repl_context.get_notes().update(result.args[0], patch)
        console.print(f"[blue]✎[/blue] Updated note {note.id}: {escape(note.title)}")
    except TodoProError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")


def handle_note_pin(result: ParseResult) -> None:
    if not result.args:
        console.print("[red]Error:[/red] Note ID required")
        return

    notes = repl_context.get_notes()
    try:
        note = notes.get(result.args[0])
        note = notes.update(note.id, {"isPinned": not note.is_pinned})
    except TodoProError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        return
    state = "Pinned" if note.is_pinned else "Unpinned"
    console.print(f"[green]✓[/green] {state} note {note.id}: {escape(note.title)}")


def handle_note_rm(result: ParseResult) -> None:
    _delete_many(repl_context.get_notes(), result, "note")


NOTE_HANDLERS = {
    "add": handle_note_add,
    "ls": handle_note_ls,
    "edit": handle_note_edit,
    "pin": handle_note_pin,
    "rm": handle_note_rm,
}


def handle_note_command(result: ParseResult) -> None:
    """
    Handle 'note' command - dispatch to note subcommands.

    Usage:
        note ls -q milk
        note add "Ideas" -m "Weather app" -l ideas
        note pin 2
    """
    if not result.args:
        handle_note_ls(result)
        return

    handler = NOTE_HANDLERS.get(result.args[0].lower())
    if handler is None:
        console.print(f"[red]Unknown note command:[/red] {escape(result.args[0])}")
        console.print(f"[dim]Available: {', '.join(NOTE_HANDLERS)}[/dim]")
        return
    handler(_sub_result(result))


# --- Reminders ---


def handle_remind_add(result: ParseResult) -> None:
    if not result.args:
        console.print("[red]Error:[/red] Reminder title required")
        console.print("[dim]Usage: remind add <title> \\[--date YYYY-MM-DD] \\[--time HH:MM] \\[--repeat weekly][/dim]")
        return

    repeat = result.flag("repeat")
    try:
        date = result.flag("date")
        reminder = repl_context.get_reminders().create(
            {
                "title": " ".join(result.args),
                "reminder_date": normalize_due(date) if date else None,
                "reminder_time": result.flag("time", ""),
                "description": result.flag("description"),
                "priority": result.flag("priority"),
                "category": result.flag("category"),
                "is_recurring": bool(repeat),
                "recurrence_type": repeat,
            }
        )
        console.print(
            f"[green]✓[/green] Created reminder {reminder.id}: {escape(reminder.title)} "
            f"[dim]({reminder.reminder_date} {reminder.reminder_time})[/dim]"
        )
    except TodoProError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")


def handle_remind_ls(result: ParseResult) -> None:
    collection = repl_context.get_reminders()
    reminders = collection.load_all()
    when = result.flag("filter") or (result.args[0] if result.args else None)
    if when:
        try:
            reminders = filter_reminders(reminders, when.lower(), collection.clock())
        except TodoProError as e:
            console.print(f"[red]Error:[/red] {escape(str(e))}")
            return
    elif not result.flags.get("all"):
        reminders = [r for r in reminders if not r.is_completed]

    if result.flags.get("json"):
        print_json(console, [r.to_dict() for r in reminders])
    elif not reminders:
        console.print("[dim]No reminders[/dim]")
    else:
        console.print(reminder_table(reminders))


def handle_remind_done(result: ParseResult) -> None:
    if not result.args:
        console.print("[red]Error:[/red] Reminder ID required")
        return

    reminders = repl_context.get_reminders()
    errors = []
    for reminder_id in parse_ids(",".join(result.args)):
        try:
            reminder = reminders.update(reminder_id, {"is_completed": True})
        except TodoProError as e:
            errors.append(str(e))
            continue
        console.print(f"[green]✓[/green] Completed reminder: {escape(reminder.title)}")
    print_errors(errors, console)


def handle_remind_rm(result: ParseResult) -> None:
    _delete_many(repl_context.get_reminders(), result, "reminder")


REMIND_HANDLERS = {
    "add": handle_remind_add,
    "ls": handle_remind_ls,
    "done": handle_remind_done,
    "rm": handle_remind_rm,
}


def handle_remind_command(result: ParseResult) -> None:
    """
    Handle 'remind' command - dispatch to reminder subcommands.

    Usage:
        remind ls --filter overdue
        remind add "Call mom" --time 19:00 --repeat weekly
        remind done 1
    """
    if not result.args:
        handle_remind_ls(result)
        return

    handler = REMIND_HANDLERS.get(result.args[0].lower())
    if handler is None:
        console.print(f"[red]Unknown remind command:[/red] {escape(result.args[0])}")
        console.print(f"[dim]Available: {', '.join(REMIND_HANDLERS)}[/dim]")
        return
    handler(_sub_result(result))
