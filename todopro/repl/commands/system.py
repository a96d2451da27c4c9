"""
FILE: todopro/repl/commands/system.py
PURPOSE: System command handlers for REPL (help, clear, filter, search, reload)
"""

from rich.markup import escape

from ..main import console, repl_context
from ..parser import ParseResult
from ...core.exceptions import TodoProError
from ...core.filters import TaskFilter


def handle_help_command(result: ParseResult) -> None:
    """Handle 'help' command - show available commands."""
    sections = [
        ("Tasks", [
            ('add <title> \\[-p high] \\[-c Work] \\[--due 2024-03-01]', "Create a task"),
            ('sub <parent_id> \\["title"]', "Add a subtask"),
            ("ls \\[-q text] \\[-p priority] \\[-s status] \\[-c category]", "List tasks"),
            ("show <id>", "Full task details"),
            ('edit <id> --title "New" \\[-s in_progress] \\[--due none]', "Update fields"),
            ("done <id>\\[,<id>...]", "Mark completed"),
            ("mv <id> <pending|in_progress|completed>", "Move to a board column"),
            ("rm <id>\\[,<id>...] \\[--yes]", "Delete (subtasks are kept)"),
        ]),
        ("Views", [
            ("day \\[YYYY-MM-DD] / today", "Day view with overdue list"),
            ("week \\[YYYY-MM-DD]", "Sunday-to-Saturday week"),
            ("month \\[YYYY-MM]", "Month calendar"),
            ("year \\[YYYY]", "Year statistics"),
            ("board", "Kanban board"),
            ("expand <id>|all / collapse <id>|all", "Show or hide subtasks on the board"),
            ("overdue", "Overdue tasks"),
            ("dash", "Dashboard and insights"),
        ]),
        ("Data", [
            ("export \\[-o DIR]", "Export tasks, reminders and notes"),
            ("categories", "List categories"),
            ("stats", "Grouped stats from the API"),
            ("note \\[add|ls|edit|pin|rm]", "Notes"),
            ("remind \\[add|ls|done|rm]", "Reminders"),
        ]),
        ("Session", [
            ("filter \\[-q text] \\[-p priority] \\[-s status] \\[-c category]", "Set the filter"),
            ("filter clear", "Clear the filter"),
            ("search <text>", "Filter by text"),
            ("reload", "Reload tasks from the API"),
            ("clear", "Clear the screen"),
            ("exit / quit / Ctrl+D", "Leave the REPL"),
        ]),
    ]

    for title, rows in sections:
        console.print(f"[bold]{title}[/bold]")
        for usage, description in rows:
            console.print(f"  [green]{usage}[/green]")
            console.print(f"      [dim]{description}[/dim]")
        console.print()
    console.print("[dim]Most commands accept --json[/dim]")


def handle_clear_command(result: ParseResult) -> None:
    """Handle 'clear' command - clear the screen."""
    console.clear()


def _show_filter() -> None:
    if repl_context.criteria.is_active:
        console.print(f"[cyan]Filter:[/cyan] {escape(repl_context.criteria.describe())}")
    else:
        console.print("[dim]No filter set[/dim]")


def handle_filter_command(result: ParseResult) -> None:
    """
    Handle 'filter' command - set, show or clear the session filter.

    Usage:
        filter                     (show)
        filter -p high -s pending  (set; unspecified criteria are kept)
        filter clear               (reset)
    """
    if result.args and result.args[0].lower() in ("clear", "reset", "none", "all"):
        repl_context.criteria = TaskFilter()
        console.print("[green]✓[/green] Filter cleared")
        return

    if not result.flags:
        _show_filter()
        return

    try:
        repl_context.criteria = repl_context.criteria_with(result)
    except TodoProError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        return
    _show_filter()


def handle_search_command(result: ParseResult) -> None:
    """
    Handle 'search' command - set (or clear) the text filter.

    Usage:
        search docs
        search          (clear)
    """
    current = repl_context.criteria
    repl_context.criteria = TaskFilter(
        search_text=" ".join(result.args) or None,
        priority=current.priority,
        status=current.status,
        category=current.category,
    )
    _show_filter()


def handle_reload_command(result: ParseResult) -> None:
    """Handle 'reload' command - refetch tasks (falls back to seed tasks offline)."""
    store = repl_context.get_store()
    store.clear_error()
    tasks = store.load()
    console.print(f"[green]✓[/green] Loaded {len(tasks)} task(s) from {store.source}")
    if store.error:
        console.print(f"[yellow]{escape(store.error)}[/yellow]")
