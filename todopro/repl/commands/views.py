"""
FILE: todopro/repl/commands/views.py
PURPOSE: Calendar, board and dashboard handlers for REPL
"""

from pathlib import Path

from rich.markup import escape
from rich.table import Table

from ..display import display_tasks_table
from ..main import console, repl_context
from ..parser import ParseResult
from ...config import get_settings
from ...core.bucketing import day_view, month_view, overdue_tasks, week_view, year_view
from ...core.dates import resolve_day, resolve_month
from ...core.exceptions import TodoProError
from ...core.export import build_export, write_export
from ...core.filters import filter_tasks
from ...core.grouping import group_by_status
from ...core.insights import aggregate, burndown, summarize
from ...formatting import parse_ids, print_json
from ...rendering import (
    render_board,
    render_dashboard,
    render_day,
    render_month,
    render_week,
    render_year,
)


def _filtered(result: ParseResult):
    """(store, tasks matching the session filter plus flag overrides)."""
    store = repl_context.get_store()
    return store, filter_tasks(store.list(), repl_context.criteria_with(result))


def handle_day_command(result: ParseResult) -> None:
    """
    Handle 'day' command - one day's tasks plus everything overdue.

    Usage:
        day
        day 2024-03-01
        today
    """
    try:
        store, tasks = _filtered(result)
        now = store.now()
        reference = resolve_day(result.args[0] if result.args else result.flag("date"), now)
        view = day_view(tasks, reference, overdue_source=store.list(), now=now)
    except TodoProError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        return

    if result.flags.get("json"):
        print_json(console, view.to_dict())
    else:
        console.print(render_day(view, now=now))


def handle_week_command(result: ParseResult) -> None:
    """
    Handle 'week' command - Sunday to Saturday.

    Usage:
        week
        week 2024-03-01
    """
    try:
        store, tasks = _filtered(result)
        now = store.now()
        reference = resolve_day(result.args[0] if result.args else result.flag("date"), now)
        cells = week_view(tasks, reference, now=now)
    except TodoProError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        return

    if result.flags.get("json"):
        print_json(console, [cell.to_dict() for cell in cells])
    else:
        console.print(render_week(cells))


def handle_month_command(result: ParseResult) -> None:
    """
    Handle 'month' command - month calendar.

    Usage:
        month
        month 2024-03
    """
    try:
        store, tasks = _filtered(result)
        now = store.now()
        year_number, month_number = resolve_month(result.args[0] if result.args else None, now)
        grid = month_view(tasks, year_number, month_number, now=now)
    except TodoProError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        return

    if result.flags.get("json"):
        print_json(console, grid.to_dict())
    else:
        console.print(render_month(grid))


def handle_year_command(result: ParseResult) -> None:
    """
    Handle 'year' command - month-by-month creation and completion stats.

    Usage:
        year
        year 2024
    """
    try:
        store = repl_context.get_store()
    except TodoProError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        return

    which = store.now().year
    if result.args:
        if not result.args[0].isdigit():
            console.print(f"[red]Error:[/red] Invalid year: {escape(result.args[0])}")
            return
        which = int(result.args[0])

    summary = year_view(store.list(), which)
    if result.flags.get("json"):
        print_json(console, summary.to_dict())
    else:
        console.print(render_year(summary))


def handle_board_command(result: ParseResult) -> None:
    """
    Handle 'board' command - kanban columns with collapsible subtasks.

    Usage:
        board
        board -p high
    """
    try:
        _, tasks = _filtered(result)
    except TodoProError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        return

    groups = group_by_status(tasks, repl_context.expanded)
    if result.flags.get("json"):
        print_json(console, {status: [g.to_dict() for g in column] for status, column in groups.items()})
    else:
        console.print(render_board(groups))


def _set_expanded(result: ParseResult, expanded: bool) -> None:
    if not result.args:
        verb = "expand" if expanded else "collapse"
        console.print("[red]Error:[/red] Task ID required")
        console.print(f"[dim]Usage: {verb} <task_id>\\[,<task_id>...] | {verb} all[/dim]")
        return

    if result.args[0].lower() == "all":
        if expanded:
            repl_context.expanded.update(t.id for t in repl_context.get_store().list())
        else:
            repl_context.expanded.clear()
        console.print(f"[green]✓[/green] {'Expanded' if expanded else 'Collapsed'} all tasks")
        return

    store = repl_context.get_store()
    for task_id in parse_ids(",".join(result.args)):
        task = store.find(task_id)
        if task is None:
            console.print(f"[red]Error:[/red] Task not found: {escape(task_id)}")
        elif expanded:
            repl_context.expanded.add(task.id)
        else:
            repl_context.expanded.discard(task.id)


def handle_expand_command(result: ParseResult) -> None:
    """
    Handle 'expand' command - show a parent's subtasks on the board.

    Usage:
        expand 2
        expand all
    """
    _set_expanded(result, True)


def handle_collapse_command(result: ParseResult) -> None:
    """
    Handle 'collapse' command - hide a parent's subtasks on the board.

    Usage:
        collapse 2
        collapse all
    """
    _set_expanded(result, False)


def handle_overdue_command(result: ParseResult) -> None:
    """Handle 'overdue' command - open tasks due before today."""
    try:
        store = repl_context.get_store()
    except TodoProError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        return

    tasks = overdue_tasks(store.list(), store.now())
    if result.flags.get("json"):
        print_json(console, [t.to_dict() for t in tasks])
    elif not tasks:
        console.print("[green]Nothing overdue[/green]")
    else:
        display_tasks_table(tasks, now=store.now(), console_instance=console)


def handle_dash_command(result: ParseResult) -> None:
    """
    Handle 'dash' command - totals, trends, deadlines and insights.

    Usage:
        dash
        dash -c Work
    """
    try:
        store, tasks = _filtered(result)
    except TodoProError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        return

    now = store.now()
    totals = summarize(tasks)
    stats = aggregate(tasks, now)
    points = burndown(tasks, now)

    if result.flags.get("json"):
        print_json(
            console,
            {
                "summary": totals.to_dict(),
                "stats": stats.to_dict(),
                "burndown": [p.to_dict() for p in points],
            },
        )
    else:
        console.print(render_dashboard(totals, stats, points))


def handle_export_command(result: ParseResult) -> None:
    """
    Handle 'export' command - write tasks, reminders and notes to JSON.

    Usage:
        export
        export -o ~/Downloads
    """
    settings = get_settings()
    output = result.flag("output") or (result.args[0] if result.args else None)
    directory = Path(output).expanduser() if output else settings.data_path

    try:
        store = repl_context.get_store()
        now = store.now()
        document = build_export(
            store.list(),
            repl_context.get_reminders().load_all(),
            repl_context.get_notes().load_all(),
            now=now,
        )
        path = write_export(document, directory, settings.export_prefix, now=now)
    except OSError as e:
        console.print(f"[red]Error:[/red] Could not write export: {escape(str(e))}")
        return
    except TodoProError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        return

    console.print(f"[green]✓ Exported {len(document['tasks'])} task(s) to[/green] {escape(str(path))}")


def handle_categories_command(result: ParseResult) -> None:
    """Handle 'categories' command - category list with task counts."""
    try:
        store = repl_context.get_store()
        items = store.load_categories()
    except TodoProError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        return

    if result.flags.get("json"):
        print_json(console, [c.to_dict() for c in items])
        return

    table = Table(title="Categories", header_style="bold cyan")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Tasks", justify="right")
    for category in items:
        count = sum(1 for t in store.list() if t.category == category.name)
        table.add_row(category.id, f"[{category.color}]■[/{category.color}] {escape(category.name)}", str(count))
    console.print(table)


def handle_stats_command(result: ParseResult) -> None:
    """Handle 'stats' command - grouped counts from the API."""
    try:
        store = repl_context.get_store()
    except TodoProError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        return

    store.clear_error()
    rows = store.load_stats()
    if store.error:
        console.print(f"[red]Error:[/red] {escape(store.error)}")
        return

    if result.flags.get("json"):
        print_json(console, rows)
        return

    table = Table(title="Stats", header_style="bold cyan")
    for column in ("Date", "Status", "Priority", "Category", "Count"):
        table.add_column(column)
    for row in rows:
        table.add_row(*(escape(str(row.get(key, ""))) for key in ("date", "status", "priority", "category", "count")))
    console.print(table)
