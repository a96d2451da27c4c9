"""
FILE: todopro/cli/commands/dashboard.py
PURPOSE: Dashboard and reference-data commands (dash, export, categories, stats)
"""

from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape
from rich.table import Table

from ..main import app, build_filter, console, error_console, fail, open_notes, open_reminders, open_store
from ...config import get_settings
from ...core.exceptions import TodoProError
from ...core.export import build_export, write_export
from ...core.filters import filter_tasks
from ...core.insights import aggregate, burndown, summarize
from ...formatting import print_json
from ...rendering import render_dashboard


@app.command()
def dash(
    search: Optional[str] = typer.Option(None, "--search", "-q", help="Search title and description"),
    priority: str = typer.Option("all", "--priority", "-p", help="Filter by priority"),
    status: str = typer.Option("all", "--status", "-s", help="Filter by status"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Dashboard: totals, breakdowns, trends, deadlines, productivity and insights.

    Example:
        todopro dash
        todopro dash --json
    """
    criteria = build_filter(search, priority, status)
    try:
        store = open_store()
        now = store.now()
        tasks = filter_tasks(store.list(), criteria)

        totals = summarize(tasks)
        stats = aggregate(tasks, now)
        points = burndown(tasks, now)

        if json_output:
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

    except TodoProError as e:
        fail(e)


@app.command()
def export(
    output_dir: Optional[Path] = typer.Option(None, "--output", "-o", help="Directory to write to (default: data dir)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Export tasks, reminders and notes to <prefix>-export-<date>.json.

    Example:
        todopro export
        todopro export -o ~/Downloads
    """
    settings = get_settings()
    try:
        store = open_store()
        now = store.now()
        document = build_export(
            store.list(),
            open_reminders().load_all(),
            open_notes().load_all(),
            now=now,
        )
        path = write_export(document, output_dir or settings.data_path, settings.export_prefix, now=now)
    except OSError as e:
        error_console.print(f"[red]Error:[/red] Could not write export: {e}")
        raise typer.Exit(1)
    except TodoProError as e:
        fail(e)

    if json_output:
        print_json(
            console,
            {
                "path": str(path),
                "tasks": len(document["tasks"]),
                "reminders": len(document["reminders"]),
                "notes": len(document["notes"]),
            },
        )
    else:
        console.print(
            f"[green]✓ Exported {len(document['tasks'])} task(s), {len(document['reminders'])} "
            f"reminder(s) and {len(document['notes'])} note(s) to[/green] {escape(str(path))}"
        )


@app.command()
def categories(
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    List task categories.

    Example:
        todopro categories
    """
    try:
        store = open_store()
        items = store.load_categories()

        if json_output:
            print_json(console, [c.to_dict() for c in items])
            return

        table = Table(title="Categories", header_style="bold cyan")
        table.add_column("ID", style="cyan")
        table.add_column("Name")
        table.add_column("Color")
        table.add_column("Tasks", justify="right")
        for category in items:
            count = sum(1 for t in store.list() if t.category == category.name)
            table.add_row(
                category.id,
                escape(category.name),
                f"[{category.color}]■[/{category.color}] {category.color}",
                str(count),
            )
        console.print(table)

    except TodoProError as e:
        fail(e)


@app.command()
def stats(
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Grouped task counts from the API (status, priority, category, day).

    Needs the API; prints an error when it can't be reached.

    Example:
        todopro stats --json
    """
    try:
        store = open_store()
        rows = store.load_stats()
    except TodoProError as e:
        fail(e)

    if store.error:
        error_console.print(f"[red]Error:[/red] {store.error}")
        raise typer.Exit(1)

    if json_output:
        print_json(console, rows)
        return

    table = Table(title="Stats", header_style="bold cyan")
    for column in ("Date", "Status", "Priority", "Category", "Count"):
        table.add_column(column, justify="right" if column == "Count" else "left")
    for row in rows:
        table.add_row(
            str(row.get("date", "")),
            str(row.get("status", "")),
            str(row.get("priority", "")),
            escape(str(row.get("category", ""))),
            str(row.get("count", "")),
        )
    console.print(table)
