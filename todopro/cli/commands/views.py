"""
FILE: todopro/cli/commands/views.py
PURPOSE: Calendar and board commands (day, week, month, year, board, overdue)
"""

from typing import List, Optional

import typer

from ..main import app, build_filter, console, fail, open_store
from ...core.bucketing import day_view, month_view, overdue_tasks, week_view, year_view
from ...core.dates import resolve_day, resolve_month
from ...core.exceptions import TodoProError
from ...core.filters import filter_tasks
from ...core.grouping import group_by_status
from ...formatting import TaskFormatter, parse_ids, print_json
from ...rendering import render_board, render_day, render_month, render_week, render_year


FILTER_HELP = {
    "search": "Search title and description",
    "priority": "Filter by priority",
    "status": "Filter by status",
    "category": "Filter by category",
}


@app.command()
def day(
    date: Optional[str] = typer.Option(None, "--date", help="Day to show (YYYY-MM-DD, default today)"),
    search: Optional[str] = typer.Option(None, "--search", "-q", help=FILTER_HELP["search"]),
    priority: str = typer.Option("all", "--priority", "-p", help=FILTER_HELP["priority"]),
    status: str = typer.Option("all", "--status", "-s", help=FILTER_HELP["status"]),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Show one day's tasks plus everything overdue.

    Tasks are placed by due date, or creation date when no due date is set.

    Example:
        todopro day
        todopro day --date 2024-01-20
    """
    criteria = build_filter(search, priority, status)
    try:
        store = open_store()
        now = store.now()
        reference = resolve_day(date, now)
        view = day_view(filter_tasks(store.list(), criteria), reference, overdue_source=store.list(), now=now)

        if json_output:
            print_json(console, view.to_dict())
        else:
            console.print(render_day(view, now=now))

    except TodoProError as e:
        fail(e)


@app.command()
def week(
    date: Optional[str] = typer.Option(None, "--date", help="Any day in the week (default today)"),
    search: Optional[str] = typer.Option(None, "--search", "-q", help=FILTER_HELP["search"]),
    priority: str = typer.Option("all", "--priority", "-p", help=FILTER_HELP["priority"]),
    status: str = typer.Option("all", "--status", "-s", help=FILTER_HELP["status"]),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Show a Sunday-to-Saturday week.

    Example:
        todopro week
        todopro week --date 2024-01-15 --priority high
    """
    criteria = build_filter(search, priority, status)
    try:
        store = open_store()
        now = store.now()
        cells = week_view(filter_tasks(store.list(), criteria), resolve_day(date, now), now=now)

        if json_output:
            print_json(console, [cell.to_dict() for cell in cells])
        else:
            console.print(render_week(cells))

    except TodoProError as e:
        fail(e)


@app.command()
def month(
    which: Optional[str] = typer.Argument(None, metavar="[YYYY-MM]", help="Month to show (default current)"),
    search: Optional[str] = typer.Option(None, "--search", "-q", help=FILTER_HELP["search"]),
    priority: str = typer.Option("all", "--priority", "-p", help=FILTER_HELP["priority"]),
    status: str = typer.Option("all", "--status", "-s", help=FILTER_HELP["status"]),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Show a month calendar (3 tasks per day, then "+N more").

    Example:
        todopro month
        todopro month 2024-01
    """
    criteria = build_filter(search, priority, status)
    try:
        store = open_store()
        now = store.now()
        year_number, month_number = resolve_month(which, now)
        grid = month_view(filter_tasks(store.list(), criteria), year_number, month_number, now=now)

        if json_output:
            print_json(console, grid.to_dict())
        else:
            console.print(render_month(grid))

    except TodoProError as e:
        fail(e)


@app.command()
def year(
    which: Optional[int] = typer.Argument(None, metavar="[YYYY]", help="Year to show (default current)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Month-by-month statistics for tasks created in a year.

    Example:
        todopro year 2024
    """
    try:
        store = open_store()
        summary = year_view(store.list(), which or store.now().year)

        if json_output:
            print_json(console, summary.to_dict())
        else:
            console.print(render_year(summary))

    except TodoProError as e:
        fail(e)


@app.command()
def board(
    expand: Optional[str] = typer.Option(None, "--expand", "-e", help="Parent ID(s) to expand, or 'all'"),
    search: Optional[str] = typer.Option(None, "--search", "-q", help=FILTER_HELP["search"]),
    priority: str = typer.Option("all", "--priority", "-p", help=FILTER_HELP["priority"]),
    category: Optional[str] = typer.Option(None, "--category", "-c", help=FILTER_HELP["category"]),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Kanban board: To Do, In Progress, Done, with subtasks under their parent.

    Example:
        todopro board
        todopro board --expand all
        todopro board -e 2,5
    """
    criteria = build_filter(search, priority, category=category)
    try:
        store = open_store()
        tasks = filter_tasks(store.list(), criteria)

        expanded: List[str] = []
        if expand == "all":
            expanded = [t.id for t in tasks]
        elif expand:
            expanded = parse_ids(expand)

        groups = group_by_status(tasks, expanded)

        if json_output:
            print_json(console, {status: [g.to_dict() for g in column] for status, column in groups.items()})
        else:
            console.print(render_board(groups))

    except TodoProError as e:
        fail(e)


@app.command()
def overdue(
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    List open tasks whose due date is before today.

    Example:
        todopro overdue
    """
    try:
        store = open_store()
        now = store.now()
        tasks = overdue_tasks(store.list(), now)

        if json_output:
            print_json(console, [t.to_dict() for t in tasks])
        elif not tasks:
            console.print("[green]Nothing overdue[/green]")
        else:
            console.print(TaskFormatter.create_table(tasks, title="Overdue", now=now))

    except TodoProError as e:
        fail(e)
