"""
FILE: todopro/cli/commands/tasks.py
PURPOSE: Task commands (add, sub, ls, show, edit, done, mv, rm)
"""

from typing import Any, Dict, Optional

import typer
from rich.markup import escape
from rich.panel import Panel

from ..main import app, build_filter, console, error_console, fail, open_store
from ...core.constants import STATUS_COMPLETED
from ...core.dates import parse_iso
from ...core.exceptions import TaskNotFoundError, TodoProError
from ...core.filters import filter_tasks
from ...formatting import TaskFormatter, parse_ids, print_json


def normalize_due(value: Optional[str]) -> Optional[str]:
    """Validate a --due value and reduce it to YYYY-MM-DD ("" or "none" clears)."""
    if value is None or value.strip().lower() in ("", "none"):
        return None
    return parse_iso(value).date().isoformat()


@app.command()
def add(
    title: str = typer.Argument(..., help="Task title"),
    description: Optional[str] = typer.Option(None, "--description", "-d", help="Description"),
    priority: str = typer.Option("medium", "--priority", "-p", help="low, medium or high"),
    status: str = typer.Option("pending", "--status", "-s", help="pending, in_progress or completed"),
    category: str = typer.Option("General", "--category", "-c", help="Category label"),
    due: Optional[str] = typer.Option(None, "--due", help="Due date (YYYY-MM-DD)"),
    parent: Optional[str] = typer.Option(None, "--parent", help="Parent task ID (makes a subtask)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Create a new task.

    Example:
        todopro add "Write documentation"
        todopro add "Fix login bug" -p high -c Development --due 2024-03-01
    """
    try:
        store = open_store()
        draft: Dict[str, Any] = {
            "title": title,
            "priority": priority,
            "status": status,
            "category": category,
        }
        if description:
            draft["description"] = description
        if due:
            draft["due_date"] = normalize_due(due)
        if parent:
            draft["parent_id"] = parent

        task = store.create(draft)

        if json_output:
            print_json(console, task.to_dict())
        elif raw:
            console.print(f"{task.id}: {task.title}", markup=False)
        else:
            console.print(f"[green]✓ Created task [bold]#{task.id}[/bold]:[/green] {escape(task.title)}")

    except TodoProError as e:
        fail(e)


@app.command()
def sub(
    parent_id: str = typer.Argument(..., help="Parent task ID"),
    title: str = typer.Argument("New Subtask", help="Subtask title"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Add a subtask under a task. Subtasks always start as pending.

    Example:
        todopro sub 2 "Draft wireframes"
    """
    try:
        store = open_store()
        task = store.add_subtask(parent_id, title)

        if json_output:
            print_json(console, task.to_dict())
        else:
            console.print(
                f"[green]✓ Created subtask [bold]#{task.id}[/bold] under #{parent_id}:[/green] {escape(task.title)}"
            )

    except TodoProError as e:
        fail(e)


@app.command()
def ls(
    search: Optional[str] = typer.Option(None, "--search", "-q", help="Search title and description"),
    priority: str = typer.Option("all", "--priority", "-p", help="Filter by priority"),
    status: str = typer.Option("all", "--status", "-s", help="Filter by status"),
    category: Optional[str] = typer.Option(None, "--category", "-c", help="Filter by category"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    List tasks, newest first.

    Example:
        todopro ls
        todopro ls --status pending --priority high
        todopro ls -q docs --json
    """
    criteria = build_filter(search, priority, status, category)
    try:
        store = open_store()
        tasks = filter_tasks(store.list(), criteria)

        if json_output:
            print_json(console, [t.to_dict() for t in tasks])
        elif raw:
            for line in TaskFormatter.to_raw_lines(tasks):
                console.print(line, markup=False)
        else:
            if not tasks:
                console.print("[dim]No tasks found[/dim]")
                return

            title = "Tasks"
            if criteria.is_active:
                title += f" ({criteria.describe()})"
            console.print(TaskFormatter.create_table(tasks, title=title, now=store.now()))
            console.print(f"\n[dim]Total: {len(tasks)} task(s)[/dim]")

    except TodoProError as e:
        fail(e)


@app.command()
def show(
    task_id: str = typer.Argument(..., help="Task ID"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    View full task details.

    Example:
        todopro show 3
    """
    try:
        store = open_store()
        task = store.get(task_id)
        parent = store.find(task.parent_id) if task.parent_id else None
        subtasks = [t for t in store.list() if t.parent_id == task.id]

        if json_output:
            data = task.to_dict()
            data["subtasks"] = [t.to_dict() for t in subtasks]
            print_json(console, data)
            return

        lines = TaskFormatter.detail_lines(task, parent)
        if subtasks:
            lines.append("")
            lines.append(f"[cyan]Subtasks ({len(subtasks)}):[/cyan]")
            for child in sorted(subtasks, key=lambda t: t.order_index):
                marker = "✓" if child.status == STATUS_COMPLETED else "○"
                lines.append(f"  {marker} #{child.id} {escape(child.title)}")

        console.print(Panel("\n".join(lines), title=f"Task #{task.id}", border_style="cyan"))

    except TodoProError as e:
        fail(e)


@app.command()
def edit(
    task_id: str = typer.Argument(..., help="Task ID to edit"),
    title: Optional[str] = typer.Option(None, "--title", "-t", help="New title"),
    description: Optional[str] = typer.Option(None, "--description", "-d", help="New description"),
    priority: Optional[str] = typer.Option(None, "--priority", "-p", help="low, medium or high"),
    status: Optional[str] = typer.Option(None, "--status", "-s", help="pending, in_progress or completed"),
    category: Optional[str] = typer.Option(None, "--category", "-c", help="New category"),
    due: Optional[str] = typer.Option(None, "--due", help="Due date (YYYY-MM-DD, 'none' clears)"),
    parent: Optional[str] = typer.Option(None, "--parent", help="Parent task ID ('none' detaches)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Update one or more fields of a task.

    Example:
        todopro edit 5 --title "Updated title" --priority high
        todopro edit 5 --due none
    """
    patch: Dict[str, Any] = {}
    if title is not None:
        patch["title"] = title
    if description is not None:
        patch["description"] = description
    if priority is not None:
        patch["priority"] = priority
    if status is not None:
        patch["status"] = status
    if category is not None:
        patch["category"] = category
    if parent is not None:
        patch["parent_id"] = None if parent.lower() == "none" else parent

    try:
        if due is not None:
            patch["due_date"] = normalize_due(due)

        if not patch:
            error_console.print("[red]Error:[/red] Nothing to update (pass --title, --status, ...)")
            raise typer.Exit(1)

        store = open_store()
        task = store.update(task_id, patch)

        if json_output:
            print_json(console, task.to_dict())
        else:
            console.print(f"[blue]✎[/blue] Updated task {task.id}: {escape(task.title)}")

    except TodoProError as e:
        fail(e)


@app.command()
def done(
    task_ids: str = typer.Argument(..., help="Task ID(s) to complete (comma-separated)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Mark one or more tasks as completed.

    Example:
        todopro done 5
        todopro done 3,5,7
    """
    try:
        store = open_store()
    except TodoProError as e:
        fail(e)

    completed_tasks = []
    errors = []
    for task_id in parse_ids(task_ids):
        try:
            completed_tasks.append(store.move(task_id, STATUS_COMPLETED))
        except TaskNotFoundError as e:
            errors.append(str(e))
        except TodoProError as e:
            errors.append(f"Error with task {task_id}: {e}")

    if json_output:
        print_json(console, [t.to_dict() for t in completed_tasks])
    elif raw:
        for task in completed_tasks:
            console.print(f"Completed: {task.title}", markup=False)
    else:
        for task in completed_tasks:
            console.print(f"[green]✓[/green] Completed: {escape(task.title)}")

    if errors:
        for error in errors:
            error_console.print(f"[red]Error:[/red] {error}")
        if not completed_tasks:
            raise typer.Exit(1)


@app.command()
def mv(
    task_id: str = typer.Argument(..., help="Task ID"),
    status: str = typer.Argument(..., help="pending, in_progress or completed"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Move a task to another board column.

    Example:
        todopro mv 3 in_progress
    """
    try:
        store = open_store()
        task = store.move(task_id, status)

        if json_output:
            print_json(console, task.to_dict())
        else:
            console.print(f"[blue]→[/blue] Moved task {task.id} to [bold]{task.status}[/bold]")

    except TodoProError as e:
        fail(e)


@app.command()
def rm(
    task_ids: str = typer.Argument(..., help="Task ID(s) to delete (comma-separated)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    yes: bool = typer.Option(False, "-y", "--yes", help="Skip confirmation prompt"),
):
    """
    Delete one or more tasks. Subtasks of a deleted task are kept.

    Confirms before deleting multiple tasks (use -y to skip).

    Example:
        todopro rm 5
        todopro rm 3,5,7 --yes
    """
    try:
        store = open_store()
    except TodoProError as e:
        fail(e)

    errors = []
    targets = []
    for task_id in parse_ids(task_ids):
        task = store.find(task_id)
        if task is None:
            errors.append(str(TaskNotFoundError(task_id)))
        else:
            targets.append(task)

    if not targets:
        for error in errors:
            error_console.print(f"[red]Error:[/red] {error}")
        raise typer.Exit(1)

    # Confirm deletion for multiple tasks unless --yes
    if not yes and len(targets) > 1:
        console.print(f"[yellow]About to delete {len(targets)} task(s)[/yellow]")
        if not typer.confirm("Continue?", default=False):
            console.print("[yellow]Cancelled[/yellow]")
            raise typer.Exit(0)

    deleted = []
    for task in targets:
        try:
            store.delete(task.id)
            deleted.append({"id": task.id, "title": task.title})
        except TodoProError as e:
            errors.append(f"Error deleting task {task.id}: {e}")

    if json_output:
        print_json(console, deleted)
    else:
        for task in deleted:
            console.print(f"[red]✗[/red] Deleted task {task['id']}: {escape(task['title'])}")

    if errors:
        for error in errors:
            error_console.print(f"[red]Error:[/red] {error}")
        if not deleted:
            raise typer.Exit(1)
