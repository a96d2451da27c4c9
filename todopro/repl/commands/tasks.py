"""
FILE: todopro/repl/commands/tasks.py
PURPOSE: Task command handlers for REPL (add, sub, ls, show, edit, done, mv, rm)
"""

from typing import Any, Dict

from rich.markup import escape
from rich.panel import Panel

from ..display import display_task, display_tasks_table, print_errors
from ..main import console, repl_context
from ..parser import ParseResult
from ...core.constants import STATUS_COMPLETED
from ...core.dates import parse_iso
from ...core.exceptions import TaskNotFoundError, TodoProError
from ...core.filters import filter_tasks
from ...formatting import TaskFormatter, parse_ids, print_json

# Flags that map straight onto task fields
FIELD_FLAGS = ("title", "description", "priority", "status", "category")


def ask_confirmation(message: str) -> bool:
    """Ask user for confirmation (y/n)."""
    response = input(f"{message} (y/n): ").strip().lower()
    return response in ('y', 'yes')


def normalize_due(value: str):
    """Due date flag to YYYY-MM-DD; "none" or "" clears it."""
    if value.strip().lower() in ("", "none"):
        return None
    return parse_iso(value).date().isoformat()


def handle_add_command(result: ParseResult) -> None:
    """
    Handle 'add' command - create new task.

    Usage:
        add Buy groceries
        add "Fix login bug" -p high -c Development --due 2024-03-01
        add "Draft outline" --parent 2
    """
    if not result.args:
        console.print("[red]Error:[/red] Task title required")
        console.print("[dim]Usage: add <title> \\[-p priority] \\[-c category] \\[--due YYYY-MM-DD][/dim]")
        return

    # Join all args as the title (in case they didn't use quotes)
    draft: Dict[str, Any] = {"title": " ".join(result.args)}
    for name in FIELD_FLAGS[1:]:
        value = result.flag(name)
        if value is not None:
            draft[name] = value

    try:
        if result.flag("due"):
            draft["due_date"] = normalize_due(result.flag("due"))
        if result.flag("parent"):
            draft["parent_id"] = result.flag("parent")

        task = repl_context.get_store().create(draft)

        if result.flags.get("json"):
            print_json(console, task.to_dict())
        else:
            console.print(f"[green]✓ Created task [bold]#{task.id}[/bold]:[/green] {escape(task.title)}")
    except TodoProError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")


def handle_sub_command(result: ParseResult) -> None:
    """
    Handle 'sub' command - add a subtask under a parent.

    Usage:
        sub 2
        sub 2 "Draft wireframes"
    """
    if not result.args:
        console.print("[red]Error:[/red] Parent task ID required")
        console.print('[dim]Usage: sub <parent_id> \\["Subtask title"][/dim]')
        return

    parent_id = result.args[0]
    title = " ".join(result.args[1:]) or "New Subtask"
    try:
        task = repl_context.get_store().add_subtask(parent_id, title)
        # Show the new subtask the next time the board is drawn
        repl_context.expanded.add(task.parent_id)
        console.print(f"[green]✓ Created subtask [bold]#{task.id}[/bold] under #{parent_id}:[/green] {escape(task.title)}")
    except TodoProError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")


def handle_ls_command(result: ParseResult) -> None:
    """
    Handle 'ls' command - list tasks under the current filter.

    Usage:
        ls
        ls -p high -s pending
        ls --json
    """
    try:
        criteria = repl_context.criteria_with(result)
        store = repl_context.get_store()
    except TodoProError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        return

    tasks = filter_tasks(store.list(), criteria)

    if result.flags.get("json"):
        print_json(console, [t.to_dict() for t in tasks])
    elif result.flags.get("raw"):
        for line in TaskFormatter.to_raw_lines(tasks):
            console.print(line, markup=False)
    else:
        display_tasks_table(tasks, criteria, now=store.now(), console_instance=console)


def handle_show_command(result: ParseResult) -> None:
    """
    Handle 'show' command - full task details with its subtasks.

    Usage:
        show 3
    """
    if not result.args:
        console.print("[red]Error:[/red] Task ID required")
        console.print("[dim]Usage: show <task_id>[/dim]")
        return

    try:
        store = repl_context.get_store()
        task = store.get(result.args[0])
    except TodoProError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        return

    parent = store.find(task.parent_id) if task.parent_id else None
    subtasks = sorted((t for t in store.list() if t.parent_id == task.id), key=lambda t: t.order_index)

    if result.flags.get("json"):
        data = task.to_dict()
        data["subtasks"] = [t.to_dict() for t in subtasks]
        print_json(console, data)
        return

    lines = TaskFormatter.detail_lines(task, parent)
    if subtasks:
        lines.append("")
        lines.append(f"[cyan]Subtasks ({len(subtasks)}):[/cyan]")
        for child in subtasks:
            marker = "✓" if child.status == STATUS_COMPLETED else "○"
            lines.append(f"  {marker} #{child.id} {escape(child.title)}")
    console.print(Panel("\n".join(lines), title=f"Task #{task.id}", border_style="cyan"))


def handle_edit_command(result: ParseResult) -> None:
    """
    Handle 'edit' command - update one or more fields.

    Usage:
        edit 5 --title "Updated title" -p high
        edit 5 --due none
        edit 7 --parent none
    """
    if not result.args:
        console.print("[red]Error:[/red] Task ID required")
        console.print('[dim]Usage: edit <task_id> --title "New" \\[-p priority] \\[-s status] ...[/dim]')
        return

    patch: Dict[str, Any] = {}
    for name in FIELD_FLAGS:
        value = result.flag(name)
        if value is not None:
            patch[name] = value

    # Bare "edit 5 New title" is shorthand for --title
    if "title" not in patch and len(result.args) > 1:
        patch["title"] = " ".join(result.args[1:])

    try:
        if result.flag("due") is not None:
            patch["due_date"] = normalize_due(result.flag("due"))
        parent = result.flag("parent")
        if parent is not None:
            patch["parent_id"] = None if parent.lower() == "none" else parent

        if not patch:
            console.print("[red]Error:[/red] Nothing to update (pass --title, --status, ...)")
            return

        task = repl_context.get_store().update(result.args[0], patch)
        display_task(task, "✎ Updated:", console)
    except TodoProError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")


def handle_done_command(result: ParseResult) -> None:
    """
    Handle 'done' command - mark task(s) completed.

    Usage:
        done 5
        done 3,5,7
    """
    if not result.args:
        console.print("[red]Error:[/red] Task ID required")
        console.print("[dim]Usage: done <task_id>\\[,<task_id>...][/dim]")
        return

    try:
        store = repl_context.get_store()
    except TodoProError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        return

    completed = []
    errors = []
    for task_id in parse_ids(",".join(result.args)):
        try:
            completed.append(store.move(task_id, STATUS_COMPLETED))
        except TaskNotFoundError as e:
            errors.append(str(e))
        except TodoProError as e:
            errors.append(f"Error with task {task_id}: {e}")

    if result.flags.get("json"):
        print_json(console, [t.to_dict() for t in completed])
    else:
        for task in completed:
            console.print(f"[green]✓[/green] Completed: {escape(task.title)}")
    print_errors(errors, console)


def handle_mv_command(result: ParseResult) -> None:
    """
    Handle 'mv' command - move a task to another board column.

    Usage:
        mv 3 in_progress
    """
    if len(result.args) < 2:
        console.print("[red]Error:[/red] Task ID and status required")
        console.print("[dim]Usage: mv <task_id> <pending|in_progress|completed>[/dim]")
        return

    try:
        task = repl_context.get_store().move(result.args[0], result.args[1])
        console.print(f"[blue]→[/blue] Moved task {task.id} to [bold]{task.status}[/bold]")
    except TodoProError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")


def handle_rm_command(result: ParseResult) -> None:
    """
    Handle 'rm' command - delete task(s). Subtasks are kept.

    Usage:
        rm 5
        rm 3,5,7 --yes
    """
    if not result.args:
        console.print("[red]Error:[/red] Task ID required")
        console.print("[dim]Usage: rm <task_id>\\[,<task_id>...] \\[--yes][/dim]")
        return

    try:
        store = repl_context.get_store()
    except TodoProError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        return

    errors = []
    targets = []
    for task_id in parse_ids(",".join(result.args)):
        task = store.find(task_id)
        if task is None:
            errors.append(str(TaskNotFoundError(task_id)))
        else:
            targets.append(task)

    if len(targets) > 1 and not result.flags.get("yes"):
        if not ask_confirmation(f"Delete {len(targets)} tasks?"):
            console.print("[yellow]Cancelled[/yellow]")
            return

    for task in targets:
        try:
            store.delete(task.id)
            repl_context.expanded.discard(task.id)
            console.print(f"[red]✗[/red] Deleted task {task.id}: {escape(task.title)}")
        except TodoProError as e:
            errors.append(f"Error deleting task {task.id}: {e}")
    print_errors(errors, console)
