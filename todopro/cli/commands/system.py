"""
FILE: todopro/cli/commands/system.py
PURPOSE: System commands (version, help, repl)
"""

import typer

# Import shared objects from main module
# These will be available after main.py imports this module
from ..main import app, console, error_console
from ... import __version__


@app.command()
def version():
    """Show todopro version."""
    console.print(f"todopro v{__version__}")


@app.command()
def help():
    """Show available commands and usage."""
    console.print("\n[bold cyan]todopro[/bold cyan] - Tasks, calendars, a kanban board and a dashboard\n")
    console.print(f"[dim]Version {__version__}[/dim]\n")

    console.print("[bold]Usage:[/bold]")
    console.print("  todopro \\[command] \\[options]")
    console.print("  todopro                   [dim]# Launch interactive REPL (default)[/dim]\n")

    console.print("[bold]Commands:[/bold]")

    commands = [
        ("add", "Create a new task", 'todopro add "Title" \\[-p high] \\[-c Work] \\[--due 2024-03-01]'),
        ("sub", "Add a subtask", 'todopro sub <parent_id> "Title"'),
        ("ls", "List tasks", "todopro ls \\[-q text] \\[-p priority] \\[-s status] \\[-c category]"),
        ("show", "View full task details", "todopro show <task_id>"),
        ("edit", "Update task fields", 'todopro edit <task_id> --title "New" --status in_progress'),
        ("done", "Mark task(s) completed", "todopro done <task_id>\\[,<task_id>...]"),
        ("mv", "Move task to a board column", "todopro mv <task_id> in_progress"),
        ("rm", "Delete task(s)", "todopro rm <task_id>\\[,<task_id>...]"),
        ("day", "Day view with overdue list", "todopro day \\[--date 2024-03-01]"),
        ("week", "Week view (Sunday start)", "todopro week \\[--date 2024-03-01]"),
        ("month", "Month calendar", "todopro month \\[2024-03]"),
        ("year", "Year statistics", "todopro year \\[2024]"),
        ("board", "Kanban board", "todopro board \\[--expand all]"),
        ("overdue", "Overdue tasks", "todopro overdue"),
        ("dash", "Dashboard and insights", "todopro dash"),
        ("export", "Export everything to JSON", "todopro export \\[-o DIR]"),
        ("categories", "List categories", "todopro categories"),
        ("stats", "Grouped stats from the API", "todopro stats"),
        ("note", "Notes (add, ls, edit, pin, rm)", 'todopro note add "Title" -m "Text"'),
        ("remind", "Reminders (add, ls, done, rm)", 'todopro remind add "Call mom" --time 19:00'),
        ("repl", "Launch interactive REPL", "todopro repl"),
        ("version", "Show version", "todopro version"),
        ("help", "Show this help message", "todopro help"),
    ]

    for cmd, desc, example in commands:
        console.print(f"  [green]{cmd:10}[/green] {desc}")
        console.print(f"             [dim]{example}[/dim]\n")

    console.print("[bold]Global Options:[/bold]")
    console.print("  [yellow]--json[/yellow]     Output as JSON (for scripting)")
    console.print("  [yellow]--verbose[/yellow]  Show debug logging (before the command)")
    console.print("  [yellow]--help[/yellow]     Show detailed help for a command\n")

    console.print("[bold]Environment:[/bold]")
    console.print("  TODOPRO_API_BASE_URL   API root (default http://localhost:3001/api)")
    console.print("  TODOPRO_OFFLINE=1      Never call the API; use built-in tasks")
    console.print("  TODOPRO_DATA_DIR       Notes, reminders and exports (default ~/.todopro)\n")


@app.command()
def repl():
    """
    Launch interactive REPL mode.

    The REPL provides:
    - One task store for the whole session
    - Command history (up/down arrows)
    - Autocomplete (Tab key)
    - Persistent filters and board expansion
    - Exit with Ctrl+D or type 'exit'

    Example:
        todopro repl
    """
    # Import here to avoid loading REPL dependencies for one-shot commands
    from ...repl import main as repl_main

    try:
        repl_main()
    except Exception as e:
        error_console.print(f"[red]Error starting REPL:[/red] {e}")
        raise typer.Exit(1)
