"""
FILE: todopro/cli/commands/__init__.py
PURPOSE: CLI command modules
"""

# Export all command handlers for easy importing
from .tasks import (
    add,
    sub,
    ls,
    show,
    edit,
    done,
    mv,
    rm,
)
from .views import (
    day,
    week,
    month,
    year,
    board,
    overdue,
)
from .dashboard import (
    dash,
    export,
    categories,
    stats,
)
from .notes import (
    note_add,
    note_ls,
    note_edit,
    note_pin,
    note_rm,
    remind_add,
    remind_ls,
    remind_done,
    remind_rm,
)
from .system import (
    version,
    help,
    repl,
)

__all__ = [
    "add",
    "sub",
    "ls",
    "show",
    "edit",
    "done",
    "mv",
    "rm",
    "day",
    "week",
    "month",
    "year",
    "board",
    "overdue",
    "dash",
    "export",
    "categories",
    "stats",
    "note_add",
    "note_ls",
    "note_edit",
    "note_pin",
    "note_rm",
    "remind_add",
    "remind_ls",
    "remind_done",
    "remind_rm",
    "version",
    "help",
    "repl",
]
