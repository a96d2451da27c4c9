"""
FILE: todopro/repl/commands/__init__.py
PURPOSE: REPL command handler modules
"""

# Export all command handlers for easy importing
from .tasks import (
    handle_add_command,
    handle_sub_command,
    handle_ls_command,
    handle_show_command,
    handle_edit_command,
    handle_done_command,
    handle_mv_command,
    handle_rm_command,
)
from .views import (
    handle_day_command,
    handle_week_command,
    handle_month_command,
    handle_year_command,
    handle_board_command,
    handle_expand_command,
    handle_collapse_command,
    handle_overdue_command,
    handle_dash_command,
    handle_export_command,
    handle_categories_command,
    handle_stats_command,
)
from .notes import (
    handle_note_command,
    handle_remind_command,
)
from .system import (
    handle_help_command,
    handle_clear_command,
    handle_filter_command,
    handle_search_command,
    handle_reload_command,
)

__all__ = [
    "handle_add_command",
    "handle_sub_command",
    "handle_ls_command",
    "handle_show_command",
    "handle_edit_command",
    "handle_done_command",
    "handle_mv_command",
    "handle_rm_command",
    "handle_day_command",
    "handle_week_command",
    "handle_month_command",
    "handle_year_command",
    "handle_board_command",
    "handle_expand_command",
    "handle_collapse_command",
    "handle_overdue_command",
    "handle_dash_command",
    "handle_export_command",
    "handle_categories_command",
    "handle_stats_command",
    "handle_note_command",
    "handle_remind_command",
    "handle_help_command",
    "handle_clear_command",
    "handle_filter_command",
    "handle_search_command",
    "handle_reload_command",
]
