"""
FILE: todopro/core/constants.py
PURPOSE: Constants used throughout the application
EXPORTS:
  - PRIORITIES / STATUSES: All valid enum values
  - PRIORITY_RANK: Sort weight per priority (high first)
  - DEFAULT_*: Defaults applied to new tasks
  - KANBAN_COLUMNS: Board columns in display order
  - DEADLINE_*: Deadline bucket labels in report order
  - INSIGHT_*: Dashboard insight messages
  - SEED_TASKS / SEED_CATEGORIES: Built-in data used when the API is unreachable
DEPENDENCIES:
  - None (stdlib only)
NOTES:
  - Centralized constants to avoid magic strings
  - Seed data is returned as fresh copies by the local strategy, never mutated here
"""

# Task priority constants
PRIORITY_LOW = "low"
PRIORITY_MEDIUM = "medium"
PRIORITY_HIGH = "high"
PRIORITIES = (PRIORITY_LOW, PRIORITY_MEDIUM, PRIORITY_HIGH)
PRIORITY_RANK = {PRIORITY_HIGH: 3, PRIORITY_MEDIUM: 2, PRIORITY_LOW: 1}

# Task status constants
STATUS_PENDING = "pending"
STATUS_IN_PROGRESS = "in_progress"
STATUS_COMPLETED = "completed"
STATUSES = (STATUS_PENDING, STATUS_IN_PROGRESS, STATUS_COMPLETED)

# Filter value meaning "don't filter"
FILTER_ALL = "all"

# Default values
DEFAULT_PRIORITY = PRIORITY_MEDIUM
DEFAULT_STATUS = STATUS_PENDING
DEFAULT_CATEGORY = "General"
DEFAULT_SUBTASK_TITLE = "New Subtask"

# Fields a task patch may carry
PATCHABLE_FIELDS = (
    "title",
    "description",
    "priority",
    "status",
    "category",
    "due_date",
    "parent_id",
    "order_index",
)

# Kanban board columns (status, title)
KANBAN_COLUMNS = (
    (STATUS_PENDING, "To Do"),
    (STATUS_IN_PROGRESS, "In Progress"),
    (STATUS_COMPLETED, "Done"),
)

# Calendar cells show this many tasks before "+N more"
MAX_TASKS_PER_DAY = 3

# Deadline buckets
DEADLINE_OVERDUE = "Overdue"
DEADLINE_TODAY = "Due Today"
DEADLINE_SOON = "Due Soon"
DEADLINE_THIS_WEEK = "Due This Week"
DEADLINE_FUTURE = "Future"
DEADLINE_ORDER = (
    DEADLINE_OVERDUE,
    DEADLINE_TODAY,
    DEADLINE_SOON,
    DEADLINE_THIS_WEEK,
    DEADLINE_FUTURE,
)

# Dashboard windows (days)
TREND_DAYS = 7
HEATMAP_DAYS = 35
RECENT_ACTIVITY_DAYS = 7
MOMENTUM_DAYS = 3
MAX_INSIGHTS = 3

# Insight messages, in rule order
INSIGHT_HIGH_COMPLETION = "🎉 Excellent! You have an 80%+ completion rate. Keep up the great work!"
INSIGHT_LOW_COMPLETION = "⚡ Focus opportunity: Consider breaking down large tasks into smaller, manageable ones."
INSIGHT_PRIORITY_OVERLOAD = "🎯 You have many high-priority tasks. Consider tackling 2-3 at a time for better focus."
INSIGHT_MOMENTUM = "🚀 You're on fire! You've completed multiple tasks in the last 3 days."
INSIGHT_DOMINANT_CATEGORY = '📊 Most tasks are in "{category}". Consider diversifying your focus areas.'

# Reminder recurrence
RECURRENCE_TYPES = ("daily", "weekly", "monthly", "yearly")

# Reminder list filters
REMINDER_FILTERS = ("all", "upcoming", "today", "overdue", "completed")

# Export
EXPORT_VERSION = "1.0.0"
EXPORTED_BY = "TodoPro Dashboard"

# Built-in tasks shown when the API can't be reached on startup
SEED_TASKS = (
    {
        "id": "1",
        "title": "Complete project setup",
        "description": "Set up the development environment and project structure",
        "priority": PRIORITY_HIGH,
        "status": STATUS_COMPLETED,
        "category": "Development",
        "due_date": "2024-01-15",
        "created_at": "2024-01-10T10:00:00Z",
        "updated_at": "2024-01-12T10:00:00Z",
        "completed_at": "2024-01-12T15:30:00Z",
    },
    {
        "id": "2",
        "title": "Design user interface",
        "description": "Create mockups and wireframes for the application",
        "priority": PRIORITY_MEDIUM,
        "status": STATUS_IN_PROGRESS,
        "category": "Design",
        "due_date": "2024-01-20",
        "created_at": "2024-01-11T09:00:00Z",
        "updated_at": "2024-01-11T09:00:00Z",
    },
    {
        "id": "3",
        "title": "Write documentation",
        "description": "Create comprehensive documentation for the API",
        "priority": PRIORITY_LOW,
        "status": STATUS_PENDING,
        "category": "Documentation",
        "due_date": "2024-01-25",
        "created_at": "2024-01-12T14:00:00Z",
        "updated_at": "2024-01-12T14:00:00Z",
    },
)

SEED_CATEGORIES = (
    {"id": "1", "name": "Development", "color": "#0078d4", "created_at": "2024-01-01T00:00:00Z"},
    {"id": "2", "name": "Design", "color": "#d13438", "created_at": "2024-01-01T00:00:00Z"},
    {"id": "3", "name": "Documentation", "color": "#107c10", "created_at": "2024-01-01T00:00:00Z"},
    {"id": "4", "name": "Testing", "color": "#ff8c00", "created_at": "2024-01-01T00:00:00Z"},
    {"id": "5", "name": "General", "color": "#8764b8", "created_at": "2024-01-01T00:00:00Z"},
)
