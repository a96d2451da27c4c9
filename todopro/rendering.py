"""
FILE: todopro/rendering.py
PURPOSE: Rich renderables for the calendar, board and dashboard views
EXPORTS:
  - render_day(view) -> RenderableType
  - render_week(cells) -> Table
  - render_month(grid) -> Table
  - render_year(summary) -> RenderableType
  - render_board(groups) -> Columns
  - render_dashboard(totals, stats, burndown_points) -> Group
DEPENDENCIES:
  - rich (tables, panels, columns)
  - todopro.core (view dataclasses from bucketing/grouping/insights)
  - todopro.formatting (styles, TaskFormatter)
NOTES:
  - Renderers only format data the core already computed; no derivation here
  - Shared by CLI and REPL
"""

from typing import Dict, List

from rich import box
from rich.columns import Columns
from rich.console import Group
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .core.bucketing import DayCell, DayView, MonthGrid, YearSummary
from .core.constants import KANBAN_COLUMNS, STATUS_COMPLETED
from .core.grouping import TaskGroup, column_total
from .core.insights import BurndownPoint, DashboardStats, TaskTotals
from .formatting import PRIORITY_STYLES, STATUS_MARKERS, STATUS_STYLES, TaskFormatter

WEEKDAY_HEADERS = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")

HEAT_SHADES = ("grey23", "green4", "green3", "green1")


def _chip(task) -> str:
    """One-line task label: priority-colored title, dimmed when completed."""
    style = "dim strike" if task.status == STATUS_COMPLETED else PRIORITY_STYLES.get(task.priority, "white")
    return f"[{style}]{escape(task.title)}[/{style}] [dim]#{task.id}[/dim]"


def _cell_text(cell: DayCell, header: str) -> str:
    lines = [header]
    lines.extend(_chip(task) for task in cell.visible)
    if cell.overflow:
        lines.append(f"[dim]+{cell.overflow} more[/dim]")
    return "\n".join(lines)


def _bar(value: float, maximum: float, width: int = 20, style: str = "cyan") -> str:
    filled = int(round(width * value / maximum)) if maximum else 0
    return f"[{style}]{'█' * filled}[/{style}][dim]{'░' * (width - filled)}[/dim]"


def _heat_cell(day) -> str:
    shade = HEAT_SHADES[min(int(day.intensity * 3), 3)] if day.count else HEAT_SHADES[0]
    return f"[{shade}]■[/{shade}]"


def render_day(view: DayView, now=None):
    """Day's tasks table plus the overdue list."""
    label = view.day.strftime("%A, %B %d, %Y")
    if view.is_today:
        label += " (today)"

    parts = []
    if view.tasks:
        parts.append(TaskFormatter.create_table(view.tasks, title=label, show_due=False, now=now))
    else:
        parts.append(f"[bold]{label}[/bold]\n[dim]No tasks for this day[/dim]")

    if view.overdue:
        parts.append(TaskFormatter.create_table(view.overdue, title="[red]Overdue[/red]", now=now))
    return Group(*parts)


def render_week(cells: List[DayCell]) -> Table:
    start, end = cells[0].day, cells[-1].day
    table = Table(
        title=f"Week of {start.strftime('%b %d')} - {end.strftime('%b %d, %Y')}",
        box=box.ROUNDED,
        show_lines=True,
        expand=True,
    )
    for cell in cells:
        header = f"{cell.day.strftime('%a %d')}"
        if cell.is_today:
            header = f"[reverse]{header}[/reverse]"
        table.add_column(header, vertical="top", ratio=1)

    rows = []
    for cell in cells:
        lines = [_chip(task) for task in cell.visible]
        if cell.overflow:
            lines.append(f"[dim]+{cell.overflow} more[/dim]")
        if cell.tasks:
            lines.append(f"[green]{cell.completed_count}/{len(cell.tasks)} done[/green]")
        rows.append("\n".join(lines) or "[dim]-[/dim]")
    table.add_row(*rows)
    return table


def render_month(grid: MonthGrid) -> Table:
    table = Table(title=grid.label, box=box.SQUARE, show_lines=True, expand=True)
    for header in WEEKDAY_HEADERS:
        table.add_column(header, vertical="top", ratio=1)

    for week in grid.weeks:
        row = []
        for cell in week:
            number = str(cell.day.day)
            if cell.is_today:
                number = f"[reverse]{number}[/reverse]"
            elif not cell.in_month:
                number = f"[dim]{number}[/dim]"
            row.append(_cell_text(cell, number))
        table.add_row(*row)
    return table


def render_year(summary: YearSummary):
    table = Table(title=f"{summary.year} overview", header_style="bold cyan")
    table.add_column("Month")
    table.add_column("Total", justify="right")
    table.add_column("Done", justify="right", style="green")
    table.add_column("Pending", justify="right")
    table.add_column("In progress", justify="right", style="blue")
    table.add_column("Rate", justify="right")
    table.add_column("")

    peak = max((m.total for m in summary.months), default=0)
    for stats in summary.months:
        table.add_row(
            stats.label,
            str(stats.total),
            str(stats.completed),
            str(stats.pending),
            str(stats.in_progress),
            f"{stats.completion_rate}%",
            _bar(stats.total, peak, width=12) if stats.total else "",
        )

    best = summary.most_productive
    footer = [
        f"[bold]Total:[/bold] {summary.total}",
        f"[bold]Completed:[/bold] {summary.completed} ({summary.completion_rate}%)",
        f"[bold]Monthly average:[/bold] {summary.average_monthly}",
        f"[bold]Most productive:[/bold] {best.label if best else '-'}",
    ]
    return Group(table, "   ".join(footer))


def _group_text(group: TaskGroup) -> str:
    parent = group.parent
    marker = STATUS_MARKERS.get(parent.status, "?")
    text = f"{marker} {_chip(parent)}"
    if group.children:
        if group.expanded:
            for child in group.children:
                child_style = STATUS_STYLES.get(child.status, "white")
                child_marker = STATUS_MARKERS.get(child.status, "?")
                text += f"\n  [{child_style}]{child_marker}[/{child_style}] {_chip(child)}"
        else:
            done = sum(1 for c in group.children if c.status == STATUS_COMPLETED)
            text += f"\n  [dim]▸ {len(group.children)} subtask(s), {done} done[/dim]"
    return text


def render_board(groups: Dict[str, List[TaskGroup]]) -> Columns:
    """Three kanban columns of parent cards with (optionally expanded) subtasks."""
    panels = []
    for status, title in KANBAN_COLUMNS:
        column = groups.get(status, [])
        body = "\n\n".join(_group_text(group) for group in column) or "[dim]Empty[/dim]"
        style = STATUS_STYLES.get(status, "white")
        panels.append(
            Panel(body, title=f"[{style}]{title}[/{style}] ({column_total(column)})", width=40)
        )
    return Columns(panels)


def render_dashboard(
    totals: TaskTotals,
    stats: DashboardStats,
    burndown_points: List[BurndownPoint],
) -> Group:
    cards = Columns(
        [
            Panel(f"[bold]{totals.total}[/bold]", title="Total"),
            Panel(f"[bold green]{totals.completed}[/bold green]", title="Completed"),
            Panel(f"[bold blue]{totals.in_progress}[/bold blue]", title="In progress"),
            Panel(f"[bold]{totals.pending}[/bold]", title="Pending"),
            Panel(f"[bold]{totals.completion_rate}%[/bold]", title="Completion"),
        ]
    )

    counts = Table(title="Breakdown", show_header=True, header_style="bold cyan")
    counts.add_column("Status")
    counts.add_column("#", justify="right")
    counts.add_column("Priority")
    counts.add_column("#", justify="right")
    status_rows = list(stats.status_counts.items())
    priority_rows = list(stats.priority_counts.items())
    for index in range(max(len(status_rows), len(priority_rows))):
        status, s_count = status_rows[index] if index < len(status_rows) else ("", "")
        priority, p_count = priority_rows[index] if index < len(priority_rows) else ("", "")
        counts.add_row(
            status.replace("_", " "),
            str(s_count),
            f"[{PRIORITY_STYLES.get(priority, 'white')}]{priority}[/]" if priority else "",
            str(p_count),
        )

    performance = Table(title="Category performance", header_style="bold cyan")
    performance.add_column("Category")
    performance.add_column("Done", justify="right")
    performance.add_column("Remaining", justify="right")
    performance.add_column("Rate", justify="right")
    performance.add_column("")
    for row in stats.category_performance:
        performance.add_row(
            escape(row.category),
            str(row.completed),
            str(row.remaining),
            f"{row.rate}%",
            _bar(row.rate, 100, width=10, style="green"),
        )

    deadlines = Table(title="Deadlines", header_style="bold cyan")
    deadlines.add_column("Bucket")
    deadlines.add_column("#", justify="right")
    deadlines.add_column("Tasks")
    for bucket in stats.deadline_buckets:
        names = ", ".join(escape(t["title"]) for t in bucket.tasks[:3])
        if bucket.count > 3:
            names += f" [dim]+{bucket.count - 3}[/dim]"
        deadlines.add_row(bucket.category, str(bucket.count), names or "[dim]-[/dim]")

    peak = max((day.count for day in stats.trend_7d), default=0)
    trend_lines = [
        f"{day.label}  {_bar(day.count, peak, width=15)} {day.count}" for day in stats.trend_7d
    ]
    trend = Panel("\n".join(trend_lines), title="Created, last 7 days")

    heat_rows = []
    for start in range(0, len(stats.heatmap_35d), 7):
        week = stats.heatmap_35d[start:start + 7]
        heat_rows.append(" ".join(_heat_cell(day) for day in week))
    heatmap = Panel("\n".join(heat_rows), title="Activity, 35 days")

    radar_lines = [
        f"{metric.metric:<20}{_bar(metric.value, metric.full_mark, width=15, style='magenta')} {metric.value}"
        for metric in stats.productivity_radar
    ]
    radar = Panel("\n".join(radar_lines), title="Productivity")

    burn_lines = [
        f"{point.date[5:]}  remaining {point.remaining:>3}  ideal {point.ideal:>5}"
        for point in burndown_points
    ]
    burn = Panel("\n".join(burn_lines) or "[dim]No history[/dim]", title="Burndown")

    insights = Panel(
        "\n".join(escape(text) for text in stats.insights) or "[dim]No insights yet[/dim]",
        title="Insights",
        border_style="yellow",
    )

    return Group(
        cards,
        Columns([counts, deadlines]),
        performance,
        Columns([trend, heatmap]),
        Columns([radar, burn]),
        insights,
    )
