"""Rich formatting utilities for CLI display.

Provides table formatting for:
- Spec listings
- A single backlog, grouped by category
- The event log
"""

from datetime import datetime

from rich.markup import escape
from rich.table import Table

from .models import BacklogItem, SpecSummary, TaskCategory, UNGROUPED


CATEGORY_LABELS: dict[TaskCategory, str] = {
    TaskCategory.USER_STORY: "story",
    TaskCategory.ENGINEERING_TASK: "engineering",
    TaskCategory.RISK: "risk",
}

CATEGORY_COLORS: dict[TaskCategory, str] = {
    TaskCategory.USER_STORY: "green",
    TaskCategory.ENGINEERING_TASK: "blue",
    TaskCategory.RISK: "red",
}


def format_timestamp(value: datetime | str | None) -> str:
    """Format a datetime or ISO string as "YYYY-MM-DD HH:MM"."""
    if value is None:
        return "-"
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value)
        except ValueError:
            return value
    return value.strftime("%Y-%m-%d %H:%M")


def format_spec_list(specs: list[SpecSummary]) -> Table:
    """Format spec summaries as a Rich table.

    Args:
        specs: Spec summaries, newest first

    Returns:
        Rich Table
    """
    table = Table(title="Specs", show_header=True, header_style="bold cyan")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Goal", style="white")
    table.add_column("Template")
    table.add_column("Tasks", justify="right")
    table.add_column("Created", justify="right")

    for spec in specs:
        goal = spec.goal if len(spec.goal) <= 50 else spec.goal[:47] + "..."
        table.add_row(
            spec.id,
            escape(goal),
            spec.template_type.value,
            str(spec.task_count),
            format_timestamp(spec.created_at),
        )

    return table


def format_task_table(tasks: list[BacklogItem], title: str = "Backlog") -> Table:
    """Format backlog items as a Rich table in sort order.

    Args:
        tasks: Backlog items
        title: Table title

    Returns:
        Rich Table
    """
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Category")
    table.add_column("Title", style="white")
    table.add_column("Group")
    table.add_column("ID", style="dim", no_wrap=True)

    for task in sorted(tasks, key=lambda t: t.sort_order):
        color = CATEGORY_COLORS[task.category]
        group = escape(task.group_name) if task.group_name != UNGROUPED else "[dim]-[/dim]"
        table.add_row(
            str(task.sort_order),
            f"[{color}]{CATEGORY_LABELS[task.category]}[/{color}]",
            escape(task.title),
            group,
            (task.id or "")[:8],
        )

    return table


def format_event_list(events: list[dict]) -> Table:
    """Format event log entries as a Rich table."""
    table = Table(title="Events", show_header=True, header_style="bold cyan")
    table.add_column("Time", no_wrap=True)
    table.add_column("Type", style="cyan")
    table.add_column("Spec", style="dim", no_wrap=True)
    table.add_column("Details")

    for event in events:
        details = ", ".join(
            f"{key}={value}"
            for key, value in event.items()
            if key not in ("type", "timestamp", "spec_id")
        )
        style = "red" if event.get("type") == "error" else "white"
        table.add_row(
            format_timestamp(event.get("timestamp")),
            event.get("type", "?"),
            (event.get("spec_id") or "")[:8],
            f"[{style}]{escape(details)}[/{style}]" if details else "",
        )

    return table
