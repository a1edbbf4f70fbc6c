"""Markdown and plain-text export of a stored backlog.

Both formats list the spec metadata followed by one numbered section per
category. Empty sections are omitted. Stories and engineering tasks carry a
group annotation unless they are ungrouped; risks never do.
"""

from enum import Enum

from .models import BacklogItem, Spec, TaskCategory


FOOTER = "Generated by Tasks Generator"


class ExportFormat(str, Enum):
    """Supported export formats."""
    MARKDOWN = "markdown"
    TEXT = "text"

    @property
    def extension(self) -> str:
        return "md" if self is ExportFormat.MARKDOWN else "txt"

    @property
    def media_type(self) -> str:
        return "text/markdown" if self is ExportFormat.MARKDOWN else "text/plain"


# (category, markdown heading, text heading, annotate groups)
SECTIONS: tuple[tuple[TaskCategory, str, str, bool], ...] = (
    (TaskCategory.USER_STORY, "User Stories", "USER STORIES", True),
    (TaskCategory.ENGINEERING_TASK, "Engineering Tasks", "ENGINEERING TASKS", True),
    (TaskCategory.RISK, "Risks & Unknowns", "RISKS & UNKNOWNS", False),
)


def build_markdown_export(spec: Spec) -> str:
    """Render a spec and its tasks as Markdown.

    Args:
        spec: Spec with tasks

    Returns:
        Markdown document
    """
    lines = [
        f"# {spec.goal}",
        "",
        f"**Template:** {spec.template_type.value}",
        f"**Users:** {spec.users}",
        f"**Constraints:** {spec.constraints or 'None'}",
        f"**Created:** {spec.created_at.isoformat()}",
        "",
    ]

    for category, heading, _, annotate in SECTIONS:
        items = spec.tasks_by_category(category)
        if not items:
            continue
        lines.append(f"## {heading}")
        lines.append("")
        for i, item in enumerate(items, start=1):
            lines.append(f"### {i}. {item.title}")
            lines.append("")
            lines.append(item.description)
            if annotate and item.is_grouped:
                lines.append(f"> Group: {item.group_name}")
            lines.append("")

    lines.append("---")
    lines.append(f"*{FOOTER}*")
    return "\n".join(lines)


def build_text_export(spec: Spec) -> str:
    """Render a spec and its tasks as plain text.

    Args:
        spec: Spec with tasks

    Returns:
        Plain-text document
    """
    lines = [
        f"SPEC: {spec.goal}",
        f"Template: {spec.template_type.value}",
        f"Users: {spec.users}",
        f"Constraints: {spec.constraints or 'None'}",
        f"Created: {spec.created_at.isoformat()}",
        "",
        "=" * 60,
    ]

    for category, _, heading, annotate in SECTIONS:
        items = spec.tasks_by_category(category)
        if not items:
            continue
        if category is TaskCategory.USER_STORY:
            lines.append("")
        lines.append(heading)
        lines.append("-" * 40)
        for i, item in enumerate(items, start=1):
            lines.extend(_text_item(i, item, annotate))

    lines.append("=" * 60)
    lines.append(FOOTER)
    return "\n".join(lines)


def _text_item(number: int, item: BacklogItem, annotate: bool) -> list[str]:
    lines = [
        f"  {number}. {item.title}",
        f"     {item.description}",
    ]
    if annotate and item.is_grouped:
        lines.append(f"     [Group: {item.group_name}]")
    lines.append("")
    return lines


def render_export(spec: Spec, fmt: ExportFormat | str = ExportFormat.MARKDOWN) -> str:
    """Render a spec in the requested format."""
    if ExportFormat(fmt) is ExportFormat.TEXT:
        return build_text_export(spec)
    return build_markdown_export(spec)


def export_filename(spec: Spec, fmt: ExportFormat | str = ExportFormat.MARKDOWN) -> str:
    return f"spec-{spec.id}.{ExportFormat(fmt).extension}"
