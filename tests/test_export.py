"""Tests for Markdown and plain-text export."""

from datetime import datetime

import pytest

from tasks_generator.export import (
    ExportFormat,
    build_markdown_export,
    build_text_export,
    export_filename,
    render_export,
)
from tasks_generator.models import BacklogItem, Spec, TaskCategory, TemplateType


def _item(category, title, order, group="ungrouped"):
    return BacklogItem(
        id=f"t{order}",
        spec_id="s1",
        category=category,
        title=title,
        description=f"{title} description",
        group_name=group,
        sort_order=order,
    )


@pytest.fixture
def spec():
    return Spec(
        id="s1",
        goal="Track attendance",
        users="students",
        constraints="",
        template_type=TemplateType.WEB,
        created_at=datetime(2024, 5, 1, 12, 0),
        tasks=[
            _item(TaskCategory.USER_STORY, "Story B", 1, group="MVP"),
            _item(TaskCategory.USER_STORY, "Story A", 0),
            _item(TaskCategory.ENGINEERING_TASK, "Setup", 2, group="Sprint 1"),
            _item(TaskCategory.RISK, "Scope creep", 3, group="Watch"),
        ],
    )


class TestMarkdownExport:
    def test_header(self, spec):
        lines = build_markdown_export(spec).split("\n")

        assert lines[0] == "# Track attendance"
        assert "**Template:** web" in lines
        assert "**Constraints:** None" in lines
        assert "**Created:** 2024-05-01T12:00:00" in lines

    def test_sections_numbered_in_sort_order(self, spec):
        output = build_markdown_export(spec)

        assert output.index("### 1. Story A") < output.index("### 2. Story B")
        assert "## Engineering Tasks\n\n### 1. Setup" in output
        assert "## Risks & Unknowns\n\n### 1. Scope creep" in output

    def test_group_annotations(self, spec):
        output = build_markdown_export(spec)

        assert "Story B description\n> Group: MVP" in output
        assert "> Group: Sprint 1" in output
        assert "> Group: Watch" not in output
        assert "Story A description\n\n" in output

    def test_empty_section_omitted(self, spec):
        spec.tasks = [t for t in spec.tasks if t.category != TaskCategory.ENGINEERING_TASK]

        assert "## Engineering Tasks" not in build_markdown_export(spec)

    def test_footer(self, spec):
        assert build_markdown_export(spec).endswith("---\n*Generated by Tasks Generator*")


class TestTextExport:
    def test_layout(self, spec):
        output = build_text_export(spec)

        assert output.startswith("SPEC: Track attendance\nTemplate: web\n")
        assert "=" * 60 + "\n\nUSER STORIES\n" + "-" * 40 in output
        assert "  1. Story A\n     Story A description\n" in output
        assert "     [Group: MVP]" in output
        assert "[Group: Watch]" not in output
        assert output.endswith("=" * 60 + "\nGenerated by Tasks Generator")


class TestRenderExport:
    def test_dispatch(self, spec):
        assert render_export(spec, "text").startswith("SPEC:")
        assert render_export(spec, ExportFormat.MARKDOWN).startswith("# ")

    def test_unknown_format(self, spec):
        with pytest.raises(ValueError):
            render_export(spec, "pdf")

    def test_filename(self, spec):
        assert export_filename(spec, "markdown") == "spec-s1.md"
        assert export_filename(spec, ExportFormat.TEXT) == "spec-s1.txt"
