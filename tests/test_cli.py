"""Tests for the command line interface."""

import pytest
from click.testing import CliRunner

from tasks_generator.cli import main
from tasks_generator.models import UNGROUPED
from tasks_generator.store import BacklogStore


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def invoke(runner, data_dir):
    def _invoke(*args, **kwargs):
        return runner.invoke(main, ["--data-dir", str(data_dir), *args], **kwargs)
    return _invoke


@pytest.fixture
def saved_spec(invoke, data_dir):
    result = invoke(
        "generate", "--goal", "Track attendance", "--users", "students and teachers",
        "--constraints", "strict deadline", "--template", "internal",
    )
    assert result.exit_code == 0, result.output
    (spec,) = BacklogStore(data_dir).list_specs()
    return BacklogStore(data_dir).get_spec(spec.id)


class TestGenerate:
    def test_saves_spec(self, saved_spec):
        # 8 stories + 12 engineering + 3 base risks + timeline risk + internal risk
        assert len(saved_spec.tasks) == 25

    def test_dry_run_saves_nothing(self, invoke, data_dir):
        result = invoke("generate", "--goal", "Ship app", "--users", "riders", "--template", "mobile", "--dry-run")

        assert result.exit_code == 0
        assert "Dry run complete" in result.output
        assert BacklogStore(data_dir).list_specs() == []


class TestQueries:
    def test_list(self, invoke, saved_spec):
        result = invoke("list")

        assert result.exit_code == 0
        assert saved_spec.id[:8] in result.output

    def test_list_empty(self, invoke):
        result = invoke("list")

        assert "No specs yet" in result.output

    def test_show_missing(self, invoke):
        result = invoke("show", "missing")

        assert result.exit_code == 1
        assert "Spec not found" in result.output


class TestEdits:
    def test_group_with_prefixes(self, invoke, saved_spec, data_dir):
        first, second = saved_spec.tasks[0].id, saved_spec.tasks[1].id

        result = invoke("group", saved_spec.id, "MVP", first[:8], second)

        assert result.exit_code == 0, result.output
        tasks = BacklogStore(data_dir).get_spec(saved_spec.id).tasks
        assert [t.group_name for t in tasks[:3]] == ["MVP", "MVP", UNGROUPED]

    def test_reorder_move(self, invoke, saved_spec, data_dir):
        last = saved_spec.tasks[-1].id

        result = invoke("reorder", saved_spec.id, "--move", last, "--to", "0")

        assert result.exit_code == 0, result.output
        tasks = BacklogStore(data_dir).get_spec(saved_spec.id).tasks
        assert tasks[0].id == last
        assert [t.sort_order for t in tasks] == list(range(len(tasks)))

    def test_reorder_incomplete_list_fails(self, invoke, saved_spec):
        result = invoke("reorder", saved_spec.id, saved_spec.tasks[0].id)

        assert result.exit_code == 1

    def test_edit(self, invoke, saved_spec, data_dir):
        task_id = saved_spec.tasks[2].id

        result = invoke("edit", saved_spec.id, task_id, "--title", "Renamed task")

        assert result.exit_code == 0, result.output
        assert BacklogStore(data_dir).get_spec(saved_spec.id).tasks[2].title == "Renamed task"

    def test_delete(self, invoke, saved_spec, data_dir):
        result = invoke("delete", saved_spec.id, "--yes")

        assert result.exit_code == 0
        assert BacklogStore(data_dir).list_specs() == []


class TestExport:
    def test_export_to_stdout(self, invoke, saved_spec):
        result = invoke("export", saved_spec.id, "--format", "text", "-o", "-")

        assert result.exit_code == 0
        assert result.output.startswith("SPEC: Track attendance")

    def test_export_to_file(self, invoke, saved_spec, tmp_path):
        target = tmp_path / "out.md"

        result = invoke("export", saved_spec.id, "-o", str(target))

        assert result.exit_code == 0
        assert target.read_text().startswith("# Track attendance")


class TestEvents:
    def test_events_listed(self, invoke, saved_spec):
        result = invoke("events", "--spec", saved_spec.id)

        assert result.exit_code == 0
        assert "spec_created" in result.output

    def test_zero_lines_shows_nothing(self, invoke, saved_spec):
        result = invoke("events", "--lines", "0")

        assert result.exit_code == 0
        assert "No events recorded yet" in result.output
        assert "spec_created" not in result.output


class TestIdentifiers:
    def test_path_like_spec_id_rejected(self, invoke, saved_spec, data_dir):
        config_file = data_dir / "config.json"
        config_file.write_text("{}")

        result = invoke("delete", "../config", "--yes")

        assert result.exit_code == 1
        assert "Spec not found" in result.output
        assert config_file.exists()
