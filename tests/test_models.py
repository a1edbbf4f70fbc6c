"""Tests for the data models."""

import json

import pytest
from pydantic import ValidationError

from tasks_generator.models import (
    AppConfig, BacklogItem, Spec, TaskCategory, TemplateType, UNGROUPED
)


class TestBacklogItem:
    def test_defaults(self):
        item = BacklogItem(spec_id="s", category=TaskCategory.RISK, title="T", description="D")

        assert item.group_name == UNGROUPED
        assert item.sort_order == 0
        assert not item.is_grouped

    def test_accepts_camel_case_aliases(self):
        item = BacklogItem.model_validate({
            "specId": "s",
            "category": "user_story",
            "title": "T",
            "description": "D",
            "groupName": "MVP",
            "sortOrder": 3,
        })

        assert item.spec_id == "s"
        assert item.group_name == "MVP"
        assert item.sort_order == 3
        assert item.is_grouped

    def test_rejects_unknown_category(self):
        with pytest.raises(ValidationError):
            BacklogItem(spec_id="s", category="epic", title="T", description="D")

    def test_rejects_negative_sort_order(self):
        with pytest.raises(ValidationError):
            BacklogItem(spec_id="s", category=TaskCategory.RISK, title="T", description="D", sort_order=-1)

    def test_rejects_empty_title(self):
        with pytest.raises(ValidationError):
            BacklogItem(spec_id="s", category=TaskCategory.RISK, title="", description="D")


class TestSpec:
    def _spec(self):
        return Spec(
            id="s",
            goal="g",
            users="u",
            template_type=TemplateType.WEB,
            tasks=[
                BacklogItem(id="b", spec_id="s", category=TaskCategory.RISK, title="R", description="D", sort_order=2),
                BacklogItem(id="a", spec_id="s", category=TaskCategory.USER_STORY, title="S", description="D", sort_order=0),
                BacklogItem(id="c", spec_id="s", category=TaskCategory.RISK, title="R2", description="D", sort_order=1),
            ],
        )

    def test_sorted_tasks(self):
        assert [t.id for t in self._spec().sorted_tasks()] == ["a", "c", "b"]

    def test_tasks_by_category(self):
        assert [t.id for t in self._spec().tasks_by_category(TaskCategory.RISK)] == ["c", "b"]

    def test_get_task(self):
        spec = self._spec()
        assert spec.get_task("b").title == "R"
        assert spec.get_task("missing") is None

    def test_wire_format_uses_aliases(self):
        data = json.loads(self._spec().model_dump_json(by_alias=True))

        assert data["templateType"] == "web"
        assert "sortOrder" in data["tasks"][0]


class TestAppConfig:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("TASKSGEN_DATA_DIR", raising=False)
        monkeypatch.delenv("TASKSGEN_CORS_ORIGIN", raising=False)

        config = AppConfig.load()

        assert config.data_dir == ".tasksgen"
        assert config.cors_origins == ["*"]
        assert config.default_list_limit == 5

    def test_config_file_overrides(self, tmp_path, monkeypatch):
        monkeypatch.delenv("TASKSGEN_CORS_ORIGIN", raising=False)
        (tmp_path / "config.json").write_text(json.dumps({"default_list_limit": 10, "data_dir": "ignored"}))

        config = AppConfig.load(tmp_path)

        assert config.default_list_limit == 10
        assert config.data_dir == str(tmp_path)

    def test_environment_overrides(self, tmp_path, monkeypatch):
        monkeypatch.setenv("TASKSGEN_DATA_DIR", str(tmp_path))
        monkeypatch.setenv("TASKSGEN_CORS_ORIGIN", "http://a.test, http://b.test")

        config = AppConfig.load()

        assert config.data_path == tmp_path
        assert config.cors_origins == ["http://a.test", "http://b.test"]
