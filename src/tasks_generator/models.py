"""Data models for the tasks generator.

Uses Pydantic for validation. Field aliases follow the camelCase JSON wire
format used by the HTTP API; storage files use the snake_case field names.
"""

import os
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# Default group label for items that have not been assigned to a group
UNGROUPED = "ungrouped"


class TemplateType(str, Enum):
    """Platform type selecting which task and risk rules apply."""
    WEB = "web"
    MOBILE = "mobile"
    INTERNAL = "internal"


class TaskCategory(str, Enum):
    """Category of a backlog item."""
    USER_STORY = "user_story"
    ENGINEERING_TASK = "engineering_task"
    RISK = "risk"


class GeneratorInput(BaseModel):
    """Input record for a single generation run.

    Callers are expected to have validated lengths already; the generator
    performs no further checks.
    """
    spec_id: str
    goal: str
    users: str
    constraints: str = ""
    template_type: TemplateType


class BacklogItem(BaseModel):
    """A single user story, engineering task or risk in a backlog."""
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = Field(default=None, description="Assigned when the item is stored")
    spec_id: str = Field(..., alias="specId")
    category: TaskCategory
    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    group_name: str = Field(default=UNGROUPED, alias="groupName")
    sort_order: int = Field(default=0, ge=0, alias="sortOrder")

    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")

    @property
    def is_grouped(self) -> bool:
        """Whether the item carries a group label other than the default."""
        return self.group_name != UNGROUPED


class Spec(BaseModel):
    """A project description and the backlog generated from it."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    goal: str
    users: str
    constraints: str = ""
    template_type: TemplateType = Field(..., alias="templateType")
    created_at: datetime = Field(default_factory=datetime.now, alias="createdAt")
    updated_at: datetime = Field(default_factory=datetime.now, alias="updatedAt")
    tasks: list[BacklogItem] = Field(default_factory=list)

    def sorted_tasks(self) -> list[BacklogItem]:
        """Tasks ordered by sort order."""
        return sorted(self.tasks, key=lambda t: t.sort_order)

    def tasks_by_category(self, category: TaskCategory) -> list[BacklogItem]:
        """Tasks of one category, ordered by sort order."""
        return [t for t in self.sorted_tasks() if t.category == category]

    def get_task(self, task_id: str) -> Optional[BacklogItem]:
        for t in self.tasks:
            if t.id == task_id:
                return t
        return None


class SpecSummary(BaseModel):
    """Lightweight listing entry for a stored spec."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    goal: str
    template_type: TemplateType = Field(..., alias="templateType")
    task_count: int = Field(default=0, alias="taskCount")
    created_at: datetime = Field(..., alias="createdAt")


class EventType(str, Enum):
    """Types of entries written to the event log."""
    SPEC_CREATED = "spec_created"
    SPEC_DELETED = "spec_deleted"
    TASK_UPDATED = "task_updated"
    TASKS_REORDERED = "tasks_reordered"
    TASKS_GROUPED = "tasks_grouped"
    ERROR = "error"


class AppConfig(BaseModel):
    """Configuration for the store, API and CLI.

    Values come from defaults, then an optional config.json in the data
    directory, then environment variables.
    """
    data_dir: str = Field(
        default=".tasksgen",
        description="Directory holding spec files, config.json and the event log"
    )
    cors_origins: list[str] = Field(
        default_factory=lambda: ["*"],
        description="Allowed CORS origins for the HTTP API"
    )
    default_list_limit: int = Field(
        default=5,
        description="Number of specs returned by a listing when no limit is given"
    )
    max_list_limit: int = Field(
        default=100,
        description="Upper bound on the listing limit"
    )
    event_log_enabled: bool = Field(
        default=True,
        description="Write store mutations to events.jsonl"
    )

    @property
    def data_path(self) -> Path:
        return Path(self.data_dir)

    @classmethod
    def load(cls, data_dir: Optional[Path | str] = None) -> "AppConfig":
        """Load configuration.

        Args:
            data_dir: Data directory override. Falls back to the
                TASKSGEN_DATA_DIR environment variable, then the default.

        Returns:
            Merged AppConfig.
        """
        data_dir = data_dir or os.environ.get("TASKSGEN_DATA_DIR")
        config = cls() if data_dir is None else cls(data_dir=str(data_dir))

        config_file = config.data_path / "config.json"
        if config_file.exists():
            overrides = cls.model_validate_json(config_file.read_text(encoding="utf-8"))
            fields_set = overrides.model_fields_set - {"data_dir"}
            config = config.model_copy(
                update={name: getattr(overrides, name) for name in fields_set}
            )

        cors_origin = os.environ.get("TASKSGEN_CORS_ORIGIN")
        if cors_origin:
            config.cors_origins = [o.strip() for o in cors_origin.split(",") if o.strip()]

        return config
