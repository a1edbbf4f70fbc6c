"""JSON-file storage for specs and their backlog items.

Directory structure:
    <data_dir>/
    ├── config.json        # Optional AppConfig overrides
    ├── events.jsonl       # Event log (see event_log.py)
    └── specs/
        └── {spec_id}.json # Spec with its tasks

Every mutation runs under a single store lock and is written with an atomic
file replace, so a reorder or group operation lands as a unit. Concurrent
writers are not arbitrated beyond that: the last write wins.
"""

import os
import threading
import uuid
from datetime import datetime
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from .event_log import EventLogger
from .generation import BacklogGenerator
from .ids import is_valid_uuid, normalize_id
from .models import (
    AppConfig,
    BacklogItem,
    EventType,
    GeneratorInput,
    Spec,
    SpecSummary,
    TemplateType,
)


class StoreError(Exception):
    """Base class for store failures."""
    pass


class SpecNotFoundError(StoreError):
    """Raised if a requested spec id is not in the store."""

    def __init__(self, spec_id: str):
        super().__init__(f"Spec not found: {spec_id}")
        self.spec_id = spec_id


class TaskNotFoundError(StoreError):
    """Raised if a requested task id is not in the store or the given spec."""

    def __init__(self, task_id: str):
        super().__init__(f"Task not found: {task_id}")
        self.task_id = task_id


class InvalidReorderError(StoreError):
    """Raised if a reorder list is not a permutation of the spec's task ids."""
    pass


class InvalidUpdateError(StoreError):
    """Raised if a task update carries no fields."""
    pass


class StorageError(StoreError):
    """Raised on I/O failures or unreadable spec files. Safe to retry."""
    pass


class BacklogStore:
    """Persists specs and applies edits, reorders and groupings to their tasks."""

    def __init__(
        self,
        data_dir: Path | str,
        generator: Optional[BacklogGenerator] = None,
        event_logger: Optional[EventLogger] = None,
    ):
        """Initialize the store.

        Args:
            data_dir: Root directory for spec files.
            generator: Generator used by create_spec (default rules if omitted).
            event_logger: Event log for mutations (events.jsonl in data_dir if omitted).
        """
        self.data_dir = Path(data_dir)
        self.specs_dir = self.data_dir / "specs"
        self.generator = generator or BacklogGenerator()
        self.events = event_logger or EventLogger(self.data_dir)
        self._lock = threading.RLock()

    @classmethod
    def from_config(cls, config: AppConfig) -> "BacklogStore":
        """Build a store from application configuration."""
        return cls(
            config.data_path,
            event_logger=EventLogger(config.data_path, enabled=config.event_log_enabled),
        )

    def ensure_structure(self) -> None:
        """Create the data directories if they don't exist."""
        self.specs_dir.mkdir(parents=True, exist_ok=True)

    def check_health(self) -> None:
        """Verify the data directory is writable.

        Raises:
            StorageError: If the directory can't be created or written.
        """
        try:
            self.ensure_structure()
            probe = self.data_dir / ".health"
            probe.write_text("ok", encoding="utf-8")
            probe.unlink()
        except OSError as e:
            raise StorageError(f"Data directory not writable: {e}") from e

    # =========================================================================
    # File I/O
    # =========================================================================

    def _spec_path(self, spec_id: str) -> Path:
        # Anything but a UUID could name a file outside specs/
        if not is_valid_uuid(spec_id):
            raise SpecNotFoundError(spec_id)
        return self.specs_dir / f"{normalize_id(spec_id)}.json"

    def _load(self, spec_id: str) -> Spec:
        path = self._spec_path(spec_id)
        if not path.exists():
            raise SpecNotFoundError(spec_id)
        try:
            return Spec.model_validate_json(path.read_text(encoding="utf-8"))
        except (OSError, ValidationError) as e:
            raise StorageError(f"Could not read spec {spec_id}: {e}") from e

    def _save(self, spec: Spec) -> None:
        path = self._spec_path(spec.id)
        tmp_path = path.with_suffix(".json.tmp")
        try:
            self.ensure_structure()
            tmp_path.write_text(spec.model_dump_json(indent=2), encoding="utf-8")
            os.replace(tmp_path, path)
        except OSError as e:
            self.events.log(EventType.ERROR, spec_id=spec.id, error=str(e))
            raise StorageError(f"Could not write spec {spec.id}: {e}") from e

    def _all_specs(self) -> list[Spec]:
        """Load every readable spec.

        Unreadable files are skipped and recorded as error events.
        """
        if not self.specs_dir.exists():
            return []

        specs = []
        for path in sorted(self.specs_dir.glob("*.json")):
            if not is_valid_uuid(path.stem):
                continue
            try:
                specs.append(self._load(path.stem))
            except SpecNotFoundError:
                continue  # Deleted between glob and read
            except StorageError as e:
                self.events.log(EventType.ERROR, spec_id=path.stem, error=str(e))
        return specs

    # =========================================================================
    # Spec operations
    # =========================================================================

    def create_spec(
        self,
        goal: str,
        users: str,
        template_type: TemplateType | str,
        constraints: str = "",
    ) -> Spec:
        """Store a new spec together with its generated backlog.

        Args:
            goal: Project goal.
            users: Target users, comma/semicolon/"and" separated.
            template_type: Platform type.
            constraints: Free-text constraints.

        Returns:
            The stored spec with its tasks.
        """
        now = datetime.now()
        spec = Spec(
            id=str(uuid.uuid4()),
            goal=goal,
            users=users,
            constraints=constraints,
            template_type=TemplateType(template_type),
            created_at=now,
            updated_at=now,
        )

        items = self.generator.generate_all(GeneratorInput(
            spec_id=spec.id,
            goal=goal,
            users=users,
            constraints=constraints,
            template_type=spec.template_type,
        ))
        for item in items:
            item.id = str(uuid.uuid4())
            item.created_at = now
            item.updated_at = now
        spec.tasks = items

        with self._lock:
            self._save(spec)

        self.events.log(EventType.SPEC_CREATED, spec_id=spec.id, task_count=len(items))
        return spec

    def get_spec(self, spec_id: str) -> Spec:
        """Load a spec with its tasks sorted by sort order.

        Raises:
            SpecNotFoundError: If the spec doesn't exist.
        """
        spec = self._load(spec_id)
        spec.tasks = spec.sorted_tasks()
        return spec

    def list_specs(self, limit: int = 5) -> list[SpecSummary]:
        """List the most recently created specs, newest first."""
        specs = sorted(self._all_specs(), key=lambda s: s.created_at, reverse=True)
        return [
            SpecSummary(
                id=s.id,
                goal=s.goal,
                template_type=s.template_type,
                task_count=len(s.tasks),
                created_at=s.created_at,
            )
            for s in specs[:limit]
        ]

    def delete_spec(self, spec_id: str) -> None:
        """Delete a spec and all of its tasks.

        Raises:
            SpecNotFoundError: If the spec doesn't exist.
        """
        with self._lock:
            path = self._spec_path(spec_id)
            if not path.exists():
                raise SpecNotFoundError(spec_id)
            try:
                path.unlink()
            except OSError as e:
                raise StorageError(f"Could not delete spec {spec_id}: {e}") from e

        self.events.log(EventType.SPEC_DELETED, spec_id=spec_id)

    # =========================================================================
    # Task operations
    # =========================================================================

    def find_task(self, task_id: str) -> tuple[Spec, BacklogItem]:
        """Locate a task across all specs.

        Raises:
            TaskNotFoundError: If no spec holds the task.
        """
        task_id = normalize_id(task_id)
        for spec in self._all_specs():
            task = spec.get_task(task_id)
            if task:
                return spec, task
        raise TaskNotFoundError(task_id)

    def update_item(
        self,
        task_id: str,
        title: Optional[str] = None,
        description: Optional[str] = None,
        group_name: Optional[str] = None,
    ) -> BacklogItem:
        """Edit a task's title, description or group.

        Only the fields passed are changed.

        Raises:
            InvalidUpdateError: If no field is given or a given field is blank.
            TaskNotFoundError: If the task doesn't exist.
        """
        updates = {
            name: value
            for name, value in (("title", title), ("description", description), ("group_name", group_name))
            if value is not None
        }
        if not updates:
            raise InvalidUpdateError("No fields to update")
        empty = [name for name, value in updates.items() if not value.strip()]
        if empty:
            raise InvalidUpdateError(f"Fields must not be empty: {', '.join(empty)}")

        with self._lock:
            spec, task = self.find_task(task_id)
            for name, value in updates.items():
                setattr(task, name, value)
            task.updated_at = datetime.now()
            spec.updated_at = task.updated_at
            self._save(spec)

        self.events.log(EventType.TASK_UPDATED, spec_id=spec.id, task_id=task_id, fields=sorted(updates))
        return task

    def reorder_items(self, spec_id: str, task_ids: list[str]) -> list[BacklogItem]:
        """Set each task's sort order to its position in `task_ids`.

        Args:
            spec_id: Owning spec.
            task_ids: Every task id of the spec, exactly once, in the new order.

        Returns:
            The spec's tasks sorted by their new sort order.

        Raises:
            SpecNotFoundError: If the spec doesn't exist.
            InvalidReorderError: If task_ids isn't a permutation of the spec's tasks.
        """
        with self._lock:
            spec = self._load(spec_id)
            by_id = {t.id: t for t in spec.tasks}
            task_ids = [normalize_id(tid) for tid in task_ids]

            if len(task_ids) != len(set(task_ids)):
                raise InvalidReorderError("Task id list contains duplicates")
            unknown = [tid for tid in task_ids if tid not in by_id]
            if unknown:
                raise InvalidReorderError(f"Tasks not in spec {spec_id}: {', '.join(unknown)}")
            if len(task_ids) != len(by_id):
                missing = len(by_id) - len(task_ids)
                raise InvalidReorderError(f"Task id list omits {missing} task(s) of spec {spec_id}")

            now = datetime.now()
            for index, tid in enumerate(task_ids):
                task = by_id[tid]
                if task.sort_order != index:
                    task.sort_order = index
                    task.updated_at = now
            spec.updated_at = now
            self._save(spec)

        self.events.log(EventType.TASKS_REORDERED, spec_id=spec_id, task_count=len(task_ids))
        return spec.sorted_tasks()

    def group_items(self, spec_id: str, task_ids: list[str], group_name: str) -> list[BacklogItem]:
        """Set `group_name` on exactly the given tasks.

        Sort order and all other fields are left untouched, as are tasks not
        named in `task_ids`.

        Returns:
            The spec's tasks sorted by sort order.

        Raises:
            SpecNotFoundError: If the spec doesn't exist.
            TaskNotFoundError: If a task id doesn't belong to the spec.
        """
        with self._lock:
            spec = self._load(spec_id)
            by_id = {t.id: t for t in spec.tasks}
            task_ids = [normalize_id(tid) for tid in task_ids]

            for tid in task_ids:
                if tid not in by_id:
                    raise TaskNotFoundError(tid)

            now = datetime.now()
            for tid in task_ids:
                by_id[tid].group_name = group_name
                by_id[tid].updated_at = now
            spec.updated_at = now
            self._save(spec)

        self.events.log(
            EventType.TASKS_GROUPED,
            spec_id=spec_id,
            group_name=group_name,
            task_count=len(set(task_ids)),
        )
        return spec.sorted_tasks()
