"""Spec endpoints: create, list, read, reorder, group, export, delete."""

from typing import Optional

from fastapi import APIRouter, HTTPException, Query, Request
from fastapi.responses import Response
from pydantic import BaseModel, ConfigDict, Field, field_validator

from ...export import ExportFormat, export_filename, render_export
from ...ids import is_valid_uuid, normalize_id
from ...models import BacklogItem, Spec, SpecSummary, TemplateType
from ...store import (
    InvalidReorderError,
    SpecNotFoundError,
    StorageError,
    TaskNotFoundError,
)
from ..deps import get_store, require_uuid

router = APIRouter()


class CreateSpecRequest(BaseModel):
    """Body of POST /specs."""
    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True)

    goal: str = Field(..., min_length=3, max_length=1000)
    users: str = Field(..., min_length=3, max_length=500)
    constraints: str = Field(default="", max_length=1000)
    template_type: TemplateType = Field(..., alias="templateType")


class TaskIdsRequest(BaseModel):
    """Body carrying a non-empty list of task UUIDs."""
    model_config = ConfigDict(populate_by_name=True)

    task_ids: list[str] = Field(..., min_length=1, alias="taskIds")

    @field_validator("task_ids")
    @classmethod
    def check_uuids(cls, value: list[str]) -> list[str]:
        for task_id in value:
            if not is_valid_uuid(task_id):
                raise ValueError("Each task ID must be a valid UUID")
        return [normalize_id(task_id) for task_id in value]


class GroupRequest(TaskIdsRequest):
    """Body of PUT /specs/{id}/tasks/group."""
    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True)

    group_name: str = Field(..., min_length=1, max_length=255, alias="groupName")


class SpecListResponse(BaseModel):
    specs: list[SpecSummary]


class TaskListResponse(BaseModel):
    message: str
    tasks: list[BacklogItem]


class MessageResponse(BaseModel):
    message: str


@router.post("/specs", response_model=Spec, status_code=201)
async def create_spec(request: Request, body: CreateSpecRequest) -> Spec:
    """Create a spec and generate its backlog."""
    store = get_store(request)
    try:
        return store.create_spec(
            goal=body.goal,
            users=body.users,
            constraints=body.constraints,
            template_type=body.template_type,
        )
    except StorageError:
        raise HTTPException(status_code=500, detail="Failed to create spec. Please try again.")


@router.get("/specs", response_model=SpecListResponse)
async def list_specs(request: Request, limit: Optional[str] = Query(default=None)) -> SpecListResponse:
    """List recent specs, newest first.

    Invalid limits fall back to the configured default; valid ones are
    clamped to [1, max_list_limit].
    """
    config = request.app.state.config
    try:
        count = int(limit) if limit is not None else config.default_list_limit
    except ValueError:
        count = config.default_list_limit
    if count == 0:
        count = config.default_list_limit
    count = min(max(count, 1), config.max_list_limit)

    try:
        return SpecListResponse(specs=get_store(request).list_specs(limit=count))
    except StorageError:
        raise HTTPException(status_code=500, detail="Failed to list specs")


@router.get("/specs/{spec_id}", response_model=Spec)
async def get_spec(request: Request, spec_id: str) -> Spec:
    """Get a spec with its tasks in sort order."""
    spec_id = require_uuid(spec_id, "spec")
    try:
        return get_store(request).get_spec(spec_id)
    except SpecNotFoundError:
        raise HTTPException(status_code=404, detail="Spec not found")
    except StorageError:
        raise HTTPException(status_code=500, detail="Failed to retrieve spec")


@router.put("/specs/{spec_id}/tasks/reorder", response_model=TaskListResponse)
async def reorder_tasks(request: Request, spec_id: str, body: TaskIdsRequest) -> TaskListResponse:
    """Assign sort orders from the position of each id in the list."""
    spec_id = require_uuid(spec_id, "spec")
    try:
        reordered = get_store(request).reorder_items(spec_id, body.task_ids)
    except SpecNotFoundError:
        raise HTTPException(status_code=404, detail="Spec not found")
    except InvalidReorderError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StorageError:
        raise HTTPException(status_code=500, detail="Failed to reorder tasks")

    return TaskListResponse(message="Tasks reordered successfully", tasks=reordered)


@router.put("/specs/{spec_id}/tasks/group", response_model=TaskListResponse)
async def group_tasks(request: Request, spec_id: str, body: GroupRequest) -> TaskListResponse:
    """Put the given tasks into a named group."""
    spec_id = require_uuid(spec_id, "spec")
    try:
        grouped = get_store(request).group_items(spec_id, body.task_ids, body.group_name)
    except SpecNotFoundError:
        raise HTTPException(status_code=404, detail="Spec not found")
    except TaskNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except StorageError:
        raise HTTPException(status_code=500, detail="Failed to group tasks")

    return TaskListResponse(message="Tasks grouped successfully", tasks=grouped)


@router.get("/specs/{spec_id}/export")
async def export_spec(request: Request, spec_id: str, format: str = "markdown") -> Response:
    """Download a spec's backlog as Markdown or plain text."""
    spec_id = require_uuid(spec_id, "spec")
    try:
        fmt = ExportFormat(format)
    except ValueError:
        raise HTTPException(status_code=400, detail="Format must be 'markdown' or 'text'")

    try:
        spec = get_store(request).get_spec(spec_id)
    except SpecNotFoundError:
        raise HTTPException(status_code=404, detail="Spec not found")
    except StorageError:
        raise HTTPException(status_code=500, detail="Failed to export spec")

    return Response(
        content=render_export(spec, fmt),
        media_type=fmt.media_type,
        headers={"Content-Disposition": f'attachment; filename="{export_filename(spec, fmt)}"'},
    )


@router.delete("/specs/{spec_id}", response_model=MessageResponse)
async def delete_spec(request: Request, spec_id: str) -> MessageResponse:
    """Delete a spec and its tasks."""
    spec_id = require_uuid(spec_id, "spec")
    try:
        get_store(request).delete_spec(spec_id)
    except SpecNotFoundError:
        raise HTTPException(status_code=404, detail="Spec not found")
    except StorageError:
        raise HTTPException(status_code=500, detail="Failed to delete spec")

    return MessageResponse(message="Spec deleted successfully")
