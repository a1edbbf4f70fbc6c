"""Task endpoint for editing a single backlog item."""

from typing import Optional

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, ConfigDict, Field

from ...models import BacklogItem
from ...store import InvalidUpdateError, StorageError, TaskNotFoundError
from ..deps import get_store, require_uuid

router = APIRouter()


class UpdateTaskRequest(BaseModel):
    """Body of PUT /tasks/{id}. Omitted fields are left unchanged."""
    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True)

    title: Optional[str] = Field(default=None, min_length=3, max_length=500)
    description: Optional[str] = Field(default=None, min_length=1, max_length=2000)
    group_name: Optional[str] = Field(default=None, min_length=1, max_length=255, alias="groupName")


@router.put("/tasks/{task_id}", response_model=BacklogItem)
async def update_task(request: Request, task_id: str, body: UpdateTaskRequest) -> BacklogItem:
    """Edit a task's title, description or group."""
    task_id = require_uuid(task_id, "task")
    try:
        return get_store(request).update_item(
            task_id,
            title=body.title,
            description=body.description,
            group_name=body.group_name,
        )
    except InvalidUpdateError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except TaskNotFoundError:
        raise HTTPException(status_code=404, detail="Task not found")
    except StorageError:
        raise HTTPException(status_code=500, detail="Failed to update task")
