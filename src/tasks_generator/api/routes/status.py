"""Status endpoint for backend and storage health."""

import time
from typing import Optional

from fastapi import APIRouter, Request
from pydantic import BaseModel

from ...store import StorageError
from ..deps import get_store

router = APIRouter()


class BackendStatus(BaseModel):
    status: str = "healthy"
    uptime: int = 0


class StorageStatus(BaseModel):
    status: str
    latency_ms: Optional[int] = None
    error: Optional[str] = None


class ServiceStatus(BaseModel):
    """Current status of the service."""
    backend: BackendStatus
    storage: StorageStatus


@router.get("/status", response_model=ServiceStatus, response_model_exclude_none=True)
async def get_status(request: Request) -> ServiceStatus:
    """Report uptime and whether the data directory is writable."""
    uptime = int(time.monotonic() - request.app.state.started_at)

    start = time.monotonic()
    try:
        get_store(request).check_health()
        storage = StorageStatus(
            status="connected",
            latency_ms=int((time.monotonic() - start) * 1000),
        )
    except StorageError as e:
        storage = StorageStatus(status="disconnected", error=str(e))

    return ServiceStatus(backend=BackendStatus(uptime=uptime), storage=storage)
