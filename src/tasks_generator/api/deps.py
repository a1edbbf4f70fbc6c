"""Request helpers shared by the route modules."""

from fastapi import HTTPException, Request

from ..ids import is_valid_uuid, normalize_id
from ..store import BacklogStore


def get_store(request: Request) -> BacklogStore:
    """Get the backlog store from app state."""
    return request.app.state.store


def require_uuid(value: str, kind: str) -> str:
    """Reject malformed ids before touching the store.

    Returns:
        The id in its canonical lower-case form.

    Raises:
        HTTPException: 400 if `value` is not a UUID.
    """
    if not is_valid_uuid(value):
        raise HTTPException(status_code=400, detail=f"Invalid {kind} ID format")
    return normalize_id(value)
