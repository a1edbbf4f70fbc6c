"""API routes for the tasks generator."""

from . import status, specs, tasks

__all__ = ["status", "specs", "tasks"]
