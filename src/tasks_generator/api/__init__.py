"""HTTP API for the tasks generator.

Provides REST endpoints for creating, editing and exporting backlogs.
"""

from .main import create_app, run_server

__all__ = ["create_app", "run_server"]
