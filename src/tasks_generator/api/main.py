"""FastAPI application for the tasks generator backend.

Provides REST endpoints to create specs, read and edit their generated
backlogs, and export them.
"""

import time
from datetime import datetime
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .. import __version__
from ..models import AppConfig
from ..store import BacklogStore
from .routes import specs, tasks, status


def _field_path(loc: tuple) -> str:
    parts = loc[1:] if loc and loc[0] in ("body", "query", "path") else loc
    return ".".join(str(p) for p in parts)


def create_app(config: Optional[AppConfig] = None, store: Optional[BacklogStore] = None) -> FastAPI:
    """Create the FastAPI application.

    Args:
        config: Application configuration (loaded from the environment if omitted)
        store: Backlog store (built from config if omitted)

    Returns:
        Configured FastAPI application
    """
    config = config or AppConfig.load()
    store = store or BacklogStore.from_config(config)

    app = FastAPI(
        title="Tasks Generator API",
        description="Generate, edit and export project backlogs",
        version=__version__,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["*"],
    )

    app.state.config = config
    app.state.store = store
    app.state.started_at = time.monotonic()

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={
                "error": "Validation failed",
                "details": [
                    {"field": _field_path(tuple(e.get("loc", ()))), "message": e.get("msg", "")}
                    for e in exc.errors()
                ],
            },
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404 and exc.detail == "Not Found":
            content = {"error": "Not found", "path": request.url.path}
        else:
            content = {"error": exc.detail}
        return JSONResponse(status_code=exc.status_code, content=content)

    app.include_router(status.router, prefix="/api", tags=["status"])
    app.include_router(specs.router, prefix="/api", tags=["specs"])
    app.include_router(tasks.router, prefix="/api", tags=["tasks"])

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "ok", "timestamp": datetime.now().isoformat()}

    return app


def run_server(
    config: Optional[AppConfig] = None,
    host: str = "127.0.0.1",
    port: int = 8000,
) -> None:
    """Run the API server.

    Args:
        config: Application configuration
        host: Host to bind to
        port: Port to listen on
    """
    import uvicorn

    app = create_app(config)

    uvicorn.run(app, host=host, port=port)
