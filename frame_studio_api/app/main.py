"""
Main entrypoint for the Frame Studio API.

This module assembles the FastAPI application, sets up logging and
includes versioned routers.  The ``create_app`` function builds and
configures the app, which is then instantiated at module import time
as ``app``, e.g.::

    uvicorn frame_studio_api.app.main:app --reload

The application title and version are provided via ``Settings`` from
``core.config``.
"""

from fastapi import FastAPI

from .core.config import settings
from .core.logging_config import setup_logging
from .api.v1.router import router as v1_router
from .core.db import init_db


def create_app() -> FastAPI:
    """Create and configure a FastAPI application.

    Configures logging, mounts the versioned API under ``/api/v1`` and
    registers a startup hook that applies database migrations.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    # Logging first so that imports below can log messages.
    setup_logging(settings.log_level, settings.log_file or None)

    app = FastAPI(title=settings.project_name, version=settings.api_version, debug=settings.debug)

    app.include_router(v1_router, prefix="/api/v1")

    @app.on_event("startup")
    async def startup_event() -> None:
        # Creates the database file if needed and applies migrations.
        init_db()

    return app


app = create_app()
