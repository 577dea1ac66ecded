"""Entry point for the Frame Studio API.

Starts the FastAPI application with Uvicorn.  Configuration such as
the database path, secret key and internal tokens is read from
environment variables (see ``frame_studio_api/app/core/config.py``).

Usage:
    python run.py
"""
import asyncio
import logging

from uvicorn import Config, Server

from frame_studio_api.app.core.config import settings
from frame_studio_api.app.main import app


async def run_api() -> None:
    """Serve the API on ``API_HOST``:``API_PORT`` (default ``0.0.0.0:8000``)."""
    config = Config(
        app=app,
        host=settings.api_host,
        port=settings.api_port,
        reload=False,
        log_level=settings.log_level.lower(),
    )
    server = Server(config)
    await server.serve()


def main() -> None:
    try:
        asyncio.run(run_api())
    except KeyboardInterrupt:
        logging.getLogger(__name__).info("Shutting down")


if __name__ == "__main__":
    main()
