"""Entry point for the User Directory API.

Starts the FastAPI application with Uvicorn.  It is intended to be
executed from the project root::

    python run.py

Host and port are read from the ``HOST`` and ``PORT`` environment
variables (see ``user_directory_api.app.core.config``).  Defaults are
``0.0.0.0`` and ``8000``.
"""
import asyncio

from uvicorn import Config, Server

from user_directory_api.app.core.config import settings
from user_directory_api.app.main import app


async def run_api() -> None:
    """Serve the API until interrupted."""
    config = Config(
        app=app,
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=settings.log_level.lower(),
    )
    server = Server(config)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(run_api())
    except (KeyboardInterrupt, SystemExit):
        pass
