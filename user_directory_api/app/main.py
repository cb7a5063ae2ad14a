"""
Main entrypoint for the User Directory API.

This module assembles the FastAPI application: it sets up logging,
composes the user service from its collaborators, registers the
domain exception handlers and includes the versioned routers.  The
``create_app`` function builds and configures the app, which is then
instantiated at module import time as ``app``::

    uvicorn user_directory_api.app.main:app --reload

OpenAPI documentation is served at ``/docs`` and ``/openapi.json``.
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from .api.v1.router import router as v1_router
from .core.cache import CacheManager
from .core.config import Settings, settings
from .core.db import get_database_path, init_db
from .core.exceptions import DuplicateResourceError, ResourceNotFoundError
from .core.logging_config import setup_logging
from .core.security import PasswordHasher
from .repositories import SQLiteUserRepository
from .services.user_service import UserService


logger = logging.getLogger(__name__)


def build_user_service(app_settings: Settings, cache_manager: CacheManager) -> UserService:
    """Wire the user service with its production collaborators."""
    repository = SQLiteUserRepository(get_database_path(app_settings.database_url))
    return UserService(
        repository=repository,
        password_hasher=PasswordHasher(rounds=app_settings.password_hash_rounds),
        cache=cache_manager.get_cache("users"),
    )


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    app_settings : Optional[Settings]
        Settings to use instead of the module‑level ``settings``.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    app_settings = app_settings or settings
    # Initialise logging before anything else so that the wiring below
    # can log.
    setup_logging(app_settings.log_level, app_settings.log_file)

    app = FastAPI(
        title=app_settings.project_name,
        version=app_settings.api_version,
        description=app_settings.description,
        contact={"name": app_settings.contact_name, "email": app_settings.contact_email},
        license_info={"name": app_settings.license_name, "url": app_settings.license_url},
        debug=app_settings.debug,
    )

    cache_manager = CacheManager()
    app.state.settings = app_settings
    app.state.cache_manager = cache_manager
    app.state.user_service = build_user_service(app_settings, cache_manager)

    @app.exception_handler(ResourceNotFoundError)
    async def not_found_handler(request: Request, exc: ResourceNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})

    @app.exception_handler(DuplicateResourceError)
    async def conflict_handler(request: Request, exc: DuplicateResourceError) -> JSONResponse:
        return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"detail": str(exc)})

    @app.exception_handler(ValueError)
    async def bad_request_handler(request: Request, exc: ValueError) -> JSONResponse:
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})

    # Mount versioned routes under /api/v1.
    app.include_router(v1_router, prefix="/api/v1")

    @app.on_event("startup")
    async def startup_event() -> None:
        # Creates the database file if needed and applies migrations.
        version = init_db(get_database_path(app_settings.database_url))
        logger.info("Database ready at schema version %s", version)

    @app.on_event("shutdown")
    async def shutdown_event() -> None:
        cache_manager.clear_all()

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
