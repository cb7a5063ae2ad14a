"""
User endpoints for API v1.

Thin HTTP adapter over ``UserService``.  All routes except ``/health``
require HTTP Basic authentication.  Handlers are plain functions so
FastAPI runs them on its worker thread pool; domain errors are turned
into 404/409/400 responses by the exception handlers registered in
``app.main``.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, Response, status
from fastapi.responses import PlainTextResponse

from user_directory_api.app.core.security import get_current_username
from user_directory_api.app.models import UserRole
from user_directory_api.app.schemas.user import UserCreate, UserPage, UserRead
from user_directory_api.app.services.user_service import UserService


router = APIRouter()


def get_user_service(request: Request) -> UserService:
    """Dependency returning the service built by ``create_app``."""
    return request.app.state.user_service


@router.get("/health", response_class=PlainTextResponse)
def health_check() -> str:
    """Check that the user service is running.  No authentication."""
    return "User service is running!"


@router.post(
    "/",
    response_model=UserRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new user",
)
def create_user(
    user: UserCreate,
    service: UserService = Depends(get_user_service),
    _: str = Depends(get_current_username),
) -> UserRead:
    """Register a new user.  Returns 409 if the username or email is taken."""
    return service.create_user(user)


@router.get("/", response_model=UserPage, summary="Get all users")
def list_users(
    request: Request,
    page: int = Query(0, ge=0, description="Page number (0-based)"),
    size: Optional[int] = Query(None, ge=1, description="Page size"),
    sort_by: str = Query("id", description="Sort field"),
    sort_direction: str = Query("ASC", description="Sort direction (ASC or DESC)"),
    service: UserService = Depends(get_user_service),
    _: str = Depends(get_current_username),
) -> UserPage:
    """List users with pagination and sorting."""
    size = _page_size(request, size)
    return service.list_users(page=page, size=size, sort_by=sort_by, sort_direction=sort_direction)


@router.get("/role/{role}", response_model=List[UserRead], summary="Get users by role")
def list_users_by_role(
    role: UserRole,
    service: UserService = Depends(get_user_service),
    _: str = Depends(get_current_username),
) -> List[UserRead]:
    return service.list_users_by_role(role)


@router.get("/search", response_model=List[UserRead], summary="Search users by name")
def search_users(
    name: str = Query(..., description="Fragment of the first or last name"),
    service: UserService = Depends(get_user_service),
    _: str = Depends(get_current_username),
) -> List[UserRead]:
    """Case‑insensitive search over first and last names."""
    return service.search_users_by_name(name)


@router.get("/active", response_model=UserPage, summary="Get active users")
def list_active_users(
    request: Request,
    page: int = Query(0, ge=0),
    size: Optional[int] = Query(None, ge=1),
    service: UserService = Depends(get_user_service),
    _: str = Depends(get_current_username),
) -> UserPage:
    """List active users only, newest first."""
    return service.list_active_users(page=page, size=_page_size(request, size))


@router.get("/{user_id}", response_model=UserRead, summary="Get user by ID")
def get_user(
    user_id: int,
    service: UserService = Depends(get_user_service),
    _: str = Depends(get_current_username),
) -> UserRead:
    return service.get_user_by_id(user_id)


@router.put("/{user_id}", response_model=UserRead, summary="Update user")
def update_user(
    user_id: int,
    body: UserCreate,
    service: UserService = Depends(get_user_service),
    _: str = Depends(get_current_username),
) -> UserRead:
    """Update an existing user's information.

    First name, last name and age are always replaced.  A new username
    or email must not belong to another user (409).
    """
    return service.update_user(user_id, body)


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete user",
)
def delete_user(
    user_id: int,
    service: UserService = Depends(get_user_service),
    _: str = Depends(get_current_username),
) -> Response:
    """Soft delete a user (sets it inactive)."""
    service.delete_user(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


def _page_size(request: Request, size: Optional[int]) -> int:
    app_settings = request.app.state.settings
    if size is None:
        return app_settings.default_page_size
    return min(size, app_settings.max_page_size)
