"""
Pydantic models for user data.

``UserCreate`` is the request body for both creating and updating a
user.  ``UserRead`` is what the API returns; it deliberately has no
password field, so the stored hash can never leak through a response.
"""

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..models import Page, User, UserRole


class UserCreate(BaseModel):
    """Schema for creating or updating a user.

    On update the ``password`` is validated but not applied; password
    changes are not part of the update operation.
    """

    username: str = Field(..., min_length=3, max_length=50, examples=["jdoe"])
    email: str = Field(
        ...,
        max_length=254,
        pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$",
        examples=["jdoe@example.com"],
    )
    # passlib truncates to the 72 bytes bcrypt considers
    password: str = Field(..., min_length=6, max_length=100, examples=["s3cret-pass"])
    first_name: str = Field(..., min_length=1, max_length=50, examples=["John"])
    last_name: str = Field(..., min_length=1, max_length=50, examples=["Doe"])
    age: int = Field(..., ge=0, le=150, examples=[25])

    @field_validator("username", "email", "first_name", "last_name", mode="before")
    @classmethod
    def not_blank(cls, value: Any) -> Any:
        # strip before the length and pattern constraints apply
        if not isinstance(value, str):
            return value
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value


class UserRead(BaseModel):
    """Schema for reading a user from the API."""

    id: int
    username: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    age: Optional[int] = None
    role: UserRole
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_entity(cls, user: User) -> "UserRead":
        """Map an entity to its public representation (no password)."""
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            age=user.age,
            role=user.role,
            is_active=user.is_active,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class UserPage(BaseModel):
    """One page of users plus pagination metadata."""

    content: List[UserRead]
    total_elements: int
    total_pages: int
    page: int
    size: int

    @classmethod
    def from_page(cls, page: Page[UserRead]) -> "UserPage":
        return cls(
            content=page.content,
            total_elements=page.total_elements,
            total_pages=page.total_pages,
            page=page.page,
            size=page.size,
        )
