"""
Pydantic schema definitions for API payloads.

Schemas are separated from the domain models so that the API
representation is decoupled from persistence.
"""

from .user import UserCreate, UserPage, UserRead

__all__ = ["UserCreate", "UserPage", "UserRead"]
