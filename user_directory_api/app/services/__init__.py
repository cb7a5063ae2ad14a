"""
Service layer abstraction.

Each service encapsulates business logic for a domain and talks to
storage only through a repository, so the storage backend can change
without touching the API handlers.
"""

from .user_service import UserService

__all__ = ["UserService"]
