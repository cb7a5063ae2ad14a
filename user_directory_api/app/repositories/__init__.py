"""
Query layer.

Repositories expose the named lookups, filters and existence checks the
services need.  The abstract classes define the contract; the SQLite
classes implement it on top of ``core.db``.
"""

from .post_repository import PostRepository, SQLitePostRepository
from .user_repository import SQLiteUserRepository, UserRepository

__all__ = [
    "PostRepository",
    "SQLitePostRepository",
    "SQLiteUserRepository",
    "UserRepository",
]
