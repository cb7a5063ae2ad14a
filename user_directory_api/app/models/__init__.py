"""
Domain models.

Plain dataclasses describing the records stored by the repositories
and the pagination values used to query them.  They carry no
persistence or HTTP logic.
"""

from .page import Page, PageRequest, Sort, SortDirection
from .post import Post
from .user import User, UserRole

__all__ = [
    "Page",
    "PageRequest",
    "Post",
    "Sort",
    "SortDirection",
    "User",
    "UserRole",
]
