"""
Post domain model

A post belongs to exactly one user, referenced by ``user_id``.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional

from .user import parse_timestamp


@dataclass
class Post:
    user_id: int
    title: str
    content: Optional[str] = None
    is_published: bool = False
    created_at: Optional[datetime] = None
    id: Optional[int] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Post":
        return cls(
            id=row["id"],
            user_id=row["user_id"],
            title=row["title"],
            content=row["content"],
            is_published=bool(row["is_published"]),
            created_at=parse_timestamp(row["created_at"]),
        )
