"""
User domain model

Pure data container for a row of the ``users`` table.
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Mapping, Optional


class UserRole(str, Enum):
    USER = "USER"
    ADMIN = "ADMIN"
    MODERATOR = "MODERATOR"


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Turn a stored ISO‑8601 string back into a ``datetime``."""
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


@dataclass
class User:
    """User domain model.

    ``password`` always holds the bcrypt digest, never plaintext.
    ``id`` stays ``None`` until the record is first saved.
    """
    username: str
    email: str
    password: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    age: Optional[int] = None
    role: UserRole = UserRole.USER
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    id: Optional[int] = field(default=None)

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "User":
        """Create User from a database row."""
        return cls(
            id=row["id"],
            username=row["username"],
            email=row["email"],
            password=row["password"],
            first_name=row["first_name"],
            last_name=row["last_name"],
            age=row["age"],
            role=UserRole(row["role"]),
            is_active=bool(row["is_active"]),
            created_at=parse_timestamp(row["created_at"]),
            updated_at=parse_timestamp(row["updated_at"]),
        )
