"""
User Repository

``UserRepository`` is the query contract the service depends on;
``SQLiteUserRepository`` implements it over the ``users`` table.
Lookups return ``None`` or an empty result when nothing matches; it is
up to the caller to turn that into a not‑found error.
"""
import logging
import sqlite3
from abc import ABC, abstractmethod
from dataclasses import replace
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from ..core.exceptions import DuplicateResourceError, ResourceNotFoundError
from ..models import Page, PageRequest, User, UserRole
from .base import SQLiteRepository, like_pattern, to_db_timestamp

logger = logging.getLogger(__name__)


# API sort keys (snake_case and camelCase) mapped to columns.  Only
# whitelisted columns are ever interpolated into ORDER BY.
SORTABLE_COLUMNS: Dict[str, str] = {
    "id": "id",
    "username": "username",
    "email": "email",
    "first_name": "first_name",
    "firstName": "first_name",
    "last_name": "last_name",
    "lastName": "last_name",
    "age": "age",
    "role": "role",
    "is_active": "is_active",
    "isActive": "is_active",
    "created_at": "created_at",
    "createdAt": "created_at",
    "updated_at": "updated_at",
    "updatedAt": "updated_at",
}

_COLUMNS = (
    "id, username, email, password, first_name, last_name, age, role, "
    "is_active, created_at, updated_at"
)


def order_by_clause(page_request: PageRequest) -> str:
    """Translate the request's sort into an ``ORDER BY`` clause.

    Raises ``ValueError`` for fields that are not sortable.
    """
    sort = page_request.sort
    column = SORTABLE_COLUMNS.get(sort.field)
    if column is None:
        raise ValueError(f"Cannot sort users by '{sort.field}'")
    # id breaks ties so pages never overlap
    if column == "id":
        return f"ORDER BY id {sort.direction.value}"
    return f"ORDER BY {column} {sort.direction.value}, id ASC"


class UserRepository(ABC):
    """Query contract for users, independent of the backing store."""

    @abstractmethod
    def find_by_id(self, user_id: int) -> Optional[User]: ...

    @abstractmethod
    def find_by_username(self, username: str) -> Optional[User]: ...

    @abstractmethod
    def find_by_email(self, email: str) -> Optional[User]: ...

    @abstractmethod
    def exists_by_username(self, username: str) -> bool: ...

    @abstractmethod
    def exists_by_email(self, email: str) -> bool: ...

    @abstractmethod
    def find_by_role(self, role: UserRole) -> List[User]: ...

    @abstractmethod
    def find_active(self, page_request: PageRequest) -> Page[User]: ...

    @abstractmethod
    def find_all(self, page_request: PageRequest) -> Page[User]: ...

    @abstractmethod
    def find_by_name_containing(self, fragment: str) -> List[User]:
        """Case‑insensitive substring match on first OR last name."""

    @abstractmethod
    def find_by_first_name_containing(self, fragment: str) -> List[User]: ...

    @abstractmethod
    def find_by_age_between(self, min_age: int, max_age: int) -> List[User]: ...

    @abstractmethod
    def find_older_than(self, age: int) -> List[User]: ...

    @abstractmethod
    def count_by_role(self, role: UserRole) -> int: ...

    @abstractmethod
    def find_created_since(self, since: datetime) -> List[User]: ...

    @abstractmethod
    def save(self, user: User) -> User:
        """Insert when ``user.id`` is ``None``, otherwise update.

        Always refreshes ``updated_at``: a new row gets its creation
        time, an existing row the current time.  ``created_at`` is never
        changed once stored.  Returns the stored user.
        """


class SQLiteUserRepository(SQLiteRepository, UserRepository):
    """Repository for user data access backed by SQLite."""

    def _fetch_one(self, where: str, params: Tuple[Any, ...]) -> Optional[User]:
        conn = self._connect()
        try:
            row = conn.execute(
                f"SELECT {_COLUMNS} FROM users WHERE {where}", params
            ).fetchone()
            return User.from_row(row) if row else None
        finally:
            conn.close()

    def _fetch_all(self, where: str, params: Tuple[Any, ...], order: str = "ORDER BY id ASC") -> List[User]:
        conn = self._connect()
        try:
            rows = conn.execute(
                f"SELECT {_COLUMNS} FROM users WHERE {where} {order}", params
            ).fetchall()
            return [User.from_row(row) for row in rows]
        finally:
            conn.close()

    def _fetch_page(self, where: str, params: Tuple[Any, ...], page_request: PageRequest) -> Page[User]:
        order = order_by_clause(page_request)
        conn = self._connect()
        try:
            total = conn.execute(
                f"SELECT COUNT(*) AS count FROM users WHERE {where}", params
            ).fetchone()["count"]
            rows = conn.execute(
                f"SELECT {_COLUMNS} FROM users WHERE {where} {order} LIMIT ? OFFSET ?",
                params + (page_request.size, page_request.offset),
            ).fetchall()
        finally:
            conn.close()
        return Page(
            content=[User.from_row(row) for row in rows],
            total_elements=total,
            page=page_request.page,
            size=page_request.size,
        )

    def _exists(self, where: str, params: Tuple[Any, ...]) -> bool:
        conn = self._connect()
        try:
            row = conn.execute(
                f"SELECT EXISTS(SELECT 1 FROM users WHERE {where}) AS found", params
            ).fetchone()
            return bool(row["found"])
        finally:
            conn.close()

    def find_by_id(self, user_id: int) -> Optional[User]:
        return self._fetch_one("id = ?", (user_id,))

    def find_by_username(self, username: str) -> Optional[User]:
        return self._fetch_one("username = ?", (username,))

    def find_by_email(self, email: str) -> Optional[User]:
        return self._fetch_one("email = ?", (email,))

    def exists_by_username(self, username: str) -> bool:
        return self._exists("username = ?", (username,))

    def exists_by_email(self, email: str) -> bool:
        return self._exists("email = ?", (email,))

    def find_by_role(self, role: UserRole) -> List[User]:
        return self._fetch_all("role = ?", (UserRole(role).value,))

    def find_active(self, page_request: PageRequest) -> Page[User]:
        return self._fetch_page("is_active = 1", (), page_request)

    def find_all(self, page_request: PageRequest) -> Page[User]:
        return self._fetch_page("1 = 1", (), page_request)

    def find_by_name_containing(self, fragment: str) -> List[User]:
        pattern = like_pattern(fragment)
        return self._fetch_all(
            "LOWER(first_name) LIKE ? ESCAPE '\\' OR LOWER(last_name) LIKE ? ESCAPE '\\'",
            (pattern, pattern),
        )

    def find_by_first_name_containing(self, fragment: str) -> List[User]:
        return self._fetch_all(
            "LOWER(first_name) LIKE ? ESCAPE '\\'", (like_pattern(fragment),)
        )

    def find_by_age_between(self, min_age: int, max_age: int) -> List[User]:
        return self._fetch_all("age BETWEEN ? AND ?", (min_age, max_age))

    def find_older_than(self, age: int) -> List[User]:
        return self._fetch_all("age > ?", (age,))

    def count_by_role(self, role: UserRole) -> int:
        conn = self._connect()
        try:
            row = conn.execute(
                "SELECT COUNT(*) AS count FROM users WHERE role = ?",
                (UserRole(role).value,),
            ).fetchone()
            return row["count"]
        finally:
            conn.close()

    def find_created_since(self, since: datetime) -> List[User]:
        return self._fetch_all(
            "created_at >= ?", (to_db_timestamp(since),), order="ORDER BY created_at DESC, id ASC"
        )

    def save(self, user: User) -> User:
        now = self.clock()
        created_at = user.created_at or now
        if user.id is None:
            updated_at = created_at
        else:
            # updated_at never precedes created_at, even with a skewed clock
            updated_at = max(now, created_at)
        values = (
            user.username,
            user.email,
            user.password,
            user.first_name,
            user.last_name,
            user.age,
            UserRole(user.role).value,
            1 if user.is_active else 0,
            to_db_timestamp(updated_at),
        )
        conn = self._connect()
        try:
            cursor = conn.cursor()
            if user.id is None:
                cursor.execute(
                    "INSERT INTO users (username, email, password, first_name, last_name, age, "
                    "role, is_active, updated_at, created_at) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                    values + (to_db_timestamp(created_at),),
                )
                user_id = cursor.lastrowid
            else:
                cursor.execute(
                    "UPDATE users SET username = ?, email = ?, password = ?, first_name = ?, "
                    "last_name = ?, age = ?, role = ?, is_active = ?, updated_at = ? WHERE id = ?",
                    values + (user.id,),
                )
                if cursor.rowcount == 0:
                    raise ResourceNotFoundError(f"User not found with id: {user.id}")
                user_id = user.id
            conn.commit()
        except sqlite3.IntegrityError as exc:
            conn.rollback()
            logger.warning("Unique constraint rejected user %r: %s", user.username, exc)
            raise DuplicateResourceError(_duplicate_message(exc, user)) from exc
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()
        return replace(user, id=user_id, created_at=created_at, updated_at=updated_at)


def _duplicate_message(exc: sqlite3.IntegrityError, user: User) -> str:
    text = str(exc)
    if "users.email" in text:
        return f"Email already exists: {user.email}"
    if "users.username" in text:
        return f"Username already exists: {user.username}"
    return f"User violates a uniqueness constraint: {text}"
