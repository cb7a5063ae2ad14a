"""
Post Repository

Query contract and SQLite implementation for the ``posts`` table.
Posts reference their author through ``user_id``.
"""
from abc import ABC, abstractmethod
from dataclasses import replace
from datetime import datetime
from typing import Any, List, Optional, Tuple

from ..core.exceptions import ResourceNotFoundError
from ..models import Page, PageRequest, Post, User
from .base import SQLiteRepository, like_pattern, to_db_timestamp


_COLUMNS = "id, user_id, title, content, is_published, created_at"


class PostRepository(ABC):
    """Query contract for posts."""

    @abstractmethod
    def save(self, post: Post) -> Post: ...

    @abstractmethod
    def find_by_id(self, post_id: int) -> Optional[Post]: ...

    @abstractmethod
    def find_by_user(self, user: User) -> List[Post]: ...

    @abstractmethod
    def find_by_user_id(self, user_id: int) -> List[Post]: ...

    @abstractmethod
    def find_published_by_user_id(self, user_id: int) -> List[Post]: ...

    @abstractmethod
    def find_published(self, page_request: PageRequest) -> Page[Post]: ...

    @abstractmethod
    def find_by_title_containing(self, fragment: str) -> List[Post]: ...

    @abstractmethod
    def find_by_title_or_content_containing(self, keyword: str) -> List[Post]: ...

    @abstractmethod
    def count_by_user_id(self, user_id: int) -> int: ...

    @abstractmethod
    def find_created_after(self, instant: datetime) -> List[Post]: ...

    @abstractmethod
    def find_created_between(self, start: datetime, end: datetime) -> List[Post]:
        """Posts whose creation time lies in ``[start, end]``."""


class SQLitePostRepository(SQLiteRepository, PostRepository):
    """Repository for post data access backed by SQLite."""

    def _fetch_all(self, where: str, params: Tuple[Any, ...], order: str = "ORDER BY id ASC") -> List[Post]:
        conn = self._connect()
        try:
            rows = conn.execute(
                f"SELECT {_COLUMNS} FROM posts WHERE {where} {order}", params
            ).fetchall()
            return [Post.from_row(row) for row in rows]
        finally:
            conn.close()

    def save(self, post: Post) -> Post:
        created_at = post.created_at or self.clock()
        conn = self._connect()
        try:
            cursor = conn.cursor()
            if post.id is None:
                cursor.execute(
                    "INSERT INTO posts (user_id, title, content, is_published, created_at) "
                    "VALUES (?, ?, ?, ?, ?)",
                    (post.user_id, post.title, post.content, 1 if post.is_published else 0,
                     to_db_timestamp(created_at)),
                )
                post_id = cursor.lastrowid
            else:
                cursor.execute(
                    "UPDATE posts SET user_id = ?, title = ?, content = ?, is_published = ? WHERE id = ?",
                    (post.user_id, post.title, post.content, 1 if post.is_published else 0, post.id),
                )
                if cursor.rowcount == 0:
                    raise ResourceNotFoundError(f"Post not found with id: {post.id}")
                post_id = post.id
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()
        return replace(post, id=post_id, created_at=created_at)

    def find_by_id(self, post_id: int) -> Optional[Post]:
        posts = self._fetch_all("id = ?", (post_id,))
        return posts[0] if posts else None

    def find_by_user(self, user: User) -> List[Post]:
        if user.id is None:
            return []
        return self.find_by_user_id(user.id)

    def find_by_user_id(self, user_id: int) -> List[Post]:
        return self._fetch_all("user_id = ?", (user_id,))

    def find_published_by_user_id(self, user_id: int) -> List[Post]:
        return self._fetch_all("user_id = ? AND is_published = 1", (user_id,))

    def find_published(self, page_request: PageRequest) -> Page[Post]:
        conn = self._connect()
        try:
            total = conn.execute(
                "SELECT COUNT(*) AS count FROM posts WHERE is_published = 1"
            ).fetchone()["count"]
            rows = conn.execute(
                f"SELECT {_COLUMNS} FROM posts WHERE is_published = 1 "
                "ORDER BY created_at DESC, id ASC LIMIT ? OFFSET ?",
                (page_request.size, page_request.offset),
            ).fetchall()
        finally:
            conn.close()
        return Page(
            content=[Post.from_row(row) for row in rows],
            total_elements=total,
            page=page_request.page,
            size=page_request.size,
        )

    def find_by_title_containing(self, fragment: str) -> List[Post]:
        return self._fetch_all("LOWER(title) LIKE ? ESCAPE '\\'", (like_pattern(fragment),))

    def find_by_title_or_content_containing(self, keyword: str) -> List[Post]:
        pattern = like_pattern(keyword)
        return self._fetch_all(
            "LOWER(title) LIKE ? ESCAPE '\\' OR LOWER(content) LIKE ? ESCAPE '\\'",
            (pattern, pattern),
        )

    def count_by_user_id(self, user_id: int) -> int:
        conn = self._connect()
        try:
            row = conn.execute(
                "SELECT COUNT(*) AS count FROM posts WHERE user_id = ?", (user_id,)
            ).fetchone()
            return row["count"]
        finally:
            conn.close()

    def find_created_after(self, instant: datetime) -> List[Post]:
        return self._fetch_all(
            "created_at > ?", (to_db_timestamp(instant),), order="ORDER BY created_at ASC, id ASC"
        )

    def find_created_between(self, start: datetime, end: datetime) -> List[Post]:
        return self._fetch_all(
            "created_at BETWEEN ? AND ?",
            (to_db_timestamp(start), to_db_timestamp(end)),
            order="ORDER BY created_at ASC, id ASC",
        )
