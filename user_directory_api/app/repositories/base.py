"""
Shared plumbing for the SQLite repositories.

Each repository keeps the path of its database file and a clock.
Connections are opened per operation through ``core.db`` so the
repositories can be used from several worker threads at once.
"""

from datetime import datetime, timezone
from typing import Callable, Optional

from ..core.db import get_connection, get_database_path


Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_db_timestamp(value: datetime) -> str:
    """Serialise a datetime as fixed‑width ISO‑8601 text in UTC.

    Fixed width keeps string comparison in SQL consistent with
    chronological order.  Naive datetimes are taken to be UTC.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


def like_pattern(fragment: str) -> str:
    """Build a lower‑case ``LIKE`` pattern matching ``fragment`` anywhere.

    Wildcards in the fragment are escaped; queries must use
    ``ESCAPE '\\'``.
    """
    escaped = (
        fragment.lower()
        .replace("\\", "\\\\")
        .replace("%", "\\%")
        .replace("_", "\\_")
    )
    return f"%{escaped}%"


class SQLiteRepository:
    """Base class holding the database location and the clock."""

    def __init__(self, db_path: Optional[str] = None, clock: Optional[Clock] = None) -> None:
        self.db_path = db_path or get_database_path()
        self.clock = clock or utcnow

    def _connect(self):
        return get_connection(self.db_path)
