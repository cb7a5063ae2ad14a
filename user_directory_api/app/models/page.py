"""
Pagination values shared by the query layer and the services.

Pages are 0‑based.  A ``PageRequest`` carries the page index, the page
size and a ``Sort`` (field name plus direction); a ``Page`` carries
one slice of results together with the total number of matching
records.
"""
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Generic, List, TypeVar


T = TypeVar("T")
R = TypeVar("R")


class SortDirection(str, Enum):
    ASC = "ASC"
    DESC = "DESC"

    @classmethod
    def from_string(cls, value: str) -> "SortDirection":
        """Parse ``asc``/``desc`` case‑insensitively.  Raises ``ValueError`` otherwise."""
        try:
            return cls(value.strip().upper())
        except (AttributeError, ValueError):
            raise ValueError(
                f"Invalid value '{value}' for sort direction; has to be either 'desc' or 'asc'"
            ) from None


@dataclass(frozen=True)
class Sort:
    field: str = "id"
    direction: SortDirection = SortDirection.ASC

    @classmethod
    def by(cls, field_name: str, direction: str = "ASC") -> "Sort":
        return cls(field=field_name, direction=SortDirection.from_string(direction))


@dataclass(frozen=True)
class PageRequest:
    page: int = 0
    size: int = 10
    sort: Sort = field(default_factory=Sort)

    def __post_init__(self) -> None:
        if self.page < 0:
            raise ValueError("Page index must not be less than zero")
        if self.size < 1:
            raise ValueError("Page size must not be less than one")

    @property
    def offset(self) -> int:
        return self.page * self.size


@dataclass
class Page(Generic[T]):
    content: List[T]
    total_elements: int
    page: int
    size: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_elements / self.size) if self.size else 0

    def map(self, fn: Callable[[T], R]) -> "Page[R]":
        """Return a page with ``fn`` applied to each item and the same metadata."""
        return Page(
            content=[fn(item) for item in self.content],
            total_elements=self.total_elements,
            page=self.page,
            size=self.size,
        )
