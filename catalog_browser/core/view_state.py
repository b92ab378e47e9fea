"""View controls: search, sort, page size and page index."""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from enum import Enum


DEFAULT_PAGE_SIZE_OPTIONS: tuple[int, ...] = (5, 10, 25, 50)


class SortColumn(str, Enum):
    NAME = "name"
    TYPE = "type"

    @classmethod
    def from_string(cls, value: str | SortColumn) -> SortColumn:
        """Parse a column name; raises ValueError for unknown columns."""
        if isinstance(value, SortColumn):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown sort column: {value!r}") from None


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"

    def toggled(self) -> SortDirection:
        return SortDirection.DESC if self is SortDirection.ASC else SortDirection.ASC

    @property
    def arrow(self) -> str:
        return "▲" if self is SortDirection.ASC else "▼"


class PageDirection(str, Enum):
    PREV = "prev"
    NEXT = "next"

    @classmethod
    def from_string(cls, value: str | PageDirection) -> PageDirection:
        if isinstance(value, PageDirection):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown page direction: {value!r}") from None


def page_count(total: int, page_size: int) -> int:
    """Number of pages needed for ``total`` rows (0 when there are none)."""
    if total <= 0:
        return 0
    return math.ceil(total / page_size)


def last_page_index(total: int, page_size: int) -> int:
    return max(0, page_count(total, page_size) - 1)


def clamp_page_index(page_index: int, total: int, page_size: int) -> int:
    """Largest valid index not above ``page_index``.

    Guarantees ``page_index * page_size < max(1, total)``.
    """
    return min(max(0, page_index), last_page_index(total, page_size))


@dataclass(frozen=True)
class ViewState:
    """User-controlled view parameters."""

    search_term: str = ""
    sort_column: SortColumn = SortColumn.NAME
    sort_direction: SortDirection = SortDirection.ASC
    page_size: int = 5
    page_index: int = 0
    page_size_options: tuple[int, ...] = DEFAULT_PAGE_SIZE_OPTIONS

    def __post_init__(self) -> None:
        if self.page_size not in self.page_size_options:
            raise ValueError(
                f"page_size={self.page_size} is not one of {list(self.page_size_options)}"
            )
        if self.page_index < 0:
            raise ValueError("page_index must be non-negative")

    @property
    def offset(self) -> int:
        return self.page_index * self.page_size

    def clamped(self, total: int) -> ViewState:
        """Copy with ``page_index`` pulled back inside ``total`` rows."""
        index = clamp_page_index(self.page_index, total, self.page_size)
        if index == self.page_index:
            return self
        return replace(self, page_index=index)
