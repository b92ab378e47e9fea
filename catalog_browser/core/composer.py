"""Derive the visible rows from accumulated items, resolved details and view controls.

filter (case-insensitive substring on name) -> sort (name or type) -> slice page.
Everything here is pure; the composer is re-run on every render.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from catalog_browser.core.models import CatalogItem, ItemDetail
from catalog_browser.core.view_state import (
    SortColumn,
    SortDirection,
    ViewState,
    page_count,
)


@dataclass(frozen=True)
class Row:
    """One rendered row: the item and its detail once resolved."""

    item: CatalogItem
    detail: ItemDetail | None = None

    @property
    def name(self) -> str:
        return self.item.name

    @property
    def is_expanded(self) -> bool:
        return self.detail is not None


@dataclass(frozen=True)
class ComposedPage:
    rows: tuple[Row, ...]
    total_filtered_count: int
    page_index: int
    page_size: int

    @property
    def page_count(self) -> int:
        return page_count(self.total_filtered_count, self.page_size)

    @property
    def has_previous(self) -> bool:
        return self.page_index > 0

    @property
    def has_next(self) -> bool:
        return self.page_index < self.page_count - 1

    @property
    def names(self) -> list[str]:
        return [row.name for row in self.rows]


def filter_items(items: Sequence[CatalogItem], search_term: str) -> list[CatalogItem]:
    """Keep items whose name contains ``search_term``, ignoring case."""
    needle = (search_term or "").lower()
    if not needle:
        return list(items)
    return [item for item in items if needle in item.name.lower()]


def _sort_key(
    item: CatalogItem,
    column: SortColumn,
    details: Mapping[str, ItemDetail],
) -> tuple[int, str]:
    if column is SortColumn.NAME:
        return (1, item.name)
    detail = details.get(item.name)
    # Unresolved types sort below every resolved one
    if detail is None:
        return (0, "")
    return (1, detail.type_summary)


def sort_items(
    items: Sequence[CatalogItem],
    details: Mapping[str, ItemDetail],
    column: SortColumn,
    direction: SortDirection,
) -> list[CatalogItem]:
    """Sort by ``column``; equal keys keep their relative order in both directions."""
    return sorted(
        items,
        key=lambda item: _sort_key(item, column, details),
        reverse=direction is SortDirection.DESC,
    )


def paginate(items: Sequence[CatalogItem], page_index: int, page_size: int) -> list[CatalogItem]:
    start = page_index * page_size
    return list(items[start : start + page_size])


def count_filtered(items: Sequence[CatalogItem], search_term: str) -> int:
    return len(filter_items(items, search_term))


def compose(
    items: Sequence[CatalogItem],
    details: Mapping[str, ItemDetail],
    view: ViewState,
) -> ComposedPage:
    """Build the current page of rows.

    ``view.page_index`` is clamped against the filtered count so a stale index
    never yields an empty page while rows exist.
    """
    filtered = filter_items(items, view.search_term)
    view = view.clamped(len(filtered))
    ordered = sort_items(filtered, details, view.sort_column, view.sort_direction)
    window = paginate(ordered, view.page_index, view.page_size)
    return ComposedPage(
        rows=tuple(Row(item=item, detail=details.get(item.name)) for item in window),
        total_filtered_count=len(filtered),
        page_index=view.page_index,
        page_size=view.page_size,
    )
