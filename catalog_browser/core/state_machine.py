"""
Browser state machine.
======================
Single explicit state object and the pure reducer that moves it:

    reduce(state, event) -> new state

The async controller (``catalog_browser.services.browser``) turns user input
and network completions into events; nothing else mutates the state.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType

from catalog_browser.core.accumulator import AccumulatedList
from catalog_browser.core.composer import ComposedPage, compose, count_filtered
from catalog_browser.core.errors import CatalogError
from catalog_browser.core.models import CatalogPage, ItemDetail
from catalog_browser.core.view_state import (
    PageDirection,
    SortColumn,
    SortDirection,
    ViewState,
    last_page_index,
)


# =============================================================================
# STATE
# =============================================================================


@dataclass(frozen=True)
class BrowserState:
    """Everything the browser knows: list, details, view controls, loading flag."""

    catalog: AccumulatedList = field(default_factory=AccumulatedList)
    details: Mapping[str, ItemDetail] = field(default_factory=lambda: MappingProxyType({}))
    view: ViewState = field(default_factory=ViewState)
    loading: bool = False

    @classmethod
    def initial(
        cls,
        *,
        page_size: int = 5,
        page_size_options: tuple[int, ...] | None = None,
    ) -> BrowserState:
        if page_size_options is None:
            view = ViewState(page_size=page_size)
        else:
            view = ViewState(page_size=page_size, page_size_options=page_size_options)
        return cls(view=view)

    @property
    def has_more(self) -> bool:
        return self.catalog.has_more

    @property
    def filtered_count(self) -> int:
        return count_filtered(self.catalog.items, self.view.search_term)

    @property
    def has_details(self) -> bool:
        """True once any row is expanded; the type/image columns appear then."""
        return bool(self.details)

    def compose(self) -> ComposedPage:
        return compose(self.catalog.items, self.details, self.view)


# =============================================================================
# EVENTS
# =============================================================================


@dataclass(frozen=True)
class ListFetchStarted:
    cursor: str | None = None


@dataclass(frozen=True)
class ListFetchSucceeded:
    page: CatalogPage


@dataclass(frozen=True)
class ListFetchFailed:
    error: CatalogError


@dataclass(frozen=True)
class DetailResolved:
    name: str
    detail: ItemDetail


@dataclass(frozen=True)
class SearchChanged:
    text: str


@dataclass(frozen=True)
class SortChanged:
    column: SortColumn


@dataclass(frozen=True)
class PageSizeChanged:
    page_size: int


@dataclass(frozen=True)
class PageChanged:
    direction: PageDirection


Event = (
    ListFetchStarted
    | ListFetchSucceeded
    | ListFetchFailed
    | DetailResolved
    | SearchChanged
    | SortChanged
    | PageSizeChanged
    | PageChanged
)


# =============================================================================
# TRANSITIONS
# =============================================================================


def _with_detail(details: Mapping[str, ItemDetail], name: str, detail: ItemDetail) -> Mapping[str, ItemDetail]:
    merged = dict(details)
    merged[name] = detail
    return MappingProxyType(merged)


def _sorted_view(view: ViewState, column: SortColumn) -> ViewState:
    if column is view.sort_column:
        return replace(view, sort_direction=view.sort_direction.toggled())
    return replace(view, sort_column=column, sort_direction=SortDirection.ASC)


def _paged_view(view: ViewState, direction: PageDirection, filtered_count: int) -> ViewState:
    if direction is PageDirection.PREV:
        if view.page_index > 0:
            return replace(view, page_index=view.page_index - 1)
        return view
    if view.page_index < last_page_index(filtered_count, view.page_size):
        return replace(view, page_index=view.page_index + 1)
    return view


def _apply(state: BrowserState, event: Event) -> BrowserState:
    if isinstance(event, ListFetchStarted):
        return replace(state, loading=True)

    if isinstance(event, ListFetchSucceeded):
        return replace(state, catalog=state.catalog.merge(event.page), loading=False)

    if isinstance(event, ListFetchFailed):
        # List and cursor stay as they were
        return replace(state, loading=False)

    if isinstance(event, DetailResolved):
        return replace(state, details=_with_detail(state.details, event.name, event.detail))

    if isinstance(event, SearchChanged):
        return replace(state, view=replace(state.view, search_term=event.text, page_index=0))

    if isinstance(event, SortChanged):
        return replace(state, view=_sorted_view(state.view, SortColumn.from_string(event.column)))

    if isinstance(event, PageSizeChanged):
        if event.page_size not in state.view.page_size_options:
            raise ValueError(
                f"Unsupported page size {event.page_size}; "
                f"choose one of {list(state.view.page_size_options)}"
            )
        return replace(state, view=replace(state.view, page_size=event.page_size, page_index=0))

    if isinstance(event, PageChanged):
        direction = PageDirection.from_string(event.direction)
        return replace(state, view=_paged_view(state.view, direction, state.filtered_count))

    raise TypeError(f"Unknown browser event: {type(event).__name__}")


def reduce(state: BrowserState, event: Event) -> BrowserState:
    """Apply ``event`` and re-establish the page-index bound."""
    new_state = _apply(state, event)
    view = new_state.view.clamped(new_state.filtered_count)
    if view is new_state.view:
        return new_state
    return replace(new_state, view=view)
