"""
Tests for the browser reducer.
"""

from dataclasses import replace

import pytest

from catalog_browser.core.errors import FailureKind, ListFetchError
from catalog_browser.core.models import CatalogPage, ItemDetail
from catalog_browser.core.state_machine import (
    BrowserState,
    DetailResolved,
    ListFetchFailed,
    ListFetchStarted,
    ListFetchSucceeded,
    PageChanged,
    PageSizeChanged,
    SearchChanged,
    SortChanged,
    reduce,
)
from catalog_browser.core.view_state import PageDirection, SortColumn, SortDirection
from tests.conftest import POKEMON, make_items


def loaded(names, *, next_cursor=None, **initial) -> BrowserState:
    state = BrowserState.initial(**initial)
    page = CatalogPage(items=tuple(make_items(*names)), next_cursor=next_cursor)
    return reduce(reduce(state, ListFetchStarted()), ListFetchSucceeded(page=page))


def with_page_index(state: BrowserState, index: int) -> BrowserState:
    return replace(state, view=replace(state.view, page_index=index))


class TestInitialState:
    def test_empty(self):
        state = BrowserState.initial()
        assert state.catalog.items == ()
        assert dict(state.details) == {}
        assert state.loading is False
        assert state.has_more is False
        assert state.has_details is False
        assert state.view.page_size == 5

    def test_custom_page_size(self):
        state = BrowserState.initial(page_size=10, page_size_options=(10, 20))
        assert state.view.page_size == 10
        assert state.view.page_size_options == (10, 20)


class TestListFetch:
    def test_started_sets_loading(self):
        assert reduce(BrowserState.initial(), ListFetchStarted()).loading is True

    def test_success_merges_and_stores_cursor(self):
        state = loaded(POKEMON[:10], next_cursor="https://next")
        assert state.loading is False
        assert state.catalog.names() == POKEMON[:10]
        assert state.catalog.next_cursor == "https://next"

    def test_failure_keeps_list_and_cursor(self):
        state = loaded(POKEMON[:10], next_cursor="https://next")
        state = reduce(state, ListFetchStarted(cursor="https://next"))
        error = ListFetchError("https://next", FailureKind.TRANSPORT)

        failed = reduce(state, ListFetchFailed(error=error))

        assert failed.loading is False
        assert failed.catalog == state.catalog
        assert failed.catalog.next_cursor == "https://next"

    def test_redelivered_page_is_idempotent(self):
        state = loaded(POKEMON[:5])
        again = reduce(state, ListFetchSucceeded(page=CatalogPage(items=tuple(make_items(*POKEMON[:3])))))
        assert again.catalog.names() == POKEMON[:5]


class TestDetailResolved:
    def test_stores_detail_by_name(self):
        detail = ItemDetail(type_summary="fire", image_url="https://img/4.png")
        state = reduce(loaded(POKEMON[:5]), DetailResolved(name="charmander", detail=detail))

        assert state.details["charmander"] == detail
        assert state.has_details is True

    def test_previous_state_untouched(self):
        before = loaded(POKEMON[:5])
        reduce(before, DetailResolved(name="charmander", detail=ItemDetail.unknown()))
        assert dict(before.details) == {}


class TestSearchChanged:
    def test_sets_term_and_resets_page(self):
        state = with_page_index(loaded(POKEMON), 3)
        state = reduce(state, SearchChanged(text="pid"))

        assert state.view.search_term == "pid"
        assert state.view.page_index == 0
        assert state.filtered_count == 3


class TestSortChanged:
    def test_same_column_toggles(self):
        state = reduce(BrowserState.initial(), SortChanged(column=SortColumn.NAME))
        assert state.view.sort_direction is SortDirection.DESC
        state = reduce(state, SortChanged(column=SortColumn.NAME))
        assert state.view.sort_direction is SortDirection.ASC

    def test_new_column_starts_ascending(self):
        state = reduce(BrowserState.initial(), SortChanged(column=SortColumn.NAME))
        state = reduce(state, SortChanged(column=SortColumn.TYPE))

        assert state.view.sort_column is SortColumn.TYPE
        assert state.view.sort_direction is SortDirection.ASC

    def test_toggling_reverses_rows(self):
        state = loaded(["Bulbasaur", "Charmander", "Arbok"])
        assert state.compose().names == ["Arbok", "Bulbasaur", "Charmander"]

        state = reduce(state, SortChanged(column=SortColumn.NAME))
        assert state.compose().names == ["Charmander", "Bulbasaur", "Arbok"]

    def test_type_sort_without_details_keeps_fetch_order(self):
        state = reduce(loaded(["Bulbasaur", "Charmander", "Arbok"]), SortChanged(column=SortColumn.TYPE))
        assert state.compose().names == ["Bulbasaur", "Charmander", "Arbok"]


class TestPageSizeChanged:
    def test_sets_size_and_resets_page(self):
        state = with_page_index(loaded(POKEMON), 2)
        state = reduce(state, PageSizeChanged(page_size=10))

        assert state.view.page_size == 10
        assert state.view.page_index == 0
        assert len(state.compose().rows) == 10

    def test_rejects_unsupported_size(self):
        with pytest.raises(ValueError, match="Unsupported page size 7"):
            reduce(BrowserState.initial(), PageSizeChanged(page_size=7))


class TestPageChanged:
    def test_bounds_with_twelve_items(self):
        state = loaded(POKEMON[:12])

        state = reduce(state, PageChanged(direction=PageDirection.PREV))
        assert state.view.page_index == 0

        for expected in (1, 2, 2, 2):
            state = reduce(state, PageChanged(direction=PageDirection.NEXT))
            assert state.view.page_index == expected

        assert len(state.compose().rows) == 2

        for expected in (1, 0, 0):
            state = reduce(state, PageChanged(direction=PageDirection.PREV))
            assert state.view.page_index == expected

    def test_next_on_empty_list_is_noop(self):
        state = reduce(BrowserState.initial(), PageChanged(direction=PageDirection.NEXT))
        assert state.view.page_index == 0


class TestPageIndexInvariant:
    EVENTS = [
        ListFetchStarted(),
        ListFetchSucceeded(page=CatalogPage(items=tuple(make_items(*POKEMON[:13])))),
        PageChanged(direction=PageDirection.NEXT),
        PageChanged(direction=PageDirection.NEXT),
        SearchChanged(text="e"),
        PageChanged(direction=PageDirection.NEXT),
        SortChanged(column=SortColumn.TYPE),
        PageSizeChanged(page_size=25),
        PageChanged(direction=PageDirection.NEXT),
        SearchChanged(text="zzz"),
        PageChanged(direction=PageDirection.PREV),
        DetailResolved(name="bulbasaur", detail=ItemDetail.unknown()),
    ]

    def test_holds_after_every_event(self):
        state = BrowserState.initial()
        for event in self.EVENTS:
            state = reduce(state, event)
            view = state.view
            assert view.page_index * view.page_size < max(1, state.filtered_count)

    def test_clamps_stale_index(self):
        state = with_page_index(loaded(POKEMON), 3)
        state = reduce(state, DetailResolved(name="x", detail=ItemDetail.unknown()))
        assert state.view.page_index == 3

        shrunk = replace(state, view=replace(state.view, search_term="char"))
        shrunk = reduce(shrunk, ListFetchStarted())
        assert shrunk.view.page_index == 0


def test_unknown_event_raises():
    with pytest.raises(TypeError):
        reduce(BrowserState.initial(), object())  # type: ignore[arg-type]
