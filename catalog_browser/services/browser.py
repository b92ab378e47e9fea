"""
Catalog browser controller.
===========================
Owns the single ``BrowserState`` and turns user input and network
completions into reducer events.

- mount / scroll near bottom -> listing fetch (one in flight at most)
- row click                  -> detail fetch through the DetailCache
- search / sort / page size / page -> synchronous view transitions

Remote failures are logged and downgraded here: a failed page leaves the
list and cursor untouched; a failed detail stores the sentinel.
"""

from __future__ import annotations

import asyncio
import logging

from catalog_browser.conf.config import settings
from catalog_browser.core.composer import ComposedPage
from catalog_browser.core.errors import DetailFetchError, FailureKind, FetchResult, ListFetchError
from catalog_browser.core.logging import log_event, log_with_root_cause
from catalog_browser.core.models import ItemDetail
from catalog_browser.core.state_machine import (
    BrowserState,
    DetailResolved,
    Event,
    ListFetchFailed,
    ListFetchStarted,
    ListFetchSucceeded,
    PageChanged,
    PageSizeChanged,
    SearchChanged,
    SortChanged,
    reduce,
)
from catalog_browser.core.view_state import PageDirection, SortColumn
from catalog_browser.integrations.catalog_api.client import CatalogClient
from catalog_browser.services.detail_cache import DetailCache


logger = logging.getLogger(__name__)


def is_near_bottom(
    scroll_height: float,
    scroll_top: float,
    client_height: float,
    threshold: float = 0,
) -> bool:
    """True when the viewport bottom is within ``threshold`` of the content end."""
    return scroll_height - (scroll_top + client_height) <= threshold


class CatalogBrowser:
    """Interaction controller for the catalog table."""

    def __init__(
        self,
        client: CatalogClient | None = None,
        *,
        cache: DetailCache | None = None,
        state: BrowserState | None = None,
    ) -> None:
        self.client = client or CatalogClient()
        self.cache = cache or DetailCache()
        self._state = state or BrowserState.initial(
            page_size=settings.CATALOG_DEFAULT_PAGE_SIZE,
            page_size_options=settings.page_size_options,
        )
        self._mounted = False
        self._closed = False

    @property
    def state(self) -> BrowserState:
        return self._state

    @property
    def closed(self) -> bool:
        return self._closed

    def dispatch(self, event: Event) -> BrowserState:
        self._state = reduce(self._state, event)
        return self._state

    def view(self) -> ComposedPage:
        return self._state.compose()

    # =========================================================================
    # LISTING
    # =========================================================================

    async def on_mount(self) -> bool:
        """Load the first page. Returns True when a page was merged."""
        self._mounted = True
        if self._state.loading:
            log_event(logger, event="catalog_page_skipped", level="debug")
            return False
        return await self._load_page(None)

    async def on_scroll_near_bottom(self) -> bool:
        """Load the next page unless one is already loading or none is left."""
        if self._state.loading:
            log_event(logger, event="catalog_page_skipped", level="debug")
            return False

        catalog = self._state.catalog
        if catalog.has_more:
            return await self._load_page(catalog.next_cursor)

        if self._mounted and catalog.pages_loaded == 0:
            # First page never arrived; scrolling retries it
            return await self._load_page(None)

        log_event(logger, event="catalog_exhausted", level="debug")
        return False

    async def _load_page(self, cursor: str | None) -> bool:
        url = cursor or self.client.list_url
        self.dispatch(ListFetchStarted(cursor=cursor))
        log_event(logger, event="catalog_page_requested", level="debug", url=url)

        try:
            result = await self.client.fetch_page(cursor)
        except asyncio.CancelledError:
            # loading is cleared on every exit path
            self.dispatch(ListFetchFailed(error=ListFetchError(url, FailureKind.TRANSPORT, "cancelled")))
            raise
        except Exception as e:
            result = FetchResult.failure(ListFetchError(url, FailureKind.TRANSPORT, str(e) or type(e).__name__))
        if self._closed:
            logger.debug("[BROWSER] Discarding page result after close")
            return False

        if not result.ok:
            error = result.error
            log_with_root_cause(
                logger,
                "warning",
                "Failed to fetch catalog page",
                error=error,
                url=error.url,
                status_code=error.status_code,
            )
            self.dispatch(ListFetchFailed(error=error))
            return False

        before = len(self._state.catalog)
        self.dispatch(ListFetchSucceeded(page=result.value))
        catalog = self._state.catalog
        log_event(
            logger,
            event="catalog_page_loaded",
            added=len(catalog) - before,
            total=len(catalog),
            has_more=catalog.has_more,
        )
        return True

    # =========================================================================
    # DETAILS
    # =========================================================================

    async def on_row_click(self, name: str, locator: str) -> ItemDetail | None:
        """Expand a row. Already-expanded rows are left alone."""
        if self.cache.has(name):
            log_event(logger, event="detail_cache_hit", level="debug", item_name=name)
            return self.cache.get(name)

        detail = await self.cache.get_or_fetch(name, locator, self._resolve_detail)
        if self._closed:
            return None
        if name not in self._state.details:
            self.dispatch(DetailResolved(name=name, detail=detail))
        return detail

    async def _resolve_detail(self, locator: str) -> ItemDetail:
        log_event(logger, event="detail_requested", level="debug", url=locator)
        try:
            result = await self.client.fetch_detail(locator)
        except Exception as e:
            result = FetchResult.failure(DetailFetchError(locator, FailureKind.TRANSPORT, str(e) or type(e).__name__))
        if result.ok:
            log_event(logger, event="detail_loaded", level="debug", url=locator)
            return result.value

        error = result.error
        log_with_root_cause(
            logger,
            "warning",
            "Failed to fetch item detail, showing placeholder",
            error=error,
            url=error.url,
            status_code=error.status_code,
        )
        return ItemDetail.unknown()

    # =========================================================================
    # VIEW CONTROLS
    # =========================================================================

    def on_search_change(self, text: str) -> BrowserState:
        return self.dispatch(SearchChanged(text=text or ""))

    def on_sort_change(self, column: str | SortColumn) -> BrowserState:
        return self.dispatch(SortChanged(column=SortColumn.from_string(column)))

    def on_page_size_change(self, page_size: int | str) -> BrowserState:
        try:
            size = int(page_size)
        except (TypeError, ValueError):
            raise ValueError(f"Page size must be an integer, got {page_size!r}") from None
        return self.dispatch(PageSizeChanged(page_size=size))

    def on_page_change(self, direction: str | PageDirection) -> BrowserState:
        return self.dispatch(PageChanged(direction=PageDirection.from_string(direction)))

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    async def aclose(self) -> None:
        """Stop accepting results and release the HTTP client."""
        if self._closed:
            return
        self._closed = True
        await self.client.aclose()
        log_event(logger, event="browser_closed", level="debug")

    async def __aenter__(self) -> CatalogBrowser:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()
