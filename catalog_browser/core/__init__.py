"""Core building blocks of the catalog browser.

- models: CatalogItem, ItemDetail, CatalogPage
- errors: failure kinds and FetchResult
- accumulator / composer / view_state: pure list and view logic
- state_machine: BrowserState and the reducer
"""

from catalog_browser.core.errors import (
    CatalogError,
    DetailFetchError,
    FailureKind,
    FetchResult,
    ListFetchError,
)
from catalog_browser.core.models import CatalogItem, CatalogPage, ItemDetail
from catalog_browser.core.state_machine import BrowserState, reduce
from catalog_browser.core.view_state import PageDirection, SortColumn, SortDirection, ViewState


__all__ = [
    # Models
    "CatalogItem",
    "CatalogPage",
    "ItemDetail",
    # Errors
    "CatalogError",
    "DetailFetchError",
    "FailureKind",
    "FetchResult",
    "ListFetchError",
    # State
    "BrowserState",
    "PageDirection",
    "SortColumn",
    "SortDirection",
    "ViewState",
    "reduce",
]
