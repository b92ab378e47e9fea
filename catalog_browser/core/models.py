"""Typed records exchanged with the remote catalog.

- CatalogItem: one row of a listing page
- ItemDetail: resolved per-item detail (or the sentinel after a failure)
- CatalogPage: one listing page plus its continuation cursor
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


UNKNOWN_TYPE_SUMMARY = "Unknown"


class CatalogItem(BaseModel):
    """Catalog entry as returned by the listing endpoint.

    `name` is the unique key within the accumulated list; `url` is an opaque
    locator used only to fetch the detail.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    url: str


class ItemDetail(BaseModel):
    """Per-item detail derived from the detail endpoint."""

    model_config = ConfigDict(frozen=True)

    type_summary: str = Field(..., description="Comma-joined type names, e.g. 'grass, poison'.")
    image_url: str = Field(default="", description="Sprite URL, empty when unavailable.")

    @classmethod
    def unknown(cls) -> ItemDetail:
        """Sentinel stored when a detail fetch fails, so the row still renders."""
        return UNKNOWN_DETAIL

    @property
    def is_unknown(self) -> bool:
        return self == UNKNOWN_DETAIL


UNKNOWN_DETAIL = ItemDetail(type_summary=UNKNOWN_TYPE_SUMMARY, image_url="")


class CatalogPage(BaseModel):
    """A single listing page."""

    model_config = ConfigDict(frozen=True)

    items: tuple[CatalogItem, ...] = ()
    next_cursor: str | None = None

    @property
    def has_next(self) -> bool:
        return self.next_cursor is not None
