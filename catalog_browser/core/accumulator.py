"""Accumulated catalog list: append-only, deduplicated by name."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, replace

from catalog_browser.core.models import CatalogItem, CatalogPage


def append_page(
    existing: Sequence[CatalogItem],
    new_items: Iterable[CatalogItem],
) -> tuple[CatalogItem, ...]:
    """Append ``new_items`` whose name is not yet present, keeping fetch order.

    Re-delivering a page that is already merged leaves the list unchanged.
    """
    seen = {item.name for item in existing}
    added: list[CatalogItem] = []
    for item in new_items:
        if item.name in seen:
            continue
        seen.add(item.name)
        added.append(item)
    return (*existing, *added)


@dataclass(frozen=True)
class AccumulatedList:
    """Every item fetched so far plus the cursor for the next page."""

    items: tuple[CatalogItem, ...] = ()
    next_cursor: str | None = None
    pages_loaded: int = 0

    @property
    def has_more(self) -> bool:
        return self.next_cursor is not None

    def __len__(self) -> int:
        return len(self.items)

    def names(self) -> list[str]:
        return [item.name for item in self.items]

    def merge(self, page: CatalogPage) -> AccumulatedList:
        """Return a new list with ``page`` merged and its cursor stored."""
        return replace(
            self,
            items=append_page(self.items, page.items),
            next_cursor=page.next_cursor,
            pages_loaded=self.pages_loaded + 1,
        )
