"""Name-keyed cache of item details with one shared fetch per name."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Mapping
from types import MappingProxyType

from catalog_browser.core.models import ItemDetail


logger = logging.getLogger(__name__)

DetailFetcher = Callable[[str], Awaitable[ItemDetail]]


class DetailCache:
    """Per-name memo of resolved item details.

    At most one fetch runs per name: concurrent ``get_or_fetch`` calls for a
    name that is still loading await the same task.
    """

    def __init__(self) -> None:
        self._items: dict[str, ItemDetail] = {}
        self._pending: dict[str, asyncio.Task[ItemDetail]] = {}

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, name: object) -> bool:
        return name in self._items

    def has(self, name: str) -> bool:
        return name in self._items

    def get(self, name: str) -> ItemDetail | None:
        return self._items.get(name)

    def set(self, name: str, detail: ItemDetail) -> None:
        self._items[name] = detail

    def is_pending(self, name: str) -> bool:
        return name in self._pending

    def snapshot(self) -> Mapping[str, ItemDetail]:
        """Read-only copy for rendering."""
        return MappingProxyType(dict(self._items))

    async def get_or_fetch(self, name: str, locator: str, fetcher: DetailFetcher) -> ItemDetail:
        cached = self._items.get(name)
        if cached is not None:
            return cached

        task = self._pending.get(name)
        if task is None:
            logger.debug("[DETAIL_CACHE] miss for %s, fetching %s", name, locator)
            task = asyncio.ensure_future(fetcher(locator))
            self._pending[name] = task
            task.add_done_callback(lambda t, key=name: self._settle(key, t))
        else:
            logger.debug("[DETAIL_CACHE] joining in-flight fetch for %s", name)

        # shield: one caller being cancelled must not cancel the shared fetch
        detail = await asyncio.shield(task)
        self._items.setdefault(name, detail)
        return self._items[name]

    def _settle(self, name: str, task: asyncio.Task[ItemDetail]) -> None:
        self._pending.pop(name, None)
        if task.cancelled() or task.exception() is not None:
            return
        self._items.setdefault(name, task.result())
