"""Turn raw catalog JSON into typed records.

Listing payload:  {"results": [{"name": ..., "url": ...}], "next": str | null}
Detail payload:   {"types": [{"type": {"name": ...}}], "sprites": {"front_default": ...}}
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from catalog_browser.core.models import CatalogItem, CatalogPage, ItemDetail


logger = logging.getLogger(__name__)


class PayloadError(ValueError):
    """Payload does not have the expected shape."""


def parse_page(payload: Any) -> CatalogPage:
    if not isinstance(payload, dict):
        raise PayloadError(f"listing payload must be an object, got {type(payload).__name__}")

    results = payload.get("results")
    if not isinstance(results, list):
        raise PayloadError("listing payload has no 'results' list")

    next_cursor = payload.get("next")
    if next_cursor is not None and not isinstance(next_cursor, str):
        raise PayloadError("listing 'next' must be a string or null")

    items: list[CatalogItem] = []
    for idx, raw in enumerate(results):
        try:
            items.append(CatalogItem.model_validate(raw))
        except ValidationError as e:
            # One bad row should not cost the whole page
            logger.warning("[CATALOG] Skipping malformed result[%d]: %s", idx, e.errors()[:1])
    return CatalogPage(items=tuple(items), next_cursor=next_cursor or None)


def parse_detail(payload: Any) -> ItemDetail:
    if not isinstance(payload, dict):
        raise PayloadError(f"detail payload must be an object, got {type(payload).__name__}")

    types = payload.get("types")
    if not isinstance(types, list):
        raise PayloadError("detail payload has no 'types' list")

    names: list[str] = []
    for entry in types:
        try:
            names.append(str(entry["type"]["name"]))
        except (KeyError, TypeError):
            raise PayloadError(f"malformed type entry: {entry!r}") from None

    sprites = payload.get("sprites")
    if not isinstance(sprites, dict):
        raise PayloadError("detail payload has no 'sprites' object")
    image_url = sprites.get("front_default") or ""

    return ItemDetail(type_summary=", ".join(names), image_url=str(image_url))
