"""Remote catalog (PokeAPI-shaped) integration package."""

from catalog_browser.integrations.catalog_api.client import CatalogClient
from catalog_browser.integrations.catalog_api.parsing import PayloadError, parse_detail, parse_page

__all__ = [
    "CatalogClient",
    "PayloadError",
    "parse_detail",
    "parse_page",
]
