"""Catalog browser entry point.

Usage:
    python -m catalog_browser                        # PokeAPI, 5 rows per page
    python -m catalog_browser --page-size 10
    python -m catalog_browser --list-url https://pokeapi.co/api/v2/ability

Environment Variables:
    CATALOG_LIST_URL - First listing page
    CATALOG_HTTP_TIMEOUT_SECONDS - Per-request timeout
    CATALOG_HTTP_MAX_RETRIES - Retries for transient failures (default 0)
    LOG_LEVEL / LOG_JSON - Logging output
"""

from __future__ import annotations

import argparse
import asyncio
import sys

from catalog_browser.conf.config import settings
from catalog_browser.core.logging import setup_logging
from catalog_browser.core.state_machine import BrowserState
from catalog_browser.integrations.catalog_api.client import CatalogClient
from catalog_browser.services.browser import CatalogBrowser
from catalog_browser.ui.app import BrowserApp


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="catalog_browser",
        description="Browse a paginated REST catalog in the terminal",
    )
    parser.add_argument(
        "--list-url",
        default=settings.CATALOG_LIST_URL,
        help=f"First listing page (default: {settings.CATALOG_LIST_URL})",
    )
    parser.add_argument(
        "--page-size",
        type=int,
        default=settings.CATALOG_DEFAULT_PAGE_SIZE,
        choices=settings.page_size_options,
        help=f"Rows per page (default: {settings.CATALOG_DEFAULT_PAGE_SIZE})",
    )
    parser.add_argument(
        "--log-level",
        default=settings.LOG_LEVEL.lower(),
        choices=["debug", "info", "warning", "error"],
        help="Log level (default: %(default)s)",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        default=settings.LOG_JSON,
        help="Emit JSON log lines",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(level=args.log_level, json_format=args.json_logs)

    browser = CatalogBrowser(
        CatalogClient(args.list_url),
        state=BrowserState.initial(
            page_size=args.page_size,
            page_size_options=settings.page_size_options,
        ),
    )
    asyncio.run(BrowserApp(browser).run())
    return 0


if __name__ == "__main__":
    sys.exit(main())
