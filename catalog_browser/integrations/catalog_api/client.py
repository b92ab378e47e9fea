"""Remote catalog client.

Two GET operations against a paginated REST catalog:
- fetch_page: a listing page (first page from the configured locator,
  later pages from the opaque cursor the previous page returned)
- fetch_detail: an item's detail from its own locator

Neither raises on failure. Both return a ``FetchResult`` so the caller picks
the policy (the browser logs and downgrades).

Example:
    ```python
    async with CatalogClient() as client:
        result = await client.fetch_page()
        if result.ok:
            print([item.name for item in result.value.items])
    ```
"""

from __future__ import annotations

import logging
import time
from typing import Any

import httpx

from catalog_browser.conf.config import settings
from catalog_browser.core.errors import (
    CatalogError,
    DetailFetchError,
    FailureKind,
    FetchResult,
    ListFetchError,
)
from catalog_browser.core.http_retry import get_with_retry
from catalog_browser.core.models import CatalogPage, ItemDetail
from catalog_browser.integrations.catalog_api.parsing import PayloadError, parse_detail, parse_page


logger = logging.getLogger(__name__)


class CatalogClient:
    """HTTP client for the listing and detail endpoints."""

    def __init__(
        self,
        list_url: str | None = None,
        *,
        timeout: float | None = None,
        max_retries: int | None = None,
        retry_initial_delay: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.list_url = list_url or settings.CATALOG_LIST_URL
        self.timeout = timeout if timeout is not None else settings.CATALOG_HTTP_TIMEOUT_SECONDS
        self.max_retries = max_retries if max_retries is not None else settings.CATALOG_HTTP_MAX_RETRIES
        self.retry_initial_delay = (
            retry_initial_delay
            if retry_initial_delay is not None
            else settings.CATALOG_HTTP_RETRY_INITIAL_DELAY
        )
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> CatalogClient:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                transport=self._transport,
                headers={"Accept": "application/json"},
                follow_redirects=True,
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _get_json(self, url: str, error_cls: type[CatalogError]) -> tuple[Any, CatalogError | None]:
        """GET ``url`` and decode JSON; map every failure to ``error_cls``."""
        started = time.monotonic()
        try:
            response = await get_with_retry(
                self._get_client(),
                url,
                max_retries=self.max_retries,
                initial_delay=self.retry_initial_delay,
            )
        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            return None, error_cls(
                url,
                FailureKind.HTTP_STATUS,
                f"HTTP {status_code}",
                status_code=status_code,
            )
        except (httpx.RequestError, httpx.InvalidURL) as e:
            # InvalidURL is raised before any request exists, e.g. a cursor with a bad port
            return None, error_cls(url, FailureKind.TRANSPORT, str(e) or type(e).__name__)

        try:
            payload = response.json()
        except ValueError as e:
            return None, error_cls(url, FailureKind.PARSE, f"invalid JSON: {e}", response.status_code)

        logger.debug(
            "[CATALOG] GET %s -> %d in %.0fms",
            url,
            response.status_code,
            (time.monotonic() - started) * 1000,
        )
        return payload, None

    async def fetch_page(self, cursor: str | None = None) -> FetchResult[CatalogPage]:
        """Fetch one listing page. ``cursor`` is forwarded verbatim."""
        url = cursor or self.list_url
        payload, error = await self._get_json(url, ListFetchError)
        if error is not None:
            return FetchResult.failure(error)

        try:
            return FetchResult.success(parse_page(payload))
        except PayloadError as e:
            return FetchResult.failure(ListFetchError(url, FailureKind.PARSE, str(e)))

    async def fetch_detail(self, locator: str) -> FetchResult[ItemDetail]:
        """Fetch the detail behind an item's ``url``."""
        payload, error = await self._get_json(locator, DetailFetchError)
        if error is not None:
            return FetchResult.failure(error)

        try:
            return FetchResult.success(parse_detail(payload))
        except PayloadError as e:
            return FetchResult.failure(DetailFetchError(locator, FailureKind.PARSE, str(e)))
