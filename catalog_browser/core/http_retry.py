"""HTTP GET with optional retry for catalog endpoints.

Retries only transient failures (429/5xx and transport errors) with
exponential backoff. ``max_retries=0`` performs exactly one attempt.
"""

from __future__ import annotations

import asyncio
import logging

import httpx


logger = logging.getLogger(__name__)

DEFAULT_RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})


async def get_with_retry(
    client: httpx.AsyncClient,
    url: str,
    *,
    max_retries: int = 0,
    initial_delay: float = 0.5,
    max_delay: float = 10.0,
    backoff_factor: float = 2.0,
    retryable_status_codes: frozenset[int] | set[int] | None = None,
) -> httpx.Response:
    """GET ``url`` and return the successful response.

    Args:
        client: httpx AsyncClient instance
        url: Absolute request URL
        max_retries: Extra attempts after the first one
        initial_delay: Seconds before the first retry
        max_delay: Upper bound for a single backoff delay
        backoff_factor: Multiplier for exponential backoff
        retryable_status_codes: Status codes that trigger a retry

    Raises:
        httpx.HTTPStatusError: Non-2xx response after all attempts
        httpx.RequestError: Transport failure after all attempts
    """
    if retryable_status_codes is None:
        retryable_status_codes = DEFAULT_RETRYABLE_STATUS_CODES

    attempts = max_retries + 1
    for attempt in range(attempts):
        delay = min(initial_delay * (backoff_factor**attempt), max_delay)
        try:
            response = await client.get(url)
            response.raise_for_status()
            if attempt > 0:
                logger.info("GET succeeded on attempt %d/%d: %s", attempt + 1, attempts, url)
            return response

        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            if status_code not in retryable_status_codes or attempt == attempts - 1:
                logger.debug("GET %s failed with HTTP %d (attempt %d/%d)", url, status_code, attempt + 1, attempts)
                raise
            logger.warning(
                "HTTP %d, retrying (%d/%d) in %.2fs: %s",
                status_code,
                attempt + 1,
                attempts,
                delay,
                url,
            )

        except httpx.RequestError as e:
            if attempt == attempts - 1:
                logger.debug("GET %s failed: %s (attempt %d/%d)", url, e, attempt + 1, attempts)
                raise
            logger.warning(
                "Network error, retrying (%d/%d) in %.2fs: %s - %s",
                attempt + 1,
                attempts,
                delay,
                url,
                str(e)[:100],
            )

        await asyncio.sleep(delay)

    raise RuntimeError("get_with_retry exhausted attempts without a result")
