"""Configuration for the catalog browser.

Reads environment variables for the remote catalog location, HTTP tuning
and logging.
"""

from __future__ import annotations

import logging
from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Runtime configuration loaded from environment."""

    CATALOG_LIST_URL: str = Field(
        default="https://pokeapi.co/api/v2/pokemon",
        description="Well-known locator of the first catalog page.",
    )

    # =========================================================================
    # HTTP
    # =========================================================================
    CATALOG_HTTP_TIMEOUT_SECONDS: float = Field(
        default=5.0,
        gt=0,
        description="Per-request timeout passed to httpx (matches httpx's own default).",
    )
    CATALOG_HTTP_MAX_RETRIES: int = Field(
        default=0,
        ge=0,
        description=(
            "Retries for transient failures (429/5xx, transport errors). "
            "0 keeps the original behaviour: a failed page is simply skipped."
        ),
    )
    CATALOG_HTTP_RETRY_INITIAL_DELAY: float = Field(
        default=0.5,
        ge=0,
        description="Seconds before the first retry; doubles on each attempt.",
    )

    # =========================================================================
    # VIEW
    # =========================================================================
    CATALOG_PAGE_SIZE_OPTIONS: str = Field(
        default="5,10,25,50",
        description="Comma-separated list of selectable rows-per-page values.",
    )
    CATALOG_DEFAULT_PAGE_SIZE: int = Field(
        default=5,
        gt=0,
        description="Rows per page on startup. Must be one of CATALOG_PAGE_SIZE_OPTIONS.",
    )

    # =========================================================================
    # OBSERVABILITY
    # =========================================================================
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).",
    )
    LOG_JSON: bool = Field(
        default=False,
        description="Emit JSON log lines instead of the human-readable format.",
    )

    @property
    def page_size_options(self) -> tuple[int, ...]:
        """Return parsed page size options, ascending and without duplicates."""

        sizes: set[int] = set()
        for segment in self.CATALOG_PAGE_SIZE_OPTIONS.split(","):
            segment = segment.strip()
            if not segment:
                continue
            try:
                value = int(segment)
            except ValueError:
                logger.warning("[CONFIG] Ignoring non-numeric page size option: %r", segment)
                continue
            if value > 0:
                sizes.add(value)
        return tuple(sorted(sizes))

    @model_validator(mode="after")
    def _validate_default_page_size(self) -> "Settings":
        options = self.page_size_options
        if not options:
            raise ValueError("CATALOG_PAGE_SIZE_OPTIONS must contain at least one positive integer")
        if self.CATALOG_DEFAULT_PAGE_SIZE not in options:
            raise ValueError(
                f"CATALOG_DEFAULT_PAGE_SIZE={self.CATALOG_DEFAULT_PAGE_SIZE} "
                f"is not one of {list(options)}"
            )
        return self

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached settings instance."""

    return Settings()  # type: ignore[arg-type]


settings = get_settings()
