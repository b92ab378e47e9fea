"""Failure types for remote catalog calls.

The catalog client never raises on a failed fetch. It returns a
``FetchResult`` carrying either the parsed value or one of the errors below,
and the controller decides what to do with it (log and downgrade, retry, ...).

Usage:
    result = await client.fetch_page()
    if result.ok:
        page = result.value
    else:
        logger.warning("Page failed: %s", result.error)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar


T = TypeVar("T")


class FailureKind(str, Enum):
    """Why a remote call failed."""

    TRANSPORT = "transport"  # connection refused, DNS, timeout, ...
    HTTP_STATUS = "http_status"  # non-2xx response
    PARSE = "parse"  # body is not JSON or lacks the expected shape

    @property
    def root_cause(self) -> str:
        return f"CATALOG_{self.value.upper()}"


class CatalogError(Exception):
    """Base class for remote catalog failures."""

    operation = "catalog"

    def __init__(
        self,
        url: str,
        kind: FailureKind,
        message: str | None = None,
        status_code: int | None = None,
    ):
        self.url = url
        self.kind = kind
        self.status_code = status_code
        self.message = message or kind.value
        super().__init__(f"{self.operation} fetch failed ({kind.value}): {self.message}")

    @property
    def root_cause(self) -> str:
        if self.kind is FailureKind.HTTP_STATUS and self.status_code is not None:
            return f"CATALOG_HTTP_{self.status_code}"
        return self.kind.root_cause

    def to_dict(self) -> dict[str, Any]:
        """Structured representation for logging."""
        return {
            "operation": self.operation,
            "url": self.url,
            "kind": self.kind.value,
            "status_code": self.status_code,
            "message": self.message,
        }


class ListFetchError(CatalogError):
    """Raised (returned) when a catalog listing page cannot be fetched."""

    operation = "list"


class DetailFetchError(CatalogError):
    """Raised (returned) when an item's detail cannot be fetched."""

    operation = "detail"


@dataclass(frozen=True)
class FetchResult(Generic[T]):
    """Outcome of a remote call: exactly one of ``value`` / ``error`` is set."""

    value: T | None = None
    error: CatalogError | None = None

    def __post_init__(self) -> None:
        if (self.value is None) == (self.error is None):
            raise ValueError("FetchResult needs exactly one of value or error")

    @classmethod
    def success(cls, value: T) -> FetchResult[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, error: CatalogError) -> FetchResult[T]:
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value or raise the carried error."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]

    def unwrap_or(self, default: T) -> T:
        return default if self.error is not None else self.value  # type: ignore[return-value]
