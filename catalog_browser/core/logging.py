"""Structured logging configuration for the catalog browser.

JSON output for log aggregation, a compact human-readable format for the
terminal, and helpers that tag failures with a root cause.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any

class JSONFormatter(logging.Formatter):
    """Format log records as JSON for structured logging."""

    def __init__(
        self,
        *,
        include_timestamp: bool = True,
        include_path: bool = False,
        extra_fields: dict[str, Any] | None = None,
    ):
        super().__init__()
        self.include_timestamp = include_timestamp
        self.include_path = include_path
        self.extra_fields = extra_fields or {}

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record as a JSON string."""
        log_data: dict[str, Any] = {}

        if self.include_timestamp:
            log_data["timestamp"] = datetime.now(UTC).isoformat()
        log_data["level"] = record.levelname
        log_data["logger"] = record.name
        log_data["message"] = record.getMessage()

        if self.include_path:
            log_data["path"] = f"{record.pathname}:{record.lineno}"
            log_data["function"] = record.funcName

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key in ["event", "url", "item_name", "root_cause", "status_code", "duration_ms"]:
            if hasattr(record, key):
                log_data[key] = getattr(record, key)

        log_data.update(self.extra_fields)

        return json.dumps(log_data, ensure_ascii=False, default=str)

class PrettyFormatter(logging.Formatter):
    """Human-readable formatter for the terminal."""

    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def __init__(self, *, use_color: bool = True):
        super().__init__()
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, "") if self.use_color else ""
        reset = self.RESET if self.use_color else ""

        timestamp = datetime.now(UTC).strftime("%H:%M:%S")
        level = f"{color}{record.levelname:8}{reset}"
        logger_name = record.name[:24].ljust(24)
        output = f"{timestamp} | {level} | {logger_name} | {record.getMessage()}"

        if record.exc_info:
            output += f"\n{self.formatException(record.exc_info)}"

        return output

def setup_logging(
    *,
    level: str = "INFO",
    json_format: bool = False,
    include_path: bool = False,
    service_name: str = "catalog-browser",
    stream: Any = None,
) -> None:
    """Configure the root logger.

    Args:
        level: Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: Use JSON format (True) or pretty format (False)
        include_path: Include source file path in JSON logs
        service_name: Service name added to every JSON line
        stream: Output stream, stderr by default so it does not mix with the table
    """
    root_logger = logging.getLogger()
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    root_logger.setLevel(numeric_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(numeric_level)

    if json_format:
        formatter: logging.Formatter = JSONFormatter(
            include_path=include_path,
            extra_fields={"service": service_name},
        )
    else:
        formatter = PrettyFormatter()

    handler.setFormatter(formatter)
    root_logger.addHandler(handler)

    # Per-request lines from httpx drown out our own events
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


LOG_EVENT_TITLES: dict[str, str] = {
    "catalog_page_requested": "Catalog: page requested",
    "catalog_page_loaded": "Catalog: page loaded",
    "catalog_page_skipped": "Catalog: fetch skipped (already loading)",
    "catalog_exhausted": "Catalog: no more pages",
    "detail_cache_hit": "Detail: cache hit",
    "detail_requested": "Detail: fetch started",
    "detail_loaded": "Detail: loaded",
    "browser_closed": "Browser: closed",
}

def log_event(
    logger: logging.Logger,
    *,
    event: str,
    level: str | None = None,
    **kwargs: Any,
) -> None:
    """Log a titled event with its context in ``extra``.

    ``catalog_page_loaded`` gets a one-line summary:
        Catalog: page loaded | +{added} items | total={total} | more={has_more}
    """
    lvl = (level or "info").lower()
    log_fn = getattr(logger, lvl, logger.info)

    title = LOG_EVENT_TITLES.get(event, event)

    if event == "catalog_page_loaded":
        parts = [title]
        if "added" in kwargs:
            parts.append(f"| +{kwargs['added']} items")
        if "total" in kwargs:
            parts.append(f"| total={kwargs['total']}")
        if "has_more" in kwargs:
            parts.append(f"| more={kwargs['has_more']}")
        message = " ".join(parts)
    elif "item_name" in kwargs:
        message = f"{title} [{kwargs['item_name']}]"
    else:
        message = title

    log_fn(message, extra={"event": event, **kwargs})

def safe_preview(value: Any, max_len: int = 120) -> str:
    """Return a safe string preview of value."""
    if value is None:
        return ""
    text = str(value)
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."

def classify_root_cause(error: Any, *, status_code: int | None = None) -> str:
    """Classify a failure for the ``[ROOT_CAUSE: ...]`` tag."""
    root_cause = getattr(error, "root_cause", None)
    if isinstance(root_cause, str) and root_cause:
        return root_cause

    if status_code is not None:
        if 400 <= status_code < 500:
            return f"CATALOG_REJECTED_{status_code}"
        if status_code >= 500:
            return f"CATALOG_UPSTREAM_{status_code}"

    msg = str(error or "").lower()
    if "timeout" in msg or "timed out" in msg:
        return "CATALOG_TIMEOUT"
    if "json" in msg or "decode" in msg:
        return "CATALOG_PARSE"
    return "UNKNOWN"

def log_with_root_cause(
    logger: logging.Logger,
    level: str,
    message: str,
    *,
    root_cause: str | None = None,
    error: Exception | None = None,
    **context: Any,
) -> None:
    """Log ``message`` with a ``[ROOT_CAUSE: ...]`` suffix.

    Example:
        log_with_root_cause(logger, "warning", "Page failed", error=exc, url=url)
        # Page failed [ROOT_CAUSE: CATALOG_TRANSPORT]
    """
    level = level.upper()
    if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
        level = "INFO"

    if root_cause is None and error is not None:
        root_cause = classify_root_cause(error, status_code=context.get("status_code"))

    if root_cause:
        message = f"{message} [ROOT_CAUSE: {root_cause}]"

    extra = context.copy()
    if root_cause:
        extra["root_cause"] = root_cause
    if error is not None:
        extra["error_type"] = type(error).__name__
        extra["error_message"] = safe_preview(error, 200)

    log_fn = getattr(logger, level.lower(), logger.info)
    log_fn(message, extra=extra)
