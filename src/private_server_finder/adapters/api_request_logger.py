"""Logging of outgoing listing API requests when PSF_LOG_REQUESTS is enabled."""

import json
import logging
import os
from typing import Any

logger = logging.getLogger(__name__)

_SENSITIVE_HEADERS = {"authorization", "cookie", "x-csrf-token"}
# Cursors are long opaque tokens; the head is enough to tell pages apart
_CURSOR_PREVIEW_CHARS = 16


def should_log_requests() -> bool:
    """Check if request logging is enabled via the PSF_LOG_REQUESTS environment variable."""
    return os.getenv("PSF_LOG_REQUESTS", "").lower() == "true"


def _shorten_cursor(params: dict[str, Any]) -> dict[str, Any]:
    cursor = params.get("cursor")
    if isinstance(cursor, str) and len(cursor) > _CURSOR_PREVIEW_CHARS:
        return {**params, "cursor": cursor[:_CURSOR_PREVIEW_CHARS] + "…"}
    return params


def _build_url_with_params(url: str, params: dict[str, Any] | None) -> str:
    if not params:
        return url
    query = "&".join(f"{k}={v}" for k, v in sorted(_shorten_cursor(params).items()))
    return f"{url}&{query}" if "?" in url else f"{url}?{query}"


def _redact_headers(headers: dict[str, str]) -> dict[str, str]:
    return {
        k: "***REDACTED***" if k.lower() in _SENSITIVE_HEADERS else v for k, v in headers.items()
    }


def log_api_request(
    method: str,
    url: str,
    params: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
) -> None:
    """Log an outgoing request if PSF_LOG_REQUESTS is enabled.

    Args:
        method: HTTP method.
        url: Request URL without query string.
        params: Query parameters; long cursors are shortened.
        headers: Request headers; credentials are redacted.
    """
    if not should_log_requests():
        return

    lines = [f"{method} {_build_url_with_params(url, params)}"]
    if headers:
        lines.append(f"Headers: {json.dumps(_redact_headers(headers), indent=2)}")
    logger.info("API Request:\n" + "\n".join(lines))
