"""Logging of outgoing API requests when GW2P_LOG_REQUESTS is enabled."""

import logging
import os
from typing import Any

logger = logging.getLogger(__name__)


def should_log_requests() -> bool:
    """Check if request logging is enabled via the GW2P_LOG_REQUESTS environment variable."""
    return os.getenv("GW2P_LOG_REQUESTS", "").lower() == "true"


def build_url(url: str, params: dict[str, Any] | None) -> str:
    """Append query parameters to a URL, sorted for stable output."""
    if not params:
        return url
    query = "&".join(f"{k}={v}" for k, v in sorted(params.items()))
    return f"{url}&{query}" if "?" in url else f"{url}?{query}"


def log_api_request(method: str, url: str, params: dict[str, Any] | None = None) -> None:
    """Log an API request if GW2P_LOG_REQUESTS is enabled.

    Args:
        method: HTTP method.
        url: Request URL.
        params: Query parameters (optional).
    """
    if not should_log_requests():
        return
    logger.info(f"API Request: {method} {build_url(url, params)}")
