"""Base URL validation and redaction helpers for logging."""

from __future__ import annotations

from typing import Any, Mapping
from urllib.parse import urlparse

from .exceptions import ApifyInvalidParameterError


SENSITIVE_HEADERS = {
    "authorization",
    "x-apify-token",
    "cookie",
}
SENSITIVE_QUERY_PARAMS = {"token"}
REDACTED = "[REDACTED]"


def sanitize_headers(headers: Mapping[str, str]) -> dict[str, str]:
    """Return headers with sensitive values redacted for logging."""
    redacted: dict[str, str] = {}
    for key, value in headers.items():
        if key.lower() in SENSITIVE_HEADERS:
            redacted[key] = REDACTED
        else:
            redacted[key] = value
    return redacted


def sanitize_query(params: list[tuple[str, Any]] | Mapping[str, Any]) -> list[tuple[str, Any]]:
    """Return query parameters with the API token redacted for logging."""
    items = params.items() if isinstance(params, Mapping) else params
    return [(key, REDACTED if key in SENSITIVE_QUERY_PARAMS else value) for key, value in items]


def validate_base_url(url: str) -> None:
    """Reject base URLs that are empty, schemeless or not HTTP(S)."""
    if not isinstance(url, str) or not url:
        raise ApifyInvalidParameterError('Parameter "base_url" of type str must be provided')
    if "\x00" in url:
        raise ApifyInvalidParameterError("Invalid base_url")
    parsed = urlparse(url)
    if not parsed.scheme or not parsed.netloc:
        raise ApifyInvalidParameterError("base_url must include scheme and host")
    if parsed.scheme not in {"http", "https"}:
        raise ApifyInvalidParameterError(f"Unsupported base_url scheme: {parsed.scheme}")
