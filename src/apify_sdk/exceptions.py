"""SDK-specific exceptions."""

from __future__ import annotations

from typing import Any, Mapping


INVALID_PARAMETER_ERROR_TYPE = "invalid-parameter"
REQUEST_FAILED_ERROR_TYPE = "request-failed"
CANCELLED_ERROR_TYPE = "cancelled"
REQUEST_FAILED_ERROR_MESSAGE = "Server request failed."
NOT_FOUND_STATUS_CODE = 404


class ApifyClientError(Exception):
    """Base exception for all Apify SDK failures.

    ``type`` is a stable machine-readable kind. For API failures it is the
    ``error.type`` reported by the platform (e.g. ``record-not-found``) and
    falls back to ``request-failed``. ``details`` carries the request context:
    ``status_code``, ``url``, ``method``, ``attempt``, ``has_body`` and ``error``
    (the low-level error message) when available.
    """

    default_type = REQUEST_FAILED_ERROR_TYPE

    def __init__(
        self,
        message: str,
        *,
        type: str | None = None,
        details: Mapping[str, Any] | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.type = type or self.default_type
        self.details = dict(details) if details is not None else {}
        self.cause = cause

    @property
    def status_code(self) -> int | None:
        return self.details.get("status_code")

    @property
    def attempt(self) -> int | None:
        return self.details.get("attempt")

    def __str__(self) -> str:  # pragma: no cover - simple formatting
        if self.status_code is None:
            return f"{self.type}: {self.message}"
        return f"{self.status_code} {self.type}: {self.message}"


class ApifyInvalidParameterError(ApifyClientError):
    """Raised before any I/O when a caller passes a malformed or missing argument."""

    default_type = INVALID_PARAMETER_ERROR_TYPE


class ApifyRequestFailedError(ApifyClientError):
    """Raised when the API call failed terminally or ran out of retries."""


class ApifyCancelledError(ApifyClientError):
    """Raised when a pending call is aborted through its cancel event."""

    default_type = CANCELLED_ERROR_TYPE
