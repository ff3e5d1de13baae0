"""Single-attempt request execution and response classification."""

from __future__ import annotations

import asyncio
import gzip
import json
import logging
import os
import platform
import threading
import time
from typing import Any, Awaitable, Callable, Mapping

import httpx

from .exceptions import (
    REQUEST_FAILED_ERROR_MESSAGE,
    ApifyInvalidParameterError,
    ApifyRequestFailedError,
)
from .models import RawResponse
from .request_options import RATE_LIMIT_EXCEEDED_STATUS_CODE, CallOptions
from .retry import (
    Outcome,
    RetryableFailure,
    Success,
    TerminalFailure,
    run_with_backoff,
    run_with_backoff_async,
)
from .security import sanitize_headers, sanitize_query
from .statistics import Statistics
from .utils import CONTENT_TYPE_JSON, new_error
from .version import __version__


logger = logging.getLogger(__name__)

SUPPORTED_METHODS = frozenset({"GET", "DELETE", "HEAD", "POST", "PUT", "PATCH"})


def _user_agent() -> str:
    is_at_home = bool(os.getenv("APIFY_IS_AT_HOME"))
    return (
        f"ApifySDK/{__version__} ({platform.system()}; Python/{platform.python_version()}); "
        f"isAtHome/{str(is_at_home).lower()}"
    )


def serialize_query(query: Mapping[str, Any] | None, token: str | None = None) -> list[tuple[str, Any]]:
    """Flatten query options the way the API reads them.

    ``None`` values are dropped, booleans become ``1``/``0`` and sequences are
    joined with commas. The token is appended unless the query already has one.
    """
    params: list[tuple[str, Any]] = []
    for key, value in (query or {}).items():
        if value is None:
            continue
        if isinstance(value, bool):
            value = int(value)
        elif isinstance(value, (list, tuple)):
            value = ",".join(str(item) for item in value)
        params.append((key, value))
    if token and "token" not in (query or {}):
        params.append(("token", token))
    return params


class _BaseHttpClient:
    """Request building and classification shared by the sync and async executors."""

    def __init__(self, stats: Statistics | None = None) -> None:
        self.stats = stats or Statistics()
        self.user_agent = _user_agent()

    @staticmethod
    def _validate(options: CallOptions) -> str:
        if not isinstance(options.base_url, str) or not options.base_url:
            raise ApifyInvalidParameterError('Parameter "base_url" of type str must be provided')
        if not isinstance(options.method, str) or not options.method:
            raise ApifyInvalidParameterError('Parameter "method" of type str must be provided')
        method = options.method.upper()
        if method not in SUPPORTED_METHODS:
            raise ApifyInvalidParameterError(f'Parameter "method" must be one of {sorted(SUPPORTED_METHODS)}')
        return method

    def _headers(self, options: CallOptions) -> httpx.Headers:
        headers = httpx.Headers(
            {
                "Accept": "application/json, */*",
                "Accept-Encoding": "gzip",
                "User-Agent": self.user_agent,
            }
        )
        for key, value in (options.headers or {}).items():
            if value is not None:
                headers[str(key)] = str(value)
        if options.content_type:
            headers["Content-Type"] = options.content_type
        return headers

    @staticmethod
    def _encode_body(options: CallOptions, headers: httpx.Headers) -> bytes | None:
        body = options.body
        if body is None:
            return None
        if isinstance(body, (bytes, bytearray)):
            content = bytes(body)
        elif isinstance(body, str):
            content = body.encode("utf-8")
        else:
            content = json.dumps(body).encode("utf-8")
            if options.json and "content-type" not in headers:
                headers["Content-Type"] = f"{CONTENT_TYPE_JSON}; charset=utf-8"
        if options.gzip and content:
            content = gzip.compress(content)
            headers["Content-Encoding"] = "gzip"
        return content

    def _build_request(self, options: CallOptions, method: str) -> dict[str, Any]:
        headers = self._headers(options)
        content = self._encode_body(options, headers)
        return {
            "method": method,
            "url": options.url,
            "params": serialize_query(options.query, options.token),
            "headers": headers,
            "content": content,
            "timeout": options.timeout,
        }

    @staticmethod
    def _details(options: CallOptions, method: str, attempt: int, **extra: Any) -> dict[str, Any]:
        details = {"url": options.url, "method": method, "attempt": attempt}
        details.update(extra)
        return details

    def _transport_failure(self, options: CallOptions, method: str, attempt: int, exc: Exception) -> RetryableFailure:
        details = self._details(options, method, attempt, status_code=None, has_body=False, error=str(exc))
        logger.debug("%s %s attempt %d raised %s", method, options.url, attempt, type(exc).__name__)
        error = ApifyRequestFailedError(REQUEST_FAILED_ERROR_MESSAGE, details=details, cause=exc)
        return RetryableFailure(error)

    def _classify(self, options: CallOptions, method: str, attempt: int, response: RawResponse) -> Outcome:
        status = response.status_code
        has_body = bool(response.content)

        if status < 300:
            if not options.json:
                return Success(response.content, response)
            if not has_body:
                return Success(None, response)
            try:
                return Success(json.loads(response.content), response)
            except ValueError as exc:
                details = self._details(options, method, attempt, status_code=status, has_body=True, error=str(exc))
                return RetryableFailure(ApifyRequestFailedError(REQUEST_FAILED_ERROR_MESSAGE, details=details, cause=exc))

        if status == RATE_LIMIT_EXCEEDED_STATUS_CODE:
            self.stats.add_rate_limit_error(attempt)

        error = new_error(response.content, self._details(options, method, attempt, status_code=status, has_body=has_body))
        if 300 <= status < 500 and status not in options.retry_on_status_codes:
            return TerminalFailure(error)
        return RetryableFailure(error)

    def _log_attempt(self, request: Mapping[str, Any], attempt: int) -> None:
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "%s %s attempt %d params=%s headers=%s",
                request["method"],
                request["url"],
                attempt,
                sanitize_query(request["params"]),
                sanitize_headers(request["headers"]),
            )


class HttpClient(_BaseHttpClient):
    """Blocking executor backed by one pooled ``httpx.Client``."""

    def __init__(
        self,
        stats: Statistics | None = None,
        httpx_client: httpx.Client | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        super().__init__(stats)
        self._httpx = httpx_client or httpx.Client(trust_env=False)
        self._sleep = sleep

    def close(self) -> None:
        self._httpx.close()

    def attempt(self, options: CallOptions, attempt: int) -> Outcome:
        method = self._validate(options)
        request = self._build_request(options, method)
        self.stats.add_request()
        self._log_attempt(request, attempt)
        try:
            response = self._httpx.request(**request)
        except httpx.RequestError as exc:
            return self._transport_failure(options, method, attempt, exc)
        raw = RawResponse(status_code=response.status_code, headers=dict(response.headers), content=response.content)
        return self._classify(options, method, attempt, raw)

    def call(self, options: CallOptions, *, cancel_event: threading.Event | None = None) -> Success:
        """Run one logical call, retrying with exponential backoff."""
        self._validate(options)
        self.stats.add_call()
        return run_with_backoff(
            lambda attempt: self.attempt(options, attempt),
            initial_delay=options.min_delay_between_retries,
            max_attempts=options.max_retries + 1,
            cancel_event=cancel_event,
            sleep=self._sleep,
        )


class AsyncHttpClient(_BaseHttpClient):
    """Asyncio executor backed by one pooled ``httpx.AsyncClient``."""

    def __init__(
        self,
        stats: Statistics | None = None,
        httpx_client: httpx.AsyncClient | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        super().__init__(stats)
        self._httpx = httpx_client or httpx.AsyncClient(trust_env=False)
        self._sleep = sleep

    async def aclose(self) -> None:
        await self._httpx.aclose()

    async def attempt(self, options: CallOptions, attempt: int) -> Outcome:
        method = self._validate(options)
        request = self._build_request(options, method)
        self.stats.add_request()
        self._log_attempt(request, attempt)
        try:
            response = await self._httpx.request(**request)
        except httpx.RequestError as exc:
            return self._transport_failure(options, method, attempt, exc)
        raw = RawResponse(status_code=response.status_code, headers=dict(response.headers), content=response.content)
        return self._classify(options, method, attempt, raw)

    async def call(self, options: CallOptions, *, cancel_event: asyncio.Event | None = None) -> Success:
        """Run one logical call, retrying with exponential backoff."""
        self._validate(options)
        self.stats.add_call()
        return await run_with_backoff_async(
            lambda attempt: self.attempt(options, attempt),
            initial_delay=options.min_delay_between_retries,
            max_attempts=options.max_retries + 1,
            cancel_event=cancel_event,
            sleep=self._sleep,
        )
