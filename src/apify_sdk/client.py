"""Main synchronous and asynchronous clients for the Apify API."""

from __future__ import annotations

import asyncio
import dataclasses
import inspect
import logging
import os
import threading
import time
from typing import Any, Awaitable, Callable, Iterable, Mapping

import httpx

from .exceptions import (
    REQUEST_FAILED_ERROR_MESSAGE,
    ApifyClientError,
    ApifyInvalidParameterError,
    ApifyRequestFailedError,
)
from .http_client import AsyncHttpClient, HttpClient
from .request_options import (
    DEFAULT_BASE_URL,
    DEFAULT_MAX_RETRIES,
    DEFAULT_MIN_DELAY_BETWEEN_RETRIES,
    DEFAULT_RETRY_ON_STATUS_CODES,
    DEFAULT_TIMEOUT,
    CallOptions,
    ClientOptions,
    Endpoint,
)
from .resources import (
    Acts,
    Datasets,
    KeyValueStores,
    Logs,
    RequestQueues,
    Schedules,
    Tasks,
    Users,
    WebhookDispatches,
    Webhooks,
)
from .resources.base import Callback, EndpointFn
from .retry import Success
from .security import validate_base_url
from .statistics import Statistics
from .utils import catch_not_found_or_throw


logger = logging.getLogger(__name__)

TOKEN_ENV_VAR = "APIFY_TOKEN"
BASE_URL_ENV_VAR = "APIFY_API_BASE_URL"


def _validate_retry_settings(options: ClientOptions) -> None:
    if isinstance(options.max_retries, bool) or not isinstance(options.max_retries, int) or options.max_retries < 0:
        raise ApifyInvalidParameterError("max_retries must be a non-negative integer")
    if options.min_delay_between_retries < 0:
        raise ApifyInvalidParameterError("min_delay_between_retries must not be negative")
    if options.timeout <= 0:
        raise ApifyInvalidParameterError("timeout must be greater than 0")


class _BaseApifyClient:
    """Option handling and endpoint plumbing shared by the sync and async clients.

    Client-wide defaults live in an immutable ``ClientOptions``. Every call
    merges its own keyword options over them (the call wins), hands the result
    to an endpoint function from ``apify_sdk.resources`` and executes the
    returned request plan.
    """

    def __init__(
        self,
        *,
        base_url: str | None = None,
        token: str | None = None,
        max_retries: int = DEFAULT_MAX_RETRIES,
        min_delay_between_retries: float = DEFAULT_MIN_DELAY_BETWEEN_RETRIES,
        retry_on_status_codes: Iterable[int] | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        token_env_var: str = TOKEN_ENV_VAR,
        base_url_env_var: str = BASE_URL_ENV_VAR,
        **params: Any,
    ) -> None:
        base_url = (base_url or os.getenv(base_url_env_var) or DEFAULT_BASE_URL).rstrip("/")
        validate_base_url(base_url)
        options = ClientOptions(
            base_url=base_url,
            token=token or os.getenv(token_env_var) or None,
            max_retries=max_retries,
            min_delay_between_retries=min_delay_between_retries,
            retry_on_status_codes=DEFAULT_RETRY_ON_STATUS_CODES,
            timeout=timeout,
        )
        self._options = options.merged({"retry_on_status_codes": retry_on_status_codes, **params})
        _validate_retry_settings(self._options)
        self.stats = Statistics()

        self.acts = Acts(self)
        self.tasks = Tasks(self)
        self.datasets = Datasets(self)
        self.key_value_stores = KeyValueStores(self)
        self.request_queues = RequestQueues(self)
        self.logs = Logs(self)
        self.schedules = Schedules(self)
        self.webhooks = Webhooks(self)
        self.webhook_dispatches = WebhookDispatches(self)
        self.users = Users(self)

    def get_options(self) -> ClientOptions:
        return self._options

    def set_options(self, **overrides: Any) -> None:
        """Replace client-wide defaults; later calls see the new values.

        ``None`` values leave the current setting untouched. Unknown names
        become resource defaults, e.g. ``set_options(dataset_id="abc")``.
        """
        options = self._options.merged(overrides)
        if options.base_url != self._options.base_url:
            validate_base_url(options.base_url)
            options = dataclasses.replace(options, base_url=options.base_url.rstrip("/"))
        _validate_retry_settings(options)
        self._options = options

    def _prepare(
        self, endpoint_fn: EndpointFn, options: Mapping[str, Any] | None
    ) -> tuple[Endpoint, CallOptions, Any]:
        overrides = dict(options or {})
        cancel_event = overrides.pop("cancel_event", None)
        merged = self._options.merged(overrides)
        if not isinstance(merged.base_url, str) or not merged.base_url:
            raise ApifyInvalidParameterError('Parameter "base_url" of type str must be provided')
        merged = dataclasses.replace(merged, base_url=merged.base_url.rstrip("/"))
        endpoint = endpoint_fn(merged)
        return endpoint, CallOptions.build(merged, endpoint), cancel_event

    @staticmethod
    def _finish(endpoint: Endpoint, call_options: CallOptions, success: Success) -> Any:
        if endpoint.parse is None:
            return success.body
        try:
            return endpoint.parse(success.body, success.response)
        except ValueError as exc:
            response = success.response
            details = {
                "url": call_options.url,
                "method": call_options.method.upper(),
                "status_code": getattr(response, "status_code", None),
                "has_body": bool(getattr(response, "content", None)),
                "error": str(exc),
            }
            raise ApifyRequestFailedError(REQUEST_FAILED_ERROR_MESSAGE, details=details, cause=exc) from exc

    @staticmethod
    def _not_found_or_raise(endpoint: Endpoint, error: ApifyClientError) -> None:
        if not endpoint.not_found_as_none:
            raise error
        catch_not_found_or_throw(error)
        logger.debug("Lookup resolved to None: %s %s", error.details.get("method"), error.details.get("url"))


class ApifyClient(_BaseApifyClient):
    """Synchronous client.

    Resource families are attributes: ``client.acts``, ``client.datasets``,
    ``client.key_value_stores`` and so on. Methods take keyword options and an
    optional ``callback(error, result)``; pass ``cancel_event`` (a
    ``threading.Event``) to abort a call that is waiting to retry.
    """

    def __init__(
        self,
        *,
        base_url: str | None = None,
        token: str | None = None,
        max_retries: int = DEFAULT_MAX_RETRIES,
        min_delay_between_retries: float = DEFAULT_MIN_DELAY_BETWEEN_RETRIES,
        retry_on_status_codes: Iterable[int] | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        httpx_client: httpx.Client | None = None,
        sleep: Callable[[float], None] = time.sleep,
        **params: Any,
    ) -> None:
        super().__init__(
            base_url=base_url,
            token=token,
            max_retries=max_retries,
            min_delay_between_retries=min_delay_between_retries,
            retry_on_status_codes=retry_on_status_codes,
            timeout=timeout,
            **params,
        )
        self._http = HttpClient(self.stats, httpx_client, sleep=sleep)

    def __enter__(self) -> "ApifyClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._http.close()

    def invoke(
        self,
        endpoint_fn: EndpointFn,
        options: Mapping[str, Any] | None = None,
        callback: Callback | None = None,
    ) -> Any:
        """Run one endpoint function and return its normalized result.

        With a ``callback`` SDK errors are delivered as ``callback(error, None)``
        instead of being raised; successes as ``callback(None, result)``.
        """
        try:
            endpoint, call_options, cancel_event = self._prepare(endpoint_fn, options)
            if cancel_event is not None and not isinstance(cancel_event, threading.Event):
                raise ApifyInvalidParameterError('Parameter "cancel_event" must be a threading.Event')
            try:
                success = self._http.call(call_options, cancel_event=cancel_event)
            except ApifyClientError as error:
                self._not_found_or_raise(endpoint, error)
                result = None
            else:
                result = self._finish(endpoint, call_options, success)
        except ApifyClientError as error:
            if callback is None:
                raise
            callback(error, None)
            return None
        if callback is not None:
            callback(None, result)
        return result


class AsyncApifyClient(_BaseApifyClient):
    """Asynchronous client; every resource method returns a coroutine.

    ``cancel_event`` must be an ``asyncio.Event``; setting it abandons both an
    in-flight attempt and a pending backoff sleep. Callbacks may be plain
    functions or coroutine functions.
    """

    def __init__(
        self,
        *,
        base_url: str | None = None,
        token: str | None = None,
        max_retries: int = DEFAULT_MAX_RETRIES,
        min_delay_between_retries: float = DEFAULT_MIN_DELAY_BETWEEN_RETRIES,
        retry_on_status_codes: Iterable[int] | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        httpx_client: httpx.AsyncClient | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        **params: Any,
    ) -> None:
        super().__init__(
            base_url=base_url,
            token=token,
            max_retries=max_retries,
            min_delay_between_retries=min_delay_between_retries,
            retry_on_status_codes=retry_on_status_codes,
            timeout=timeout,
            **params,
        )
        self._http = AsyncHttpClient(self.stats, httpx_client, sleep=sleep)

    async def __aenter__(self) -> "AsyncApifyClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def invoke(
        self,
        endpoint_fn: EndpointFn,
        options: Mapping[str, Any] | None = None,
        callback: Callback | None = None,
    ) -> Any:
        try:
            endpoint, call_options, cancel_event = self._prepare(endpoint_fn, options)
            if cancel_event is not None and not isinstance(cancel_event, asyncio.Event):
                raise ApifyInvalidParameterError('Parameter "cancel_event" must be an asyncio.Event')
            try:
                success = await self._http.call(call_options, cancel_event=cancel_event)
            except ApifyClientError as error:
                self._not_found_or_raise(endpoint, error)
                result = None
            else:
                result = self._finish(endpoint, call_options, success)
        except ApifyClientError as error:
            if callback is None:
                raise
            await _maybe_await(callback(error, None))
            return None
        if callback is not None:
            await _maybe_await(callback(None, result))
        return result


async def _maybe_await(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value
