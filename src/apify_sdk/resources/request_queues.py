"""Request queues and the requests they hold."""

from __future__ import annotations

from typing import Any

from ..request_options import ClientOptions, Endpoint
from ..utils import check_param
from .base import (
    Callback,
    Resource,
    data_with_dates,
    dates,
    optional,
    pagination_query,
    require,
    require_token,
    resource_id,
    without_id,
)


BASE_PATH = "/v2/request-queues"

# retry ceiling of the per-request endpoints
REQUEST_ENDPOINTS_MAX_RETRIES = 9


def _queue_path(options: ClientOptions, suffix: str = "") -> str:
    return f"{BASE_PATH}/{resource_id(options, 'queue_id')}{suffix}"


def _request_query(options: ClientOptions, *, with_forefront: bool = True) -> dict[str, Any]:
    query: dict[str, Any] = {"clientKey": optional(options, "client_key", str) or None}
    if with_forefront:
        forefront = options.get("forefront", False)
        check_param(forefront, "forefront", bool)
        query["forefront"] = forefront
    return query


def get_or_create_queue(options: ClientOptions) -> Endpoint:
    require_token(options)
    name = require(options, "queue_name", str)
    return Endpoint("POST", BASE_PATH, query={"name": name}, parse=data_with_dates)


def list_queues(options: ClientOptions) -> Endpoint:
    require_token(options)
    return Endpoint("GET", BASE_PATH, query=pagination_query(options, "unnamed"), parse=data_with_dates)


def get_queue(options: ClientOptions) -> Endpoint:
    return Endpoint("GET", _queue_path(options), parse=data_with_dates, not_found_as_none=True)


def update_queue(options: ClientOptions) -> Endpoint:
    queue = require(options, "queue", dict)
    return Endpoint("PUT", _queue_path(options), body=without_id(queue), parse=data_with_dates)


def delete_queue(options: ClientOptions) -> Endpoint:
    return Endpoint("DELETE", _queue_path(options), parse=dates)


def add_request(options: ClientOptions) -> Endpoint:
    request = require(options, "request", dict)
    return Endpoint(
        "POST",
        _queue_path(options, "/requests"),
        query=_request_query(options),
        body=request,
        parse=data_with_dates,
        max_retries=REQUEST_ENDPOINTS_MAX_RETRIES,
    )


def get_request(options: ClientOptions) -> Endpoint:
    request_id = require(options, "request_id", str)
    return Endpoint(
        "GET",
        _queue_path(options, f"/requests/{request_id}"),
        parse=data_with_dates,
        not_found_as_none=True,
        max_retries=REQUEST_ENDPOINTS_MAX_RETRIES,
    )


def update_request(options: ClientOptions) -> Endpoint:
    request = require(options, "request", dict)
    if options.get("request_id") is None and request.get("id"):
        options = options.merged({"request_id": request["id"]})
    request_id = require(options, "request_id", str)
    return Endpoint(
        "PUT",
        _queue_path(options, f"/requests/{request_id}"),
        query=_request_query(options),
        body=request,
        parse=data_with_dates,
        max_retries=REQUEST_ENDPOINTS_MAX_RETRIES,
    )


def delete_request(options: ClientOptions) -> Endpoint:
    request_id = require(options, "request_id", str)
    return Endpoint(
        "DELETE",
        _queue_path(options, f"/requests/{request_id}"),
        query=_request_query(options, with_forefront=False),
        parse=dates,
        max_retries=REQUEST_ENDPOINTS_MAX_RETRIES,
    )


def get_head(options: ClientOptions) -> Endpoint:
    query = _request_query(options, with_forefront=False)
    query["limit"] = optional(options, "limit", int) or None
    return Endpoint(
        "GET",
        _queue_path(options, "/head"),
        query=query,
        parse=data_with_dates,
        max_retries=REQUEST_ENDPOINTS_MAX_RETRIES,
    )


class RequestQueues(Resource):
    """Request queue endpoints.

    Calls that touch individual requests (``add_request``, ``get_request``,
    ``update_request``, ``delete_request``, ``get_head``) retry up to nine
    times regardless of the client's ``max_retries``. ``client_key`` identifies
    the queue consumer so the API can track which requests it has seen.
    """

    def get_or_create_queue(self, callback: Callback | None = None, **options: Any) -> Any:
        return self._invoke(get_or_create_queue, options, callback)

    def list_queues(self, callback: Callback | None = None, **options: Any) -> Any:
        return self._invoke(list_queues, options, callback)

    def get_queue(self, callback: Callback | None = None, **options: Any) -> Any:
        return self._invoke(get_queue, options, callback)

    def update_queue(self, callback: Callback | None = None, **options: Any) -> Any:
        return self._invoke(update_queue, options, callback)

    def delete_queue(self, callback: Callback | None = None, **options: Any) -> Any:
        return self._invoke(delete_queue, options, callback)

    def add_request(self, callback: Callback | None = None, **options: Any) -> Any:
        """Enqueue ``request``; ``forefront=True`` puts it at the head of the queue."""
        return self._invoke(add_request, options, callback)

    def get_request(self, callback: Callback | None = None, **options: Any) -> Any:
        return self._invoke(get_request, options, callback)

    def update_request(self, callback: Callback | None = None, **options: Any) -> Any:
        """Replace a request; ``request_id`` defaults to ``request["id"]``."""
        return self._invoke(update_request, options, callback)

    def delete_request(self, callback: Callback | None = None, **options: Any) -> Any:
        return self._invoke(delete_request, options, callback)

    def get_head(self, callback: Callback | None = None, **options: Any) -> Any:
        """Return the first ``limit`` pending requests of the queue."""
        return self._invoke(get_head, options, callback)
