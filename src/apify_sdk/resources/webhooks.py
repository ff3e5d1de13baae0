"""Webhooks and their dispatch history."""

from __future__ import annotations

from typing import Any

from ..request_options import ClientOptions, Endpoint
from .base import Callback, Resource, data_with_dates, dates, pagination_query, require, require_token


BASE_PATH = "/v2/webhooks"


def _webhook_path(options: ClientOptions, suffix: str = "") -> str:
    return f"{BASE_PATH}/{require(options, 'webhook_id', str)}{suffix}"


def create_webhook(options: ClientOptions) -> Endpoint:
    require_token(options)
    webhook = require(options, "webhook", dict)
    return Endpoint("POST", BASE_PATH, body=webhook, parse=data_with_dates)


def list_webhooks(options: ClientOptions) -> Endpoint:
    require_token(options)
    return Endpoint("GET", BASE_PATH, query=pagination_query(options), parse=data_with_dates)


def get_webhook(options: ClientOptions) -> Endpoint:
    require_token(options)
    return Endpoint("GET", _webhook_path(options), parse=data_with_dates, not_found_as_none=True)


def update_webhook(options: ClientOptions) -> Endpoint:
    require_token(options)
    webhook = require(options, "webhook", dict)
    return Endpoint("PUT", _webhook_path(options), body=webhook, parse=data_with_dates)


def delete_webhook(options: ClientOptions) -> Endpoint:
    require_token(options)
    return Endpoint("DELETE", _webhook_path(options), parse=dates)


def list_dispatches(options: ClientOptions) -> Endpoint:
    require_token(options)
    return Endpoint(
        "GET",
        _webhook_path(options, "/dispatches"),
        query=pagination_query(options),
        parse=data_with_dates,
    )


class Webhooks(Resource):
    """Webhook endpoints; every call needs a token."""

    def create_webhook(self, callback: Callback | None = None, **options: Any) -> Any:
        return self._invoke(create_webhook, options, callback)

    def list_webhooks(self, callback: Callback | None = None, **options: Any) -> Any:
        return self._invoke(list_webhooks, options, callback)

    def get_webhook(self, callback: Callback | None = None, **options: Any) -> Any:
        return self._invoke(get_webhook, options, callback)

    def update_webhook(self, callback: Callback | None = None, **options: Any) -> Any:
        return self._invoke(update_webhook, options, callback)

    def delete_webhook(self, callback: Callback | None = None, **options: Any) -> Any:
        return self._invoke(delete_webhook, options, callback)

    def list_dispatches(self, callback: Callback | None = None, **options: Any) -> Any:
        """List the dispatches of webhook ``webhook_id``, newest last unless ``desc``."""
        return self._invoke(list_dispatches, options, callback)
