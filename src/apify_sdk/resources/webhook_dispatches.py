"""Webhook dispatches across all webhooks of the user."""

from __future__ import annotations

from typing import Any

from ..request_options import ClientOptions, Endpoint
from .base import Callback, Resource, data_with_dates, pagination_query, require


BASE_PATH = "/v2/webhook-dispatches"


def list_dispatches(options: ClientOptions) -> Endpoint:
    return Endpoint("GET", BASE_PATH, query=pagination_query(options), parse=data_with_dates)


def get_dispatch(options: ClientOptions) -> Endpoint:
    dispatch_id = require(options, "webhook_dispatch_id", str)
    return Endpoint("GET", f"{BASE_PATH}/{dispatch_id}", parse=data_with_dates, not_found_as_none=True)


class WebhookDispatches(Resource):
    def list_dispatches(self, callback: Callback | None = None, **options: Any) -> Any:
        return self._invoke(list_dispatches, options, callback)

    def get_dispatch(self, callback: Callback | None = None, **options: Any) -> Any:
        return self._invoke(get_dispatch, options, callback)
