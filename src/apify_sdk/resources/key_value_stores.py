"""Key-value stores and their records."""

from __future__ import annotations

from typing import Any, Callable

from ..models import KeyValueStoreKeys, KeyValueStoreRecord, RawResponse
from ..request_options import ClientOptions, Endpoint
from ..utils import parse_body, pluck_data
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


BASE_PATH = "/v2/key-value-stores"
DEFAULT_RECORD_CONTENT_TYPE = "text/plain; charset=utf-8"
JSON_RECORD_CONTENT_TYPE = "application/json; charset=utf-8"


def _store_path(options: ClientOptions, suffix: str = "") -> str:
    return f"{BASE_PATH}/{resource_id(options, 'store_id')}{suffix}"


def _record_path(options: ClientOptions) -> str:
    key = require(options, "key", str)
    return _store_path(options, f"/records/{key}")


def get_or_create_store(options: ClientOptions) -> Endpoint:
    require_token(options)
    name = require(options, "store_name", str)
    return Endpoint("POST", BASE_PATH, query={"name": name}, parse=data_with_dates)


def list_stores(options: ClientOptions) -> Endpoint:
    require_token(options)
    return Endpoint("GET", BASE_PATH, query=pagination_query(options, "unnamed"), parse=data_with_dates)


def get_store(options: ClientOptions) -> Endpoint:
    return Endpoint("GET", _store_path(options), parse=data_with_dates, not_found_as_none=True)


def update_store(options: ClientOptions) -> Endpoint:
    store = require(options, "store", dict)
    return Endpoint("PUT", _store_path(options), body=without_id(store), parse=data_with_dates)


def delete_store(options: ClientOptions) -> Endpoint:
    return Endpoint("DELETE", _store_path(options), parse=dates)


def _record_parser(key: str, disable_body_parser: bool) -> Callable[[Any, RawResponse], KeyValueStoreRecord]:
    def parse(body: Any, response: RawResponse) -> KeyValueStoreRecord:
        content_type = response.content_type or None
        if not disable_body_parser:
            body = parse_body(body, content_type)
        return KeyValueStoreRecord(key=key, body=body, content_type=content_type)

    return parse


def get_record(options: ClientOptions) -> Endpoint:
    path = _record_path(options)
    disable_redirect = optional(options, "disable_redirect", bool)
    disable_body_parser = bool(optional(options, "disable_body_parser", bool))
    return Endpoint(
        "GET",
        path,
        query={"disableRedirect": True if disable_redirect else None},
        json=False,
        parse=_record_parser(options.get("key"), disable_body_parser),
        not_found_as_none=True,
    )


def put_record(options: ClientOptions) -> Endpoint:
    path = _record_path(options)
    body = require(options, "body", str, bytes, dict, list)
    content_type = optional(options, "content_type", str)
    if not content_type:
        content_type = DEFAULT_RECORD_CONTENT_TYPE if isinstance(body, (str, bytes)) else JSON_RECORD_CONTENT_TYPE
    return Endpoint("PUT", path, body=body, content_type=content_type, gzip=True)


def delete_record(options: ClientOptions) -> Endpoint:
    return Endpoint("DELETE", _record_path(options))


def _keys(body: Any, response: RawResponse) -> KeyValueStoreKeys:
    return KeyValueStoreKeys.model_validate(pluck_data(body) or {})


def list_keys(options: ClientOptions) -> Endpoint:
    query = {
        "exclusiveStartKey": optional(options, "exclusive_start_key", str),
        "limit": optional(options, "limit", int) or None,
        "desc": True if optional(options, "desc", bool) else None,
    }
    return Endpoint("GET", _store_path(options, "/keys"), query=query, parse=_keys)


class KeyValueStores(Resource):
    """Key-value store endpoints.

    Records are addressed by ``store_id`` and ``key``. ``get_record`` decodes
    the body by its content type (text, JSON, XML); other types come back as
    bytes.
    """

    def get_or_create_store(self, callback: Callback | None = None, **options: Any) -> Any:
        return self._invoke(get_or_create_store, options, callback)

    def list_stores(self, callback: Callback | None = None, **options: Any) -> Any:
        return self._invoke(list_stores, options, callback)

    def get_store(self, callback: Callback | None = None, **options: Any) -> Any:
        return self._invoke(get_store, options, callback)

    def update_store(self, callback: Callback | None = None, **options: Any) -> Any:
        return self._invoke(update_store, options, callback)

    def delete_store(self, callback: Callback | None = None, **options: Any) -> Any:
        return self._invoke(delete_store, options, callback)

    def get_record(self, callback: Callback | None = None, **options: Any) -> Any:
        """Return a ``KeyValueStoreRecord`` or ``None`` when the record is missing."""
        return self._invoke(get_record, options, callback)

    def put_record(self, callback: Callback | None = None, **options: Any) -> Any:
        """Store ``body`` under ``key``.

        ``content_type`` defaults to plain text for str/bytes bodies and to
        JSON for mappings and lists, which are serialized before upload.
        """
        return self._invoke(put_record, options, callback)

    def delete_record(self, callback: Callback | None = None, **options: Any) -> Any:
        return self._invoke(delete_record, options, callback)

    def list_keys(self, callback: Callback | None = None, **options: Any) -> Any:
        return self._invoke(list_keys, options, callback)
