"""Datasets and their items."""

from __future__ import annotations

from typing import Any, Callable

from ..models import PaginationList, RawResponse
from ..request_options import ClientOptions, Endpoint
from ..utils import parse_body, wrap_array
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


BASE_PATH = "/v2/datasets"

# option name -> query parameter, passed through as given (``bom=False`` is sent as ``bom=0``)
_ITEMS_QUERY_OPTIONS = (
    ("format", "format", (str,)),
    ("fields", "fields", (list,)),
    ("omit", "omit", (list,)),
    ("unwind", "unwind", (str,)),
    ("offset", "offset", (int,)),
    ("limit", "limit", (int,)),
    ("desc", "desc", (bool,)),
    ("clean", "clean", (bool,)),
    ("attachment", "attachment", (bool,)),
    ("delimiter", "delimiter", (str,)),
    ("bom", "bom", (bool,)),
    ("xml_root", "xmlRoot", (str,)),
    ("xml_row", "xmlRow", (str,)),
    ("skip_header_row", "skipHeaderRow", (bool, int)),
)


def _dataset_path(options: ClientOptions, suffix: str = "") -> str:
    return f"{BASE_PATH}/{resource_id(options, 'dataset_id')}{suffix}"


def get_or_create_dataset(options: ClientOptions) -> Endpoint:
    require_token(options)
    name = require(options, "dataset_name", str)
    return Endpoint("POST", BASE_PATH, query={"name": name}, parse=data_with_dates)


def list_datasets(options: ClientOptions) -> Endpoint:
    require_token(options)
    return Endpoint("GET", BASE_PATH, query=pagination_query(options, "unnamed"), parse=data_with_dates)


def get_dataset(options: ClientOptions) -> Endpoint:
    return Endpoint("GET", _dataset_path(options), parse=data_with_dates, not_found_as_none=True)


def update_dataset(options: ClientOptions) -> Endpoint:
    dataset = require(options, "dataset", dict)
    return Endpoint("PUT", _dataset_path(options), body=without_id(dataset), parse=data_with_dates)


def delete_dataset(options: ClientOptions) -> Endpoint:
    return Endpoint("DELETE", _dataset_path(options), parse=dates)


def _items_parser(disable_body_parser: bool) -> Callable[[Any, RawResponse], PaginationList]:
    def parse(body: Any, response: RawResponse) -> PaginationList:
        items = body if disable_body_parser else parse_body(body, response.content_type)
        return wrap_array(response, items)

    return parse


def get_items(options: ClientOptions) -> Endpoint:
    query: dict[str, Any] = {}
    for option_name, query_name, kinds in _ITEMS_QUERY_OPTIONS:
        query[query_name] = optional(options, option_name, *kinds)
    disable_body_parser = bool(optional(options, "disable_body_parser", bool))
    return Endpoint(
        "GET",
        _dataset_path(options, "/items"),
        query=query,
        json=False,
        parse=_items_parser(disable_body_parser),
        not_found_as_none=True,
    )


def put_items(options: ClientOptions) -> Endpoint:
    items = require(options, "data", dict, list)
    return Endpoint(
        "POST",
        _dataset_path(options, "/items"),
        body=items,
        content_type="application/json; charset=utf-8",
        gzip=True,
    )


class Datasets(Resource):
    """Dataset endpoints.

    Set a default dataset once with ``client.set_options(dataset_id=...)`` and
    omit it from later calls.
    """

    def get_or_create_dataset(self, callback: Callback | None = None, **options: Any) -> Any:
        """Return the dataset named ``dataset_name``, creating it first if needed."""
        return self._invoke(get_or_create_dataset, options, callback)

    def list_datasets(self, callback: Callback | None = None, **options: Any) -> Any:
        return self._invoke(list_datasets, options, callback)

    def get_dataset(self, callback: Callback | None = None, **options: Any) -> Any:
        return self._invoke(get_dataset, options, callback)

    def update_dataset(self, callback: Callback | None = None, **options: Any) -> Any:
        return self._invoke(update_dataset, options, callback)

    def delete_dataset(self, callback: Callback | None = None, **options: Any) -> Any:
        return self._invoke(delete_dataset, options, callback)

    def get_items(self, callback: Callback | None = None, **options: Any) -> Any:
        """Return a ``PaginationList`` of dataset items, or ``None`` for a missing dataset.

        Items are decoded according to the response content type (``format``
        defaults to JSON on the API side) unless ``disable_body_parser`` is set.
        ``bom`` is tri-state: omitted, ``True`` (``bom=1``) or ``False`` (``bom=0``).
        """
        return self._invoke(get_items, options, callback)

    def put_items(self, callback: Callback | None = None, **options: Any) -> Any:
        """Append ``data`` (an object or a list of objects) to the dataset, gzip-compressed."""
        return self._invoke(put_items, options, callback)
