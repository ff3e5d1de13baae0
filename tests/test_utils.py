from __future__ import annotations

import base64
import json
from datetime import datetime, timezone

import pytest

from apify_sdk.exceptions import ApifyClientError, ApifyInvalidParameterError, ApifyRequestFailedError
from apify_sdk.models import RawResponse
from apify_sdk.utils import (
    catch_not_found_or_throw,
    check_param,
    new_error,
    parse_body,
    parse_date_fields,
    pluck_data,
    replace_slash_with_tilde,
    stringify_webhooks_to_base64,
    wrap_array,
)


def test_parse_date_fields_converts_at_keys() -> None:
    parsed = parse_date_fields(
        {
            "data": {
                "createdAt": "2019-05-12T10:21:03.123Z",
                "name": "my-dataset",
                "items": [{"finishedAt": "2019-05-12T10:25:00Z"}],
            }
        }
    )

    assert parsed["data"]["createdAt"] == datetime(2019, 5, 12, 10, 21, 3, 123000, tzinfo=timezone.utc)
    assert parsed["data"]["name"] == "my-dataset"
    assert parsed["data"]["items"][0]["finishedAt"] == datetime(2019, 5, 12, 10, 25, tzinfo=timezone.utc)


def test_parse_date_fields_assumes_utc_without_offset() -> None:
    parsed = parse_date_fields({"createdAt": "2019-05-12T10:21:03"})

    assert parsed["createdAt"] == datetime(2019, 5, 12, 10, 21, 3, tzinfo=timezone.utc)
    assert parsed["createdAt"].tzinfo is not None


def test_parse_date_fields_leaves_non_dates_and_falsy_values() -> None:
    parsed = parse_date_fields({"modifiedAt": "not a date", "startedAt": None, "finishedAt": ""})

    assert parsed == {"modifiedAt": "not a date", "startedAt": None, "finishedAt": ""}


def test_parse_date_fields_stops_below_max_depth() -> None:
    value = {"a": {"b": {"c": {"d": {"createdAt": "2019-05-12T10:21:03Z"}}}}}

    parsed = parse_date_fields(value)

    assert parsed["a"]["b"]["c"]["d"]["createdAt"] == "2019-05-12T10:21:03Z"


def test_parse_date_fields_is_idempotent() -> None:
    value = {"data": {"createdAt": "2019-05-12T10:21:03Z", "stats": {"lastRunAt": "2019-05-13T00:00:00Z"}}}

    once = parse_date_fields(value)

    assert parse_date_fields(once) == once


def test_pluck_data() -> None:
    assert pluck_data({"data": {"id": "abc"}}) == {"id": "abc"}
    assert pluck_data({"data": None}) is None
    assert pluck_data({"error": {}}) is None
    assert pluck_data(None) is None
    assert pluck_data([1, 2]) is None


def test_parse_body_by_content_type() -> None:
    payload = {"foo": ["bar", 1], "nested": {"ok": True}}
    encoded = json.dumps(payload).encode("utf-8")

    assert parse_body(encoded, "application/json; charset=utf-8") == payload
    assert parse_body(b"hello", "text/plain; charset=utf-8") == "hello"
    assert parse_body(b"<items/>", "application/xml") == "<items/>"
    assert parse_body(b"\x89PNG", "image/png") == b"\x89PNG"
    assert parse_body(b"raw", None) == b"raw"


def test_new_error_reads_nested_error() -> None:
    error = new_error(
        {"error": {"type": "record-not-found", "message": "Record was not found"}},
        {"status_code": 404, "attempt": 1},
    )

    assert isinstance(error, ApifyRequestFailedError)
    assert error.type == "record-not-found"
    assert error.message == "Record was not found"
    assert error.status_code == 404
    assert error.attempt == 1


def test_new_error_reads_flat_json_text() -> None:
    error = new_error(b'{"type": "rate-limit-exceeded", "message": "Slow down"}')

    assert error.type == "rate-limit-exceeded"
    assert error.message == "Slow down"
    assert error.details == {}


def test_new_error_falls_back_to_defaults() -> None:
    error = new_error(b"<html>Bad gateway</html>", {"status_code": 502})

    assert error.type == "request-failed"
    assert error.message == "Server request failed."
    assert error.details["status_code"] == 502


def test_wrap_array_reads_pagination_headers() -> None:
    response = RawResponse(
        status_code=200,
        headers={
            "x-apify-pagination-total": "10",
            "x-apify-pagination-offset": "3",
            "x-apify-pagination-count": "5",
            "x-apify-pagination-limit": "5",
        },
    )

    page = wrap_array(response, [1, 2, 3, 4, 5])

    assert page.model_dump() == {"items": [1, 2, 3, 4, 5], "total": 10, "offset": 3, "count": 5, "limit": 5}


def test_wrap_array_falls_back_to_legacy_headers_and_missing_limit() -> None:
    response = RawResponse(
        status_code=200,
        headers={
            "X-Apifier-Pagination-Total": "7",
            "X-Apifier-Pagination-Offset": "0",
            "X-Apifier-Pagination-Count": "7",
        },
    )

    page = wrap_array(response, [])

    assert (page.total, page.offset, page.count, page.limit) == (7, 0, 7, None)


def test_catch_not_found_or_throw() -> None:
    assert catch_not_found_or_throw(ApifyRequestFailedError("x", details={"status_code": 404})) is None

    server_error = ApifyRequestFailedError("x", details={"status_code": 500})
    with pytest.raises(ApifyClientError) as excinfo:
        catch_not_found_or_throw(server_error)
    assert excinfo.value is server_error

    with pytest.raises(KeyError):
        catch_not_found_or_throw(KeyError("not an api error"))


def test_check_param() -> None:
    check_param("abc", "act_id", str)
    check_param(None, "limit", int, optional=True)
    check_param(True, "desc", bool)

    with pytest.raises(ApifyInvalidParameterError, match='"limit"'):
        check_param(True, "limit", int)
    with pytest.raises(ApifyInvalidParameterError, match='"act_id"'):
        check_param("", "act_id", str)
    with pytest.raises(ApifyInvalidParameterError) as excinfo:
        check_param(None, "act_id", str)
    assert excinfo.value.type == "invalid-parameter"


def test_replace_slash_with_tilde() -> None:
    assert replace_slash_with_tilde("apify/web-scraper") == "apify~web-scraper"
    assert replace_slash_with_tilde("HG7ML7M8z78YcAPEB") == "HG7ML7M8z78YcAPEB"


def test_stringify_webhooks_to_base64() -> None:
    webhooks = [{"eventTypes": ["ACTOR.RUN.SUCCEEDED"], "requestUrl": "https://example.com/hook"}]

    encoded = stringify_webhooks_to_base64(webhooks)

    assert json.loads(base64.b64decode(encoded)) == webhooks
