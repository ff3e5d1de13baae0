from __future__ import annotations

import gzip
import json

import httpx
import pytest

from apify_sdk.exceptions import ApifyInvalidParameterError, ApifyRequestFailedError
from apify_sdk.http_client import HttpClient, serialize_query
from apify_sdk.request_options import CallOptions
from apify_sdk.retry import RetryableFailure, Success, TerminalFailure
from apify_sdk.statistics import Statistics


BASE_URL = "https://api.example.com"


def _executor(handler, sleeps: list[float] | None = None) -> HttpClient:
    return HttpClient(
        httpx_client=httpx.Client(transport=httpx.MockTransport(handler)),
        sleep=sleeps.append if sleeps is not None else (lambda _: None),
    )


def _options(**overrides) -> CallOptions:
    values = {"base_url": BASE_URL, "method": "GET", "path": "/v2/acts"}
    values.update(overrides)
    return CallOptions(**values)


def _respond(status: int, **kwargs):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status, request=request, **kwargs)

    return handler


def test_serialize_query_drops_none_and_encodes_values() -> None:
    params = serialize_query({"limit": 5, "offset": None, "desc": True, "bom": False, "fields": ["a", "b"]}, "tok")

    assert params == [("limit", 5), ("desc", 1), ("bom", 0), ("fields", "a,b"), ("token", "tok")]


def test_query_string_uses_numeric_booleans() -> None:
    captured: dict[str, str] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["url"] = str(request.url)
        return httpx.Response(200, json={"data": {}}, request=request)

    executor = _executor(handler)
    executor.attempt(_options(query={"limit": 5, "offset": 3, "desc": True}, token="secret"), 1)

    assert "limit=5&offset=3&desc=1" in captured["url"]
    assert captured["url"].startswith(f"{BASE_URL}/v2/acts?")
    assert "token=secret" in captured["url"]


def test_attempt_sends_user_agent_and_json_body(monkeypatch) -> None:
    monkeypatch.delenv("APIFY_IS_AT_HOME", raising=False)
    captured: dict[str, object] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["headers"] = request.headers
        captured["body"] = json.loads(request.content.decode())
        captured["method"] = request.method
        return httpx.Response(201, json={"data": {"id": "abc"}}, request=request)

    outcome = _executor(handler).attempt(_options(method="post", body={"name": "my-act"}), 1)

    assert isinstance(outcome, Success)
    assert outcome.body == {"data": {"id": "abc"}}
    assert captured["method"] == "POST"
    assert captured["body"] == {"name": "my-act"}
    headers = captured["headers"]
    assert headers["content-type"] == "application/json; charset=utf-8"
    assert headers["accept-encoding"] == "gzip"
    assert headers["user-agent"].startswith("ApifySDK/0.1.0 (")
    assert headers["user-agent"].endswith("isAtHome/false")


def test_attempt_gzips_body_when_requested() -> None:
    captured: dict[str, object] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["encoding"] = request.headers.get("content-encoding")
        captured["body"] = gzip.decompress(request.content)
        return httpx.Response(201, request=request)

    outcome = _executor(handler).attempt(_options(method="POST", body=[{"a": 1}], gzip=True), 1)

    assert isinstance(outcome, Success)
    assert outcome.body is None
    assert captured["encoding"] == "gzip"
    assert json.loads(captured["body"]) == [{"a": 1}]


def test_attempt_returns_raw_bytes_without_json_flag() -> None:
    handler = _respond(200, content=b"a,b\n1,2\n", headers={"content-type": "text/csv"})

    outcome = _executor(handler).attempt(_options(json=False), 1)

    assert isinstance(outcome, Success)
    assert outcome.body == b"a,b\n1,2\n"
    assert outcome.response.content_type == "text/csv"


def test_attempt_undecodable_json_is_retryable() -> None:
    handler = _respond(200, content=b"{not json", headers={"content-type": "application/json"})

    outcome = _executor(handler).attempt(_options(), 1)

    assert isinstance(outcome, RetryableFailure)
    assert outcome.error.details["status_code"] == 200
    assert isinstance(outcome.error.cause, ValueError)


@pytest.mark.parametrize("status", [301, 400, 401, 404, 499])
def test_attempt_client_errors_are_terminal(status: int) -> None:
    handler = _respond(status, json={"error": {"type": "some-error", "message": "Bad things"}})

    outcome = _executor(handler).attempt(_options(), 2)

    assert isinstance(outcome, TerminalFailure)
    assert outcome.error.type == "some-error"
    assert outcome.error.message == "Bad things"
    assert outcome.error.details["status_code"] == status
    assert outcome.error.details["attempt"] == 2
    assert outcome.error.details["has_body"] is True


@pytest.mark.parametrize("status", [500, 502, 503, 599])
def test_attempt_server_errors_are_retryable(status: int) -> None:
    outcome = _executor(_respond(status)).attempt(_options(), 1)

    assert isinstance(outcome, RetryableFailure)
    assert outcome.error.type == "request-failed"
    assert outcome.error.details["has_body"] is False


def test_attempt_configured_status_is_retryable() -> None:
    outcome = _executor(_respond(409)).attempt(_options(retry_on_status_codes=frozenset({409, 429})), 1)

    assert isinstance(outcome, RetryableFailure)


def test_attempt_counts_rate_limit_errors_per_attempt() -> None:
    executor = _executor(_respond(429))

    first = executor.attempt(_options(), 1)
    third = executor.attempt(_options(), 3)

    assert isinstance(first, RetryableFailure)
    assert isinstance(third, RetryableFailure)
    assert executor.stats.rate_limit_errors == [1, 0, 1]
    assert executor.stats.requests == 2


def test_attempt_counts_429_even_when_not_retryable() -> None:
    executor = _executor(_respond(429))

    outcome = executor.attempt(_options(retry_on_status_codes=frozenset()), 1)

    assert isinstance(outcome, TerminalFailure)
    assert executor.stats.rate_limit_errors == [1]


def test_attempt_transport_error_is_retryable() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    outcome = _executor(handler).attempt(_options(), 1)

    assert isinstance(outcome, RetryableFailure)
    assert isinstance(outcome.error.cause, httpx.ConnectError)
    assert outcome.error.details["status_code"] is None
    assert outcome.error.details["error"] == "connection refused"


def _corrupt_gzip(request: httpx.Request) -> httpx.Response:
    return httpx.Response(
        200,
        headers={"content-type": "application/json", "content-encoding": "gzip"},
        stream=httpx.ByteStream(b"not gzip at all"),
        request=request,
    )


def test_attempt_undecodable_content_encoding_is_retryable() -> None:
    outcome = _executor(_corrupt_gzip).attempt(_options(), 1)

    assert isinstance(outcome, RetryableFailure)
    assert isinstance(outcome.error.cause, httpx.DecodingError)
    assert outcome.error.details["status_code"] is None


def test_call_retries_undecodable_content_encoding_then_fails() -> None:
    sleeps: list[float] = []
    executor = _executor(_corrupt_gzip, sleeps)

    with pytest.raises(ApifyRequestFailedError) as excinfo:
        executor.call(_options(max_retries=2, min_delay_between_retries=0.5))

    assert excinfo.value.attempt == 3
    assert isinstance(excinfo.value.__cause__, httpx.DecodingError)
    assert executor.stats.requests == 3
    assert sleeps == [0.5, 1.0]


@pytest.mark.parametrize(
    "overrides",
    [{"method": "TRACE"}, {"method": ""}, {"base_url": ""}],
)
def test_invalid_call_options_fail_before_any_request(overrides) -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, request=request)

    executor = _executor(handler)
    with pytest.raises(ApifyInvalidParameterError):
        executor.call(_options(**overrides))

    assert seen == []
    assert executor.stats.snapshot() == {"calls": 0, "requests": 0, "rate_limit_errors": []}


def test_call_retries_server_errors_with_backoff() -> None:
    responses = iter([500, 503, 200])
    sleeps: list[float] = []

    def handler(request: httpx.Request) -> httpx.Response:
        status = next(responses)
        if status == 200:
            return httpx.Response(200, json={"data": {"id": "abc"}}, request=request)
        return httpx.Response(status, request=request)

    executor = _executor(handler, sleeps)
    success = executor.call(_options(min_delay_between_retries=0.5))

    assert success.body == {"data": {"id": "abc"}}
    assert sleeps == [0.5, 1.0]
    assert executor.stats.calls == 1
    assert executor.stats.requests == 3


def test_call_terminal_error_makes_single_attempt() -> None:
    sleeps: list[float] = []
    executor = _executor(_respond(400, json={"error": {"type": "invalid-input", "message": "Bad"}}), sleeps)

    with pytest.raises(ApifyRequestFailedError) as excinfo:
        executor.call(_options())

    assert excinfo.value.type == "invalid-input"
    assert executor.stats.requests == 1
    assert sleeps == []


def test_call_gives_up_after_max_retries() -> None:
    executor = _executor(_respond(500))

    with pytest.raises(ApifyRequestFailedError) as excinfo:
        executor.call(_options(max_retries=2))

    assert excinfo.value.attempt == 3
    assert executor.stats.requests == 3
    assert executor.stats.calls == 1


def test_shared_statistics_instance() -> None:
    stats = Statistics()
    executor = HttpClient(stats, httpx.Client(transport=httpx.MockTransport(_respond(204))))

    executor.call(_options())

    assert stats.snapshot()["requests"] == 1
