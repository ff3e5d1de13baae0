"""Client-wide defaults, per-call overrides and the request plan built from them."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Mapping

if TYPE_CHECKING:
    from .models import RawResponse


DEFAULT_BASE_URL = "https://api.apify.com"
DEFAULT_MAX_RETRIES = 8
DEFAULT_MIN_DELAY_BETWEEN_RETRIES = 0.5
DEFAULT_TIMEOUT = 360.0
RATE_LIMIT_EXCEEDED_STATUS_CODE = 429
DEFAULT_RETRY_ON_STATUS_CODES = frozenset({RATE_LIMIT_EXCEEDED_STATUS_CODE})


@dataclass(frozen=True)
class ClientOptions:
    """Options shared by every call made through one client.

    ``params`` holds resource defaults (``dataset_id``, ``store_id``, ...) that
    endpoint functions read when the call itself does not name them.
    """

    base_url: str = DEFAULT_BASE_URL
    token: str | None = None
    max_retries: int = DEFAULT_MAX_RETRIES
    min_delay_between_retries: float = DEFAULT_MIN_DELAY_BETWEEN_RETRIES
    retry_on_status_codes: frozenset[int] = DEFAULT_RETRY_ON_STATUS_CODES
    timeout: float = DEFAULT_TIMEOUT
    params: Mapping[str, Any] = field(default_factory=dict)

    def merged(self, overrides: Mapping[str, Any] | None) -> "ClientOptions":
        """Return a copy where every non-``None`` override wins over the current value."""
        if not overrides:
            return self
        changes: dict[str, Any] = {}
        params = dict(self.params)
        for key, value in overrides.items():
            if value is None:
                continue
            if key == "params":
                params.update(value)
            elif key in _CLIENT_OPTION_FIELDS:
                changes[key] = _coerce_option(key, value)
            else:
                params[key] = value
        return dataclasses.replace(self, params=params, **changes)

    def get(self, name: str, default: Any = None) -> Any:
        value = self.params.get(name)
        return default if value is None else value


_CLIENT_OPTION_FIELDS = frozenset(f.name for f in dataclasses.fields(ClientOptions)) - {"params"}


def _coerce_option(name: str, value: Any) -> Any:
    if name == "retry_on_status_codes":
        return frozenset(int(code) for code in value)
    return value


@dataclass(frozen=True)
class Endpoint:
    """What one endpoint function asks for: the request shape and how to read the answer.

    ``parse`` receives the decoded body and the raw response of the successful
    attempt. ``not_found_as_none`` marks lookup-style endpoints whose 404
    answers resolve to ``None``. ``max_retries`` replaces the client ceiling
    for endpoints that need a longer retry budget.
    """

    method: str
    path: str
    query: Mapping[str, Any] | None = None
    body: Any = None
    headers: Mapping[str, str] | None = None
    json: bool = True
    gzip: bool = False
    content_type: str | None = None
    parse: Callable[[Any, "RawResponse"], Any] | None = None
    not_found_as_none: bool = False
    max_retries: int | None = None


@dataclass(frozen=True)
class CallOptions:
    """Everything needed to run one logical call, attempt after attempt."""

    base_url: str
    method: str
    path: str = ""
    query: Mapping[str, Any] = field(default_factory=dict)
    body: Any = None
    headers: Mapping[str, str] = field(default_factory=dict)
    token: str | None = None
    content_type: str | None = None
    json: bool = True
    gzip: bool = False
    max_retries: int = DEFAULT_MAX_RETRIES
    min_delay_between_retries: float = DEFAULT_MIN_DELAY_BETWEEN_RETRIES
    retry_on_status_codes: frozenset[int] = DEFAULT_RETRY_ON_STATUS_CODES
    timeout: float = DEFAULT_TIMEOUT

    @property
    def url(self) -> str:
        return self.base_url.rstrip("/") + self.path

    @classmethod
    def build(cls, options: ClientOptions, endpoint: Endpoint) -> "CallOptions":
        return cls(
            base_url=options.base_url,
            method=endpoint.method,
            path=endpoint.path,
            query=dict(endpoint.query or {}),
            body=endpoint.body,
            headers=dict(endpoint.headers or {}),
            token=options.token,
            content_type=endpoint.content_type,
            json=endpoint.json,
            gzip=endpoint.gzip,
            max_retries=endpoint.max_retries if endpoint.max_retries is not None else options.max_retries,
            min_delay_between_retries=options.min_delay_between_retries,
            retry_on_status_codes=options.retry_on_status_codes,
            timeout=options.timeout,
        )
