"""Building blocks shared by the endpoint tables."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Mapping

from ..models import RawResponse
from ..request_options import ClientOptions, Endpoint
from ..utils import (
    check_param,
    parse_date_fields,
    pluck_data,
    replace_slash_with_tilde,
    stringify_webhooks_to_base64,
)

if TYPE_CHECKING:
    from ..client import _BaseApifyClient


EndpointFn = Callable[[ClientOptions], Endpoint]
Callback = Callable[[Any, Any], Any]


def data_with_dates(body: Any, response: RawResponse) -> Any:
    return parse_date_fields(pluck_data(body))


def dates(body: Any, response: RawResponse) -> Any:
    return parse_date_fields(body)


def require(options: ClientOptions, name: str, *types: type) -> Any:
    value = options.get(name)
    check_param(value, name, *types)
    return value


def optional(options: ClientOptions, name: str, *types: type) -> Any:
    value = options.get(name)
    check_param(value, name, *types, optional=True)
    return value


def require_token(options: ClientOptions) -> str:
    check_param(options.token, "token", str)
    return options.token  # type: ignore[return-value]


def resource_id(options: ClientOptions, name: str) -> str:
    """Read a resource id option, accepting ``username/name`` as well."""
    return replace_slash_with_tilde(require(options, name, str))


def pagination_query(options: ClientOptions, *flags: str) -> dict[str, Any]:
    """``limit``/``offset``/``desc`` plus boolean ``flags``, omitting falsy values."""
    limit = optional(options, "limit", int)
    offset = optional(options, "offset", int)
    desc = optional(options, "desc", bool)
    query: dict[str, Any] = {"limit": limit or None, "offset": offset or None, "desc": True if desc else None}
    for flag in flags:
        value = optional(options, flag, bool)
        query[flag] = True if value else None
    return query


def without_id(payload: Mapping[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in payload.items() if key != "id"}


class Resource:
    """Method namespace bound to one client; each method runs one endpoint function."""

    def __init__(self, client: "_BaseApifyClient") -> None:
        self._client = client

    def _invoke(self, endpoint_fn: EndpointFn, options: Mapping[str, Any], callback: Callback | None) -> Any:
        return self._client.invoke(endpoint_fn, options, callback)


def run_query(options: ClientOptions) -> dict[str, Any]:
    """Query of the endpoints that start an actor run (``run_timeout`` maps to ``timeout``)."""
    webhooks = optional(options, "webhooks", list)
    return {
        "waitForFinish": optional(options, "wait_for_finish", int) or None,
        "timeout": optional(options, "run_timeout", int) or None,
        "memory": optional(options, "memory", int) or None,
        "build": optional(options, "build", str),
        "webhooks": stringify_webhooks_to_base64(webhooks) if webhooks else None,
    }
