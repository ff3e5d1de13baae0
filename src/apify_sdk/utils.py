"""Response normalization and small helpers shared by endpoint definitions."""

from __future__ import annotations

import base64
import json
from datetime import datetime, timezone
from typing import Any, Mapping

from pydantic import TypeAdapter, ValidationError

from .exceptions import (
    NOT_FOUND_STATUS_CODE,
    REQUEST_FAILED_ERROR_MESSAGE,
    REQUEST_FAILED_ERROR_TYPE,
    ApifyClientError,
    ApifyInvalidParameterError,
    ApifyRequestFailedError,
)
from .models import PaginationList, RawResponse


CONTENT_TYPE_JSON = "application/json"
CONTENT_TYPE_XML = "application/xml"
CONTENT_TYPE_TEXT_PREFIX = "text/"
PARSE_DATE_FIELDS_MAX_DEPTH = 3  # body.data.someArrayField[x].field
PARSE_DATE_FIELDS_KEY_SUFFIX = "At"

_PAGINATION_HEADER_PREFIXES = ("x-apify-pagination-", "x-apifier-pagination-")
_datetime_adapter: TypeAdapter[datetime] = TypeAdapter(datetime)


def safe_json_parse(raw: str | bytes) -> Any:
    """Parse JSON, returning an empty dict when the payload is not JSON."""
    try:
        return json.loads(raw)
    except (TypeError, ValueError):
        return {}


def new_error(body: Any, details: Mapping[str, Any] | None = None) -> ApifyRequestFailedError:
    """Build an error from an API error body.

    Understands both ``{"error": {"type": ..., "message": ...}}`` and the flat
    ``{"type": ..., "message": ...}`` form, given as a mapping or JSON text.
    """
    parsed: Any = {}
    if isinstance(body, Mapping):
        parsed = body
    elif isinstance(body, (str, bytes)) and body:
        parsed = safe_json_parse(body)
    if not isinstance(parsed, Mapping):
        parsed = {}

    error = parsed.get("error") or parsed
    if not isinstance(error, Mapping):
        error = {}
    error_type = error.get("type") or REQUEST_FAILED_ERROR_TYPE
    message = error.get("message") or REQUEST_FAILED_ERROR_MESSAGE
    return ApifyRequestFailedError(str(message), type=str(error_type), details=details)


def pluck_data(body: Any) -> Any:
    """Return ``body["data"]`` or ``None`` when the body carries no data envelope."""
    if isinstance(body, Mapping) and "data" in body:
        return body["data"]
    return None


def _pagination_header(response: RawResponse, name: str) -> str | None:
    for prefix in _PAGINATION_HEADER_PREFIXES:
        value = response.header(prefix + name)
        if value:
            return value
    return None


def _parse_int(raw: str | None) -> int | None:
    if raw is None:
        return None
    try:
        return int(raw.strip())
    except ValueError:
        return None


def wrap_array(response: RawResponse, items: Any) -> PaginationList:
    """Wrap a list response together with the pagination info from its headers.

    ``limit`` stays ``None`` when the API sends none, e.g. for dataset items.
    """
    return PaginationList(
        items=items,
        total=_parse_int(_pagination_header(response, "total")),
        offset=_parse_int(_pagination_header(response, "offset")),
        count=_parse_int(_pagination_header(response, "count")),
        limit=_parse_int(_pagination_header(response, "limit")),
    )


def _parse_date(value: Any) -> Any:
    if isinstance(value, datetime):
        return value
    try:
        parsed = _datetime_adapter.validate_python(value)
    except ValidationError:
        return value
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_date_fields(value: Any, depth: int = 0) -> Any:
    """Convert values of ``...At`` keys into datetimes, descending at most three levels."""
    if depth > PARSE_DATE_FIELDS_MAX_DEPTH:
        return value
    if isinstance(value, (list, tuple)):
        return [parse_date_fields(child, depth + 1) for child in value]
    if not isinstance(value, Mapping):
        return value

    parsed: dict[str, Any] = {}
    for key, item in value.items():
        if isinstance(key, str) and key.endswith(PARSE_DATE_FIELDS_KEY_SUFFIX):
            parsed[key] = _parse_date(item) if item else item
        elif isinstance(item, (Mapping, list, tuple)):
            parsed[key] = parse_date_fields(item, depth + 1)
        else:
            parsed[key] = item
    return parsed


def _body_to_text(body: bytes | str) -> str:
    if isinstance(body, (bytes, bytearray)):
        return bytes(body).decode("utf-8")
    return str(body)


def parse_body(body: bytes | str | None, content_type: str | None) -> Any:
    """Decode a record or item payload according to its MIME type."""
    if body is None or not content_type:
        return body
    mime = content_type.split(";", 1)[0].strip().lower()

    if mime.startswith(CONTENT_TYPE_TEXT_PREFIX):
        return _body_to_text(body)
    if mime == CONTENT_TYPE_JSON:
        return json.loads(_body_to_text(body))
    if mime == CONTENT_TYPE_XML:
        return _body_to_text(body)
    return body


def catch_not_found_or_throw(error: BaseException) -> None:
    """Swallow 404 API errors of lookup calls; re-raise everything else."""
    if isinstance(error, ApifyClientError) and error.details.get("status_code") == NOT_FOUND_STATUS_CODE:
        return None
    raise error


def check_param(value: Any, name: str, *types: type, optional: bool = False, message: str | None = None) -> None:
    """Raise ``ApifyInvalidParameterError`` unless ``value`` is one of ``types``."""
    if value is None and optional:
        return
    # bool is an int subclass, only accept it where it is asked for
    if isinstance(value, bool) and bool not in types:
        valid = False
    else:
        valid = isinstance(value, types)
    if valid and isinstance(value, str) and not value and not optional:
        valid = False
    if not valid:
        expected = " | ".join(t.__name__ for t in types)
        prefix = "Maybe " if optional else ""
        raise ApifyInvalidParameterError(
            message or f'Parameter "{name}" of type {prefix}{expected} must be provided'
        )


def replace_slash_with_tilde(resource_id: str) -> str:
    """Turn ``username/resource-name`` into the URL-safe ``username~resource-name``."""
    return resource_id.replace("/", "~", 1)


def stringify_webhooks_to_base64(webhooks: list[Mapping[str, Any]]) -> str:
    payload = json.dumps(webhooks, separators=(",", ":"))
    return base64.b64encode(payload.encode("utf-8")).decode("ascii")
