"""Actor run and build logs."""

from __future__ import annotations

from typing import Any

from ..models import RawResponse
from ..request_options import ClientOptions, Endpoint
from .base import Callback, Resource, require


BASE_PATH = "/v2/logs"


def _text(body: bytes, response: RawResponse) -> str:
    return body.decode("utf-8", errors="replace")


def get_log(options: ClientOptions) -> Endpoint:
    log_id = require(options, "log_id", str)
    return Endpoint("GET", f"{BASE_PATH}/{log_id}", json=False, parse=_text, not_found_as_none=True)


class Logs(Resource):
    def get_log(self, callback: Callback | None = None, **options: Any) -> Any:
        """Return the log of the run or build ``log_id`` as text, or ``None`` if missing."""
        return self._invoke(get_log, options, callback)
