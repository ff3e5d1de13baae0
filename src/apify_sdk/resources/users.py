"""User accounts."""

from __future__ import annotations

from typing import Any

from ..request_options import ClientOptions, Endpoint
from .base import Callback, Resource, data_with_dates, optional


BASE_PATH = "/v2/users"
ME_USER_NAME_PLACEHOLDER = "me"


def get_user(options: ClientOptions) -> Endpoint:
    user_id = optional(options, "user_id", str) or ME_USER_NAME_PLACEHOLDER
    return Endpoint("GET", f"{BASE_PATH}/{user_id}", parse=data_with_dates)


class Users(Resource):
    def get_user(self, callback: Callback | None = None, **options: Any) -> Any:
        """Return the public profile of ``user_id``, or the token owner's full account by default."""
        return self._invoke(get_user, options, callback)
