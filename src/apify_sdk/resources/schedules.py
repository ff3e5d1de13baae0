"""Schedules that start actors and tasks periodically."""

from __future__ import annotations

from typing import Any

from ..request_options import ClientOptions, Endpoint
from .base import Callback, Resource, data_with_dates, dates, pagination_query, require, require_token, without_id


BASE_PATH = "/v2/schedules"


def _schedule_path(options: ClientOptions, suffix: str = "") -> str:
    return f"{BASE_PATH}/{require(options, 'schedule_id', str)}{suffix}"


def create_schedule(options: ClientOptions) -> Endpoint:
    require_token(options)
    schedule = require(options, "schedule", dict)
    return Endpoint("POST", BASE_PATH, body=schedule, parse=data_with_dates)


def list_schedules(options: ClientOptions) -> Endpoint:
    require_token(options)
    return Endpoint("GET", BASE_PATH, query=pagination_query(options), parse=data_with_dates)


def get_schedule(options: ClientOptions) -> Endpoint:
    return Endpoint("GET", _schedule_path(options), parse=data_with_dates, not_found_as_none=True)


def update_schedule(options: ClientOptions) -> Endpoint:
    schedule = require(options, "schedule", dict)
    if options.get("schedule_id") is None and schedule.get("id"):
        options = options.merged({"schedule_id": schedule["id"]})
    return Endpoint("PUT", _schedule_path(options), body=without_id(schedule), parse=data_with_dates)


def delete_schedule(options: ClientOptions) -> Endpoint:
    return Endpoint("DELETE", _schedule_path(options), parse=dates)


def get_log(options: ClientOptions) -> Endpoint:
    return Endpoint("GET", _schedule_path(options, "/log"), parse=data_with_dates, not_found_as_none=True)


class Schedules(Resource):
    """Schedule endpoints, addressed by ``schedule_id``."""

    def create_schedule(self, callback: Callback | None = None, **options: Any) -> Any:
        return self._invoke(create_schedule, options, callback)

    def list_schedules(self, callback: Callback | None = None, **options: Any) -> Any:
        return self._invoke(list_schedules, options, callback)

    def get_schedule(self, callback: Callback | None = None, **options: Any) -> Any:
        return self._invoke(get_schedule, options, callback)

    def update_schedule(self, callback: Callback | None = None, **options: Any) -> Any:
        """Update ``schedule``; ``schedule_id`` defaults to ``schedule["id"]``."""
        return self._invoke(update_schedule, options, callback)

    def delete_schedule(self, callback: Callback | None = None, **options: Any) -> Any:
        return self._invoke(delete_schedule, options, callback)

    def get_log(self, callback: Callback | None = None, **options: Any) -> Any:
        """Return the invocation log of the schedule, or ``None`` if it does not exist."""
        return self._invoke(get_log, options, callback)
