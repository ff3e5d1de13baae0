"""Actor tasks and their runs."""

from __future__ import annotations

from typing import Any

from ..request_options import ClientOptions, Endpoint
from .base import (
    Callback,
    Resource,
    data_with_dates,
    dates,
    pagination_query,
    require,
    require_token,
    resource_id,
    run_query,
    without_id,
)


BASE_PATH = "/v2/actor-tasks"


def _task_path(options: ClientOptions, suffix: str = "") -> str:
    return f"{BASE_PATH}/{resource_id(options, 'task_id')}{suffix}"


def list_tasks(options: ClientOptions) -> Endpoint:
    require_token(options)
    return Endpoint("GET", BASE_PATH, query=pagination_query(options), parse=data_with_dates)


def create_task(options: ClientOptions) -> Endpoint:
    require_token(options)
    task = require(options, "task", dict)
    return Endpoint("POST", BASE_PATH, body=task, parse=data_with_dates)


def update_task(options: ClientOptions) -> Endpoint:
    require_token(options)
    task = require(options, "task", dict)
    if options.get("task_id") is None and task.get("id"):
        options = options.merged({"task_id": task["id"]})
    return Endpoint("PUT", _task_path(options), body=without_id(task), parse=data_with_dates)


def delete_task(options: ClientOptions) -> Endpoint:
    require_token(options)
    return Endpoint("DELETE", _task_path(options), parse=dates)


def get_task(options: ClientOptions) -> Endpoint:
    return Endpoint("GET", _task_path(options), parse=data_with_dates, not_found_as_none=True)


def list_runs(options: ClientOptions) -> Endpoint:
    require_token(options)
    return Endpoint("GET", _task_path(options, "/runs"), query=pagination_query(options), parse=data_with_dates)


def run_task(options: ClientOptions) -> Endpoint:
    return Endpoint(
        "POST",
        _task_path(options, "/runs"),
        query=run_query(options),
        body=options.get("input"),
        parse=data_with_dates,
    )


def list_webhooks(options: ClientOptions) -> Endpoint:
    return Endpoint("GET", _task_path(options, "/webhooks"), query=pagination_query(options), parse=data_with_dates)


class Tasks(Resource):
    """Actor task endpoints; ``task_id`` accepts an id or ``username/task-name``."""

    def list_tasks(self, callback: Callback | None = None, **options: Any) -> Any:
        return self._invoke(list_tasks, options, callback)

    def create_task(self, callback: Callback | None = None, **options: Any) -> Any:
        return self._invoke(create_task, options, callback)

    def update_task(self, callback: Callback | None = None, **options: Any) -> Any:
        return self._invoke(update_task, options, callback)

    def delete_task(self, callback: Callback | None = None, **options: Any) -> Any:
        return self._invoke(delete_task, options, callback)

    def get_task(self, callback: Callback | None = None, **options: Any) -> Any:
        """Return the task or ``None`` if it does not exist."""
        return self._invoke(get_task, options, callback)

    def list_runs(self, callback: Callback | None = None, **options: Any) -> Any:
        return self._invoke(list_runs, options, callback)

    def run_task(self, callback: Callback | None = None, **options: Any) -> Any:
        """Run the task, optionally overriding its ``input`` (a JSON-serializable mapping)."""
        return self._invoke(run_task, options, callback)

    def list_webhooks(self, callback: Callback | None = None, **options: Any) -> Any:
        return self._invoke(list_webhooks, options, callback)
