"""Actors (acts), their runs, builds, versions and webhooks."""

from __future__ import annotations

from typing import Any

from ..request_options import ClientOptions, Endpoint
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
    run_query,
    without_id,
)


BASE_PATH = "/v2/acts"


def _act_path(options: ClientOptions, suffix: str = "") -> str:
    return f"{BASE_PATH}/{resource_id(options, 'act_id')}{suffix}"


def list_acts(options: ClientOptions) -> Endpoint:
    require_token(options)
    return Endpoint("GET", BASE_PATH, query=pagination_query(options, "my"), parse=data_with_dates)


def create_act(options: ClientOptions) -> Endpoint:
    require_token(options)
    act = require(options, "act", dict)
    return Endpoint("POST", BASE_PATH, body=act, parse=data_with_dates)


def update_act(options: ClientOptions) -> Endpoint:
    require_token(options)
    act = require(options, "act", dict)
    if options.get("act_id") is None and act.get("id"):
        options = options.merged({"act_id": act["id"]})
    return Endpoint("PUT", _act_path(options), body=without_id(act), parse=data_with_dates)


def delete_act(options: ClientOptions) -> Endpoint:
    return Endpoint("DELETE", _act_path(options), parse=dates)


def get_act(options: ClientOptions) -> Endpoint:
    return Endpoint("GET", _act_path(options), parse=data_with_dates, not_found_as_none=True)


def list_runs(options: ClientOptions) -> Endpoint:
    query = pagination_query(options)
    query["status"] = optional(options, "status", str)
    return Endpoint("GET", _act_path(options, "/runs"), query=query, parse=data_with_dates)


def run_act(options: ClientOptions) -> Endpoint:
    return Endpoint(
        "POST",
        _act_path(options, "/runs"),
        query=run_query(options),
        body=options.get("body"),
        content_type=optional(options, "content_type", str),
        parse=data_with_dates,
    )


def get_run(options: ClientOptions) -> Endpoint:
    run_id = require(options, "run_id", str)
    return Endpoint(
        "GET",
        _act_path(options, f"/runs/{run_id}"),
        query={"waitForFinish": optional(options, "wait_for_finish", int) or None},
        parse=data_with_dates,
        not_found_as_none=True,
    )


def abort_run(options: ClientOptions) -> Endpoint:
    run_id = require(options, "run_id", str)
    return Endpoint("POST", _act_path(options, f"/runs/{run_id}/abort"), parse=data_with_dates)


def metamorph_run(options: ClientOptions) -> Endpoint:
    run_id = require(options, "run_id", str)
    target_act_id = require(options, "target_act_id", str)
    return Endpoint(
        "POST",
        _act_path(options, f"/runs/{run_id}/metamorph"),
        query={"targetActorId": target_act_id, "build": optional(options, "build", str)},
        body=options.get("body"),
        content_type=optional(options, "content_type", str),
        parse=data_with_dates,
    )


def resurrect_run(options: ClientOptions) -> Endpoint:
    run_id = require(options, "run_id", str)
    return Endpoint("POST", _act_path(options, f"/runs/{run_id}/resurrect"), parse=data_with_dates)


def list_builds(options: ClientOptions) -> Endpoint:
    return Endpoint("GET", _act_path(options, "/builds"), query=pagination_query(options), parse=data_with_dates)


def build_act(options: ClientOptions) -> Endpoint:
    require_token(options)
    query = {
        "version": require(options, "version", str),
        "waitForFinish": optional(options, "wait_for_finish", int) or None,
        "betaPackages": True if optional(options, "beta_packages", bool) else None,
        "useCache": True if optional(options, "use_cache", bool) else None,
        "tag": optional(options, "tag", str),
    }
    return Endpoint("POST", _act_path(options, "/builds"), query=query, parse=data_with_dates)


def get_build(options: ClientOptions) -> Endpoint:
    build_id = require(options, "build_id", str)
    return Endpoint(
        "GET",
        _act_path(options, f"/builds/{build_id}"),
        query={"waitForFinish": optional(options, "wait_for_finish", int) or None},
        parse=data_with_dates,
        not_found_as_none=True,
    )


def abort_build(options: ClientOptions) -> Endpoint:
    build_id = require(options, "build_id", str)
    return Endpoint("POST", _act_path(options, f"/builds/{build_id}/abort"), parse=data_with_dates)


def list_act_versions(options: ClientOptions) -> Endpoint:
    return Endpoint("GET", _act_path(options, "/versions"), parse=data_with_dates)


def create_act_version(options: ClientOptions) -> Endpoint:
    version = require(options, "version", dict)
    return Endpoint("POST", _act_path(options, "/versions"), body=version, parse=data_with_dates)


def get_act_version(options: ClientOptions) -> Endpoint:
    version_number = require(options, "version_number", str)
    return Endpoint(
        "GET",
        _act_path(options, f"/versions/{version_number}"),
        parse=data_with_dates,
        not_found_as_none=True,
    )


def update_act_version(options: ClientOptions) -> Endpoint:
    version_number = require(options, "version_number", str)
    version = require(options, "version", dict)
    return Endpoint("PUT", _act_path(options, f"/versions/{version_number}"), body=version, parse=data_with_dates)


def delete_act_version(options: ClientOptions) -> Endpoint:
    version_number = require(options, "version_number", str)
    return Endpoint("DELETE", _act_path(options, f"/versions/{version_number}"), parse=dates)


def list_webhooks(options: ClientOptions) -> Endpoint:
    return Endpoint("GET", _act_path(options, "/webhooks"), query=pagination_query(options), parse=data_with_dates)


class Acts(Resource):
    """Actor endpoints.

    ``act_id`` accepts an actor id or ``username/actor-name``. Lookups
    (``get_act``, ``get_run``, ``get_build``, ``get_act_version``) return
    ``None`` when the resource does not exist.
    """

    def list_acts(self, callback: Callback | None = None, **options: Any) -> Any:
        """List the user's actors. Options: ``limit``, ``offset``, ``desc``, ``my``."""
        return self._invoke(list_acts, options, callback)

    def create_act(self, callback: Callback | None = None, **options: Any) -> Any:
        return self._invoke(create_act, options, callback)

    def update_act(self, callback: Callback | None = None, **options: Any) -> Any:
        """Update ``act``; ``act_id`` defaults to ``act["id"]``."""
        return self._invoke(update_act, options, callback)

    def delete_act(self, callback: Callback | None = None, **options: Any) -> Any:
        return self._invoke(delete_act, options, callback)

    def get_act(self, callback: Callback | None = None, **options: Any) -> Any:
        return self._invoke(get_act, options, callback)

    def list_runs(self, callback: Callback | None = None, **options: Any) -> Any:
        return self._invoke(list_runs, options, callback)

    def run_act(self, callback: Callback | None = None, **options: Any) -> Any:
        """Start a run.

        Options: ``body`` and ``content_type`` (the actor input),
        ``wait_for_finish`` (seconds, at most 120), ``run_timeout`` (seconds),
        ``memory`` (megabytes), ``build`` and ad-hoc ``webhooks``.
        """
        return self._invoke(run_act, options, callback)

    def get_run(self, callback: Callback | None = None, **options: Any) -> Any:
        return self._invoke(get_run, options, callback)

    def abort_run(self, callback: Callback | None = None, **options: Any) -> Any:
        return self._invoke(abort_run, options, callback)

    def metamorph_run(self, callback: Callback | None = None, **options: Any) -> Any:
        """Transform run ``run_id`` into a run of ``target_act_id`` with a new input."""
        return self._invoke(metamorph_run, options, callback)

    def resurrect_run(self, callback: Callback | None = None, **options: Any) -> Any:
        return self._invoke(resurrect_run, options, callback)

    def list_builds(self, callback: Callback | None = None, **options: Any) -> Any:
        return self._invoke(list_builds, options, callback)

    def build_act(self, callback: Callback | None = None, **options: Any) -> Any:
        """Build ``version`` of the actor. Options: ``wait_for_finish``, ``beta_packages``, ``use_cache``, ``tag``."""
        return self._invoke(build_act, options, callback)

    def get_build(self, callback: Callback | None = None, **options: Any) -> Any:
        return self._invoke(get_build, options, callback)

    def abort_build(self, callback: Callback | None = None, **options: Any) -> Any:
        return self._invoke(abort_build, options, callback)

    def list_act_versions(self, callback: Callback | None = None, **options: Any) -> Any:
        return self._invoke(list_act_versions, options, callback)

    def create_act_version(self, callback: Callback | None = None, **options: Any) -> Any:
        return self._invoke(create_act_version, options, callback)

    def get_act_version(self, callback: Callback | None = None, **options: Any) -> Any:
        return self._invoke(get_act_version, options, callback)

    def update_act_version(self, callback: Callback | None = None, **options: Any) -> Any:
        return self._invoke(update_act_version, options, callback)

    def delete_act_version(self, callback: Callback | None = None, **options: Any) -> Any:
        return self._invoke(delete_act_version, options, callback)

    def list_webhooks(self, callback: Callback | None = None, **options: Any) -> Any:
        return self._invoke(list_webhooks, options, callback)
