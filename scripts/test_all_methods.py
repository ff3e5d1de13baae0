#!/usr/bin/env python3
"""Integration test: exercise the ApifyClient resources against a live API.

Needs ``APIFY_TOKEN``; ``APIFY_API_BASE_URL`` may point at a non-production
deployment. Storages created here are deleted at the end.
"""

from __future__ import annotations

import os
import sys
import uuid

from apify_sdk import ApifyClient, ApifyClientError

passed: list[str] = []
failed: list[tuple[str, str]] = []
skipped: list[tuple[str, str]] = []


def ok(name: str, result: object = None) -> None:
    tag = type(result).__name__ if result is not None else "None"
    print(f"  PASS  {name}  -> {tag}")
    passed.append(name)


def fail(name: str, err: Exception) -> None:
    msg = str(err)[:200]
    print(f"  FAIL  {name}  -> {msg}")
    failed.append((name, msg))


def skip(name: str, reason: str) -> None:
    print(f"  SKIP  {name}  ({reason})")
    skipped.append((name, reason))


def crash(name: str, exc: Exception) -> None:
    msg = f"{type(exc).__name__}: {exc}"[:200]
    print(f"  CRASH {name}  -> {msg}")
    failed.append((name, msg))


def run(name: str, fn, *, allowed: set[int] | None = None):
    """Run fn(), record pass/fail/expected-error."""
    try:
        result = fn()
        ok(name, result)
        return result
    except ApifyClientError as e:
        if allowed and e.status_code in allowed:
            ok(name, e)
        else:
            fail(name, e)
        return None
    except Exception as e:
        crash(name, e)
        return None


def main() -> None:
    if not os.getenv("APIFY_TOKEN"):
        print("APIFY_TOKEN is not set")
        sys.exit(2)

    client = ApifyClient(max_retries=2, timeout=30.0)
    suffix = uuid.uuid4().hex[:8]

    # ── User ──────────────────────────────────────────────────────
    print("\n=== User ===")

    run("get_user", lambda: client.users.get_user())

    # ── Actors and tasks ──────────────────────────────────────────
    print("\n=== Actors and tasks ===")

    acts = run("list_acts", lambda: client.acts.list_acts(limit=5, my=True))
    run("get_act", lambda: client.acts.get_act(act_id="apify/hello-world"))
    run("get_act (missing)", lambda: client.acts.get_act(act_id=f"missing-{suffix}"))
    act_id = acts["items"][0]["id"] if acts and acts.get("items") else None
    if act_id:
        runs = run("list_runs", lambda: client.acts.list_runs(act_id=act_id, limit=1, desc=True))
        run("list_builds", lambda: client.acts.list_builds(act_id=act_id, limit=1))
        run("list_act_versions", lambda: client.acts.list_act_versions(act_id=act_id))
        run("list_webhooks (act)", lambda: client.acts.list_webhooks(act_id=act_id))
        run_id = runs["items"][0]["id"] if runs and runs.get("items") else None
        if run_id:
            run("get_run", lambda: client.acts.get_run(act_id=act_id, run_id=run_id))
        else:
            skip("get_run", "actor has no runs")
    else:
        for m in ("list_runs", "list_builds", "list_act_versions", "list_webhooks (act)", "get_run"):
            skip(m, "no actor available")

    run("list_tasks", lambda: client.tasks.list_tasks(limit=5))

    # ── Storages ──────────────────────────────────────────────────
    print("\n=== Storages ===")

    dataset = run("get_or_create_dataset", lambda: client.datasets.get_or_create_dataset(dataset_name=f"sdk-test-{suffix}"))
    if dataset:
        dataset_id = dataset["id"]
        run("put_items", lambda: client.datasets.put_items(dataset_id=dataset_id, data=[{"n": 1}, {"n": 2}]))
        run("get_items", lambda: client.datasets.get_items(dataset_id=dataset_id, limit=1))
        run("get_items (csv)", lambda: client.datasets.get_items(dataset_id=dataset_id, format="csv", bom=False))
        run("delete_dataset", lambda: client.datasets.delete_dataset(dataset_id=dataset_id))
    else:
        for m in ("put_items", "get_items", "get_items (csv)", "delete_dataset"):
            skip(m, "no dataset created")

    store = run("get_or_create_store", lambda: client.key_value_stores.get_or_create_store(store_name=f"sdk-test-{suffix}"))
    if store:
        store_id = store["id"]
        run("put_record", lambda: client.key_value_stores.put_record(store_id=store_id, key="STATE", body={"ok": True}))
        run("get_record", lambda: client.key_value_stores.get_record(store_id=store_id, key="STATE"))
        run("list_keys", lambda: client.key_value_stores.list_keys(store_id=store_id))
        run("delete_record", lambda: client.key_value_stores.delete_record(store_id=store_id, key="STATE"))
        run("delete_store", lambda: client.key_value_stores.delete_store(store_id=store_id))
    else:
        for m in ("put_record", "get_record", "list_keys", "delete_record", "delete_store"):
            skip(m, "no store created")

    queue = run("get_or_create_queue", lambda: client.request_queues.get_or_create_queue(queue_name=f"sdk-test-{suffix}"))
    if queue:
        queue_id = queue["id"]
        added = run(
            "add_request",
            lambda: client.request_queues.add_request(
                queue_id=queue_id, request={"url": "https://example.com", "uniqueKey": suffix}
            ),
        )
        run("get_head", lambda: client.request_queues.get_head(queue_id=queue_id, limit=1))
        if added:
            request_id = added["requestId"]
            run("get_request", lambda: client.request_queues.get_request(queue_id=queue_id, request_id=request_id))
            run("delete_request", lambda: client.request_queues.delete_request(queue_id=queue_id, request_id=request_id))
        run("delete_queue", lambda: client.request_queues.delete_queue(queue_id=queue_id))
    else:
        for m in ("add_request", "get_head", "get_request", "delete_request", "delete_queue"):
            skip(m, "no queue created")

    # ── Schedules and webhooks ────────────────────────────────────
    print("\n=== Schedules and webhooks ===")

    run("list_schedules", lambda: client.schedules.list_schedules(limit=5))
    run("list_webhooks", lambda: client.webhooks.list_webhooks(limit=5))
    run("list_dispatches", lambda: client.webhook_dispatches.list_dispatches(limit=5))

    client.close()

    # ── Summary ───────────────────────────────────────────────────
    print("\n" + "=" * 60)
    print(f"PASSED: {len(passed)}   FAILED: {len(failed)}   SKIPPED: {len(skipped)}")
    print(f"Stats: {client.stats.snapshot()}")
    if failed:
        print("\nFailed methods:")
        for name, err in failed:
            print(f"  - {name}: {err}")
    if skipped:
        print("\nSkipped methods:")
        for name, reason in skipped:
            print(f"  - {name}: {reason}")
    print("=" * 60)

    sys.exit(1 if failed else 0)


if __name__ == "__main__":
    main()
