"""Attempt outcomes and the exponential backoff loop that consumes them."""

from __future__ import annotations

import asyncio
import logging
import random
import threading
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Union

from .exceptions import ApifyCancelledError, ApifyClientError


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Success:
    body: Any
    response: Any = None


@dataclass(frozen=True)
class RetryableFailure:
    error: ApifyClientError


@dataclass(frozen=True)
class TerminalFailure:
    error: ApifyClientError


Outcome = Union[Success, RetryableFailure, TerminalFailure]


def backoff_delay(attempt: int, initial_delay: float, jitter: float = 0.0) -> float:
    """Delay in seconds to wait after the given 1-based failed attempt."""
    delay = initial_delay * (2 ** max(0, attempt - 1))
    if jitter:
        delay += random.uniform(0, jitter * delay)
    return delay


def _raise_failure(failure: RetryableFailure | TerminalFailure) -> None:
    error = failure.error
    raise error from error.cause


def _warn_if_halfway(attempt: int, max_attempts: int, error: ApifyClientError) -> None:
    if max_attempts > 2 and attempt == round((max_attempts - 1) / 2):
        logger.warning(
            "Retry failed %d times and will be repeated later: %s (details: %s)",
            attempt,
            error.message,
            error.details,
        )


def run_with_backoff(
    operation: Callable[[int], Outcome],
    *,
    initial_delay: float,
    max_attempts: int,
    jitter: float = 0.0,
    cancel_event: threading.Event | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> Any:
    """Run ``operation(attempt)`` until it succeeds, fails terminally or runs out of attempts.

    Returns the ``Success`` outcome. When ``cancel_event`` is given, setting it
    interrupts the wait between attempts with ``ApifyCancelledError``.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    attempt = 0
    while True:
        attempt += 1
        if cancel_event is not None and cancel_event.is_set():
            raise ApifyCancelledError("Call was cancelled.", details={"attempt": attempt})

        outcome = operation(attempt)
        if isinstance(outcome, Success):
            return outcome
        if isinstance(outcome, TerminalFailure):
            _raise_failure(outcome)
        if attempt >= max_attempts:
            logger.debug("Giving up after %d attempts", attempt)
            _raise_failure(outcome)

        _warn_if_halfway(attempt, max_attempts, outcome.error)
        delay = backoff_delay(attempt, initial_delay, jitter)
        logger.debug("Attempt %d failed (%s), retrying in %.3fs", attempt, outcome.error.message, delay)
        if cancel_event is not None:
            if cancel_event.wait(delay):
                raise ApifyCancelledError("Call was cancelled.", details={"attempt": attempt})
        else:
            sleep(delay)


async def _race_cancel(awaitable: Awaitable[Any], cancel_event: asyncio.Event, attempt: int) -> Any:
    task = asyncio.ensure_future(awaitable)
    waiter = asyncio.ensure_future(cancel_event.wait())
    try:
        done, _ = await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        waiter.cancel()
        if not task.done():
            task.cancel()
    if task in done:
        return task.result()
    raise ApifyCancelledError("Call was cancelled.", details={"attempt": attempt})


async def run_with_backoff_async(
    operation: Callable[[int], Awaitable[Outcome]],
    *,
    initial_delay: float,
    max_attempts: int,
    jitter: float = 0.0,
    cancel_event: asyncio.Event | None = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> Any:
    """Asyncio twin of ``run_with_backoff``.

    With a ``cancel_event`` both the in-flight attempt and the backoff sleep
    are abandoned as soon as the event is set.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    attempt = 0
    while True:
        attempt += 1
        if cancel_event is not None:
            if cancel_event.is_set():
                raise ApifyCancelledError("Call was cancelled.", details={"attempt": attempt})
            outcome = await _race_cancel(operation(attempt), cancel_event, attempt)
        else:
            outcome = await operation(attempt)

        if isinstance(outcome, Success):
            return outcome
        if isinstance(outcome, TerminalFailure):
            _raise_failure(outcome)
        if attempt >= max_attempts:
            logger.debug("Giving up after %d attempts", attempt)
            _raise_failure(outcome)

        _warn_if_halfway(attempt, max_attempts, outcome.error)
        delay = backoff_delay(attempt, initial_delay, jitter)
        logger.debug("Attempt %d failed (%s), retrying in %.3fs", attempt, outcome.error.message, delay)
        if cancel_event is not None:
            await _race_cancel(sleep(delay), cancel_event, attempt)
        else:
            await sleep(delay)
