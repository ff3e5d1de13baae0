"""Per-client request counters."""

from __future__ import annotations

import threading


class Statistics:
    """Counters owned by one client instance.

    ``calls`` counts logical SDK calls, ``requests`` counts HTTP attempts (so
    ``requests >= calls``). ``rate_limit_errors[i]`` counts the 429 responses
    seen on attempt ``i + 1``.
    """

    def __init__(self) -> None:
        self.calls = 0
        self.requests = 0
        self.rate_limit_errors: list[int] = []
        self._lock = threading.Lock()

    def add_call(self) -> None:
        with self._lock:
            self.calls += 1

    def add_request(self) -> None:
        with self._lock:
            self.requests += 1

    def add_rate_limit_error(self, attempt: int) -> None:
        if attempt < 1:
            raise ValueError("attempt must be greater than 0")
        index = attempt - 1
        with self._lock:
            if len(self.rate_limit_errors) <= index:
                self.rate_limit_errors.extend([0] * (index + 1 - len(self.rate_limit_errors)))
            self.rate_limit_errors[index] += 1

    def snapshot(self) -> dict[str, object]:
        with self._lock:
            return {
                "calls": self.calls,
                "requests": self.requests,
                "rate_limit_errors": list(self.rate_limit_errors),
            }
