"""Fixed-window throttle for expensive admin operations.

Callers depend only on :class:`RateLimiter` (``check(key)``), so the
process-local :class:`InMemoryRateLimiter` can be replaced by a shared store
for multi-process deployments without touching call sites. The in-memory
variant keeps one entry per key for the life of the process and is only
suitable for a single worker.
"""

from __future__ import annotations

import math
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Protocol

from fastapi import Request


@dataclass(frozen=True)
class RateLimitDecision:
    """Outcome of a rate-limit check.

    Attributes:
        allowed: Whether the request may proceed.
        reset_at: Epoch seconds when the current window ends; set on denials.
    """

    allowed: bool
    reset_at: float | None = None

    def retry_after_seconds(self, now: float) -> int:
        if self.reset_at is None:
            return 0
        return max(0, math.ceil(self.reset_at - now))

    def wait_minutes(self, now: float) -> int:
        if self.reset_at is None:
            return 0
        return max(0, math.ceil((self.reset_at - now) / 60))

    def reset_at_iso(self) -> str | None:
        if self.reset_at is None:
            return None
        return datetime.fromtimestamp(self.reset_at, tz=timezone.utc).isoformat()


class RateLimiter(Protocol):
    def check(self, key: str) -> RateLimitDecision: ...


@dataclass
class _Window:
    count: int
    reset_at: float


class InMemoryRateLimiter:
    """Per-key fixed window counter held in process memory.

    Args:
        window_seconds: Window length.
        max_requests: Requests allowed per key per window.
        clock: Time source in epoch seconds, injectable for tests.
    """

    def __init__(
        self,
        window_seconds: float,
        max_requests: int,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.window_seconds = window_seconds
        self.max_requests = max_requests
        self.clock = clock
        self._windows: dict[str, _Window] = {}

    def check(self, key: str) -> RateLimitDecision:
        now = self.clock()
        window = self._windows.get(key)

        if window is None or now >= window.reset_at:
            self._windows[key] = _Window(count=1, reset_at=now + self.window_seconds)
            return RateLimitDecision(allowed=True)

        if window.count >= self.max_requests:
            return RateLimitDecision(allowed=False, reset_at=window.reset_at)

        window.count += 1
        return RateLimitDecision(allowed=True)

    def count(self, key: str) -> int:
        """Requests counted in the key's current window (0 if none)."""
        window = self._windows.get(key)
        return window.count if window is not None else 0


def get_seed_rate_limiter(request: Request) -> RateLimiter:
    """FastAPI dependency returning the app-wide seeding rate limiter."""
    return request.app.state.seed_rate_limiter
