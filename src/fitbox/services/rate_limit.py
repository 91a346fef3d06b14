"""Fixed-window request rate limiting over an injectable counter store."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Callable, Protocol

from ..errors import RateLimitExceededError


class RateLimitStore(Protocol):
    """Key -> counter with a time-to-live."""

    def increment(self, key: str, window_seconds: float) -> tuple[int, float]:
        """Bump ``key`` and return ``(count, seconds_until_reset)`` for its current window."""
        ...


@dataclass(slots=True)
class _Window:
    count: int
    reset_at: float


class MemoryRateLimitStore:
    """Process-local store; expired windows are swept on write."""

    def __init__(self, clock: Callable[[], float] = time.monotonic, sweep_every: int = 500) -> None:
        self._clock = clock
        self._sweep_every = sweep_every
        self._writes = 0
        self._windows: dict[str, _Window] = {}
        self._lock = threading.Lock()

    def increment(self, key: str, window_seconds: float) -> tuple[int, float]:
        with self._lock:
            now = self._clock()
            window = self._windows.get(key)
            if window is None or window.reset_at <= now:
                window = _Window(count=0, reset_at=now + window_seconds)
                self._windows[key] = window
            window.count += 1
            self._writes += 1
            if self._writes % self._sweep_every == 0:
                self._sweep(now)
            return window.count, window.reset_at - now

    def _sweep(self, now: float) -> None:
        expired = [key for key, window in self._windows.items() if window.reset_at <= now]
        for key in expired:
            del self._windows[key]

    def __len__(self) -> int:
        return len(self._windows)


class RateLimiter:
    def __init__(
        self,
        store: RateLimitStore,
        limit: int,
        window_seconds: float = 60.0,
        namespace: str = "default",
    ) -> None:
        if limit < 1:
            raise ValueError("limit must be >= 1")
        self.store = store
        self.limit = limit
        self.window_seconds = window_seconds
        self.namespace = namespace

    def check(self, key: str) -> int:
        """Count a request for ``key``; returns requests left in the window."""
        count, resets_in = self.store.increment(f"{self.namespace}:{key}", self.window_seconds)
        if count > self.limit:
            raise RateLimitExceededError(key, retry_after=max(0.0, resets_in))
        return self.limit - count
