"""Per-identity fixed-window request counter."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Hashable, Optional

from summary_assistant.config import Settings
from summary_assistant.constants import Limits


@dataclass(slots=True)
class RateLimitState:
    count: int
    window_expiry: float


class RateLimiter:
    """
    Allow at most ``max_requests`` per identity inside a window that starts at
    the first request after the previous window expired.

    ``acquire`` checks and counts under one lock so two concurrent requests
    from the same identity cannot both take the last slot.
    """

    def __init__(
        self,
        max_requests: int = Limits.RATE_LIMIT_MAX_REQUESTS,
        window_seconds: float = Limits.RATE_LIMIT_WINDOW_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._states: Dict[Hashable, RateLimitState] = {}
        self._lock = threading.Lock()
        self._next_purge = clock() + window_seconds

    @classmethod
    def from_settings(
        cls, settings: Settings, clock: Callable[[], float] = time.monotonic
    ) -> "RateLimiter":
        return cls(
            max_requests=settings.rate_limit_max_requests,
            window_seconds=settings.rate_limit_window,
            clock=clock,
        )

    def _live_state(self, identity: Hashable, now: float) -> Optional[RateLimitState]:
        state = self._states.get(identity)
        if state is not None and now > state.window_expiry:
            del self._states[identity]
            return None
        return state

    def _count(self, identity: Hashable, now: float) -> int:
        state = self._live_state(identity, now)
        return state.count if state else 0

    def _increment(self, identity: Hashable, now: float) -> None:
        state = self._live_state(identity, now)
        if state is None:
            self._states[identity] = RateLimitState(1, now + self.window_seconds)
        else:
            state.count += 1

    def is_limited(self, identity: Hashable) -> bool:
        with self._lock:
            return self._count(identity, self._clock()) >= self.max_requests

    def increment(self, identity: Hashable) -> None:
        with self._lock:
            self._increment(identity, self._clock())

    def acquire(self, identity: Hashable) -> bool:
        """Count one request unless the identity is already at its limit."""
        with self._lock:
            now = self._clock()
            if now >= self._next_purge:
                self._purge(now)
            if self._count(identity, now) >= self.max_requests:
                return False
            self._increment(identity, now)
            return True

    def remaining(self, identity: Hashable) -> int:
        with self._lock:
            return max(0, self.max_requests - self._count(identity, self._clock()))

    def _purge(self, now: float) -> int:
        expired = [key for key, state in self._states.items() if now > state.window_expiry]
        for key in expired:
            del self._states[key]
        self._next_purge = now + self.window_seconds
        return len(expired)

    def purge_expired(self) -> int:
        """Drop expired windows; returns how many were removed."""
        with self._lock:
            return self._purge(self._clock())
