"""Fixed-window admission control for the proxy route.

Request counting is done by the ``limits`` fixed-window strategy (the engine
under slowapi). This module adds the identity bookkeeping around it: which
callers currently hold a window, and a hard cap on how many are tracked.
"""

import time
from collections import OrderedDict

from limits import RateLimitItemPerSecond
from limits.storage import MemoryStorage, Storage
from limits.strategies import FixedWindowRateLimiter as FixedWindowStrategy

from ugc_engine.logging import get_logger

logger = get_logger(__name__)

OVERFLOW_IDENTITY = "__overflow__"


class FixedWindowRateLimiter:
    """Per-identity request counter that resets at the end of each window.

    The first request of an identity opens a window of `window_seconds`;
    requests beyond `max_requests` inside that window are refused.

    At most `max_tracked` identities hold their own window. Once that many
    windows are live, new identities share a single overflow window until the
    oldest windows expire, so a flood of distinct (or spoofed) identities
    cannot grow memory without bound.

    Args:
        max_requests: Requests allowed per identity within one window
        window_seconds: Window length in whole seconds
        max_tracked: Upper bound on identities with their own window
        storage: Counter storage for the ``limits`` strategy (in-memory by default)
    """

    def __init__(
        self,
        max_requests: int = 10,
        window_seconds: int = 60,
        max_tracked: int = 10_000,
        storage: Storage | None = None,
    ) -> None:
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.max_tracked = max_tracked
        self.item = RateLimitItemPerSecond(max_requests, window_seconds)
        self.storage = storage or MemoryStorage()
        self._strategy = FixedWindowStrategy(self.storage)
        # identity -> window reset time, oldest window first
        self._windows: OrderedDict[str, float] = OrderedDict()

    def check_and_consume(self, identity: str) -> bool:
        """Count one request for `identity` and report whether it is allowed."""
        key = self._track(identity)
        allowed = self._strategy.hit(self.item, key)
        if not allowed:
            logger.warning(
                "rate_limit_exceeded",
                identity=identity,
                overflow=key == OVERFLOW_IDENTITY,
                limit=self.max_requests,
            )
        return allowed

    def retry_after(self, identity: str) -> float:
        """Seconds until the window counting `identity` resets (0 if none is open)."""
        key = identity if identity in self._windows else OVERFLOW_IDENTITY
        reset_time, _ = self._strategy.get_window_stats(self.item, key)
        return max(0.0, reset_time - time.time())

    def prune(self) -> int:
        """Drop expired windows and return how many were removed."""
        now = time.time()
        removed = 0
        while self._windows:
            identity, reset_at = next(iter(self._windows.items()))
            if reset_at > now:
                break
            del self._windows[identity]
            removed += 1
        return removed

    def _track(self, identity: str) -> str:
        now = time.time()
        reset_at = self._windows.get(identity)
        if reset_at is not None and reset_at > now:
            return identity

        if reset_at is not None:
            # Expired; the reopened window goes to the back
            del self._windows[identity]
        elif len(self._windows) >= self.max_tracked and not self.prune():
            logger.debug("rate_limit_overflow", identity=identity, tracked=len(self._windows))
            return OVERFLOW_IDENTITY

        self._windows[identity] = now + self.window_seconds
        return identity

    def __len__(self) -> int:
        return len(self._windows)
