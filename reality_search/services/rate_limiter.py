"""Per-client sliding-window rate limiter.

Each client identity (usually the caller's IP) owns a deque of request
timestamps inside the trailing window. Buckets are pruned lazily when the
identity is checked again and dropped once empty; once per window a sweep
removes every identity that has gone idle.
"""
from __future__ import annotations

import logging
import math
import threading
import time
from collections import deque
from dataclasses import dataclass
from typing import Deque, Dict, Optional

logger = logging.getLogger(__name__)

UNKNOWN_IDENTITY = "unknown"


@dataclass(frozen=True)
class RateLimitDecision:
    """Outcome of one rate-limit check."""
    allowed: bool
    retry_after_seconds: int = 0
    remaining: int = 0


class SlidingWindowRateLimiter:
    """Admit at most ``max_requests`` per identity in any ``window_seconds`` span."""

    def __init__(self, max_requests: int = 30, window_seconds: float = 3600):
        """
        Args:
            max_requests: Requests admitted per identity inside the window
            window_seconds: Length of the trailing window in seconds
        """
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._buckets: Dict[str, Deque[float]] = {}
        self._last_sweep: Optional[float] = None
        self._lock = threading.Lock()

    def _prune(self, bucket: Deque[float], now: float) -> None:
        """Remove timestamps older than the trailing window."""
        cutoff = now - self.window_seconds
        while bucket and bucket[0] < cutoff:
            bucket.popleft()

    def _cleanup_buckets(self, now: float) -> None:
        """Drop identities with no timestamps left in the window. Caller holds the lock."""
        idle = []
        for key, bucket in self._buckets.items():
            self._prune(bucket, now)
            if not bucket:
                idle.append(key)
        for key in idle:
            del self._buckets[key]
        if idle:
            logger.debug(f"Rate limiter dropped {len(idle)} idle identities, {len(self._buckets)} tracked")

    def check(self, identity: Optional[str], now: Optional[float] = None) -> RateLimitDecision:
        """
        Record a request for *identity* if the window has room.

        Returns:
            Decision; rejected requests are not recorded and carry the
            seconds until the oldest timestamp leaves the window (>= 1)
        """
        key = (identity or "").strip() or UNKNOWN_IDENTITY
        now = time.time() if now is None else now

        with self._lock:
            if self._last_sweep is None:
                self._last_sweep = now
            elif now - self._last_sweep >= self.window_seconds:
                self._last_sweep = now
                self._cleanup_buckets(now)

            bucket = self._buckets.get(key)
            if bucket is not None:
                self._prune(bucket, now)
                if not bucket:
                    del self._buckets[key]
                    bucket = None

            if bucket is not None and len(bucket) >= self.max_requests:
                oldest = bucket[0]
                retry_after = max(1, math.ceil(oldest + self.window_seconds - now))
                logger.info(
                    f"Rate limit hit: {len(bucket)}/{self.max_requests} requests "
                    f"in {self.window_seconds:g}s, retry after {retry_after}s"
                )
                return RateLimitDecision(allowed=False, retry_after_seconds=retry_after)

            if self.max_requests <= 0:
                return RateLimitDecision(allowed=False, retry_after_seconds=max(1, math.ceil(self.window_seconds)))

            if bucket is None:
                bucket = self._buckets[key] = deque()
            bucket.append(now)
            return RateLimitDecision(allowed=True, remaining=self.max_requests - len(bucket))

    def tracked_identities(self) -> int:
        with self._lock:
            return len(self._buckets)

    def reset(self) -> None:
        with self._lock:
            self._buckets.clear()
            self._last_sweep = None
