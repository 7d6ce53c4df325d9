"""In-process fixed-window rate limiter for the registration endpoint.

State lives in a dict on the limiter instance and is lost on restart;
several server processes each keep their own counts.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import datetime, timezone

_logger = logging.getLogger(__name__)


@dataclass
class RateLimitResult:
    success: bool
    remaining: int
    reset: float
    """Window end as epoch seconds."""

    limit: int


@dataclass
class _Window:
    count: int
    reset_at: float


class RateLimiter:
    """Allow at most *limit* hits per identifier within *window_s* seconds.

    Args:
        limit: Hits allowed per window.  0 blocks every hit.
        window_s: Window length in seconds.
        clock: Returns the current epoch time; injectable for tests.
        cleanup_every: Purge expired windows every N hits.
    """

    def __init__(
        self,
        limit: int = 5,
        window_s: float = 60.0,
        clock: Callable[[], float] = time.time,
        cleanup_every: int = 1000,
    ) -> None:
        self.limit = limit
        self.window_s = window_s
        self._clock = clock
        self._cleanup_every = cleanup_every
        self._hits = 0
        self._windows: dict[str, _Window] = {}
        self._lock = threading.Lock()

    def hit(self, identifier: str) -> RateLimitResult:
        """Count one request for *identifier* and report whether it is allowed."""
        key = f"ratelimit:{identifier}"
        with self._lock:
            now = self._clock()
            self._hits += 1
            if self._hits % self._cleanup_every == 0:
                self._purge(now)

            window = self._windows.get(key)
            if window is None or window.reset_at < now:
                window = _Window(count=0, reset_at=now + self.window_s)
                self._windows[key] = window
            window.count += 1

            result = RateLimitResult(
                success=window.count <= self.limit,
                remaining=max(0, self.limit - window.count),
                reset=window.reset_at,
                limit=self.limit,
            )

        if not result.success:
            _logger.warning("Rate limit exceeded for %s", identifier)
        return result

    def reset(self) -> None:
        """Forget all windows."""
        with self._lock:
            self._windows.clear()

    def _purge(self, now: float) -> None:
        expired = [k for k, w in self._windows.items() if w.reset_at < now]
        for k in expired:
            del self._windows[k]


def get_client_ip(headers: Mapping[str, str], fallback: str | None = None) -> str:
    """Best-effort client address behind common proxies.

    Checks ``cf-connecting-ip``, then the first ``x-forwarded-for`` entry,
    then ``x-real-ip``.  *headers* must do case-insensitive lookups
    (Starlette's ``Headers`` does).
    """
    cf_ip = headers.get("cf-connecting-ip")
    if cf_ip:
        return cf_ip
    forwarded = headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    real_ip = headers.get("x-real-ip")
    if real_ip:
        return real_ip
    return fallback or "unknown"


def rate_limit_headers(result: RateLimitResult) -> dict[str, str]:
    reset = datetime.fromtimestamp(result.reset, tz=timezone.utc)
    return {
        "X-RateLimit-Limit": str(result.limit),
        "X-RateLimit-Remaining": str(result.remaining),
        "X-RateLimit-Reset": reset.isoformat().replace("+00:00", "Z"),
    }
