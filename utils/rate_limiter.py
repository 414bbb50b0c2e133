"""
Rate limiting for user-initiated writes.

Counters live in the Django cache so every instance behind the load balancer
sees the same window when the cache is Redis.
"""

import logging
import time
from dataclasses import dataclass
from typing import Optional

from django.conf import settings
from django.core.cache import cache

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateLimitResult:
    limited: bool
    retry_after: Optional[int] = None


class RateLimiter:
    """Interface: check() counts one request for ``key``."""

    def check(self, key: str) -> RateLimitResult:
        raise NotImplementedError


class NullRateLimiter(RateLimiter):
    """Never limits. Used when rate limiting is disabled."""

    def check(self, key: str) -> RateLimitResult:
        return RateLimitResult(limited=False)


class CacheRateLimiter(RateLimiter):
    """
    Fixed-window counter kept in the Django cache.

    Args:
        max_requests: Requests allowed per window
        window_seconds: Length of the window
        prefix: Cache key namespace
        clock: Time source returning epoch seconds
    """

    def __init__(self, max_requests: int, window_seconds: int, prefix: str = 'ratelimit', clock=time.time, backend=None):
        if max_requests < 1:
            raise ValueError("max_requests must be at least 1")
        if window_seconds < 1:
            raise ValueError("window_seconds must be at least 1")
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.prefix = prefix
        self.clock = clock
        self.cache = backend or cache

    def _window(self):
        now = int(self.clock())
        start = now - (now % self.window_seconds)
        return start, start + self.window_seconds - now

    def check(self, key: str) -> RateLimitResult:
        window_start, remaining = self._window()
        cache_key = f"{self.prefix}:{key}:{window_start}"

        # add() is a no-op when the key exists, so the first request of a
        # window initializes the counter and later ones increment it.
        if self.cache.add(cache_key, 1, timeout=self.window_seconds):
            count = 1
        else:
            try:
                count = self.cache.incr(cache_key)
            except ValueError:
                # Expired between add() and incr()
                self.cache.set(cache_key, 1, timeout=self.window_seconds)
                count = 1

        if count > self.max_requests:
            retry_after = max(remaining, 1)
            logger.warning(f"Rate limit exceeded for {key} ({count}/{self.max_requests}), retry in {retry_after}s")
            return RateLimitResult(limited=True, retry_after=retry_after)
        return RateLimitResult(limited=False)


def get_message_rate_limiter() -> RateLimiter:
    """Build the limiter for sending messages from settings.MESSAGE_RATE_LIMIT."""
    config = getattr(settings, 'MESSAGE_RATE_LIMIT', {})
    if not config.get('ENABLED', True):
        return NullRateLimiter()
    return CacheRateLimiter(
        max_requests=config.get('MAX_REQUESTS', 30),
        window_seconds=config.get('WINDOW_SECONDS', 60),
        prefix='ratelimit:messages',
    )
