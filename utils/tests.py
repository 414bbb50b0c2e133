from django.core.cache import cache
from django.test import SimpleTestCase, override_settings

from utils.rate_limiter import (
    CacheRateLimiter,
    NullRateLimiter,
    RateLimitResult,
    get_message_rate_limiter,
)


class FakeClock:
    def __init__(self, now=1_000_020):
        self.now = now

    def __call__(self):
        return self.now


class CacheRateLimiterTest(SimpleTestCase):
    def setUp(self):
        cache.clear()
        self.clock = FakeClock()
        self.limiter = CacheRateLimiter(max_requests=3, window_seconds=60, prefix='test', clock=self.clock)

    def test_allows_up_to_limit(self):
        results = [self.limiter.check("tenant-1") for _ in range(3)]
        self.assertTrue(all(result == RateLimitResult(limited=False) for result in results))

    def test_limits_after_max_requests(self):
        for _ in range(3):
            self.limiter.check("tenant-1")

        with self.assertLogs('utils.rate_limiter', level='WARNING'):
            result = self.limiter.check("tenant-1")

        self.assertTrue(result.limited)
        # 1_000_020 is the first second of its window
        self.assertEqual(result.retry_after, 60)

    def test_keys_are_independent(self):
        for _ in range(3):
            self.limiter.check("tenant-1")

        self.assertFalse(self.limiter.check("owner-1").limited)

    def test_new_window_resets_counter(self):
        for _ in range(4):
            self.limiter.check("tenant-1")

        self.clock.now += 60

        self.assertFalse(self.limiter.check("tenant-1").limited)

    def test_retry_after_is_at_least_one_second(self):
        self.clock.now = 1_000_019  # last second of its window
        limiter = CacheRateLimiter(max_requests=1, window_seconds=60, prefix='edge', clock=self.clock)
        limiter.check("tenant-1")

        with self.assertLogs('utils.rate_limiter', level='WARNING'):
            result = limiter.check("tenant-1")

        self.assertEqual(result.retry_after, 1)

    def test_invalid_configuration(self):
        with self.assertRaises(ValueError):
            CacheRateLimiter(max_requests=0, window_seconds=60)
        with self.assertRaises(ValueError):
            CacheRateLimiter(max_requests=1, window_seconds=0)


class MessageRateLimiterFactoryTest(SimpleTestCase):
    def test_null_limiter_never_limits(self):
        limiter = NullRateLimiter()
        self.assertFalse(any(limiter.check("tenant-1").limited for _ in range(100)))

    @override_settings(MESSAGE_RATE_LIMIT={'ENABLED': False})
    def test_disabled(self):
        self.assertIsInstance(get_message_rate_limiter(), NullRateLimiter)

    @override_settings(MESSAGE_RATE_LIMIT={'ENABLED': True, 'MAX_REQUESTS': 5, 'WINDOW_SECONDS': 10})
    def test_enabled(self):
        limiter = get_message_rate_limiter()

        self.assertIsInstance(limiter, CacheRateLimiter)
        self.assertEqual(limiter.max_requests, 5)
        self.assertEqual(limiter.window_seconds, 10)
