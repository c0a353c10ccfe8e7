"""
Tests for fixed-window rate limiting
"""

from oauth.rate_limiter import RateLimiter


class FakeClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now


class TestRateLimiter:
    def test_allows_up_to_limit_then_blocks(self):
        limiter = RateLimiter(3, 60.0, clock=FakeClock())

        results = [limiter.hit("client") for _ in range(4)]

        assert [r.allowed for r in results] == [True, True, True, False]
        assert [r.remaining for r in results] == [2, 1, 0, 0]

    def test_window_resets(self):
        clock = FakeClock()
        limiter = RateLimiter(1, 60.0, clock=clock)

        assert limiter.hit("client").allowed
        assert not limiter.hit("client").allowed
        clock.now += 60.0
        assert limiter.hit("client").allowed

    def test_clients_are_counted_separately(self):
        limiter = RateLimiter(1, 60.0, clock=FakeClock())

        assert limiter.hit("a").allowed
        assert limiter.hit("b").allowed
        assert not limiter.hit("a").allowed

    def test_reset_after_counts_down(self):
        clock = FakeClock()
        limiter = RateLimiter(5, 60.0, clock=clock)

        limiter.hit("client")
        clock.now += 15.0
        assert limiter.hit("client").reset_after == 45.0
