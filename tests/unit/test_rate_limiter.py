"""
Unit Tests for Rate Limiter

Uses a fake clock to move through minute and day windows.
"""

import pytest
import sys
import os
from datetime import datetime, timezone

# Add project root to path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), "../.."))
sys.path.insert(0, os.path.join(project_root, "adaptive_geometry_tutor", "src"))

from adaptive_geometry_tutor.rate_limiter import RateLimiter


class FakeClock:
    def __init__(self, start: float):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


DAY = 24 * 3600


class TestRateLimiter:
    """Test suite for RateLimiter."""

    @pytest.fixture
    def clock(self):
        return FakeClock(datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc).timestamp())

    def test_allows_until_per_minute_cap(self, clock):
        limiter = RateLimiter(daily_limit=100, per_minute_limit=3, clock=clock)

        for _ in range(3):
            assert limiter.check().allowed
            limiter.record()

        decision = limiter.check()
        assert decision.allowed is False
        assert decision.limit == "per_minute"
        assert decision.reason == "Per-minute limit reached (3/3)"

    def test_minute_window_slides(self, clock):
        limiter = RateLimiter(daily_limit=100, per_minute_limit=2, clock=clock)
        limiter.record()
        clock.advance(30)
        limiter.record()
        assert not limiter.check().allowed

        clock.advance(31)  # first request now older than 60s
        assert limiter.check().allowed

    def test_daily_cap(self, clock):
        limiter = RateLimiter(daily_limit=2, per_minute_limit=100, clock=clock)
        limiter.record()
        limiter.record()

        decision = limiter.check()
        assert decision.allowed is False
        assert decision.limit == "daily"
        assert "Daily limit reached (2/2)" == decision.reason

    def test_daily_cap_resets_next_day(self, clock):
        limiter = RateLimiter(daily_limit=1, per_minute_limit=100, clock=clock)
        limiter.record()
        assert not limiter.check().allowed

        clock.advance(DAY)
        assert limiter.check().allowed

    def test_check_does_not_count(self, clock):
        limiter = RateLimiter(daily_limit=1, per_minute_limit=1, clock=clock)
        for _ in range(5):
            assert limiter.check().allowed

    def test_keeps_only_seven_daily_buckets(self, clock):
        limiter = RateLimiter(daily_limit=100, per_minute_limit=100, clock=clock)
        for _ in range(10):
            limiter.record()
            clock.advance(DAY)

        assert len(limiter.daily) == 7
        assert "2024-03-01" not in limiter.daily
        assert "2024-03-10" in limiter.daily

    def test_never_exceeds_cap_in_any_minute(self, clock):
        limiter = RateLimiter(daily_limit=1000, per_minute_limit=5, clock=clock)
        accepted = []
        for _ in range(200):
            if limiter.check().allowed:
                limiter.record()
                accepted.append(clock.now)
            clock.advance(1.5)

        for start in accepted:
            in_window = [ts for ts in accepted if start <= ts < start + 60]
            assert len(in_window) <= 5

    def test_status(self, clock):
        limiter = RateLimiter(daily_limit=10, per_minute_limit=4, clock=clock)
        limiter.record()

        status = limiter.status()

        assert status["daily"] == {"used": 1, "limit": 10, "remaining": 9}
        assert status["per_minute"] == {"used": 1, "limit": 4, "remaining": 3}


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
