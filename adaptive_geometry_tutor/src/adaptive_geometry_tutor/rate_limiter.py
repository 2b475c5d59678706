"""
AI Request Rate Limiting

Two independent windows bound AI provider usage:
- a per-calendar-day counter (UTC), keeping the most recent 7 days
- a trailing 60-second list of request timestamps

check() and record() are separate on purpose: callers check before trying
the provider and record exactly once per attempted call (never on cache hits).
State is in-memory and process-local.
"""

import time
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

logger = logging.getLogger(__name__)


@dataclass
class RateLimitDecision:
    allowed: bool
    reason: Optional[str] = None
    limit: Optional[str] = None  # "daily" or "per_minute"


class RateLimiter:
    """Daily + per-minute request quota."""

    WINDOW_SECONDS = 60
    RETENTION_DAYS = 7

    def __init__(
        self,
        daily_limit: int,
        per_minute_limit: int,
        name: str = "ai",
        clock: Callable[[], float] = time.time,
    ):
        self.daily_limit = daily_limit
        self.per_minute_limit = per_minute_limit
        self.name = name
        self._clock = clock

        self.daily: Dict[str, int] = {}
        self.per_minute: List[float] = []

    def _today(self, now: float) -> str:
        return datetime.fromtimestamp(now, tz=timezone.utc).strftime("%Y-%m-%d")

    def _prune_minute_window(self, now: float):
        cutoff = now - self.WINDOW_SECONDS
        self.per_minute = [ts for ts in self.per_minute if ts > cutoff]

    def check(self) -> RateLimitDecision:
        """Whether one more AI request may be attempted right now."""
        now = self._clock()

        daily_count = self.daily.get(self._today(now), 0)
        if daily_count >= self.daily_limit:
            return RateLimitDecision(
                allowed=False,
                reason=f"Daily limit reached ({daily_count}/{self.daily_limit})",
                limit="daily",
            )

        self._prune_minute_window(now)
        if len(self.per_minute) >= self.per_minute_limit:
            return RateLimitDecision(
                allowed=False,
                reason=f"Per-minute limit reached ({len(self.per_minute)}/{self.per_minute_limit})",
                limit="per_minute",
            )

        return RateLimitDecision(allowed=True)

    def record(self):
        """Count one attempted AI request in both windows."""
        now = self._clock()
        today = self._today(now)
        self.daily[today] = self.daily.get(today, 0) + 1
        self.per_minute.append(now)

        # Keep only the most recent daily buckets
        if len(self.daily) > self.RETENTION_DAYS:
            for old_day in sorted(self.daily)[:-self.RETENTION_DAYS]:
                del self.daily[old_day]

        logger.debug(f"[RateLimiter:{self.name}] Recorded request ({self.daily[today]} today)")

    def status(self) -> Dict[str, Dict[str, int]]:
        """Current usage for monitoring."""
        now = self._clock()
        self._prune_minute_window(now)
        daily_used = self.daily.get(self._today(now), 0)
        minute_used = len(self.per_minute)
        return {
            "daily": {
                "used": daily_used,
                "limit": self.daily_limit,
                "remaining": max(0, self.daily_limit - daily_used),
            },
            "per_minute": {
                "used": minute_used,
                "limit": self.per_minute_limit,
                "remaining": max(0, self.per_minute_limit - minute_used),
            },
        }
