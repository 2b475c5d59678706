"""
AI Response Caching

TTL-bounded key -> value store for generated hints and questions.
Keys are md5 digests of the request fields that make two requests different.
"""

import time
import json
import hashlib
import logging
from typing import Any, Callable, Dict, Optional
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


@dataclass
class CachedResponse:
    """Cached response entry."""
    key: str
    value: Any
    created_at: float
    hit_count: int = 0
    metadata: Dict = field(default_factory=dict)


class ResponseCache:
    """
    Exact-key cache for AI output.

    Expired entries are dropped on lookup. When a new key would push the
    cache past max_size, the oldest entry is evicted first.
    """

    def __init__(
        self,
        ttl_hours: float = 24,
        max_size: Optional[int] = None,
        name: str = "cache",
        clock: Callable[[], float] = time.time,
    ):
        """
        Args:
            ttl_hours: Time-to-live for cache entries (hours)
            max_size: Maximum number of entries (None = only TTL-pruned)
            name: Label used in log lines
            clock: Seconds since epoch, injectable for tests
        """
        self.ttl_seconds = ttl_hours * 3600
        self.max_size = max_size
        self.name = name
        self._clock = clock

        # key -> CachedResponse, insertion ordered
        self.cache: Dict[str, CachedResponse] = {}

    def _is_expired(self, entry: CachedResponse, now: float) -> bool:
        return now - entry.created_at > self.ttl_seconds

    def _cleanup_expired(self):
        """Remove expired cache entries."""
        now = self._clock()
        expired_keys = [key for key, entry in self.cache.items() if self._is_expired(entry, now)]
        for key in expired_keys:
            del self.cache[key]

    def _evict_oldest(self):
        oldest_key = min(self.cache.keys(), key=lambda k: self.cache[k].created_at)
        del self.cache[oldest_key]
        logger.debug(f"[ResponseCache:{self.name}] Evicted oldest entry")

    def get(self, key: str) -> Optional[Any]:
        """
        Get cached value.

        Returns:
            Cached value, or None when missing or expired (expired entries are deleted)
        """
        entry = self.cache.get(key)
        if entry is None:
            return None

        if self._is_expired(entry, self._clock()):
            del self.cache[key]
            return None

        entry.hit_count += 1
        return entry.value

    def put(self, key: str, value: Any, metadata: Optional[Dict] = None):
        """Cache a value, evicting the oldest entry if the cache is full."""
        self._cleanup_expired()

        if self.max_size is not None and key not in self.cache:
            while self.cache and len(self.cache) >= self.max_size:
                self._evict_oldest()

        self.cache[key] = CachedResponse(
            key=key,
            value=value,
            created_at=self._clock(),
            metadata=metadata or {},
        )

    def get_stats(self) -> Dict:
        """Get cache statistics."""
        total_hits = sum(entry.hit_count for entry in self.cache.values())
        return {
            "size": len(self.cache),
            "max_size": self.max_size,
            "total_hits": total_hits,
            "ttl_seconds": self.ttl_seconds,
        }

    def clear(self):
        """Clear all cache entries."""
        self.cache.clear()

    def __len__(self) -> int:
        return len(self.cache)


def _digest(fields: Dict[str, Any]) -> str:
    payload = json.dumps(fields, sort_keys=True, default=str)
    return hashlib.md5(payload.encode()).hexdigest()


def hint_cache_key(topic: str, representation_type: str, question_text: str) -> str:
    """Key for hints: topic, representation and the first 100 characters of the question."""
    return _digest({
        "topic": topic,
        "representation": representation_type,
        "question": question_text[:100],
    })


def question_cache_key(topic: str, difficulty_level: int, cognitive_domain: str, token: Optional[str] = None) -> str:
    """
    Key for generated questions.

    A unique token (e.g. a timestamp) makes the key near-unique, which in
    practice disables reuse. Pass token=None for a stable key.
    """
    return _digest({
        "topic": topic,
        "difficulty": difficulty_level,
        "domain": cognitive_domain,
        "token": token,
    })
