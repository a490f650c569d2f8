"""
VIEW CACHE

In-memory memoization for derived views.

Keys include the snapshot generation, so an entry can never go stale:
a new snapshot simply produces new keys. Size is capped with LRU eviction.
"""

import logging
import threading
from collections import OrderedDict
from typing import Any, Callable, Dict, Hashable

logger = logging.getLogger(__name__)


class ViewCache:
    """
    Thread-safe LRU cache for ranked sequences and projections.

    Features:
    - Size limit with LRU eviction
    - Hit/miss/eviction stats
    """

    def __init__(self, config: Dict = None):
        """
        Initialize cache.

        Args:
            config: Cache configuration dict ('max_size')
        """
        self.config = config or {}
        self.max_size = self.config.get('max_size', 64)

        self._cache: "OrderedDict[Hashable, Any]" = OrderedDict()
        self._lock = threading.Lock()

        # Stats
        self.hits = 0
        self.misses = 0
        self.evictions = 0

    def get_or_compute(self, key: Hashable, compute: Callable[[], Any]) -> Any:
        """Return the cached value for key, computing and storing it on a miss."""
        with self._lock:
            if key in self._cache:
                self._cache.move_to_end(key)
                self.hits += 1
                return self._cache[key]
            self.misses += 1

        value = compute()
        self.set(key, value)
        return value

    def set(self, key: Hashable, value: Any):
        with self._lock:
            self._cache[key] = value
            self._cache.move_to_end(key)
            while len(self._cache) > self.max_size:
                evicted, _ = self._cache.popitem(last=False)
                self.evictions += 1
                logger.debug(f"[CACHE] Evicted {evicted}")

    def clear(self):
        """Clear all cache entries."""
        with self._lock:
            self._cache.clear()
            self.hits = 0
            self.misses = 0
            self.evictions = 0

    def __len__(self):
        with self._lock:
            return len(self._cache)

    def get_stats(self) -> Dict:
        """
        Get cache statistics.

        Returns:
            Dict with cache stats
        """
        with self._lock:
            total_requests = self.hits + self.misses
            hit_rate = (self.hits / total_requests * 100) if total_requests > 0 else 0

            return {
                'size': len(self._cache),
                'max_size': self.max_size,
                'hits': self.hits,
                'misses': self.misses,
                'hit_rate_pct': hit_rate,
                'evictions': self.evictions,
            }
