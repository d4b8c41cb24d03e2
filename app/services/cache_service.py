"""Simple cache service for style analysis results and generated images."""
import hashlib
from datetime import datetime, timedelta
from typing import Optional, Dict, Any


class CacheService:
    """Simple in-memory cache keyed by thumbnail URL or video identifier.

    When ``max_items`` is set, adding an item to a full cache first drops
    expired items and then the oldest ones.
    """

    def __init__(self, default_ttl_hours: int = 24, namespace: str = "style",
                 max_items: Optional[int] = None):
        self._cache: Dict[str, Dict[str, Any]] = {}
        self.default_ttl_hours = default_ttl_hours
        self.namespace = namespace
        self.max_items = max_items

    def _make_key(self, url: str) -> str:
        """Generate cache key from URL."""
        return f"{self.namespace}:{hashlib.md5(url.encode()).hexdigest()}"

    def get(self, url: str) -> Optional[Any]:
        """Get cached data."""
        key = self._make_key(url)

        if key not in self._cache:
            return None

        item = self._cache[key]

        # Check if expired
        if datetime.now() > item['expires_at']:
            del self._cache[key]
            return None

        return item['data']

    def set(self, url: str, data: Any, ttl_hours: Optional[int] = None) -> None:
        """Cache data."""
        key = self._make_key(url)
        ttl = ttl_hours or self.default_ttl_hours

        self._cache.pop(key, None)
        if self.max_items is not None:
            self._evict(self.max_items - 1)

        self._cache[key] = {
            'data': data,
            'expires_at': datetime.now() + timedelta(hours=ttl),
            'created_at': datetime.now()
        }

    def _evict(self, limit: int) -> None:
        """Drop expired items, then the oldest, until at most ``limit`` remain."""
        now = datetime.now()
        for key in [k for k, item in self._cache.items() if now > item['expires_at']]:
            del self._cache[key]

        # Dicts keep insertion order and set() re-inserts, so the first key is the oldest
        while len(self._cache) > max(limit, 0):
            del self._cache[next(iter(self._cache))]

    def exists(self, url: str) -> bool:
        """Check if URL is cached."""
        return self.get(url) is not None

    def clear(self) -> None:
        """Clear all cache."""
        self._cache.clear()

    def get_stats(self) -> Dict[str, Any]:
        """Get cache stats."""
        return {
            "total_items": len(self._cache),
            "namespace": self.namespace
        }
