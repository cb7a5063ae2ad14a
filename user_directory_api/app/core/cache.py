"""
Process‑local response cache.

``ResponseCache`` maps a lookup key to the last value computed for it.
There is no TTL and no size bound; entries live until they are evicted
or the process exits.  All access goes through a single lock so the
cache can be shared by the worker threads that serve requests.

``CacheManager`` hands out named caches, mirroring the ``users`` and
``posts`` regions configured for the application.
"""

import logging
import threading
from typing import Any, Dict, Hashable, Iterable, List, Optional


logger = logging.getLogger(__name__)


class ResponseCache:
    """A named, thread‑safe key→value cache."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._entries: Dict[Hashable, Any] = {}
        self._lock = threading.Lock()

    def get(self, key: Hashable) -> Optional[Any]:
        """Return the cached value for ``key`` or ``None`` on a miss."""
        with self._lock:
            return self._entries.get(key)

    def put(self, key: Hashable, value: Any) -> None:
        with self._lock:
            self._entries[key] = value

    def evict(self, key: Hashable) -> bool:
        """Drop ``key`` from the cache.  Returns ``True`` if an entry was removed."""
        with self._lock:
            removed = self._entries.pop(key, None) is not None
        if removed:
            logger.debug("Evicted %r from cache %s", key, self.name)
        return removed

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __contains__(self, key: Hashable) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class CacheManager:
    """Registry of named caches."""

    def __init__(self, names: Iterable[str] = ("users", "posts")) -> None:
        self._lock = threading.Lock()
        self._caches: Dict[str, ResponseCache] = {name: ResponseCache(name) for name in names}

    def get_cache(self, name: str) -> ResponseCache:
        """Return the cache called ``name``, creating it on first use."""
        with self._lock:
            cache = self._caches.get(name)
            if cache is None:
                cache = ResponseCache(name)
                self._caches[name] = cache
            return cache

    @property
    def cache_names(self) -> List[str]:
        with self._lock:
            return sorted(self._caches)

    def clear_all(self) -> None:
        with self._lock:
            caches = list(self._caches.values())
        for cache in caches:
            cache.clear()
