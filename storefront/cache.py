"""
Process-local entity caches

One bucket per entity type. Keys inside a bucket carry a prefix naming the
lookup they serve (``id:``, ``email:``, ``sku:``, ``number:``), so a
single bucket holds every cached view of that entity. Reads go through
``@cached``; writes go through ``CacheManager.refresh`` or
``CacheManager.evict`` so the key bookkeeping lives in one place.

Buckets are bounded and expire entries a fixed time after they were
written. Nothing is shared between processes.
"""
import functools
import logging
import threading
from typing import Any, Callable, Dict, Iterable, Mapping, Optional

from cachetools import TTLCache

from storefront.config import settings

logger = logging.getLogger(__name__)

USERS_CACHE = "users"
PRODUCTS_CACHE = "products"
CATEGORIES_CACHE = "categories"
ORDERS_CACHE = "orders"
ADDRESSES_CACHE = "addresses"
REVIEWS_CACHE = "reviews"

ENTITY_CACHES = (
    USERS_CACHE,
    PRODUCTS_CACHE,
    CATEGORIES_CACHE,
    ORDERS_CACHE,
    ADDRESSES_CACHE,
    REVIEWS_CACHE,
)

_MISSING = object()


class EntityCache:
    """A bounded TTL bucket guarded by a lock"""

    def __init__(self, name: str, maxsize: int, ttl: float):
        self.name = name
        self._data = TTLCache(maxsize=maxsize, ttl=ttl)
        self._lock = threading.RLock()
        self.hits = 0
        self.misses = 0

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            value = self._data.get(key, _MISSING)
            if value is _MISSING:
                self.misses += 1
                return default
            self.hits += 1
            return value

    def put(self, key: str, value: Any) -> None:
        with self._lock:
            self._data[key] = value

    def evict(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._data.clear()

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._data

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

    def stats(self) -> Dict[str, int]:
        with self._lock:
            return {"size": len(self._data), "hits": self.hits, "misses": self.misses}


class CacheManager:
    """Owns every entity bucket and the write-side invalidation rules"""

    def __init__(self, names: Iterable[str], maxsize: int, ttl: float):
        self._caches = {name: EntityCache(name, maxsize, ttl) for name in names}

    def get_cache(self, name: str) -> EntityCache:
        try:
            return self._caches[name]
        except KeyError:
            raise KeyError(f"Unknown cache: {name}") from None

    def refresh(
        self,
        name: str,
        value: Any,
        keys: Iterable[str],
        stale_keys: Iterable[str] = (),
        also_clear: Iterable[str] = (),
    ) -> None:
        """
        Record a written entity

        Clears the bucket (list and search entries have no fine-grained
        keys), evicts ``stale_keys`` such as a previous ``sku:`` value,
        then stores ``value`` under every key in ``keys``. Buckets named in
        ``also_clear`` hold other entities whose responses embed data from
        this write and are cleared too.
        """
        keys = list(keys)
        cache = self.get_cache(name)
        cache.clear()
        for key in stale_keys:
            cache.evict(key)
        for key in keys:
            cache.put(key, value)
        for other in also_clear:
            self.get_cache(other).clear()
        logger.debug(f"Cache {name} refreshed for keys {keys}")

    def evict(self, name: str, keys: Iterable[str], also_clear: Iterable[str] = ()) -> None:
        """Forget a deleted entity and every list entry of its bucket"""
        keys = list(keys)
        cache = self.get_cache(name)
        for key in keys:
            cache.evict(key)
        cache.clear()
        for other in also_clear:
            self.get_cache(other).clear()
        logger.debug(f"Cache {name} evicted keys {keys}")

    def clear(self, *names: str) -> None:
        for name in names:
            self.get_cache(name).clear()

    def clear_all(self) -> None:
        for cache in self._caches.values():
            cache.clear()

    def stats(self) -> Mapping[str, Dict[str, int]]:
        return {name: cache.stats() for name, cache in self._caches.items()}


caches = CacheManager(ENTITY_CACHES, maxsize=settings.cache_max_size, ttl=settings.cache_ttl_seconds)


def cached(cache_name: str, key: Callable[..., str], manager: Optional[CacheManager] = None):
    """
    Read-through caching for single-entity lookups

    ``key`` receives the wrapped function's arguments and returns the
    prefixed cache key. Exceptions are not cached.
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            cache = (manager or caches).get_cache(cache_name)
            cache_key = key(*args, **kwargs)
            value = cache.get(cache_key, _MISSING)
            if value is not _MISSING:
                return value
            value = func(*args, **kwargs)
            cache.put(cache_key, value)
            return value
        return wrapper
    return decorator
