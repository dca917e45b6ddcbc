"""Fixed-capacity LRU read cache for ORM rows keyed by primary key.

The cache is an explicit object owned by whoever performs the lookups; there
is no global map keyed by connection. Entries are evicted by capacity or
dropped through ``invalidate``/``clear``; nothing else keeps them fresh, so a
row updated outside the owning service may be served stale until evicted.
"""
from __future__ import annotations

from collections import OrderedDict
from typing import Generic, Hashable, TypeVar

T = TypeVar("T")


class ModelCache(Generic[T]):
    def __init__(self, max_size: int = 500) -> None:
        self.max_size = max_size
        self._cache: OrderedDict[Hashable, T] = OrderedDict()

    @property
    def enabled(self) -> bool:
        return self.max_size > 0

    def get(self, key: Hashable) -> T | None:
        if key not in self._cache:
            return None
        # mark as most recently used
        self._cache.move_to_end(key)
        return self._cache[key]

    def put(self, key: Hashable, value: T) -> None:
        if not self.enabled:
            return
        if key in self._cache:
            del self._cache[key]
        self._cache[key] = value
        if len(self._cache) > self.max_size:
            self._cache.popitem(last=False)

    def invalidate(self, key: Hashable) -> bool:
        if key in self._cache:
            del self._cache[key]
            return True
        return False

    def clear(self) -> None:
        self._cache.clear()

    def __contains__(self, key: object) -> bool:
        return key in self._cache

    def __len__(self) -> int:
        return len(self._cache)
