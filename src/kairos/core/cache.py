from __future__ import annotations

import functools
import time
from collections import OrderedDict
from dataclasses import dataclass
from threading import RLock
from typing import Any, Callable, Generic, Hashable, Optional, Tuple, TypeVar

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

MISSING: Any = object()


@dataclass(frozen=True)
class CacheStats:
    size: int
    max_size: int
    hits: int
    misses: int

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total else 0.0


class LRUCache(Generic[K, V]):
    """
    Fixed-capacity mapping with least-recently-used eviction.

    Reads through get() count as a hit or a miss and refresh recency on a hit.
    With ttl (seconds) set, an entry older than ttl is dropped on read and
    reported as a miss.
    """

    def __init__(
        self,
        max_size: int = 1000,
        *,
        ttl: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        if max_size < 1:
            raise ValueError(f"max_size must be >= 1, got {max_size}")
        if ttl is not None and ttl <= 0:
            raise ValueError(f"ttl must be positive, got {ttl}")
        self.max_size = max_size
        self.ttl = ttl
        self._clock = clock
        self._data: "OrderedDict[K, Tuple[V, float]]" = OrderedDict()
        self._lock = RLock()
        self.hits = 0
        self.misses = 0

    def _expired(self, stamp: float) -> bool:
        return self.ttl is not None and (self._clock() - stamp) > self.ttl

    def get(self, key: K, default: Any = None) -> Any:
        with self._lock:
            entry = self._data.get(key, MISSING)
            if entry is MISSING:
                self.misses += 1
                return default
            value, stamp = entry
            if self._expired(stamp):
                del self._data[key]
                self.misses += 1
                return default
            self._data.move_to_end(key)
            self.hits += 1
            return value

    def set(self, key: K, value: V) -> None:
        with self._lock:
            if key in self._data:
                self._data.move_to_end(key)
            elif len(self._data) >= self.max_size:
                self._data.popitem(last=False)
            self._data[key] = (value, self._clock())

    def has(self, key: K) -> bool:
        """Membership test; does not touch recency or statistics."""
        with self._lock:
            entry = self._data.get(key, MISSING)
            return entry is not MISSING and not self._expired(entry[1])

    def delete(self, key: K) -> bool:
        with self._lock:
            return self._data.pop(key, MISSING) is not MISSING

    def clear(self) -> None:
        with self._lock:
            self._data.clear()
            self.hits = 0
            self.misses = 0

    def size(self) -> int:
        return len(self._data)

    def keys(self) -> list:
        """Keys from least to most recently used."""
        with self._lock:
            return list(self._data.keys())

    def get_stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(
                size=len(self._data),
                max_size=self.max_size,
                hits=self.hits,
                misses=self.misses,
            )

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, key: object) -> bool:
        return self.has(key)  # type: ignore[arg-type]

    def __repr__(self) -> str:
        return f"LRUCache(size={len(self._data)}, max_size={self.max_size}, ttl={self.ttl})"


def _default_key(*args: Any, **kwargs: Any) -> Hashable:
    if kwargs:
        return args + (MISSING,) + tuple(sorted(kwargs.items()))
    return args


def memoize(
    fn: Optional[Callable[..., V]] = None,
    *,
    key: Optional[Callable[..., Hashable]] = None,
    max_size: int = 1000,
    ttl: Optional[float] = None,
    clock: Callable[[], float] = time.monotonic,
):
    """
    Cache a function's results in an LRUCache.

    Usable bare (@memoize) or with options (@memoize(max_size=64, ttl=30)).
    key builds the cache key from the call arguments; the default keys on the
    positional and keyword arguments themselves. The wrapper exposes the
    backing cache as .cache and a cache_clear() shortcut.
    """

    def decorate(func: Callable[..., V]) -> Callable[..., V]:
        cache: LRUCache[Hashable, V] = LRUCache(max_size, ttl=ttl, clock=clock)
        make_key = key or _default_key

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> V:
            k = make_key(*args, **kwargs)
            value = cache.get(k, MISSING)
            if value is MISSING:
                value = func(*args, **kwargs)
                cache.set(k, value)
            return value

        wrapper.cache = cache  # type: ignore[attr-defined]
        wrapper.cache_clear = cache.clear  # type: ignore[attr-defined]
        return wrapper

    if fn is not None:
        return decorate(fn)
    return decorate
