import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Optional, Tuple

from loguru import logger


@dataclass(frozen=True)
class CacheStats:
    hits: int
    misses: int
    evictions: int
    size: int


class InMemoryCache:
    """TTL-bounded, size-bounded key/value store.

    Entries expire ``ttl_seconds`` after they were written. When the store is
    full the least recently used entry is evicted. Values are returned as
    stored, so a hit hands back the same object that was put in.
    """

    def __init__(
        self,
        ttl_seconds: float,
        max_size: int = 1000,
        name: str = "cache",
        clock: Callable[[], float] = time.monotonic,
    ):
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        self.ttl_seconds = ttl_seconds
        self.max_size = max_size
        self.name = name
        self._clock = clock
        self._store: "OrderedDict[str, Tuple[float, Any]]" = OrderedDict()
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                self._misses += 1
                return None
            expires_at, value = entry
            if self._clock() >= expires_at:
                del self._store[key]
                self._misses += 1
                return None
            self._store.move_to_end(key)
            self._hits += 1
            return value

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._store[key] = (self._clock() + self.ttl_seconds, value)
            self._store.move_to_end(key)
            while len(self._store) > self.max_size:
                evicted, _ = self._store.popitem(last=False)
                self._evictions += 1
                logger.debug(f"[cache] {self.name}: evicted {evicted!r}")

    def clear(self) -> None:
        with self._lock:
            self._store.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)

    def stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(
                hits=self._hits,
                misses=self._misses,
                evictions=self._evictions,
                size=len(self._store),
            )

    def log_stats(self, prefix: str) -> None:
        stats = self.stats()
        logger.debug(
            f"[cache] {self.name}: {prefix} - hits: {stats.hits}, misses: {stats.misses}, "
            f"evictions: {stats.evictions}, size: {stats.size}"
        )
