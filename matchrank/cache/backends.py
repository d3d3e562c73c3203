"""Cache storage backends.

Backends store opaque string values under string keys with a TTL. They
raise CacheUnavailableError when the backing store fails; deciding what a
failure means is left to the caller.
"""

import fnmatch
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol


class CacheBackend(Protocol):
    """Protocol for cache storage operations.

    Abstracts the storage layer to enable testing and alternative implementations.
    """

    def get(self, key: str) -> str | None:
        """Return the stored value, or None when absent or expired.

        Raises:
            CacheUnavailableError: If the backing store fails.
        """
        ...

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        """Store a value that expires after ttl_seconds.

        Raises:
            CacheUnavailableError: If the backing store fails.
        """
        ...

    def delete(self, key: str) -> None:
        """Remove a key if present.

        Raises:
            CacheUnavailableError: If the backing store fails.
        """
        ...

    def delete_pattern(self, pattern: str) -> int:
        """Remove every key matching a glob pattern.

        Returns:
            Number of keys removed.

        Raises:
            CacheUnavailableError: If the backing store fails.
        """
        ...


@dataclass
class _Entry:
    value: str
    expires_at: float


class InMemoryCacheBackend:
    """Process-local backend guarded by a lock.

    Concurrent writers to the same key race; the last writer wins.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        """Initialize the backend.

        Args:
            clock: Monotonic clock in seconds, injectable for tests.
        """
        self._clock = clock
        self._lock = threading.Lock()
        self._data: dict[str, _Entry] = {}

    def get(self, key: str) -> str | None:
        with self._lock:
            entry = self._data.get(key)
            if entry is None:
                return None
            if entry.expires_at <= self._clock():
                del self._data[key]
                return None
            return entry.value

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        if ttl_seconds <= 0:
            msg = f"ttl_seconds must be positive, got {ttl_seconds}"
            raise ValueError(msg)
        with self._lock:
            self._data[key] = _Entry(value=value, expires_at=self._clock() + ttl_seconds)

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def delete_pattern(self, pattern: str) -> int:
        with self._lock:
            matched = [k for k in self._data if fnmatch.fnmatchcase(k, pattern)]
            for key in matched:
                del self._data[key]
            return len(matched)

    def keys(self) -> list[str]:
        """Live keys, sorted. Intended for tests and debugging."""
        with self._lock:
            now = self._clock()
            return sorted(k for k, e in self._data.items() if e.expires_at > now)


@dataclass
class CacheMetrics:
    """Counters for ranking cache operations.

    Attributes:
        hits: Lookups served from the cache.
        misses: Lookups that had to compute.
        writes: Values stored.
        errors: Backend failures absorbed as misses.
        decode_errors: Stored values that could not be decoded.
        invalidations: Keys removed by invalidation.
        hits_by_namespace: Hits per key namespace (page, context).
    """

    hits: int = 0
    misses: int = 0
    writes: int = 0
    errors: int = 0
    decode_errors: int = 0
    invalidations: int = 0
    hits_by_namespace: dict[str, int] = field(default_factory=dict)

    def record_hit(self, namespace: str) -> None:
        self.hits += 1
        self.hits_by_namespace[namespace] = self.hits_by_namespace.get(namespace, 0) + 1

    def record_miss(self) -> None:
        self.misses += 1

    def record_write(self) -> None:
        self.writes += 1

    def record_error(self) -> None:
        self.errors += 1

    def record_decode_error(self) -> None:
        self.decode_errors += 1

    def record_invalidations(self, count: int) -> None:
        self.invalidations += count

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total else 0.0

    def to_dict(self) -> dict[str, object]:
        """Convert metrics to dictionary.

        Returns:
            Dictionary of metric name to value.
        """
        return {
            "hits": self.hits,
            "misses": self.misses,
            "writes": self.writes,
            "errors": self.errors,
            "decode_errors": self.decode_errors,
            "invalidations": self.invalidations,
            "hit_rate": self.hit_rate,
            "hits_by_namespace": dict(self.hits_by_namespace),
        }
