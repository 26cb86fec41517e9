"""Read-through TTL cache for computed views."""

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class CacheKey:
    """Typed cache key: a namespace plus a scope such as a sorted account-id tuple."""

    namespace: str
    scope: tuple = ()


class TTLCache:
    """
    Key -> (value, inserted_at) store with a fixed time-to-live.

    Entries older than the TTL are treated as missing. Each instance is
    independent, so separate services or tests never share state.
    """

    def __init__(
        self,
        ttl_seconds: float = 3600,
        clock: Optional[Callable[[], float]] = None,
    ):
        self._ttl = ttl_seconds
        self._clock = clock or time.monotonic
        self._entries: dict[CacheKey, tuple[Any, float]] = {}

    def get(self, key: CacheKey) -> Optional[Any]:
        """Return the cached value, or None if absent or expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, inserted_at = entry
        if self._clock() - inserted_at >= self._ttl:
            del self._entries[key]
            return None
        return value

    def set(self, key: CacheKey, value: Any) -> None:
        self._entries[key] = (value, self._clock())

    def get_or_compute(self, key: CacheKey, compute: Callable[[], T]) -> T:
        """Return the cached value for key, computing and storing it on a miss."""
        cached = self.get(key)
        if cached is not None:
            return cached
        value = compute()
        self.set(key, value)
        return value

    def invalidate(self, key: CacheKey) -> None:
        self._entries.pop(key, None)

    def invalidate_namespace(self, namespace: str) -> None:
        for key in [k for k in self._entries if k.namespace == namespace]:
            del self._entries[key]

    def clear(self) -> None:
        logger.debug(f"Clearing {len(self._entries)} cache entries")
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
