"""
Process-lifetime cache for documents fetched from the eCFR repository.

Entries are keyed by the full request URI. Nothing expires; memory is only
bounded when an eviction policy other than ``NeverEvict`` is plugged in.
"""

import threading
from collections import OrderedDict
from typing import Any, Dict, Hashable, List, Optional
import structlog

logger = structlog.get_logger(__name__)

MISSING = object()


class EvictionPolicy:
    """Decides which cache keys to drop. Subclasses override the hooks they need."""

    def record_access(self, key: Hashable) -> None:
        pass

    def record_insert(self, key: Hashable) -> List[Hashable]:
        """Register a newly stored key and return the keys to evict."""
        return []

    def forget(self, key: Hashable) -> None:
        pass

    def clear(self) -> None:
        pass


class NeverEvict(EvictionPolicy):
    """Keep every entry for the life of the process."""


class LRUEviction(EvictionPolicy):
    """Evict the least recently used entries beyond ``max_entries``."""

    def __init__(self, max_entries: int):
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.max_entries = max_entries
        self._order: "OrderedDict[Hashable, None]" = OrderedDict()

    def record_access(self, key: Hashable) -> None:
        if key in self._order:
            self._order.move_to_end(key)

    def record_insert(self, key: Hashable) -> List[Hashable]:
        self._order[key] = None
        self._order.move_to_end(key)
        victims = []
        while len(self._order) > self.max_entries:
            victim, _ = self._order.popitem(last=False)
            victims.append(victim)
        return victims

    def forget(self, key: Hashable) -> None:
        self._order.pop(key, None)

    def clear(self) -> None:
        self._order.clear()


class DocumentCache:
    """Thread-safe in-memory cache for fetched payloads."""

    def __init__(self, eviction_policy: Optional[EvictionPolicy] = None):
        self.eviction_policy = eviction_policy or NeverEvict()
        self._entries: Dict[Hashable, Any] = {}
        self._lock = threading.RLock()
        self.hits = 0
        self.misses = 0
        self.evictions = 0

    @classmethod
    def from_max_entries(cls, max_entries: Optional[int]) -> "DocumentCache":
        """Build a cache that never evicts, or an LRU cache when a bound is given."""
        if max_entries is None:
            return cls(NeverEvict())
        return cls(LRUEviction(max_entries))

    def get(self, key: Hashable, default: Any = None) -> Any:
        """Return the stored payload, or ``default`` on a miss."""
        with self._lock:
            if key in self._entries:
                self.hits += 1
                self.eviction_policy.record_access(key)
                return self._entries[key]
            self.misses += 1
            return default

    def set(self, key: Hashable, value: Any) -> None:
        """Store a payload, replacing any previous one."""
        with self._lock:
            self._entries[key] = value
            for victim in self.eviction_policy.record_insert(key):
                if victim != key and self._entries.pop(victim, MISSING) is not MISSING:
                    self.evictions += 1
                    logger.debug("Evicted cache entry", key=victim)

    def delete(self, key: Hashable) -> bool:
        with self._lock:
            self.eviction_policy.forget(key)
            return self._entries.pop(key, MISSING) is not MISSING

    def clear(self) -> int:
        """Drop every entry and return how many were removed."""
        with self._lock:
            removed = len(self._entries)
            self._entries.clear()
            self.eviction_policy.clear()
        if removed:
            logger.info(f"Cleared {removed} cache entries")
        return removed

    def __contains__(self, key: Hashable) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def get_cache_stats(self) -> Dict[str, Any]:
        """Get cache statistics."""
        with self._lock:
            return {
                "total_keys": len(self._entries),
                "hits": self.hits,
                "misses": self.misses,
                "evictions": self.evictions,
                "policy": type(self.eviction_policy).__name__,
            }
