"""Cache service implementation.

This module provides an abstract cache service interface and a concrete
in-memory implementation used to hold place details responses for the
lifetime of the process.

Semantics:
- Entries expire ``ttl_seconds`` after they are written. Expired entries are
  invisible to readers and are removed by the read that finds them.
- The cache holds at most ``max_entries`` items. Going over the cap evicts the
  oldest-inserted surviving entry (insertion order, not access order).

Operations are synchronous, so on a single event loop each ``get``/``put`` runs
to completion without interleaving with sibling tasks. Guard the instance with
a ``threading.Lock`` before sharing it across OS threads.
"""

import logging
import time
from abc import ABC, abstractmethod
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional

from gateway.models import normalize_place_id

logger = logging.getLogger(__name__)


@dataclass
class CacheEntry:
    """A cached payload and the monotonic time at which it stops being valid."""

    payload: Any
    expires_at: float


class CacheService(ABC):
    """Abstract base class for cache services.

    Defines the interface for get/put and exposes a static method for
    building consistent place details cache keys.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        """Retrieve cached value by key.

        Args:
            key: The cache key to look up.

        Returns:
            The cached value if present and unexpired, None otherwise.
        """

    @abstractmethod
    def put(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> None:
        """Store value in cache, replacing any existing entry for ``key``.

        Args:
            key: The cache key to store under.
            value: The value to cache.
            ttl_seconds: Time-to-live in seconds. Uses the default if not specified.
        """

    @abstractmethod
    def clear(self) -> None:
        """Drop every entry."""

    @abstractmethod
    def __len__(self) -> int:
        pass

    @staticmethod
    def build_details_key(place_id: str, fields: Iterable[str]) -> str:
        """Generate cache key for a place details lookup.

        The place id is reduced to its raw form and the field list is sorted
        and de-duplicated, so equivalent lookups share one key.
        The key format is: ``details:{raw_place_id}:{field,field,...}``

        Args:
            place_id: Raw (``ChIJ...``) or prefixed (``places/ChIJ...``) place id.
            fields: Requested field mask, in any order.

        Returns:
            A formatted cache key string.

        Example:
            >>> CacheService.build_details_key("places/ChIJabc", ["rating", "id"])
            'details:ChIJabc:id,rating'
        """
        field_list = ",".join(sorted(set(fields)))
        return f"details:{normalize_place_id(place_id)}:{field_list}"


class InMemoryTTLCache(CacheService):
    """Bounded, TTL-aware in-memory cache with insertion-order eviction."""

    def __init__(
        self,
        max_entries: int = 5000,
        default_ttl: int = 3600,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._max_entries = max_entries
        self._default_ttl = default_ttl
        self._clock = clock

    def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() >= entry.expires_at:
            del self._entries[key]
            logger.debug(f"[CACHE] Expired {key}")
            return None
        return entry.payload

    def put(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> None:
        ttl = ttl_seconds if ttl_seconds is not None else self._default_ttl
        # Assigning an existing key keeps its original insertion slot
        self._entries[key] = CacheEntry(payload=value, expires_at=self._clock() + ttl)
        while len(self._entries) > self._max_entries:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug(f"[CACHE] Evicted {evicted} (capacity {self._max_entries})")

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        # Raw membership; does not look at expiry
        return key in self._entries

    @property
    def max_entries(self) -> int:
        return self._max_entries

    @property
    def default_ttl(self) -> int:
        """Get the default TTL in seconds."""
        return self._default_ttl
