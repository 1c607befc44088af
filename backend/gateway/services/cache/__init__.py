"""Cache service module."""

from .service import CacheEntry, CacheService, InMemoryTTLCache

__all__ = [
    "CacheEntry",
    "CacheService",
    "InMemoryTTLCache",
]
