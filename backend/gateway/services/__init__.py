"""Places Gateway Services.

Service layer components:
- Cache: bounded in-memory TTL cache for place details
- Places: Google Places client, field-mask fallback and batched details
"""

from .cache import CacheService, InMemoryTTLCache
from .places import (
    DetailsResult,
    GooglePlacesClient,
    PlaceDetailsService,
    PlacesAPIError,
    UpstreamErrorKind,
    classify_upstream_error,
    get_place_with_fallback,
)

__all__ = [
    # Cache
    "CacheService",
    "InMemoryTTLCache",
    # Places
    "DetailsResult",
    "GooglePlacesClient",
    "PlaceDetailsService",
    "PlacesAPIError",
    "UpstreamErrorKind",
    "classify_upstream_error",
    "get_place_with_fallback",
]
