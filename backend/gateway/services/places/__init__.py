"""Google Places service module.

Upstream client, field-mask fallback and cached details lookups.
"""

from .client import GooglePlacesClient, PlacesAPIError
from .details import DetailsResult, PlaceDetailsService
from .fallback import UpstreamErrorKind, classify_upstream_error, get_place_with_fallback

__all__ = [
    "GooglePlacesClient",
    "PlacesAPIError",
    "DetailsResult",
    "PlaceDetailsService",
    "UpstreamErrorKind",
    "classify_upstream_error",
    "get_place_with_fallback",
]
