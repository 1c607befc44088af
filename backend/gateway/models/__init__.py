"""Gateway data models."""

from .core import (
    DEFAULT_FIELD_MASK,
    MAX_BATCH_SIZE,
    AutocompleteRequest,
    BatchDetailsRequest,
    DetailsRequest,
    GatewayAction,
    NearbySearchRequest,
    TextSearchRequest,
    normalize_place_id,
)
from .errors import ErrorCode, GatewayError

__all__ = [
    "DEFAULT_FIELD_MASK",
    "MAX_BATCH_SIZE",
    "AutocompleteRequest",
    "BatchDetailsRequest",
    "DetailsRequest",
    "GatewayAction",
    "NearbySearchRequest",
    "TextSearchRequest",
    "normalize_place_id",
    "ErrorCode",
    "GatewayError",
]
