"""Field-mask fallback for place details lookups.

When the Places API rejects a caller's field mask (it cannot expand one of
the requested paths), the lookup is re-issued once with ``DEFAULT_FIELD_MASK``.
Any other failure, or a failure of the retry itself, propagates unchanged.

The trigger is matched on the provider's error message. The API reports
this failure only as a generic ``INVALID_ARGUMENT``, so the message text
is the only thing that tells it apart from other bad requests.
"""

import json
import logging
import re
from enum import Enum
from typing import Any, Sequence

from gateway.models import DEFAULT_FIELD_MASK

from .client import GooglePlacesClient, PlacesAPIError

logger = logging.getLogger(__name__)

FIELD_MASK_ERROR_PATTERN = re.compile(
    r"expanding 'fields' parameter|cannot find matching fields for path",
    re.IGNORECASE,
)


class UpstreamErrorKind(str, Enum):
    """Closed classification of upstream failures."""

    FIELD_MASK = "field_mask"
    OTHER = "other"


def _error_message(body: str) -> tuple[str, str | None]:
    """Pull ``error.message`` / ``error.status`` from a Google error body.

    Falls back to the raw text when the body isn't the structured JSON error.
    """
    try:
        parsed = json.loads(body)
    except (TypeError, ValueError):
        return body or "", None
    error = parsed.get("error") if isinstance(parsed, dict) else None
    if not isinstance(error, dict):
        return body, None
    return str(error.get("message", "")), error.get("status")


def classify_upstream_error(error: PlacesAPIError) -> UpstreamErrorKind:
    if error.status_code != 400:
        return UpstreamErrorKind.OTHER
    message, status = _error_message(error.body)
    if status is not None and status != "INVALID_ARGUMENT":
        return UpstreamErrorKind.OTHER
    if FIELD_MASK_ERROR_PATTERN.search(message):
        return UpstreamErrorKind.FIELD_MASK
    return UpstreamErrorKind.OTHER


async def get_place_with_fallback(
    client: GooglePlacesClient,
    place_id: str,
    fields: Sequence[str],
) -> Any:
    """Fetch place details, degrading to the default mask at most once.

    Raises:
        PlacesAPIError: the original failure if it wasn't a field-mask error
            (or the mask already was the default), otherwise the retry's failure.
    """
    try:
        return await client.get_place(place_id, fields)
    except PlacesAPIError as e:
        if classify_upstream_error(e) is not UpstreamErrorKind.FIELD_MASK:
            raise
        if list(fields) == list(DEFAULT_FIELD_MASK):
            # Retrying would repeat the identical request
            raise
        logger.warning(
            f"[FALLBACK] Field mask {','.join(fields)!r} rejected for {place_id}; "
            f"retrying with default mask"
        )
    return await client.get_place(place_id, DEFAULT_FIELD_MASK)
