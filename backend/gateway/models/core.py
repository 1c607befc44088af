"""Core data models for the places gateway.

Request models for each gateway action, the shared field-mask constants and
place identifier normalisation. Required-field checks are done by the
dispatcher so each missing field maps to its own stable error code; the
models only coerce shapes and fill defaults.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Used both as the out-of-the-box mask and as the fallback mask.
DEFAULT_FIELD_MASK: tuple[str, ...] = (
    "id",
    "displayName",
    "formattedAddress",
    "rating",
    "userRatingCount",
    "reviews",
)

MAX_BATCH_SIZE = 50

PLACE_RESOURCE_PREFIX = "places/"


class GatewayAction(str, Enum):
    """Actions the gateway accepts. Anything else is rejected."""

    SEARCH_TEXT = "searchText"
    NEARBY_SEARCH = "nearbySearch"
    DETAILS = "details"
    AUTOCOMPLETE = "autocomplete"
    BATCH_DETAILS = "batchDetails"
    HEALTH = "health"


def normalize_place_id(place_id: str) -> str:
    """Strip the ``places/`` resource prefix from a place identifier.

    Example:
        >>> normalize_place_id("places/ChIJabc")
        'ChIJabc'
    """
    place_id = place_id.strip()
    if place_id.startswith(PLACE_RESOURCE_PREFIX):
        return place_id[len(PLACE_RESOURCE_PREFIX):]
    return place_id


def _split_csv(value: Any) -> Any:
    # GET callers send lists as "a,b,c"
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    return value


def _fields_or_default(value: Any) -> Any:
    value = _split_csv(value)
    if value is None or value == []:
        return list(DEFAULT_FIELD_MASK)
    return value


class GatewayRequest(BaseModel):
    """Base for action payloads: unknown keys (``action`` included) are ignored."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class TextSearchRequest(GatewayRequest):
    text_query: Optional[str] = Field(None, alias="textQuery")
    region_code: Optional[str] = Field(None, alias="regionCode")
    page_size: int = Field(10, alias="pageSize")
    language_code: Optional[str] = Field(None, alias="languageCode")
    included_type: Optional[str] = Field(None, alias="includedType")
    fields: Optional[list[str]] = None

    @field_validator("fields", mode="before")
    @classmethod
    def split_fields(cls, value: Any) -> Any:
        return _split_csv(value)


class NearbySearchRequest(GatewayRequest):
    lat: Optional[float] = None
    lng: Optional[float] = None
    radius: float = 1000
    included_type: Optional[str] = Field(None, alias="includedType")
    max_result_count: int = Field(20, alias="maxResultCount")
    fields: Optional[list[str]] = None

    @field_validator("fields", mode="before")
    @classmethod
    def split_fields(cls, value: Any) -> Any:
        return _split_csv(value)


class DetailsRequest(GatewayRequest):
    place_id: Optional[str] = Field(None, alias="placeId")
    fields: list[str] = Field(default_factory=lambda: list(DEFAULT_FIELD_MASK))

    @field_validator("fields", mode="before")
    @classmethod
    def split_fields(cls, value: Any) -> Any:
        return _fields_or_default(value)


class BatchDetailsRequest(GatewayRequest):
    place_ids: list[str] = Field(default_factory=list, alias="placeIds")
    fields: list[str] = Field(default_factory=lambda: list(DEFAULT_FIELD_MASK))

    @field_validator("place_ids", mode="before")
    @classmethod
    def split_place_ids(cls, value: Any) -> Any:
        return [] if value is None else _split_csv(value)

    @field_validator("fields", mode="before")
    @classmethod
    def split_fields(cls, value: Any) -> Any:
        return _fields_or_default(value)


class AutocompleteRequest(GatewayRequest):
    input: Optional[str] = None
    language_code: Optional[str] = Field(None, alias="languageCode")
    region_code: Optional[str] = Field(None, alias="regionCode")
    types: Optional[str] = None
