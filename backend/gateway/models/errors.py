"""Error codes and the gateway's caller-facing exception."""

from enum import Enum
from typing import Optional


class ErrorCode(str, Enum):
    """Stable machine-readable codes returned in the ``error`` field."""

    INVALID_ACTION = "invalid_action"
    UNAUTHORIZED = "unauthorized"
    MISSING_GOOGLE_API_KEY = "missing_google_api_key"
    TEXT_QUERY_REQUIRED = "textQuery_required"
    LAT_LNG_REQUIRED = "lat_lng_required"
    PLACE_ID_REQUIRED = "placeId_required"
    PLACE_IDS_REQUIRED = "placeIds_required"
    TOO_MANY_PLACE_IDS = "too_many_placeIds_max_50"
    INPUT_REQUIRED = "input_required"
    GOOGLE_ERROR = "google_error"
    GATEWAY_EXCEPTION = "gateway_exception"
    UNHANDLED_ACTION = "unhandled_action"
    INVALID_REQUEST = "invalid_request"


class GatewayError(Exception):
    """A request the gateway refuses before (or instead of) calling upstream."""

    def __init__(self, status_code: int, code: ErrorCode, detail: Optional[str] = None) -> None:
        super().__init__(detail or code.value)
        self.status_code = status_code
        self.code = code
        self.detail = detail

    def to_content(self) -> dict:
        return {"error": self.code.value}
