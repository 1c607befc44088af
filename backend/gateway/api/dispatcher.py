"""Action dispatcher for the places gateway.

Every request walks the same path:

1. ``action`` must be in the allow-list            -> 400 invalid_action
2. ``x-gateway-key`` must match the shared secret  -> 401 unauthorized
3. ``health`` answers here, without touching the provider key
4. the provider key must be configured             -> 500 missing_google_api_key
5. the action handler runs; upstream failures pass through as ``google_error``

Nothing is held between requests apart from the shared cache.
"""

import hmac
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

from pydantic import BaseModel, ValidationError

from gateway.config import GatewaySettings
from gateway.models import (
    AutocompleteRequest,
    BatchDetailsRequest,
    DetailsRequest,
    ErrorCode,
    GatewayAction,
    GatewayError,
    NearbySearchRequest,
    TextSearchRequest,
    normalize_place_id,
)
from gateway.services.cache import CacheService
from gateway.services.places import GooglePlacesClient, PlaceDetailsService, PlacesAPIError

logger = logging.getLogger(__name__)

ALLOWED_ACTIONS = frozenset(action.value for action in GatewayAction)


@dataclass
class GatewayResponse:
    """Status code and JSON body for one gateway reply."""
    status_code: int
    content: Any


def _parse(
    model: type[BaseModel], payload: dict, code: ErrorCode, required: tuple[str, ...]
) -> Any:
    """Validate ``payload``, reporting ``code`` only for errors on a required field."""
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        if any(err["loc"] and err["loc"][0] in required for err in e.errors()):
            raise GatewayError(400, code, detail=str(e))
        raise GatewayError(400, ErrorCode.INVALID_REQUEST, detail=str(e))


class GatewayDispatcher:
    """Validates, authenticates and routes gateway actions."""

    def __init__(
        self,
        settings: GatewaySettings,
        cache: CacheService,
        places_client: Optional[GooglePlacesClient] = None,
    ) -> None:
        self._settings = settings
        self._cache = cache
        self._client = places_client
        self._details: Optional[PlaceDetailsService] = None
        if places_client is not None:
            self._details = PlaceDetailsService(
                places_client, cache, ttl_seconds=settings.cache_ttl_seconds
            )
        self._handlers: dict[str, Callable[[dict], Awaitable[GatewayResponse]]] = {
            GatewayAction.SEARCH_TEXT.value: self._search_text,
            GatewayAction.NEARBY_SEARCH.value: self._nearby_search,
            GatewayAction.DETAILS.value: self._details_lookup,
            GatewayAction.BATCH_DETAILS.value: self._batch_details,
            GatewayAction.AUTOCOMPLETE.value: self._autocomplete,
        }

    @property
    def cache(self) -> CacheService:
        return self._cache

    def is_authorized(self, gateway_key: Optional[str]) -> bool:
        expected = self._settings.gateway_token
        if not expected or gateway_key is None:
            return False
        return hmac.compare_digest(gateway_key.encode(), expected.encode())

    async def dispatch(
        self, action: str, payload: dict, gateway_key: Optional[str]
    ) -> GatewayResponse:
        if action not in ALLOWED_ACTIONS:
            return GatewayResponse(400, {"error": ErrorCode.INVALID_ACTION.value})

        if not self.is_authorized(gateway_key):
            logger.info(f"[GATEWAY] Rejected {action}: bad or missing gateway key")
            return GatewayResponse(401, {"error": ErrorCode.UNAUTHORIZED.value})

        if action == GatewayAction.HEALTH.value:
            return GatewayResponse(200, {"ok": True, "cacheEntries": len(self._cache)})

        if self._client is None:
            logger.error("[GATEWAY] GOOGLE_PLACES_API_KEY is not configured")
            return GatewayResponse(500, {"error": ErrorCode.MISSING_GOOGLE_API_KEY.value})

        handler = self._handlers.get(action)
        if handler is None:
            return GatewayResponse(400, {"error": ErrorCode.UNHANDLED_ACTION.value})

        try:
            return await handler(payload)
        except GatewayError as e:
            return GatewayResponse(e.status_code, e.to_content())
        except PlacesAPIError as e:
            return GatewayResponse(
                e.status_code, {"error": ErrorCode.GOOGLE_ERROR.value, "body": e.body}
            )
        except Exception as e:
            logger.exception(f"[GATEWAY] Unhandled error in {action}")
            return GatewayResponse(
                500, {"error": ErrorCode.GATEWAY_EXCEPTION.value, "message": str(e)}
            )

    async def _search_text(self, payload: dict) -> GatewayResponse:
        req = _parse(TextSearchRequest, payload, ErrorCode.TEXT_QUERY_REQUIRED, ("textQuery",))
        if not req.text_query:
            raise GatewayError(400, ErrorCode.TEXT_QUERY_REQUIRED)
        data = await self._client.search_text(
            req.text_query,
            region_code=req.region_code,
            page_size=req.page_size,
            language_code=req.language_code,
            included_type=req.included_type,
            fields=req.fields,
        )
        return GatewayResponse(200, {"data": data})

    async def _nearby_search(self, payload: dict) -> GatewayResponse:
        req = _parse(NearbySearchRequest, payload, ErrorCode.LAT_LNG_REQUIRED, ("lat", "lng"))
        # 0.0 is a valid coordinate, only missing values are rejected
        if req.lat is None or req.lng is None:
            raise GatewayError(400, ErrorCode.LAT_LNG_REQUIRED)
        data = await self._client.search_nearby(
            req.lat,
            req.lng,
            radius=req.radius,
            included_type=req.included_type,
            max_result_count=req.max_result_count,
            fields=req.fields,
        )
        return GatewayResponse(200, {"data": data})

    async def _details_lookup(self, payload: dict) -> GatewayResponse:
        req = _parse(DetailsRequest, payload, ErrorCode.PLACE_ID_REQUIRED, ("placeId",))
        if not req.place_id or not normalize_place_id(req.place_id):
            raise GatewayError(400, ErrorCode.PLACE_ID_REQUIRED)
        result = await self._details.get_details(req.place_id, req.fields)
        return GatewayResponse(200, {"data": result.data, "cached": result.cached})

    async def _batch_details(self, payload: dict) -> GatewayResponse:
        req = _parse(BatchDetailsRequest, payload, ErrorCode.PLACE_IDS_REQUIRED, ("placeIds",))
        if not req.place_ids:
            raise GatewayError(400, ErrorCode.PLACE_IDS_REQUIRED)
        if len(req.place_ids) > self._details.max_batch_size:
            raise GatewayError(400, ErrorCode.TOO_MANY_PLACE_IDS)
        results = await self._details.get_batch_details(req.place_ids, req.fields)
        return GatewayResponse(200, {"results": results})

    async def _autocomplete(self, payload: dict) -> GatewayResponse:
        req = _parse(AutocompleteRequest, payload, ErrorCode.INPUT_REQUIRED, ("input",))
        if not req.input:
            raise GatewayError(400, ErrorCode.INPUT_REQUIRED)
        data = await self._client.autocomplete(
            req.input,
            language_code=req.language_code,
            region_code=req.region_code,
            types=req.types,
        )
        return GatewayResponse(200, {"data": data})
