"""Cached place details lookups, single and batched.

Each lookup goes cache -> upstream (with field-mask fallback) -> cache write.
Batches run every lookup concurrently on the event loop and turn per-item
upstream failures into error entries, so one bad id never sinks the batch.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Optional, Sequence

import httpx

from gateway.models import DEFAULT_FIELD_MASK, MAX_BATCH_SIZE, ErrorCode, normalize_place_id
from gateway.services.cache import CacheService

from .client import GooglePlacesClient, PlacesAPIError
from .fallback import get_place_with_fallback

logger = logging.getLogger(__name__)

# Reported for batch items without a usable upstream response
TRANSPORT_ERROR_STATUS = 502


@dataclass
class DetailsResult:
    """A details payload and whether it was served from cache."""
    data: Any
    cached: bool


class PlaceDetailsService:
    """Details lookups backed by a shared cache."""

    def __init__(
        self,
        client: GooglePlacesClient,
        cache: CacheService,
        ttl_seconds: int = 3600,
        max_batch_size: int = MAX_BATCH_SIZE,
    ) -> None:
        self._client = client
        self._cache = cache
        self._ttl = ttl_seconds
        self._max_batch_size = max_batch_size

    @property
    def max_batch_size(self) -> int:
        return self._max_batch_size

    async def get_details(
        self, place_id: str, fields: Optional[Sequence[str]] = None
    ) -> DetailsResult:
        """Look up one place, serving from cache when possible.

        Raises:
            ValueError: if the id is empty once the ``places/`` prefix is removed.
            PlacesAPIError: the upstream failure after any fallback retry.
        """
        fields = list(fields) if fields else list(DEFAULT_FIELD_MASK)
        raw_id = normalize_place_id(place_id)
        if not raw_id:
            raise ValueError("place_id cannot be empty")
        cache_key = CacheService.build_details_key(raw_id, fields)

        cached = self._cache.get(cache_key)
        if cached is not None:
            logger.debug(f"[CACHE] HIT {cache_key}")
            return DetailsResult(data=cached, cached=True)

        logger.debug(f"[CACHE] MISS {cache_key}")
        data = await get_place_with_fallback(self._client, raw_id, fields)
        self._cache.put(cache_key, data, self._ttl)
        return DetailsResult(data=data, cached=False)

    async def get_batch_details(
        self, place_ids: Sequence[str], fields: Optional[Sequence[str]] = None
    ) -> list[dict]:
        """Look up many places concurrently.

        Returns one entry per input id, in input order: either
        ``{placeId, data, cached}`` or ``{placeId, error: True, status, body}``.

        Raises:
            ValueError: if ``place_ids`` is empty or longer than the batch cap.
                No lookups are started in that case.
        """
        if not place_ids:
            raise ValueError("place_ids cannot be empty")
        if len(place_ids) > self._max_batch_size:
            raise ValueError(f"At most {self._max_batch_size} place_ids per batch")

        async def lookup_single(place_id: str) -> dict:
            if not normalize_place_id(place_id):
                return {
                    "placeId": place_id,
                    "error": True,
                    "status": 400,
                    "body": ErrorCode.PLACE_ID_REQUIRED.value,
                }
            try:
                result = await self.get_details(place_id, fields)
            except PlacesAPIError as e:
                return {"placeId": place_id, "error": True, "status": e.status_code, "body": e.body}
            except httpx.HTTPError as e:
                logger.info(f"[BATCH] Transport error for {place_id}: {e}")
                return {
                    "placeId": place_id,
                    "error": True,
                    "status": TRANSPORT_ERROR_STATUS,
                    "body": str(e),
                }
            except ValueError as e:
                # 2xx body that is not JSON
                logger.info(f"[BATCH] Undecodable payload for {place_id}: {e}")
                return {
                    "placeId": place_id,
                    "error": True,
                    "status": TRANSPORT_ERROR_STATUS,
                    "body": str(e),
                }
            return {"placeId": place_id, "data": result.data, "cached": result.cached}

        results = await asyncio.gather(*[lookup_single(pid) for pid in place_ids])

        failed = sum(1 for r in results if r.get("error"))
        logger.info(f"[BATCH] {len(results) - failed} ok, {failed} failed of {len(results)}")
        return list(results)
