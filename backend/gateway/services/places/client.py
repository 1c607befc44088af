"""Google Places API (New) client.

One method per upstream operation. Every call sends the provider key in the
``X-Goog-Api-Key`` header (never in the URL) and either returns the decoded
JSON payload or raises ``PlacesAPIError`` with the upstream status and raw
body. The client never retries; see ``fallback`` for the one retry the
gateway performs.

Architecture:
- Shared httpx client with connection pooling, created lazily
- Optional injected transport (tests use ``httpx.MockTransport``)
"""

import logging
from typing import Any, Optional, Sequence
from urllib.parse import quote

import httpx

from gateway.config import DEFAULT_PLACES_BASE_URL
from gateway.models import normalize_place_id

logger = logging.getLogger(__name__)


class PlacesAPIError(Exception):
    """Non-2xx response from the Places API."""

    def __init__(self, status_code: int, body: str) -> None:
        super().__init__(f"Places API returned HTTP {status_code}")
        self.status_code = status_code
        self.body = body


def _drop_none(values: dict) -> dict:
    return {k: v for k, v in values.items() if v is not None}


class GooglePlacesClient:
    """Async client for the five place lookups the gateway proxies."""

    API_KEY_HEADER = "X-Goog-Api-Key"
    FIELD_MASK_HEADER = "X-Goog-FieldMask"

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_PLACES_BASE_URL,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def api_key(self) -> str:
        return self._api_key

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the shared HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                headers={"Accept": "application/json"},
                limits=httpx.Limits(max_connections=64, max_keepalive_connections=16),
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    def _headers(self, field_mask: Optional[Sequence[str]] = None, json_body: bool = False) -> dict:
        headers = {self.API_KEY_HEADER: self._api_key}
        if field_mask:
            headers[self.FIELD_MASK_HEADER] = ",".join(field_mask)
        if json_body:
            headers["Content-Type"] = "application/json"
        return headers

    async def _send(self, method: str, path: str, **kwargs: Any) -> Any:
        client = self._get_client()
        response = await client.request(method, f"{self._base_url}{path}", **kwargs)
        if not response.is_success:
            logger.info(f"[PLACES] {method} {path} -> HTTP {response.status_code}")
            raise PlacesAPIError(response.status_code, response.text)
        # A non-JSON 2xx body raises here and is reported as a gateway fault
        return response.json()

    async def search_text(
        self,
        text_query: str,
        region_code: Optional[str] = None,
        page_size: int = 10,
        language_code: Optional[str] = None,
        included_type: Optional[str] = None,
        fields: Optional[Sequence[str]] = None,
    ) -> Any:
        body = _drop_none(
            {
                "textQuery": text_query,
                "regionCode": region_code,
                "pageSize": page_size,
                "languageCode": language_code,
                "includedType": included_type,
            }
        )
        return await self._send(
            "POST", "/text:search", json=body, headers=self._headers(fields, json_body=True)
        )

    async def search_nearby(
        self,
        lat: float,
        lng: float,
        radius: float = 1000,
        included_type: Optional[str] = None,
        max_result_count: int = 20,
        fields: Optional[Sequence[str]] = None,
    ) -> Any:
        body: dict[str, Any] = {
            "locationRestriction": {
                "circle": {
                    "center": {"latitude": lat, "longitude": lng},
                    "radius": radius,
                }
            },
            "maxResultCount": max_result_count,
        }
        if included_type:
            body["includedTypes"] = [included_type]
        return await self._send(
            "POST", "/places:searchNearby", json=body, headers=self._headers(fields, json_body=True)
        )

    async def get_place(self, place_id: str, fields: Sequence[str]) -> Any:
        """Fetch one place. The mask goes in both the query string and the header."""
        raw_id = normalize_place_id(place_id)
        path = f"/places/{quote(raw_id, safe='')}"
        return await self._send(
            "GET",
            path,
            params={"fields": ",".join(fields)},
            headers=self._headers(fields),
        )

    async def autocomplete(
        self,
        input: str,
        language_code: Optional[str] = None,
        region_code: Optional[str] = None,
        types: Optional[str] = None,
    ) -> Any:
        params = _drop_none(
            {
                "input": input,
                "languageCode": language_code,
                "regionCode": region_code,
                "types": types,
            }
        )
        return await self._send("GET", "/places:autocomplete", params=params, headers=self._headers())
