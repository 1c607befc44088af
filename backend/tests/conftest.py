"""Shared fixtures for gateway tests.

Upstream calls never leave the process: ``FakePlacesAPI`` is plugged into
``GooglePlacesClient`` through ``httpx.MockTransport`` and records every
request it sees.
"""

import json
from typing import Callable, Optional

import httpx
import pytest

from gateway.config import GatewaySettings
from gateway.services.cache import InMemoryTTLCache
from gateway.services.places import GooglePlacesClient

GATEWAY_TOKEN = "test-gateway-token"
GOOGLE_API_KEY = "test-google-key"

FIELD_MASK_ERROR_BODY = json.dumps(
    {
        "error": {
            "code": 400,
            "message": "Error expanding 'fields' parameter. Cannot find matching fields for path 'bogusField'.",
            "status": "INVALID_ARGUMENT",
        }
    }
)


class FakeClock:
    """Manually advanced stand-in for ``time.monotonic``."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakePlacesAPI:
    """Records requests and answers them with ``responder``.

    The default responder echoes place details for GETs on ``/places/{id}``
    and returns an empty ``places`` list for everything else.
    """

    def __init__(self, responder: Optional[Callable[[httpx.Request], httpx.Response]] = None) -> None:
        self.requests: list[httpx.Request] = []
        self._responder = responder or self.default_responder

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._responder(request)

    @staticmethod
    def default_responder(request: httpx.Request) -> httpx.Response:
        if request.method == "GET" and request.url.path.startswith("/v1/places/"):
            place_id = request.url.path.rsplit("/", 1)[-1]
            return httpx.Response(200, json={"id": place_id, "displayName": {"text": place_id}})
        return httpx.Response(200, json={"places": []})

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    def detail_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path.startswith("/v1/places/")]


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fake_api() -> FakePlacesAPI:
    return FakePlacesAPI()


@pytest.fixture
def settings() -> GatewaySettings:
    return GatewaySettings(gateway_token=GATEWAY_TOKEN, google_api_key=GOOGLE_API_KEY)


@pytest.fixture
def cache(clock: FakeClock) -> InMemoryTTLCache:
    return InMemoryTTLCache(max_entries=5000, default_ttl=3600, clock=clock)


@pytest.fixture
def places_client(fake_api: FakePlacesAPI) -> GooglePlacesClient:
    return GooglePlacesClient(api_key=GOOGLE_API_KEY, transport=fake_api.transport())
