"""Places Gateway FastAPI application.

Main entry point for the gateway server.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from gateway.api import GatewayDispatcher, router
from gateway.config import GatewaySettings
from gateway.models import ErrorCode
from gateway.services.cache import CacheService, InMemoryTTLCache
from gateway.services.places import GooglePlacesClient

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type, x-gateway-key",
    "Access-Control-Allow-Methods": "POST, GET, OPTIONS",
}


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    yield
    # Shutdown - release the pooled upstream connections
    client: Optional[GooglePlacesClient] = app.state.places_client
    if client is not None:
        await client.close()


def create_app(
    settings: Optional[GatewaySettings] = None,
    cache: Optional[CacheService] = None,
    places_client: Optional[GooglePlacesClient] = None,
) -> FastAPI:
    """Build the gateway app.

    The cache and places client are created from ``settings`` unless given.
    Without a provider key there is no client, and every upstream action
    answers ``missing_google_api_key``.
    """
    settings = settings or GatewaySettings.from_env()
    if cache is None:
        cache = InMemoryTTLCache(
            max_entries=settings.cache_max_entries,
            default_ttl=settings.cache_ttl_seconds,
        )
    if places_client is None and settings.google_api_key:
        places_client = GooglePlacesClient(
            api_key=settings.google_api_key,
            base_url=settings.places_base_url,
            timeout=settings.http_timeout,
        )

    app = FastAPI(
        title="Places Gateway",
        description="Authenticated, caching gateway for the Google Places API",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.cache = cache
    app.state.places_client = places_client
    app.state.dispatcher = GatewayDispatcher(settings, cache, places_client)

    # CORS headers go on every response, error responses included
    @app.middleware("http")
    async def add_cors_headers(request: Request, call_next):
        response = await call_next(request)
        for name, value in CORS_HEADERS.items():
            response.headers[name] = value
        return response

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle unexpected errors."""
        logger.exception("Unhandled error")
        return JSONResponse(
            status_code=500,
            content={"error": ErrorCode.GATEWAY_EXCEPTION.value, "message": str(exc)},
            headers=CORS_HEADERS,
        )

    app.include_router(router, prefix="/api")

    @app.get("/health")
    async def health_check():
        """Liveness probe; unauthenticated and free of upstream calls."""
        return {"status": "healthy"}

    return app


_settings = GatewaySettings.from_env()
configure_logging(_settings.log_level)
app = create_app(_settings)
