"""API routes for the places gateway.

A single endpoint mirrors the provider's lookups. The caller names the
lookup with ``action`` (query string or JSON body) and authenticates with the
``x-gateway-key`` header; the dispatcher does the rest.
"""

import json
import logging

from fastapi import APIRouter, Request, Response
from fastapi.responses import JSONResponse

from gateway.api.dispatcher import GatewayDispatcher

logger = logging.getLogger(__name__)

router = APIRouter()

GATEWAY_KEY_HEADER = "x-gateway-key"


def get_dispatcher(request: Request) -> GatewayDispatcher:
    return request.app.state.dispatcher


async def _read_json_body(request: Request) -> dict:
    """Return the JSON object body, or an empty dict for anything else."""
    raw = await request.body()
    if not raw:
        return {}
    try:
        body = json.loads(raw)
    except ValueError:
        logger.debug("[GATEWAY] Ignoring non-JSON request body")
        return {}
    return body if isinstance(body, dict) else {}


@router.api_route("/places", methods=["GET", "POST", "OPTIONS"])
async def places_gateway(request: Request) -> Response:
    """Proxy one Places lookup.

    OPTIONS is answered with 204 for CORS preflight.
    """
    if request.method == "OPTIONS":
        return Response(status_code=204)

    body = await _read_json_body(request)
    action = request.query_params.get("action") or body.get("action") or ""
    # Body values win over query string values
    payload = {**dict(request.query_params), **body}

    result = await get_dispatcher(request).dispatch(
        str(action), payload, request.headers.get(GATEWAY_KEY_HEADER)
    )
    return JSONResponse(status_code=result.status_code, content=result.content)
