"""HTTP surface of the places gateway."""

from .dispatcher import ALLOWED_ACTIONS, GatewayDispatcher, GatewayResponse
from .routes import router

__all__ = [
    "ALLOWED_ACTIONS",
    "GatewayDispatcher",
    "GatewayResponse",
    "router",
]
