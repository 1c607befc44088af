"""Gateway configuration.

Values come from the process environment, optionally seeded from a ``.env``
file. Nothing here is cached at module level: ``create_app`` builds one
``GatewaySettings`` and keeps it on ``app.state``.
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

DEFAULT_PLACES_BASE_URL = "https://places.googleapis.com/v1"


def _env(name: str) -> Optional[str]:
    """Read an env var, treating empty strings as unset."""
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return None
    return value.strip()


def _env_int(name: str, default: int) -> int:
    value = _env(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {value!r}")


def _env_float(name: str, default: float) -> float:
    value = _env(name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {value!r}")


@dataclass
class GatewaySettings:
    """Runtime settings for the places gateway."""

    gateway_token: Optional[str] = None
    google_api_key: Optional[str] = None
    places_base_url: str = DEFAULT_PLACES_BASE_URL
    cache_ttl_seconds: int = 3600
    cache_max_entries: int = 5000
    http_timeout: float = 10.0
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000

    @classmethod
    def from_env(cls) -> "GatewaySettings":
        """Build settings from the environment (and ``.env`` if present)."""
        load_dotenv()
        return cls(
            gateway_token=_env("GATEWAY_TOKEN"),
            google_api_key=_env("GOOGLE_PLACES_API_KEY"),
            places_base_url=(_env("GOOGLE_PLACES_BASE_URL") or DEFAULT_PLACES_BASE_URL).rstrip("/"),
            cache_ttl_seconds=_env_int("PLACES_CACHE_TTL_SECONDS", 3600),
            cache_max_entries=_env_int("PLACES_CACHE_MAX_ENTRIES", 5000),
            http_timeout=_env_float("PLACES_HTTP_TIMEOUT", 10.0),
            log_level=(_env("LOG_LEVEL") or "INFO").upper(),
            host=_env("HOST") or "0.0.0.0",
            port=_env_int("PORT", 8000),
        )
