"""Unit tests for GatewaySettings.from_env."""

import pytest

from gateway.config import DEFAULT_PLACES_BASE_URL, GatewaySettings

ENV_VARS = (
    "GATEWAY_TOKEN",
    "GOOGLE_PLACES_API_KEY",
    "GOOGLE_PLACES_BASE_URL",
    "PLACES_CACHE_TTL_SECONDS",
    "PLACES_CACHE_MAX_ENTRIES",
    "PLACES_HTTP_TIMEOUT",
    "LOG_LEVEL",
    "HOST",
    "PORT",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    # Keep load_dotenv away from any developer .env
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("gateway.config.load_dotenv", lambda: False)


class TestGatewaySettingsFromEnv:
    """Tests for environment loading."""

    def test_defaults(self) -> None:
        settings = GatewaySettings.from_env()
        assert settings.gateway_token is None
        assert settings.google_api_key is None
        assert settings.places_base_url == DEFAULT_PLACES_BASE_URL
        assert settings.cache_ttl_seconds == 3600
        assert settings.cache_max_entries == 5000
        assert settings.http_timeout == 10.0
        assert settings.log_level == "INFO"
        assert settings.port == 8000

    def test_values_read_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GATEWAY_TOKEN", "secret")
        monkeypatch.setenv("GOOGLE_PLACES_API_KEY", "gkey")
        monkeypatch.setenv("GOOGLE_PLACES_BASE_URL", "http://localhost:9000/v1/")
        monkeypatch.setenv("PLACES_CACHE_TTL_SECONDS", "60")
        monkeypatch.setenv("PLACES_CACHE_MAX_ENTRIES", "10")
        monkeypatch.setenv("PLACES_HTTP_TIMEOUT", "2.5")
        monkeypatch.setenv("LOG_LEVEL", "debug")
        settings = GatewaySettings.from_env()
        assert settings.gateway_token == "secret"
        assert settings.google_api_key == "gkey"
        assert settings.places_base_url == "http://localhost:9000/v1"
        assert settings.cache_ttl_seconds == 60
        assert settings.cache_max_entries == 10
        assert settings.http_timeout == 2.5
        assert settings.log_level == "DEBUG"

    def test_empty_values_count_as_unset(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GATEWAY_TOKEN", "")
        monkeypatch.setenv("GOOGLE_PLACES_API_KEY", "   ")
        settings = GatewaySettings.from_env()
        assert settings.gateway_token is None
        assert settings.google_api_key is None

    def test_bad_number_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PLACES_CACHE_TTL_SECONDS", "an hour")
        with pytest.raises(ValueError, match="PLACES_CACHE_TTL_SECONDS"):
            GatewaySettings.from_env()
