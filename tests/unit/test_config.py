"""Unit tests for gateway configuration."""

from __future__ import annotations

import pytest

from fabric_gateway.config import GatewayConfig


class TestGatewayConfig:
    """Tests for GatewayConfig.from_env."""

    def test_defaults(self) -> None:
        config = GatewayConfig.from_env({})

        assert config == GatewayConfig()
        assert config.port == 8765
        assert config.keepalive_interval == 30.0
        assert config.api_url == "https://api.fabric.com/v1"

    def test_reads_environment(self) -> None:
        config = GatewayConfig.from_env(
            {
                "FABRIC_GATEWAY_HOST": "0.0.0.0",
                "FABRIC_GATEWAY_PORT": "9000",
                "FABRIC_GATEWAY_LOG_LEVEL": "debug",
                "FABRIC_KEEPALIVE_INTERVAL": "5",
                "FABRIC_API_URL": "http://localhost:8080",
                "FABRIC_API_KEY": "secret",
                "FABRIC_BACKEND_TIMEOUT": "12.5",
            }
        )

        assert config.host == "0.0.0.0"
        assert config.port == 9000
        assert config.log_level == "DEBUG"
        assert config.keepalive_interval == 5.0
        assert config.api_url == "http://localhost:8080"
        assert config.api_key == "secret"
        assert config.backend_timeout == 12.5

    def test_port_fallback(self) -> None:
        """PORT is honored when the gateway-specific variable is unset."""
        assert GatewayConfig.from_env({"PORT": "3000"}).port == 3000
        assert GatewayConfig.from_env({"PORT": "3000", "FABRIC_GATEWAY_PORT": "4000"}).port == 4000

    def test_reads_os_environ(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("FABRIC_API_KEY", "from-env")

        assert GatewayConfig.from_env().api_key == "from-env"

    def test_empty_value_uses_default(self) -> None:
        assert GatewayConfig.from_env({"FABRIC_KEEPALIVE_INTERVAL": ""}).keepalive_interval == 30.0

    @pytest.mark.parametrize(
        "name,value",
        [
            ("FABRIC_GATEWAY_PORT", "http"),
            ("FABRIC_GATEWAY_PORT", "80.5"),
            ("FABRIC_KEEPALIVE_INTERVAL", "soon"),
            ("FABRIC_BACKEND_TIMEOUT", "0"),
            ("FABRIC_BACKEND_TIMEOUT", "-1"),
        ],
    )
    def test_invalid_numbers(self, name: str, value: str) -> None:
        with pytest.raises(ValueError, match=name):
            GatewayConfig.from_env({name: value})

    def test_frozen(self) -> None:
        config = GatewayConfig()

        with pytest.raises(AttributeError):
            config.port = 1  # type: ignore[misc]
