"""Gateway configuration.

Values come from the environment, falling back to defaults suited to
local development.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass


@dataclass(frozen=True)
class GatewayConfig:
    """Gateway configuration."""

    # Server settings
    host: str = "127.0.0.1"
    port: int = 8765
    log_level: str = "INFO"

    # Stream settings
    keepalive_interval: float = 30.0

    # Backend settings
    api_url: str = "https://api.fabric.com/v1"
    api_key: str = ""
    backend_timeout: float = 60.0

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> GatewayConfig:
        """Build configuration from environment variables.

        Recognized variables:
            FABRIC_GATEWAY_HOST, FABRIC_GATEWAY_PORT (or PORT),
            FABRIC_GATEWAY_LOG_LEVEL, FABRIC_KEEPALIVE_INTERVAL,
            FABRIC_API_URL, FABRIC_API_KEY, FABRIC_BACKEND_TIMEOUT

        Raises:
            ValueError: A numeric variable could not be parsed.
        """
        env = os.environ if environ is None else environ
        defaults = cls()

        port_raw = env.get("FABRIC_GATEWAY_PORT") or env.get("PORT")
        return cls(
            host=env.get("FABRIC_GATEWAY_HOST", defaults.host),
            port=_parse_number(int, "FABRIC_GATEWAY_PORT", port_raw, defaults.port),
            log_level=env.get("FABRIC_GATEWAY_LOG_LEVEL", defaults.log_level).upper(),
            keepalive_interval=_parse_number(
                float,
                "FABRIC_KEEPALIVE_INTERVAL",
                env.get("FABRIC_KEEPALIVE_INTERVAL"),
                defaults.keepalive_interval,
            ),
            api_url=env.get("FABRIC_API_URL", defaults.api_url),
            api_key=env.get("FABRIC_API_KEY", defaults.api_key),
            backend_timeout=_parse_number(
                float,
                "FABRIC_BACKEND_TIMEOUT",
                env.get("FABRIC_BACKEND_TIMEOUT"),
                defaults.backend_timeout,
            ),
        )


def _parse_number(kind: type, name: str, raw: str | None, default: float) -> float:
    if raw is None or raw == "":
        return default
    try:
        value = kind(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be a number, got {raw!r}") from e
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {raw!r}")
    return value
