"""Unit tests for the command line interface."""

from __future__ import annotations

import json
from unittest.mock import patch

import httpx
from click.testing import CliRunner

from fabric_gateway.cli import main
from fabric_gateway.operations import capability_descriptor


class TestCapabilitiesCommand:
    def test_prints_descriptor(self) -> None:
        result = CliRunner().invoke(main, ["capabilities"])

        assert result.exit_code == 0
        assert json.loads(result.output) == capability_descriptor()


class TestServeCommand:
    """Tests for serve option handling. uvicorn is never started."""

    def test_options_override_environment(self) -> None:
        with patch("uvicorn.run") as run, patch("fabric_gateway.cli.configure_logging"):
            result = CliRunner().invoke(
                main,
                ["serve", "--host", "0.0.0.0", "--port", "9100", "--log-level", "debug"],
                env={"FABRIC_GATEWAY_PORT": "9000"},
            )

        assert result.exit_code == 0, result.output
        run.assert_called_once_with(
            "fabric_gateway.app:create_app",
            factory=True,
            host="0.0.0.0",
            port=9100,
            reload=False,
            log_level="debug",
        )

    def test_environment_defaults(self) -> None:
        with patch("uvicorn.run") as run, patch("fabric_gateway.cli.configure_logging"):
            result = CliRunner().invoke(main, ["serve"], env={"FABRIC_GATEWAY_PORT": "9000"})

        assert result.exit_code == 0, result.output
        assert run.call_args.kwargs["port"] == 9000

    def test_invalid_environment_is_usage_error(self) -> None:
        with patch("uvicorn.run") as run:
            result = CliRunner().invoke(main, ["serve"], env={"FABRIC_GATEWAY_PORT": "http"})

        assert result.exit_code == 2
        assert "FABRIC_GATEWAY_PORT" in result.output
        run.assert_not_called()


class TestHealthCommand:
    def test_cannot_connect(self) -> None:
        with patch(
            "httpx.AsyncClient.get", side_effect=httpx.ConnectError("refused")
        ):
            result = CliRunner().invoke(main, ["health", "--url", "http://127.0.0.1:1"])

        assert result.exit_code == 1
        assert "Cannot connect" in result.output
