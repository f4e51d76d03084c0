"""Fabric Gateway CLI.

Commands:
    fabric-gateway serve          - Run the SSE gateway (HTTP mode)
    fabric-gateway health         - Check a running gateway's health
    fabric-gateway capabilities   - Print the capability descriptor
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys

import click
import httpx

from .config import GatewayConfig
from .operations import capability_descriptor

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str) -> None:
    """Configure root logging for the gateway process."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        stream=sys.stderr,
    )


def _load_config() -> GatewayConfig:
    try:
        return GatewayConfig.from_env()
    except ValueError as e:
        raise click.UsageError(str(e)) from e


@click.group(invoke_without_command=True)
@click.pass_context
def main(ctx: click.Context) -> None:
    """Fabric Gateway - stream Fabric pattern results over SSE."""
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# =============================================================================
# Server Commands
# =============================================================================


@main.command()
@click.option("--host", default=None, help="Host to bind to [env: FABRIC_GATEWAY_HOST]")
@click.option("--port", default=None, type=int, help="Port to bind to [env: FABRIC_GATEWAY_PORT]")
@click.option("--reload", is_flag=True, help="Enable auto-reload for development")
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Log level [env: FABRIC_GATEWAY_LOG_LEVEL]",
)
def serve(host: str | None, port: int | None, reload: bool, log_level: str | None) -> None:
    """Run the gateway server.

    The backend URL, API key, keep-alive interval and backend timeout are
    read from the environment (FABRIC_API_URL, FABRIC_API_KEY,
    FABRIC_KEEPALIVE_INTERVAL, FABRIC_BACKEND_TIMEOUT).
    """
    import uvicorn

    config = _load_config()
    host = host or config.host
    port = port or config.port
    level = (log_level or config.log_level).upper()
    configure_logging(level)

    click.echo(f"Starting Fabric gateway on http://{host}:{port}", err=True)
    click.echo("  Stream: GET /sse   Requests: POST /sse/{connection_id}", err=True)
    click.echo("Press Ctrl+C to stop", err=True)

    uvicorn.run(
        "fabric_gateway.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_level=level.lower(),
    )


@main.command()
@click.option("--url", default=None, help="Gateway URL (default: from configuration)")
def health(url: str | None) -> None:
    """Check gateway health."""
    if url is None:
        config = _load_config()
        url = f"http://{config.host}:{config.port}"

    async def check() -> None:
        try:
            async with httpx.AsyncClient() as client:
                response = await client.get(f"{url}/health")
        except httpx.ConnectError:
            click.echo(f"Cannot connect to gateway at {url}", err=True)
            sys.exit(1)

        if response.status_code != 200:
            click.echo(f"Gateway returned {response.status_code}", err=True)
            sys.exit(1)
        click.echo(f"Gateway is healthy: {response.json()}")

    asyncio.run(check())


@main.command()
def capabilities() -> None:
    """Print the capability descriptor served to clients."""
    click.echo(json.dumps(capability_descriptor(), indent=2))


if __name__ == "__main__":
    main()
