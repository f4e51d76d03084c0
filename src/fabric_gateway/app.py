"""Fabric Gateway Application.

Creates the Starlette ASGI application with all routes.

Routes:
- /health - Health check
- /sse - Event stream (GET) and request channel (POST /sse/{connection_id})
"""

from __future__ import annotations

import contextlib
import logging
from collections.abc import AsyncIterator

from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware
from starlette.routing import Route

from .backend import BackendInvoker, FabricBackend
from .config import GatewayConfig
from .connections import ConnectionRegistry
from .dispatch import RequestDispatcher
from .routes import health_routes, stream_routes

logger = logging.getLogger(__name__)


def create_app(
    config: GatewayConfig | None = None,
    backend: BackendInvoker | None = None,
) -> Starlette:
    """Create the gateway application.

    Args:
        config: Gateway configuration. Read from the environment if omitted.
        backend: Backend invoker. A ``FabricBackend`` built from ``config``
                 is used (and closed on shutdown) if omitted.

    Returns:
        Configured Starlette application
    """
    config = config or GatewayConfig.from_env()
    fabric_backend = FabricBackend.from_config(config) if backend is None else None
    invoker: BackendInvoker = backend if backend is not None else fabric_backend

    registry = ConnectionRegistry(keepalive_interval=config.keepalive_interval)
    dispatcher = RequestDispatcher(registry, invoker)

    @contextlib.asynccontextmanager
    async def lifespan(app: Starlette) -> AsyncIterator[None]:
        logger.info(f"Gateway ready, backend at {config.api_url}")
        yield
        await dispatcher.shutdown()
        registry.close_all()
        if fabric_backend is not None:
            await fabric_backend.aclose()

    routes: list[Route] = []
    routes.extend(health_routes)
    routes.extend(stream_routes)

    middleware = [
        Middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_methods=["GET", "POST", "OPTIONS"],
            allow_headers=["Content-Type"],
            expose_headers=["X-Connection-Id"],
        ),
    ]

    app = Starlette(routes=routes, middleware=middleware, lifespan=lifespan)
    app.state.config = config
    app.state.registry = registry
    app.state.dispatcher = dispatcher
    return app
