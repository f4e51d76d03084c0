"""Request dispatcher - routes parsed requests to responses.

All transports hand raw request bytes to ``RequestDispatcher.handle``.
Pings and capability requests are answered inline; tool calls run as
independent tasks so a slow backend never holds up other requests.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import assert_never

from .backend import BackendInvoker
from .connections import ConnectionRegistry
from .operations import CATALOG, OperationHandler, build_handlers, capability_descriptor
from .protocol.errors import MalformedRequestError, OperationError, UnknownMessageTypeError
from .protocol.requests import CapabilitiesRequest, PingRequest, ToolCallRequest, parse_request
from .protocol.responses import (
    CapabilitiesResponse,
    ErrorResponse,
    PongResponse,
    ResponseEnvelope,
    ToolResponse,
)

logger = logging.getLogger(__name__)


class RequestDispatcher:
    """Parses requests, runs them, and delivers correlated responses.

    Usage:
        dispatcher = RequestDispatcher(registry, backend)
        await dispatcher.handle(connection_id, body)

    Correlation:
        Every parsed request produces exactly one response carrying the
        request's ``id``. Malformed input produces none.
    """

    def __init__(
        self,
        registry: ConnectionRegistry,
        backend: BackendInvoker,
        handlers: Mapping[str, OperationHandler] | None = None,
    ) -> None:
        self._registry = registry
        self._handlers = handlers if handlers is not None else build_handlers(backend)
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def in_flight(self) -> int:
        """Number of tool calls still running."""
        return len(self._tasks)

    async def handle(self, connection_id: str, raw: bytes | str) -> None:
        """Handle one raw request received for ``connection_id``."""
        try:
            request = parse_request(raw)
        except MalformedRequestError as e:
            logger.warning(f"Dropping malformed request on {connection_id}: {e} raw={raw[:200]!r}")
            return
        except UnknownMessageTypeError as e:
            logger.info(f"Unroutable request on {connection_id}: {e}")
            self._registry.deliver(connection_id, ErrorResponse.protocol_error(e.request_id, str(e)))
            return

        logger.debug(f"Handling {request.type} (id={request.id}) on {connection_id}")

        if isinstance(request, ToolCallRequest):
            task = asyncio.create_task(self._respond_and_deliver(connection_id, request))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)
        else:
            await self._respond_and_deliver(connection_id, request)

    async def respond(
        self, request: PingRequest | CapabilitiesRequest | ToolCallRequest
    ) -> ResponseEnvelope:
        """Produce the response for a parsed request."""
        match request:
            case PingRequest():
                return PongResponse(id=request.id)
            case CapabilitiesRequest():
                return CapabilitiesResponse(id=request.id, capabilities=capability_descriptor())
            case ToolCallRequest():
                return await self.call_tool(request)
            case _:
                assert_never(request)

    async def call_tool(self, request: ToolCallRequest) -> ToolResponse:
        """Run a tool call and wrap its outcome in a ``tool_response``."""
        if request.name not in CATALOG:
            return ToolResponse.failure(request.id, f"Unknown tool: {request.name}")

        handler = self._handlers[request.name]
        try:
            result = await handler.run(dict(request.parameters))
        except OperationError as e:
            logger.info(f"{request.name} (id={request.id}) failed: {e.code} {e.message}")
            return ToolResponse.failure(request.id, e.message, e.code)
        except Exception as e:
            logger.exception(f"Error handling {request.name} (id={request.id})")
            return ToolResponse.failure(request.id, str(e) or "Unknown error")

        return ToolResponse.success(request.id, result)

    async def _respond_and_deliver(
        self,
        connection_id: str,
        request: PingRequest | CapabilitiesRequest | ToolCallRequest,
    ) -> None:
        response = await self.respond(request)
        self._registry.deliver(connection_id, response)

    async def drain(self) -> None:
        """Wait for every in-flight tool call to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def shutdown(self) -> None:
        """Cancel in-flight tool calls and wait for them to unwind."""
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
