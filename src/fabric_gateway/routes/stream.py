"""Event stream and request channel endpoints.

- GET /sse - open a stream; responses arrive as ``data: <json>`` frames
- POST /sse/{connection_id} - send a request to be answered on that stream

The connection id is returned in the ``X-Connection-Id`` header and in
the stream's first (comment) frame. Clients may choose it up front with
``GET /sse?connection_id=<id>``.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator

from starlette.requests import Request
from starlette.responses import JSONResponse, Response, StreamingResponse
from starlette.routing import Route
from starlette.types import Receive, Scope, Send

from ..connections import ConnectionRegistry, StreamConnection, is_valid_connection_id
from ..dispatch import RequestDispatcher
from ..protocol.errors import ConnectionExistsError

logger = logging.getLogger(__name__)


class ConnectionStreamResponse(StreamingResponse):
    """Event stream for one registered connection.

    The connection is retired when the response ends for any reason,
    including a client that leaves before the first frame is pulled.
    """

    def __init__(self, registry: ConnectionRegistry, connection: StreamConnection) -> None:
        self._registry = registry
        self._connection = connection
        super().__init__(
            self._frames(),
            media_type="text/event-stream",
            headers={
                "Cache-Control": "no-cache",
                "Connection": "keep-alive",
                "X-Accel-Buffering": "no",  # Disable nginx buffering
                "X-Connection-Id": connection.id,
            },
        )

    async def _frames(self) -> AsyncIterator[str]:
        yield f": connected {self._connection.id}\n\n"
        async for frame in self._connection.frames():
            yield frame

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        try:
            await super().__call__(scope, receive, send)
        finally:
            # The id may already belong to a newer stream after close_all
            if self._registry.get(self._connection.id) is self._connection:
                self._registry.retire(self._connection.id)


async def open_stream(request: Request) -> Response:
    """Open an event stream for one client."""
    registry: ConnectionRegistry = request.app.state.registry
    connection_id = request.query_params.get("connection_id") or None

    if connection_id is not None and not is_valid_connection_id(connection_id):
        return JSONResponse(
            {"error": "connection_id must be 1-64 letters, digits, '_', '.' or '-'"},
            status_code=400,
        )

    try:
        connection = registry.admit(connection_id)
    except ConnectionExistsError as e:
        return JSONResponse({"error": str(e)}, status_code=409)

    return ConnectionStreamResponse(registry, connection)


async def post_request(request: Request) -> JSONResponse:
    """Accept a request for an open stream.

    The answer, if any, is written to the stream. A body that cannot be
    parsed is still accepted here and silently dropped by the dispatcher.
    """
    registry: ConnectionRegistry = request.app.state.registry
    dispatcher: RequestDispatcher = request.app.state.dispatcher
    connection_id = request.path_params["connection_id"]

    if connection_id not in registry:
        return JSONResponse({"error": f"Connection not found: {connection_id}"}, status_code=404)

    body = await request.body()
    await dispatcher.handle(connection_id, body)
    return JSONResponse({"accepted": True}, status_code=202)


stream_routes = [
    Route("/sse", open_stream, methods=["GET"]),
    Route("/sse/{connection_id}", post_request, methods=["POST"]),
]
