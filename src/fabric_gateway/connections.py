"""Connection registry for open event streams.

Each ``StreamConnection`` owns its outbound frame queue and its
keep-alive task; the registry only maps connection ids to connections.
Responses for a connection that has gone away are dropped.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import re
import uuid
from collections.abc import AsyncIterator

from .protocol.errors import ConnectionExistsError
from .protocol.responses import ResponseEnvelope

logger = logging.getLogger(__name__)

KEEPALIVE_FRAME = ": keep-alive\n\n"

_CONNECTION_ID = re.compile(r"[A-Za-z0-9_.-]{1,64}")


def new_connection_id() -> str:
    """Generate a connection id."""
    return f"conn_{uuid.uuid4().hex[:12]}"


def is_valid_connection_id(connection_id: str) -> bool:
    """Check that a client-chosen id is a plain token safe for headers."""
    return _CONNECTION_ID.fullmatch(connection_id) is not None


class StreamConnection:
    """One open client stream.

    Frames are queued by ``send`` and drained by the transport through
    ``frames``. A keep-alive comment is queued every ``keepalive_interval``
    seconds until the connection is closed.
    """

    def __init__(self, connection_id: str, keepalive_interval: float = 30.0) -> None:
        self.id = connection_id
        self._keepalive_interval = keepalive_interval
        self._queue: asyncio.Queue[str | None] = asyncio.Queue()
        self._keepalive_task: asyncio.Task[None] | None = None
        self._closed = False

    @property
    def is_open(self) -> bool:
        return not self._closed

    def start(self) -> None:
        """Start the keep-alive timer. Must run inside an event loop."""
        if self._keepalive_task is None:
            self._keepalive_task = asyncio.create_task(
                self._keepalive(), name=f"keepalive-{self.id}"
            )

    async def _keepalive(self) -> None:
        while not self._closed:
            await asyncio.sleep(self._keepalive_interval)
            if not self._closed:
                self._queue.put_nowait(KEEPALIVE_FRAME)

    def send(self, frame: str) -> bool:
        """Queue a frame. Returns False if the connection is closed."""
        if self._closed:
            return False
        self._queue.put_nowait(frame)
        return True

    def close(self) -> None:
        """Cancel the keep-alive timer and end the frame stream."""
        if self._closed:
            return
        self._closed = True
        if self._keepalive_task is not None:
            self._keepalive_task.cancel()
        self._queue.put_nowait(None)

    async def wait_closed(self) -> None:
        """Wait for the keep-alive task to finish after ``close``."""
        if self._keepalive_task is not None:
            with contextlib.suppress(asyncio.CancelledError):
                await self._keepalive_task

    async def frames(self) -> AsyncIterator[str]:
        """Yield queued frames until the connection is closed."""
        while True:
            frame = await self._queue.get()
            if frame is None:
                return
            yield frame


class ConnectionRegistry:
    """Tracks open stream connections by id.

    Methods never await, so each one runs atomically on the event loop:
    admit, deliver and retire cannot interleave for the same id.
    """

    def __init__(self, keepalive_interval: float = 30.0) -> None:
        self._keepalive_interval = keepalive_interval
        self._connections: dict[str, StreamConnection] = {}

    def __len__(self) -> int:
        return len(self._connections)

    def __contains__(self, connection_id: object) -> bool:
        return connection_id in self._connections

    def get(self, connection_id: str) -> StreamConnection | None:
        return self._connections.get(connection_id)

    def admit(self, connection_id: str | None = None) -> StreamConnection:
        """Register a new stream and start its keep-alive.

        Args:
            connection_id: Client-chosen id, or None to generate one

        Raises:
            ConnectionExistsError: A stream with this id is already open
        """
        connection_id = connection_id or new_connection_id()
        if connection_id in self._connections:
            raise ConnectionExistsError(connection_id)

        connection = StreamConnection(connection_id, self._keepalive_interval)
        connection.start()
        self._connections[connection_id] = connection
        logger.info(f"Stream opened: {connection_id} ({len(self._connections)} open)")
        return connection

    def deliver(self, connection_id: str, response: ResponseEnvelope) -> bool:
        """Write a response to a connection's stream.

        Returns:
            True if the frame was queued, False if the connection is gone
        """
        connection = self._connections.get(connection_id)
        if connection is None or not connection.send(response.to_frame()):
            logger.debug(
                f"Dropping {response.type} (id={response.id}) for closed connection {connection_id}"
            )
            return False
        return True

    def retire(self, connection_id: str) -> None:
        """Close a connection and forget it. Unknown ids are ignored."""
        connection = self._connections.pop(connection_id, None)
        if connection is None:
            return
        connection.close()
        logger.info(f"Stream closed: {connection_id} ({len(self._connections)} open)")

    def close_all(self) -> None:
        """Retire every open connection."""
        for connection_id in list(self._connections):
            self.retire(connection_id)
