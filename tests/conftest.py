"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import asyncio
import json
from typing import Any

import pytest

from fabric_gateway.backend import BackendError, PatternResult
from fabric_gateway.connections import ConnectionRegistry, StreamConnection
from fabric_gateway.dispatch import RequestDispatcher

VIDEO_URL = "https://www.youtube.com/watch?v=dQw4w9WgXcQ"
VIDEO_ID = "dQw4w9WgXcQ"

VIDEO_METADATA = {
    "title": "Tidal Power Explained",
    "description": "How the tides turn turbines",
    "channelTitle": "Energy Channel",
    "publishedAt": "2024-01-15T10:30:00Z",
    "duration": "PT10M30S",
}


# =============================================================================
# Backend Test Double
# =============================================================================


class RecordingBackend:
    """Backend that records every invocation instead of calling a server.

    By default each pattern returns ``"<pattern> output"`` with the input
    echoed under ``metadata["input"]``. ``get_video_info`` returns
    ``VIDEO_METADATA``. Override per pattern with ``results`` or make a
    pattern fail with ``failures``.
    """

    def __init__(self, delay: float = 0.0) -> None:
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.results: dict[str, PatternResult] = {
            "get_video_info": PatternResult(
                pattern_id="get_video_info",
                output="video info",
                metadata=dict(VIDEO_METADATA),
            ),
        }
        self.failures: dict[str, Exception] = {}
        self.delay = delay

    async def invoke(self, operation: str, params: dict[str, Any]) -> PatternResult:
        self.calls.append((operation, dict(params)))
        if self.delay:
            await asyncio.sleep(self.delay)
        if operation in self.failures:
            raise self.failures[operation]
        if operation in self.results:
            return self.results[operation]
        return PatternResult(
            pattern_id=operation,
            output=f"{operation} output",
            metadata={"input": dict(params)},
        )

    def fail(self, operation: str, message: str = "backend unavailable") -> None:
        self.failures[operation] = BackendError(message)

    @property
    def operations(self) -> list[str]:
        return [operation for operation, _ in self.calls]


@pytest.fixture
def backend() -> RecordingBackend:
    return RecordingBackend()


@pytest.fixture
def registry() -> ConnectionRegistry:
    return ConnectionRegistry(keepalive_interval=30.0)


@pytest.fixture
def dispatcher(registry: ConnectionRegistry, backend: RecordingBackend) -> RequestDispatcher:
    return RequestDispatcher(registry, backend)


# =============================================================================
# Helpers
# =============================================================================


async def read_responses(registry: ConnectionRegistry, connection_id: str) -> list[dict]:
    """Retire a connection and return the responses queued on it.

    Keep-alive comments are skipped; each ``data:`` frame is decoded.
    """
    connection = registry.get(connection_id)
    assert connection is not None, f"connection {connection_id} is not open"
    registry.retire(connection_id)
    return await read_frames(connection)


async def read_frames(connection: StreamConnection) -> list[dict]:
    """Decode the ``data:`` frames of an already closed connection."""
    responses = []
    async for frame in connection.frames():
        if frame.startswith("data: "):
            assert frame.endswith("\n\n")
            responses.append(json.loads(frame[len("data: ") :]))
    return responses
