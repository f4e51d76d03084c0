"""Response definitions for the protocol layer.

Responses are written to the client's stream as ``data: <json>`` frames.
Every response carries the ``id`` of the request that produced it, or
null when the request had none. The server never invents an id.
"""

from __future__ import annotations

import json
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict

from .errors import ErrorType


class ErrorInfo(BaseModel):
    """Error object carried by failed responses."""

    model_config = ConfigDict(frozen=True)

    message: str
    type: str


class BaseResponse(BaseModel):
    """Fields shared by every response envelope."""

    model_config = ConfigDict(frozen=True)

    type: str
    id: str | None = None

    def to_wire(self) -> dict[str, Any]:
        """Serialize to the JSON payload of a stream frame.

        ``type`` and ``id`` always lead; ``id`` is kept even when null,
        every other unset field is omitted.
        """
        data = self.model_dump(mode="json", exclude_none=True)
        payload: dict[str, Any] = {"type": data.pop("type"), "id": self.id}
        data.pop("id", None)
        payload.update(data)
        return payload

    def to_frame(self) -> str:
        """Serialize to a complete SSE data frame."""
        return f"data: {json.dumps(self.to_wire())}\n\n"


class PongResponse(BaseResponse):
    """Answer to ``ping``."""

    type: Literal["pong"] = "pong"


class CapabilitiesResponse(BaseResponse):
    """Answer to ``capabilities``: the full capability descriptor."""

    type: Literal["capabilities_response"] = "capabilities_response"
    capabilities: dict[str, Any]


class ToolResponse(BaseResponse):
    """Terminal answer to a ``tool_call``.

    Example (success):
        {"type": "tool_response", "id": "7", "status": "success",
         "result": {"patternResult": {"patternId": "write_essay", "output": "..."}}}

    Example (error):
        {"type": "tool_response", "id": "7", "status": "error",
         "error": {"message": "Essay topic is required", "type": "INVALID_TOPIC"}}
    """

    type: Literal["tool_response"] = "tool_response"
    status: Literal["success", "error"]
    result: dict[str, Any] | None = None
    error: ErrorInfo | None = None

    def is_error(self) -> bool:
        """Check if this response reports a failure."""
        return self.status == "error"

    @classmethod
    def success(cls, request_id: str | None, result: dict[str, Any]) -> ToolResponse:
        """Create a successful tool response."""
        return cls(id=request_id, status="success", result=result)

    @classmethod
    def failure(
        cls,
        request_id: str | None,
        message: str,
        error_type: str = ErrorType.INTERNAL_ERROR,
    ) -> ToolResponse:
        """Create a failed tool response."""
        return cls(
            id=request_id,
            status="error",
            error=ErrorInfo(message=message, type=error_type),
        )


class ErrorResponse(BaseResponse):
    """Answer to a request that could not be routed."""

    type: Literal["error"] = "error"
    error: ErrorInfo

    @classmethod
    def protocol_error(cls, request_id: str | None, message: str) -> ErrorResponse:
        """Create a protocol error response."""
        return cls(
            id=request_id,
            error=ErrorInfo(message=message, type=ErrorType.PROTOCOL_ERROR),
        )


ResponseEnvelope = PongResponse | CapabilitiesResponse | ToolResponse | ErrorResponse
