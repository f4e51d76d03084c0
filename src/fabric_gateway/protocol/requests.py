"""Request definitions for the protocol layer.

Requests are messages from clients posted on the request channel of an
open stream. Each request may carry an ``id`` that the server copies
verbatim onto its response.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

from .errors import MalformedRequestError, UnknownMessageTypeError


class RequestType(str, Enum):
    """All supported request message types."""

    PING = "ping"
    CAPABILITIES = "capabilities"
    TOOL_CALL = "tool_call"


class BaseRequest(BaseModel):
    """Fields shared by every request envelope."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str | None = None


class PingRequest(BaseRequest):
    """Liveness probe, answered with ``pong``."""

    type: Literal["ping"] = "ping"


class CapabilitiesRequest(BaseRequest):
    """Capability discovery, answered with ``capabilities_response``."""

    type: Literal["capabilities"] = "capabilities"


class ToolCallRequest(BaseRequest):
    """Invocation of a named operation.

    Example:
        {
            "type": "tool_call",
            "id": "42",
            "name": "write_essay",
            "parameters": {"essayTopic": "tidal power"}
        }
    """

    type: Literal["tool_call"] = "tool_call"
    name: str | None = None
    parameters: dict[str, Any] = Field(default_factory=dict)

    @field_validator("parameters", mode="before")
    @classmethod
    def _null_parameters(cls, value: Any) -> Any:
        return {} if value is None else value

    def get_param(self, key: str, default: Any = None) -> Any:
        """Get a parameter with optional default."""
        return self.parameters.get(key, default)


RequestEnvelope = Annotated[
    PingRequest | CapabilitiesRequest | ToolCallRequest,
    Field(discriminator="type"),
]

_envelope_adapter: TypeAdapter[PingRequest | CapabilitiesRequest | ToolCallRequest] = TypeAdapter(
    RequestEnvelope
)

_KNOWN_TYPES = frozenset(t.value for t in RequestType)


def parse_request(raw: bytes | str) -> PingRequest | CapabilitiesRequest | ToolCallRequest:
    """Parse raw request bytes into a request envelope.

    Raises:
        MalformedRequestError: The input is not a JSON object of the
            expected shape. Such input is never answered.
        UnknownMessageTypeError: The input is a JSON object whose ``type``
            is not routable. Answered with a protocol error.
    """
    try:
        data = json.loads(raw)
    except ValueError as e:
        raise MalformedRequestError(f"Invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise MalformedRequestError(f"Expected a JSON object, got {type(data).__name__}")

    request_id = data.get("id")
    if request_id is not None and not isinstance(request_id, str):
        raise MalformedRequestError(f"Request id must be a string, got {type(request_id).__name__}")

    message_type = data.get("type")
    if not isinstance(message_type, str) or message_type not in _KNOWN_TYPES:
        raise UnknownMessageTypeError(message_type, request_id)

    try:
        return _envelope_adapter.validate_python(data)
    except ValidationError as e:
        raise MalformedRequestError(f"Invalid {message_type} request: {e}") from e
