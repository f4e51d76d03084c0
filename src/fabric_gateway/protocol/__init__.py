"""Transport-agnostic protocol layer.

Defines the request/response envelopes exchanged with clients and the
error taxonomy shared by every layer above it.

Key concepts:
- Requests: client messages posted on a stream's request channel
- Responses: frames pushed on the stream, carrying the request's ``id``
- Correlation: every parsed request yields exactly one response
"""

from .errors import (
    ConnectionExistsError,
    ErrorCode,
    ErrorType,
    GatewayError,
    MalformedRequestError,
    OperationError,
    UnknownMessageTypeError,
)
from .requests import (
    CapabilitiesRequest,
    PingRequest,
    RequestEnvelope,
    RequestType,
    ToolCallRequest,
    parse_request,
)
from .responses import (
    CapabilitiesResponse,
    ErrorInfo,
    ErrorResponse,
    PongResponse,
    ResponseEnvelope,
    ToolResponse,
)

__all__ = [
    # Errors
    "ConnectionExistsError",
    "ErrorCode",
    "ErrorType",
    "GatewayError",
    "MalformedRequestError",
    "OperationError",
    "UnknownMessageTypeError",
    # Requests
    "CapabilitiesRequest",
    "PingRequest",
    "RequestEnvelope",
    "RequestType",
    "ToolCallRequest",
    "parse_request",
    # Responses
    "CapabilitiesResponse",
    "ErrorInfo",
    "ErrorResponse",
    "PongResponse",
    "ResponseEnvelope",
    "ToolResponse",
]
