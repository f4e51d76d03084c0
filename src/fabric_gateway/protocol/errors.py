"""Error taxonomy for the gateway protocol.

Handlers raise these; the dispatcher is the only place they are turned
into response envelopes.
"""

from __future__ import annotations


class ErrorType:
    """Values used in the ``error.type`` field of response frames."""

    PROTOCOL_ERROR = "protocol_error"
    INTERNAL_ERROR = "internal_error"


class ErrorCode:
    """Operation error codes surfaced in ``tool_response`` errors."""

    # Validation
    INVALID_REQUEST = "INVALID_REQUEST"
    INVALID_URL = "INVALID_URL"
    INVALID_VIDEO_ID = "INVALID_VIDEO_ID"
    INVALID_CONTENT = "INVALID_CONTENT"
    INVALID_TOPIC = "INVALID_TOPIC"
    INVALID_PAPER = "INVALID_PAPER"
    INVALID_CODE = "INVALID_CODE"
    INVALID_DOCUMENTATION = "INVALID_DOCUMENTATION"

    # Backend failures
    VIDEO_INFO_ERROR = "VIDEO_INFO_ERROR"
    TRANSCRIPTION_ERROR = "TRANSCRIPTION_ERROR"
    SUMMARIZATION_ERROR = "SUMMARIZATION_ERROR"
    WISDOM_EXTRACTION_ERROR = "WISDOM_EXTRACTION_ERROR"
    CLAIMS_ANALYSIS_ERROR = "CLAIMS_ANALYSIS_ERROR"
    EXTRACTION_ERROR = "EXTRACTION_ERROR"
    RATING_ERROR = "RATING_ERROR"
    ESSAY_ERROR = "ESSAY_ERROR"
    SUMMARY_ERROR = "SUMMARY_ERROR"
    PROMPT_ERROR = "PROMPT_ERROR"
    EXPLANATION_ERROR = "EXPLANATION_ERROR"
    DOCUMENTATION_ERROR = "DOCUMENTATION_ERROR"
    SOCIAL_MEDIA_ERROR = "SOCIAL_MEDIA_ERROR"


class GatewayError(Exception):
    """Base class for gateway errors."""


class MalformedRequestError(GatewayError):
    """Raw request bytes could not be parsed into a request envelope.

    Never answered on the stream; the input is logged and dropped.
    """


class UnknownMessageTypeError(GatewayError):
    """A well-formed JSON object declared a message type we do not route."""

    def __init__(self, message_type: object, request_id: str | None) -> None:
        super().__init__(f"Unknown message type: {message_type}")
        self.message_type = message_type
        self.request_id = request_id


class OperationError(GatewayError):
    """An operation failed with a client-visible code.

    Covers both validation failures (backend never called) and backend
    failures mapped to an operation-specific code.
    """

    def __init__(self, code: str, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message

    def __repr__(self) -> str:
        return f"OperationError(code={self.code!r}, message={self.message!r})"


class ConnectionExistsError(GatewayError):
    """A stream with the requested connection id is already open."""

    def __init__(self, connection_id: str) -> None:
        super().__init__(f"Connection already open: {connection_id}")
        self.connection_id = connection_id
