"""Operation catalog.

Static descriptors for every supported operation. The catalog answers
capability discovery and drives parameter validation. It is built once
at import time and exposed read-only.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from .. import __version__
from ..protocol.errors import ErrorCode

SCHEMA_VERSION = "v1"
SERVER_NAME = "fabric-mcp"
SERVER_DESCRIPTION = "Process YouTube videos and various content types using Fabric patterns"

CONTENT_TYPES = ("video", "article", "paper", "podcast", "code")


@dataclass(frozen=True)
class ParameterSpec:
    """One declared operation parameter."""

    name: str
    type: str  # JSON schema type: "string", "boolean" or "array"
    description: str
    required: bool = False
    choices: tuple[str, ...] = ()

    def schema(self) -> dict[str, Any]:
        """Render the JSON schema for this parameter."""
        schema: dict[str, Any] = {"type": self.type, "description": self.description}
        if self.type == "array":
            schema["items"] = {"type": "string"}
        if self.choices:
            schema["enum"] = list(self.choices)
        return schema


@dataclass(frozen=True)
class OperationDescriptor:
    """Catalog entry for one operation.

    ``alternatives`` names mutually exclusive primary inputs: at least one
    of them must be present. ``invalid_code`` is reported when the primary
    input is missing or malformed; ``failure_code`` when the backend fails.
    """

    name: str
    pattern: str
    description: str
    parameters: tuple[ParameterSpec, ...]
    invalid_code: str
    invalid_message: str
    failure_code: str
    failure_message: str
    alternatives: tuple[str, ...] = ()

    @property
    def required(self) -> tuple[str, ...]:
        return tuple(p.name for p in self.parameters if p.required)

    @property
    def optional(self) -> tuple[str, ...]:
        return tuple(p.name for p in self.parameters if not p.required)

    def parameter(self, name: str) -> ParameterSpec | None:
        for spec in self.parameters:
            if spec.name == name:
                return spec
        return None

    def input_schema(self) -> dict[str, Any]:
        """Render the JSON schema describing this operation's parameters."""
        schema: dict[str, Any] = {
            "type": "object",
            "properties": {p.name: p.schema() for p in self.parameters},
            "required": list(self.required),
        }
        if self.alternatives:
            schema["anyOf"] = [{"required": [name]} for name in self.alternatives]
        return schema

    def to_capability(self) -> dict[str, Any]:
        """Render the capability entry advertised to clients."""
        return {
            "name": self.name,
            "description": self.description,
            "input_schema": self.input_schema(),
        }


# =============================================================================
# Descriptors
# =============================================================================

_YOUTUBE_URL = ParameterSpec(
    "youtubeUrl", "string", "The URL of the YouTube video", required=True
)
_OPTIONAL_YOUTUBE_URL = ParameterSpec("youtubeUrl", "string", "The URL of the YouTube video")


def _video_operation(
    name: str,
    pattern: str,
    description: str,
    failure_code: str,
    failure_message: str,
    extra: tuple[ParameterSpec, ...] = (),
) -> OperationDescriptor:
    return OperationDescriptor(
        name=name,
        pattern=pattern,
        description=description,
        parameters=(_YOUTUBE_URL, *extra),
        invalid_code=ErrorCode.INVALID_URL,
        invalid_message="Invalid YouTube URL",
        failure_code=failure_code,
        failure_message=failure_message,
    )


_DESCRIPTORS: tuple[OperationDescriptor, ...] = (
    OperationDescriptor(
        name="get_video_info",
        pattern="get_video_info",
        description="Get information about a YouTube video",
        parameters=(_YOUTUBE_URL,),
        invalid_code=ErrorCode.INVALID_URL,
        invalid_message="Invalid YouTube URL",
        failure_code=ErrorCode.VIDEO_INFO_ERROR,
        failure_message="Error retrieving video information",
    ),
    _video_operation(
        "transcribe_youtube",
        "transcribe_youtube",
        "Transcribe a YouTube video",
        ErrorCode.TRANSCRIPTION_ERROR,
        "Error transcribing YouTube video",
        extra=(
            ParameterSpec("includeSummary", "boolean", "Include a summary of the transcript"),
            ParameterSpec("includeKeyPoints", "boolean", "Include key points from the transcript"),
        ),
    ),
    _video_operation(
        "summarize_youtube",
        "summarize",
        "Summarize a YouTube video",
        ErrorCode.SUMMARIZATION_ERROR,
        "Error summarizing YouTube video",
    ),
    _video_operation(
        "extract_wisdom",
        "extract_wisdom",
        "Extract wisdom from a YouTube video",
        ErrorCode.WISDOM_EXTRACTION_ERROR,
        "Error extracting wisdom from YouTube video",
    ),
    _video_operation(
        "analyze_claims",
        "analyze_claims",
        "Analyze the claims made in a YouTube video",
        ErrorCode.CLAIMS_ANALYSIS_ERROR,
        "Error analyzing claims in YouTube video",
    ),
    _video_operation(
        "extract_interesting_parts",
        "extract_interesting_parts",
        "Extract the most interesting parts of a YouTube video",
        ErrorCode.EXTRACTION_ERROR,
        "Error extracting interesting parts from YouTube video",
    ),
    OperationDescriptor(
        name="rate_content",
        pattern="rate_content",
        description="Rate the quality of a YouTube video or a piece of content",
        parameters=(
            _OPTIONAL_YOUTUBE_URL,
            ParameterSpec("content", "string", "The content to rate"),
            ParameterSpec(
                "contentType",
                "string",
                "The kind of content being rated",
                choices=CONTENT_TYPES,
            ),
        ),
        invalid_code=ErrorCode.INVALID_CONTENT,
        invalid_message="Either youtubeUrl or content must be provided",
        failure_code=ErrorCode.RATING_ERROR,
        failure_message="Error rating content",
        alternatives=("youtubeUrl", "content"),
    ),
    OperationDescriptor(
        name="write_essay",
        pattern="write_essay",
        description="Write an essay on a topic",
        parameters=(
            ParameterSpec("essayTopic", "string", "The topic of the essay", required=True),
            ParameterSpec("userVoice", "string", "A writing voice to imitate"),
        ),
        invalid_code=ErrorCode.INVALID_TOPIC,
        invalid_message="Essay topic is required",
        failure_code=ErrorCode.ESSAY_ERROR,
        failure_message="Error writing essay",
    ),
    OperationDescriptor(
        name="summarize_paper",
        pattern="summarize_paper",
        description="Summarize an academic paper",
        parameters=(
            ParameterSpec("paperUrl", "string", "The URL of the paper"),
            ParameterSpec("content", "string", "The text of the paper"),
        ),
        invalid_code=ErrorCode.INVALID_PAPER,
        invalid_message="Either paperUrl or content must be provided",
        failure_code=ErrorCode.SUMMARY_ERROR,
        failure_message="Error summarizing paper",
        alternatives=("paperUrl", "content"),
    ),
    OperationDescriptor(
        name="create_art_prompt",
        pattern="create_art_prompt",
        description="Create an AI art prompt for a piece of writing",
        parameters=(ParameterSpec("content", "string", "The writing to illustrate", required=True),),
        invalid_code=ErrorCode.INVALID_CONTENT,
        invalid_message="Content is required",
        failure_code=ErrorCode.PROMPT_ERROR,
        failure_message="Error creating art prompt",
    ),
    OperationDescriptor(
        name="explain_code",
        pattern="explain_code",
        description="Explain a code snippet",
        parameters=(ParameterSpec("codeSnippet", "string", "The code to explain", required=True),),
        invalid_code=ErrorCode.INVALID_CODE,
        invalid_message="Code snippet is required",
        failure_code=ErrorCode.EXPLANATION_ERROR,
        failure_message="Error explaining code",
    ),
    OperationDescriptor(
        name="improve_documentation",
        pattern="improve_documentation",
        description="Improve a piece of documentation",
        parameters=(
            ParameterSpec(
                "documentationText", "string", "The documentation to improve", required=True
            ),
        ),
        invalid_code=ErrorCode.INVALID_DOCUMENTATION,
        invalid_message="Documentation text is required",
        failure_code=ErrorCode.DOCUMENTATION_ERROR,
        failure_message="Error improving documentation",
    ),
    OperationDescriptor(
        name="create_social_media",
        pattern="create_social_media",
        description="Create social media posts from content",
        parameters=(
            ParameterSpec("content", "string", "The content to promote", required=True),
            ParameterSpec("platforms", "array", "Platforms to target"),
        ),
        invalid_code=ErrorCode.INVALID_CONTENT,
        invalid_message="Content is required",
        failure_code=ErrorCode.SOCIAL_MEDIA_ERROR,
        failure_message="Error creating social media posts",
    ),
)

CATALOG: Mapping[str, OperationDescriptor] = MappingProxyType({d.name: d for d in _DESCRIPTORS})


def capability_descriptor() -> dict[str, Any]:
    """Build the descriptor returned by ``capabilities_response``.

    The catalog is immutable, so repeated calls produce equal output.
    """
    return {
        "schema_version": SCHEMA_VERSION,
        "server_info": {
            "name": SERVER_NAME,
            "version": __version__,
            "description": SERVER_DESCRIPTION,
        },
        "tools": [descriptor.to_capability() for descriptor in CATALOG.values()],
    }
