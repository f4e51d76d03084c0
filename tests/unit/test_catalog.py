"""Unit tests for the operation catalog and capability descriptor."""

from __future__ import annotations

import json

import pytest

from fabric_gateway import __version__
from fabric_gateway.operations import CATALOG, capability_descriptor
from fabric_gateway.operations.catalog import CONTENT_TYPES, ParameterSpec

OPERATIONS = [
    "get_video_info",
    "transcribe_youtube",
    "summarize_youtube",
    "extract_wisdom",
    "analyze_claims",
    "extract_interesting_parts",
    "rate_content",
    "write_essay",
    "summarize_paper",
    "create_art_prompt",
    "explain_code",
    "improve_documentation",
    "create_social_media",
]


# =============================================================================
# Catalog Tests
# =============================================================================


class TestCatalog:
    """Tests for the static operation catalog."""

    def test_contains_every_operation(self) -> None:
        """Catalog lists the operations in advertised order."""
        assert list(CATALOG) == OPERATIONS

    def test_is_read_only(self) -> None:
        """Catalog cannot be modified at runtime."""
        with pytest.raises(TypeError):
            CATALOG["write_essay"] = CATALOG["explain_code"]  # type: ignore[index]

    @pytest.mark.parametrize("name", OPERATIONS)
    def test_descriptor_is_consistent(self, name: str) -> None:
        """Every descriptor has codes and its required names are declared."""
        descriptor = CATALOG[name]

        assert descriptor.name == name
        assert descriptor.invalid_code.startswith("INVALID_")
        assert descriptor.failure_code.endswith("_ERROR")
        for alternative in descriptor.alternatives:
            assert descriptor.parameter(alternative) is not None

    def test_summarize_youtube_uses_summarize_pattern(self) -> None:
        """Operation and backend pattern names may differ."""
        assert CATALOG["summarize_youtube"].pattern == "summarize"

    def test_required_and_optional(self) -> None:
        """Descriptor splits parameters by requiredness."""
        descriptor = CATALOG["write_essay"]

        assert descriptor.required == ("essayTopic",)
        assert descriptor.optional == ("userVoice",)
        assert descriptor.parameter("missing") is None


# =============================================================================
# Schema Tests
# =============================================================================


class TestInputSchema:
    """Tests for rendered parameter schemas."""

    def test_video_schema(self) -> None:
        """Video operations require a YouTube URL."""
        schema = CATALOG["summarize_youtube"].input_schema()

        assert schema == {
            "type": "object",
            "properties": {
                "youtubeUrl": {"type": "string", "description": "The URL of the YouTube video"},
            },
            "required": ["youtubeUrl"],
        }

    def test_alternatives_render_any_of(self) -> None:
        """Either-or inputs are expressed with anyOf."""
        schema = CATALOG["rate_content"].input_schema()

        assert schema["required"] == []
        assert schema["anyOf"] == [{"required": ["youtubeUrl"]}, {"required": ["content"]}]

    def test_choices_render_enum(self) -> None:
        """Constrained parameters list their allowed values."""
        properties = CATALOG["rate_content"].input_schema()["properties"]

        assert properties["contentType"]["enum"] == list(CONTENT_TYPES)

    def test_array_items(self) -> None:
        """Array parameters declare string items."""
        spec = ParameterSpec("platforms", "array", "Platforms to target")

        assert spec.schema() == {
            "type": "array",
            "description": "Platforms to target",
            "items": {"type": "string"},
        }

    def test_transcribe_flags(self) -> None:
        """Transcription options are booleans."""
        properties = CATALOG["transcribe_youtube"].input_schema()["properties"]

        assert properties["includeSummary"]["type"] == "boolean"
        assert properties["includeKeyPoints"]["type"] == "boolean"


# =============================================================================
# Capability Descriptor Tests
# =============================================================================


class TestCapabilityDescriptor:
    """Tests for the descriptor returned to clients."""

    def test_server_info(self) -> None:
        descriptor = capability_descriptor()

        assert descriptor["schema_version"] == "v1"
        assert descriptor["server_info"]["name"] == "fabric-mcp"
        assert descriptor["server_info"]["version"] == __version__

    def test_lists_every_tool(self) -> None:
        tools = capability_descriptor()["tools"]

        assert [tool["name"] for tool in tools] == OPERATIONS
        for tool in tools:
            assert set(tool) == {"name", "description", "input_schema"}

    def test_byte_identical_across_calls(self) -> None:
        """Repeated discovery yields the same serialized descriptor."""
        first = json.dumps(capability_descriptor())
        second = json.dumps(capability_descriptor())

        assert first == second

    def test_callers_cannot_corrupt_catalog(self) -> None:
        """Mutating a returned descriptor does not affect later ones."""
        descriptor = capability_descriptor()
        descriptor["tools"][0]["input_schema"]["required"].append("extra")
        descriptor["tools"].clear()

        fresh = capability_descriptor()
        assert len(fresh["tools"]) == len(OPERATIONS)
        assert fresh["tools"][0]["input_schema"]["required"] == ["youtubeUrl"]
