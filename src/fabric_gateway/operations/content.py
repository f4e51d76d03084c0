"""Content operations: text in, pattern output back."""

from __future__ import annotations

from typing import Any

from .base import PatternOperation, compact


class WriteEssay(PatternOperation):
    name = "write_essay"

    def backend_params(self, params: dict[str, Any]) -> dict[str, Any]:
        return compact(topic=params["essayTopic"], userVoice=params.get("userVoice"))


class SummarizePaper(PatternOperation):
    """Summarize a paper given by URL, by text, or both."""

    name = "summarize_paper"

    def backend_params(self, params: dict[str, Any]) -> dict[str, Any]:
        return compact(paperUrl=params.get("paperUrl"), paperContent=params.get("content"))


class CreateArtPrompt(PatternOperation):
    name = "create_art_prompt"

    def backend_params(self, params: dict[str, Any]) -> dict[str, Any]:
        return {"content": params["content"]}


class ExplainCode(PatternOperation):
    name = "explain_code"

    def backend_params(self, params: dict[str, Any]) -> dict[str, Any]:
        return {"codeSnippet": params["codeSnippet"]}


class ImproveDocumentation(PatternOperation):
    name = "improve_documentation"

    def backend_params(self, params: dict[str, Any]) -> dict[str, Any]:
        return {"documentationText": params["documentationText"]}


class CreateSocialMedia(PatternOperation):
    name = "create_social_media"

    def backend_params(self, params: dict[str, Any]) -> dict[str, Any]:
        return compact(content=params["content"], platforms=params.get("platforms"))
