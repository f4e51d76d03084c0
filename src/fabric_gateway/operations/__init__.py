"""Operation handlers and their catalog.

Each catalog entry has exactly one handler. Handlers share a single
``get_video_info`` instance for prerequisite resolution.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from ..backend import BackendInvoker
from .base import OperationHandler, PatternOperation
from .catalog import CATALOG, OperationDescriptor, ParameterSpec, capability_descriptor
from .content import (
    CreateArtPrompt,
    CreateSocialMedia,
    ExplainCode,
    ImproveDocumentation,
    SummarizePaper,
    WriteEssay,
)
from .video import (
    AnalyzeClaims,
    ExtractInterestingParts,
    ExtractWisdom,
    GetVideoInfo,
    RateContent,
    SummarizeYouTube,
    TranscribeYouTube,
    VideoInfo,
)


def build_handlers(backend: BackendInvoker) -> Mapping[str, OperationHandler]:
    """Create one handler per catalog operation, keyed by operation name."""
    video_info = GetVideoInfo(backend)
    handlers: list[OperationHandler] = [
        video_info,
        TranscribeYouTube(backend, video_info),
        SummarizeYouTube(backend, video_info),
        ExtractWisdom(backend, video_info),
        AnalyzeClaims(backend, video_info),
        ExtractInterestingParts(backend, video_info),
        RateContent(backend, video_info),
        WriteEssay(backend),
        SummarizePaper(backend),
        CreateArtPrompt(backend),
        ExplainCode(backend),
        ImproveDocumentation(backend),
        CreateSocialMedia(backend),
    ]
    by_name = {handler.name: handler for handler in handlers}

    missing = set(CATALOG) - set(by_name)
    if missing:
        raise RuntimeError(f"No handler for operations: {', '.join(sorted(missing))}")

    return MappingProxyType(by_name)


__all__ = [
    "CATALOG",
    "OperationDescriptor",
    "OperationHandler",
    "ParameterSpec",
    "PatternOperation",
    "VideoInfo",
    "build_handlers",
    "capability_descriptor",
]
