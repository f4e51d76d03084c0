"""YouTube video operations.

Every operation here except ``get_video_info`` first resolves the video's
info by running ``get_video_info``. A failure there is returned as-is.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..backend import BackendInvoker
from ..protocol.errors import ErrorCode, OperationError
from .base import OperationHandler, compact, is_present
from .youtube import extract_video_id, format_youtube_url, is_valid_youtube_url, thumbnail_url


class WireModel(BaseModel):
    """Base for result payloads serialized with camelCase names."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class VideoInfo(WireModel):
    """Canonical information about a YouTube video."""

    video_id: str = Field(alias="videoId")
    title: str = ""
    description: str = ""
    channel_title: str = Field(default="", alias="channelTitle")
    published_at: str = Field(default="", alias="publishedAt")
    thumbnail_url: str = Field(alias="thumbnailUrl")
    duration: str = ""


class TranscriptionSegment(WireModel):
    start: float
    end: float
    text: str
    speaker: str | None = None


class Transcription(WireModel):
    """Transcript of a video, optionally with summary and key points."""

    text: str
    segments: list[TranscriptionSegment] = Field(default_factory=list)
    summary: str | None = None
    key_points: list[str] | None = Field(default=None, alias="keyPoints")


class YouTubeOperation(OperationHandler):
    """An operation whose primary input is a YouTube URL."""

    url_param = "youtubeUrl"

    def validate(self, params: dict[str, Any]) -> None:
        super().validate(params)
        if not is_valid_youtube_url(params.get(self.url_param)):
            raise self.invalid()


class GetVideoInfo(YouTubeOperation):
    """Resolve a YouTube URL to its video info."""

    name = "get_video_info"

    async def execute(self, params: dict[str, Any]) -> dict[str, Any]:
        video_info = await self.resolve(params[self.url_param])
        return {"videoInfo": video_info.to_wire()}

    async def resolve(self, url: str) -> VideoInfo:
        """Extract the video id and fetch its metadata from the backend."""
        video_id = extract_video_id(url)
        if not video_id:
            raise OperationError(ErrorCode.INVALID_VIDEO_ID, "Could not extract video ID from URL")

        result = await self.invoke(
            {"youtubeUrl": format_youtube_url(video_id), "videoId": video_id}
        )
        metadata = result.metadata or {}
        return VideoInfo(
            video_id=video_id,
            title=str(metadata.get("title", "")),
            description=str(metadata.get("description", "")),
            channel_title=str(metadata.get("channelTitle", "")),
            published_at=str(metadata.get("publishedAt", "")),
            thumbnail_url=thumbnail_url(video_id),
            duration=str(metadata.get("duration", "")),
        )


class VideoOperation(YouTubeOperation):
    """A pattern applied to a YouTube video after resolving its info."""

    def __init__(self, backend: BackendInvoker, video_info: GetVideoInfo | None = None) -> None:
        super().__init__(backend)
        self._video_info = video_info or GetVideoInfo(backend)

    async def execute(self, params: dict[str, Any]) -> dict[str, Any]:
        url = params[self.url_param]
        video_info = await self._video_info.resolve(url)
        result = await self.invoke({"youtubeUrl": url})
        return {"videoInfo": video_info.to_wire(), "patternResult": result.to_wire()}


class TranscribeYouTube(VideoOperation):
    name = "transcribe_youtube"

    async def execute(self, params: dict[str, Any]) -> dict[str, Any]:
        url = params[self.url_param]
        video_info = await self._video_info.resolve(url)
        result = await self.invoke({"youtubeUrl": url})

        metadata = result.metadata or {}
        try:
            transcription = Transcription(
                text=str(result.output),
                segments=metadata.get("segments") or [],
                summary=metadata.get("summary") if params.get("includeSummary") else None,
                key_points=metadata.get("keyPoints") if params.get("includeKeyPoints") else None,
            )
        except ValidationError as e:
            raise OperationError(
                self.descriptor.failure_code,
                f"{self.descriptor.failure_message}: malformed transcript "
                f"({e.error_count()} errors)",
            ) from e

        return {"videoInfo": video_info.to_wire(), "transcription": transcription.to_wire()}


class SummarizeYouTube(VideoOperation):
    name = "summarize_youtube"


class ExtractWisdom(VideoOperation):
    name = "extract_wisdom"


class AnalyzeClaims(VideoOperation):
    name = "analyze_claims"


class ExtractInterestingParts(VideoOperation):
    name = "extract_interesting_parts"


class RateContent(OperationHandler):
    """Rate a YouTube video or a piece of text.

    A valid ``youtubeUrl`` wins: the video's title and description are
    rated. Otherwise ``content`` is rated directly and no video info is
    resolved.
    """

    name = "rate_content"

    def __init__(self, backend: BackendInvoker, video_info: GetVideoInfo | None = None) -> None:
        super().__init__(backend)
        self._video_info = video_info or GetVideoInfo(backend)

    async def execute(self, params: dict[str, Any]) -> dict[str, Any]:
        url = params.get("youtubeUrl")
        content = params.get("content")
        video_info: VideoInfo | None = None

        if is_valid_youtube_url(url):
            video_info = await self._video_info.resolve(url)
            content = f"{video_info.title}\n{video_info.description}"
        elif not is_present(content):
            raise self.invalid()

        result = await self.invoke(
            compact(content=content, contentType=params.get("contentType") or "article")
        )

        data: dict[str, Any] = {"patternResult": result.to_wire()}
        if video_info is not None:
            data["videoInfo"] = video_info.to_wire()
        return data
