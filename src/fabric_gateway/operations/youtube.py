"""YouTube URL helpers."""

from __future__ import annotations

import re
from urllib.parse import parse_qs, urlsplit

_YOUTUBE_URL = re.compile(r"^(https?://)?(www\.)?(youtube\.com|youtu\.be)/.+$")
_SHORT_LINK = re.compile(r"youtu\.be/([^?&]+)")
_EMBED_PATH = re.compile(r"/embed/([^/]+)")


def is_valid_youtube_url(url: object) -> bool:
    """Check that ``url`` is a string shaped like a YouTube video link."""
    return isinstance(url, str) and _YOUTUBE_URL.match(url) is not None


def extract_video_id(url: str) -> str | None:
    """Extract the video id from a YouTube URL.

    Handles ``youtu.be/<id>``, ``youtube.com/watch?v=<id>`` and
    ``youtube.com/embed/<id>``. Returns None when no id is present.
    """
    if not is_valid_youtube_url(url):
        return None

    if "youtu.be" in url:
        match = _SHORT_LINK.search(url)
        return match.group(1) if match else None

    parts = urlsplit(url if "://" in url else f"https://{url}")
    video_ids = parse_qs(parts.query).get("v")
    if video_ids and video_ids[0]:
        return video_ids[0]

    match = _EMBED_PATH.search(parts.path)
    return match.group(1) if match else None


def format_youtube_url(video_id: str) -> str:
    """Build the canonical watch URL for a video id."""
    return f"https://www.youtube.com/watch?v={video_id}"


def thumbnail_url(video_id: str) -> str:
    """Build the max-resolution thumbnail URL for a video id."""
    return f"https://img.youtube.com/vi/{video_id}/maxresdefault.jpg"
