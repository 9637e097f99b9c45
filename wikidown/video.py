"""Video embeds for YouTube, Vimeo and local MP4 files."""

from __future__ import annotations

import logging
import re
from enum import Enum
from html import escape
from posixpath import basename

logger = logging.getLogger(__name__)


class VideoProvider(str, Enum):
    """Fence info strings that produce a video embed."""

    YOUTUBE = "youtube"
    VIMEO = "vimeo"
    LOCAL = "mp4"


YOUTUBE_PATTERNS = (
    re.compile(r"(?:youtube\.com/watch\?v=|youtu\.be/)([^&?\s]+)"),
    re.compile(r"youtube\.com/embed/([^&?\s]+)"),
    re.compile(r"youtube\.com/v/([^&?\s]+)"),
)
VIMEO_PATTERNS = (
    re.compile(r"vimeo\.com/(\d+)"),
    re.compile(r"vimeo\.com/video/(\d+)"),
    re.compile(r"player\.vimeo\.com/video/(\d+)"),
)
VIMEO_ID_PATTERN = re.compile(r"^\d+$")


def _first_match(patterns: tuple[re.Pattern[str], ...], text: str) -> str:
    for pattern in patterns:
        match = pattern.search(text)
        if match:
            return match.group(1)
    return ""


def extract_youtube_id(value: str) -> str:
    """Extract a YouTube video ID from an ID or URL.

    Args:
        value: Bare ID or a ``watch?v=``, ``youtu.be/``, ``/embed/`` or ``/v/`` URL.

    Returns:
        str: The video ID, or an empty string when none is found.

    Examples:
        extract_youtube_id("https://www.youtube.com/watch?v=abc12345678")  # "abc12345678"
        extract_youtube_id("https://youtu.be/abc12345678")  # "abc12345678"
    """
    value = value.strip()
    if "/" not in value and "." not in value and len(value) >= 11:
        return value
    return _first_match(YOUTUBE_PATTERNS, value)


def extract_vimeo_id(value: str) -> str:
    """Extract a Vimeo video ID from an ID or URL.

    Args:
        value: Numeric ID or a ``vimeo.com/`` or ``player.vimeo.com/video/`` URL.

    Returns:
        str: The numeric ID, or an empty string when none is found.

    Examples:
        extract_vimeo_id("92060047")  # "92060047"
    """
    value = value.strip()
    if VIMEO_ID_PATTERN.match(value):
        return value
    return _first_match(VIMEO_PATTERNS, value)


def render_youtube(video_id: str) -> str:
    video_id = escape(video_id)
    video_url = f"https://www.youtube.com/watch?v={video_id}"
    return (
        '<div class="video-container">\n'
        f'<iframe width="560" height="315" src="https://www.youtube.com/embed/{video_id}"\n'
        'frameborder="0" allow="accelerometer; autoplay; clipboard-write; encrypted-media; '
        'gyroscope; picture-in-picture"\n'
        "allowfullscreen></iframe>\n"
        "</div>"
        '<div class="video-print-placeholder">\n'
        "<p><strong>YouTube Video</strong></p>\n"
        "<p>This embedded video is not available in print. You can view it online at:</p>\n"
        f'<p><a href="{video_url}">{video_url}</a></p>\n'
        "</div>"
    )


def render_vimeo(video_id: str) -> str:
    video_id = escape(video_id)
    video_url = f"https://vimeo.com/{video_id}"
    return (
        '<div class="video-container">\n'
        f'<iframe src="https://player.vimeo.com/video/{video_id}"\n'
        'width="560" height="315" frameborder="0"\n'
        'allow="autoplay; fullscreen; picture-in-picture" allowfullscreen></iframe>\n'
        "</div>"
        '<div class="video-print-placeholder">\n'
        "<p><strong>Vimeo Video</strong></p>\n"
        "<p>This embedded video is not available in print. You can view it online at:</p>\n"
        f'<p><a href="{video_url}">{video_url}</a></p>\n'
        "</div>"
    )


def render_mp4(video_path: str) -> str:
    filename = escape(basename(video_path))
    video_path = escape(video_path)
    return (
        '<div class="video-container">\n'
        '<video class="local-video-player" style="max-width: 100%; height: auto;" controls>\n'
        f'<source src="{video_path}" type="video/mp4">\n'
        "Your browser does not support the video tag.\n"
        "</video>\n"
        "</div>"
        '<div class="video-print-placeholder">\n'
        "<p><strong>Video Content</strong></p>\n"
        f"<p>This embedded video ({filename}) is not available in print.</p>\n"
        "<p>To view this video, access this document at your wiki URL.</p>\n"
        "</div>"
    )


def render_video(provider: VideoProvider, video_id: str) -> str:
    """Render the embed for `provider`.

    Args:
        provider: Video provider.
        video_id: YouTube/Vimeo ID, or the URL of a local MP4 file.

    Returns:
        str: Player markup followed by a print placeholder.
    """
    if provider is VideoProvider.YOUTUBE:
        return render_youtube(video_id)
    if provider is VideoProvider.VIMEO:
        return render_vimeo(video_id)
    return render_mp4(video_id)
