"""Renderers for fenced blocks with a special info string.

Each renderer answers `claims(info)` for the stripped info string of a fence
and writes its own markup in `render`. `render` may still return False to
hand the block back to the dispatcher, for example a video fence whose body
holds no usable ID.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol, TextIO

from markdown_it.common.utils import escapeHtml, unescapeAll
from markdown_it.tree import SyntaxTreeNode

from .constants import DETAILS_DEFAULT_TITLE, DETAILS_TAG, DIAGRAM_TAGS, DIRECTION_TAGS
from .links import is_local_reference, rewrite_local_reference
from .video import VideoProvider, extract_vimeo_id, extract_youtube_id, render_video

if TYPE_CHECKING:
    from .dispatch import ExtensionDispatcher

logger = logging.getLogger(__name__)


class BlockRenderer(Protocol):
    """A renderer for one family of fenced blocks."""

    def claims(self, info: str) -> bool:
        """Tell whether the fence info string belongs to this renderer."""
        ...

    def render(self, out: TextIO, node: SyntaxTreeNode, dispatcher: ExtensionDispatcher) -> bool:
        """Write the block and return True, or return False to pass it on."""
        ...


def fence_info(node: SyntaxTreeNode) -> str:
    """Return the unescaped, stripped info string of a fence node."""
    return unescapeAll(node.info).strip()


def _normalize_newlines(content: str) -> str:
    return content.replace("\r\n", "\n")


class DiagramRenderer:
    """Wraps diagram sources in a container picked up by the client-side library."""

    def claims(self, info: str) -> bool:
        return info in DIAGRAM_TAGS

    def render(self, out: TextIO, node: SyntaxTreeNode, dispatcher: ExtensionDispatcher) -> bool:
        css_class = DIAGRAM_TAGS[fence_info(node)]
        out.write(f'<div class="{css_class}">\n{escapeHtml(node.content)}</div>\n')
        return True


class VideoRenderer:
    """Embeds YouTube, Vimeo and local MP4 videos.

    The fence body holds a video ID, a video URL or, for ``mp4``, a path to a
    video file. Local MP4 paths are resolved against the current document.
    """

    def claims(self, info: str) -> bool:
        return info in {provider.value for provider in VideoProvider}

    def render(self, out: TextIO, node: SyntaxTreeNode, dispatcher: ExtensionDispatcher) -> bool:
        provider = VideoProvider(fence_info(node))
        source = node.content.strip()

        if provider is VideoProvider.YOUTUBE:
            video_id = extract_youtube_id(source)
        elif provider is VideoProvider.VIMEO:
            video_id = extract_vimeo_id(source)
        else:
            video_id = self._resolve_local_path(source, dispatcher)

        if not video_id:
            logger.debug("No %s video found in %r", provider.value, source)
            return False

        out.write(render_video(provider, video_id))
        return True

    @staticmethod
    def _resolve_local_path(source: str, dispatcher: ExtensionDispatcher) -> str:
        context = dispatcher.context
        if context.document_path and is_local_reference(source):
            return rewrite_local_reference(source, context.document_path, context.config.file_prefix)
        return source


class CollapsibleRenderer:
    """Renders ``details`` fences as a ``<details>`` disclosure element.

    The text after ``details`` in the info string is the summary title. The
    fence body is rendered as markdown with the full extension set, except
    for smart punctuation.

    Examples:
        A fence opened with ``details Setup notes`` becomes
        ``<details id="details-setup-notes" class="markdown-details">``.
    """

    def claims(self, info: str) -> bool:
        return info.startswith(DETAILS_TAG)

    def render(self, out: TextIO, node: SyntaxTreeNode, dispatcher: ExtensionDispatcher) -> bool:
        title = fence_info(node)[len(DETAILS_TAG) :].strip() or DETAILS_DEFAULT_TITLE
        details_id = "details-" + title.lower().replace(" ", "-")

        content = dispatcher.render_nested(_normalize_newlines(node.content))

        out.write(f'<details id="{escapeHtml(details_id)}" class="markdown-details">\n')
        out.write(f"<summary>{escapeHtml(title)}</summary>\n")
        out.write('<div class="details-content">\n')
        out.write(content)
        out.write("</div>\n")
        out.write("</details>\n")
        return True


class DirectionRenderer:
    """Renders ``ltr`` and ``rtl`` fences inside a container forcing text direction."""

    def claims(self, info: str) -> bool:
        return info in DIRECTION_TAGS

    def render(self, out: TextIO, node: SyntaxTreeNode, dispatcher: ExtensionDispatcher) -> bool:
        direction = fence_info(node)
        content = _normalize_newlines(node.content).strip()

        out.write(f'<div class="{direction}">\n')
        out.write(dispatcher.render_nested(content))
        out.write("</div>\n")
        return True


BLOCK_RENDERERS: tuple[BlockRenderer, ...] = (
    DiagramRenderer(),
    VideoRenderer(),
    CollapsibleRenderer(),
    DirectionRenderer(),
)
