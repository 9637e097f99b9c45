"""Node-level rendering hook for wiki extensions.

`ExtensionDispatcher` is the hook handed to `engine.render_tree`. It is
called on every node visit and routes the node by type:

- fenced and indented code blocks go through the block renderers in fixed
  order (diagram, video, collapsible, direction); an unclaimed block nested
  in a list item is written as a trimmed ``<pre><code>`` fragment.
- text nodes expand statistics shortcodes and ``==highlight==`` runs.
- link and image destinations pointing at local files are rewritten;
  external links open in a new tab.
- paragraphs directly inside list items lose their ``<p>`` wrapper.

Returning False from a handler lets the stock markdown-it rule render the
node.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TextIO

from markdown_it.common.utils import escapeHtml
from markdown_it.token import Token
from markdown_it.tree import SyntaxTreeNode

from .blocks import BLOCK_RENDERERS, BlockRenderer, fence_info
from .constants import STATS_MARKER
from .inline import has_highlight, render_highlight
from .links import is_local_reference, rewrite_local_reference
from .models import RenderContext
from .stats import process_stats_text

logger = logging.getLogger(__name__)

NestedRenderer = Callable[[str], str]


def is_in_list_item(node: SyntaxTreeNode) -> bool:
    """Tell whether any ancestor of `node` is a list item."""
    parent = node.parent
    while parent is not None:
        if parent.type == "list_item":
            return True
        parent = parent.parent
    return False


def render_list_code_block(content: str, info: str) -> str:
    """Render a code block nested in a list item without surrounding blank lines.

    Args:
        content: Literal content of the block.
        info: Fence info string; its first word becomes the language class.

    Returns:
        str: A single ``<pre><code>`` fragment with trimmed content.

    Examples:
        render_list_code_block("\\nprint(1)\\n", "python")
        # '<pre><code class="language-python">print(1)</code></pre>'
    """
    language = info.split(maxsplit=1)[0] if info else ""
    code = escapeHtml(content.strip())
    if language:
        return f'<pre><code class="language-{escapeHtml(language)}">{code}</code></pre>'
    return f"<pre><code>{code}</code></pre>"


class ExtensionDispatcher:
    """Render hook that applies wiki extensions for one render call.

    Args:
        context: Per-call render context; shared with nested renders.
        render_nested: Callable rendering a markdown fragment with this same
            context, used by collapsible and direction blocks.
        block_renderers: Block renderers tried in order on code blocks.

    Examples:
        dispatcher = ExtensionDispatcher(RenderContext(), render_nested)
        html = render_tree(md, tokens, env, hook=dispatcher)
    """

    def __init__(
        self,
        context: RenderContext,
        render_nested: NestedRenderer,
        block_renderers: tuple[BlockRenderer, ...] = BLOCK_RENDERERS,
    ):
        self.context = context
        self.render_nested = render_nested
        self.block_renderers = block_renderers
        self._handlers = {
            "fence": self._visit_code_block,
            "code_block": self._visit_code_block,
            "text": self._visit_text,
            "link": self._visit_link,
            "image": self._visit_image,
            "paragraph": self._visit_paragraph,
        }

    def __call__(self, out: TextIO, node: SyntaxTreeNode, entering: bool) -> bool:
        handler = self._handlers.get(node.type)
        if handler is None:
            return False
        return handler(out, node, entering)

    def _visit_code_block(self, out: TextIO, node: SyntaxTreeNode, entering: bool) -> bool:
        if not entering:
            return False

        info = fence_info(node)
        for renderer in self.block_renderers:
            if renderer.claims(info) and renderer.render(out, node, self):
                return True

        if is_in_list_item(node):
            out.write(render_list_code_block(node.content, info))
            return True
        return False

    def _visit_text(self, out: TextIO, node: SyntaxTreeNode, entering: bool) -> bool:
        if not entering:
            return False

        token = node.token
        text = token.content

        if STATS_MARKER in text:
            processed, stats_html, remaining = process_stats_text(text, self.context)
            if processed:
                out.write(stats_html)
                if not remaining:
                    return True
                token.content = remaining
                text = remaining

        if has_highlight(text):
            out.write(render_highlight(text))
            return True
        return False

    def _rewrite_attr(self, token: Token, attr_name: str) -> None:
        document_path = self.context.document_path
        if not document_path:
            return

        destination = token.attrGet(attr_name)
        if not isinstance(destination, str) or not is_local_reference(destination):
            return

        rewritten = rewrite_local_reference(
            destination, document_path, self.context.config.file_prefix
        )
        logger.debug("Rewrote %s %r to %r", attr_name, destination, rewritten)
        token.attrSet(attr_name, rewritten)

    def _visit_link(self, out: TextIO, node: SyntaxTreeNode, entering: bool) -> bool:
        if not entering:
            return False

        opening = node.nester_tokens.opening
        self._rewrite_attr(opening, "href")
        href = opening.attrGet("href")
        if isinstance(href, str) and href.strip() and not is_local_reference(href):
            opening.attrSet("target", "_blank")
        return False

    def _visit_image(self, out: TextIO, node: SyntaxTreeNode, entering: bool) -> bool:
        if entering:
            self._rewrite_attr(node.token, "src")
        return False

    def _visit_paragraph(self, out: TextIO, node: SyntaxTreeNode, entering: bool) -> bool:
        if node.parent is None or node.parent.type != "list_item":
            return False

        # Loose items keep a line break between a paragraph and the next block.
        if not entering and not node.nester_tokens.closing.hidden and node.next_sibling is not None:
            out.write("\n")
        return True
