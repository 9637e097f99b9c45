"""Markdown parser construction and hook-driven HTML rendering.

`render_tree` walks the markdown-it syntax tree depth first and visits every
node twice, once entering and once leaving. A hook gets the first say on
each visit; when it returns False the node's tokens are rendered by the
stock markdown-it HTML rules, in the same order `RendererHTML.render`
would use.
"""

from __future__ import annotations

import io
from collections.abc import Callable, MutableMapping, Sequence
from typing import Any, TextIO

from markdown_it import MarkdownIt
from markdown_it.token import Token
from markdown_it.tree import SyntaxTreeNode
from mdit_py_plugins.anchors import anchors_plugin
from mdit_py_plugins.deflist import deflist_plugin
from mdit_py_plugins.dollarmath import dollarmath_plugin
from mdit_py_plugins.footnote import footnote_plugin
from mdit_py_plugins.subscript import sub_plugin
from mdit_py_plugins.superscript import superscript_plugin

from .config import RenderConfig

RenderHook = Callable[[TextIO, SyntaxTreeNode, bool], bool]
"""Hook signature: ``hook(out, node, entering) -> handled``."""


def create_parser(config: RenderConfig | None = None, smart_punctuation: bool | None = None) -> MarkdownIt:
    """Build the markdown-it parser used for wiki documents.

    Args:
        config: Rendering configuration. Defaults to `RenderConfig()`.
        smart_punctuation: Override for ``config.smart_punctuation``; nested
            re-parses pass False.

    Returns:
        MarkdownIt: Parser with raw HTML, tables, strikethrough, footnotes,
            definition lists, ``^super^`` / ``~sub~`` scripts, ``$math$`` and,
            depending on configuration, linkify and heading anchors enabled.

    Examples:
        md = create_parser(RenderConfig(linkify=False))
    """
    config = config or RenderConfig()
    if smart_punctuation is None:
        smart_punctuation = config.smart_punctuation

    md = MarkdownIt(
        "commonmark",
        {"html": True, "linkify": config.linkify, "typographer": smart_punctuation},
    )
    md.enable(["table", "strikethrough"])
    if config.linkify:
        md.enable("linkify")
    if smart_punctuation:
        md.enable(["replacements", "smartquotes"])

    md.use(footnote_plugin).use(deflist_plugin)
    md.use(superscript_plugin).use(sub_plugin)
    md.use(dollarmath_plugin)
    if config.heading_anchors:
        md.use(anchors_plugin, min_level=1, max_level=6)
    return md


def _index_tokens(tokens: Sequence[Token]) -> dict[int, tuple[Sequence[Token], int]]:
    """Map every renderable token to its owning list and position.

    Inline children are indexed against their parent's ``children`` list;
    image alt-text children are left out since the image rule renders them.
    """
    positions: dict[int, tuple[Sequence[Token], int]] = {}
    for index, token in enumerate(tokens):
        positions[id(token)] = (tokens, index)
        if token.type == "inline" and token.children:
            for child_index, child in enumerate(token.children):
                positions[id(child)] = (token.children, child_index)
    return positions


class _TreeWalk:
    """One traversal of a syntax tree; holds per-call state only."""

    def __init__(
        self,
        md: MarkdownIt,
        tokens: Sequence[Token],
        env: MutableMapping[str, Any],
        hook: RenderHook | None,
        out: TextIO,
    ):
        self.md = md
        self.env = env
        self.hook = hook
        self.out = out
        self.positions = _index_tokens(tokens)

    def walk(self, node: SyntaxTreeNode) -> None:
        self._visit(node, entering=True)
        if node.type != "image":
            for child in node.children:
                self.walk(child)
        self._visit(node, entering=False)

    def _visit(self, node: SyntaxTreeNode, entering: bool) -> None:
        if self.hook is not None and self.hook(self.out, node, entering):
            return
        self.out.write(self._default(node, entering))

    def _default(self, node: SyntaxTreeNode, entering: bool) -> str:
        if node.is_root or node.type == "inline":
            return ""

        if node.nester_tokens is not None:
            token = node.nester_tokens.opening if entering else node.nester_tokens.closing
        elif entering:
            token = node.token
        else:
            return ""

        owner, index = self.positions[id(token)]
        renderer = self.md.renderer
        rule = renderer.rules.get(token.type)
        if rule is not None:
            return rule(owner, index, self.md.options, self.env)
        return renderer.renderToken(owner, index, self.md.options, self.env)


def render_tree(
    md: MarkdownIt,
    tokens: Sequence[Token],
    env: MutableMapping[str, Any] | None = None,
    hook: RenderHook | None = None,
) -> str:
    """Render parsed tokens to HTML, consulting `hook` at every node visit.

    Args:
        md: Parser that produced `tokens`; its renderer rules and options are
            used for default rendering.
        tokens: Block-level token stream from ``md.parse``.
        env: Environment passed to ``md.parse`` (footnotes live there).
        hook: Optional callable ``hook(out, node, entering)``. Returning True
            means the hook wrote its own output for that visit.

    Returns:
        str: Rendered HTML. Without a hook this equals ``md.renderer.render``.

    Examples:
        md = create_parser()
        env = {}
        html = render_tree(md, md.parse("# Title", env), env)
    """
    env = {} if env is None else env
    out = io.StringIO()
    _TreeWalk(md, tokens, env, hook, out).walk(SyntaxTreeNode(tokens))
    return out.getvalue()


def render_markdown_text(md: MarkdownIt, text: str, hook: RenderHook | None = None) -> str:
    """Parse and render `text` with `md` in one step."""
    env: dict[str, Any] = {}
    tokens = md.parse(text, env)
    return render_tree(md, tokens, env, hook)
