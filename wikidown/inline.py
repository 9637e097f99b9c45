"""Inline text renderers."""

from __future__ import annotations

from markdown_it.common.utils import escapeHtml

from .constants import HIGHLIGHT_PATTERN


def has_highlight(text: str) -> bool:
    """Tell whether `text` holds at least one ``==marked==`` run."""
    return HIGHLIGHT_PATTERN.search(text) is not None


def render_highlight(text: str) -> str:
    """Escape `text` and wrap every ``==run==`` in ``<mark>``.

    Examples:
        render_highlight("a ==b== c")  # "a <mark>b</mark> c"
    """
    return HIGHLIGHT_PATTERN.sub(r"<mark>\1</mark>", escapeHtml(text))
