"""Typographic shortcode substitution."""

from __future__ import annotations

from .constants import CODE_SPAN_PATTERN, TYPOGRAPHIC_REPLACEMENTS


def find_code_spans(text: str) -> list[tuple[int, int]]:
    """Locate fenced code blocks and inline code spans.

    Triple-backtick fences are matched lazily up to the next triple backtick;
    inline spans are single backticks around non-empty content.

    Args:
        text: Markdown text to scan.

    Returns:
        list[tuple[int, int]]: Start (inclusive) and end (exclusive) offsets of
            each code region, in document order.

    Examples:
        find_code_spans("a `b` c")  # [(2, 5)]
    """
    return [match.span() for match in CODE_SPAN_PATTERN.finditer(text)]


def apply_typography(text: str) -> str:
    """Replace typographic shortcodes outside of code.

    Code regions are swapped for placeholders, the shortcode table is applied
    to the remaining text, and the placeholders are restored verbatim.

    Args:
        text: Raw markdown text.

    Returns:
        str: Text with ``(c)``, ``(tm)``, ``...`` and friends replaced by their
            glyphs. Content inside code is never altered.

    Examples:
        apply_typography("(c) 2024")  # "© 2024"
        apply_typography("`(c)`")  # "`(c)`"
    """
    code_texts: list[str] = []
    parts: list[str] = []
    offset = 0

    for start, end in find_code_spans(text):
        parts.append(text[offset:start])
        code_texts.append(text[start:end])
        parts.append(f"\x00CODE_{len(code_texts) - 1}\x00")
        offset = end

    parts.append(text[offset:])
    result = "".join(parts)

    for shortcode, glyph in TYPOGRAPHIC_REPLACEMENTS:
        result = result.replace(shortcode, glyph)

    for index, code_text in enumerate(code_texts):
        result = result.replace(f"\x00CODE_{index}\x00", code_text, 1)

    return result
