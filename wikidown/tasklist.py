"""Task-list item normalization."""

from __future__ import annotations

from .constants import BARE_AMPERSAND_PATTERN, BARE_LESS_THAN_PATTERN, TASK_ITEM_PATTERN
from .models import LineInfo


def leading_whitespace_columns(line: str) -> int:
    """Compute the column width of leading whitespace.

    Tabs advance to the next multiple of four columns to match Markdown
    indentation rules.

    Args:
        line: Line whose leading whitespace should be measured.

    Returns:
        int: Number of columns occupied by the leading whitespace.

    Examples:
        leading_whitespace_columns("    text")  # 4
        leading_whitespace_columns("\\ttext")  # 4
    """
    columns = 0
    for character in line:
        if character == " ":
            columns += 1
            continue
        if character == "\t":
            columns += 4 - (columns % 4)
            continue
        break
    return columns


def escape_task_text(text: str) -> str:
    """Escape `&` and `<` that do not start an entity or a tag.

    Entities and inline HTML written by the author pass through unchanged.

    Examples:
        escape_task_text("Tom &amp; Jerry <b>&</b> a < b")
        # "Tom &amp; Jerry <b>&amp;</b> a &lt; b"
    """
    text = BARE_AMPERSAND_PATTERN.sub("&amp;", text)
    return BARE_LESS_THAN_PATTERN.sub("&lt;", text)


def render_task_item(text: str, checked: bool, indent: str = "") -> str:
    """Build the HTML line for a task-list item.

    Args:
        text: Task label.
        checked: Whether the checkbox is ticked.
        indent: Leading whitespace of the original line; its width sets the
            nesting level (two columns per level).

    Returns:
        str: A single-line ``<li>`` fragment holding a disabled checkbox.

    Examples:
        render_task_item("buy milk", checked=False)
    """
    level = leading_whitespace_columns(indent) // 2
    checked_attr = " checked" if checked else ""
    level_attr = f' data-indent-level="{level}"' if level > 0 else ""
    return (
        f'{indent if level > 0 else ""}'
        f'<li class="task-list-item-container" style="list-style-type: none;"{level_attr}>'
        f'<span class="task-list-item">'
        f'<input type="checkbox" class="task-checkbox"{checked_attr} disabled> '
        f'<span class="task-text">{escape_task_text(text)}</span></span></li>'
    )


def convert_task_line(line: str, info: LineInfo) -> str:
    """Convert one list line to a task-item fragment when it carries a checkbox.

    Args:
        line: Source line.
        info: Precomputed classification of the line.

    Returns:
        str: The fragment for ``- [ ] text`` / ``- [x] text`` lines, otherwise
            the line unchanged.
    """
    if not info.is_list_item:
        return line

    match = TASK_ITEM_PATTERN.match(line.strip())
    if not match:
        return line

    checked = match.group("mark") in ("x", "X")
    return render_task_item(match.group("text"), checked, info.indent)


def normalize_task_lines(lines: list[str], infos: list[LineInfo]) -> list[str]:
    """Convert every task-list line, keeping other lines untouched.

    Args:
        lines: Markdown lines.
        infos: Classification for each line, as produced by
            `wikidown.preprocessor.classify_lines`.

    Returns:
        list[str]: New list of lines with task items replaced.
    """
    return [convert_task_line(line, info) for line, info in zip(lines, infos)]
