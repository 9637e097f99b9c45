"""Structural preprocessing of markdown before it reaches the parser.

The block parser cannot tell that a fence or a pipe table written right
after a list item belongs to that item, and it needs a blank line before a
list that follows a paragraph. This module walks the source line by line and
rewrites those spots so the parser builds the intended tree.
"""

from __future__ import annotations

from .constants import (
    FENCE_MARKERS,
    HORIZONTAL_RULE_PATTERN,
    LINK_DEFINITION_PATTERN,
    LIST_CONTENT_INDENT,
    LIST_ITEM_PATTERN,
)
from .models import LineInfo, LineKind, PreprocessorState
from .tasklist import normalize_task_lines
from .typography import apply_typography


def _leading_whitespace(line: str) -> str:
    return line[: len(line) - len(line.lstrip(" \t"))]


def is_table_row(line: str) -> bool:
    """Tell whether a line looks like a pipe table row.

    Args:
        line: Line to inspect.

    Returns:
        bool: True when the stripped line contains a pipe and starts or ends
            with one.

    Examples:
        is_table_row("| a | b |")  # True
        is_table_row("a | b")  # False
    """
    stripped = line.strip()
    return "|" in stripped and (stripped.startswith("|") or stripped.endswith("|"))


def classify_lines(lines: list[str]) -> list[LineInfo]:
    """Compute list and table markers for every line.

    Args:
        lines: Markdown lines without line terminators.

    Returns:
        list[LineInfo]: One entry per line.

    Examples:
        classify_lines(["- item", "text"])[0].is_list_item  # True
    """
    infos = []
    for line in lines:
        is_list_item = LIST_ITEM_PATTERN.match(line) is not None
        infos.append(
            LineInfo(
                is_list_item=is_list_item,
                indent=_leading_whitespace(line) if is_list_item else "",
                is_table_row=is_table_row(line),
            )
        )
    return infos


def classify_details_line(stripped: str) -> LineKind:
    """Classify a non-blank line found inside a ``details`` block.

    Args:
        stripped: Line with surrounding whitespace removed.

    Returns:
        LineKind: Kind of the line.
    """
    if stripped.startswith("#"):
        return LineKind.HEADING
    if HORIZONTAL_RULE_PATTERN.match(stripped):
        return LineKind.HORIZONTAL_RULE
    if LINK_DEFINITION_PATTERN.match(stripped):
        return LineKind.LINK_DEFINITION
    if is_table_row(stripped):
        return LineKind.TABLE_ROW
    return LineKind.PLAIN_TEXT


def _fence_marker(stripped: str) -> str | None:
    for marker in FENCE_MARKERS:
        if stripped.startswith(marker):
            return marker
    return None


def _try_open_fence(state: PreprocessorState, line: str, result: list[str]) -> bool:
    """Open a fenced code block, nesting it under a preceding list item.

    Args:
        state: Preprocessor state to update.
        line: Current line.
        result: Lines emitted so far; trailing blank lines are dropped when the
            fence nests under a list item.

    Returns:
        bool: True when the line opened a fence and was emitted.

    Examples:
        _try_open_fence(PreprocessorState(), "```python", [])  # True
    """
    if state.in_code_block:
        return False

    stripped = line.strip()
    marker = _fence_marker(stripped)
    if marker is None:
        return False

    state.in_code_block = True
    state.fence_marker = marker
    state.fence_indent = _leading_whitespace(line)
    info = stripped.lstrip(marker[0]).strip()
    if info.startswith("details"):
        state.in_details_block = True

    if state.last_line_was_list_item and not state.in_table:
        state.code_block_in_list = True
        state.current_list_indent = state.list_indent + LIST_CONTENT_INDENT

        while result and not result[-1].strip():
            result.pop()

        result.append(state.current_list_indent + stripped)
    else:
        result.append(stripped)
    return True


def _try_close_fence(state: PreprocessorState, line: str, result: list[str]) -> bool:
    """Close the open fenced code block.

    Any line starting with the opening marker closes the block, whatever the
    length of its run.

    Args:
        state: Preprocessor state to update.
        line: Current line.
        result: Lines emitted so far.

    Returns:
        bool: True when the line closed the fence and was emitted.
    """
    if not state.in_code_block:
        return False

    stripped = line.strip()
    if not stripped.startswith(state.fence_marker):
        return False

    if state.code_block_in_list:
        result.append(state.current_list_indent + stripped)
    else:
        result.append(stripped)

    state.in_code_block = False
    state.fence_marker = ""
    state.fence_indent = ""
    state.code_block_in_list = False
    state.current_list_indent = ""
    state.in_details_block = False
    state.last_line_was_plain_text = False
    return True


def _emit_code_line(state: PreprocessorState, line: str, info: LineInfo, result: list[str]):
    """Emit a line found inside a fenced code block.

    Lines of a block nested in a list are re-based from the fence's own
    indentation onto the list content indentation. Inside a ``details`` block
    a list item that directly follows plain text gets a blank line first.

    Args:
        state: Preprocessor state to update.
        line: Current line.
        info: Classification of the line.
        result: Lines emitted so far.
    """
    stripped = line.strip()

    if state.in_details_block:
        if not stripped:
            state.last_line_was_plain_text = False
        elif info.is_list_item:
            if state.last_line_was_plain_text and not state.last_line_was_list_item:
                result.append("")
            state.last_line_was_list_item = True
            state.last_line_was_plain_text = False
        else:
            state.last_line_was_list_item = False
            state.last_line_was_plain_text = (
                classify_details_line(stripped) is LineKind.PLAIN_TEXT
            )

    if state.code_block_in_list:
        if state.fence_indent and line.startswith(state.fence_indent):
            line = line[len(state.fence_indent) :]
        result.append(state.current_list_indent + line)
    else:
        result.append(line)


def _try_close_table(state: PreprocessorState, line: str, info: LineInfo, result: list[str]) -> None:
    if not state.in_table or info.is_table_row:
        return

    state.in_table = False
    if line.strip():
        result.append("")


def _try_emit_table_row(
    state: PreprocessorState, line: str, info: LineInfo, result: list[str]
) -> bool:
    """Indent a table row that belongs to a list item.

    Args:
        state: Preprocessor state to update.
        line: Current line.
        info: Classification of the line.
        result: Lines emitted so far.

    Returns:
        bool: True when the row was emitted under the current list item.
    """
    if not (info.is_table_row and state.in_list):
        return False

    if not state.in_table and state.last_line_was_list_item and result and result[-1].strip():
        result.append("")

    state.in_table = True
    state.current_table_indent = state.list_indent + LIST_CONTENT_INDENT
    result.append(state.current_table_indent + line.strip())
    return True


def _list_continues(lines: list[str], infos: list[LineInfo], index: int) -> bool:
    """Look past a blank line to decide whether the current list goes on.

    Args:
        lines: All lines being processed.
        infos: Classification for each line.
        index: Index of the blank line.

    Returns:
        bool: True when the next non-blank line is a list item or table row,
            or when no non-blank line follows.
    """
    for next_index in range(index + 1, len(lines)):
        if lines[next_index].strip():
            next_info = infos[next_index]
            return next_info.is_list_item or next_info.is_table_row
    return True


def restructure_lines(lines: list[str], infos: list[LineInfo]) -> list[str]:
    """Run the structural state machine over classified lines.

    Args:
        lines: Markdown lines, after typography and task-list conversion.
        infos: Classification computed before task-list conversion, so converted
            task items still count as list items.

    Returns:
        list[str]: Rewritten lines.
    """
    state = PreprocessorState()
    result: list[str] = []

    for index, line in enumerate(lines):
        info = infos[index]

        if not state.in_code_block:
            _try_close_table(state, line, info, result)

        if _try_open_fence(state, line, result):
            continue

        if _try_close_fence(state, line, result):
            continue

        if state.in_code_block:
            _emit_code_line(state, line, info, result)
            continue

        if info.is_list_item:
            state.in_list = True
            state.last_line_was_list_item = True
            state.list_indent = info.indent
            result.append(line)
            continue

        if _try_emit_table_row(state, line, info, result):
            continue

        state.last_line_was_list_item = False

        if state.in_list and not line.strip() and not _list_continues(lines, infos, index):
            state.in_list = False
            state.in_table = False

        result.append(line)

    return result


def normalize_task_list(content: str) -> str:
    """Convert checkbox list items to HTML fragments.

    Args:
        content: Markdown text.

    Returns:
        str: Text where ``- [ ] task`` and ``- [x] task`` lines are replaced by
            disabled checkbox items.

    Examples:
        normalize_task_list("- [x] done")
    """
    lines = content.split("\n")
    return "\n".join(normalize_task_lines(lines, classify_lines(lines)))


def preprocess_markdown(content: str) -> str:
    """Prepare raw wiki markdown for the block parser.

    Applies typographic shortcodes, converts task-list items, then repairs
    list, table and fence nesting. The function is pure.

    Args:
        content: Raw markdown text.

    Returns:
        str: Preprocessed markdown.

    Examples:
        preprocess_markdown("- item\\n| a |\\n| - |")
    """
    content = apply_typography(content)
    lines = content.split("\n")
    infos = classify_lines(lines)
    lines = normalize_task_lines(lines, infos)
    return "\n".join(restructure_lines(lines, infos))
