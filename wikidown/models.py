"""Data models for wikidown."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from typing import Protocol

from .config import RenderConfig


class LineKind(Enum):
    """Classification of a non-blank line inside a collapsible block.

    Attributes:
        HEADING: ATX heading (``# Title``).
        HORIZONTAL_RULE: Thematic break such as ``---``.
        LINK_DEFINITION: Link reference definition (``[id]: url``).
        TABLE_ROW: Pipe table row.
        PLAIN_TEXT: Anything else, which may be followed by a list.
    """

    HEADING = auto()
    HORIZONTAL_RULE = auto()
    LINK_DEFINITION = auto()
    TABLE_ROW = auto()
    PLAIN_TEXT = auto()


@dataclass(frozen=True)
class LineInfo:
    """Per-line markers computed before the preprocessing pass.

    Attributes:
        is_list_item: Whether the line starts an ordered or unordered list item.
        indent: Leading whitespace of a list item; empty for other lines.
        is_table_row: Whether the line holds a pipe at its start or end.
    """

    is_list_item: bool = False
    indent: str = ""
    is_table_row: bool = False


@dataclass
class PreprocessorState:
    """Flags tracked while walking markdown lines.

    The flags are independent; a line can be inside a list and a code block
    at the same time.

    Attributes:
        in_code_block: Inside a fenced code block.
        fence_marker: Three-character marker that opened the fence.
        fence_indent: Leading whitespace of the opening fence line.
        in_list: Inside a list, including lazy continuation across blank lines.
        in_table: Inside a pipe table nested under a list item.
        in_details_block: Inside a ``details`` fence.
        last_line_was_list_item: The previous line was a list item.
        last_line_was_plain_text: The previous line in a details block was plain text.
        list_indent: Indentation of the most recent list item.
        current_list_indent: Indentation applied to a code block nested in a list.
        current_table_indent: Indentation applied to table rows nested in a list.
        code_block_in_list: The open code block is nested in a list item.
    """

    in_code_block: bool = False
    fence_marker: str = ""
    fence_indent: str = ""
    in_list: bool = False
    in_table: bool = False
    in_details_block: bool = False
    last_line_was_list_item: bool = False
    last_line_was_plain_text: bool = False
    list_indent: str = ""
    current_list_indent: str = ""
    current_table_indent: str = ""
    code_block_in_list: bool = False


@dataclass(frozen=True)
class DocumentEntry:
    """A document found while scanning a document tree.

    Attributes:
        path: Folder of the document relative to the tree root, using ``/``.
            Empty for a document stored at the root.
        modified: Modification time as a POSIX timestamp.
    """

    path: str
    modified: float


@dataclass(frozen=True)
class DocumentDescriptor:
    """A document listed by the statistics shortcodes.

    Attributes:
        title: First ``# `` heading of the document, or its formatted folder name.
        path: Folder of the document relative to the tree root.
        modified: Last modification time.
    """

    title: str
    path: str
    modified: datetime


class DocumentTree(Protocol):
    """Read-only access to the documents of a wiki."""

    def iter_documents(self, folder: str = "") -> Iterator[DocumentEntry]:
        """Yield every document below `folder`, skipping unreadable entries."""
        ...

    def read_document(self, path: str) -> bytes:
        """Return the raw markdown of the document stored in folder `path`."""
        ...


@dataclass
class RenderContext:
    """State carried through a single render call.

    A new context is created for every call, so rendering can run
    concurrently without sharing state.

    Attributes:
        document_path: Folder of the document being rendered, used to resolve
            relative local references. Empty disables rewriting.
        processed_shortcodes: Exact shortcode strings already rendered.
        documents: Document tree used by statistics shortcodes.
        config: Rendering configuration.
    """

    document_path: str = ""
    processed_shortcodes: set[str] = field(default_factory=set)
    documents: DocumentTree | None = None
    config: RenderConfig = field(default_factory=RenderConfig)
