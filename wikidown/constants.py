"""Constants used across the wikidown package."""

from __future__ import annotations

import re

# Typographic shortcodes, applied in this order outside code spans
TYPOGRAPHIC_REPLACEMENTS: tuple[tuple[str, str], ...] = (
    ("(c)", "©"),
    ("(r)", "®"),
    ("(tm)", "™"),
    ("(p)", "¶"),
    ("+-", "±"),
    ("...", "…"),
    ("1/2", "½"),
    ("1/4", "¼"),
    ("3/4", "¾"),
)
CODE_SPAN_PATTERN = re.compile(r"```[\s\S]*?```|`[^`]+`")

# Line classification
LIST_ITEM_PATTERN = re.compile(r"^\s*(?:[0-9]+\.|[-*+])\s")
TASK_ITEM_PATTERN = re.compile(r"^[-*+]\s+\[(?P<mark>\s*|[xX])\]\s+(?P<text>.*)$")
BARE_AMPERSAND_PATTERN = re.compile(r"&(?!#[0-9]+;|#[xX][0-9a-fA-F]+;|[A-Za-z][A-Za-z0-9]*;)")
BARE_LESS_THAN_PATTERN = re.compile(r"<(?![A-Za-z/!?])")
FENCE_MARKERS = ("```", "~~~")
HORIZONTAL_RULE_PATTERN = re.compile(r"^[-*_]{3,}$")
LINK_DEFINITION_PATTERN = re.compile(r"^\[.+\]:\s+")
LIST_CONTENT_INDENT = "    "

# Inline syntax
HIGHLIGHT_PATTERN = re.compile(r"==([^=]+?)==")
STATS_MARKER = ":::stats"
STATS_SHORTCODE_PATTERN = re.compile(r":::stats\s+(?P<params>.*?):::")
STATS_PARAM_PATTERN = re.compile(r"(\w+)=([*\w/-]+)")

# Fence info strings
DIAGRAM_TAGS = {"mermaid": "mermaid"}
DETAILS_TAG = "details"
DETAILS_DEFAULT_TITLE = "Details"
DIRECTION_TAGS = ("ltr", "rtl")

# Local references
FILE_PREFIX = "/api/files"
EXTERNAL_SCHEMES = ("http://", "https://", "ftp://")

# Document tree
DOCUMENTS_ROOT = "data/documents"
DOCUMENT_FILENAME = "document.md"
DEFAULT_RECENT_LIMIT = 5
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M"

# Limits
DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024
MARKDOWN_EXTENSIONS = (".md", ".markdown", ".mdown", ".mkd", ".mkdn")
