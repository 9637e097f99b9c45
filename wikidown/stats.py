"""Document statistics shortcodes.

``:::stats count=*:::`` renders the number of documents in the wiki (or in
one folder) and ``:::stats recent=N:::`` lists the N most recently edited
documents. Both read the document tree of the render context; documents
that cannot be read are left out.
"""

from __future__ import annotations

import logging
from datetime import datetime
from html import escape

from .constants import STATS_PARAM_PATTERN, STATS_SHORTCODE_PATTERN, TIMESTAMP_FORMAT
from .exceptions import UnsafePathError
from .models import DocumentDescriptor, DocumentTree, RenderContext

logger = logging.getLogger(__name__)

STATS_ERROR_HTML = (
    '<div class="wiki-stats-error">'
    "Invalid stats shortcode parameters. Use count=* or recent=N."
    "</div>"
)


def parse_stats_params(param_text: str) -> dict[str, str]:
    """Extract ``key=value`` pairs from the body of a stats shortcode.

    Examples:
        parse_stats_params("count=*")  # {"count": "*"}
    """
    return {key: value for key, value in STATS_PARAM_PATTERN.findall(param_text)}


def format_dir_name(name: str) -> str:
    """Turn a folder name into a display title.

    Examples:
        format_dir_name("getting-started")  # "Getting Started"
    """
    words = name.replace("-", " ").split()
    return " ".join(word[:1].upper() + word[1:] for word in words)


def extract_document_title(data: bytes) -> str:
    """Return the text of the first ``# `` heading, or an empty string."""
    for line in data.decode("utf-8", errors="replace").splitlines():
        line = line.strip()
        if line.startswith("# "):
            return line[2:]
    return ""


def count_documents(documents: DocumentTree | None, folder: str = "") -> int:
    """Count the documents below `folder`.

    Raises:
        UnsafePathError: If `folder` escapes the document tree.
    """
    if documents is None:
        return 0
    return sum(1 for _ in documents.iter_documents(folder))


def recent_documents(documents: DocumentTree | None, limit: int) -> list[DocumentDescriptor]:
    """List the `limit` most recently modified documents, newest first.

    Documents whose file cannot be read are skipped.
    """
    if documents is None:
        return []

    descriptors = []
    for entry in documents.iter_documents():
        try:
            data = documents.read_document(entry.path)
        except OSError as error:
            logger.debug("Skipping unreadable document %r: %s", entry.path, error)
            continue

        title = extract_document_title(data)
        if not title:
            title = format_dir_name(entry.path.rsplit("/", 1)[-1]) or "Home"

        descriptors.append(
            DocumentDescriptor(
                title=title,
                path=entry.path,
                modified=datetime.fromtimestamp(entry.modified),
            )
        )

    descriptors.sort(key=lambda descriptor: descriptor.modified, reverse=True)
    return descriptors[:limit]


def render_document_count(documents: DocumentTree | None, count_param: str) -> str:
    """Render the document count block for ``count=<*|all|folder>``."""
    if count_param in ("*", "all"):
        count = count_documents(documents)
        title = "Total Documents"
        description = "Total number of documents in the wiki"
    else:
        count = count_documents(documents, count_param)
        folder_name = escape(format_dir_name(count_param))
        title = f"Documents in {folder_name}"
        description = f"Number of documents in the {folder_name} section"

    return (
        '<div class="wiki-stats doc-count">\n'
        f"<h4>{title}</h4>\n"
        '<div class="count-container">\n'
        f'<div class="count-number">{count}</div>\n'
        f'<div class="count-description">{description}</div>\n'
        "</div>\n"
        "</div>\n"
    )


def render_recent_edits(
    documents: DocumentTree | None, limit: int, timestamp_format: str = TIMESTAMP_FORMAT
) -> str:
    """Render the recently edited documents block."""
    lines = ['<div class="wiki-stats recent-edits">', "<h4>Recently Edited Documents</h4>"]

    descriptors = recent_documents(documents, limit)
    if not descriptors:
        lines.append("<p>No recently edited documents found.</p>")
    else:
        lines.append("<ul>")
        for descriptor in descriptors:
            folder_path = escape(f"/{descriptor.path}")
            lines.extend(
                [
                    "<li>",
                    '  <div class="doc-info">',
                    f'    <a href="{folder_path}">{escape(descriptor.title)}</a>',
                    f'    <span class="doc-path">{folder_path}</span>',
                    "  </div>",
                    f'  <span class="edit-date">{descriptor.modified.strftime(timestamp_format)}</span>',
                    "</li>",
                ]
            )
        lines.append("</ul>")

    lines.append("</div>")
    return "\n".join(lines) + "\n"


def _parse_limit(value: str, default: int) -> int:
    try:
        limit = int(value)
    except ValueError:
        return default
    return limit if limit > 0 else default


def render_stats_shortcode(param_text: str, context: RenderContext) -> str:
    """Render one shortcode body, or an inline error fragment.

    Args:
        param_text: Text between ``:::stats`` and the closing ``:::``.
        context: Render context providing the document tree and settings.

    Returns:
        str: HTML for the count or recent-edits block.
    """
    params = parse_stats_params(param_text)
    config = context.config

    try:
        if "count" in params:
            return render_document_count(context.documents, params["count"])
        if "recent" in params:
            limit = _parse_limit(params["recent"], config.recent_limit)
            return render_recent_edits(context.documents, limit, config.timestamp_format)
    except UnsafePathError as error:
        logger.debug("Rejected stats shortcode %r: %s", param_text, error)
        return STATS_ERROR_HTML

    logger.debug("Unknown stats shortcode parameters: %r", param_text)
    return STATS_ERROR_HTML


def process_stats_text(text: str, context: RenderContext) -> tuple[bool, str, str]:
    """Expand stats shortcodes found in a text fragment.

    Each exact shortcode string is rendered once per render call; repeats are
    kept in the remaining text as written.

    Args:
        text: Text content of a single text node.
        context: Render context holding the dedupe set.

    Returns:
        tuple[bool, str, str]: Whether any shortcode was rendered, the rendered
            HTML, and the text left after removing rendered shortcodes.

    Examples:
        processed, html, remaining = process_stats_text(":::stats count=*:::", RenderContext())
    """
    rendered: list[str] = []
    remaining: list[str] = []
    last_end = 0

    for match in STATS_SHORTCODE_PATTERN.finditer(text):
        shortcode = match.group(0)
        if shortcode in context.processed_shortcodes:
            continue

        context.processed_shortcodes.add(shortcode)
        remaining.append(text[last_end : match.start()])
        rendered.append(render_stats_shortcode(match.group("params"), context))
        last_end = match.end()

    remaining.append(text[last_end:])
    return bool(rendered), "".join(rendered), "".join(remaining)
