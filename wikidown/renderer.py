"""Render entry points: markdown text or files in, HTML out.

The pipeline is preprocess -> parse -> hook-driven render. Every call builds
its own `RenderContext`, so rendering keeps no state between calls.
"""

from __future__ import annotations

import logging
from pathlib import Path

from markdown_it import MarkdownIt

from .config import RenderConfig
from .dispatch import ExtensionDispatcher
from .engine import create_parser, render_markdown_text
from .exceptions import FileTooLargeError
from .filesystem import FileSystemDocumentTree, collect_file_stat, enforce_file_size, safe_read
from .models import DocumentTree, RenderContext
from .preprocessor import preprocess_markdown

logger = logging.getLogger(__name__)


class RenderFileError(Exception):
    """Raised when rendering a Markdown file fails."""


def _render_with_context(md: MarkdownIt, text: str, context: RenderContext) -> str:
    dispatcher = ExtensionDispatcher(context, lambda nested: render_fragment(nested, context))
    return render_markdown_text(md, text, hook=dispatcher)


def render_fragment(text: str, context: RenderContext) -> str:
    """Render a markdown fragment nested inside a document.

    Used for the bodies of collapsible and direction blocks. The fragment is
    not preprocessed again and never gets smart punctuation; links and
    shortcodes resolve against the same `context` as the enclosing document.

    Args:
        text: Markdown fragment.
        context: Render context of the enclosing render call.

    Returns:
        str: Rendered HTML.
    """
    md = create_parser(context.config, smart_punctuation=False)
    return _render_with_context(md, text, context)


def render_html(
    text: str | bytes,
    document_path: str = "",
    config: RenderConfig | None = None,
    documents: DocumentTree | None = None,
) -> str:
    """Render wiki markdown to HTML.

    Content problems never raise: malformed extensions fall back to stock
    markdown rendering or to an inline error fragment.

    Args:
        text: Markdown source; bytes are decoded as UTF-8 with replacement.
        document_path: Folder of the document, relative to the document tree
            root. Relative links, images and MP4 paths are resolved against
            it; an empty path leaves destinations untouched.
        config: Rendering configuration. Defaults to `RenderConfig()`.
        documents: Document tree read by statistics shortcodes. Without one,
            counts are zero and the recent list is empty.

    Returns:
        str: Rendered HTML.

    Examples:
        render_html("a ==b== c")  # "<p>a <mark>b</mark> c</p>\\n"
        render_html("![](img.png)", document_path="tutorials/intro")
    """
    config = config or RenderConfig()
    if isinstance(text, bytes):
        text = text.decode("utf-8", errors="replace")

    context = RenderContext(document_path=document_path, documents=documents, config=config)
    source = preprocess_markdown(text.replace("\r\n", "\n"))
    return _render_with_context(create_parser(config), source, context)


def render_markdown(
    text: str | bytes,
    document_path: str = "",
    config: RenderConfig | None = None,
    documents: DocumentTree | None = None,
) -> bytes:
    """Render wiki markdown to UTF-8 encoded HTML.

    Same arguments as `render_html`.

    Returns:
        bytes: Rendered HTML encoded as UTF-8.
    """
    return render_html(text, document_path, config, documents).encode("utf-8")


def derive_document_path(filepath: Path, documents_root: Path) -> str:
    """Compute the document path of a markdown file.

    Args:
        filepath: Path to the markdown file.
        documents_root: Root of the document tree.

    Returns:
        str: Folder of the file relative to `documents_root` using ``/``, or
            the name of the file's folder when it lies outside the tree.

    Examples:
        derive_document_path(Path("data/documents/intro/document.md"), Path("data/documents"))
        # "intro"
    """
    folder = filepath.resolve().parent
    try:
        relative = folder.relative_to(documents_root.resolve())
    except ValueError:
        return folder.name
    relative_path = relative.as_posix()
    return "" if relative_path == "." else relative_path


def render_file(
    filepath: Path,
    config: RenderConfig | None = None,
    documents: DocumentTree | None = None,
    document_path: str | None = None,
) -> str:
    """Render a markdown file to HTML.

    Args:
        filepath: Path to the markdown file.
        config: Rendering configuration. Defaults to `RenderConfig()`.
        documents: Document tree for statistics. Defaults to a
            `FileSystemDocumentTree` rooted at ``config.documents_root``.
        document_path: Folder used to resolve local references. Derived from
            `filepath` when omitted.

    Returns:
        str: Rendered HTML.

    Raises:
        RenderFileError: If the file is missing, not a regular file, too large
            or unreadable.

    Examples:
        html = render_file(Path("data/documents/intro/document.md"))
    """
    config = config or RenderConfig()

    try:
        stat_result = collect_file_stat(filepath)
        enforce_file_size(stat_result, config.max_file_size)
    except FileTooLargeError as error:
        raise RenderFileError(f"{filepath}: {error}") from error
    except IOError as error:
        raise RenderFileError(str(error)) from error

    try:
        with safe_read(filepath) as file:
            content = file.read()
    except IOError as error:
        raise RenderFileError(str(error)) from error

    documents_root = Path(config.documents_root)
    if documents is None:
        documents = FileSystemDocumentTree(documents_root, config.document_filename)
    if document_path is None:
        document_path = derive_document_path(filepath, documents_root)
    logger.debug("Rendering %s as document %r", filepath, document_path)

    return render_html(content, document_path, config, documents)
