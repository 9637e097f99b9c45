"""
wikidown: renders wiki documents written in extended markdown to HTML.

This package can be used both as a CLI tool and as a library.

CLI Usage:
    wikidown data/documents/intro/document.md

Library Usage:
    from wikidown import FileSystemDocumentTree, render_html

    tree = FileSystemDocumentTree("data/documents")
    html = render_html(":::stats count=*:::", document_path="intro", documents=tree)
"""

from .config import RenderConfig
from .exceptions import FileTooLargeError, RenderError, UnsafePathError, WikidownError
from .filesystem import FileSystemDocumentTree
from .models import DocumentDescriptor, DocumentEntry, RenderContext
from .preprocessor import preprocess_markdown
from .renderer import RenderFileError, render_file, render_html, render_markdown
from .typography import apply_typography

__version__ = "0.1.0"

__all__ = [
    # Core functionality
    "render_html",
    "render_markdown",
    "render_file",
    "preprocess_markdown",
    "apply_typography",
    # Data models
    "RenderConfig",
    "RenderContext",
    "DocumentEntry",
    "DocumentDescriptor",
    "FileSystemDocumentTree",
    # Exceptions
    "WikidownError",
    "RenderError",
    "RenderFileError",
    "FileTooLargeError",
    "UnsafePathError",
    # Version
    "__version__",
]
