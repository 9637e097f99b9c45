"""Package-specific exception types."""

from __future__ import annotations


class WikidownError(Exception):
    """Base class for errors raised by wikidown."""


class RenderError(WikidownError, ValueError):
    """Base class for rendering-related errors.

    The render pipeline recovers from malformed content on its own; these
    errors describe problems with the input source itself.
    """


class FileTooLargeError(RenderError):
    """Raised when a markdown source exceeds the configured size limit.

    Args:
        size: Size of the source in bytes.
        limit: Maximum allowed size in bytes.
    """

    def __init__(self, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__(f"Source is {self.size} bytes, exceeding the limit of {self.limit} bytes")


class UnsafePathError(WikidownError, ValueError):
    """Raised when a document-tree path escapes the tree root.

    Args:
        path: The offending relative path.
    """

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Path escapes the document tree: {self.path}")
