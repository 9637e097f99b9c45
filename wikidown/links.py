"""Rewriting of local file references."""

from __future__ import annotations

from .constants import EXTERNAL_SCHEMES, FILE_PREFIX


def is_local_reference(destination: str) -> bool:
    """Tell whether a link, image or video destination points at wiki storage.

    Args:
        destination: Destination as written in the document.

    Returns:
        bool: True for non-empty destinations without a URL scheme.

    Examples:
        is_local_reference("diagram.png")  # True
        is_local_reference("https://example.com/a.png")  # False
    """
    destination = destination.strip()
    return (
        destination != ""
        and not destination.startswith(EXTERNAL_SCHEMES)
        and "://" not in destination
    )


def rewrite_local_reference(
    destination: str, document_path: str, file_prefix: str = FILE_PREFIX
) -> str:
    """Turn a local reference into a URL served by the file endpoint.

    Absolute references are resolved from the storage root; relative ones
    from the folder of the current document.

    Args:
        destination: Local reference, absolute (``/img.png``) or relative.
        document_path: Folder of the current document, e.g. ``tutorials/intro``.
        file_prefix: URL prefix of the file endpoint.

    Returns:
        str: Rewritten URL using forward slashes.

    Examples:
        rewrite_local_reference("img.png", "tutorials/intro")  # "/api/files/tutorials/intro/img.png"
        rewrite_local_reference("/img.png", "tutorials/intro")  # "/api/files/img.png"
    """
    destination = destination.strip()
    prefix = file_prefix.rstrip("/")

    if destination.startswith("/"):
        url = prefix + destination
    else:
        parts = [prefix, document_path.strip("/\\"), destination]
        url = "/".join(part for part in parts if part)

    return url.replace("\\", "/")
