"""Filesystem helpers and the on-disk document tree."""

from __future__ import annotations

import logging
import os
import stat
from collections.abc import Iterator
from pathlib import Path, PurePosixPath
from typing import BinaryIO

from .constants import DEFAULT_MAX_FILE_SIZE, DOCUMENT_FILENAME, MARKDOWN_EXTENSIONS
from .exceptions import FileTooLargeError, UnsafePathError
from .models import DocumentEntry

logger = logging.getLogger(__name__)

MAX_FILE_SIZE_ENV_VAR = "WIKIDOWN_MAX_FILE_SIZE"


def get_max_file_size(default: int = DEFAULT_MAX_FILE_SIZE) -> int:
    """Resolve the maximum allowed file size.

    Args:
        default: Fallback value in bytes when the environment variable is unset.

    Returns:
        int: Maximum allowed file size in bytes.

    Raises:
        ValueError: If the environment value is not a positive integer.

    Examples:
        os.environ["WIKIDOWN_MAX_FILE_SIZE"] = "204800"
        limit = get_max_file_size(default=102400)
    """
    env_value = os.environ.get(MAX_FILE_SIZE_ENV_VAR)
    if env_value is None:
        return default

    try:
        max_size = int(env_value)
    except ValueError as error:
        error_message = (
            f"Invalid value for {MAX_FILE_SIZE_ENV_VAR}: {env_value} (expected positive integer)"
        )
        raise ValueError(error_message) from error

    if max_size <= 0:
        error_message = f"{MAX_FILE_SIZE_ENV_VAR} must be a positive integer, got {max_size}."
        raise ValueError(error_message)

    return max_size


def contains_symlink(path: Path) -> bool:
    """Check whether a path or any parent directory is a symlink.

    Args:
        path: Path to inspect.

    Returns:
        bool: True when a symlink is encountered, otherwise False.
    """
    for candidate in (path, *path.parents):
        try:
            if candidate.is_symlink():
                return True
        except OSError:
            continue
    return False


def normalize_filepath(raw_path: str, base_dir: Path) -> Path:
    """Resolve and validate a Markdown filepath under a base directory.

    Args:
        raw_path: User-supplied path to a Markdown file (absolute or relative).
        base_dir: Working directory that constrains allowed paths.

    Returns:
        Path: Absolute path to the Markdown file.

    Raises:
        ValueError: If the path does not exist, is outside `base_dir`, uses an
            unsupported extension, or traverses a symlink.

    Examples:
        normalize_filepath("data/documents/intro/document.md", Path.cwd())
    """
    path = Path(raw_path).expanduser()

    if contains_symlink(path):
        error_message = f"Symlinks are not supported for security reasons: {path}"
        raise ValueError(error_message)

    try:
        resolved = path.resolve(strict=True)
    except FileNotFoundError as error:
        error_message = f"{path} does not exist."
        raise ValueError(error_message) from error
    except OSError as error:
        error_message = f"Error resolving {path}: {error}"
        raise ValueError(error_message) from error

    if not resolved.is_file():
        error_message = f"{resolved} is not a regular file."
        raise ValueError(error_message)

    try:
        resolved.relative_to(base_dir)
    except ValueError as error:
        error_message = f"{resolved} is outside of the working directory {base_dir}."
        raise ValueError(error_message) from error

    if resolved.suffix.lower() not in MARKDOWN_EXTENSIONS:
        error_message = f"{resolved} is not a Markdown file.\n"
        error_message += f"Supported extensions are: {', '.join(MARKDOWN_EXTENSIONS)}"
        raise ValueError(error_message)

    return resolved


def collect_file_stat(filepath: Path) -> os.stat_result:
    """Return stat information for a file while disallowing symlinks.

    Args:
        filepath: Path to the file.

    Returns:
        os.stat_result: File metadata gathered without following symlinks.

    Raises:
        IOError: If the path is inaccessible, a symlink, or not a regular file.
    """
    try:
        stat_result = os.stat(filepath, follow_symlinks=False)
    except OSError as error:
        error_message = f"Error accessing {filepath}: {error}"
        raise IOError(error_message) from error

    if stat.S_ISLNK(stat_result.st_mode):
        error_message = f"Symlinks are not supported: {filepath}."
        raise IOError(error_message)

    if not stat.S_ISREG(stat_result.st_mode):
        error_message = f"{filepath} is not a regular file."
        raise IOError(error_message)

    return stat_result


def enforce_file_size(stat_result: os.stat_result, max_size: int) -> None:
    """Guard against files that exceed the configured maximum size.

    Args:
        stat_result: File stat used to determine size in bytes.
        max_size: Maximum allowed size in bytes.

    Raises:
        FileTooLargeError: If `stat_result.st_size` exceeds `max_size`.
    """
    if stat_result.st_size > max_size:
        raise FileTooLargeError(stat_result.st_size, max_size)


def safe_read(filepath: Path) -> BinaryIO:
    """Open a file for binary reading with consistent error handling.

    Args:
        filepath: Path to the file.

    Returns:
        BinaryIO: File handle opened for reading.

    Raises:
        IOError: If the path is missing, inaccessible, or not a file.

    Examples:
        with safe_read(Path("document.md")) as handle:
            data = handle.read()
    """
    try:
        return open(filepath, "rb")
    except (
        FileNotFoundError,
        PermissionError,
        IsADirectoryError,
        NotADirectoryError,
    ) as error:
        error_message = f"Error accessing {filepath}: {error}"
        raise IOError(error_message) from error


class FileSystemDocumentTree:
    """Document tree stored as folders holding a ``document.md`` each.

    Symlinks are never followed. Entries that cannot be inspected are
    skipped.

    Args:
        root: Directory holding the documents.
        document_filename: Name of the markdown file inside each folder.

    Examples:
        tree = FileSystemDocumentTree(Path("data/documents"))
        paths = [entry.path for entry in tree.iter_documents()]
    """

    def __init__(self, root: Path | str, document_filename: str = DOCUMENT_FILENAME):
        self.root = Path(root)
        self.document_filename = document_filename

    def resolve_folder(self, folder: str) -> Path:
        """Resolve a folder relative to the root.

        Raises:
            UnsafePathError: If the folder is absolute or climbs out of the root.
        """
        relative = PurePosixPath(folder.replace("\\", "/").strip("/"))
        if relative.is_absolute() or ".." in relative.parts:
            raise UnsafePathError(folder)
        return self.root.joinpath(*relative.parts)

    def iter_documents(self, folder: str = "") -> Iterator[DocumentEntry]:
        base = self.resolve_folder(folder)
        if not base.is_dir():
            return

        for dirpath, _, filenames in os.walk(base):
            if self.document_filename not in filenames:
                continue

            document_file = Path(dirpath) / self.document_filename
            try:
                stat_result = os.stat(document_file, follow_symlinks=False)
            except OSError as error:
                logger.debug("Skipping %s: %s", document_file, error)
                continue

            if not stat.S_ISREG(stat_result.st_mode):
                logger.debug("Skipping %s: not a regular file", document_file)
                continue

            relative = Path(dirpath).relative_to(self.root).as_posix()
            yield DocumentEntry(
                path="" if relative == "." else relative,
                modified=stat_result.st_mtime,
            )

    def read_document(self, path: str) -> bytes:
        document_file = self.resolve_folder(path) / self.document_filename
        with safe_read(document_file) as handle:
            return handle.read()
