from __future__ import annotations

import os
from pathlib import Path

import pytest
from click.testing import CliRunner

from wikidown.filesystem import FileSystemDocumentTree


@pytest.fixture()
def cli_runner() -> CliRunner:
    """Provides a reusable Click CLI runner."""
    return CliRunner()


def _write_document(root: Path, folder: str, content: str, modified: float | None = None) -> Path:
    """Create ``<root>/<folder>/document.md`` and optionally set its mtime."""
    directory = root / folder if folder else root
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / "document.md"
    path.write_text(content, encoding="utf-8")
    if modified is not None:
        os.utime(path, (modified, modified))
    return path


@pytest.fixture()
def document_tree(tmp_path: Path) -> FileSystemDocumentTree:
    """A small document tree with known modification times."""
    root = tmp_path / "documents"
    _write_document(root, "", "# Home\n\nWelcome.\n", modified=1_700_000_000)
    _write_document(root, "guides", "# Guides\n", modified=1_700_000_100)
    _write_document(root, "guides/getting-started", "# Getting Started\n", modified=1_700_000_300)
    _write_document(root, "guides/advanced-topics", "No heading here.\n", modified=1_700_000_200)
    _write_document(root, "reference", "# Reference\n", modified=1_700_000_050)
    return FileSystemDocumentTree(root)
