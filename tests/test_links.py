from __future__ import annotations

import pytest

from wikidown.links import is_local_reference, rewrite_local_reference


@pytest.mark.parametrize(
    ("destination", "expected"),
    [
        ("img.png", True),
        ("/img.png", True),
        ("../shared/diagram.svg", True),
        ("", False),
        ("   ", False),
        ("http://example.com/a.png", False),
        ("https://example.com/a.png", False),
        ("ftp://example.com/file.zip", False),
        ("s3://bucket/key", False),
    ],
)
def test_is_local_reference(destination: str, expected: bool):
    assert is_local_reference(destination) is expected


def test_relative_reference_is_resolved_from_document_folder():
    assert (
        rewrite_local_reference("img.png", "tutorials/intro")
        == "/api/files/tutorials/intro/img.png"
    )


def test_absolute_reference_is_resolved_from_storage_root():
    assert rewrite_local_reference("/img.png", "tutorials/intro") == "/api/files/img.png"


def test_backslashes_are_normalized():
    assert (
        rewrite_local_reference("assets\\img.png", "tutorials\\intro")
        == "/api/files/tutorials/intro/assets/img.png"
    )


def test_surrounding_slashes_in_document_path_are_ignored():
    assert rewrite_local_reference("a.pdf", "/docs/") == "/api/files/docs/a.pdf"


def test_custom_prefix():
    assert rewrite_local_reference("a.pdf", "docs", file_prefix="/files/") == "/files/docs/a.pdf"
