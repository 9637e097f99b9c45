from __future__ import annotations

import logging
import textwrap
from pathlib import Path

import pytest

from wikidown.cli import cli
from wikidown.filesystem import MAX_FILE_SIZE_ENV_VAR


@pytest.fixture(autouse=True)
def _restore_root_logger():
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level
    yield
    for handler in root_logger.handlers:
        if handler not in handlers:
            handler.close()
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)


def _write(base: Path, relative: str, content: str) -> Path:
    path = base / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(content).lstrip(), encoding="utf-8")
    return path


def _write_pyproject(base: Path, body: str) -> Path:
    return _write(base, "pyproject.toml", body)


def test_cli_prints_html(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(
        tmp_path,
        "data/documents/intro/document.md",
        """
        # Intro

        See ![shot](shot.png) and ==this==.
        """,
    )

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code == 0
    assert result.output.startswith('<h1 id="intro">Intro</h1>\n')
    assert 'src="/api/files/intro/shot.png"' in result.output
    assert "<mark>this</mark>" in result.output


def test_cli_document_path_option(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(tmp_path, "page.md", "[a](a.pdf)\n")

    result = cli_runner.invoke(cli, ["--document-path", "custom/place", str(target)])

    assert result.exit_code == 0
    assert 'href="/api/files/custom/place/a.pdf"' in result.output


def test_cli_file_prefix_option(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(tmp_path, "page.md", "[a](a.pdf)\n")

    result = cli_runner.invoke(
        cli, ["--document-path", "x", "--file-prefix", "/files", str(target)]
    )

    assert result.exit_code == 0
    assert 'href="/files/x/a.pdf"' in result.output


def test_cli_reads_config_file(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    _write_pyproject(
        tmp_path,
        """
        [tool.wikidown]
        file_prefix = "/from-config"
        smart_punctuation = true
        """,
    )
    target = _write(tmp_path, "page.md", '"quoted" [a](a.pdf)\n')

    result = cli_runner.invoke(cli, ["--document-path", "x", str(target)])

    assert result.exit_code == 0
    assert 'href="/from-config/x/a.pdf"' in result.output
    assert "“quoted”" in result.output


def test_cli_smart_punctuation_flag_overrides_config(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    _write_pyproject(
        tmp_path,
        """
        [tool.wikidown]
        smart_punctuation = true
        """,
    )
    target = _write(tmp_path, "page.md", '"quoted"\n')

    result = cli_runner.invoke(cli, ["--no-smart-punctuation", str(target)])

    assert result.exit_code == 0
    assert "“" not in result.output


def test_cli_stats_use_documents_root(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    _write(tmp_path, "wiki/a/document.md", "# A\n")
    _write(tmp_path, "wiki/b/document.md", "# B\n")
    target = _write(tmp_path, "wiki/c/document.md", ":::stats count=*:::\n")

    result = cli_runner.invoke(cli, ["--documents-root", "wiki", str(target)])

    assert result.exit_code == 0
    assert '<div class="count-number">3</div>' in result.output


def test_cli_writes_output_file(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(tmp_path, "page.md", "Hello\n")
    output = tmp_path / "page.html"

    result = cli_runner.invoke(cli, ["-o", str(output), str(target)])

    assert result.exit_code == 0
    assert result.output == ""
    assert output.read_text(encoding="utf-8") == "<p>Hello</p>\n"


def test_cli_rejects_non_markdown_files(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(tmp_path, "notes.txt", "Hello\n")

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code != 0
    assert "not a Markdown file" in result.output


def test_cli_rejects_files_outside_working_directory(cli_runner, tmp_path, monkeypatch):
    workdir = tmp_path / "work"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    target = _write(tmp_path, "outside.md", "Hello\n")

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code != 0
    assert "outside of the working directory" in result.output


def test_cli_rejects_symlinks(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(tmp_path, "real.md", "Hello\n")
    link = tmp_path / "link.md"
    link.symlink_to(target)

    result = cli_runner.invoke(cli, [str(link)])

    assert result.exit_code != 0
    assert "Symlinks are not supported" in result.output


def test_cli_rejects_files_over_size_limit(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv(MAX_FILE_SIZE_ENV_VAR, "10")
    target = _write(tmp_path, "big.md", "x" * 100 + "\n")

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code == 1
    assert "exceeding the limit of 10 bytes" in result.output


def test_cli_rejects_invalid_size_environment(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv(MAX_FILE_SIZE_ENV_VAR, "lots")
    target = _write(tmp_path, "page.md", "Hello\n")

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code == 1
    assert f"Invalid value for {MAX_FILE_SIZE_ENV_VAR}" in result.output


def test_cli_rejects_invalid_config(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    _write_pyproject(
        tmp_path,
        """
        [tool.wikidown]
        recent_limit = 0
        """,
    )
    target = _write(tmp_path, "page.md", "Hello\n")

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code == 2
    assert "recent_limit" in result.output


def test_cli_writes_log_file(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(tmp_path, "page.md", "Hello\n")
    log_file = tmp_path / "wikidown.log"

    result = cli_runner.invoke(
        cli, ["--log-level", "debug", "--log-file", str(log_file), "-o", "out.html", str(target)]
    )

    assert result.exit_code == 0
    assert "Rendering" in log_file.read_text(encoding="utf-8")
