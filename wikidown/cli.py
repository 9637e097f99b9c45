"""
Renders a wiki markdown file to HTML.
The HTML is written to stdout, or to the file given with --output.
"""

from __future__ import annotations

from pathlib import Path

import click

from .config import ConfigError, apply_overrides, build_config
from .filesystem import get_max_file_size, normalize_filepath
from .logging_utils import configure_logging
from .renderer import RenderFileError, render_file

__all__ = ["cli"]

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


@click.command()
@click.version_option()
@click.option("--document-path", help="Folder of the document inside the document tree")
@click.option("--documents-root", help="Root directory of the document tree")
@click.option("--file-prefix", help="URL prefix for local file references")
@click.option(
    "--smart-punctuation/--no-smart-punctuation",
    default=None,
    help="Apply smart quotes and typographic replacements",
)
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, writable=True),
    help="Write the HTML to this file instead of stdout",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Logging verbosity",
)
@click.option("--log-file", type=click.Path(dir_okay=False), help="Also write logs to this file")
@click.argument("filepath", type=click.Path(exists=True, dir_okay=False))
def cli(
    filepath: str,
    document_path: str | None = None,
    documents_root: str | None = None,
    file_prefix: str | None = None,
    smart_punctuation: bool | None = None,
    output: str | None = None,
    log_level: str = "WARNING",
    log_file: str | None = None,
):
    """
    Entry point for rendering a wiki markdown file to HTML.

    Args:
        filepath: Path to the Markdown file to render.
        document_path: Folder used to resolve relative local references.
            Derived from the file location when omitted.
        documents_root: Override for the document tree root.
        file_prefix: Override for the URL prefix of local references.
        smart_punctuation: Override for smart punctuation.
        output: File receiving the HTML; stdout when omitted.
        log_level: Logging level name.
        log_file: Optional file receiving log records.

    Returns:
        None.

    Raises:
        click.BadParameter: If the path is rejected by the safety checks or the
            configuration is invalid.
        click.ClickException: If the file is too large or cannot be read, or
            the output cannot be written.

    Examples:
        wikidown data/documents/intro/document.md --document-path intro
    """
    configure_logging(log_level, log_file=log_file)

    base_dir = Path.cwd().resolve()
    try:
        filepath = normalize_filepath(filepath, base_dir)
    except ValueError as error:
        raise click.BadParameter(str(error)) from error

    try:
        config = build_config(
            filepath.parent,
            documents_root=documents_root,
            file_prefix=file_prefix,
            smart_punctuation=smart_punctuation,
        )
    except ConfigError as error:
        raise click.BadParameter(str(error)) from error

    try:
        max_file_size = get_max_file_size(default=config.max_file_size)
    except ValueError as error:
        raise click.ClickException(str(error)) from error
    config = apply_overrides(config, max_file_size=max_file_size)

    try:
        html = render_file(filepath, config, document_path=document_path)
    except RenderFileError as error:
        raise click.ClickException(str(error)) from error

    if output is None:
        click.echo(html, nl=False)
        return

    try:
        Path(output).write_text(html, encoding="utf-8")
    except OSError as error:
        raise click.ClickException(f"Error writing {output}: {error}") from error


if __name__ == "__main__":
    cli()
