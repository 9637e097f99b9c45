"""Logging setup for the wikidown command line."""

from __future__ import annotations

import logging
import sys


def configure_logging(
    log_level: int | str,
    log_file: str | None = None,
    trace_mode: bool = False,
) -> logging.Logger:
    """Configure root logging handlers.

    Library modules only create loggers; handlers are installed here by the
    command line entry point.

    Args:
        log_level: Numeric logging level or level name (e.g. ``"DEBUG"``).
        log_file: Optional path of a file receiving the same records.
        trace_mode: When True, records carry timestamps and logger names.

    Returns:
        logging.Logger: The configured root logger.

    Examples:
        configure_logging("DEBUG", log_file="wikidown.log")
    """
    if isinstance(log_level, int):
        resolved_level = log_level
    else:
        resolved_level = getattr(logging, str(log_level).upper(), logging.WARNING)

    root_logger = logging.getLogger()
    root_logger.setLevel(resolved_level)
    root_logger.handlers.clear()

    if trace_mode:
        formatter = logging.Formatter(
            "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
        )
    else:
        formatter = logging.Formatter("%(levelname)s: %(message)s")

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(resolved_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        except OSError as error:
            root_logger.warning("Could not create log file %s: %s", log_file, error)
        else:
            file_handler.setLevel(resolved_level)
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)
            root_logger.debug("Logging to file: %s", log_file)

    return root_logger
