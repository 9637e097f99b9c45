"""Configuration loading and management."""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields, replace
from pathlib import Path
import tomllib

from .constants import (
    DEFAULT_MAX_FILE_SIZE,
    DEFAULT_RECENT_LIMIT,
    DOCUMENT_FILENAME,
    DOCUMENTS_ROOT,
    FILE_PREFIX,
    TIMESTAMP_FORMAT,
)

logger = logging.getLogger(__name__)


@dataclass
class RenderConfig:
    """Configuration for rendering wiki documents.

    Attributes:
        file_prefix: URL prefix under which local files are served.
        documents_root: Root directory of the document tree.
        document_filename: Name of the markdown file inside each document folder.
        recent_limit: Number of entries listed by ``:::stats recent:::`` when
            no valid count is given.
        timestamp_format: ``strftime`` format used for modification times.
        smart_punctuation: Whether the top-level parse applies smart quotes and
            typographic replacements. Nested blocks never do.
        linkify: Whether bare URLs become links.
        heading_anchors: Whether headings receive generated ``id`` attributes.
        max_file_size: Maximum markdown file size in bytes.

    Examples:
        RenderConfig(file_prefix="/files", recent_limit=10)
    """

    # Local references
    file_prefix: str = FILE_PREFIX

    # Document tree
    documents_root: str = DOCUMENTS_ROOT
    document_filename: str = DOCUMENT_FILENAME
    recent_limit: int = DEFAULT_RECENT_LIMIT
    timestamp_format: str = TIMESTAMP_FORMAT

    # Parser
    smart_punctuation: bool = False
    linkify: bool = True
    heading_anchors: bool = True

    # Limits
    max_file_size: int = DEFAULT_MAX_FILE_SIZE


class ConfigError(ValueError):
    """Exception raised when configuration values are invalid.

    Examples:
        raise ConfigError("`recent_limit` must be a positive integer")
    """


def load_config(search_path: Path) -> RenderConfig:
    """Load configuration from the nearest config file.

    Walks parent directories from `search_path` to the filesystem root, reading
    the ``[tool.wikidown]`` table from `pyproject.toml` and the ``[wikidown]``
    or ``[tool.wikidown]`` table from `.wikidown.toml` when present. Returns
    default values when no configuration is found. TOML files that cannot be
    read or decoded are skipped.

    Args:
        search_path: Directory used as the starting point for configuration lookup.

    Returns:
        RenderConfig: Loaded configuration with defaults applied when necessary.

    Raises:
        ConfigError: If a wikidown table is present but not a mapping or
            contains unsupported keys.

    Examples:
        load_config(Path("docs"))
    """
    current = search_path.resolve()

    while True:
        pyproject_config = _load_from_file(
            current / "pyproject.toml", table_paths=[("tool", "wikidown")]
        )
        if pyproject_config is not None:
            return pyproject_config

        dotfile_config = _load_from_file(
            current / ".wikidown.toml",
            table_paths=[("wikidown",), ("tool", "wikidown")],
        )
        if dotfile_config is not None:
            return dotfile_config

        parent = current.parent
        if parent == current:
            break
        current = parent

    return RenderConfig()


_MISSING = object()


def _load_from_file(config_file: Path, table_paths: list[tuple[str, ...]]) -> RenderConfig | None:
    if not config_file.exists():
        return None

    try:
        with open(config_file, "rb") as stream:
            data = tomllib.load(stream)
    except (OSError, tomllib.TOMLDecodeError) as error:
        logger.debug("Skipping unreadable config file %s: %s", config_file, error)
        return None

    for table_path in table_paths:
        raw_config = _extract_table(data, table_path)
        if raw_config is _MISSING:
            continue
        return _build_config_from_raw(raw_config, config_file, table_path)

    return None


def _extract_table(data: object, table_path: tuple[str, ...]) -> object:
    current = data
    for key in table_path:
        if not isinstance(current, dict) or key not in current:
            return _MISSING
        current = current[key]
    return current


def _build_config_from_raw(
    raw_config: object, config_file: Path, table_path: tuple[str, ...]
) -> RenderConfig:
    table_display = ".".join(table_path)

    if raw_config is None:
        return RenderConfig()

    if not isinstance(raw_config, dict):
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}")

    known = {field.name for field in fields(RenderConfig)}
    unknown = sorted(set(raw_config) - known)
    if unknown:
        raise ConfigError(
            f"Unsupported `[{table_display}]` settings in {config_file}: {', '.join(unknown)}"
        )

    logger.debug("Loaded configuration from %s", config_file)
    return RenderConfig(**raw_config)


def validate_config(config: RenderConfig) -> None:
    """Validate a `RenderConfig` instance.

    Args:
        config: Configuration to validate.

    Raises:
        ConfigError: If string settings are empty, flags are not booleans, or
            numeric limits are not positive integers.

    Examples:
        validate_config(RenderConfig(recent_limit=3))
    """
    for name in ("file_prefix", "documents_root", "document_filename", "timestamp_format"):
        value = getattr(config, name)
        if not isinstance(value, str) or not value:
            raise ConfigError(f"`{name}` must be a non-empty string")

    if "/" in config.document_filename or "\\" in config.document_filename:
        raise ConfigError("`document_filename` must be a plain file name")

    for name in ("smart_punctuation", "linkify", "heading_anchors"):
        if not isinstance(getattr(config, name), bool):
            raise ConfigError(f"`{name}` must be a boolean")

    _ensure_integers(
        {
            "recent_limit": config.recent_limit,
            "max_file_size": config.max_file_size,
        }
    )
    _ensure_positive(
        {
            "recent_limit": config.recent_limit,
            "max_file_size": config.max_file_size,
        }
    )


def apply_overrides(config: RenderConfig, **overrides: object) -> RenderConfig:
    """Apply override values to a `RenderConfig`.

    Args:
        config: Base configuration to update.
        overrides: Override values keyed by configuration field name; values set to
            None are ignored.

    Returns:
        RenderConfig: New configuration with the provided overrides applied. The
        original configuration is returned when no changes are supplied.

    Raises:
        TypeError: If an override name is not defined on `RenderConfig`.

    Examples:
        updated = apply_overrides(config, file_prefix="/files")
    """
    changes = {key: value for key, value in overrides.items() if value is not None}
    if not changes:
        return config
    return replace(config, **changes)


def build_config(search_path: Path, **overrides: object) -> RenderConfig:
    """Load, override, and validate configuration.

    Args:
        search_path: Directory where configuration files are resolved.
        overrides: Override values keyed by configuration attributes; None values
            are ignored.

    Returns:
        RenderConfig: Validated configuration ready for rendering.

    Raises:
        ConfigError: If configuration loading or validation fails.

    Examples:
        config = build_config(Path.cwd(), documents_root="wiki/documents")
    """
    config = load_config(search_path)
    config = apply_overrides(config, **overrides)
    validate_config(config)
    return config


def _ensure_positive(values: dict[str, int]) -> None:
    for key, value in values.items():
        if value <= 0:
            raise ConfigError(f"`{key}` must be a positive integer")


def _ensure_integers(values: dict[str, object]) -> None:
    for key, value in values.items():
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"`{key}` must be an integer")
