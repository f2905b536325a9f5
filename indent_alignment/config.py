"""Configuration loading and management."""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
import tomllib


@dataclass
class LintConfig:
    """Configuration for the indentation rules.

    Attributes:
        start_indent: Required indentation of top-level lists. None disables
            the top-level list check.
        start_indented: Whether top-level list items are expected at
            `start_indent` (falling back to `indent`) instead of column 0.
        indent: Offset used when a list's own marker width cannot be used.
        ul_indent: Fixed indentation of lists nested in unordered lists.
            None derives it from `indent`.
        max_file_size: Maximum file size in bytes that will be processed.
        max_line_length: Maximum line length allowed during parsing.

    Examples:
        LintConfig(start_indent=2, ul_indent=3)
    """

    # List indentation
    start_indent: int | None = None
    start_indented: bool = False
    indent: int = 2
    ul_indent: int | None = None

    # Limits
    max_file_size: int = 10 * 1024 * 1024
    max_line_length: int = 10_000


class ConfigError(ValueError):
    """Exception raised when configuration values are invalid.

    Attributes:
        args: Arguments provided to the underlying `ValueError`.

    Examples:
        raise ConfigError("`indent` must be >= 0")
    """


def load_config(search_path: Path) -> LintConfig:
    """Load configuration from the nearest config file.

    Walks parent directories from `search_path` to the filesystem root, reading
    the ``[tool.indent-alignment]`` table from `pyproject.toml` and the
    ``[indent-alignment]`` or ``[tool.indent-alignment]`` table from
    `.indent-alignment.toml` when present. Returns default values when no
    configuration is found. TOML files that cannot be read or decoded are
    skipped.

    Args:
        search_path: Directory used as the starting point for configuration lookup.

    Returns:
        LintConfig: Loaded configuration with defaults applied when necessary.

    Raises:
        ConfigError: If the table is present but not a mapping or contains
            unsupported keys.

    Examples:
        load_config(Path("docs"))
    """
    current = search_path.resolve()

    while True:
        pyproject_config = _load_from_file(
            current / "pyproject.toml", table_paths=[("tool", "indent-alignment")]
        )
        if pyproject_config is not None:
            return pyproject_config

        dotfile_config = _load_from_file(
            current / ".indent-alignment.toml",
            table_paths=[("indent-alignment",), ("tool", "indent-alignment")],
        )
        if dotfile_config is not None:
            return dotfile_config

        parent = current.parent
        if parent == current:
            break
        current = parent

    return LintConfig()


_MISSING = object()


def _load_from_file(config_file: Path, table_paths: list[tuple[str, ...]]) -> LintConfig | None:
    if not config_file.exists():
        return None

    try:
        with open(config_file, "rb") as stream:
            data = tomllib.load(stream)
    except (OSError, tomllib.TOMLDecodeError):
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
) -> LintConfig:
    table_display = ".".join(table_path)

    if raw_config is None:
        return LintConfig()

    if not isinstance(raw_config, dict):
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}")

    if not raw_config:
        return LintConfig()

    # Keys may be spelled with hyphens or underscores
    raw_config = {key.replace("-", "_"): value for key, value in raw_config.items()}
    try:
        return LintConfig(**raw_config)
    except TypeError as error:
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}") from error


def validate_config(config: LintConfig) -> None:
    """Validate a `LintConfig` instance.

    Args:
        config: Configuration to validate.

    Returns:
        None.

    Raises:
        ConfigError: If an indentation value is negative or not an integer,
            `start_indented` is not a boolean, or a limit is non-positive.

    Examples:
        validate_config(LintConfig(indent=4))
    """
    _ensure_integers(
        {
            "indent": config.indent,
            "max_file_size": config.max_file_size,
            "max_line_length": config.max_line_length,
            **({"start_indent": config.start_indent} if config.start_indent is not None else {}),
            **({"ul_indent": config.ul_indent} if config.ul_indent is not None else {}),
        }
    )

    _ensure_non_negative(
        {
            "indent": config.indent,
            **({"start_indent": config.start_indent} if config.start_indent is not None else {}),
            **({"ul_indent": config.ul_indent} if config.ul_indent is not None else {}),
        }
    )

    if not isinstance(config.start_indented, bool):
        raise ConfigError("`start_indented` must be a boolean")

    _ensure_positive(
        {
            "max_file_size": config.max_file_size,
            "max_line_length": config.max_line_length,
        }
    )


def apply_overrides(config: LintConfig, **overrides: object) -> LintConfig:
    """Apply override values to a `LintConfig`.

    Args:
        config: Base configuration to update.
        overrides: Override values keyed by configuration field name; values set to
            None are ignored.

    Returns:
        LintConfig: New configuration with the provided overrides applied. The
        original configuration is returned when no changes are supplied.

    Raises:
        TypeError: If an override name is not defined on `LintConfig`.

    Examples:
        updated = apply_overrides(config, ul_indent=3)
    """
    changes = {key: value for key, value in overrides.items() if value is not None}
    if not changes:
        return config
    return replace(config, **changes)


def build_config(search_path: Path, **overrides: object) -> LintConfig:
    """Load, override, and validate configuration.

    Args:
        search_path: Directory where configuration files are resolved.
        overrides: Override values keyed by configuration attributes; None values
            are ignored.

    Returns:
        LintConfig: Validated configuration ready for linting.

    Raises:
        ConfigError: If configuration loading or validation fails.

    Examples:
        config = build_config(Path.cwd(), start_indent=2)
    """
    config = load_config(search_path)
    config = apply_overrides(config, **overrides)
    validate_config(config)
    return config


def _ensure_positive(values: dict[str, int]) -> None:
    for key, value in values.items():
        if value <= 0:
            raise ConfigError(f"`{key}` must be a positive integer")


def _ensure_non_negative(values: dict[str, int]) -> None:
    for key, value in values.items():
        if value < 0:
            raise ConfigError(f"`{key}` must be a non-negative integer")


def _ensure_integers(values: dict[str, object]) -> None:
    for key, value in values.items():
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"`{key}` must be an integer")
