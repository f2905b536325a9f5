"""Run the indentation rules over Markdown text or files."""

from __future__ import annotations

from pathlib import Path

from .alignment import check_alignment
from .config import ConfigError, LintConfig, validate_config
from .constants import DEFAULT_CONFIG
from .exceptions import LineTooLongError, LintFileError, ParseError
from .filesystem import safe_read
from .list_indent import check_list_indent
from .models import Diagnostic
from .parser import parse_markdown


def _by_line(diagnostics: list[Diagnostic]) -> list[Diagnostic]:
    return sorted(diagnostics, key=lambda diagnostic: diagnostic.line)


def lint_markdown(
    content: str, config: LintConfig | None = None, max_line_length: int | None = None
) -> list[Diagnostic]:
    """Check the indentation of a Markdown document.

    Runs the alignment rule (``indent-alignment``) followed by the list
    indentation rule (``ol-indent``). Each rule's diagnostics are sorted by
    line; ties keep the order in which they were found.

    Args:
        content: Markdown text.
        config: Lint configuration. Defaults are used when None.
        max_line_length: Optional override for the configured line limit.

    Returns:
        list[Diagnostic]: Diagnostics of both rules.

    Raises:
        LineTooLongError: If a line exceeds the maximum line length.

    Examples:
        lint_markdown("* item\\n   wrapped\\n")[0].line  # 2
    """
    config = config or DEFAULT_CONFIG
    result = parse_markdown(content, max_line_length, config)

    alignment: list[Diagnostic] = []
    check_alignment(result.nodes, config, alignment.append)
    list_indent: list[Diagnostic] = []
    check_list_indent(result, config, list_indent.append)

    return _by_line(alignment) + _by_line(list_indent)


def lint_file(
    filepath: Path, config: LintConfig | None = None, max_line_length: int | None = None
) -> tuple[str, list[Diagnostic]]:
    """Read and check a Markdown file.

    Args:
        filepath: Path to the Markdown file.
        config: Lint configuration; defaults to a new `LintConfig` when omitted.
        max_line_length: Optional override for the maximum allowed line length
            (excluding line endings).

    Returns:
        tuple[str, list[Diagnostic]]: File content, line endings included, and
            its diagnostics.

    Raises:
        LintFileError: If configuration is invalid, the file cannot be read or
            decoded, or a line exceeds the maximum length.

    Examples:
        content, diagnostics = lint_file(Path("README.md"), config, 120)
    """
    config = config or LintConfig()
    try:
        validate_config(config)
    except ConfigError as error:
        raise LintFileError(str(error)) from error

    effective_max_line_length = (
        config.max_line_length if max_line_length is None else max_line_length
    )
    if effective_max_line_length <= 0:
        raise LintFileError("`max_line_length` override must be a positive integer")

    try:
        with safe_read(filepath) as file:
            content = file.read()
    except UnicodeDecodeError as error:
        error_message = f"Invalid UTF-8 sequence in {filepath}: {error}"
        raise LintFileError(error_message) from error
    except IOError as error:
        raise LintFileError(str(error)) from error

    try:
        diagnostics = lint_markdown(content, config, effective_max_line_length)
    except LineTooLongError as error:
        error_message = (
            f"{filepath} contains a line at line {error.line_number} "
            f"exceeding the maximum allowed length of {error.max_line_length} characters."
        )
        raise LintFileError(error_message) from error
    except ParseError as error:
        error_message = f"{filepath}: {error}"
        raise LintFileError(error_message) from error

    return content, diagnostics
