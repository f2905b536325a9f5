"""
Checks the indentation of lists, wrapped lines, and nested blocks in Markdown files.
Diagnostics are printed to stdout; with `--fix`, fixable problems are rewritten in place.
"""

from __future__ import annotations

import sys
from pathlib import Path

import click
from .config import ConfigError, LintConfig, build_config
from .exceptions import LintFileError, ParseError
from .filesystem import (
    collect_file_stat,
    collect_markdown_files,
    enforce_file_size,
    ensure_file_unchanged,
    get_max_file_size,
    get_max_line_length,
    write_fixed,
)
from .fixer import fix_markdown
from .linter import lint_file, lint_markdown
from .models import Diagnostic

__all__ = ["cli", "count_fixed", "format_diagnostic"]


def format_diagnostic(path: str, diagnostic: Diagnostic) -> str:
    """Render a diagnostic as a single report line.

    Examples:
        format_diagnostic("README.md", diagnostic)
        # "README.md:2: indent-alignment Wrapped text should be ... [Expected: 2; Actual: 3]"
    """
    return (
        f"{path}:{diagnostic.line}: {diagnostic.rule} {diagnostic.message} "
        f"[Expected: {diagnostic.expected}; Actual: {diagnostic.actual}]"
    )


def count_fixed(before: list[Diagnostic], after: list[Diagnostic]) -> int:
    """Count the diagnostics whose line and rule are no longer reported after fixing."""
    still_reported = {(diagnostic.line, diagnostic.rule) for diagnostic in after}
    return sum(1 for diagnostic in before if (diagnostic.line, diagnostic.rule) not in still_reported)


def _display_path(filepath: Path, base_dir: Path) -> str:
    try:
        return str(filepath.relative_to(base_dir))
    except ValueError:
        return str(filepath)


def _check_file(filepath: Path, config: LintConfig, fix: bool) -> list[Diagnostic]:
    try:
        max_file_size = get_max_file_size(default=config.max_file_size)
        max_line_length = get_max_line_length(default=config.max_line_length)
    except ValueError as error:
        raise click.ClickException(str(error)) from error

    try:
        initial_stat = collect_file_stat(filepath)
        enforce_file_size(initial_stat, max_file_size, filepath)
    except IOError as error:
        raise click.ClickException(str(error)) from error

    try:
        content, diagnostics = lint_file(filepath, config, max_line_length)
    except LintFileError as error:
        raise click.ClickException(str(error)) from error

    try:
        post_parse_stat = collect_file_stat(filepath)
        ensure_file_unchanged(initial_stat, post_parse_stat, filepath)
    except IOError as error:
        raise click.ClickException(str(error)) from error

    if not fix or not any(diagnostic.fix for diagnostic in diagnostics):
        return diagnostics

    try:
        fixed = fix_markdown(content, config, max_line_length=max_line_length)
        remaining = lint_markdown(fixed, config, max_line_length)
    except ParseError as error:
        raise click.ClickException(f"{filepath}: {error}") from error

    if fixed != content:
        try:
            write_fixed(
                filepath,
                fixed,
                post_parse_stat,
                initial_stat,
                warn=lambda message: click.echo(message, err=True),
            )
        except IOError as error:
            raise click.ClickException(str(error)) from error
        click.echo(
            f"Fixed {count_fixed(diagnostics, remaining)} issue(s) in {filepath.name}", err=True
        )
    return remaining


@click.command()
@click.version_option()
@click.option("--start-indent", type=int, help="Required indentation of top-level lists")
@click.option(
    "--start-indented/--no-start-indented",
    default=None,
    help="Expect top-level list items to be indented",
)
@click.option("--indent", type=int, help="Indentation unit for nested lists")
@click.option("--ul-indent", type=int, help="Indentation of lists nested in unordered lists")
@click.option("--fix", is_flag=True, help="Rewrite files to fix what can be fixed")
@click.argument("filepaths", nargs=-1, required=True, type=click.Path(exists=True))
def cli(
    filepaths: tuple[str, ...],
    start_indent: int | None = None,
    start_indented: bool | None = None,
    indent: int | None = None,
    ul_indent: int | None = None,
    fix: bool = False,
):
    """
    Entry point for checking Markdown indentation.

    Args:
        filepaths: Markdown files, or directories searched for Markdown files.
        start_indent: Override for the required indentation of top-level lists.
        start_indented: Override for whether top-level list items are indented.
        indent: Override for the indentation unit.
        ul_indent: Override for the indentation of lists nested in unordered lists.
        fix: Rewrite files in place to fix fixable diagnostics.

    Returns:
        None. Exits with status 1 when diagnostics remain.

    Raises:
        click.BadParameter: If CLI parameters reference invalid paths or
            configuration values are invalid.
        click.ClickException: If a file exceeds the limits, cannot be parsed,
            or fails filesystem safety checks.

    Examples:
        indent-alignment README.md docs --ul-indent 4 --fix
    """
    base_dir = Path.cwd().resolve()
    try:
        files = collect_markdown_files(filepaths, base_dir)
    except ValueError as error:
        raise click.BadParameter(str(error)) from error

    if not files:
        click.echo("No Markdown files found.", err=True)
        return

    remaining = 0
    for filepath in files:
        try:
            config = build_config(
                filepath.parent,
                start_indent=start_indent,
                start_indented=start_indented,
                indent=indent,
                ul_indent=ul_indent,
            )
        except ConfigError as error:
            raise click.BadParameter(str(error)) from error

        display_path = _display_path(filepath, base_dir)
        for diagnostic in _check_file(filepath, config, fix):
            click.echo(format_diagnostic(display_path, diagnostic))
            remaining += 1

    if remaining:
        sys.exit(1)


if __name__ == "__main__":
    cli()
