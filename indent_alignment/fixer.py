"""Apply diagnostic fixes to Markdown text."""

from __future__ import annotations

from collections.abc import Iterable

from .config import LintConfig
from .constants import LINE_BREAK_PATTERN
from .linter import lint_markdown
from .models import Diagnostic, FixEdit

DEFAULT_MAX_PASSES = 10


def split_keepends(content: str) -> list[tuple[str, str]]:
    """Split text into ``(line, line_ending)`` pairs.

    Only ``\\n``, ``\\r\\n``, and ``\\r`` end a line, matching the parser's line
    numbering. The last pair has an empty ending when the text does not end
    with a line break.

    Examples:
        split_keepends("a\\r\\nb")  # [("a", "\\r\\n"), ("b", "")]
    """
    pairs = []
    position = 0
    for match in LINE_BREAK_PATTERN.finditer(content):
        pairs.append((content[position : match.start()], match.group(0)))
        position = match.end()
    if position < len(content):
        pairs.append((content[position:], ""))
    return pairs


def _apply_line_edits(line: str, edits: list[FixEdit]) -> str:
    # Right to left, so earlier columns stay valid; overlapping edits are dropped.
    applied_start = len(line) + 1
    for edit in sorted(edits, key=lambda edit: -edit.edit_column):
        start = edit.edit_column - 1
        end = start + edit.delete_count
        if start < 0 or end > len(line) or end > applied_start or start >= applied_start:
            continue
        line = line[:start] + edit.insert_text + line[end:]
        applied_start = start
    return line


def apply_fixes(content: str, diagnostics: Iterable[Diagnostic]) -> str:
    """Apply the fix of every fixable diagnostic.

    Identical edits on the same line are applied once. When two edits on a
    line overlap, the one listed first among edits starting at the same
    column wins and the other is skipped. Line endings are preserved.

    Args:
        content: Markdown text the diagnostics were produced for.
        diagnostics: Diagnostics, in reporting order.

    Returns:
        str: Fixed text.

    Examples:
        diagnostics = lint_markdown(" text\\n")
        apply_fixes(" text\\n", diagnostics)  # "text\\n"
    """
    edits_by_line: dict[int, list[FixEdit]] = {}
    for diagnostic in diagnostics:
        if diagnostic.fix is None:
            continue
        line_edits = edits_by_line.setdefault(diagnostic.line, [])
        if diagnostic.fix not in line_edits:
            line_edits.append(diagnostic.fix)

    pairs = split_keepends(content)
    fixed = []
    for line_number, (line, ending) in enumerate(pairs, start=1):
        if line_number in edits_by_line:
            line = _apply_line_edits(line, edits_by_line[line_number])
        fixed.append(line + ending)
    return "".join(fixed)


def fix_markdown(
    content: str,
    config: LintConfig | None = None,
    max_passes: int = DEFAULT_MAX_PASSES,
    max_line_length: int | None = None,
) -> str:
    """Fix indentation until the text is stable.

    Moving one block can change the baseline of another, so fixing is
    repeated until no fixable diagnostic changes the text or `max_passes` is
    reached.

    Args:
        content: Markdown text.
        config: Lint configuration. Defaults are used when None.
        max_passes: Maximum number of lint-and-fix rounds.
        max_line_length: Optional override for the configured line limit.

    Returns:
        str: Fixed text.

    Raises:
        LineTooLongError: If a line exceeds the maximum line length.

    Examples:
        fix_markdown("* item\\n   wrapped\\n")  # "* item\\n  wrapped\\n"
    """
    for _ in range(max_passes):
        diagnostics = lint_markdown(content, config, max_line_length)
        fixed = apply_fixes(content, diagnostics)
        if fixed == content:
            break
        content = fixed
    return content
