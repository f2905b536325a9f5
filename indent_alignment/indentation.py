"""Marker and indentation arithmetic shared by the rules."""

from __future__ import annotations

from .constants import ORDERED_ITEM_PATTERN, UNORDERED_ITEM_PATTERN
from .models import FixEdit


def leading_spaces(text: str, start: int = 0) -> int:
    """Count the whitespace characters at the start of `text[start:]`.

    Tabs count as a single column.

    Examples:
        leading_spaces("   * item")  # 3
        leading_spaces(">   1. item", 1)  # 3
    """
    count = 0
    for character in text[start:]:
        if character not in " \t":
            break
        count += 1
    return count


def _skip_container_prefix(raw_line: str, start: int) -> int:
    position = start
    while position < len(raw_line) and raw_line[position] in " \t>":
        position += 1
    return position


def extract_marker(raw_line: str, ordered: bool, start: int = 0) -> str:
    """Return a list marker with the spaces that literally follow it.

    Leading whitespace and block quote markers before the list marker are
    skipped. An empty string is returned when no marker of the requested kind
    is found.

    Args:
        raw_line: Verbatim source line.
        ordered: Whether to look for an ordered (``1.``/``1)``) marker.
        start: Zero-based index where scanning begins.

    Returns:
        str: The marker text, e.g. ``"10. "`` or ``"*   "``.

    Examples:
        extract_marker("10. item", ordered=True)  # "10. "
        extract_marker(">   * item", ordered=False)  # "* "
    """
    pattern = ORDERED_ITEM_PATTERN if ordered else UNORDERED_ITEM_PATTERN
    match = pattern.match(raw_line[_skip_container_prefix(raw_line, start) :])
    if match is None:
        return ""
    return match.group("marker") + match.group("spaces")


def marker_width(raw_line: str, ordered: bool, start: int = 0) -> int:
    """Compute the columns consumed by a list marker and its trailing spaces.

    Unordered markers count the bullet plus the spaces that follow it; ordered
    markers count every digit, the delimiter, and the following spaces. The
    width is taken verbatim from the line, so ``9.`` and ``10.`` differ by one.

    Args:
        raw_line: Verbatim source line.
        ordered: Whether the marker is an ordered-list marker.
        start: Zero-based index where scanning begins.

    Returns:
        int: Marker width in columns, 0 when no marker is found.

    Examples:
        marker_width("* item", ordered=False)  # 2
        marker_width("9. item", ordered=True)  # 3
        marker_width("10.  item", ordered=True)  # 5
    """
    return len(extract_marker(raw_line, ordered, start))


def realign_fix(raw_line: str, start_column: int, expected: int) -> FixEdit | None:
    """Build an edit that moves the node at `start_column` to column `expected`.

    The whitespace run directly before the node is replaced. When the node
    has to move further left than that run allows (for example a block quote
    line indented before its ``>`` marker), the line's leading whitespace is
    shortened instead.

    Args:
        raw_line: Verbatim source line.
        start_column: One-based column of the node.
        expected: Expected zero-based indentation of the node.

    Returns:
        FixEdit | None: The edit, or None when no whitespace-only edit can
        reach the expected column.

    Examples:
        realign_fix("   wrapped", 4, 2)  # FixEdit(1, 3, "  ")
    """
    position = start_column - 1
    run_start = position
    while run_start > 0 and raw_line[run_start - 1] in " \t":
        run_start -= 1
    run_length = position - run_start
    new_length = run_length + expected - position
    if new_length >= 0:
        return FixEdit(run_start + 1, run_length, " " * new_length)

    shift = position - expected
    indent = leading_spaces(raw_line)
    if 0 < run_start and shift <= indent:
        return FixEdit(1, indent, " " * (indent - shift))
    return None
