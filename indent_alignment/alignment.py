"""Alignment of top-level blocks, wrapped lines, and nested blocks."""

from __future__ import annotations

from collections.abc import Callable, Sequence

from .config import LintConfig
from .constants import (
    ALIGNMENT_RULE,
    CONTAINER_TYPES,
    LIST_TYPES,
    NESTED_BLOCK_TYPES,
    QUOTE_CHILD_TYPES,
    READABLE_NAMES,
    TEXT_LIKE_TYPES,
    TOP_LEVEL_BLOCK_TYPES,
)
from .indentation import realign_fix
from .models import Diagnostic, FixEdit, Node, NodeType
from .traversal import SkipTo, find_first_non_html_token_of_type, iterate, traverse

Emit = Callable[[Diagnostic], None]


def readable_name(node: Node) -> str:
    """Return the plural noun used for a node type in messages."""
    return READABLE_NAMES.get(node.type, node.type.value)


def _report(
    emit: Emit,
    node: Node,
    expected: int,
    message: str,
    fix: FixEdit | None = None,
) -> None:
    actual = node.start_column - 1
    if expected == actual:
        return
    emit(
        Diagnostic(
            rule=ALIGNMENT_RULE,
            line=node.start_line,
            expected=expected,
            actual=actual,
            message=message,
            fix_range=(1, max(actual, 1)),
            fix=fix if fix is not None else realign_fix(node.raw_line, node.start_column, expected),
        )
    )


def check_top_level_blocks(nodes: Sequence[Node], emit: Emit) -> None:
    """Flag indented block quotes, code blocks, and paragraphs at the document root."""

    def visit(node: Node, skip_to: SkipTo) -> None:
        _report(emit, node, 0, f"Top-level {readable_name(node)} should not be indented")

    iterate(nodes, TOP_LEVEL_BLOCK_TYPES, visit)


def check_top_level_lists(nodes: Sequence[Node], start_indent: int, emit: Emit) -> None:
    """Flag root lists that do not start exactly `start_indent` columns in."""

    def visit(node: Node, skip_to: SkipTo) -> None:
        _report(
            emit,
            node,
            start_indent,
            f"Top-level {readable_name(node)} should be indented {start_indent} spaces.",
            fix=FixEdit(1, node.start_column - 1, " " * start_indent),
        )

    iterate(nodes, LIST_TYPES, visit)


def check_wrapped_lines(nodes: Sequence[Node], emit: Emit) -> None:
    """Require every line of a paragraph to start where its first line does.

    The first text-like node of the paragraph that does not share a line with
    inline HTML sets the baseline. Only the first text-like node of each
    physical line is checked.
    """

    def check_paragraph(paragraph: Node) -> None:
        first = find_first_non_html_token_of_type(paragraph.children, TEXT_LIKE_TYPES)
        if first is None:
            return
        expected = first.start_column - 1

        def visit(child: Node, skip_to: SkipTo) -> None:
            _report(
                emit,
                child,
                expected,
                "Wrapped text should be left-aligned with the preceding content",
            )
            skip_to(NodeType.LINE_ENDING)

        iterate(paragraph.children, TEXT_LIKE_TYPES, visit)

    traverse(nodes, {NodeType.PARAGRAPH}, check_paragraph)


def check_nested_blocks(nodes: Sequence[Node], config: LintConfig, emit: Emit) -> None:
    """Align the blocks nested in block quotes and lists.

    Within a container, the first paragraph sets the baseline column. List
    item markers must line up with the list's first marker, after which the
    baseline moves to the content column of that item. With ``ul_indent``
    configured, lists nested directly in an unordered list are instead
    expected ``ul_indent`` columns right of the parent list.
    """

    def check_container(container: Node) -> None:
        first = find_first_non_html_token_of_type(container.children, {NodeType.CONTENT})
        if first is None:
            return

        child_types = QUOTE_CHILD_TYPES if container.type is NodeType.BLOCK_QUOTE else NESTED_BLOCK_TYPES
        container_indent = container.start_column - 1
        expected = first.start_column - 1

        def visit(child: Node, skip_to: SkipTo) -> None:
            nonlocal expected

            if child.type is NodeType.LIST_ITEM_PREFIX:
                _report(
                    emit,
                    child,
                    container_indent,
                    "List items should be left-aligned with the preceding list items",
                )
                expected = container_indent + child.end_column - child.start_column
                skip_to(NodeType.LINE_ENDING)
                return

            if (
                config.ul_indent
                and container.type is NodeType.LIST_UNORDERED
                and child.type in LIST_TYPES
            ):
                _report(
                    emit,
                    child,
                    container_indent + config.ul_indent,
                    f"Child {readable_name(child)} should be indented {config.ul_indent} "
                    "from the parent list",
                )
                return

            _report(
                emit,
                child,
                expected,
                f"Nested {readable_name(child)} should be left-aligned with the preceding content",
            )

        iterate(container.children, child_types, visit)

    traverse(nodes, CONTAINER_TYPES, check_container)


def check_alignment(nodes: Sequence[Node], config: LintConfig, emit: Emit) -> None:
    """Run every alignment check over a parsed document.

    Args:
        nodes: Root nodes of the positioned syntax tree.
        config: Lint configuration; ``start_indent`` enables the top-level
            list check and ``ul_indent`` relaxes nested unordered lists.
        emit: Callback receiving each diagnostic.

    Examples:
        diagnostics = []
        check_alignment(parse_markdown(" text\\n").nodes, LintConfig(), diagnostics.append)
        diagnostics[0].message  # "Top-level paragraphs should not be indented"
    """
    check_top_level_blocks(nodes, emit)
    if config.start_indent is not None:
        check_top_level_lists(nodes, config.start_indent, emit)
    check_wrapped_lines(nodes, emit)
    check_nested_blocks(nodes, config, emit)
