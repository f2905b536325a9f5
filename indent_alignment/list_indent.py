"""Indentation of ordered lists and of lists nested in ordered lists."""

from __future__ import annotations

from collections.abc import Callable, Iterator, Sequence
from dataclasses import replace

from .config import LintConfig
from .constants import (
    FOOTNOTE_DEFINITION_PATTERN,
    LIST_INDENT_RULE,
    LIST_TYPES,
    ORDERED_ITEM_PATTERN,
    ORPHAN_ITEM_PATTERN,
    UNORDERED_ITEM_PATTERN,
)
from .indentation import extract_marker, leading_spaces
from .models import Diagnostic, FixEdit, ListItem, NestingFrame, Node, NodeType, ParseResult, Scope

Emit = Callable[[Diagnostic], None]
Event = tuple[str, Node]
Stack = tuple[NestingFrame, ...]

LIST_OPEN = "list_open"
LIST_CLOSE = "list_close"
ITEM_OPEN = "item_open"
INLINE = "inline"
SCOPE_OPEN = "scope_open"
SCOPE_CLOSE = "scope_close"


def list_events(nodes: Sequence[Node]) -> Iterator[Event]:
    """Flatten the tree into the event stream consumed by `flatten_lists`.

    Lists yield ``list_open``/``list_close`` around one ``item_open`` per
    marker and one ``inline`` per paragraph. Block quotes and footnote
    definitions yield ``scope_open``/``scope_close``: lists inside them indent
    from the scope's own prefix.

    Examples:
        [kind for kind, _ in list_events(parse_markdown("1. a\\n").nodes)]
        # ["list_open", "item_open", "inline", "list_close"]
    """
    for node in nodes:
        if node.type in LIST_TYPES:
            yield LIST_OPEN, node
            yield from list_events(node.children)
            yield LIST_CLOSE, node
        elif node.type is NodeType.LIST_ITEM_PREFIX:
            yield ITEM_OPEN, node
        elif node.type is NodeType.CONTENT:
            yield INLINE, node
        elif node.type in (NodeType.BLOCK_QUOTE, NodeType.FOOTNOTE_DEFINITION):
            yield SCOPE_OPEN, node
            yield from list_events(node.children)
            yield SCOPE_CLOSE, node


def _scope_for(node: Node, parent: Scope) -> Scope:
    if node.type is NodeType.BLOCK_QUOTE:
        prefix_ends = {
            child.start_line: child.end_column - 1
            for child in node.children
            if child.type is NodeType.BLOCK_QUOTE_PREFIX
        }
        return Scope(prefix_ends=prefix_ends, default_offset=parent.default_offset, prefixed=True)

    label_start = node.start_column - 1
    first_line_offset = label_start
    label_match = FOOTNOTE_DEFINITION_PATTERN.match(node.raw_line[label_start:])
    if label_match:
        first_line_offset += label_match.end()
        first_line_offset += leading_spaces(node.raw_line, first_line_offset)
    return Scope(
        prefix_ends={node.start_line: first_line_offset},
        default_offset=parent.offset(node.start_line) + 4,
    )


def sub_list_indentation(stack: Stack, ul_indent: int) -> int:
    """Sum the indentation that enclosing lists impose on a nested list.

    Args:
        stack: Enclosing frames, outermost first.
        ul_indent: Columns contributed by an enclosing unordered list.

    Returns:
        int: Ordered frames contribute the marker width of their latest item,
        unordered frames `ul_indent`; frames without items contribute nothing.

    Examples:
        frame = NestingFrame(ordered=True, parents_all_unordered=True,
                             inherited_sub_indent=0, items=(ListItem(1, "10. a", "10. ", True, 0),))
        sub_list_indentation((frame,), 2)  # 4
    """
    total = 0
    for frame in stack:
        if not frame.items:
            continue
        if frame.ordered:
            total += len(frame.items[-1].marker_text)
        else:
            total += ul_indent
    return total


def _child_frame(stack: Stack, ordered: bool, ul_indent: int, scope: Scope, position: int) -> NestingFrame:
    parent = stack[-1] if stack else None
    return NestingFrame(
        ordered=ordered,
        parents_all_unordered=parent is None
        or (not parent.ordered and parent.parents_all_unordered),
        inherited_sub_indent=sub_list_indentation(stack, ul_indent),
        position=position,
        scope=scope,
    )


def _absorbing_frame(
    stack: Stack, ordered: bool, ul_indent: int, scope: Scope, position: int
) -> NestingFrame:
    # The absorbed line continues the innermost item's paragraph, so that item
    # contributes its content column whatever its list kind.
    frame = _child_frame(stack, ordered, ul_indent, scope, position)
    parent = stack[-1]
    if parent.ordered or not parent.items:
        return frame
    inherited = sub_list_indentation(stack[:-1], ul_indent) + len(parent.items[-1].marker_text)
    return replace(frame, inherited_sub_indent=inherited)


def _orphan_items(content: Node, lines: Sequence[str], scope: Scope) -> list[ListItem]:
    """Collect marker-like lines that a paragraph absorbed as plain text.

    A nested list indented less than its parent's content is continuation
    text to a Markdown parser, so it would otherwise escape validation. Lazy
    lines of a block quote carry no prefix to measure from and are skipped.
    """
    items = []
    for line_number in range(content.start_line + 1, content.end_line + 1):
        if scope.prefixed and line_number not in scope.prefix_ends:
            continue
        raw_line = lines[line_number - 1]
        offset = scope.offset(line_number)
        if not ORPHAN_ITEM_PATTERN.match(raw_line[offset:]):
            continue
        ordered = ORDERED_ITEM_PATTERN.match(raw_line[offset:]) is not None
        items.append(
            ListItem(
                line_number=line_number,
                raw_line=raw_line,
                marker_text=extract_marker(raw_line, ordered, offset),
                ordered=ordered,
                column=offset + leading_spaces(raw_line, offset),
                synthetic=True,
            )
        )
    return items


def flatten_lists(events: Sequence[Event], lines: Sequence[str], config: LintConfig) -> list[NestingFrame]:
    """Reduce the event stream into one finalized frame per list.

    Frames are immutable and the open lists form a tuple stack. A finalized
    frame is recorded at the position where its list opened, so outer lists
    precede the lists nested in them. Every absorbed marker-like line gets a
    synthetic frame nested in the list whose paragraph absorbed it.

    Args:
        events: Output of `list_events`.
        lines: Source lines of the document.
        config: Lint configuration; ``ul_indent`` falls back to ``indent``.

    Returns:
        list[NestingFrame]: Finalized frames.
    """
    ul_indent = config.ul_indent if config.ul_indent is not None else config.indent
    finalized: list[NestingFrame] = []
    stack: Stack = ()
    scope = Scope()
    saved: tuple[tuple[Stack, Scope], ...] = ()

    for kind, node in events:
        if kind == SCOPE_OPEN:
            saved = (*saved, (stack, scope))
            stack, scope = (), _scope_for(node, scope)
        elif kind == SCOPE_CLOSE:
            (stack, scope), saved = saved[-1], saved[:-1]
        elif kind == LIST_OPEN:
            ordered = node.type is NodeType.LIST_ORDERED
            stack = (*stack, _child_frame(stack, ordered, ul_indent, scope, len(finalized)))
        elif kind == LIST_CLOSE:
            frame = stack[-1]
            stack = stack[:-1]
            finalized.insert(frame.position, frame)
        elif kind == ITEM_OPEN:
            frame = stack[-1]
            column = node.start_column - 1
            item = ListItem(
                line_number=node.start_line,
                raw_line=node.raw_line,
                marker_text=extract_marker(node.raw_line, frame.ordered, column),
                ordered=frame.ordered,
                column=column,
            )
            stack = (*stack[:-1], replace(frame, items=(*frame.items, item)))
        elif kind == INLINE and stack:
            for orphan in _orphan_items(node, lines, scope):
                frame = _absorbing_frame(stack, orphan.ordered, ul_indent, scope, len(finalized))
                finalized.append(replace(frame, items=(orphan,)))

    return finalized


def _check_item(frame: NestingFrame, item: ListItem, base_indent: int, emit: Emit) -> None:
    offset = frame.scope.offset(item.line_number)
    indentation = leading_spaces(item.raw_line, offset)
    actual = item.column - offset
    expected = base_indent + frame.inherited_sub_indent
    if expected == actual:
        return

    pattern = ORDERED_ITEM_PATTERN if item.ordered else UNORDERED_ITEM_PATTERN
    match = pattern.match(item.raw_line[offset:])
    fix_range = (offset + 1, len(match.group("indent")) + len(match.group("marker"))) if match else None
    fix = FixEdit(offset + 1, indentation, " " * expected) if indentation == actual else None
    emit(
        Diagnostic(
            rule=LIST_INDENT_RULE,
            line=item.line_number,
            expected=expected,
            actual=actual,
            message=f"Expected indentation of {expected} for list item, found {actual}",
            fix_range=fix_range,
            fix=fix,
            context=item.raw_line,
        )
    )


def check_list_indent(result: ParseResult, config: LintConfig, emit: Emit) -> None:
    """Check the indentation of ordered lists and everything nested in them.

    Unordered lists nested only in unordered lists are left to other rules.
    An item is expected at ``start_indent`` (or ``indent``) when
    ``start_indented`` is set, otherwise at column 0, plus the indentation
    inherited from enclosing lists: the marker width (with trailing spaces) of
    each enclosing ordered item and ``ul_indent`` for each enclosing unordered
    list.

    Args:
        result: Parsed document.
        config: Lint configuration.
        emit: Callback receiving each diagnostic.

    Examples:
        diagnostics = []
        check_list_indent(parse_markdown("1. a\\n    * b\\n"), LintConfig(), diagnostics.append)
        (diagnostics[0].expected, diagnostics[0].actual)  # (3, 4)
    """
    if config.start_indented:
        base_indent = config.start_indent if config.start_indent is not None else config.indent
    else:
        base_indent = 0

    frames = flatten_lists(list(list_events(result.nodes)), result.lines, config)
    for frame in frames:
        if not frame.ordered and frame.parents_all_unordered:
            continue
        for item in frame.items:
            _check_item(frame, item, base_indent, emit)

