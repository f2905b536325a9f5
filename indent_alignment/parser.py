"""Markdown parsing into a positioned syntax tree."""

from __future__ import annotations

import re
from bisect import bisect_right
from dataclasses import dataclass, field

from .config import LintConfig
from .constants import (
    ATX_HEADING_PATTERN,
    AUTOLINK_PATTERN,
    CLOSING_FENCE_MAX_INDENT,
    CLOSING_TAG_PATTERN,
    CODE_FENCE_PATTERN,
    ESCAPABLE,
    FOOTNOTE_CALL_PATTERN,
    FOOTNOTE_DEFINITION_PATTERN,
    HTML_BLOCK_TAGS,
    HTML_RAW_TAGS,
    INLINE_HTML_PATTERN,
    LINE_BREAK_PATTERN,
    LIST_MARKER_PATTERN,
    LITERAL_AUTOLINK_PATTERN,
    MAX_BLOCK_START_INDENT,
    OPEN_TAG_PATTERN,
    SETEXT_UNDERLINE_PATTERN,
    THEMATIC_BREAK_PATTERN,
)
from .exceptions import LineTooLongError
from .indentation import leading_spaces
from .models import Node, NodeType, ParseResult, ParserContext, ParserState

_HTML_RAW_START = re.compile(rf"^<(?:{'|'.join(HTML_RAW_TAGS)})(?:[\s>]|$)", re.IGNORECASE)
_HTML_RAW_END = rf"</(?:{'|'.join(HTML_RAW_TAGS)})>"
_HTML_BLOCK_START = re.compile(r"^</?([A-Za-z][A-Za-z0-9-]*)(?:[\s>]|/>|$)")
_HTML_SPECIAL_STARTS = (
    ("<!--", "-->"),
    ("<?", r"\?>"),
    ("<![CDATA[", r"\]\]>"),
)


@dataclass
class _Container:
    """Open container block on the parser stack.

    Attributes:
        kind: One of ``document``, ``quote``, ``list``, ``item``, ``footnote``.
        children: Child list receiving blocks opened inside the container.
        node: Node representing the container; list items share their list's node.
        width: Content offset of a list item relative to its parent's content.
        marker: Bullet character or ordered delimiter of a list.
        ordered: Whether a list is ordered.
    """

    kind: str
    children: list[Node]
    node: Node | None = None
    width: int = 0
    marker: str = ""
    ordered: bool = False


@dataclass
class _LineState:
    """Mutable cursor for the line being scanned."""

    number: int
    text: str
    position: int = 0
    matched: int = 0
    consumed: list[str] = field(default_factory=list)


def split_lines(content: str) -> list[str]:
    """Split text into lines without their line endings.

    Examples:
        split_lines("a\\r\\nb\\n")  # ["a", "b"]
    """
    lines = LINE_BREAK_PATTERN.split(content)
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def is_escaped(text: str, pos: int) -> bool:
    """Determine whether a character is escaped by preceding backslashes.

    Counts consecutive backslashes immediately before `pos`; an odd count marks
    the character as escaped.

    Examples:
        is_escaped("\\\\*", 2)  # False, two backslashes
        is_escaped("\\*", 1)  # True, one backslash
    """
    backslash_count = 0
    i = pos - 1
    while i >= 0 and text[i] == "\\":
        backslash_count += 1
        i -= 1
    return backslash_count % 2 == 1


# Block structure


def _line_end(lines: list[str], line_number: int) -> int:
    return len(lines[line_number - 1]) + 1 if 0 < line_number <= len(lines) else 1


def _line_ending(line_number: int, text: str) -> Node:
    return Node(NodeType.LINE_ENDING, line_number, len(text) + 1, line_number + 1, 1, raw_line=text)


def _sort_children(children: list[Node]) -> None:
    children.sort(key=lambda node: (node.start_line, node.start_column))


def _match_containers(stack: list[_Container], state: _LineState) -> None:
    """Consume the prefixes of every open container that continues on this line."""
    line = state.text
    for index in range(1, len(stack)):
        container = stack[index]
        indent = leading_spaces(line, state.position)
        blank = not line[state.position :].strip()

        if container.kind == "quote":
            marker = state.position + indent
            if indent > MAX_BLOCK_START_INDENT or line[marker : marker + 1] != ">":
                return
            state.position = marker + 1
            if line[state.position : state.position + 1] in (" ", "\t"):
                state.position += 1
            container.children.append(
                Node(
                    NodeType.BLOCK_QUOTE_PREFIX,
                    state.number,
                    marker + 1,
                    state.number,
                    state.position + 1,
                    raw_line=line,
                )
            )
        elif container.kind == "item":
            if not blank:
                if indent < container.width:
                    return
                state.position += container.width
        elif container.kind == "footnote":
            if not blank:
                if indent < 4:
                    return
                state.position += 4

        state.matched = index


def _try_open_fence(ctx: ParserContext, text: str) -> bool:
    """Detect the start of a fenced code block.

    Args:
        ctx: Parser context to update when a fence opens.
        text: Remainder of the current line after container prefixes.

    Returns:
        bool: True when the text begins a fence and the context is updated.

    Examples:
        _try_open_fence(ParserContext(), "```python")  # True
    """
    if ctx.state is ParserState.IN_FENCED_CODE:
        return False

    fence_match = CODE_FENCE_PATTERN.match(text)
    if not fence_match:
        return False

    fence_sequence = fence_match.group("fence")
    if fence_sequence[0] == "`" and "`" in fence_match.group("info"):
        return False

    ctx.state = ParserState.IN_FENCED_CODE
    ctx.fence_char = fence_sequence[0]
    ctx.fence_length = len(fence_sequence)
    ctx.fence_indent_columns = len(fence_match.group("indent"))
    return True


def _try_close_fence(ctx: ParserContext, text: str) -> bool:
    """Attempt to close the active fenced code block.

    Examples:
        ctx = ParserContext(state=ParserState.IN_FENCED_CODE, fence_char="`", fence_length=3)
        _try_close_fence(ctx, "```")
    """
    if ctx.state is not ParserState.IN_FENCED_CODE or ctx.fence_char is None:
        return False

    indent_columns = leading_spaces(text)
    stripped_line = text.lstrip(" \t")
    if not stripped_line or stripped_line[0] != ctx.fence_char:
        return False

    fence_run_length = len(stripped_line) - len(stripped_line.lstrip(ctx.fence_char))
    if fence_run_length < ctx.fence_length:
        return False

    if stripped_line[fence_run_length:].strip():
        return False

    if indent_columns > CLOSING_FENCE_MAX_INDENT:
        return False

    ctx.fence_char = None
    ctx.fence_length = 0
    ctx.fence_indent_columns = 0
    return True


def _html_block_start(text: str, interrupting: bool) -> tuple[bool, str | None]:
    """Detect an HTML block start and return its terminating pattern.

    Args:
        text: Line text starting at the first non-space character.
        interrupting: Whether the block would interrupt an open paragraph.

    Returns:
        tuple[bool, str | None]: Whether an HTML block starts, and the regex
        closing it (None when the block ends at the next blank line).
    """
    if not text.startswith("<"):
        return False, None
    if _HTML_RAW_START.match(text):
        return True, _HTML_RAW_END
    for opener, closer in _HTML_SPECIAL_STARTS:
        if text.startswith(opener):
            return True, closer
    if re.match(r"<![A-Za-z]", text):
        return True, ">"

    block_match = _HTML_BLOCK_START.match(text)
    if block_match and block_match.group(1).lower() in HTML_BLOCK_TAGS:
        return True, None

    if not interrupting:
        tag_match = OPEN_TAG_PATTERN.match(text) or CLOSING_TAG_PATTERN.match(text)
        if tag_match and not text[tag_match.end() :].strip():
            return True, None
    return False, None


def _interrupts_paragraph(text: str, indent: int) -> bool:
    if indent > MAX_BLOCK_START_INDENT:
        return False
    stripped = text.lstrip(" \t")
    return bool(
        CODE_FENCE_PATTERN.match(stripped)
        or ATX_HEADING_PATTERN.match(stripped)
        or THEMATIC_BREAK_PATTERN.match(stripped)
        or _html_block_start(stripped, interrupting=True)[0]
    )


def _close_leaf(ctx: ParserContext, lines: list[str]) -> None:
    """Finalize the open leaf block and reset the context."""
    node = ctx.node
    if ctx.state is ParserState.IN_PARAGRAPH and node is not None:
        last_line = ctx.segments[-1][0]
        node.end_line = last_line
        node.end_column = _line_end(lines, last_line)
        if node.type is NodeType.CONTENT:
            paragraph = Node(
                NodeType.PARAGRAPH,
                node.start_line,
                node.start_column,
                node.end_line,
                node.end_column,
                children=_scan_inline(ctx.segments, lines),
                raw_line=node.raw_line,
            )
            node.children = [paragraph]
        ctx.owner.append(_line_ending(last_line, lines[last_line - 1]))

    ctx.state = ParserState.NORMAL
    ctx.node = None
    ctx.owner = []
    ctx.segments = []
    ctx.fence_char = None
    ctx.fence_length = 0
    ctx.fence_indent_columns = 0
    ctx.html_end = None


def _close_from(
    stack: list[_Container], ctx: ParserContext, index: int, end_line: int, lines: list[str]
) -> None:
    """Close every container at `index` or deeper, and the leaf they hold."""
    if index >= len(stack):
        return
    _close_leaf(ctx, lines)
    while len(stack) > index:
        container = stack.pop()
        if container.kind == "item":
            continue
        node = container.node
        if node is not None:
            node.end_line = max(end_line, node.start_line)
            node.end_column = _line_end(lines, node.end_line)
            _sort_children(node.children)


def _accepting(
    stack: list[_Container], ctx: ParserContext, end_line: int, lines: list[str]
) -> list[Node]:
    """Return the child list for a new non-item block, closing a bare list first."""
    while stack[-1].kind == "list":
        _close_from(stack, ctx, len(stack) - 1, end_line, lines)
    return stack[-1].children


def _start_container(
    stack: list[_Container], ctx: ParserContext, state: _LineState, lines: list[str]
) -> None:
    """Close unmatched containers and the open leaf before a container starts."""
    _close_from(stack, ctx, state.matched + 1, state.number - 1, lines)
    _close_leaf(ctx, lines)


def _open_list_item(
    stack: list[_Container],
    ctx: ParserContext,
    state: _LineState,
    marker_match: re.Match,
    start: int,
    lines: list[str],
) -> None:
    line = state.text
    ordered = marker_match.group("number") is not None
    marker_char = marker_match.group("delimiter") or marker_match.group("bullet")
    after = start + len(marker_match.group(0))
    spaces = leading_spaces(line, after)
    if after + spaces >= len(line) or spaces > 4:
        content_offset = after + 1
    else:
        content_offset = after + spaces

    top = stack[-1]
    if top.kind != "list" or top.marker != marker_char or top.ordered != ordered:
        parent = _accepting(stack, ctx, state.number - 1, lines)
        list_node = Node(
            NodeType.LIST_ORDERED if ordered else NodeType.LIST_UNORDERED,
            state.number,
            start + 1,
            state.number,
            len(line) + 1,
            raw_line=line,
        )
        parent.append(list_node)
        stack.append(
            _Container("list", list_node.children, list_node, marker=marker_char, ordered=ordered)
        )
    list_container = stack[-1]
    list_container.children.append(
        Node(
            NodeType.LIST_ITEM_PREFIX,
            state.number,
            start + 1,
            state.number,
            min(content_offset, len(line)) + 1,
            raw_line=line,
        )
    )
    stack.append(
        _Container(
            "item",
            list_container.children,
            list_container.node,
            width=content_offset - state.position,
        )
    )
    state.position = min(content_offset, len(line))


def _open_containers(
    stack: list[_Container], ctx: ParserContext, state: _LineState, lines: list[str]
) -> bool:
    """Open new block quotes, footnote definitions, and list items.

    Returns:
        bool: True when the line was consumed as a setext heading underline.
    """
    line = state.text
    while True:
        indent = leading_spaces(line, state.position)
        start = state.position + indent
        rest = line[start:]
        if indent > MAX_BLOCK_START_INDENT or not rest:
            return False
        interrupting = ctx.state is ParserState.IN_PARAGRAPH and state.matched == len(stack) - 1

        if interrupting and SETEXT_UNDERLINE_PATTERN.match(line[state.position :]):
            ctx.node.type = NodeType.SETEXT_HEADING
            ctx.state = ParserState.NORMAL
            ctx.node.end_line = state.number
            ctx.node.end_column = len(line) + 1
            ctx.owner.append(_line_ending(state.number, line))
            _close_leaf(ctx, lines)
            return True

        if rest[0] == ">":
            _start_container(stack, ctx, state, lines)
            parent = _accepting(stack, ctx, state.number - 1, lines)
            quote = Node(NodeType.BLOCK_QUOTE, state.number, start + 1, state.number, len(line) + 1, raw_line=line)
            state.position = start + 1
            if line[state.position : state.position + 1] in (" ", "\t"):
                state.position += 1
            quote.children.append(
                Node(
                    NodeType.BLOCK_QUOTE_PREFIX,
                    state.number,
                    start + 1,
                    state.number,
                    state.position + 1,
                    raw_line=line,
                )
            )
            parent.append(quote)
            stack.append(_Container("quote", quote.children, quote))
            state.matched = len(stack) - 1
            continue

        footnote_match = FOOTNOTE_DEFINITION_PATTERN.match(rest)
        if footnote_match and not interrupting:
            _start_container(stack, ctx, state, lines)
            parent = _accepting(stack, ctx, state.number - 1, lines)
            footnote = Node(
                NodeType.FOOTNOTE_DEFINITION, state.number, start + 1, state.number, len(line) + 1, raw_line=line
            )
            parent.append(footnote)
            stack.append(_Container("footnote", footnote.children, footnote))
            state.position = start + footnote_match.end()
            state.matched = len(stack) - 1
            continue

        if THEMATIC_BREAK_PATTERN.match(rest):
            return False

        marker_match = LIST_MARKER_PATTERN.match(rest)
        if marker_match is None:
            return False
        if interrupting:
            after = start + len(marker_match.group(0))
            number = marker_match.group("number")
            if not line[after:].strip() or (number is not None and int(number) != 1):
                return False
        _start_container(stack, ctx, state, lines)
        _open_list_item(stack, ctx, state, marker_match, start, lines)
        state.matched = len(stack) - 1


def _continue_leaf(ctx: ParserContext, state: _LineState, all_matched: bool, lines: list[str]) -> bool:
    """Feed the line to an open code or HTML block.

    Returns:
        bool: True when the line was consumed by the leaf block.
    """
    line = state.text
    text = line[state.position :]
    blank = not text.strip()

    if ctx.state is ParserState.IN_FENCED_CODE:
        if not all_matched:
            _close_leaf(ctx, lines)
            return False
        ctx.node.end_line = state.number
        ctx.node.end_column = len(line) + 1
        if _try_close_fence(ctx, text):
            _close_leaf(ctx, lines)
        return True

    if ctx.state is ParserState.IN_INDENTED_CODE:
        if all_matched and blank:
            return True
        if all_matched and leading_spaces(text) >= 4:
            ctx.node.end_line = state.number
            ctx.node.end_column = len(line) + 1
            return True
        _close_leaf(ctx, lines)
        return False

    if ctx.state is ParserState.IN_HTML_BLOCK:
        if not all_matched or (ctx.html_end is None and blank):
            _close_leaf(ctx, lines)
            return False
        ctx.node.end_line = state.number
        ctx.node.end_column = len(line) + 1
        if ctx.html_end is not None and re.search(ctx.html_end, text, re.IGNORECASE):
            _close_leaf(ctx, lines)
        return True

    return False


def _open_leaf(
    stack: list[_Container], ctx: ParserContext, state: _LineState, lines: list[str]
) -> None:
    """Continue the open paragraph or start a new leaf block on this line."""
    line = state.text
    indent = leading_spaces(line, state.position)
    start = state.position + indent
    rest = line[start:]

    if not rest:
        if ctx.state is ParserState.IN_PARAGRAPH:
            _close_leaf(ctx, lines)
        stack[-1].children.append(_line_ending(state.number, line))
        return

    if ctx.state is ParserState.IN_PARAGRAPH and (
        indent > MAX_BLOCK_START_INDENT or not _interrupts_paragraph(rest, 0)
    ):
        ctx.segments.append((state.number, start + 1, rest))
        return

    _close_leaf(ctx, lines)
    owner = _accepting(stack, ctx, state.number - 1, lines)
    ctx.owner = owner

    if indent > MAX_BLOCK_START_INDENT:
        ctx.state = ParserState.IN_INDENTED_CODE
        node_type = NodeType.CODE_INDENTED
        start = state.position
    elif _try_open_fence(ctx, rest):
        node_type = NodeType.CODE_FENCED
    elif ATX_HEADING_PATTERN.match(rest):
        node_type = NodeType.ATX_HEADING
    elif THEMATIC_BREAK_PATTERN.match(rest):
        node_type = NodeType.THEMATIC_BREAK
    else:
        is_html, html_end = _html_block_start(rest, interrupting=False)
        if is_html:
            ctx.state = ParserState.IN_HTML_BLOCK
            ctx.html_end = html_end
            node_type = NodeType.HTML_FLOW
        else:
            ctx.state = ParserState.IN_PARAGRAPH
            node_type = NodeType.CONTENT
            ctx.segments = [(state.number, start + 1, rest)]

    node = Node(node_type, state.number, start + 1, state.number, len(line) + 1, raw_line=line)
    owner.append(node)
    ctx.node = node
    if node_type is not NodeType.CONTENT:
        owner.append(_line_ending(state.number, line))
    if node_type in (NodeType.ATX_HEADING, NodeType.THEMATIC_BREAK):
        _close_leaf(ctx, lines)
    elif node_type is NodeType.HTML_FLOW and html_end and re.search(
        html_end, rest[1:], re.IGNORECASE
    ):
        _close_leaf(ctx, lines)


def _parse_line(stack: list[_Container], ctx: ParserContext, state: _LineState, lines: list[str]) -> None:
    _match_containers(stack, state)
    all_matched = state.matched == len(stack) - 1

    if ctx.state in (
        ParserState.IN_FENCED_CODE,
        ParserState.IN_INDENTED_CODE,
        ParserState.IN_HTML_BLOCK,
    ) and _continue_leaf(ctx, state, all_matched, lines):
        stack[-1].children.append(_line_ending(state.number, state.text))
        return

    if _open_containers(stack, ctx, state, lines):
        return

    line = state.text
    text = line[state.position :]
    lazy = (
        ctx.state is ParserState.IN_PARAGRAPH
        and state.matched < len(stack) - 1
        and text.strip()
        and not _interrupts_paragraph(text, leading_spaces(text))
    )
    if lazy:
        start = state.position + leading_spaces(line, state.position)
        ctx.segments.append((state.number, start + 1, line[start:]))
        return

    _close_from(stack, ctx, state.matched + 1, state.number - 1, lines)
    _open_leaf(stack, ctx, state, lines)


def parse_markdown(
    content: str, max_line_length: int | None = None, config: LintConfig | None = None
) -> ParseResult:
    """Parse Markdown content into a positioned syntax tree.

    The scanner recognises block quotes, ordered and unordered lists, GFM
    footnote definitions, fenced and indented code, HTML blocks, headings,
    thematic breaks, and paragraphs. Paragraphs are split into inline nodes
    (text, emphasis, code spans, links, autolinks, inline HTML, and so on)
    separated by line endings.

    Args:
        content: The markdown content to parse.
        max_line_length: Optional override for the maximum allowed line length
            (excluding line endings).
        config: Configuration providing the default line length limit.

    Returns:
        ParseResult: Source lines and the root nodes of the tree.

    Raises:
        LineTooLongError: If a line exceeds the maximum line length.

    Examples:
        result = parse_markdown("* item\\n  wrapped\\n")
        result.nodes[0].type  # NodeType.LIST_UNORDERED
    """
    config = config or LintConfig()
    effective_max_line_length = (
        config.max_line_length if max_line_length is None else max_line_length
    )

    lines = split_lines(content)
    root: list[Node] = []
    stack = [_Container("document", root)]
    ctx = ParserContext()

    for line_number, line in enumerate(lines, start=1):
        if len(line) > effective_max_line_length:
            raise LineTooLongError(line_number, effective_max_line_length)
        _parse_line(stack, ctx, _LineState(number=line_number, text=line), lines)

    _close_leaf(ctx, lines)
    _close_from(stack, ctx, 1, len(lines), lines)
    _sort_children(root)
    return ParseResult(lines=lines, nodes=root)


# Inline structure


def _match_code_span(text: str, pos: int) -> int | None:
    run = len(text) - len(text[pos:].lstrip("`")) - pos
    closing = re.compile(rf"(?<!`)`{{{run}}}(?!`)")
    match = closing.search(text, pos + run)
    return match.end() if match else None


def _match_brackets(text: str, pos: int) -> int | None:
    """Return the index after the `]` matching the `[` at `pos`."""
    depth = 0
    i = pos
    while i < len(text):
        character = text[i]
        if character == "\\":
            i += 2
            continue
        if character == "[":
            depth += 1
        elif character == "]":
            depth -= 1
            if depth == 0:
                return i + 1
        i += 1
    return None


def _match_link(text: str, pos: int) -> int | None:
    """Match an inline or full reference link starting at the `[` at `pos`."""
    label_end = _match_brackets(text, pos)
    if label_end is None or label_end >= len(text):
        return None

    if text[label_end] == "(":
        k = label_end + 1
        if k < len(text) and text[k] == "<":
            closing = text.find(">", k)
            if closing == -1:
                return None
            k = closing + 1
        paren_depth = 1
        while k < len(text):
            character = text[k]
            if character == "\\":
                k += 2
                continue
            if character == "(":
                paren_depth += 1
            elif character == ")":
                paren_depth -= 1
                if paren_depth == 0:
                    return k + 1
            k += 1
        return None

    if text[label_end] == "[":
        reference_end = _match_brackets(text, label_end)
        if reference_end is not None and "\n" not in text[label_end:reference_end]:
            return reference_end
    return None


def _match_delimited(text: str, pos: int, character: str) -> int | None:
    """Match emphasis, strong, or strikethrough delimited by `character` runs."""
    run = len(text[pos:]) - len(text[pos:].lstrip(character))
    after = pos + run
    if after >= len(text) or text[after].isspace():
        return None
    if character == "_" and pos > 0 and text[pos - 1].isalnum():
        return None
    if character == "~" and run > 2:
        return None

    closing = re.compile(rf"(?<![\s{re.escape(character)}]){re.escape(character * run)}(?!{re.escape(character)})")
    for match in closing.finditer(text, after):
        end = match.end()
        if character == "_" and end < len(text) and text[end].isalnum():
            continue
        return end
    return None


def _match_inline(text: str, pos: int) -> tuple[int, NodeType] | None:
    character = text[pos]
    following = text[pos + 1] if pos + 1 < len(text) else ""

    if character == "\\" and following in ESCAPABLE and following:
        return pos + 2, NodeType.CHARACTER_ESCAPE
    if character == "`" and not is_escaped(text, pos):
        end = _match_code_span(text, pos)
        if end is not None:
            return end, NodeType.CODE_TEXT
        return None
    if character == "<":
        match = AUTOLINK_PATTERN.match(text, pos)
        if match:
            return match.end(), NodeType.AUTOLINK
        match = INLINE_HTML_PATTERN.match(text, pos)
        if match:
            return match.end(), NodeType.HTML_TEXT
        return None
    if character == "!" and following == "[":
        end = _match_link(text, pos + 1)
        if end is not None:
            return end, NodeType.IMAGE
        return None
    if character == "[":
        match = FOOTNOTE_CALL_PATTERN.match(text, pos)
        if match:
            return match.end(), NodeType.FOOTNOTE_CALL
        end = _match_link(text, pos)
        if end is not None:
            return end, NodeType.LINK
        return None
    if character in "*_~":
        end = _match_delimited(text, pos, character)
        if end is None:
            return None
        run = len(text[pos:]) - len(text[pos:].lstrip(character))
        if character == "~":
            return end, NodeType.STRIKETHROUGH
        return end, NodeType.STRONG if run > 1 else NodeType.EMPHASIS
    if character.isalnum() and (pos == 0 or not (text[pos - 1].isalnum() or text[pos - 1] in "._+-@/")):
        match = LITERAL_AUTOLINK_PATTERN.match(text, pos)
        if match:
            return match.end(), NodeType.LITERAL_AUTOLINK
    return None


def _scan_inline(segments: list[tuple[int, int, str]], lines: list[str]) -> list[Node]:
    """Split paragraph lines into inline nodes.

    Args:
        segments: ``(line, column, text)`` for every paragraph line, where
            `column` is where the line's text starts after indentation.
        lines: Source lines, used for the nodes' raw text.

    Returns:
        list[Node]: Inline nodes and the line endings between paragraph lines.
    """
    text = "\n".join(segment[2] for segment in segments)
    offsets = []
    offset = 0
    for segment in segments:
        offsets.append(offset)
        offset += len(segment[2]) + 1

    def locate(index: int) -> tuple[int, int]:
        segment_index = bisect_right(offsets, index) - 1
        line_number, column, _ = segments[segment_index]
        return line_number, column + index - offsets[segment_index]

    def make(node_type: NodeType, start: int, end: int) -> Node:
        start_line, start_column = locate(start)
        end_line, end_column = locate(end - 1)
        return Node(
            node_type,
            start_line,
            start_column,
            end_line,
            end_column + 1,
            raw_line=lines[start_line - 1],
        )

    nodes: list[Node] = []
    data_start: int | None = None
    i = 0
    while i < len(text):
        if text[i] == "\n":
            if data_start is not None:
                nodes.append(make(NodeType.DATA, data_start, i))
                data_start = None
            line_number, column = locate(i)
            next_line, next_column = locate(i + 1)
            nodes.append(
                Node(
                    NodeType.LINE_ENDING,
                    line_number,
                    column,
                    next_line,
                    next_column,
                    raw_line=lines[line_number - 1],
                )
            )
            i += 1
            continue

        matched = _match_inline(text, i)
        if matched is None:
            if data_start is None:
                data_start = i
            i += 1
            continue

        end, node_type = matched
        if data_start is not None:
            nodes.append(make(NodeType.DATA, data_start, i))
            data_start = None
        nodes.append(make(node_type, i, end))
        i = end

    if data_start is not None:
        nodes.append(make(NodeType.DATA, data_start, len(text)))
    return nodes
