"""Data models for indent-alignment."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto


class NodeType(str, Enum):
    """Closed vocabulary of positioned syntax tree node types."""

    # Blocks
    BLOCK_QUOTE = "blockQuote"
    BLOCK_QUOTE_PREFIX = "blockQuotePrefix"
    CODE_FENCED = "codeFenced"
    CODE_INDENTED = "codeIndented"
    CONTENT = "content"
    PARAGRAPH = "paragraph"
    HTML_FLOW = "htmlFlow"
    ATX_HEADING = "atxHeading"
    SETEXT_HEADING = "setextHeading"
    THEMATIC_BREAK = "thematicBreak"
    FOOTNOTE_DEFINITION = "footnoteDefinition"

    # Lists
    LIST_ORDERED = "listOrdered"
    LIST_UNORDERED = "listUnordered"
    LIST_ITEM_PREFIX = "listItemPrefix"

    # Inline
    DATA = "data"
    EMPHASIS = "emphasis"
    STRONG = "strong"
    CODE_TEXT = "codeText"
    AUTOLINK = "autolink"
    LITERAL_AUTOLINK = "literalAutolink"
    LINK = "link"
    IMAGE = "image"
    CHARACTER_ESCAPE = "characterEscape"
    STRIKETHROUGH = "strikethrough"
    FOOTNOTE_CALL = "footnoteCall"
    HTML_TEXT = "htmlText"

    LINE_ENDING = "lineEnding"


@dataclass
class Node:
    """Positioned syntax tree element.

    Lines and columns are one-based; `end_column` points one past the last
    character of the node.

    Attributes:
        type: Node type.
        start_line: Line where the node starts.
        start_column: Column where the node starts.
        end_line: Line where the node ends.
        end_column: Column following the node's last character.
        children: Child nodes in document order.
        raw_line: Verbatim text of `start_line`, without its line ending.
    """

    type: NodeType
    start_line: int
    start_column: int
    end_line: int
    end_column: int
    children: list[Node] = field(default_factory=list)
    raw_line: str = ""


@dataclass
class ParseResult:
    """Structured result of parsing a Markdown document.

    Attributes:
        lines: Source lines without line endings.
        nodes: Root nodes of the positioned syntax tree.
    """

    lines: list[str]
    nodes: list[Node]


class ParserState(Enum):
    """Leaf states used while scanning Markdown content.

    Attributes:
        NORMAL: No leaf block is open.
        IN_PARAGRAPH: Inside a paragraph.
        IN_FENCED_CODE: Inside a fenced code block.
        IN_INDENTED_CODE: Inside an indented code block.
        IN_HTML_BLOCK: Inside an HTML block.
    """

    NORMAL = auto()
    IN_PARAGRAPH = auto()
    IN_FENCED_CODE = auto()
    IN_INDENTED_CODE = auto()
    IN_HTML_BLOCK = auto()


@dataclass
class ParserContext:
    """Encapsulate the open leaf block while walking Markdown text.

    Attributes:
        state: Current parser state.
        node: Node of the open leaf block, if any.
        fence_char: Fence character that opened a fenced code block, if any.
        fence_length: Number of fence characters that opened the block.
        fence_indent_columns: Indentation width preceding the opening fence.
        html_end: Pattern terminating the open HTML block; None when the block
            ends at a blank line.
        segments: Paragraph lines as ``(line, column, text)`` triples.
        owner: Child list of the container holding the leaf.
    """

    state: ParserState = ParserState.NORMAL
    node: Node | None = None
    owner: list[Node] = field(default_factory=list)
    fence_char: str | None = None
    fence_length: int = 0
    fence_indent_columns: int = 0
    html_end: str | None = None
    segments: list[tuple[int, int, str]] = field(default_factory=list)


@dataclass(frozen=True)
class FixEdit:
    """Deterministic text replacement resolving one diagnostic.

    Attributes:
        edit_column: One-based column where the edit starts.
        delete_count: Number of characters removed at `edit_column`.
        insert_text: Text inserted at `edit_column` after the deletion.
    """

    edit_column: int
    delete_count: int
    insert_text: str = ""


@dataclass(frozen=True)
class Diagnostic:
    """Indentation problem found on one physical line.

    Attributes:
        rule: Name of the rule that produced the diagnostic.
        line: One-based line number.
        expected: Expected indentation in columns.
        actual: Actual indentation in columns.
        message: Human-readable description.
        fix_range: One-based ``(column, length)`` span highlighted by the
            diagnostic, or None.
        fix: Edit that resolves the diagnostic, or None when no safe edit
            exists.
        context: Verbatim line text, if relevant.
    """

    rule: str
    line: int
    expected: int
    actual: int
    message: str
    fix_range: tuple[int, int] | None = None
    fix: FixEdit | None = None
    context: str | None = None


@dataclass(frozen=True)
class ListItem:
    """List item (or mis-parsed list item line) tracked by the list indent pass.

    Attributes:
        line_number: One-based line number of the item.
        raw_line: Verbatim line text.
        marker_text: Marker with the spaces that follow it, e.g. ``"10. "``.
        ordered: Whether the marker is an ordered-list marker.
        column: Zero-based index of the marker within `raw_line`.
        synthetic: True for marker-like lines absorbed into a paragraph.
    """

    line_number: int
    raw_line: str
    marker_text: str
    ordered: bool
    column: int
    synthetic: bool = False


@dataclass(frozen=True)
class Scope:
    """Region (document or block quote) whose lists indent from a shared base.

    Attributes:
        prefix_ends: Zero-based index where content starts, keyed by line.
        default_offset: Offset used for lines without a recorded prefix.
        prefixed: True when every line inside the scope repeats its prefix,
            so a line without one is a lazy continuation line.
    """

    prefix_ends: dict[int, int] = field(default_factory=dict)
    default_offset: int = 0
    prefixed: bool = False

    def offset(self, line_number: int) -> int:
        return self.prefix_ends.get(line_number, self.default_offset)


@dataclass(frozen=True)
class NestingFrame:
    """One open (or finalized) list tracked by the list indent pass.

    Attributes:
        ordered: Whether the list is ordered.
        parents_all_unordered: True when every enclosing list is unordered.
        inherited_sub_indent: Indentation contributed by enclosing lists.
        items: Items recorded so far.
        position: Index in the finalized frame list where the frame belongs.
        scope: Scope the list lives in.
    """

    ordered: bool
    parents_all_unordered: bool
    inherited_sub_indent: int
    items: tuple[ListItem, ...] = ()
    position: int = 0
    scope: Scope = field(default_factory=Scope)
