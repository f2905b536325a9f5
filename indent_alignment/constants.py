"""Constants used across the indent-alignment package."""

from __future__ import annotations

import re

from .config import LintConfig
from .models import NodeType

DEFAULT_CONFIG = LintConfig()

ALIGNMENT_RULE = "indent-alignment"
LIST_INDENT_RULE = "ol-indent"

# Markdown patterns
CODE_FENCE_PATTERN = re.compile(r"^(?P<indent> {0,3})(?P<fence>`{3,}|~{3,})(?P<info>.*)$")
CLOSING_FENCE_MAX_INDENT = 3
# Columns of indentation before a block marker; more makes it indented code
MAX_BLOCK_START_INDENT = 3
LIST_MARKER_PATTERN = re.compile(r"^(?P<bullet>[*+-]|(?P<number>\d{1,9})(?P<delimiter>[.)]))(?=[ \t]|$)")
ORDERED_ITEM_PATTERN = re.compile(r"^(?P<indent>[ \t]*)(?P<marker>\d{1,9}[.)])(?P<spaces> *)(?=\S|$)")
UNORDERED_ITEM_PATTERN = re.compile(r"^(?P<indent>[ \t]*)(?P<marker>[*+-])(?P<spaces> *)(?=\S|$)")
ORPHAN_ITEM_PATTERN = re.compile(r"^(?P<indent> *)(?:[*+-]|\d{1,9}[.)]) +\S")
THEMATIC_BREAK_PATTERN = re.compile(r"^ {0,3}([-*_])(?:[ \t]*\1){2,}[ \t]*$")
SETEXT_UNDERLINE_PATTERN = re.compile(r"^ {0,3}(?:=+|-+)[ \t]*$")
ATX_HEADING_PATTERN = re.compile(r"^ {0,3}#{1,6}(?:[ \t]|$)")
FOOTNOTE_DEFINITION_PATTERN = re.compile(r"^\[\^[^\]\s]+\]:")

LINE_BREAK_PATTERN = re.compile(r"\r\n|\r|\n")

# Inline patterns
_TAG_NAME = r"[A-Za-z][A-Za-z0-9-]*"
_ATTRIBUTE = r"""(?:\s+[A-Za-z_:][A-Za-z0-9_.:-]*(?:\s*=\s*(?:[^\s"'=<>`]+|'[^']*'|"[^"]*"))?)"""
OPEN_TAG_PATTERN = re.compile(rf"<{_TAG_NAME}{_ATTRIBUTE}*\s*/?>")
CLOSING_TAG_PATTERN = re.compile(rf"</{_TAG_NAME}\s*>")
INLINE_HTML_PATTERN = re.compile(
    rf"{OPEN_TAG_PATTERN.pattern}"
    rf"|{CLOSING_TAG_PATTERN.pattern}"
    r"|<!--.*?-->"
    r"|<\?.*?\?>"
    r"|<![A-Za-z][^>]*>"
    r"|<!\[CDATA\[.*?\]\]>",
    re.DOTALL,
)
AUTOLINK_PATTERN = re.compile(
    r"<[A-Za-z][A-Za-z0-9+.-]{1,31}:[^\s<>]*>"
    r"|<[A-Za-z0-9.!#$%&'*+/=?^_`{|}~-]+@[A-Za-z0-9](?:[A-Za-z0-9-]*[A-Za-z0-9])?"
    r"(?:\.[A-Za-z0-9](?:[A-Za-z0-9-]*[A-Za-z0-9])?)*>"
)
LITERAL_AUTOLINK_PATTERN = re.compile(
    r"(?:https?://|www\.)[^\s<]*[^\s<?!.,:*_~)]"
    r"|[A-Za-z0-9._+-]+@[A-Za-z0-9_-]+(?:\.[A-Za-z0-9_-]+)+"
)
FOOTNOTE_CALL_PATTERN = re.compile(r"\[\^[^\]\s]+\]")
ESCAPABLE = frozenset("!\"#$%&'()*+,-./:;<=>?@[\\]^_`{|}~")

# HTML block start conditions
HTML_RAW_TAGS = ("pre", "script", "style", "textarea")
HTML_BLOCK_TAGS = frozenset(
    """
    address article aside base basefont blockquote body caption center col colgroup dd
    details dialog dir div dl dt fieldset figcaption figure footer form frame frameset h1
    h2 h3 h4 h5 h6 head header hr html iframe legend li link main menu menuitem nav
    noframes ol optgroup option p param search section summary table tbody td tfoot th
    thead title tr track ul
    """.split()
)

# Node vocabulary groups
TOP_LEVEL_BLOCK_TYPES = frozenset({NodeType.BLOCK_QUOTE, NodeType.CODE_FENCED, NodeType.CONTENT})
LIST_TYPES = frozenset({NodeType.LIST_ORDERED, NodeType.LIST_UNORDERED})
CONTAINER_TYPES = frozenset({NodeType.BLOCK_QUOTE, *LIST_TYPES})
TEXT_LIKE_TYPES = frozenset(
    {
        NodeType.AUTOLINK,
        NodeType.CHARACTER_ESCAPE,
        NodeType.CODE_TEXT,
        NodeType.DATA,
        NodeType.EMPHASIS,
        NodeType.FOOTNOTE_CALL,
        NodeType.IMAGE,
        NodeType.LINK,
        NodeType.LITERAL_AUTOLINK,
        NodeType.STRIKETHROUGH,
        NodeType.STRONG,
    }
)
NESTED_BLOCK_TYPES = frozenset(
    {
        NodeType.CODE_FENCED,
        NodeType.CONTENT,
        NodeType.LIST_ITEM_PREFIX,
        NodeType.BLOCK_QUOTE,
        *LIST_TYPES,
    }
)
QUOTE_CHILD_TYPES = frozenset({NodeType.CODE_FENCED, NodeType.CONTENT, NodeType.LIST_ITEM_PREFIX})

READABLE_NAMES = {
    NodeType.BLOCK_QUOTE: "blockquotes",
    NodeType.CODE_FENCED: "code blocks",
    NodeType.CONTENT: "paragraphs",
    NodeType.LIST_ORDERED: "ordered lists",
    NodeType.LIST_UNORDERED: "unordered lists",
}

# Limits
DEFAULT_MAX_FILE_SIZE = DEFAULT_CONFIG.max_file_size
DEFAULT_MAX_LINE_LENGTH = DEFAULT_CONFIG.max_line_length
MARKDOWN_EXTENSIONS = (".md", ".markdown")
