"""
indent-alignment: indentation checks for Markdown files.

This package can be used both as a CLI tool and as a library.

CLI Usage:
    indent-alignment README.md docs/

Library Usage:
    from pathlib import Path
    from indent_alignment import LintConfig, fix_markdown, lint_markdown

    content = Path("README.md").read_text()
    for diagnostic in lint_markdown(content, LintConfig(ul_indent=4)):
        print(diagnostic.line, diagnostic.message)
    fixed = fix_markdown(content)
"""

from .alignment import check_alignment
from .config import ConfigError, LintConfig
from .exceptions import LineTooLongError, LintFileError, ParseError
from .fixer import apply_fixes, fix_markdown
from .indentation import marker_width
from .linter import lint_file, lint_markdown
from .list_indent import check_list_indent
from .models import Diagnostic, FixEdit, Node, NodeType, ParseResult
from .parser import parse_markdown
from .traversal import find_first_non_html_token_of_type, iterate, traverse

__version__ = "0.1.0"

__all__ = [
    # Core functionality
    "lint_markdown",
    "lint_file",
    "fix_markdown",
    "apply_fixes",
    "parse_markdown",
    # Rules
    "check_alignment",
    "check_list_indent",
    # Traversal
    "traverse",
    "iterate",
    "find_first_non_html_token_of_type",
    # Data models
    "Diagnostic",
    "FixEdit",
    "LintConfig",
    "Node",
    "NodeType",
    "ParseResult",
    # Utilities
    "marker_width",
    # Exceptions
    "ConfigError",
    "LineTooLongError",
    "LintFileError",
    "ParseError",
    # Version
    "__version__",
]
