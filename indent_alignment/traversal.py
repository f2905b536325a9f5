"""Traversal helpers over the positioned syntax tree."""

from __future__ import annotations

from collections.abc import Callable, Collection, Iterable

from .models import Node, NodeType

SkipTo = Callable[[NodeType], None]


def traverse(
    nodes: Iterable[Node],
    node_types: Collection[NodeType] | None,
    visit: Callable[[Node], None],
) -> None:
    """Visit nodes depth-first, parents before their children.

    HTML blocks are visited but never descended into: nested HTML has no
    reliable parent/child structure.

    Args:
        nodes: Sibling nodes to walk.
        node_types: Types to visit. Every node is visited when empty or None.
        visit: Callback receiving each matching node.

    Examples:
        traverse(result.nodes, {NodeType.PARAGRAPH}, paragraphs.append)
    """
    for node in nodes:
        if not node_types or node.type in node_types:
            visit(node)
        if node.children and node.type is not NodeType.HTML_FLOW:
            traverse(node.children, node_types, visit)


def iterate(
    nodes: Iterable[Node] | None,
    node_types: Collection[NodeType] | None,
    visit: Callable[[Node, SkipTo], None],
) -> None:
    """Walk a sibling list once, letting the visitor skip ahead.

    The visitor receives a `skip_to` callback; calling ``skip_to(T)`` ignores
    every following sibling until one of type ``T`` is reached. An inline HTML
    sibling always skips the rest of its line, so text sharing a line with an
    HTML tag is never visited.

    Args:
        nodes: Sibling nodes to walk. None is treated as empty.
        node_types: Types to visit. Every node is visited when empty or None.
        visit: Callback receiving each matching node and the `skip_to` callback.

    Examples:
        def check(node, skip_to):
            ...
            skip_to(NodeType.LINE_ENDING)

        iterate(paragraph.children, TEXT_LIKE_TYPES, check)
    """
    skip_target: NodeType | None = None

    def skip_to(node_type: NodeType) -> None:
        nonlocal skip_target
        skip_target = node_type

    for node in nodes or ():
        if skip_target is not None and skip_target is node.type:
            skip_target = None

        if node.type is NodeType.HTML_TEXT:
            skip_target = NodeType.LINE_ENDING

        if skip_target is None and (not node_types or node.type in node_types):
            visit(node, skip_to)


def find_first_non_html_token_of_type(
    nodes: Iterable[Node] | None, node_types: Collection[NodeType]
) -> Node | None:
    """Return the first sibling of a requested type not sharing a line with inline HTML.

    Args:
        nodes: Sibling nodes to search. None is treated as empty.
        node_types: Accepted node types.

    Returns:
        Node | None: The first matching node, or None when there is none.
    """
    skip_line = None
    for node in nodes or ():
        if node.type is NodeType.HTML_TEXT:
            skip_line = node.end_line
        if node.type in node_types and node.start_line != skip_line:
            return node
    return None
