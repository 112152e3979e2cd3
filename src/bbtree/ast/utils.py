#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/bbtree/ast/utils.py
"""Traversal helpers for parse trees.

These helpers iterate with explicit stacks instead of recursion, so they are
safe on trees of any depth.
"""

from __future__ import annotations

from collections.abc import Iterator

from bbtree.ast.nodes import Node, TagNode, TextNode, get_node_children


def walk(node: Node) -> Iterator[Node]:
    """Yield ``node`` and all of its descendants in depth-first pre-order.

    Missing (None) children are skipped.

    Examples
    --------
    >>> from bbtree.ast.nodes import Root, TagNode, TextNode
    >>> root = Root(children=[TagNode("b", children=[TextNode("x")])])
    >>> [type(n).__name__ for n in walk(root)]
    ['Root', 'TagNode', 'TextNode']

    """
    pending: list[Node] = [node]
    while pending:
        current = pending.pop()
        yield current
        pending.extend(child for child in reversed(get_node_children(current)) if child is not None)


def walk_with_depth(node: Node) -> Iterator[tuple[Node, int]]:
    """Like :func:`walk`, yielding ``(node, depth)`` pairs with the start node at depth 0."""
    pending: list[tuple[Node, int]] = [(node, 0)]
    while pending:
        current, depth = pending.pop()
        yield current, depth
        pending.extend(
            (child, depth + 1) for child in reversed(get_node_children(current)) if child is not None
        )


def find_tags(node: Node, name: str) -> list[TagNode]:
    """Return every tag node named ``name`` below (and including) ``node``."""
    return [n for n in walk(node) if isinstance(n, TagNode) and n.name == name]


def text_nodes(node: Node) -> list[TextNode]:
    """Return all text nodes in document order."""
    return [n for n in walk(node) if isinstance(n, TextNode)]


def max_depth(node: Node) -> int:
    """Return the nesting depth of the deepest node (0 for a lone node)."""
    return max(depth for _, depth in walk_with_depth(node))
