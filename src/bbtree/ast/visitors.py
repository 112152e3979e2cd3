#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/bbtree/ast/visitors.py
"""Visitor pattern implementation for parse tree traversal.

Visitors separate algorithms over the tree (formatting, validation, output
generation) from the node classes themselves. A visitor implements one
``visit_*`` method per node kind and is dispatched through ``node.accept``.

"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from bbtree.ast.nodes import Node, Root, TagNode, TextNode, get_node_children
from bbtree.ast.utils import walk_with_depth


class NodeVisitor(ABC):
    """Abstract base class for parse tree visitors.

    Examples
    --------
    Count tag nodes:

        >>> from bbtree.ast.visitors import NodeVisitor
        >>> class TagCounter(NodeVisitor):
        ...     def __init__(self):
        ...         self.count = 0
        ...     def visit_root(self, node):
        ...         self.generic_visit(node)
        ...     def visit_text(self, node):
        ...         pass
        ...     def visit_tag(self, node):
        ...         self.count += 1
        ...         self.generic_visit(node)

    """

    @abstractmethod
    def visit_root(self, node: Root) -> Any:
        """Visit the Root node."""
        pass

    @abstractmethod
    def visit_text(self, node: TextNode) -> Any:
        """Visit a TextNode."""
        pass

    @abstractmethod
    def visit_tag(self, node: TagNode) -> Any:
        """Visit a TagNode."""
        pass

    def generic_visit(self, node: Node) -> None:
        """Visit every present child of ``node``."""
        for child in get_node_children(node):
            if child is not None:
                child.accept(self)


class TreeFormatter(NodeVisitor):
    """Format a parse tree as an indented outline.

    Each node is written on its own line, indented by ``indent`` per level:

    .. code-block:: text

        Root
          Tag b
            Text 'bold'

    Parameters
    ----------
    indent : str, default = "  "
        Indentation per nesting level
    show_attributes : bool, default = True
        Append tag attributes to tag lines

    Notes
    -----
    Formatting iterates with an explicit stack rather than through nested
    ``accept`` calls, so arbitrarily deep trees can be printed.

    """

    def __init__(self, indent: str = "  ", show_attributes: bool = True):
        """Initialize the formatter."""
        self.indent = indent
        self.show_attributes = show_attributes

    def format(self, node: Node) -> str:
        """Return the outline for ``node`` and its descendants."""
        lines = [f"{self.indent * depth}{current.accept(self)}" for current, depth in walk_with_depth(node)]
        return "\n".join(lines)

    def visit_root(self, node: Root) -> str:
        return "Root"

    def visit_text(self, node: TextNode) -> str:
        return f"Text {node.content!r}"

    def visit_tag(self, node: TagNode) -> str:
        if self.show_attributes and node.attributes:
            return f"Tag {node.name} {node.attributes.to_dict()!r}"
        return f"Tag {node.name}"
