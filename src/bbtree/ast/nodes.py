#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/bbtree/ast/nodes.py
"""Parse tree node classes.

The parse tree produced by the tree builder has three node kinds:

- Root: the document, holding the source text it was built from
- TextNode: a literal text run (leaf)
- TagNode: a recognized tag with its attributes and child nodes

Every node is owned by exactly one parent; nodes keep no back references.
All nodes support the visitor pattern through :meth:`Node.accept`.

"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional

from bbtree.tokens import TagAttributes


class Node(ABC):
    """Base class for all parse tree nodes."""

    @abstractmethod
    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this node.

        Parameters
        ----------
        visitor : Any
            A visitor object with visit_* methods

        Returns
        -------
        Any
            Result from the visitor's processing

        """
        pass

    def is_valid(self) -> bool:
        """Return True if this node and every descendant is valid.

        A node without children is valid. A node with children is valid when
        every child is present (not None) and valid. The check walks the tree
        with an explicit stack, so deep trees do not exhaust the call stack.
        """
        pending: list[Node] = [self]
        while pending:
            node = pending.pop()
            for child in get_node_children(node):
                if child is None or not isinstance(child, Node):
                    return False
                pending.append(child)
        return True

    def text_content(self) -> str:
        """Concatenate the content of all text descendants in document order."""
        parts: list[str] = []
        pending: list[Node] = [self]
        while pending:
            node = pending.pop()
            if isinstance(node, TextNode):
                parts.append(node.content)
            else:
                pending.extend(child for child in reversed(get_node_children(node)) if child is not None)
        return "".join(parts)


@dataclass
class Root(Node):
    """Root of a parse tree.

    Parameters
    ----------
    source_text : str, default = ""
        The BBCode the tree was built from
    children : list of Node, default = empty list
        Top-level nodes in document order

    """

    source_text: str = ""
    children: list[Optional[Node]] = field(default_factory=list)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this root.

        Returns
        -------
        Any
            Result from visitor.visit_root(self)

        """
        return visitor.visit_root(self)

    def __str__(self) -> str:
        return f"Root - {self.source_text}"


@dataclass
class TextNode(Node):
    """A literal text run.

    Parameters
    ----------
    content : str
        The text

    """

    content: str

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this text node."""
        return visitor.visit_text(self)

    def __str__(self) -> str:
        return f"Text - {self.content}"


@dataclass
class TagNode(Node):
    """A recognized tag and its content.

    Parameters
    ----------
    name : str
        Tag name
    attributes : TagAttributes or None, default = None
        Attributes of the start tag. Defaults to an empty mapping.
    children : list of Node, default = empty list
        Nodes between the start and end tag

    """

    name: str
    attributes: Optional[TagAttributes] = None
    children: list[Optional[Node]] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Default to an empty attribute mapping bound to this tag's name."""
        if self.attributes is None:
            self.attributes = TagAttributes(self.name)
        elif not isinstance(self.attributes, TagAttributes):
            self.attributes = TagAttributes(self.name, self.attributes)

    @property
    def default_attribute(self) -> Optional[str]:
        """Value of the ``[tag="value"]`` default attribute, if any."""
        return self.attributes.default if self.attributes is not None else None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this tag node."""
        return visitor.visit_tag(self)

    def __str__(self) -> str:
        return f"Tag - {self.name}"


def get_node_children(node: Node) -> list[Optional[Node]]:
    """Get the child nodes of a node.

    Parameters
    ----------
    node : Node
        The node to get children from

    Returns
    -------
    list of Node
        Child nodes in document order (empty list for text nodes)

    """
    if isinstance(node, (Root, TagNode)):
        return list(node.children)
    return []
