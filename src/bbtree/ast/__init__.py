#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/bbtree/ast/__init__.py
"""Parse tree representation for BBCode documents.

Public API
----------
Nodes:
    Node, Root, TextNode, TagNode

Traversal:
    walk, walk_with_depth, find_tags, text_nodes, max_depth, get_node_children

Visitors:
    NodeVisitor, TreeFormatter

Serialization:
    tree_to_dict, tree_to_json, dict_to_tree, json_to_tree

"""

from bbtree.ast.nodes import Node, Root, TagNode, TextNode, get_node_children
from bbtree.ast.serialization import dict_to_tree, json_to_tree, tree_to_dict, tree_to_json
from bbtree.ast.utils import find_tags, max_depth, text_nodes, walk, walk_with_depth
from bbtree.ast.visitors import NodeVisitor, TreeFormatter

__all__ = [
    "Node",
    "Root",
    "TextNode",
    "TagNode",
    "get_node_children",
    "walk",
    "walk_with_depth",
    "find_tags",
    "text_nodes",
    "max_depth",
    "NodeVisitor",
    "TreeFormatter",
    "tree_to_dict",
    "tree_to_json",
    "dict_to_tree",
    "json_to_tree",
]
