#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/bbtree/ast/serialization.py
"""JSON serialization and deserialization for parse trees.

Every node is written as an object with a ``node_type`` discriminator:

.. code-block:: json

    {
      "schema_version": 1,
      "node_type": "Root",
      "source_text": "[b]bold[/b]",
      "children": [
        {"node_type": "Tag", "name": "b", "attributes": {}, "children": [
          {"node_type": "Text", "content": "bold"}
        ]}
      ]
    }

Conversion, encoding and decoding use explicit stacks, so trees nested deeper
than the interpreter's recursion limit (built with ``max_depth=None``) can be
written and read back. The ``json`` module only handles scalar values.

Examples
--------
    >>> from bbtree.ast import Root, TagNode, TextNode
    >>> tree = Root("[b]x[/b]", [TagNode("b", children=[TextNode("x")])])
    >>> json_to_tree(tree_to_json(tree)) == tree
    True

"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any, Optional

from bbtree.ast.nodes import Node, Root, TagNode, TextNode
from bbtree.tokens import TagAttributes

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1


def _serialize_root(node: Root) -> dict[str, Any]:
    return {"node_type": "Root", "source_text": node.source_text}


def _serialize_text(node: TextNode) -> dict[str, Any]:
    return {"node_type": "Text", "content": node.content}


def _serialize_tag(node: TagNode) -> dict[str, Any]:
    attributes = node.attributes.to_dict() if node.attributes is not None else {}
    return {"node_type": "Tag", "name": node.name, "attributes": attributes}


_SERIALIZATION_DISPATCH: dict[type, Any] = {
    Root: _serialize_root,
    TextNode: _serialize_text,
    TagNode: _serialize_tag,
}


def _node_fields(node: Node) -> dict[str, Any]:
    serializer = _SERIALIZATION_DISPATCH.get(type(node))
    if serializer is None:
        raise ValueError(f"Unknown node type for serialization: {type(node).__name__}")
    return serializer(node)


def tree_to_dict(node: Node) -> dict[str, Any]:
    """Convert a parse tree node to a dictionary.

    Parameters
    ----------
    node : Node
        The node to convert

    Returns
    -------
    dict
        Dictionary representation of the node and its descendants

    Raises
    ------
    ValueError
        If the node type is unknown

    """
    result = _node_fields(node)
    pending: list[tuple[Node, dict[str, Any]]] = [(node, result)]

    while pending:
        current, data = pending.pop()
        if not isinstance(current, (Root, TagNode)):
            continue
        children: list[Optional[dict[str, Any]]] = []
        data["children"] = children
        for child in current.children:
            if child is None:
                children.append(None)
                continue
            child_data = _node_fields(child)
            children.append(child_data)
            pending.append((child, child_data))

    return result


@dataclass
class _EncoderFrame:
    """An open JSON array or object while encoding."""

    items: Iterator[tuple[Optional[str], Any]]
    closer: str
    count: int = 0


def _encode_json(value: Any, indent: int | None) -> str:
    """Encode ``value`` like ``json.dumps`` with an explicit container stack."""
    parts: list[str] = []
    stack: list[_EncoderFrame] = []
    item_separator = ", " if indent is None else ","

    def newline(level: int) -> str:
        return "" if indent is None else "\n" + " " * (indent * level)

    def open_value(item: Any) -> None:
        if isinstance(item, dict) and item:
            parts.append("{")
            stack.append(_EncoderFrame(iter(item.items()), "}"))
        elif isinstance(item, list) and item:
            parts.append("[")
            stack.append(_EncoderFrame(((None, element) for element in item), "]"))
        else:
            parts.append(json.dumps(item, ensure_ascii=False))

    open_value(value)
    while stack:
        frame = stack[-1]
        entry = next(frame.items, None)
        if entry is None:
            stack.pop()
            parts.append(newline(len(stack)) + frame.closer)
            continue

        if frame.count:
            parts.append(item_separator)
        frame.count += 1
        parts.append(newline(len(stack)))
        key, item = entry
        if key is not None:
            parts.append(json.dumps(key, ensure_ascii=False) + ": ")
        open_value(item)

    return "".join(parts)


def tree_to_json(node: Node, indent: int | None = None) -> str:
    """Serialize a parse tree node to a JSON string.

    Parameters
    ----------
    node : Node
        The node to serialize
    indent : int or None, default = None
        Indentation per level, as for ``json.dumps``

    Returns
    -------
    str
        JSON text including a ``schema_version`` field

    """
    data = {"schema_version": SCHEMA_VERSION, **tree_to_dict(node)}
    return _encode_json(data, indent)


def _deserialize_root(data: dict[str, Any]) -> Root:
    return Root(source_text=data.get("source_text", ""))


def _deserialize_text(data: dict[str, Any]) -> TextNode:
    return TextNode(content=data["content"])


def _deserialize_tag(data: dict[str, Any]) -> TagNode:
    name = data["name"]
    return TagNode(name=name, attributes=TagAttributes(name, data.get("attributes") or {}))


_DESERIALIZATION_DISPATCH: dict[str, Any] = {
    "Root": _deserialize_root,
    "Text": _deserialize_text,
    "Tag": _deserialize_tag,
}


def _node_from_fields(data: Any) -> Node:
    if not isinstance(data, dict):
        raise ValueError(f"Expected a node object, got {type(data).__name__}")
    node_type = data.get("node_type")
    deserializer = _DESERIALIZATION_DISPATCH.get(node_type)  # type: ignore[arg-type]
    if deserializer is None:
        raise ValueError(f"Unknown node type: {node_type!r}")
    return deserializer(data)


def dict_to_tree(data: dict[str, Any]) -> Node:
    """Reconstruct a parse tree node from its dictionary form.

    Raises
    ------
    ValueError
        If the data is not a mapping or names an unknown node type
    KeyError
        If a required field is missing

    """
    result = _node_from_fields(data)
    pending: list[tuple[dict[str, Any], Node]] = [(data, result)]

    while pending:
        current, node = pending.pop()
        if not isinstance(node, (Root, TagNode)):
            continue
        children = current.get("children", [])
        if not isinstance(children, list):
            raise ValueError(f"'children' must be a list, got {type(children).__name__}")
        for child_data in children:
            if child_data is None:
                node.children.append(None)
                continue
            child = _node_from_fields(child_data)
            node.children.append(child)
            pending.append((child_data, child))

    return result


_WHITESPACE = re.compile(r"[ \t\n\r]*")
_SCALAR_DECODER = json.JSONDecoder()


def _skip_whitespace(text: str, index: int) -> int:
    return _WHITESPACE.match(text, index).end()  # type: ignore[union-attr]


def _decode_key(text: str, index: int) -> tuple[str, int]:
    """Read ``"key":`` at ``index``; return the key and the index of its value."""
    if not text.startswith('"', index):
        raise json.JSONDecodeError("Expecting property name enclosed in double quotes", text, index)
    key, index = json.decoder.scanstring(text, index + 1)
    index = _skip_whitespace(text, index)
    if not text.startswith(":", index):
        raise json.JSONDecodeError("Expecting ':' delimiter", text, index)
    return key, _skip_whitespace(text, index + 1)


def _decode_json(text: str) -> Any:
    """Decode JSON text like ``json.loads`` with an explicit container stack."""
    containers: list[Any] = []
    keys: list[str] = []
    index = _skip_whitespace(text, 0)

    while True:
        char = text[index : index + 1]
        if char in ("{", "["):
            container: Any = {} if char == "{" else []
            closer = "}" if char == "{" else "]"
            index = _skip_whitespace(text, index + 1)
            if not text.startswith(closer, index):
                containers.append(container)
                if isinstance(container, dict):
                    key, index = _decode_key(text, index)
                    keys.append(key)
                continue
            value, index = container, index + 1
        else:
            value, index = _SCALAR_DECODER.raw_decode(text, index)

        # Attach the value, closing every container that ends after it
        while True:
            if not containers:
                index = _skip_whitespace(text, index)
                if index != len(text):
                    raise json.JSONDecodeError("Extra data", text, index)
                return value

            parent = containers[-1]
            if isinstance(parent, dict):
                parent[keys[-1]] = value
            else:
                parent.append(value)

            index = _skip_whitespace(text, index)
            char = text[index : index + 1]
            if char == ",":
                index = _skip_whitespace(text, index + 1)
                if isinstance(parent, dict):
                    keys[-1], index = _decode_key(text, index)
                break

            closer = "}" if isinstance(parent, dict) else "]"
            if char != closer:
                raise json.JSONDecodeError(f"Expecting ',' delimiter or {closer!r}", text, index)
            index += 1
            value = containers.pop()
            if isinstance(value, dict):
                keys.pop()


def json_to_tree(json_str: str) -> Node:
    """Deserialize a JSON string produced by :func:`tree_to_json`.

    Raises
    ------
    ValueError
        If the schema version is unsupported or the content is invalid
    json.JSONDecodeError
        If the JSON text is malformed

    """
    data = _decode_json(json_str)
    schema_version = data.pop("schema_version", SCHEMA_VERSION) if isinstance(data, dict) else SCHEMA_VERSION
    if schema_version != SCHEMA_VERSION:
        raise ValueError(f"Unsupported schema version: {schema_version}. Supported version: {SCHEMA_VERSION}")
    return dict_to_tree(data)


__all__ = [
    "tree_to_dict",
    "tree_to_json",
    "dict_to_tree",
    "json_to_tree",
]
