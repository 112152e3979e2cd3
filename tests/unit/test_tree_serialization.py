#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for parse tree JSON serialization."""

import json

import pytest

import bbtree
from bbtree.ast import Root, TagNode, TextNode, dict_to_tree, json_to_tree, max_depth, tree_to_dict, tree_to_json, walk
from bbtree.ast.serialization import SCHEMA_VERSION


@pytest.mark.unit
class TestSerialization:
    """Tests for tree_to_dict and tree_to_json."""

    def test_tree_to_dict(self):
        """Test the dictionary layout of each node kind."""
        tree = Root("[b]x[/b]", [TagNode("b", children=[TextNode("x")])])

        assert tree_to_dict(tree) == {
            "node_type": "Root",
            "source_text": "[b]x[/b]",
            "children": [
                {
                    "node_type": "Tag",
                    "name": "b",
                    "attributes": {},
                    "children": [{"node_type": "Text", "content": "x"}],
                }
            ],
        }

    def test_json_includes_schema_version(self):
        """Test serialized JSON is versioned."""
        data = json.loads(tree_to_json(Root()))

        assert data["schema_version"] == SCHEMA_VERSION
        assert data["node_type"] == "Root"

    def test_non_ascii_kept(self):
        """Test non-ASCII text is written as-is."""
        assert "héllo" in tree_to_json(TextNode("héllo"))

    def test_missing_child_serialized_as_null(self):
        """Test None children are preserved as null."""
        assert tree_to_dict(Root(children=[None]))["children"] == [None]

    def test_round_trip(self):
        """Test JSON output reads back into an equal tree."""
        tree = Root(
            '[url="http://x.org"]x[/url]',
            [TagNode("url", {"url": "http://x.org", "title": "t"}, [TextNode("x")])],
        )
        restored = json_to_tree(tree_to_json(tree, indent=2))

        assert restored == tree
        assert restored.children[0].default_attribute == "http://x.org"


@pytest.mark.unit
class TestDeserialization:
    """Tests for invalid serialized input."""

    def test_unknown_node_type(self):
        """Test unknown node types are rejected."""
        with pytest.raises(ValueError, match="Unknown node type"):
            dict_to_tree({"node_type": "Paragraph"})

    def test_not_an_object(self):
        """Test non-object nodes are rejected."""
        with pytest.raises(ValueError):
            dict_to_tree(["Root"])  # type: ignore[arg-type]

    def test_unsupported_schema_version(self):
        """Test a future schema version is rejected."""
        with pytest.raises(ValueError, match="schema version"):
            json_to_tree(json.dumps({"schema_version": 99, "node_type": "Root", "children": []}))

    def test_children_must_be_list(self):
        """Test malformed children are rejected."""
        with pytest.raises(ValueError):
            dict_to_tree({"node_type": "Root", "children": "nope"})

    def test_missing_required_field(self):
        """Test a text node without content is rejected."""
        with pytest.raises(KeyError):
            dict_to_tree({"node_type": "Text"})


def _chain(depth):
    """Build Root > b > b > ... > Text("x") with ``depth`` tags."""
    root = Root("deep")
    parent = root
    for _ in range(depth):
        tag = TagNode("b")
        parent.children.append(tag)
        parent = tag
    parent.children.append(TextNode("x"))
    return root


@pytest.mark.unit
class TestDeepTrees:
    """Tests for trees nested deeper than the interpreter recursion limit."""

    DEPTH = 10_000

    def test_tree_to_dict(self):
        """Test dictionary conversion of a deep chain."""
        data = tree_to_dict(_chain(self.DEPTH))

        for _ in range(self.DEPTH):
            (data,) = data["children"]
            assert data["name"] == "b"
        assert data["children"] == [{"node_type": "Text", "content": "x"}]

    def test_dict_round_trip(self):
        """Test a deep dictionary reads back into the same chain."""
        restored = dict_to_tree(tree_to_dict(_chain(self.DEPTH)))

        assert max_depth(restored) == self.DEPTH + 1
        assert restored.text_content() == "x"
        assert restored.source_text == "deep"

    @pytest.mark.parametrize("indent", [None, 2])
    def test_json_round_trip(self, indent):
        """Test deep trees survive JSON encoding and decoding."""
        restored = json_to_tree(tree_to_json(_chain(self.DEPTH), indent=indent))

        assert max_depth(restored) == self.DEPTH + 1
        assert [n.name for n in walk(restored) if isinstance(n, TagNode)] == ["b"] * self.DEPTH

    def test_parsed_without_depth_limit(self):
        """Test a tree built with no depth limit can be serialized."""
        text = "[b]" * self.DEPTH + "x" + "[/b]" * self.DEPTH
        tree = bbtree.parse(text, max_nesting_depth=None).tree

        restored = json_to_tree(tree_to_json(tree))

        assert restored.text_content() == "x"
        assert restored.source_text == text


@pytest.mark.unit
class TestJsonText:
    """Tests for the JSON text format."""

    @pytest.mark.parametrize("indent", [None, 2, 4])
    def test_matches_json_dumps(self, indent):
        """Test the output is byte-identical to json.dumps."""
        tree = Root(
            '[url="http://x.org"]Ünïcode "q"[/url][b][/b]',
            [
                TagNode("url", {"url": "http://x.org"}, [TextNode('Ünïcode "q"')]),
                TagNode("b"),
                None,
            ],
        )
        expected = json.dumps(
            {"schema_version": SCHEMA_VERSION, **tree_to_dict(tree)}, indent=indent, ensure_ascii=False
        )

        assert tree_to_json(tree, indent=indent) == expected

    def test_reads_json_dumps_output(self):
        """Test JSON written by other tools is accepted, whitespace included."""
        text = '\n { "node_type" : "Root",\t"children" : [ {"node_type": "Text", "content": "a\\u00e9"}, null ] }\n'

        assert json_to_tree(text) == Root(children=[TextNode("aé"), None])

    @pytest.mark.parametrize(
        "text",
        [
            "",
            '{"node_type": "Root"',
            '{"node_type": "Root",}',
            '{"node_type" "Root"}',
            '{node_type: "Root"}',
            '{"node_type": "Root"} extra',
            '{"node_type": "Root", "children": [1 2]}',
        ],
    )
    def test_malformed_json(self, text):
        """Test malformed JSON raises JSONDecodeError."""
        with pytest.raises(json.JSONDecodeError):
            json_to_tree(text)
