#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for tree traversal helpers and the outline formatter."""

import pytest

from bbtree.ast import Root, TagNode, TextNode, TreeFormatter, find_tags, max_depth, text_nodes, walk, walk_with_depth


@pytest.fixture
def sample_tree():
    return Root(
        "[b]x[i]y[/i][/b]z",
        [
            TagNode("b", children=[TextNode("x"), TagNode("i", children=[TextNode("y")])]),
            TextNode("z"),
        ],
    )


@pytest.mark.unit
class TestWalk:
    """Tests for depth-first traversal."""

    def test_preorder(self, sample_tree):
        """Test nodes are yielded parent first, in document order."""
        labels = [str(node) for node in walk(sample_tree)]

        assert labels == ["Root - [b]x[i]y[/i][/b]z", "Tag - b", "Text - x", "Tag - i", "Text - y", "Text - z"]

    def test_depths(self, sample_tree):
        """Test depths relative to the start node."""
        depths = [depth for _, depth in walk_with_depth(sample_tree)]

        assert depths == [0, 1, 2, 2, 3, 1]

    def test_skips_missing_children(self):
        """Test None children are not yielded."""
        tree = Root(children=[None, TextNode("a")])

        assert [type(n).__name__ for n in walk(tree)] == ["Root", "TextNode"]

    def test_find_tags(self, sample_tree):
        """Test finding tag nodes by name."""
        assert [n.name for n in find_tags(sample_tree, "i")] == ["i"]
        assert find_tags(sample_tree, "u") == []

    def test_text_nodes(self, sample_tree):
        """Test collecting text nodes in order."""
        assert [n.content for n in text_nodes(sample_tree)] == ["x", "y", "z"]

    def test_max_depth(self, sample_tree):
        """Test the depth of the deepest node."""
        assert max_depth(sample_tree) == 3
        assert max_depth(TextNode("x")) == 0


@pytest.mark.unit
class TestTreeFormatter:
    """Tests for the indented outline formatter."""

    def test_outline(self, sample_tree):
        """Test the default outline."""
        expected = "\n".join(
            [
                "Root",
                "  Tag b",
                "    Text 'x'",
                "    Tag i",
                "      Text 'y'",
                "  Text 'z'",
            ]
        )

        assert TreeFormatter().format(sample_tree) == expected

    def test_attributes_shown(self):
        """Test tag attributes appear on the tag line."""
        tree = Root(children=[TagNode("url", {"url": "http://x.org"})])

        assert TreeFormatter().format(tree).splitlines()[1] == "  Tag url {'url': 'http://x.org'}"

    def test_attributes_hidden(self):
        """Test attributes can be left out."""
        tree = Root(children=[TagNode("url", {"url": "http://x.org"})])

        assert TreeFormatter(indent="\t", show_attributes=False).format(tree) == "Root\n\tTag url"
