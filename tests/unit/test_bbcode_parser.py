#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for the BBCode parser facade and module-level helpers."""

import io
import logging

import pytest

import bbtree
from bbtree import BBCodeParser, ParseResult
from bbtree.ast import Root, TagNode, TextNode, find_tags
from bbtree.exceptions import FileNotFoundError, InvalidOptionsError, ParsingError, StructuralError, ValidationError
from bbtree.options import BBCodeParserOptions
from bbtree.tokens import end_tag_token, start_tag_token, text_token
from bbtree.treebuilder import BuildFailure, BuildSuccess, FailureReason


@pytest.mark.unit
class TestBBCodeParser:
    """Tests for BBCodeParser."""

    def test_simple_document(self):
        """Test [b]bold[/b] parses into a tag with a text child."""
        result = BBCodeParser().parse("[b]bold[/b]")

        assert isinstance(result, ParseResult)
        assert result.is_valid
        assert result.failure is None
        assert result.tree == Root("[b]bold[/b]", [TagNode("b", children=[TextNode("bold")])])
        assert result.tokens == [start_tag_token("b"), text_token("bold"), end_tag_token("b")]

    def test_plain_text(self):
        """Test text without markup."""
        result = BBCodeParser().parse("Hello world")

        assert result.is_valid
        assert result.text_content() == "Hello world"

    def test_empty_document(self):
        """Test empty input is a valid empty tree."""
        result = BBCodeParser().parse("")

        assert result.is_valid
        assert result.tree.children == []

    def test_mismatched_document(self, bi_vocab):
        """Test [b]bold[/i] is structurally invalid."""
        result = BBCodeParser(vocabulary=bi_vocab).parse("[b]bold[/i]")

        assert not result.is_valid
        assert result.tree is None
        assert result.failure.reason is FailureReason.MISMATCHED_END_TAG
        assert result.text_content() == ""

    def test_unrecognized_tags_are_text(self):
        """Test tags outside the vocabulary survive as literal text."""
        result = BBCodeParser().parse("[foo]x[/foo]")

        assert result.is_valid
        assert result.text_content() == "[foo]x[/foo]"
        assert find_tags(result.tree, "foo") == []

    def test_no_nesting_content(self):
        """Test a code block keeps its markup as text."""
        result = BBCodeParser().parse("[code]a[b]b[/b]c[/code]")

        code = result.tree.children[0]
        assert code.name == "code"
        assert code.children == [TextNode("a[b]b[/b]c")]

    def test_unclosed_no_nesting(self):
        """Test [code]abc fails with the code tag unclosed."""
        result = BBCodeParser().parse("[code]abc")

        assert result.tokens == [start_tag_token("code"), text_token("abc")]
        assert result.failure.reason is FailureReason.UNCLOSED_TAG
        assert result.failure.tag_name == "code"

    def test_attributes(self):
        """Test attributes reach the tree."""
        result = BBCodeParser().parse('[url="http://example.com"]site[/url] [size=2]small[/size]')

        url, _, size = result.tree.children
        assert url.default_attribute == "http://example.com"
        assert size.attributes == {"size": "2"}

    def test_enforce_allowed_attributes(self):
        """Test undeclared attributes are dropped when enforcement is on."""
        options = BBCodeParserOptions(enforce_allowed_attributes=True)
        result = BBCodeParser(options=options).parse('[img width="5" onclick="x"]pic.png[/img]')

        assert result.tree.children[0].attributes == {"width": "5"}

    def test_strict_mode_raises(self, bi_vocab):
        """Test strict mode turns failures into exceptions."""
        parser = BBCodeParser(vocabulary=bi_vocab, options=BBCodeParserOptions(strict_mode=True))

        with pytest.raises(StructuralError) as exc_info:
            parser.parse("[b]bold[/i]")

        assert exc_info.value.failure.tag_name == "i"

    def test_strict_mode_valid_document(self):
        """Test strict mode has no effect on valid input."""
        parser = BBCodeParser(options=BBCodeParserOptions(strict_mode=True))

        assert parser.parse("[b]x[/b]").is_valid

    def test_max_nesting_depth(self):
        """Test the configured depth limit is applied."""
        parser = BBCodeParser(options=BBCodeParserOptions(max_nesting_depth=2))
        result = parser.parse("[b][i][u]x[/u][/i][/b]")

        assert result.failure.reason is FailureReason.MAX_DEPTH_EXCEEDED
        assert result.failure.tag_name == "u"

    def test_raise_for_failure(self, bi_vocab):
        """Test raising from a failed result and returning a good tree."""
        parser = BBCodeParser(vocabulary=bi_vocab)

        assert parser.parse("[b]x[/b]").raise_for_failure().children[0].name == "b"
        with pytest.raises(StructuralError):
            parser.parse("[b]x").raise_for_failure()

    def test_raise_for_failure_without_tree_or_failure(self):
        """Test an empty result raises instead of returning None."""
        with pytest.raises(ParsingError, match="neither a tree nor a failure"):
            ParseResult(source="", tokens=[]).raise_for_failure()

    def test_wrong_options_type(self):
        """Test passing the wrong options class fails early."""
        with pytest.raises(InvalidOptionsError):
            BBCodeParser(options={"strict_mode": True})  # type: ignore[arg-type]

    def test_wrong_vocabulary_type(self):
        """Test plain dicts must be converted with TagVocabulary.from_mapping."""
        with pytest.raises(InvalidOptionsError):
            BBCodeParser(vocabulary={"b": {}})  # type: ignore[arg-type]

    def test_parser_is_reusable(self, code_vocab):
        """Test no state leaks between parses."""
        parser = BBCodeParser(vocabulary=code_vocab)

        assert not parser.parse("[code]open").is_valid
        assert parser.parse("[b]x[/b]").is_valid

    def test_failure_logged_at_info(self, bi_vocab, caplog):
        """Test structural failures are logged by the facade."""
        with caplog.at_level(logging.INFO, logger="bbtree.parser"):
            BBCodeParser(vocabulary=bi_vocab).parse("[b]x[/i]")

        assert any("structurally invalid" in r.getMessage() for r in caplog.records)


@pytest.mark.unit
class TestInputTypes:
    """Tests for the supported input kinds."""

    def test_bytes(self):
        """Test byte input is decoded."""
        result = BBCodeParser().parse("[b]Grüße aus München[/b]".encode("utf-8"))

        assert result.text_content() == "Grüße aus München"

    def test_binary_stream(self):
        """Test binary file-like input."""
        result = BBCodeParser().parse(io.BytesIO(b"[i]x[/i]"))

        assert result.tree.children[0].name == "i"

    def test_text_stream(self):
        """Test text file-like input."""
        assert BBCodeParser().parse(io.StringIO("[u]x[/u]")).is_valid

    def test_path(self, tmp_path):
        """Test Path input is read from disk."""
        path = tmp_path / "post.bbcode"
        path.write_text("[s]gone[/s]", encoding="utf-8")

        result = BBCodeParser().parse(path)

        assert result.source == "[s]gone[/s]"
        assert result.is_valid

    def test_str_naming_a_file_is_markup(self, tmp_path, monkeypatch):
        """Test a string is parsed as markup even when a file of that name exists."""
        (tmp_path / "notes").write_text("[b]file contents[/b]", encoding="utf-8")
        monkeypatch.chdir(tmp_path)

        result = bbtree.parse("notes")

        assert result.source == "notes"
        assert result.text_content() == "notes"

    def test_str_absolute_path_is_markup(self, tmp_path):
        """Test an absolute path string is not read from disk."""
        path = tmp_path / "post.bbcode"
        path.write_text("[b]from file[/b]", encoding="utf-8")

        result = BBCodeParser().parse(str(path))

        assert result.source == str(path)
        assert find_tags(result.tree, "b") == []

    def test_str_that_is_not_a_file(self):
        """Test ordinary strings are parsed as markup."""
        assert BBCodeParser().parse("no/such/file.bbcode").text_content() == "no/such/file.bbcode"

    def test_str_with_null_byte(self):
        """Test strings that cannot be paths are parsed as markup."""
        assert BBCodeParser().parse("a\x00b").text_content() == "a\x00b"

    def test_missing_path(self, tmp_path):
        """Test a missing Path raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            BBCodeParser().parse(tmp_path / "missing.bbcode")


@pytest.mark.unit
class TestProgressEvents:
    """Tests for progress callbacks."""

    def test_valid_document_events(self):
        """Test the event sequence for a valid document."""
        events = []
        BBCodeParser(progress_callback=events.append).parse("[b]x[/b]")

        assert [e.event_type for e in events] == ["started", "item_done", "item_done", "finished"]
        assert [e.metadata.get("item_type") for e in events[1:3]] == ["tokenization", "tree"]
        assert events[1].metadata["token_count"] == 3
        assert events[-1].metadata["is_valid"] is True

    def test_invalid_document_events(self, bi_vocab):
        """Test an error event carries the failure details."""
        events = []
        BBCodeParser(vocabulary=bi_vocab, progress_callback=events.append).parse("[b]x[/i]")

        assert [e.event_type for e in events] == ["started", "item_done", "error", "finished"]
        assert events[2].metadata["reason"] == "mismatched_end_tag"
        assert events[2].metadata["tag_name"] == "i"
        assert events[-1].metadata["is_valid"] is False

    def test_failing_callback_does_not_interrupt(self):
        """Test callback exceptions are logged, not raised."""

        def broken(event):
            raise RuntimeError("callback failed")

        assert BBCodeParser(progress_callback=broken).parse("[b]x[/b]").is_valid


@pytest.mark.unit
class TestModuleHelpers:
    """Tests for bbtree.tokenize, bbtree.build_tree and bbtree.parse."""

    def test_tokenize(self, code_vocab):
        """Test the tokenize helper."""
        assert bbtree.tokenize("[code][b][/code]", code_vocab) == [
            start_tag_token("code"),
            text_token("[b]"),
            end_tag_token("code"),
        ]

    def test_build_tree_success(self):
        """Test build_tree returns a BuildSuccess."""
        result = bbtree.build_tree("[b]x[/b]")

        assert isinstance(result, BuildSuccess)
        assert result.tree.source_text == "[b]x[/b]"

    def test_build_tree_failure(self, bi_vocab):
        """Test build_tree returns a BuildFailure instead of raising."""
        result = bbtree.build_tree("[b]x[/i]", bi_vocab, strict_mode=True)

        assert isinstance(result, BuildFailure)

    def test_build_tree_option_overrides(self):
        """Test keyword overrides for options."""
        deep = "[b]" * 300 + "[/b]" * 300

        assert not bbtree.build_tree(deep).ok
        assert bbtree.build_tree(deep, max_nesting_depth=None).ok

    def test_parse_option_overrides(self):
        """Test parse accepts option keywords."""
        with pytest.raises(StructuralError):
            bbtree.parse("[b]x", strict_mode=True)

    def test_unknown_option_rejected(self):
        """Test misspelled option names are reported."""
        with pytest.raises(ValidationError, match="max_depth"):
            bbtree.parse("x", max_depth=3)

    def test_version(self):
        """Test the package exposes a version string."""
        assert isinstance(bbtree.__version__, str)
