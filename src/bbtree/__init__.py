"""bbtree - A vocabulary-driven BBCode parser.

bbtree turns BBCode markup into a parse tree in two phases. The tokenizer
splits the input into text and tag tokens and normalizes them against a tag
vocabulary: unrecognized tags are demoted to literal text and the contents of
no-nesting tags such as ``[code]`` are absorbed verbatim. The tree builder then
nests the tokens, reporting unbalanced markup as a failure value instead of
raising.

Key Features
------------
- Configurable tag vocabulary, loadable from JSON, YAML or TOML
- Lossless tokenization: token source texts reconstruct the input exactly
- Iterative tree building with a nesting-depth limit
- Visitor-based tree traversal and JSON serialization
- Encoding detection for byte and file input
- ``bbtree`` command line tool

Requirements
------------
- Python 3.10+
- chardet, PyYAML, rich

Examples
--------
Parse a document:

    >>> from bbtree import parse
    >>> result = parse("[b]Hello[/b] world")
    >>> result.is_valid
    True
    >>> result.tree.children[0].name
    'b'

Unrecognized tags stay literal text:

    >>> parse("[foo]x[/foo]").text_content()
    '[foo]x[/foo]'

Use a custom vocabulary:

    >>> from bbtree import TagVocabulary
    >>> vocab = TagVocabulary.from_mapping({"b": {}, "i": {}})
    >>> parse("[b]bold[/i]", vocabulary=vocab).is_valid
    False

"""

from __future__ import annotations

from typing import Any

from bbtree.ast import Node, Root, TagNode, TextNode
from bbtree.config import find_config_in_parents, load_vocabulary, resolve_vocabulary
from bbtree.exceptions import (
    BBTreeError,
    ConfigFormatError,
    FileAccessError,
    FileError,
    FileNotFoundError,
    InvalidOptionsError,
    ParsingError,
    StructuralError,
    ValidationError,
    VocabularyError,
)
from bbtree.options import BBCodeParserOptions
from bbtree.parser import BBCodeParser, InputData, ParseResult
from bbtree.progress import ProgressCallback, ProgressEvent
from bbtree.tokenizer import Tokenizer
from bbtree.tokens import TagAttributes, Token, TokenType
from bbtree.treebuilder import BuildFailure, BuildResult, BuildSuccess, FailureReason, TreeBuilder
from bbtree.vocabulary import BBTag, TagVocabulary, default_vocabulary

__version__ = "1.0.0"


def _make_options(options: BBCodeParserOptions | None, kwargs: dict[str, Any]) -> BBCodeParserOptions:
    """Merge keyword overrides into an options object."""
    base = options or BBCodeParserOptions()
    if not kwargs:
        return base
    unknown = set(kwargs) - set(BBCodeParserOptions.field_names())
    if unknown:
        raise ValidationError(
            f"Unknown parser option(s): {', '.join(sorted(unknown))}",
            parameter_name="options",
            parameter_value=sorted(unknown),
        )
    return base.create_updated(**kwargs)


def tokenize(text: str, vocabulary: TagVocabulary | None = None) -> list[Token]:
    """Lex and normalize ``text`` against ``vocabulary``.

    Parameters
    ----------
    text : str
        BBCode markup
    vocabulary : TagVocabulary, optional
        Recognized tags, defaults to ``default_vocabulary()``

    Returns
    -------
    list of Token
        Normalized tokens whose source texts concatenate back to ``text``

    """
    return Tokenizer(vocabulary).tokenize(text)


def build_tree(
    text: str,
    vocabulary: TagVocabulary | None = None,
    options: BBCodeParserOptions | None = None,
    **kwargs: Any,
) -> BuildResult:
    """Tokenize ``text`` and build its parse tree.

    Keyword arguments override fields of ``options`` (for example
    ``max_nesting_depth=None``). ``strict_mode`` has no effect here; call
    ``raise_error()`` on a failure to raise it.

    Returns
    -------
    BuildSuccess or BuildFailure

    """
    opts = _make_options(options, kwargs)
    tokens = Tokenizer(vocabulary, enforce_allowed_attributes=opts.enforce_allowed_attributes).tokenize(text)
    return TreeBuilder(max_depth=opts.max_nesting_depth).build(tokens, source_text=text)


def parse(
    input_data: InputData,
    vocabulary: TagVocabulary | None = None,
    options: BBCodeParserOptions | None = None,
    progress_callback: ProgressCallback | None = None,
    **kwargs: Any,
) -> ParseResult:
    """Parse BBCode from a string, ``Path``, bytes or stream.

    A ``str`` is always the markup itself, never a file name. Keyword
    arguments override fields of ``options``.

    Raises
    ------
    StructuralError
        If ``strict_mode`` is enabled and the document is structurally invalid

    """
    opts = _make_options(options, kwargs)
    return BBCodeParser(vocabulary=vocabulary, options=opts, progress_callback=progress_callback).parse(input_data)


__all__ = [
    "__version__",
    # Entry points
    "parse",
    "tokenize",
    "build_tree",
    "BBCodeParser",
    "ParseResult",
    "InputData",
    # Vocabulary
    "BBTag",
    "TagVocabulary",
    "default_vocabulary",
    "load_vocabulary",
    "resolve_vocabulary",
    "find_config_in_parents",
    # Tokens
    "Token",
    "TokenType",
    "TagAttributes",
    "Tokenizer",
    # Trees
    "Node",
    "Root",
    "TagNode",
    "TextNode",
    "TreeBuilder",
    "BuildResult",
    "BuildSuccess",
    "BuildFailure",
    "FailureReason",
    # Options and progress
    "BBCodeParserOptions",
    "ProgressEvent",
    "ProgressCallback",
    # Exceptions
    "BBTreeError",
    "ValidationError",
    "InvalidOptionsError",
    "VocabularyError",
    "FileError",
    "FileNotFoundError",
    "FileAccessError",
    "ConfigFormatError",
    "ParsingError",
    "StructuralError",
]
