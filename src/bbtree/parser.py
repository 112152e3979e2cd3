#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/bbtree/parser.py
"""High-level BBCode parser.

``BBCodeParser`` ties the two parsing phases together: it loads the input
(string, path, bytes or stream), tokenizes it against a tag vocabulary and
builds the parse tree. The outcome is a ``ParseResult`` that carries the
normalized tokens and either the tree or the structural failure.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Optional, Union

from bbtree.ast.nodes import Root
from bbtree.exceptions import FileAccessError, FileNotFoundError, InvalidOptionsError, ParsingError
from bbtree.options.bbcode import BBCodeParserOptions
from bbtree.progress import ProgressCallback, ProgressEvent
from bbtree.tokenizer import Tokenizer
from bbtree.tokens import Token
from bbtree.treebuilder import BuildFailure, TreeBuilder
from bbtree.utils.encoding import normalize_stream_to_text, read_text_with_encoding_detection
from bbtree.vocabulary import TagVocabulary, default_vocabulary

logger = logging.getLogger(__name__)

InputData = Union[str, Path, IO[bytes], IO[str], bytes]


@dataclass(frozen=True)
class ParseResult:
    """Outcome of parsing one document.

    Parameters
    ----------
    source : str
        The decoded input text
    tokens : list of Token
        The normalized token stream
    tree : Root or None
        The parse tree when the document is structurally valid
    failure : BuildFailure or None
        The structural failure otherwise

    """

    source: str
    tokens: list[Token]
    tree: Optional[Root] = None
    failure: Optional[BuildFailure] = None

    @property
    def is_valid(self) -> bool:
        """True when a tree was built and every node in it is valid."""
        return self.tree is not None and self.tree.is_valid()

    def text_content(self) -> str:
        """Return the concatenated text of the tree, or "" on failure."""
        return self.tree.text_content() if self.tree is not None else ""

    def raise_for_failure(self) -> Root:
        """Return the tree, raising ``StructuralError`` if the build failed."""
        if self.failure is not None:
            self.failure.raise_error()
        if self.tree is None:
            raise ParsingError("Parse result holds neither a tree nor a failure", parsing_stage="tree")
        return self.tree


class BBCodeParser:
    """Parse BBCode documents into trees.

    Parameters
    ----------
    vocabulary : TagVocabulary, optional
        Recognized tags, defaults to ``default_vocabulary()``
    options : BBCodeParserOptions, optional
        Parser configuration
    progress_callback : ProgressCallback, optional
        Receives ``ProgressEvent`` objects while parsing

    Raises
    ------
    InvalidOptionsError
        If ``options`` is not a ``BBCodeParserOptions``

    Examples
    --------
        >>> result = BBCodeParser().parse("[b]bold[/b]")
        >>> result.is_valid, result.text_content()
        (True, 'bold')

    """

    def __init__(
        self,
        vocabulary: TagVocabulary | None = None,
        options: BBCodeParserOptions | None = None,
        progress_callback: Optional[ProgressCallback] = None,
    ):
        """Initialize the parser with a vocabulary and options."""
        self._validate_options_type(options, BBCodeParserOptions, "bbcode")
        if vocabulary is not None and not isinstance(vocabulary, TagVocabulary):
            raise InvalidOptionsError(
                "bbcode",
                TagVocabulary,
                type(vocabulary),
                message=f"vocabulary must be a TagVocabulary, got {type(vocabulary).__name__}",
            )
        self.options: BBCodeParserOptions = options or BBCodeParserOptions()
        self.vocabulary = vocabulary if vocabulary is not None else default_vocabulary()
        self.progress_callback = progress_callback
        self.tokenizer = Tokenizer(self.vocabulary, enforce_allowed_attributes=self.options.enforce_allowed_attributes)
        self.tree_builder = TreeBuilder(max_depth=self.options.max_nesting_depth)

    @staticmethod
    def _validate_options_type(options: object, expected_type: type, parser_name: str) -> None:
        if options is not None and not isinstance(options, expected_type):
            raise InvalidOptionsError(parser_name, expected_type, type(options))

    def parse(self, input_data: InputData) -> ParseResult:
        """Parse a BBCode document.

        Parameters
        ----------
        input_data : str, Path, bytes, or file-like
            BBCode input. Strings are always parsed as BBCode; pass a
            ``Path`` to read a file. Bytes are decoded with encoding
            detection.

        Returns
        -------
        ParseResult
            Normalized tokens plus the tree or the structural failure

        Raises
        ------
        StructuralError
            If ``strict_mode`` is set and the document is structurally invalid
        FileNotFoundError
            If a ``Path`` input does not exist
        FileAccessError
            If a file input cannot be read

        """
        self._emit_progress("started", "Parsing BBCode", current=0, total=2)

        source = self._load_text_content(input_data)
        tokens = self.tokenizer.tokenize(source)
        self._emit_progress(
            "item_done", "Tokenized BBCode", current=1, total=2, item_type="tokenization", token_count=len(tokens)
        )

        result = self.tree_builder.build(tokens, source_text=source)
        if isinstance(result, BuildFailure):
            logger.info(f"BBCode document is structurally invalid: {result.message}")
            self._emit_progress(
                "error",
                result.message,
                current=2,
                total=2,
                reason=result.reason.value,
                tag_name=result.tag_name,
                token_index=result.token_index,
            )
            if self.options.strict_mode:
                result.raise_error()
            parsed = ParseResult(source=source, tokens=tokens, failure=result)
        else:
            self._emit_progress("item_done", "Built parse tree", current=2, total=2, item_type="tree")
            parsed = ParseResult(source=source, tokens=tokens, tree=result.tree)

        self._emit_progress("finished", "Parsing complete", current=2, total=2, is_valid=parsed.is_valid)
        return parsed

    def _emit_progress(self, event_type: str, message: str, current: int = 0, total: int = 0, **metadata) -> None:
        """Send a progress event to the callback, if one is registered.

        Exceptions raised by the callback are logged and do not interrupt
        parsing.
        """
        if not self.progress_callback:
            return

        try:
            event = ProgressEvent(
                event_type=event_type,  # type: ignore[arg-type]
                message=message,
                current=current,
                total=total,
                metadata=metadata,
            )
            self.progress_callback(event)
        except Exception as e:
            logger.warning(f"Progress callback raised exception: {e}", exc_info=True)

    @staticmethod
    def _load_text_content(input_data: InputData) -> str:
        """Load BBCode text from any supported input type."""
        if isinstance(input_data, bytes):
            return read_text_with_encoding_detection(input_data)
        if isinstance(input_data, Path):
            return _read_file(input_data)
        if isinstance(input_data, str):
            return input_data
        return normalize_stream_to_text(input_data)


def _read_file(path: Path) -> str:
    if not path.exists():
        raise FileNotFoundError(str(path))
    try:
        data = path.read_bytes()
    except OSError as e:
        raise FileAccessError(str(path), f"Cannot read file {path}: {e}", original_error=e) from e
    return read_text_with_encoding_detection(data)
