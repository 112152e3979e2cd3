#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/bbtree/tokenizer.py
"""BBCode tokenizer.

Tokenizing happens in two passes:

1. **Lexing** scans the raw text with a single tag pattern and produces TEXT,
   START_TAG and END_TAG tokens. Lexing does not look at the vocabulary, so
   any well-formed ``[name]`` is reported as a tag.
2. **Normalization** walks the lexed tokens against a ``TagVocabulary``:
   unrecognized tags are demoted back to literal text, and everything between
   a no-nesting start tag (e.g. ``[code]``) and its matching end tag is
   collapsed into one TEXT token.

After normalization every tag token names a vocabulary tag, and no tag token
appears inside a no-nesting tag body.

Examples
--------
    >>> from bbtree.vocabulary import TagVocabulary
    >>> vocab = TagVocabulary.from_mapping({"b": {}, "code": {"no_nesting": True}})
    >>> [str(t) for t in Tokenizer(vocab).tokenize("[code]a[b]x[/b][/code]")]
    ['code (START_TAG)', 'a[b]x[/b] (TEXT)', 'code (END_TAG)']

"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Callable, Optional

from bbtree.constants import ATTRIBUTE_NAME_CHARS, ATTRIBUTE_VALUE_CHARS, BARE_VALUE_CHARS, TAG_NAME_PATTERN
from bbtree.tokens import TagAttributes, Token, TokenType, end_tag_token, text_token
from bbtree.vocabulary import TagVocabulary, default_vocabulary

logger = logging.getLogger(__name__)

# [/name] | [name] | [name="value"] | [name=value] | [name attr="value" ...]
TAG_PATTERN = re.compile(
    rf"\[/(?P<end>{TAG_NAME_PATTERN})\]"
    rf"|\[(?P<start>{TAG_NAME_PATTERN})"
    rf"(?:=(?:\"(?P<quoted>{ATTRIBUTE_VALUE_CHARS}*)\"|(?P<bare>{BARE_VALUE_CHARS}+)))?"
    rf"(?P<attrs>(?: {ATTRIBUTE_NAME_CHARS}*=\"{ATTRIBUTE_VALUE_CHARS}+\")*)\]"
)

# name="value" pairs inside a start tag; a missing name marks the default attribute
ATTRIBUTE_PATTERN = re.compile(rf"({ATTRIBUTE_NAME_CHARS}+)?=\"({ATTRIBUTE_VALUE_CHARS}+)\"")


def lex(text: str) -> list[Token]:
    """Split ``text`` into raw TEXT, START_TAG and END_TAG tokens.

    Literal runs between tags become TEXT tokens; empty runs are skipped.
    The vocabulary is not consulted.

    Parameters
    ----------
    text : str
        BBCode source

    Returns
    -------
    list of Token
        Tokens in document order

    """
    tokens: list[Token] = []
    last_end = 0

    for match in TAG_PATTERN.finditer(text):
        if match.start() > last_end:
            tokens.append(text_token(text[last_end : match.start()]))
        tokens.append(_tag_token(match))
        last_end = match.end()

    if last_end < len(text):
        tokens.append(text_token(text[last_end:]))

    return tokens


def _tag_token(match: re.Match[str]) -> Token:
    """Create a START_TAG or END_TAG token from a ``TAG_PATTERN`` match."""
    end_name = match.group("end")
    if end_name is not None:
        return end_tag_token(end_name)

    name = match.group("start")
    default = match.group("quoted") or match.group("bare")
    return Token(
        TokenType.START_TAG,
        name,
        attributes=parse_attributes(name, match.group("attrs"), default=default),
        raw_text=match.group(0),
    )


def parse_attributes(tag_name: str, attribute_text: str, default: str | None = None) -> TagAttributes:
    """Extract ``name="value"`` pairs from the body of a start tag.

    Parameters
    ----------
    tag_name : str
        Name of the tag; unnamed values are stored under this key
    attribute_text : str
        Space-separated pairs following the tag name, e.g. `` width="10"``
    default : str or None, default = None
        Value written directly after the tag name (``[size="2"]``)

    Returns
    -------
    TagAttributes
        The extracted attributes. Later pairs overwrite earlier ones.

    """
    pairs: list[tuple[str, str]] = []
    if default:
        pairs.append((tag_name, default))
    pairs.extend((name or tag_name, value) for name, value in ATTRIBUTE_PATTERN.findall(attribute_text))
    return TagAttributes(tag_name, pairs)


@dataclass
class _NormalizerState:
    """Per-call state of the normalization pass.

    ``absorbing`` is the name of the open no-nesting tag, or None in the
    normal state.
    """

    absorbing: Optional[str] = None
    buffer: list[str] = field(default_factory=list)

    def enter(self, tag_name: str) -> None:
        self.absorbing = tag_name
        self.buffer = []

    def flush(self) -> Token:
        token = text_token("".join(self.buffer))
        self.absorbing = None
        self.buffer = []
        return token


class Tokenizer:
    """Tokenize BBCode against a tag vocabulary.

    The tokenizer holds only its immutable configuration; all per-call state
    lives in local variables, so one instance can serve concurrent callers.

    Parameters
    ----------
    vocabulary : TagVocabulary or None, default = None
        Recognized tags. Defaults to :func:`default_vocabulary`.
    enforce_allowed_attributes : bool, default = False
        Drop attributes a recognized tag does not declare. When False,
        undeclared attributes are kept as opaque key/value pairs.

    """

    def __init__(self, vocabulary: TagVocabulary | None = None, enforce_allowed_attributes: bool = False):
        """Initialize the tokenizer with a vocabulary."""
        self.vocabulary = vocabulary if vocabulary is not None else default_vocabulary()
        self.enforce_allowed_attributes = enforce_allowed_attributes

    def tokenize(self, text: str) -> list[Token]:
        """Lex and normalize ``text``."""
        return self.normalize(self.lex(text))

    def lex(self, text: str) -> list[Token]:
        """Split ``text`` into raw tokens. See :func:`lex`."""
        return lex(text)

    def normalize(self, tokens: list[Token]) -> list[Token]:
        """Reconcile raw tokens with the vocabulary.

        Parameters
        ----------
        tokens : list of Token
            Output of :meth:`lex`

        Returns
        -------
        list of Token
            Tokens in which every tag is a vocabulary tag and no-nesting tag
            bodies are single TEXT tokens

        Notes
        -----
        A no-nesting tag whose end tag never appears absorbs the rest of the
        input; the collected text is flushed as one TEXT token at the end of
        the stream. The tree builder then reports the tag as unclosed.

        """
        result: list[Token] = []
        state = _NormalizerState()

        for token in tokens:
            if state.absorbing is not None:
                if token.token_type is TokenType.END_TAG and token.content == state.absorbing:
                    result.append(state.flush())
                    result.append(token)
                else:
                    state.buffer.append(token.source_text)
                continue

            if token.token_type is TokenType.TEXT:
                result.append(token)
                continue

            tag = self.vocabulary.get(token.content)
            if tag is None:
                logger.debug(f"Unrecognized tag {token.source_text!r} demoted to text")
                result.append(token.as_text())
                continue

            if token.token_type is TokenType.START_TAG:
                if self.enforce_allowed_attributes:
                    token = self._restrict_attributes(token, tag.allows_attribute)
                if tag.no_nesting:
                    state.enter(tag.name)

            result.append(token)

        if state.absorbing is not None:
            logger.debug(f"No-nesting tag [{state.absorbing}] was never closed; absorbed the rest of the input")
            result.append(state.flush())

        return result

    @staticmethod
    def _restrict_attributes(token: Token, allows: Callable[[str], bool]) -> Token:
        attributes = token.attributes
        if attributes is None:
            return token
        kept = [key for key in attributes if allows(key)]
        if len(kept) == len(attributes):
            return token
        dropped = sorted(set(attributes) - set(kept))
        logger.debug(f"Dropping undeclared attributes {dropped} from [{token.content}]")
        return Token(
            TokenType.START_TAG,
            token.content,
            attributes=attributes.filtered(kept),
            raw_text=token.raw_text,
        )
